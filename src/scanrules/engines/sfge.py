# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Graph engine (sfge): method-level dataflow findings."""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import ClassVar, Final

from ..config import SfgeSettings
from ..constants import (
    SFGE_DISABLE_WARNING_VIOLATION_ENV,
    SFGE_PATH_EXPANSION_LIMIT_ENV,
    SFGE_THREAD_COUNT_ENV,
    SFGE_THREAD_TIMEOUT_ENV,
    CustomConfig,
    EngineName,
)
from ..events import Channel, NotificationSink
from ..models import Rule, RuleGroup, RuleResult, RuleTarget, Violation
from ..serialization import coerce_optional_int, coerce_optional_str, iter_dicts, load_json
from .base import AbstractRuleEngine, EngineOptions
from .stderr import ErrorTemplate

VIOLATIONS_START: Final[str] = "VIOLATIONS_START"
VIOLATIONS_END: Final[str] = "VIOLATIONS_END"
WARNING_PREFIX: Final[str] = "SfgeWarning:"
_DEFAULT_SEVERITY: Final[int] = 2

SFGE_ERROR_TEMPLATES: Final[tuple[ErrorTemplate, ...]] = (
    ErrorTemplate(
        name="entrypoint-timeout",
        pattern=re.compile(r"Exceeded time limit of (?P<timeout>\d+) ?ms while evaluating (?P<entrypoint>\S+)"),
        message=(
            "Graph Engine gave up on entrypoint {entrypoint} after {timeout} ms. "
            "Raise SFGE_RULE_THREAD_TIMEOUT to allow more time."
        ),
    ),
    ErrorTemplate(
        name="heap-exhausted",
        pattern=re.compile(r"java\.lang\.OutOfMemoryError"),
        message="Graph Engine ran out of memory. Increase the JVM heap size or lower SFGE_PATH_EXPANSION_LIMIT.",
    ),
)


class SfgeEngine(AbstractRuleEngine):
    """Normalise Graph Engine output.

    Violations arrive as a JSON array framed by ``VIOLATIONS_START`` and
    ``VIOLATIONS_END``; lines starting with ``SfgeWarning:`` are surfaced as
    verbose notifications.
    """

    name: ClassVar[str] = EngineName.SFGE.value
    custom_config_key: ClassVar[CustomConfig | None] = CustomConfig.SFGE_CONFIG
    stderr_templates: ClassVar[tuple[ErrorTemplate, ...]] = SFGE_ERROR_TEMPLATES

    def __init__(self, *, settings: SfgeSettings | None = None, sink: NotificationSink | None = None) -> None:
        super().__init__(sink=sink)
        self.settings = settings if settings is not None else SfgeSettings()

    def should_run(
        self,
        rule_groups: Sequence[RuleGroup],
        rules: Sequence[Rule],
        targets: Sequence[RuleTarget],
        engine_options: EngineOptions,
    ) -> bool:
        """Apply the shared gating and additionally require at least one target."""

        if not targets:
            return False
        return super().should_run(rule_groups, rules, targets, engine_options)

    def invocation_environment(self) -> dict[str, str]:
        """Return the environment variables forwarded to the Graph Engine process."""

        env = {
            SFGE_THREAD_COUNT_ENV: str(self.settings.rule_thread_count),
            SFGE_THREAD_TIMEOUT_ENV: str(self.settings.rule_thread_timeout_ms),
            SFGE_DISABLE_WARNING_VIOLATION_ENV: str(self.settings.disable_warning_violations).lower(),
        }
        if self.settings.path_expansion_limit is not None:
            env[SFGE_PATH_EXPANSION_LIMIT_ENV] = str(self.settings.path_expansion_limit)
        return env

    def process_stdout(self, raw: str) -> list[RuleResult]:
        """Parse framed Graph Engine violations and relay warning lines.

        Args:
            raw: Text the Graph Engine wrote to stdout.

        Returns:
            list[RuleResult]: Violations grouped by source file, in first-seen order.
        """

        for line in raw.splitlines():
            stripped = line.strip()
            if stripped.startswith(WARNING_PREFIX):
                self.notify(Channel.WARNING_VERBOSE, stripped[len(WARNING_PREFIX) :].strip())

        start = raw.find(VIOLATIONS_START)
        end = raw.find(VIOLATIONS_END, start + len(VIOLATIONS_START)) if start != -1 else -1
        if start == -1 or end == -1:
            return []
        payload = load_json(raw[start + len(VIOLATIONS_START) : end])

        grouped: dict[str, list[Violation]] = {}
        for item in iter_dicts(payload):
            file_name = coerce_optional_str(item.get("sourceFileName")) or ""
            severity = coerce_optional_int(item.get("severity"))
            grouped.setdefault(file_name, []).append(
                Violation(
                    rule_name=coerce_optional_str(item.get("ruleName")) or "",
                    message=(coerce_optional_str(item.get("message")) or "").strip(),
                    severity=severity if severity is not None else _DEFAULT_SEVERITY,
                    category=coerce_optional_str(item.get("category")) or "",
                    url=coerce_optional_str(item.get("url")),
                    line=coerce_optional_int(item.get("sourceLineNumber")),
                    column=coerce_optional_int(item.get("sourceColumnNumber")),
                    source_type=coerce_optional_str(item.get("sourceType")),
                    source_vertex_name=coerce_optional_str(item.get("sourceVertexName")),
                    sink_file_name=coerce_optional_str(item.get("sinkFileName")),
                    sink_line=coerce_optional_int(item.get("sinkLineNumber")),
                    sink_column=coerce_optional_int(item.get("sinkColumnNumber")),
                ),
            )
        return [
            RuleResult(engine=self.name, file_name=file_name, violations=tuple(violations))
            for file_name, violations in grouped.items()
        ]


__all__ = [
    "SFGE_ERROR_TEMPLATES",
    "SfgeEngine",
    "VIOLATIONS_END",
    "VIOLATIONS_START",
    "WARNING_PREFIX",
]
