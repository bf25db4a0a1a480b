# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""ESLint engine: JSON formatter output normalisation."""

from __future__ import annotations

from collections.abc import Sequence
from typing import ClassVar, Final

from ..constants import CustomConfig, EngineName
from ..events import Channel
from ..models import RuleResult, Violation
from ..serialization import coerce_optional_int, coerce_optional_str, iter_dicts, load_json
from .base import AbstractRuleEngine

_ESLINT_ERROR_LEVEL: Final[int] = 2
_ESLINT_WARNING_LEVEL: Final[int] = 1
_ESLINT_RULES_URL: Final[str] = "https://eslint.org/docs/latest/rules/{rule}"


class EslintEngine(AbstractRuleEngine):
    """Parse ESLint's ``--format json`` output into :class:`RuleResult` groups.

    ESLint rules ship as npm plugins rather than rule files, so the engine
    claims no custom rule paths.
    """

    name: ClassVar[str] = EngineName.ESLINT.value
    custom_config_key: ClassVar[CustomConfig | None] = CustomConfig.ESLINT_CONFIG

    def process_stdout(self, raw: str) -> list[RuleResult]:
        """Parse ESLint JSON diagnostics, skipping files without findings.

        Messages flagged ``fatal`` describe files ESLint could not parse; they
        are reported as notifications rather than violations.

        Args:
            raw: JSON document produced by ``eslint --format json``.

        Returns:
            list[RuleResult]: One group per file with at least one violation.
        """

        results: list[RuleResult] = []
        for entry in iter_dicts(load_json(raw)):
            path = coerce_optional_str(entry.get("filePath")) or coerce_optional_str(entry.get("filename")) or ""
            messages = entry.get("messages")
            if not isinstance(messages, Sequence):
                continue
            violations: list[Violation] = []
            for message in iter_dicts(messages):
                text = (coerce_optional_str(message.get("message")) or "").strip()
                if message.get("fatal") is True:
                    self.notify(Channel.WARNING_ALWAYS, f"ESLint failed to parse file '{path}'. Message: {text}")
                    continue
                severity_level = coerce_optional_int(message.get("severity"))
                if severity_level not in (_ESLINT_ERROR_LEVEL, _ESLINT_WARNING_LEVEL):
                    severity_level = _ESLINT_WARNING_LEVEL
                rule = coerce_optional_str(message.get("ruleId")) or ""
                violations.append(
                    Violation(
                        rule_name=rule,
                        message=text,
                        severity=severity_level,
                        url=_ESLINT_RULES_URL.format(rule=rule) if rule and "/" not in rule else None,
                        line=coerce_optional_int(message.get("line")),
                        column=coerce_optional_int(message.get("column")),
                        end_line=coerce_optional_int(message.get("endLine")),
                        end_column=coerce_optional_int(message.get("endColumn")),
                    ),
                )
            if violations:
                results.append(RuleResult(engine=self.name, file_name=path, violations=tuple(violations)))
        return results

    def process_stderr(self, raw: str) -> str:
        """Return ``raw`` without trailing whitespace."""

        return raw.rstrip()


__all__ = ["EslintEngine"]
