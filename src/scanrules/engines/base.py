# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Engine capability contract and the shared gating behaviour."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from pathlib import PurePath
from typing import ClassVar, Protocol, TypeAlias, runtime_checkable

from ..constants import CustomConfig
from ..events import DEFAULT_SINK, Channel, NotificationSink
from ..models import Rule, RuleGroup, RuleResult, RuleTarget
from .stderr import ErrorTemplate, simplify_stderr

EngineOptions: TypeAlias = Mapping[str, str]

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class Engine(Protocol):
    """Capabilities the catalog and orchestration code rely on.

    Callers dispatch only through these members and never inspect the
    concrete engine type.
    """

    name: str
    rule_file_extensions: tuple[str, ...]

    def matches_path(self, path: str) -> bool:
        """Return ``True`` when this engine owns the rule file at ``path``."""
        ...

    def should_run(
        self,
        rule_groups: Sequence[RuleGroup],
        rules: Sequence[Rule],
        targets: Sequence[RuleTarget],
        engine_options: EngineOptions,
    ) -> bool:
        """Return ``True`` when the engine has work to do for this invocation."""
        ...

    def is_requested(self, requested_engine_names: Sequence[str], engine_options: EngineOptions) -> bool:
        """Return ``True`` when the caller's engine filter selects this engine."""
        ...

    def process_stdout(self, raw: str) -> list[RuleResult]:
        """Parse raw stdout into result groups without raising."""
        ...

    def process_stderr(self, raw: str) -> str:
        """Return a simplified version of raw stderr without raising."""
        ...


class AbstractRuleEngine(ABC):
    """Implement path ownership, run gating, and stderr simplification once.

    Subclasses declare ``name``, the ``custom_config_key`` that overrides their
    default rule execution, the rule file extensions they own, and an ordered
    table of stderr templates. Only :meth:`process_stdout` is mandatory.
    """

    name: ClassVar[str]
    custom_config_key: ClassVar[CustomConfig | None] = None
    rule_file_extensions: ClassVar[tuple[str, ...]] = ()
    stderr_templates: ClassVar[tuple[ErrorTemplate, ...]] = ()

    def __init__(self, *, sink: NotificationSink | None = None) -> None:
        self.sink = sink if sink is not None else DEFAULT_SINK

    def matches_path(self, path: str) -> bool:
        """Return ``True`` when ``path`` carries one of the owned extensions."""

        suffix = PurePath(path).suffix.lower()
        return bool(suffix) and suffix in self.rule_file_extensions

    def has_custom_config(self, engine_options: EngineOptions) -> bool:
        """Return ``True`` when ``engine_options`` overrides this engine's configuration."""

        key = self.custom_config_key
        return key is not None and key.value in engine_options

    def should_run(
        self,
        rule_groups: Sequence[RuleGroup],
        rules: Sequence[Rule],
        targets: Sequence[RuleTarget],
        engine_options: EngineOptions,
    ) -> bool:
        """Decide whether the default rule execution should happen.

        A custom configuration for this engine replaces the default rules, so
        the engine must not run a second time with the default rule set.

        Args:
            rule_groups: Rule groups selected for this engine.
            rules: Rules selected for this engine.
            targets: Targets selected for the invocation.
            engine_options: Engine options supplied by the caller.

        Returns:
            bool: ``True`` when at least one rule group applies and no custom configuration is present.
        """

        del rules, targets
        if not rule_groups:
            LOGGER.debug("%s skipped: no applicable rule groups", self.name)
            return False
        if self.has_custom_config(engine_options):
            LOGGER.debug("%s skipped: custom configuration supplied", self.name)
            return False
        return True

    def is_requested(self, requested_engine_names: Sequence[str], engine_options: EngineOptions) -> bool:
        """Decide whether the caller's engine filter selects this engine.

        An explicit custom configuration always selects the engine. Otherwise
        an empty filter selects every engine and a non-empty filter must name
        this engine exactly; prefixes such as ``pmd-custom`` do not select
        ``pmd``.

        Args:
            requested_engine_names: Engine names supplied by the caller.
            engine_options: Engine options supplied by the caller.

        Returns:
            bool: ``True`` when the engine is wanted for this invocation.
        """

        if self.has_custom_config(engine_options):
            return True
        if not requested_engine_names:
            return True
        return self.name in requested_engine_names

    @abstractmethod
    def process_stdout(self, raw: str) -> list[RuleResult]:
        """Parse raw stdout into result groups without raising."""

    def process_stderr(self, raw: str) -> str:
        """Return the first matching template message, or ``raw`` unchanged."""

        return simplify_stderr(raw, self.stderr_templates)

    def notify(self, channel: Channel, message: str) -> None:
        """Publish a non-violation notification about this engine's run."""

        self.sink.emit(channel, message)


__all__ = [
    "AbstractRuleEngine",
    "Engine",
    "EngineOptions",
]
