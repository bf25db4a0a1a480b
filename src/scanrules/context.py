# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Process-level wiring of settings, engines, notifications, and the catalog."""

from __future__ import annotations

from dataclasses import dataclass

from .catalog.manager import CustomRulePathManager
from .config import ScannerSettings, load_settings
from .engines.base import Engine
from .engines.builtins import initialize_registry
from .engines.registry import EngineRegistry
from .events import NotificationSink
from .filesystem import FileHandler


@dataclass(slots=True)
class ScannerContext:
    """Bundle the collaborators a scanner process shares.

    Build one with :meth:`create` at start-up and pass it to every consumer
    instead of reaching for module-level singletons.
    """

    settings: ScannerSettings
    registry: EngineRegistry
    sink: NotificationSink
    catalog: CustomRulePathManager

    @classmethod
    def create(
        cls,
        *,
        settings: ScannerSettings | None = None,
        registry: EngineRegistry | None = None,
        sink: NotificationSink | None = None,
        file_handler: FileHandler | None = None,
    ) -> ScannerContext:
        """Construct a context, registering the built-in engines when no registry is given.

        Args:
            settings: Resolved settings; loaded from the environment when omitted.
            registry: Pre-populated engine registry to use instead of the built-ins.
            sink: Notification sink shared by engines and the catalog.
            file_handler: File-system facade used by the catalog.

        Returns:
            ScannerContext: Context whose catalog still needs :meth:`initialize`.
        """

        resolved_settings = settings if settings is not None else load_settings()
        resolved_sink = sink if sink is not None else NotificationSink()
        resolved_registry = (
            registry if registry is not None else initialize_registry(settings=resolved_settings, sink=resolved_sink)
        )
        catalog = CustomRulePathManager(
            registry=resolved_registry,
            settings=resolved_settings,
            file_handler=file_handler,
            sink=resolved_sink,
        )
        return cls(settings=resolved_settings, registry=resolved_registry, sink=resolved_sink, catalog=catalog)

    def initialize(self) -> ScannerContext:
        """Load the catalog once; safe to call repeatedly."""

        self.catalog.initialize()
        return self

    def enabled_engines(self) -> tuple[Engine, ...]:
        """Return the registered engines in registration order."""

        return self.registry.engines()


__all__ = ["ScannerContext"]
