# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Registration of the engines shipped with the scanner."""

from __future__ import annotations

from ..config import ScannerSettings
from ..events import NotificationSink
from .eslint import EslintEngine
from .pmd import PmdEngine
from .registry import EngineRegistry
from .sfge import SfgeEngine


def initialize_registry(
    *,
    settings: ScannerSettings,
    sink: NotificationSink,
    registry: EngineRegistry | None = None,
) -> EngineRegistry:
    """Register the built-in engines and return the populated registry.

    Args:
        settings: Scanner settings supplying engine tunables.
        sink: Notification sink the engines publish to.
        registry: Optional registry to populate instead of a fresh one.

    Returns:
        EngineRegistry: Registry containing pmd, eslint, and sfge, in that order.
    """

    target = registry if registry is not None else EngineRegistry()
    target.register(PmdEngine(sink=sink))
    target.register(EslintEngine(sink=sink))
    target.register(SfgeEngine(settings=settings.sfge, sink=sink))
    return target


__all__ = ["initialize_registry"]
