# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from scanrules.config import ScannerSettings
from scanrules.console import get_console_manager
from scanrules.engines.builtins import initialize_registry
from scanrules.engines.registry import EngineRegistry
from scanrules.events import Channel, NotificationSink


class RecordingListener:
    """Collect ``(channel, message)`` pairs published on a sink."""

    def __init__(self) -> None:
        self.events: list[tuple[Channel, str]] = []

    def __call__(self, channel: Channel, message: str) -> None:
        self.events.append((channel, message))

    def messages(self, channel: Channel | None = None) -> list[str]:
        return [message for seen, message in self.events if channel is None or seen is channel]


@pytest.fixture
def fixtures_root() -> Path:
    """Return the directory holding captured engine output."""
    return Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def sink() -> NotificationSink:
    return NotificationSink()


@pytest.fixture
def recorder(sink: NotificationSink) -> RecordingListener:
    listener = RecordingListener()
    sink.subscribe(listener)
    return listener


@pytest.fixture
def settings(tmp_path: Path) -> ScannerSettings:
    """Return settings whose state directory lives under ``tmp_path``."""
    return ScannerSettings(state_dir=tmp_path / "state")


@pytest.fixture
def registry(settings: ScannerSettings, sink: NotificationSink) -> EngineRegistry:
    return initialize_registry(settings=settings, sink=sink)


@pytest.fixture(autouse=True)
def _fresh_consoles() -> None:
    get_console_manager().clear()
