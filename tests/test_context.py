# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for scanner context wiring."""

from __future__ import annotations

from pathlib import Path

from scanrules.config import ScannerSettings
from scanrules.context import ScannerContext
from scanrules.events import Channel, NotificationSink


def test_create_wires_builtin_engines(settings: ScannerSettings) -> None:
    context = ScannerContext.create(settings=settings).initialize()

    assert [engine.name for engine in context.enabled_engines()] == ["pmd", "eslint", "sfge"]
    assert context.catalog.initialized
    assert context.catalog.rule_path_file == settings.custom_paths_path


def test_engines_and_catalog_share_the_sink(settings: ScannerSettings) -> None:
    sink = NotificationSink()
    seen: list[tuple[Channel, str]] = []
    sink.subscribe(lambda channel, message: seen.append((channel, message)))
    context = ScannerContext.create(settings=settings, sink=sink).initialize()

    context.registry["pmd"].process_stdout(
        '<?xml version="1.0"?><pmd><configerror rule="Broken" msg="bad property"/></pmd>',
    )

    assert seen == [(Channel.WARNING_ALWAYS, "PMD failed to evaluate rule 'Broken'. Message: bad property")]


def test_create_loads_settings_from_environment(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SCANRULES_HOME", str(tmp_path / "home"))

    context = ScannerContext.create()

    assert context.settings.custom_paths_path == tmp_path / "home" / "CustomPaths.json"
