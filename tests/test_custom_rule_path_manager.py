# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the persistent custom rule path manager."""

from __future__ import annotations

import json
from pathlib import Path
from typing import ClassVar

import pytest

from scanrules.catalog.manager import CustomRulePathManager
from scanrules.config import ScannerSettings
from scanrules.engines.base import AbstractRuleEngine
from scanrules.engines.registry import EngineRegistry
from scanrules.errors import (
    CatalogCorruptError,
    CatalogNotInitializedError,
    CatalogReadError,
    CatalogWriteError,
    InvalidPathError,
    UnattributedPathError,
)
from scanrules.events import Channel, NotificationSink
from scanrules.filesystem import FileHandler
from scanrules.models import RuleResult


def _write_rules(directory: Path, *names: str) -> list[Path]:
    directory.mkdir(parents=True, exist_ok=True)
    created = []
    for name in names:
        path = directory / name
        path.write_text("<ruleset/>", encoding="utf-8")
        created.append(path)
    return created


def _manager(
    settings: ScannerSettings,
    registry: EngineRegistry,
    sink: NotificationSink,
    **kwargs,
) -> CustomRulePathManager:
    manager = CustomRulePathManager(registry=registry, settings=settings, sink=sink, **kwargs)
    manager.initialize()
    return manager


@pytest.fixture
def manager(settings: ScannerSettings, registry: EngineRegistry, sink: NotificationSink) -> CustomRulePathManager:
    return _manager(settings, registry, sink)


def test_missing_file_is_an_empty_catalog(manager: CustomRulePathManager) -> None:
    assert manager.get_all_paths() == []
    assert manager.get_entries_for_engine("pmd") == {}
    assert not manager.rule_path_file.exists()


def test_blank_file_is_an_empty_catalog(settings: ScannerSettings, registry, sink) -> None:
    settings.custom_paths_path.parent.mkdir(parents=True)
    settings.custom_paths_path.write_text("  \n", encoding="utf-8")

    assert _manager(settings, registry, sink).get_all_paths() == []


def test_malformed_json_is_corrupt(settings: ScannerSettings, registry, sink) -> None:
    settings.custom_paths_path.parent.mkdir(parents=True)
    settings.custom_paths_path.write_text("{not json", encoding="utf-8")
    manager = CustomRulePathManager(registry=registry, settings=settings, sink=sink)

    with pytest.raises(CatalogCorruptError, match="failed to parse"):
        manager.initialize()
    assert not manager.initialized


def test_wrong_document_shape_is_corrupt(settings: ScannerSettings, registry, sink) -> None:
    settings.custom_paths_path.parent.mkdir(parents=True)
    settings.custom_paths_path.write_text('{"pmd": ["/rules/a.xml"]}', encoding="utf-8")
    manager = CustomRulePathManager(registry=registry, settings=settings, sink=sink)

    with pytest.raises(CatalogCorruptError):
        manager.initialize()


def test_operations_require_initialize(settings: ScannerSettings, registry, sink) -> None:
    manager = CustomRulePathManager(registry=registry, settings=settings, sink=sink)

    with pytest.raises(CatalogNotInitializedError):
        manager.get_all_paths()
    with pytest.raises(CatalogNotInitializedError):
        manager.add_paths("apex", [])
    with pytest.raises(CatalogNotInitializedError):
        manager.remove_paths([])
    with pytest.raises(CatalogNotInitializedError):
        manager.get_entries_for_engine("pmd")


def test_initialize_is_idempotent(settings: ScannerSettings, registry, sink) -> None:
    manager = _manager(settings, registry, sink)
    settings.custom_paths_path.parent.mkdir(parents=True)
    settings.custom_paths_path.write_text('{"pmd": {"apex": ["/rules/a.xml"]}}', encoding="utf-8")

    manager.initialize()

    assert manager.get_all_paths() == []


def test_stale_owner_is_moved_on_load(
    tmp_path: Path,
    settings: ScannerSettings,
    registry: EngineRegistry,
    sink: NotificationSink,
    recorder,
) -> None:
    (rule,) = _write_rules(tmp_path / "rules", "rules.xml")
    settings.custom_paths_path.parent.mkdir(parents=True)
    settings.custom_paths_path.write_text(json.dumps({"eslint": {"javascript": [str(rule)]}}), encoding="utf-8")

    manager = _manager(settings, registry, sink)

    assert manager.get_entries_for_engine("eslint") == {}
    assert manager.get_entries_for_engine("pmd") == {"javascript": {str(rule)}}
    assert recorder.messages(Channel.WARNING_ALWAYS) == [
        f"Rule path '{rule}' was listed under engine 'eslint' but belongs to 'pmd'; moving it.",
    ]

    assert manager.add_paths("apex", [rule]) == [str(rule)]
    assert json.loads(settings.custom_paths_path.read_text(encoding="utf-8")) == {
        "pmd": {"javascript": [str(rule)], "apex": [str(rule)]},
    }


def test_add_paths_persists_and_reloads(
    tmp_path: Path,
    settings: ScannerSettings,
    registry: EngineRegistry,
    sink: NotificationSink,
    manager: CustomRulePathManager,
) -> None:
    jar, xml = _write_rules(tmp_path / "rules", "custom.jar", "ruleset.xml")
    _write_rules(tmp_path / "rules", "notes.txt")

    added = manager.add_paths("apex", [tmp_path / "rules"])

    assert added == [str(jar), str(xml)]
    text = settings.custom_paths_path.read_text(encoding="utf-8")
    assert json.loads(text) == {"pmd": {"apex": [str(jar), str(xml)]}}
    assert text.startswith('{\n    "pmd"')

    reloaded = _manager(settings, registry, sink)
    assert reloaded.get_all_paths() == [str(jar), str(xml)]
    assert reloaded.get_entries_for_engine("pmd") == {"apex": {str(jar), str(xml)}}


def test_adding_twice_keeps_one_entry(tmp_path: Path, manager: CustomRulePathManager) -> None:
    (rule,) = _write_rules(tmp_path / "rules", "ruleset.xml")

    manager.add_paths("apex", [rule])
    manager.add_paths("apex", [rule])

    assert manager.get_all_paths() == [str(rule)]


def test_add_invalid_path_leaves_catalog_untouched(tmp_path: Path, manager: CustomRulePathManager) -> None:
    (rule,) = _write_rules(tmp_path / "rules", "ruleset.xml")

    with pytest.raises(InvalidPathError):
        manager.add_paths("apex", [rule, tmp_path / "missing.xml"])

    assert manager.get_all_paths() == []
    assert not manager.rule_path_file.exists()


def test_remove_paths_is_idempotent(tmp_path: Path, settings: ScannerSettings, manager: CustomRulePathManager) -> None:
    jar, xml = _write_rules(tmp_path / "rules", "custom.jar", "ruleset.xml")
    manager.add_paths("apex", [jar, xml])

    assert manager.remove_paths([xml]) == [str(xml)]
    assert manager.remove_paths([xml]) == []
    assert manager.get_all_paths() == [str(jar)]

    assert manager.remove_paths([jar]) == [str(jar)]
    assert json.loads(settings.custom_paths_path.read_text(encoding="utf-8")) == {}


def test_path_registered_for_two_languages_is_removed_once(tmp_path: Path, manager: CustomRulePathManager) -> None:
    (rule,) = _write_rules(tmp_path / "rules", "ruleset.xml")
    manager.add_paths("apex", [rule])
    manager.add_paths("visualforce", [rule])

    assert manager.get_entries_for_engine("pmd") == {"apex": {str(rule)}, "visualforce": {str(rule)}}
    assert manager.remove_paths([rule]) == [str(rule)]
    assert manager.get_entries_for_engine("pmd") == {}


def test_get_matching_paths(tmp_path: Path, manager: CustomRulePathManager) -> None:
    jar, xml = _write_rules(tmp_path / "rules", "custom.jar", "ruleset.xml")
    manager.add_paths("apex", [xml])

    assert manager.get_matching_paths([tmp_path / "rules"]) == [str(xml)]
    assert manager.get_matching_paths([jar]) == []


class _NarrowEngine(AbstractRuleEngine):
    """Claims ``.xml`` but only accepts files under a ``rules`` directory."""

    name: ClassVar[str] = "narrow"
    rule_file_extensions: ClassVar[tuple[str, ...]] = (".xml",)

    def matches_path(self, path: str) -> bool:
        return "/rules/" in path and super().matches_path(path)

    def process_stdout(self, raw: str) -> list[RuleResult]:
        return []


def test_unattributed_path_aborts_add(tmp_path: Path, settings: ScannerSettings, sink: NotificationSink) -> None:
    registry = EngineRegistry()
    registry.register(_NarrowEngine(sink=sink))
    manager = _manager(settings, registry, sink)
    (owned,) = _write_rules(tmp_path / "rules", "owned.xml")
    (orphan,) = _write_rules(tmp_path / "elsewhere", "orphan.xml")

    with pytest.raises(UnattributedPathError) as excinfo:
        manager.add_paths("apex", [owned, orphan])

    assert excinfo.value.path == str(orphan)
    assert manager.get_all_paths() == []


def test_unattributed_path_is_skipped_with_warning_on_remove(
    tmp_path: Path,
    settings: ScannerSettings,
    sink: NotificationSink,
    recorder,
) -> None:
    registry = EngineRegistry()
    registry.register(_NarrowEngine(sink=sink))
    manager = _manager(settings, registry, sink)
    (orphan,) = _write_rules(tmp_path / "elsewhere", "orphan.xml")

    assert manager.remove_paths([orphan]) == []
    assert recorder.messages(Channel.WARNING_ALWAYS) == [
        f"No registered engine accepts rule path '{orphan}'; skipping it.",
    ]


def test_read_failure_is_reported(settings: ScannerSettings, registry, sink) -> None:
    class UnreadableFiles(FileHandler):
        def read_text(self, path: str | Path) -> str:
            raise PermissionError(13, "Permission denied", str(path))

    manager = CustomRulePathManager(registry=registry, settings=settings, sink=sink, file_handler=UnreadableFiles())

    with pytest.raises(CatalogReadError, match="Failed to read custom rule path file"):
        manager.initialize()


def test_write_failure_is_reported(tmp_path: Path, settings: ScannerSettings, registry, sink) -> None:
    class ReadOnlyFiles(FileHandler):
        def write_text(self, path: str | Path, content: str) -> None:
            raise OSError(30, "Read-only file system", str(path))

    manager = _manager(settings, registry, sink, file_handler=ReadOnlyFiles())
    (rule,) = _write_rules(tmp_path / "rules", "ruleset.xml")

    with pytest.raises(CatalogWriteError, match="Failed to write custom rule path file"):
        manager.add_paths("apex", [rule])

    assert manager.get_all_paths() == [str(rule)]


def test_file_name_comes_from_settings(tmp_path: Path, registry, sink) -> None:
    settings = ScannerSettings(state_dir=tmp_path / "state", custom_paths_file="Team.json")
    manager = _manager(settings, registry, sink)
    (rule,) = _write_rules(tmp_path / "rules", "ruleset.xml")

    manager.add_paths("apex", [rule])

    assert manager.rule_path_file == tmp_path / "state" / "Team.json"
    assert manager.rule_path_file.is_file()
