# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Persistent registry of custom rule paths, keyed by engine and language."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Final, cast

from ..config import ScannerSettings
from ..engines.registry import EngineRegistry
from ..errors import (
    CatalogCorruptError,
    CatalogNotInitializedError,
    CatalogReadError,
    CatalogWriteError,
)
from ..events import DEFAULT_SINK, Channel, NotificationSink
from ..filesystem import FileHandler
from ..serialization import JsonValue
from .attributor import EngineAttributor
from .expander import PathExpander
from .model import RulePathCatalog

LOGGER = logging.getLogger(__name__)

EMPTY_JSON_FILE: Final[str] = "{}"
_JSON_INDENT: Final[int] = 4


class CustomRulePathManager:
    """Track which custom rule files belong to which engine and language.

    The catalog is loaded once by :meth:`initialize` and written back in full
    after every mutation. Mutations are not synchronised; callers must
    serialise :meth:`add_paths` and :meth:`remove_paths`. The in-memory state
    is updated before the write, so a :class:`CatalogWriteError` leaves memory
    ahead of disk.
    """

    def __init__(
        self,
        *,
        registry: EngineRegistry,
        settings: ScannerSettings,
        file_handler: FileHandler | None = None,
        sink: NotificationSink | None = None,
    ) -> None:
        self._registry = registry
        self._settings = settings
        self._files = file_handler if file_handler is not None else FileHandler()
        self._sink = sink if sink is not None else DEFAULT_SINK
        self._attributor = EngineAttributor(registry)
        self._catalog = RulePathCatalog()
        self._initialized = False

    @property
    def initialized(self) -> bool:
        """Return ``True`` once :meth:`initialize` has loaded the catalog."""

        return self._initialized

    @property
    def rule_path_file(self) -> Path:
        """Return the location of the custom rule path document."""

        return self._settings.custom_paths_path

    def initialize(self) -> None:
        """Load the catalog from disk; later calls are no-ops.

        A missing file means no custom paths were registered yet, and a blank
        file is read as an empty object.

        Raises:
            CatalogReadError: If the file exists but cannot be read.
            CatalogCorruptError: If the file is not a valid catalog document.
        """

        if self._initialized:
            return
        LOGGER.debug("initialising custom rule path catalog from %s", self.rule_path_file)
        data = self._read_rule_path_file()
        if not data.strip():
            LOGGER.debug("custom rule path file is blank")
            data = EMPTY_JSON_FILE
        try:
            payload = cast(JsonValue, json.loads(data))
        except json.JSONDecodeError as exc:
            raise CatalogCorruptError(f"{self.rule_path_file}: failed to parse custom rule path JSON: {exc}") from exc
        catalog = RulePathCatalog.from_json(payload, source=str(self.rule_path_file))
        self._reconcile_owners(catalog)
        self._catalog = catalog
        self._initialized = True

    def add_paths(self, language: str, paths: Sequence[str | Path]) -> list[str]:
        """Register the rule files found under ``paths`` for ``language``.

        Args:
            language: Language the rules apply to, for example ``apex``.
            paths: Files or directories supplied by the user.

        Returns:
            list[str]: Absolute rule file paths that were expanded and recorded.

        Raises:
            InvalidPathError: If a supplied path cannot be inspected.
            UnattributedPathError: If no engine owns one of the expanded files.
            CatalogWriteError: If the catalog cannot be persisted.
        """

        self._ensure_initialized()
        LOGGER.debug("adding paths %s for language %s", list(map(str, paths)), language)
        entries = self._expander().expand(paths)
        owners = [(entry, self._attributor.require(entry)) for entry in entries]
        for entry, engine in owners:
            self._catalog.add(engine.name, language, entry)
        self._save()
        return entries

    def get_all_paths(self) -> list[str]:
        """Return every registered rule path once."""

        self._ensure_initialized()
        return self._catalog.all_paths()

    def get_matching_paths(self, paths: Sequence[str | Path]) -> list[str]:
        """Return the expanded ``paths`` that are already registered.

        Args:
            paths: Files or directories supplied by the user.

        Returns:
            list[str]: Registered rule paths, in expansion order.
        """

        self._ensure_initialized()
        LOGGER.debug("matching paths %s", list(map(str, paths)))
        matches: list[str] = []
        for entry in self._expander().expand(paths):
            engine = self._attribute_or_warn(entry)
            if engine is not None and self._catalog.contains(engine, entry):
                matches.append(entry)
        return matches

    def remove_paths(self, paths: Sequence[str | Path]) -> list[str]:
        """Unregister the rule files found under ``paths``.

        Paths that are not registered are skipped silently.

        Args:
            paths: Files or directories supplied by the user.

        Returns:
            list[str]: Rule paths that were actually removed.

        Raises:
            InvalidPathError: If a supplied path cannot be inspected.
            CatalogWriteError: If the catalog cannot be persisted.
        """

        self._ensure_initialized()
        LOGGER.debug("removing paths %s", list(map(str, paths)))
        removed: list[str] = []
        for entry in self._expander().expand(paths):
            engine = self._attribute_or_warn(entry)
            if engine is not None and self._catalog.discard(engine, entry):
                removed.append(entry)
        self._save()
        return removed

    def get_entries_for_engine(self, engine_name: str) -> dict[str, set[str]]:
        """Return the ``language -> paths`` mapping for ``engine_name``; empty when unknown."""

        self._ensure_initialized()
        entries = self._catalog.entries_for(engine_name)
        if not entries:
            LOGGER.debug("no custom rule paths registered for engine %s", engine_name)
        return entries

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise CatalogNotInitializedError("custom rule path catalog used before initialize()")

    def _expander(self) -> PathExpander:
        return PathExpander(self._registry.rule_file_extensions(), file_handler=self._files)

    def _attribute_or_warn(self, entry: str) -> str | None:
        engine = self._attributor.attribute(entry)
        if engine is None:
            self._sink.emit(Channel.WARNING_ALWAYS, f"No registered engine accepts rule path '{entry}'; skipping it.")
            return None
        return engine.name

    def _reconcile_owners(self, catalog: RulePathCatalog) -> None:
        """Move loaded paths listed under an engine that does not claim them.

        Paths no registered engine claims are left where they are; they are
        reported when a later operation touches them.
        """

        for engine, languages in catalog.to_json().items():
            for path in dict.fromkeys(path for paths in languages.values() for path in paths):
                owner = self._attributor.attribute(path)
                if owner is None or owner.name == engine:
                    continue
                catalog.relocate(path, engine, owner.name)
                self._sink.emit(
                    Channel.WARNING_ALWAYS,
                    f"Rule path '{path}' was listed under engine '{engine}' but belongs to "
                    f"'{owner.name}'; moving it.",
                )

    def _read_rule_path_file(self) -> str:
        path = self.rule_path_file
        try:
            data = self._files.read_text(path)
        except FileNotFoundError:
            LOGGER.debug("custom rule path file %s does not exist yet", path)
            return EMPTY_JSON_FILE
        except UnicodeDecodeError as exc:
            raise CatalogCorruptError(f"{path}: custom rule path file is not valid UTF-8") from exc
        except OSError as exc:
            raise CatalogReadError(f"Failed to read custom rule path file {path}: {exc}") from exc
        LOGGER.debug("custom rule path content from %s: %s", path, data)
        return data

    def _save(self) -> None:
        path = self.rule_path_file
        content = json.dumps(self._catalog.to_json(), indent=_JSON_INDENT)
        LOGGER.debug("writing custom rule path file %s: %s", path, content)
        try:
            self._files.mkdir_if_not_exists(path.parent)
            self._files.write_text(path, content)
        except OSError as exc:
            raise CatalogWriteError(f"Failed to write custom rule path file {path}: {exc}") from exc


__all__ = ["CustomRulePathManager", "EMPTY_JSON_FILE"]
