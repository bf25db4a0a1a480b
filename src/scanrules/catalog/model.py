# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""In-memory model of the custom rule path catalog and its JSON form."""

from __future__ import annotations

from typing import Final, cast

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from ..errors import CatalogCorruptError, PathOwnershipError
from ..serialization import JsonValue

RulePathJson = dict[str, dict[str, list[str]]]

CATALOG_SCHEMA: Final[dict[str, JsonValue]] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "Custom rule paths",
    "type": "object",
    "additionalProperties": {
        "type": "object",
        "additionalProperties": {
            "type": "array",
            "items": {"type": "string"},
        },
    },
}

CATALOG_VALIDATOR: Final = Draft202012Validator(CATALOG_SCHEMA)


class RulePathCatalog:
    """Map ``engine -> language -> paths`` while keeping one owner per path.

    Path collections are insertion ordered and unique. The aggregate owns its
    JSON conversion so the single-owner rule is checked in one place.
    """

    def __init__(self) -> None:
        self._entries: dict[str, dict[str, dict[str, None]]] = {}

    @classmethod
    def from_json(cls, payload: JsonValue, *, source: str = "<memory>") -> RulePathCatalog:
        """Build a catalog from the canonical JSON document.

        Args:
            payload: Parsed JSON document of shape ``{engine: {language: [path]}}``.
            source: Description of where the payload came from, used in errors.

        Returns:
            RulePathCatalog: Catalog populated from ``payload``.

        Raises:
            CatalogCorruptError: If the payload has the wrong shape or a path has two owners.
        """

        try:
            CATALOG_VALIDATOR.validate(payload)
        except ValidationError as exc:
            raise CatalogCorruptError(f"{source}: custom rule path file is malformed: {exc.message}") from exc
        catalog = cls()
        document = cast(RulePathJson, payload)
        for engine, languages in document.items():
            for language, paths in languages.items():
                for path in paths:
                    owner = catalog.owner_of(path)
                    if owner is not None and owner != engine:
                        raise CatalogCorruptError(
                            f"{source}: path '{path}' is listed under both '{owner}' and '{engine}'",
                        )
                    catalog._entries.setdefault(engine, {}).setdefault(language, {})[path] = None
        return catalog

    def to_json(self) -> RulePathJson:
        """Return the canonical ``{engine: {language: [path, ...]}}`` document."""

        return {
            engine: {language: list(paths) for language, paths in languages.items()}
            for engine, languages in self._entries.items()
        }

    def engines(self) -> tuple[str, ...]:
        """Return the engines that currently own at least one entry."""

        return tuple(self._entries)

    def owner_of(self, path: str) -> str | None:
        """Return the engine that lists ``path``, or ``None``."""

        for engine, languages in self._entries.items():
            if any(path in paths for paths in languages.values()):
                return engine
        return None

    def add(self, engine: str, language: str, path: str) -> bool:
        """Record ``path`` for ``engine``/``language``.

        Returns:
            bool: ``True`` when the path was not already listed for that language.

        Raises:
            PathOwnershipError: If ``path`` is already owned by a different engine.
        """

        owner = self.owner_of(path)
        if owner is not None and owner != engine:
            raise PathOwnershipError(path, owner)
        paths = self._entries.setdefault(engine, {}).setdefault(language, {})
        if path in paths:
            return False
        paths[path] = None
        return True

    def contains(self, engine: str, path: str) -> bool:
        """Return ``True`` when ``path`` is listed under any language of ``engine``."""

        return any(path in paths for paths in self._entries.get(engine, {}).values())

    def discard(self, engine: str, path: str) -> bool:
        """Remove ``path`` from every language of ``engine``, pruning empty buckets.

        Returns:
            bool: ``True`` when the path was removed from at least one language.
        """

        languages = self._entries.get(engine)
        if languages is None:
            return False
        removed = False
        for language in list(languages):
            paths = languages[language]
            if path in paths:
                del paths[path]
                removed = True
            if not paths:
                del languages[language]
        if not languages:
            del self._entries[engine]
        return removed

    def relocate(self, path: str, source: str, target: str) -> tuple[str, ...]:
        """Move ``path`` from ``source`` to ``target``, keeping its languages.

        Returns:
            tuple[str, ...]: Languages the path was moved under; empty when ``source`` did not list it.
        """

        languages = tuple(
            language for language, paths in self._entries.get(source, {}).items() if path in paths
        )
        if not languages:
            return ()
        self.discard(source, path)
        for language in languages:
            self.add(target, language, path)
        return languages

    def entries_for(self, engine: str) -> dict[str, set[str]]:
        """Return a copy of the ``language -> paths`` mapping for ``engine``."""

        return {language: set(paths) for language, paths in self._entries.get(engine, {}).items()}

    def all_paths(self) -> list[str]:
        """Return every listed path once, in catalog order."""

        seen: dict[str, None] = {}
        for languages in self._entries.values():
            for paths in languages.values():
                for path in paths:
                    seen.setdefault(path, None)
        return list(seen)


__all__ = [
    "CATALOG_SCHEMA",
    "CATALOG_VALIDATOR",
    "RulePathCatalog",
    "RulePathJson",
]
