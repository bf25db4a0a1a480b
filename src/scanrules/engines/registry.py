# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Engine registry providing discovery by name and rule file ownership."""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from ..errors import EngineRegistrationError
from .base import Engine


class EngineRegistry(Mapping[str, Engine]):
    """Central registry for engine implementations.

    ``EngineRegistry`` behaves like a read-only mapping whose keys are engine
    names and whose values are :class:`Engine` instances, iterated in
    registration order. Registration rejects engines whose claimed rule file
    extensions overlap an existing engine, so every rule file has at most one
    owner.
    """

    def __init__(self) -> None:
        """Initialise an empty engine registry."""

        self._engines: dict[str, Engine] = {}

    def register(self, engine: Engine) -> None:
        """Register ``engine`` enforcing unique names and disjoint rule file extensions.

        Args:
            engine: Engine implementation to insert into the registry.

        Raises:
            EngineRegistrationError: If the name is taken or an extension is already claimed.
        """

        if engine.name in self._engines:
            raise EngineRegistrationError(f"Engine '{engine.name}' already registered")
        claimed = {ext.lower() for ext in engine.rule_file_extensions}
        for other in self._engines.values():
            overlap = claimed.intersection(ext.lower() for ext in other.rule_file_extensions)
            if overlap:
                joined = ", ".join(sorted(overlap))
                raise EngineRegistrationError(
                    f"Engine '{engine.name}' claims rule file extensions already owned by '{other.name}': {joined}",
                )
        self._engines[engine.name] = engine

    def try_get(self, name: str) -> Engine | None:
        """Return the engine named ``name`` when registered, otherwise ``None``."""

        return self._engines.get(name)

    def engines(self) -> tuple[Engine, ...]:
        """Return every registered engine in registration order."""

        return tuple(self._engines.values())

    def rule_file_extensions(self) -> tuple[str, ...]:
        """Return the union of claimed rule file extensions in registration order."""

        extensions: list[str] = []
        for engine in self._engines.values():
            for ext in engine.rule_file_extensions:
                lowered = ext.lower()
                if lowered not in extensions:
                    extensions.append(lowered)
        return tuple(extensions)

    def __len__(self) -> int:
        return len(self._engines)

    def __iter__(self) -> Iterator[str]:
        return iter(self._engines)

    def __getitem__(self, name: str) -> Engine:
        """Return the engine identified by ``name``.

        Raises:
            KeyError: If ``name`` does not refer to a registered engine.
        """

        return self._engines[name]


__all__ = ["EngineRegistry"]
