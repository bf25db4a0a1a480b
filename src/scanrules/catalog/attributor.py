# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Attribution of rule files to the engine that owns them."""

from __future__ import annotations

from collections.abc import Mapping

from ..engines.base import Engine
from ..errors import UnattributedPathError


class EngineAttributor:
    """Resolve the owning engine of a rule path against the live engine set."""

    def __init__(self, engines: Mapping[str, Engine]) -> None:
        self._engines = engines

    def attribute(self, path: str) -> Engine | None:
        """Return the first engine whose ``matches_path`` accepts ``path``."""

        for engine in self._engines.values():
            if engine.matches_path(path):
                return engine
        return None

    def require(self, path: str) -> Engine:
        """Return the owning engine of ``path``.

        Raises:
            UnattributedPathError: If no registered engine accepts ``path``.
        """

        engine = self.attribute(path)
        if engine is None:
            raise UnattributedPathError(path)
        return engine


__all__ = ["EngineAttributor"]
