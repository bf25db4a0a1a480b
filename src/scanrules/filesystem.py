# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Thin file-system facade used by the rule path catalog."""

from __future__ import annotations

import os
from pathlib import Path


class FileHandler:
    """Perform the file-system reads and writes the catalog depends on.

    The catalog never touches :mod:`os` directly so tests can substitute a
    handler that fails on demand.
    """

    def stats(self, path: str | Path) -> os.stat_result:
        """Return ``os.stat`` metadata for ``path``, following symlinks."""

        return os.stat(path)

    def read_text(self, path: str | Path) -> str:
        """Return the UTF-8 contents of ``path``."""

        return Path(path).read_text(encoding="utf-8")

    def write_text(self, path: str | Path, content: str) -> None:
        """Replace the contents of ``path`` with ``content``."""

        Path(path).write_text(content, encoding="utf-8")

    def list_dir(self, path: str | Path) -> list[str]:
        """Return the names of the immediate children of ``path``, sorted."""

        return sorted(os.listdir(path))

    def mkdir_if_not_exists(self, path: str | Path) -> None:
        """Create ``path`` and any missing parents."""

        Path(path).mkdir(parents=True, exist_ok=True)


__all__ = ["FileHandler"]
