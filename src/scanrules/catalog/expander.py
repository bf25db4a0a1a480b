# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Expansion of user supplied paths into concrete rule definition files."""

from __future__ import annotations

import errno
import logging
import os
import stat
from collections.abc import Iterable, Sequence
from pathlib import Path, PurePath

from ..errors import InvalidPathError
from ..filesystem import FileHandler

LOGGER = logging.getLogger(__name__)


class PathExpander:
    """Turn files and directories into a flat, ordered list of rule files.

    Directories are listed one level deep. Files without a recognised
    extension are skipped silently, while a path that cannot be inspected at
    all aborts the whole expansion with :class:`InvalidPathError`.
    """

    def __init__(self, extensions: Iterable[str], *, file_handler: FileHandler | None = None) -> None:
        self.extensions = tuple(ext.lower() for ext in extensions)
        self._files = file_handler if file_handler is not None else FileHandler()

    def is_rule_file(self, name: str | Path) -> bool:
        """Return ``True`` when ``name`` ends in a recognised rule file extension."""

        suffix = PurePath(name).suffix.lower()
        return bool(suffix) and suffix in self.extensions

    def expand(self, paths: Sequence[str | Path]) -> list[str]:
        """Expand ``paths`` into absolute rule file paths.

        Args:
            paths: Files or directories supplied by the user.

        Returns:
            list[str]: Deduplicated absolute paths, in the order they were discovered.

        Raises:
            InvalidPathError: If any entry in ``paths`` cannot be inspected.
        """

        found: dict[str, None] = {}
        for raw in paths:
            path = str(raw)
            mode = self._stat_mode(path)
            if mode is None:
                continue
            if stat.S_ISREG(mode):
                if self.is_rule_file(path):
                    LOGGER.debug("adding rule file supplied directly: %s", path)
                    found.setdefault(os.path.abspath(path), None)
            elif stat.S_ISDIR(mode):
                for child in self._list_rule_files(path):
                    found.setdefault(child, None)
        return list(found)

    def _stat_mode(self, path: str) -> int | None:
        try:
            return self._files.stats(path).st_mode
        except OSError as exc:
            if exc.errno == errno.ELOOP:
                LOGGER.debug("skipping symlink loop: %s", path)
                return None
            raise InvalidPathError(path) from exc

    def _list_rule_files(self, directory: str) -> list[str]:
        try:
            names = self._files.list_dir(directory)
        except OSError as exc:
            raise InvalidPathError(directory) from exc
        children: list[str] = []
        for name in names:
            if not self.is_rule_file(name):
                continue
            child = os.path.abspath(os.path.join(directory, name))
            try:
                mode = self._files.stats(child).st_mode
            except OSError:
                LOGGER.debug("skipping unreadable directory entry: %s", child)
                continue
            if stat.S_ISREG(mode):
                LOGGER.debug("adding rule file found in directory: %s", child)
                children.append(child)
        return children


__all__ = ["PathExpander"]
