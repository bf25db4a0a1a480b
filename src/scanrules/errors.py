# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Custom exceptions raised by rule path catalog and engine operations."""

from __future__ import annotations

from pathlib import Path


class ScanRulesError(RuntimeError):
    """Base class for every error surfaced by :mod:`scanrules`."""


class InvalidPathError(ScanRulesError):
    """Raised when a user supplied path cannot be inspected on disk."""

    def __init__(self, path: str | Path) -> None:
        """Create the error for the offending ``path``.

        Args:
            path: Path exactly as supplied by the caller.
        """

        self.path = str(path)
        super().__init__(f"Invalid file or directory path: '{self.path}'")


class CatalogReadError(ScanRulesError):
    """Raised when the custom rule path file exists but cannot be read."""


class CatalogCorruptError(ScanRulesError):
    """Raised when the custom rule path file is not a valid catalog document."""


class CatalogWriteError(ScanRulesError):
    """Raised when the custom rule path file cannot be persisted."""


class CatalogNotInitializedError(ScanRulesError):
    """Raised when the catalog is queried before :meth:`initialize` ran."""


class UnattributedPathError(ScanRulesError):
    """Raised when no registered engine claims ownership of a rule path."""

    def __init__(self, path: str) -> None:
        """Create the error for the orphaned ``path``.

        Args:
            path: Candidate rule path that no engine claimed.
        """

        self.path = path
        super().__init__(f"No registered engine accepts rule path '{path}'")


class PathOwnershipError(ScanRulesError):
    """Raised when a rule path would be listed under a second engine."""

    def __init__(self, path: str, owner: str) -> None:
        self.path = path
        self.owner = owner
        super().__init__(f"Rule path '{path}' is already owned by engine '{owner}'")


class EngineRegistrationError(ScanRulesError):
    """Raised when an engine conflicts with the engines already registered."""


__all__ = (
    "CatalogCorruptError",
    "CatalogNotInitializedError",
    "CatalogReadError",
    "CatalogWriteError",
    "EngineRegistrationError",
    "InvalidPathError",
    "PathOwnershipError",
    "ScanRulesError",
    "UnattributedPathError",
)
