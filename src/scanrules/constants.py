# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared constants for engine names, configuration keys, and file layout."""

from __future__ import annotations

from enum import Enum
from typing import Final


class EngineName(str, Enum):
    """Enumerate the engines shipped with the scanner."""

    PMD = "pmd"
    ESLINT = "eslint"
    SFGE = "sfge"


class CustomConfig(str, Enum):
    """Enumerate ``engine_options`` keys carrying custom configuration overrides.

    The presence of a key means the user supplied their own configuration file
    for the matching engine, which then replaces the default rule execution.
    """

    PMD_CONFIG = "PmdConfig"
    ESLINT_CONFIG = "EslintConfig"
    SFGE_CONFIG = "SfgeConfig"


STATE_DIR_ENV: Final[str] = "SCANRULES_HOME"
CUSTOM_PATHS_FILE_ENV: Final[str] = "CUSTOM_PATHS_FILE"
DEFAULT_STATE_DIR_NAME: Final[str] = ".scanrules"
DEFAULT_CUSTOM_PATHS_FILE: Final[str] = "CustomPaths.json"

JAR_EXTENSION: Final[str] = ".jar"
XML_EXTENSION: Final[str] = ".xml"

SFGE_THREAD_COUNT_ENV: Final[str] = "SFGE_RULE_THREAD_COUNT"
SFGE_THREAD_TIMEOUT_ENV: Final[str] = "SFGE_RULE_THREAD_TIMEOUT"
SFGE_PATH_EXPANSION_LIMIT_ENV: Final[str] = "SFGE_PATH_EXPANSION_LIMIT"
SFGE_DISABLE_WARNING_VIOLATION_ENV: Final[str] = "SFGE_RULE_DISABLE_WARNING_VIOLATION"
DEFAULT_SFGE_THREAD_COUNT: Final[int] = 4
DEFAULT_SFGE_THREAD_TIMEOUT_MS: Final[int] = 900_000

__all__ = [
    "CUSTOM_PATHS_FILE_ENV",
    "CustomConfig",
    "DEFAULT_CUSTOM_PATHS_FILE",
    "DEFAULT_SFGE_THREAD_COUNT",
    "DEFAULT_SFGE_THREAD_TIMEOUT_MS",
    "DEFAULT_STATE_DIR_NAME",
    "EngineName",
    "JAR_EXTENSION",
    "SFGE_DISABLE_WARNING_VIOLATION_ENV",
    "SFGE_PATH_EXPANSION_LIMIT_ENV",
    "SFGE_THREAD_COUNT_ENV",
    "SFGE_THREAD_TIMEOUT_ENV",
    "STATE_DIR_ENV",
    "XML_EXTENSION",
]
