# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and environment loading for the scanner."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .constants import (
    CUSTOM_PATHS_FILE_ENV,
    DEFAULT_CUSTOM_PATHS_FILE,
    DEFAULT_SFGE_THREAD_COUNT,
    DEFAULT_SFGE_THREAD_TIMEOUT_MS,
    DEFAULT_STATE_DIR_NAME,
    SFGE_DISABLE_WARNING_VIOLATION_ENV,
    SFGE_PATH_EXPANSION_LIMIT_ENV,
    SFGE_THREAD_COUNT_ENV,
    SFGE_THREAD_TIMEOUT_ENV,
    STATE_DIR_ENV,
)
from .errors import ScanRulesError

_TRUE_VALUES: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES: Final[frozenset[str]] = frozenset({"0", "false", "no", "off", ""})


class ConfigError(ScanRulesError):
    """Raised when configuration input is invalid."""


class SfgeSettings(BaseModel):
    """Tunables forwarded to the dataflow engine invocation."""

    model_config = ConfigDict(frozen=True)

    rule_thread_count: int = Field(default=DEFAULT_SFGE_THREAD_COUNT, ge=1)
    rule_thread_timeout_ms: int = Field(default=DEFAULT_SFGE_THREAD_TIMEOUT_MS, ge=1)
    path_expansion_limit: int | None = Field(default=None, ge=-1)
    disable_warning_violations: bool = False


class ScannerSettings(BaseModel):
    """Resolved configuration for a scanner process."""

    model_config = ConfigDict(frozen=True)

    state_dir: Path = Field(default_factory=lambda: Path.home() / DEFAULT_STATE_DIR_NAME)
    custom_paths_file: str = DEFAULT_CUSTOM_PATHS_FILE
    sfge: SfgeSettings = Field(default_factory=SfgeSettings)

    @field_validator("custom_paths_file")
    @classmethod
    def _reject_nested_file_name(cls, value: str) -> str:
        """Ensure the catalog file name is a bare file name."""

        if not value.strip():
            raise ValueError("custom paths file name must not be blank")
        if Path(value).name != value:
            raise ValueError(f"custom paths file name must not contain directories: {value!r}")
        return value

    @property
    def custom_paths_path(self) -> Path:
        """Return the full location of the custom rule path document."""

        return self.state_dir / self.custom_paths_file


def _parse_bool(raw: str, *, key: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"{key}: expected a boolean, got {raw!r}")


def _parse_int(raw: str, *, key: str) -> int:
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ConfigError(f"{key}: expected an integer, got {raw!r}") from exc


def load_settings(env: Mapping[str, str] | None = None) -> ScannerSettings:
    """Build :class:`ScannerSettings` from environment variables.

    Args:
        env: Optional environment mapping used instead of :data:`os.environ`.

    Returns:
        ScannerSettings: Settings with defaults for every unset variable.

    Raises:
        ConfigError: If a variable holds a value that cannot be converted or validated.
    """

    environment = env if env is not None else os.environ
    payload: dict[str, object] = {}
    sfge_payload: dict[str, object] = {}

    state_dir = environment.get(STATE_DIR_ENV)
    if state_dir:
        payload["state_dir"] = Path(state_dir).expanduser()
    file_name = environment.get(CUSTOM_PATHS_FILE_ENV)
    if file_name:
        payload["custom_paths_file"] = file_name

    if (raw := environment.get(SFGE_THREAD_COUNT_ENV)) is not None:
        sfge_payload["rule_thread_count"] = _parse_int(raw, key=SFGE_THREAD_COUNT_ENV)
    if (raw := environment.get(SFGE_THREAD_TIMEOUT_ENV)) is not None:
        sfge_payload["rule_thread_timeout_ms"] = _parse_int(raw, key=SFGE_THREAD_TIMEOUT_ENV)
    if (raw := environment.get(SFGE_PATH_EXPANSION_LIMIT_ENV)) is not None:
        sfge_payload["path_expansion_limit"] = _parse_int(raw, key=SFGE_PATH_EXPANSION_LIMIT_ENV)
    if (raw := environment.get(SFGE_DISABLE_WARNING_VIOLATION_ENV)) is not None:
        sfge_payload["disable_warning_violations"] = _parse_bool(raw, key=SFGE_DISABLE_WARNING_VIOLATION_ENV)

    try:
        payload["sfge"] = SfgeSettings.model_validate(sfge_payload)
        return ScannerSettings.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"invalid scanner configuration: {exc}") from exc


__all__ = [
    "ConfigError",
    "ScannerSettings",
    "SfgeSettings",
    "load_settings",
]
