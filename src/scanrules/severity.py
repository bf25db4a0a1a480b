# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import IntEnum
from typing import Final

from .constants import EngineName
from .models import RuleResult


class NormalizedSeverity(IntEnum):
    """Severity levels normalising the different engine vocabularies."""

    HIGH = 1
    MODERATE = 2
    LOW = 3


ENGINE_SEVERITY_MAP: Final[dict[str, dict[int, NormalizedSeverity]]] = {
    EngineName.PMD.value: {
        1: NormalizedSeverity.HIGH,
        2: NormalizedSeverity.MODERATE,
        3: NormalizedSeverity.MODERATE,
        4: NormalizedSeverity.LOW,
        5: NormalizedSeverity.LOW,
    },
    EngineName.ESLINT.value: {
        2: NormalizedSeverity.HIGH,
        1: NormalizedSeverity.MODERATE,
    },
    EngineName.SFGE.value: {
        1: NormalizedSeverity.HIGH,
        2: NormalizedSeverity.MODERATE,
        3: NormalizedSeverity.LOW,
    },
}


def normalize_severity(
    engine: str,
    severity: int,
    *,
    mapping: Mapping[str, Mapping[int, NormalizedSeverity]] | None = None,
) -> NormalizedSeverity:
    """Translate an engine-native severity into a :class:`NormalizedSeverity`.

    Args:
        engine: Name of the engine that reported the severity.
        severity: Engine-native severity value.
        mapping: Optional override of :data:`ENGINE_SEVERITY_MAP`.

    Returns:
        NormalizedSeverity: Mapped severity, or ``LOW`` when the engine or value is unknown.
    """

    table = mapping if mapping is not None else ENGINE_SEVERITY_MAP
    return table.get(engine, {}).get(severity, NormalizedSeverity.LOW)


def normalize_results(results: Iterable[RuleResult]) -> list[RuleResult]:
    """Return copies of ``results`` with ``normalized_severity`` populated."""

    normalized: list[RuleResult] = []
    for result in results:
        violations = tuple(
            violation.model_copy(
                update={"normalized_severity": int(normalize_severity(result.engine, violation.severity))},
            )
            for violation in result.violations
        )
        normalized.append(result.model_copy(update={"violations": violations}))
    return normalized


__all__ = [
    "ENGINE_SEVERITY_MAP",
    "NormalizedSeverity",
    "normalize_results",
    "normalize_severity",
]
