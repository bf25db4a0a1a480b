# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Data models shared by engines, the rule path catalog, and their callers."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Violation(BaseModel):
    """Standardise one finding reported by an engine into a common schema.

    File-level engines populate ``line``/``column``; method-level engines
    (the dataflow engine) locate the finding through ``source_type`` and
    ``source_vertex_name`` and may also name the sink.
    """

    model_config = ConfigDict(frozen=True)

    rule_name: str
    message: str
    severity: int
    category: str = ""
    url: str | None = None
    line: int | None = None
    column: int | None = None
    end_line: int | None = None
    end_column: int | None = None
    normalized_severity: int | None = None
    source_type: str | None = None
    source_vertex_name: str | None = None
    sink_file_name: str | None = None
    sink_line: int | None = None
    sink_column: int | None = None


class RuleResult(BaseModel):
    """Group the violations an engine reported against a single file."""

    model_config = ConfigDict(frozen=True)

    engine: str
    file_name: str
    violations: tuple[Violation, ...] = Field(default_factory=tuple)


class Rule(BaseModel):
    """Describe a rule known to an engine."""

    model_config = ConfigDict(frozen=True)

    name: str
    engine: str
    description: str = ""
    categories: tuple[str, ...] = Field(default_factory=tuple)
    languages: tuple[str, ...] = Field(default_factory=tuple)
    default_enabled: bool = True


class RuleGroup(BaseModel):
    """Describe a category or ruleset selected for execution by an engine."""

    model_config = ConfigDict(frozen=True)

    name: str
    engine: str
    paths: tuple[str, ...] = Field(default_factory=tuple)


class RuleTarget(BaseModel):
    """Describe what an engine invocation analyses.

    ``methods`` is only populated for method-level targets such as
    ``Foo.cls#bar;baz``.
    """

    model_config = ConfigDict(frozen=True)

    target: str
    is_directory: bool = False
    paths: tuple[str, ...] = Field(default_factory=tuple)
    methods: tuple[str, ...] = Field(default_factory=tuple)


__all__ = [
    "Rule",
    "RuleGroup",
    "RuleResult",
    "RuleTarget",
    "Violation",
]
