# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Engine contract, built-in engines, and the engine registry."""

from __future__ import annotations

from .base import AbstractRuleEngine, Engine, EngineOptions
from .builtins import initialize_registry
from .eslint import EslintEngine
from .invocation import EngineInvocation, InvocationOutcome, InvocationState, RawOutput, RunRequest
from .pmd import PmdEngine
from .registry import EngineRegistry
from .sfge import SfgeEngine
from .stderr import ErrorTemplate, simplify_stderr

__all__ = [
    "AbstractRuleEngine",
    "Engine",
    "EngineInvocation",
    "EngineOptions",
    "EngineRegistry",
    "ErrorTemplate",
    "EslintEngine",
    "InvocationOutcome",
    "InvocationState",
    "PmdEngine",
    "RawOutput",
    "RunRequest",
    "SfgeEngine",
    "initialize_registry",
    "simplify_stderr",
]
