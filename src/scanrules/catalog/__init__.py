# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Custom rule path catalog: expansion, attribution, and persistence."""

from __future__ import annotations

from .attributor import EngineAttributor
from .expander import PathExpander
from .manager import CustomRulePathManager
from .model import RulePathCatalog

__all__ = (
    "CustomRulePathManager",
    "EngineAttributor",
    "PathExpander",
    "RulePathCatalog",
)
