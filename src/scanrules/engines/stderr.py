# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Template table used to turn noisy engine stderr into short messages."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from string import Formatter


@dataclass(frozen=True, slots=True)
class ErrorTemplate:
    """Map a recognisable stderr pattern onto a simplified message.

    ``message`` is a :meth:`str.format` template whose placeholders must all be
    named groups of ``pattern``; this is checked on construction.
    """

    name: str
    pattern: re.Pattern[str]
    message: str

    def __post_init__(self) -> None:
        fields = {field for _, field, _, _ in Formatter().parse(self.message) if field}
        missing = fields - set(self.pattern.groupindex)
        if missing:
            joined = ", ".join(sorted(missing))
            raise ValueError(f"error template '{self.name}' references unknown groups: {joined}")

    def render(self, match: re.Match[str]) -> str:
        """Return the simplified message with captured groups substituted."""

        values = {key: value or "" for key, value in match.groupdict().items()}
        return self.message.format(**values)


def simplify_stderr(raw: str, templates: Sequence[ErrorTemplate]) -> str:
    """Return the first matching template's message, or ``raw`` unchanged.

    Args:
        raw: Text the engine wrote to stderr.
        templates: Ordered templates; the first match wins.

    Returns:
        str: Simplified message, or the original text when nothing matched.
    """

    if not raw:
        return raw
    for template in templates:
        match = template.pattern.search(raw)
        if match:
            return template.render(match)
    return raw


__all__ = ["ErrorTemplate", "simplify_stderr"]
