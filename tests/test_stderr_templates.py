# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for stderr simplification templates."""

from __future__ import annotations

import re

import pytest

from scanrules.engines.stderr import ErrorTemplate, simplify_stderr

TEMPLATES = (
    ErrorTemplate(
        name="missing-file",
        pattern=re.compile(r"FileNotFound: (?P<path>\S+)"),
        message="Could not open {path}.",
    ),
    ErrorTemplate(name="any-failure", pattern=re.compile(r"Failure"), message="The engine failed."),
)


def test_first_matching_template_wins() -> None:
    assert simplify_stderr("Failure\nFileNotFound: /p/rules.xml", TEMPLATES) == "Could not open /p/rules.xml."


def test_later_template_used_when_earlier_ones_miss() -> None:
    assert simplify_stderr("Fatal Failure in thread main", TEMPLATES) == "The engine failed."


@pytest.mark.parametrize("raw", ["", "nothing recognisable here\n"])
def test_unmatched_stderr_is_returned_unchanged(raw: str) -> None:
    assert simplify_stderr(raw, TEMPLATES) == raw


def test_template_placeholders_must_be_named_groups() -> None:
    with pytest.raises(ValueError, match="unknown groups: rule"):
        ErrorTemplate(name="broken", pattern=re.compile(r"Missing (?P<path>\S+)"), message="{path} for {rule}")
