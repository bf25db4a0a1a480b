# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for Graph Engine output normalisation and invocation settings."""

from __future__ import annotations

import json

import pytest

from scanrules.config import SfgeSettings
from scanrules.constants import CustomConfig
from scanrules.engines.sfge import SfgeEngine
from scanrules.events import Channel, NotificationSink
from scanrules.models import RuleGroup, RuleTarget

GROUPS = (RuleGroup(name="Security", engine="sfge"),)
TARGETS = (RuleTarget(target="classes/AccountController.cls", methods=("getAccounts",)),)


@pytest.fixture
def engine(sink: NotificationSink) -> SfgeEngine:
    return SfgeEngine(sink=sink)


def _violation(file_name: str, rule: str, **extra: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "ruleName": rule,
        "message": f"{rule} found a problem",
        "category": "Security",
        "sourceFileName": file_name,
        "sourceType": "AccountController",
        "sourceVertexName": "getAccounts",
        "sourceLineNumber": 10,
        "sourceColumnNumber": 5,
    }
    payload.update(extra)
    return payload


def test_framed_violations_are_grouped_by_file(engine: SfgeEngine) -> None:
    violations = [
        _violation(
            "/p/AccountController.cls",
            "ApexFlsViolationRule",
            severity=1,
            sinkFileName="/p/AccountController.cls",
            sinkLineNumber=14,
            sinkColumnNumber=9,
        ),
        _violation("/p/AccountController.cls", "UnusedMethodRule", severity=3),
        _violation("/p/LeadController.cls", "ApexNullPointerExceptionRule"),
    ]
    raw = f"Starting graph build\nVIOLATIONS_START{json.dumps(violations)}VIOLATIONS_END\nDone\n"

    results = engine.process_stdout(raw)

    assert [(result.file_name, len(result.violations)) for result in results] == [
        ("/p/AccountController.cls", 2),
        ("/p/LeadController.cls", 1),
    ]
    fls = results[0].violations[0]
    assert fls.severity == 1
    assert fls.source_type == "AccountController"
    assert fls.source_vertex_name == "getAccounts"
    assert (fls.sink_file_name, fls.sink_line, fls.sink_column) == ("/p/AccountController.cls", 14, 9)
    assert results[1].violations[0].severity == 2


def test_warning_lines_become_verbose_notifications(engine: SfgeEngine, recorder) -> None:
    raw = "SfgeWarning: Path expansion limit reached for MyClass#foo\nVIOLATIONS_START[]VIOLATIONS_END"

    assert engine.process_stdout(raw) == []
    assert recorder.events == [(Channel.WARNING_VERBOSE, "Path expansion limit reached for MyClass#foo")]


@pytest.mark.parametrize(
    "raw",
    ["", "VIOLATIONS_START[{}", "VIOLATIONS_END[]VIOLATIONS_START", "VIOLATIONS_START not json VIOLATIONS_END"],
)
def test_unusable_stdout_yields_no_results(engine: SfgeEngine, raw: str) -> None:
    assert engine.process_stdout(raw) == []


def test_should_run_needs_targets(engine: SfgeEngine) -> None:
    assert engine.should_run(GROUPS, [], TARGETS, {})
    assert not engine.should_run(GROUPS, [], [], {})
    assert not engine.should_run((), [], TARGETS, {})
    assert not engine.should_run(GROUPS, [], TARGETS, {CustomConfig.SFGE_CONFIG.value: "/p/sfge.json"})


def test_invocation_environment_defaults(engine: SfgeEngine) -> None:
    assert engine.invocation_environment() == {
        "SFGE_RULE_THREAD_COUNT": "4",
        "SFGE_RULE_THREAD_TIMEOUT": "900000",
        "SFGE_RULE_DISABLE_WARNING_VIOLATION": "false",
    }


def test_invocation_environment_uses_settings(sink: NotificationSink) -> None:
    settings = SfgeSettings(
        rule_thread_count=8,
        rule_thread_timeout_ms=60_000,
        path_expansion_limit=-1,
        disable_warning_violations=True,
    )

    env = SfgeEngine(settings=settings, sink=sink).invocation_environment()

    assert env["SFGE_RULE_THREAD_COUNT"] == "8"
    assert env["SFGE_RULE_THREAD_TIMEOUT"] == "60000"
    assert env["SFGE_PATH_EXPANSION_LIMIT"] == "-1"
    assert env["SFGE_RULE_DISABLE_WARNING_VIOLATION"] == "true"


def test_entrypoint_timeout_is_simplified(engine: SfgeEngine) -> None:
    stderr = (
        "java.lang.RuntimeException: Exceeded time limit of 900000 ms while evaluating "
        "AccountController#getAccounts\n\tat com.salesforce.graph.ops.ThreadableRuleExecutor.run"
    )

    assert engine.process_stderr(stderr) == (
        "Graph Engine gave up on entrypoint AccountController#getAccounts after 900000 ms. "
        "Raise SFGE_RULE_THREAD_TIMEOUT to allow more time."
    )


def test_unknown_stderr_is_returned_unchanged(engine: SfgeEngine) -> None:
    assert engine.process_stderr("Unexpected failure") == "Unexpected failure"
