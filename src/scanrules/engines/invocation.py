# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Lifecycle of a single engine invocation, from run decision to normalised output."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from ..models import Rule, RuleGroup, RuleResult, RuleTarget
from .base import Engine

LOGGER = logging.getLogger(__name__)


class InvocationState(str, Enum):
    """Enumerate the states an engine invocation moves through."""

    IDLE = "idle"
    RUN_DECISION_PENDING = "run-decision-pending"
    SKIPPED = "skipped"
    RUNNING = "running"
    OUTPUT_RECEIVED = "output-received"
    COMPLETED = "completed"


@dataclass(frozen=True, slots=True)
class RunRequest:
    """Describe what the caller asked the orchestrator to run."""

    requested_engines: tuple[str, ...] = ()
    rule_groups: tuple[RuleGroup, ...] = ()
    rules: tuple[Rule, ...] = ()
    targets: tuple[RuleTarget, ...] = ()
    engine_options: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class RawOutput:
    """Capture the text an engine process produced, possibly partial on timeout."""

    stdout: str = ""
    stderr: str = ""


@dataclass(slots=True)
class InvocationOutcome:
    """Result bundle for one engine invocation."""

    engine: str
    state: InvocationState
    results: list[RuleResult] = field(default_factory=list)
    error: str | None = None

    @property
    def skipped(self) -> bool:
        """Return ``True`` when the engine was not run."""

        return self.state is InvocationState.SKIPPED


EngineRunner = Callable[[Engine, RunRequest], RawOutput]


class EngineInvocation:
    """Drive one engine through gating, execution, and output normalisation.

    Process execution is delegated to ``runner``; this class only decides
    whether to call it and normalises whatever text comes back. A skipped
    invocation never reaches the runner or the output parsers.
    """

    def __init__(self, engine: Engine, runner: EngineRunner) -> None:
        self.engine = engine
        self.runner = runner
        self.state = InvocationState.IDLE

    def execute(self, request: RunRequest) -> InvocationOutcome:
        """Run the engine for ``request`` when it is requested and has work to do.

        Args:
            request: Engine filter, rule selection, targets, and engine options.

        Returns:
            InvocationOutcome: Normalised results, or a skipped outcome.

        Raises:
            RuntimeError: If the invocation object is reused before returning to idle.
        """

        if self.state is not InvocationState.IDLE:
            raise RuntimeError(f"invocation for '{self.engine.name}' is already {self.state.value}")
        self.state = InvocationState.RUN_DECISION_PENDING
        try:
            if not self._should_execute(request):
                self.state = InvocationState.SKIPPED
                LOGGER.debug("engine %s skipped", self.engine.name)
                return InvocationOutcome(engine=self.engine.name, state=InvocationState.SKIPPED)

            self.state = InvocationState.RUNNING
            output = self.runner(self.engine, request)
            self.state = InvocationState.OUTPUT_RECEIVED
            results = self.engine.process_stdout(output.stdout)
            error = self.engine.process_stderr(output.stderr) if output.stderr.strip() else None
            self.state = InvocationState.COMPLETED
            return InvocationOutcome(
                engine=self.engine.name,
                state=InvocationState.COMPLETED,
                results=results,
                error=error,
            )
        finally:
            self.state = InvocationState.IDLE

    def _should_execute(self, request: RunRequest) -> bool:
        if not self.engine.is_requested(request.requested_engines, request.engine_options):
            return False
        return self.engine.should_run(
            request.rule_groups,
            request.rules,
            request.targets,
            request.engine_options,
        )


__all__ = [
    "EngineInvocation",
    "EngineRunner",
    "InvocationOutcome",
    "InvocationState",
    "RawOutput",
    "RunRequest",
]
