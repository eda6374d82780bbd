"""Workflows — causally chained requests for a single user action.

A Workflow is an ordered list of named async steps. Step N+1 starts only
after step N returned; the first step that raises a RequestError (or
AlreadyExists, for client-side probes) ends the run. Nothing is rolled
back: the WorkflowResult records which prefix completed. A run is partial
only when a completed step wrote something (say, primary write done and
secondary write failed); steps registered with writes=False, such as
existence probes and refreshes, do not count.

Usage:
    wf = Workflow("create-device")
    wf.step("probe", probe, writes=False)
    wf.step("create", create)
    wf.step("associate", associate)
    result = await wf.run()
    if result.partial:
        ...  # completed prefix stays in place
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from fleetstore.exceptions import AlreadyExists, RequestError

logger = logging.getLogger("fleetstore.workflow")

Step = Callable[[], Awaitable[object]]

# Failures that end a workflow. Anything else is a bug and propagates.
ABORTING = (RequestError, AlreadyExists)


@dataclass
class WorkflowResult:
    name: str
    steps: list[str]
    completed: list[str] = field(default_factory=list)
    failed_step: str | None = None
    error: Exception | None = None
    read_only: frozenset[str] = frozenset()

    @property
    def ok(self) -> bool:
        return self.failed_step is None

    @property
    def partial(self) -> bool:
        """A completed write step left effects behind but the workflow did not finish."""
        return not self.ok and any(name not in self.read_only for name in self.completed)


class Workflow:
    def __init__(self, name: str) -> None:
        self.name = name
        self._steps: list[tuple[str, Step]] = []
        self._read_only: set[str] = set()

    def step(self, name: str, fn: Step, *, writes: bool = True) -> Workflow:
        self._steps.append((name, fn))
        if not writes:
            self._read_only.add(name)
        return self

    async def run(self) -> WorkflowResult:
        result = WorkflowResult(
            self.name, [name for name, _ in self._steps], read_only=frozenset(self._read_only)
        )
        for name, fn in self._steps:
            try:
                await fn()
            except ABORTING as exc:
                result.failed_step = name
                result.error = exc
                break
            result.completed.append(name)

        if result.ok:
            logger.info("Workflow %s completed", self.name)
        elif result.partial:
            logger.warning(
                "Workflow %s failed at %r after %s; completed steps are not rolled back",
                self.name, result.failed_step, result.completed,
            )
        else:
            logger.info("Workflow %s aborted at %r: %s", self.name, result.failed_step, result.error)
        return result
