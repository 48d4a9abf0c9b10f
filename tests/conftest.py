"""Shared fixtures for step-notifier tests."""
from __future__ import annotations

from typing import Any

import pytest

from step_notifier.engine.reporter import ScenarioReporter
from step_notifier.notify.notifier import UnitNotifier
from step_notifier.notify.sinks import RecordingSink
from step_notifier.types import Policy

SCENARIO = "Scenario: login"


class StubDescriptions:
    """Description provider: the scenario name, and ``step(scenario)`` per step."""

    def __init__(self, name: str = SCENARIO):
        self.name = name

    @property
    def description(self) -> str:
        return self.name

    def describe_child(self, step: Any) -> str:
        return f"{step}({self.name})"


class ReporterHarness:
    """Test harness for driving one execution unit against a recording sink.

    The unit is opened on construction; convenience methods forward to the
    reporter's public API and the sink is queried per description.
    """

    def __init__(self, *, strict: bool = False, allow_started_ignored: bool = False, open_unit: bool = True):
        self.policy = Policy(strict=strict, allow_started_ignored=allow_started_ignored)
        self.reporter = ScenarioReporter(self.policy)
        self.sink = RecordingSink()
        self.descriptions = StubDescriptions()
        if open_unit:
            self.reporter.start_execution_unit(self.descriptions, self.sink)

    @property
    def unit(self):
        return self.reporter.unit

    @property
    def scenario(self) -> str:
        return self.descriptions.description

    def step_description(self, step: str) -> str:
        return self.descriptions.describe_child(step)

    def start_step(self, step: str = "step name") -> str:
        self.reporter.step_started(step)
        return self.step_description(step)

    def attach_step(self, description: str = "attached step") -> UnitNotifier:
        """Install a step notifier directly, bypassing step_started."""
        notifier = UnitNotifier(self.sink, description)
        self.unit.step_notifier = notifier
        return notifier

    def step(self, result):
        return self.reporter.step_result(result)

    def hook(self, result):
        return self.reporter.hook_result(result)

    def close(self) -> None:
        self.reporter.finish_execution_unit()

    def verbs(self, description: str | None = None) -> list[str]:
        return self.sink.verbs(description)

    def failures(self, description: str | None = None) -> list:
        calls = self.sink.calls("fail")
        if description is None:
            return calls
        return [n for n in calls if n.description == description]


@pytest.fixture
def harness_factory():
    """Factory fixture creating ReporterHarness instances."""
    def _make(**kwargs) -> ReporterHarness:
        return ReporterHarness(**kwargs)
    return _make


@pytest.fixture
def harness() -> ReporterHarness:
    return ReporterHarness()


@pytest.fixture
def strict_harness() -> ReporterHarness:
    return ReporterHarness(strict=True)
