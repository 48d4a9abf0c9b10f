"""Scenario reporter — drives one execution unit at a time.

The runner calls, in order:

    reporter.start_execution_unit(provider, sink)
    reporter.step_started(step) / step_result(result) / hook_result(result) ...
    reporter.finish_execution_unit()

Each result is classified, translated by the pure decision table in
``engine.translate`` and the resulting commands are applied to the unit's
notifiers.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from step_notifier.engine.classify import OutcomeClassifier
from step_notifier.engine.translate import translate, translate_close
from step_notifier.errors import ExecutionUnitError
from step_notifier.notify.notifier import UnitNotifier
from step_notifier.types import (
    HOOK,
    SCENARIO,
    STEP,
    Outcome,
    Policy,
    Result,
    Translation,
    UnitState,
)

if TYPE_CHECKING:
    from step_notifier.notify.notifier import NotificationSink
    from step_notifier.types import Command, DescriptionProvider

logger = logging.getLogger(__name__)


@dataclass
class ExecutionUnit:
    """Notification state of one scenario execution."""
    provider: DescriptionProvider
    scenario_notifier: UnitNotifier
    step_notifier: UnitNotifier | None = None
    scenario_failed: bool = False
    deferred_ignore: bool = False
    closed: bool = False

    @classmethod
    def open(cls, provider: DescriptionProvider, sink: NotificationSink) -> ExecutionUnit:
        return cls(provider=provider, scenario_notifier=UnitNotifier(sink, provider.description))

    @property
    def sink(self) -> NotificationSink:
        return self.scenario_notifier.sink

    def state(self) -> UnitState:
        return UnitState(
            has_step=self.step_notifier is not None,
            scenario_failed=self.scenario_failed,
            deferred_ignore=self.deferred_ignore,
        )

    def notifier_for(self, target: str) -> UnitNotifier | None:
        if target == SCENARIO:
            return self.scenario_notifier
        return self.step_notifier

    def apply(self, translation: Translation) -> None:
        for command in translation.commands:
            self._run(command)
        if translation.fails_scenario:
            self.scenario_failed = True
        if translation.defers_ignore:
            self.deferred_ignore = True

    def _run(self, command: Command) -> None:
        notifier = self.notifier_for(command.target)
        if notifier is None:
            raise ExecutionUnitError(f"No active {command.target} notifier for {command.verb}")
        match command.verb:
            case "start":
                notifier.start()
            case "finish":
                notifier.finish()
            case "fail":
                notifier.fail(command.cause)
            case "ignore":
                notifier.ignore()
            case _:
                raise ValueError(f"Unknown notification verb: {command.verb!r}")


class ScenarioReporter:
    """Routes step and hook results of one scenario at a time to a sink."""

    def __init__(self, policy: Policy | None = None, classifier: OutcomeClassifier | None = None):
        self.policy = policy or Policy()
        self.classifier = classifier or OutcomeClassifier()
        self.unit: ExecutionUnit | None = None

    @property
    def allow_started_ignored(self) -> bool:
        return self.policy.allow_started_ignored

    # ─── Unit lifecycle ───

    def start_execution_unit(self, provider: DescriptionProvider, sink: NotificationSink) -> ExecutionUnit:
        if self.unit is not None:
            raise ExecutionUnitError(
                f"Execution unit {self.unit.scenario_notifier.description!r} is still open"
            )
        unit = ExecutionUnit.open(provider, sink)
        self.unit = unit
        logger.debug("opened execution unit %s (policy=%s)", provider.description, self.policy)
        if self.allow_started_ignored:
            unit.scenario_notifier.start()
        return unit

    def finish_execution_unit(self) -> None:
        unit = self._require_unit("finish_execution_unit")
        translation = translate_close(unit.state())
        if unit.deferred_ignore and unit.scenario_failed:
            logger.info(
                "scenario %s failed, dropping deferred ignore",
                unit.scenario_notifier.description,
            )
        unit.apply(translation)
        unit.deferred_ignore = False
        unit.step_notifier = None
        unit.closed = True
        self.unit = None
        logger.debug("closed execution unit %s", unit.scenario_notifier.description)

    # ─── Events ───

    def step_started(self, step: Any) -> UnitNotifier:
        unit = self._require_unit("step_started")
        notifier = UnitNotifier(unit.sink, unit.provider.describe_child(step))
        unit.step_notifier = notifier
        if self.allow_started_ignored:
            notifier.start()
        return notifier

    def step_result(self, result: Result | Outcome) -> Translation:
        unit = self._require_unit("step_result")
        translation = self.handle(unit, self._outcome(result), STEP)
        unit.step_notifier = None
        return translation

    def hook_result(self, result: Result | Outcome) -> Translation:
        unit = self._require_unit("hook_result")
        return self.handle(unit, self._outcome(result), HOOK)

    def handle(self, unit: ExecutionUnit, outcome: Outcome, origin: str) -> Translation:
        """Translate one outcome against ``unit`` and apply it."""
        translation = translate(outcome, origin, self.policy, unit.state())
        logger.debug(
            "%s outcome %s -> %s",
            origin,
            outcome.kind,
            ", ".join(f"{c.verb}:{c.target}" for c in translation.commands) or "nothing",
        )
        unit.apply(translation)
        return translation

    # ─── Helpers ───

    def _outcome(self, result: Result | Outcome) -> Outcome:
        if isinstance(result, Outcome):
            return result
        return self.classifier.classify(result)

    def _require_unit(self, operation: str) -> ExecutionUnit:
        if self.unit is None:
            raise ExecutionUnitError(f"{operation} called without an open execution unit")
        return self.unit


__all__ = ["ExecutionUnit", "ScenarioReporter"]
