"""Replay a YAML event script through the reporter.

Script format::

    scenario: Login works
    policy: {strict: true}
    events:
      - step: user opens the page
      - result: passed
      - step: user logs in
      - result: pending
        message: waiting on the auth service
      - hook: undefined

or several scenarios under ``scenarios:``, each with the keys above.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import yaml

from step_notifier.config import policy_from_mapping
from step_notifier.engine.reporter import ScenarioReporter
from step_notifier.errors import (
    AssumptionViolatedError,
    PendingError,
    PolicyConfigError,
    ReplayScriptError,
)
from step_notifier.notify.sinks import MulticastSink, RecordingSink
from step_notifier.types import FAILED, PENDING, STATUSES, Policy, Result

if TYPE_CHECKING:
    from step_notifier.notify.notifier import NotificationSink
    from step_notifier.notify.sinks import Notification

EVENT_KINDS = ("step", "result", "hook")
SCRIPT_STATUSES = STATUSES | {"assumption"}

# ─── Script model ───


@dataclass
class ScriptEvent:
    kind: str  # step | result | hook
    value: str  # step text, or a status for result/hook
    message: str | None = None


@dataclass
class ScenarioScript:
    name: str
    events: list[ScriptEvent] = field(default_factory=list)
    policy: dict[str, Any] = field(default_factory=dict)


class ScenarioDescriptions:
    """Descriptions in the host's ``step(scenario)`` shape."""

    def __init__(self, name: str):
        self.name = name

    @property
    def description(self) -> str:
        return self.name

    def describe_child(self, step: Any) -> str:
        return f"{step}({self.name})"


# ─── Parsing ───

def parse_script(text: str) -> list[ScenarioScript]:
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ReplayScriptError(f"Invalid YAML: {e}") from e

    if not isinstance(raw, dict):
        raise ReplayScriptError("Script must be a mapping")

    if "scenarios" in raw:
        entries = raw["scenarios"]
        if not isinstance(entries, list) or not entries:
            raise ReplayScriptError("'scenarios' must be a non-empty list")
        return [_parse_scenario(entry, i) for i, entry in enumerate(entries)]
    return [_parse_scenario(raw, 0)]


def _parse_scenario(raw: Any, index: int) -> ScenarioScript:
    if not isinstance(raw, dict):
        raise ReplayScriptError(f"Scenario #{index + 1} must be a mapping")

    name = str(raw.get("scenario") or f"scenario {index + 1}")
    policy = raw.get("policy") or {}
    if not isinstance(policy, dict):
        raise ReplayScriptError(f"[{name}] 'policy' must be a mapping")

    events = raw.get("events") or []
    if not isinstance(events, list):
        raise ReplayScriptError(f"[{name}] 'events' must be a list")

    return ScenarioScript(
        name=name,
        events=[_parse_event(e, name) for e in events],
        policy=policy,
    )


def _parse_event(raw: Any, scenario: str) -> ScriptEvent:
    if not isinstance(raw, dict):
        raise ReplayScriptError(f"[{scenario}] event must be a mapping, got {raw!r}")

    kinds = [k for k in EVENT_KINDS if k in raw]
    if len(kinds) != 1:
        raise ReplayScriptError(
            f"[{scenario}] event needs exactly one of {', '.join(EVENT_KINDS)}: {raw!r}"
        )
    kind = kinds[0]
    value = str(raw[kind])
    if kind != "step":
        value = value.lower()
        if value not in SCRIPT_STATUSES:
            raise ReplayScriptError(f"[{scenario}] unknown status '{value}'")

    message = raw.get("message")
    return ScriptEvent(kind=kind, value=value, message=str(message) if message is not None else None)


def to_result(event: ScriptEvent) -> Result:
    """Build the runner result a script status stands for."""
    match event.value:
        case "failed":
            return Result(FAILED, AssertionError(event.message or "step failed"))
        case "pending":
            return Result(PENDING, PendingError(event.message) if event.message else PendingError())
        case "assumption":
            return Result(FAILED, AssumptionViolatedError(event.message or "assumption violated"))
        case status:
            return Result(status)


# ─── Running ───

def run_scenario(
    script: ScenarioScript,
    sink: NotificationSink,
    base: Policy | None = None,
) -> None:
    try:
        policy = policy_from_mapping(script.policy, base)
    except PolicyConfigError as e:
        raise ReplayScriptError(f"[{script.name}] {e}") from e

    reporter = ScenarioReporter(policy)
    reporter.start_execution_unit(ScenarioDescriptions(script.name), sink)
    for event in script.events:
        if event.kind == "step":
            reporter.step_started(event.value)
        elif event.kind == "result":
            reporter.step_result(to_result(event))
        else:
            reporter.hook_result(to_result(event))
    reporter.finish_execution_unit()


def replay(
    text: str,
    sink: NotificationSink | None = None,
    base: Policy | None = None,
) -> list[Notification]:
    """Run every scenario in ``text``; returns the notifications in order."""
    scripts = parse_script(text)
    recorder = RecordingSink()
    target: NotificationSink = recorder if sink is None else MulticastSink([recorder, sink])
    for script in scripts:
        run_scenario(script, target, base)
    return list(recorder.notifications)
