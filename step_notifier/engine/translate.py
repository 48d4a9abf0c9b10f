"""Outcome → notification translation.

Pure decision table: given an outcome, where it came from, the policy and the
current scenario state, return the ordered notification commands plus the
state updates.  The reporter applies the result; nothing here touches a sink.

  Step outcomes:
    passed          start + finish on the step (finish only when the step was
                    started eagerly under allow_started_ignored)
    failed          fail on the step, or on the scenario when no step is active
    soft failure    non-strict: ignore the step
                    strict: start + fail step + fail scenario + finish step
    skipped         ignore the step

  Hook outcomes act on the scenario only; non-strict soft failures defer an
  ignore until the unit closes.
"""
from __future__ import annotations

from step_notifier.errors import PendingError
from step_notifier.types import (
    FAIL,
    FINISH,
    HOOK,
    IGNORE,
    SCENARIO,
    START,
    STEP,
    Command,
    Outcome,
    Policy,
    Translation,
    UnitState,
)

NOTHING = Translation()


def translate(outcome: Outcome, origin: str, policy: Policy, state: UnitState) -> Translation:
    if origin == STEP:
        return _translate_step(outcome, policy, state)
    if origin == HOOK:
        return _translate_hook(outcome, policy)
    raise ValueError(f"Unknown outcome origin: {origin!r}")


def translate_close(state: UnitState) -> Translation:
    """A deferred ignore only survives if nothing failed the scenario."""
    if state.deferred_ignore and not state.scenario_failed:
        return Translation(commands=(Command(IGNORE, SCENARIO),))
    return NOTHING


def failure_cause(outcome: Outcome) -> BaseException:
    """The cause to report for a failing outcome; undefined steps get a PendingError."""
    if outcome.cause is not None:
        return outcome.cause
    return PendingError()


# ─── Steps ───

def _translate_step(outcome: Outcome, policy: Policy, state: UnitState) -> Translation:
    match outcome.kind:
        case "passed":
            if not state.has_step:
                return NOTHING
            return Translation(commands=(*_step_start(policy), Command(FINISH, STEP)))

        case "failed":
            target = STEP if state.has_step else SCENARIO
            return Translation(
                commands=(Command(FAIL, target, outcome.cause),),
                fails_scenario=True,
            )

        case "undefined" | "pending" | "assumption_violated":
            if not policy.strict:
                return _ignore_step(state)
            cause = failure_cause(outcome)
            commands: list[Command] = []
            if state.has_step:
                commands.extend(_step_start(policy))
                commands.append(Command(FAIL, STEP, cause))
            commands.append(Command(FAIL, SCENARIO, cause))
            if state.has_step:
                commands.append(Command(FINISH, STEP))
            return Translation(commands=tuple(commands), fails_scenario=True)

        case "skipped":
            return _ignore_step(state)

    raise ValueError(f"Unknown outcome kind: {outcome.kind!r}")


def _step_start(policy: Policy) -> tuple[Command, ...]:
    # Under allow_started_ignored the step was already started by step_started
    if policy.allow_started_ignored:
        return ()
    return (Command(START, STEP),)


def _ignore_step(state: UnitState) -> Translation:
    if not state.has_step:
        return NOTHING
    return Translation(commands=(Command(IGNORE, STEP),))


# ─── Hooks ───

def _translate_hook(outcome: Outcome, policy: Policy) -> Translation:
    match outcome.kind:
        case "failed":
            return Translation(
                commands=(Command(FAIL, SCENARIO, outcome.cause),),
                fails_scenario=True,
            )

        case "undefined" | "pending" | "assumption_violated":
            if policy.strict:
                return Translation(
                    commands=(Command(FAIL, SCENARIO, failure_cause(outcome)),),
                    fails_scenario=True,
                )
            return Translation(defers_ignore=True)

        case "passed" | "skipped":
            return NOTHING

    raise ValueError(f"Unknown outcome kind: {outcome.kind!r}")
