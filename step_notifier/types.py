from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

# ─── Raw runner results ───

PASSED = "passed"
FAILED = "failed"
UNDEFINED = "undefined"
PENDING = "pending"
SKIPPED = "skipped"
AMBIGUOUS = "ambiguous"

STATUSES = frozenset({PASSED, FAILED, UNDEFINED, PENDING, SKIPPED, AMBIGUOUS})


@dataclass(frozen=True)
class Result:
    """A step or hook result as the runner reports it, before classification."""
    status: str  # passed | failed | undefined | pending | skipped | ambiguous
    error: BaseException | None = None

    def is_(self, status: str) -> bool:
        return self.status == status


# ─── Classified outcomes ───

ASSUMPTION_VIOLATED = "assumption_violated"


@dataclass(frozen=True)
class Outcome:
    kind: str  # passed | failed | undefined | pending | assumption_violated | skipped
    cause: BaseException | None = None  # forwarded to the sink, never inspected

    @classmethod
    def passed(cls) -> Outcome:
        return cls(PASSED)

    @classmethod
    def failed(cls, cause: BaseException | None) -> Outcome:
        return cls(FAILED, cause)

    @classmethod
    def undefined(cls) -> Outcome:
        return cls(UNDEFINED)

    @classmethod
    def pending(cls, cause: BaseException | None = None) -> Outcome:
        return cls(PENDING, cause)

    @classmethod
    def assumption_violated(cls, cause: BaseException | None) -> Outcome:
        return cls(ASSUMPTION_VIOLATED, cause)

    @classmethod
    def skipped(cls) -> Outcome:
        return cls(SKIPPED)


# ─── Origin ───

STEP = "step"
HOOK = "hook"


# ─── Policy ───

@dataclass(frozen=True)
class Policy:
    strict: bool = False
    allow_started_ignored: bool = False


# ─── Notification commands ───

START = "start"
FINISH = "finish"
FAIL = "fail"
IGNORE = "ignore"

SCENARIO = "scenario"
# STEP doubles as the step-level command target


@dataclass(frozen=True)
class Command:
    verb: str  # start | finish | fail | ignore
    target: str  # step | scenario
    cause: BaseException | None = None


@dataclass(frozen=True)
class UnitState:
    """Snapshot of the scenario state the translation depends on."""
    has_step: bool = False
    scenario_failed: bool = False
    deferred_ignore: bool = False


@dataclass(frozen=True)
class Translation:
    commands: tuple[Command, ...] = ()
    fails_scenario: bool = False
    defers_ignore: bool = False


# ─── Collaborators ───

class DescriptionProvider(Protocol):
    """Supplies the scenario description and a description per step."""

    @property
    def description(self) -> Any: ...

    def describe_child(self, step: Any) -> Any: ...
