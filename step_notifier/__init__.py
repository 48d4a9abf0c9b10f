"""Route behavior-driven step and hook outcomes to a test-reporting host."""
from step_notifier.engine import ExecutionUnit, OutcomeClassifier, ScenarioReporter, classify, translate
from step_notifier.errors import (
    AssumptionViolatedError,
    ExecutionUnitError,
    PendingError,
    PolicyConfigError,
)
from step_notifier.notify import NotificationSink, RecordingSink, UnitNotifier
from step_notifier.types import Outcome, Policy, Result

__all__ = [
    "AssumptionViolatedError",
    "ExecutionUnit",
    "ExecutionUnitError",
    "NotificationSink",
    "Outcome",
    "OutcomeClassifier",
    "PendingError",
    "Policy",
    "PolicyConfigError",
    "RecordingSink",
    "Result",
    "ScenarioReporter",
    "UnitNotifier",
    "classify",
    "translate",
]
