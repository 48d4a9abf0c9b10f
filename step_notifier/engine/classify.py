"""Outcome classification — turn a raw runner result into an Outcome."""
from __future__ import annotations

import unittest

from step_notifier.errors import AssumptionViolatedError, PendingError
from step_notifier.types import AMBIGUOUS, PASSED, PENDING, SKIPPED, UNDEFINED, Outcome, Result

DEFAULT_PENDING_TYPES: tuple[type[BaseException], ...] = (PendingError,)
DEFAULT_ASSUMPTION_TYPES: tuple[type[BaseException], ...] = (
    AssumptionViolatedError,
    unittest.SkipTest,
)


class OutcomeClassifier:
    def __init__(
        self,
        pending_types: tuple[type[BaseException], ...] = DEFAULT_PENDING_TYPES,
        assumption_types: tuple[type[BaseException], ...] = DEFAULT_ASSUMPTION_TYPES,
    ):
        self.pending_types = pending_types
        self.assumption_types = assumption_types

    def classify(self, result: Result) -> Outcome:
        """Classify by cause type first, then by status tag.

        An assumption or pending cause wins over whatever status the runner
        attached; any other cause is a failure unless the step is undefined.
        """
        error = result.error
        if error is not None and isinstance(error, self.assumption_types):
            return Outcome.assumption_violated(error)
        if error is not None and isinstance(error, self.pending_types):
            return Outcome.pending(error)
        if result.is_(UNDEFINED):
            return Outcome.undefined()
        if error is not None:
            return Outcome.failed(error)
        if result.is_(PENDING):
            return Outcome.pending()
        if result.is_(SKIPPED) or result.is_(AMBIGUOUS):
            return Outcome.skipped()
        if result.is_(PASSED):
            return Outcome.passed()
        # failed without a recorded cause
        return Outcome.failed(None)


_DEFAULT = OutcomeClassifier()


def classify(result: Result | Outcome) -> Outcome:
    """Classify with the default exception types; Outcomes pass through."""
    if isinstance(result, Outcome):
        return result
    return _DEFAULT.classify(result)
