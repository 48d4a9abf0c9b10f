"""Exception types shared across the package."""
from __future__ import annotations


class PendingError(Exception):
    """Marks a step or hook as not implemented yet.

    Also the cause synthesized for undefined steps when they fail in strict mode.
    """

    def __init__(self, message: str = "TODO: implement me"):
        super().__init__(message)


class AssumptionViolatedError(Exception):
    """Raised by a step whose preconditions do not hold."""


class ExecutionUnitError(RuntimeError):
    """The reporter was driven out of order (no open unit, double close, ...)."""


class PolicyConfigError(ValueError):
    """Unknown option or malformed policy configuration."""


class ReplayScriptError(ValueError):
    """Malformed replay script."""
