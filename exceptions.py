"""Domain exceptions for loan applications."""
from __future__ import annotations

from typing import Any, Optional


class LoanApplicationError(Exception):
    """Base exception for all loan application errors."""

    code = "loan_application_error"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ValidationError(LoanApplicationError):
    """Malformed or out-of-range input, rejected before it reaches an entity.

    ``field`` names the first failing field; ``errors`` lists every failure
    as ``{"field": ..., "message": ...}`` dicts.
    """

    code = "validation_error"

    def __init__(self, field: str, message: str, errors: Optional[list[dict[str, str]]] = None):
        super().__init__(message, {"field": field})
        self.field = field
        self.errors = errors or [{"field": field, "message": message}]


class StateInconsistencyError(LoanApplicationError):
    """A lifecycle change would break the status/approval/rejection invariants."""

    code = "state_inconsistency"


class InvalidTransitionError(StateInconsistencyError):
    """The requested status is not reachable from the current one."""

    code = "invalid_transition"

    def __init__(self, current: str, target: str):
        super().__init__(
            f"Cannot move loan application from {current} to {target}",
            {"current": current, "target": target},
        )
        self.current = current
        self.target = target


class ComputationError(LoanApplicationError):
    """EMI computation produced a non-finite or non-positive result."""

    code = "computation_error"
