"""
Loan application lifecycle: creation from a validated request and status transitions.

Every transition computes the complete next state (status, approval_date,
rejection_reason), checks it, and only then assigns, so a failed call leaves
the entity exactly as it was.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from exceptions import InvalidTransitionError, ValidationError
from models import LoanApplication, LoanStatus
from schemas.loan_application import LoanApplicationRequest
from services.financials import compute_financials

logger = logging.getLogger(__name__)

# Request fields copied onto a new entity, in assignment order.
REQUEST_TO_ENTITY_FIELDS = (
    "first_name",
    "middle_name",
    "last_name",
    "phone_number",
    "email",
    "user_id",
    "loan_type",
    "loan_amount",
    "interest_rate",
    "loan_term_months",
    "purpose",
    "collateral",
)

ALLOWED_TRANSITIONS: dict[LoanStatus, frozenset[LoanStatus]] = {
    LoanStatus.SUBMITTED: frozenset({LoanStatus.UNDER_REVIEW, LoanStatus.APPROVED, LoanStatus.REJECTED}),
    LoanStatus.UNDER_REVIEW: frozenset({LoanStatus.APPROVED, LoanStatus.REJECTED}),
    LoanStatus.APPROVED: frozenset({LoanStatus.DISBURSED}),
    LoanStatus.DISBURSED: frozenset({LoanStatus.CLOSED}),
    LoanStatus.REJECTED: frozenset(),
    LoanStatus.CLOSED: frozenset(),
}

_KEEP = object()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def create_from_request(request: LoanApplicationRequest, *, now: Optional[datetime] = None) -> LoanApplication:
    """Build a SUBMITTED entity from a validated request; EMI/total are computed on assignment."""
    now = now or _now()
    loan = LoanApplication(
        **{name: getattr(request, name) for name in REQUEST_TO_ENTITY_FIELDS},
        application_date=now,
        submitted_at=now,
        updated_at=now,
    )
    loan._apply_state(LoanStatus.SUBMITTED, None, None)
    logger.info(
        "Created loan application for user=%s: type=%s amount=%s term=%s emi=%s",
        loan.user_id,
        loan.loan_type,
        loan.loan_amount,
        loan.loan_term_months,
        loan.monthly_emi,
    )
    return loan


def recompute_financials(loan: LoanApplication) -> None:
    """Recompute monthly EMI and total amount from the current terms. Idempotent."""
    emi, total = compute_financials(loan.loan_amount, loan.interest_rate, loan.loan_term_months)
    if emi != loan.monthly_emi or total != loan.total_amount:
        loan._store_financials(emi, total)


def transition(
    loan: LoanApplication,
    status: LoanStatus,
    *,
    approval_date=_KEEP,
    rejection_reason=_KEEP,
    now: Optional[datetime] = None,
) -> LoanApplication:
    """
    Move ``loan`` to ``status``. approval_date / rejection_reason default to the
    current values; pass them explicitly to set (or clear with None).
    """
    status = LoanStatus(status)
    current = LoanStatus(loan.status)
    if status not in ALLOWED_TRANSITIONS[current]:
        raise InvalidTransitionError(current.value, status.value)

    next_approval = loan.approval_date if approval_date is _KEEP else approval_date
    next_reason = loan.rejection_reason if rejection_reason is _KEEP else rejection_reason
    loan._apply_state(status, next_approval, next_reason)
    loan.updated_at = now or _now()
    logger.info("Loan application %s moved %s -> %s", loan.id, current.value, status.value)
    return loan


def start_review(loan: LoanApplication) -> LoanApplication:
    return transition(loan, LoanStatus.UNDER_REVIEW)


def approve(loan: LoanApplication, approval_date: Optional[datetime] = None) -> LoanApplication:
    """Approve the application; approval_date defaults to now. Rejection reason is left untouched."""
    now = _now()
    return transition(loan, LoanStatus.APPROVED, approval_date=approval_date or now, now=now)


def reject(loan: LoanApplication, reason: str) -> LoanApplication:
    """Reject with a non-blank reason. Approval date is left untouched."""
    if reason is None or not reason.strip():
        raise ValidationError("rejection_reason", "rejection reason is required")
    return transition(loan, LoanStatus.REJECTED, rejection_reason=reason.strip())


def disburse(loan: LoanApplication) -> LoanApplication:
    return transition(loan, LoanStatus.DISBURSED)


def close(loan: LoanApplication) -> LoanApplication:
    return transition(loan, LoanStatus.CLOSED)
