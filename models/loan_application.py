from __future__ import annotations

import enum
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import Column, Enum, Integer, Numeric, String, Text
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import validates

from database import Base
from exceptions import ComputationError, StateInconsistencyError, ValidationError
from models.types import UtcDateTime, as_utc
from services.financials import as_decimal, compute_financials, quantize_amount, quantize_rate

MIN_LOAN_AMOUNT = Decimal("1000")

TERM_FIELDS = ("loan_amount", "interest_rate", "loan_term_months")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LoanStatus(str, enum.Enum):
    SUBMITTED = "SUBMITTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    DISBURSED = "DISBURSED"
    CLOSED = "CLOSED"

    @property
    def is_approved(self) -> bool:
        return self in APPROVED_STATUSES

    @property
    def is_rejected(self) -> bool:
        return self is LoanStatus.REJECTED


APPROVED_STATUSES = frozenset({LoanStatus.APPROVED, LoanStatus.DISBURSED, LoanStatus.CLOSED})


def check_loan_amount(value) -> Decimal:
    """Amount rounded to the stored 2 places, then range-checked."""
    try:
        amount = as_decimal(value)
    except ComputationError as e:
        raise ValidationError("loan_amount", "loan amount must be a number") from e
    if not amount.is_finite() or amount < MIN_LOAN_AMOUNT:
        raise ValidationError("loan_amount", "loan amount must be at least 1000")
    try:
        amount = quantize_amount(amount)
    except ComputationError as e:
        raise ValidationError("loan_amount", "loan amount is too large") from e
    if amount < MIN_LOAN_AMOUNT:
        raise ValidationError("loan_amount", "loan amount must be at least 1000")
    return amount


def check_interest_rate(value) -> Decimal:
    """Rate rounded to the stored 4 places; a rate that rounds to zero is not positive."""
    try:
        rate = as_decimal(value)
    except ComputationError as e:
        raise ValidationError("interest_rate", "interest rate must be a number") from e
    if not rate.is_finite() or rate <= 0:
        raise ValidationError("interest_rate", "interest rate must be positive")
    try:
        rate = quantize_rate(rate)
    except ComputationError as e:
        raise ValidationError("interest_rate", "interest rate is too large") from e
    if rate <= 0:
        raise ValidationError("interest_rate", "interest rate must be positive")
    return rate


def check_loan_term(value) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value < 1:
        raise ValidationError("loan_term_months", "loan term must be at least 1 month")
    return value


_TERM_CHECKS = {
    "loan_amount": check_loan_amount,
    "interest_rate": check_interest_rate,
    "loan_term_months": check_loan_term,
}


def check_consistency(
    status: LoanStatus,
    approval_date: Optional[datetime],
    rejection_reason: Optional[str],
) -> None:
    """approval_date is set iff status is approved-family; rejection_reason is set iff REJECTED."""
    approved = status.is_approved
    if approved and approval_date is None:
        raise StateInconsistencyError(f"Status {status.value} requires an approval date")
    if not approved and approval_date is not None:
        raise StateInconsistencyError(f"Approval date cannot be set while status is {status.value}")
    rejected = status.is_rejected
    if rejected and rejection_reason is None:
        raise StateInconsistencyError("Status REJECTED requires a rejection reason")
    if not rejected and rejection_reason is not None:
        raise StateInconsistencyError(f"Rejection reason cannot be set while status is {status.value}")


class LoanApplication(Base):
    __tablename__ = "loan_applications"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Customer
    first_name = Column(String(100), nullable=False)
    middle_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=False)
    phone_number = Column(String(32), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    user_id = Column(String(64), nullable=True, index=True)

    # Loan terms
    loan_type = Column(String(64), nullable=False, index=True)
    loan_amount = Column(Numeric(15, 2), nullable=False)
    interest_rate = Column(Numeric(7, 4), nullable=False)
    loan_term_months = Column(Integer, nullable=False)
    purpose = Column(Text, nullable=True)
    collateral = Column(Text, nullable=True)

    # Derived from the three terms above; read through the properties below
    _monthly_emi = Column("monthly_emi", Numeric(15, 2), nullable=False)
    _total_amount = Column("total_amount", Numeric(15, 2), nullable=False)

    # Lifecycle; written together through _apply_state
    _status = Column(
        "status",
        Enum(LoanStatus, name="loan_status", native_enum=False, length=32),
        nullable=False,
        default=LoanStatus.SUBMITTED,
        index=True,
    )
    _approval_date = Column("approval_date", UtcDateTime(timezone=True), nullable=True)
    _rejection_reason = Column("rejection_reason", Text, nullable=True)
    application_date = Column(UtcDateTime(timezone=True), nullable=False)
    submitted_at = Column(UtcDateTime(timezone=True), nullable=False)

    created_at = Column(UtcDateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(UtcDateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    @property
    def monthly_emi(self) -> Decimal | None:
        return self._monthly_emi

    @property
    def total_amount(self) -> Decimal | None:
        return self._total_amount

    def _store_financials(self, monthly_emi: Decimal, total_amount: Decimal) -> None:
        self._monthly_emi = monthly_emi
        self._total_amount = total_amount

    @hybrid_property
    def status(self) -> LoanStatus | None:
        return self._status

    @status.setter
    def status(self, value) -> None:
        self._apply_state(value, self._approval_date, self._rejection_reason)

    @property
    def approval_date(self) -> datetime | None:
        return self._approval_date

    @approval_date.setter
    def approval_date(self, value: datetime | None) -> None:
        self._apply_state(self._status, value, self._rejection_reason)

    @property
    def rejection_reason(self) -> str | None:
        return self._rejection_reason

    @rejection_reason.setter
    def rejection_reason(self, value: str | None) -> None:
        self._apply_state(self._status, self._approval_date, value)

    def _apply_state(self, status, approval_date: datetime | None, rejection_reason: str | None) -> None:
        """Check the complete lifecycle state, then write all three fields."""
        status = LoanStatus(status)
        approval_date = as_utc(approval_date)
        check_consistency(status, approval_date, rejection_reason)
        self._status = status
        self._approval_date = approval_date
        self._rejection_reason = rejection_reason

    @validates(*TERM_FIELDS)
    def _validate_term(self, key, value):
        """Range-check a financial term and refresh EMI/total before the new value lands."""
        value = _TERM_CHECKS[key](value)
        terms = {name: getattr(self, name) for name in TERM_FIELDS}
        terms[key] = value
        if all(v is not None for v in terms.values()):
            self._store_financials(
                *compute_financials(terms["loan_amount"], terms["interest_rate"], terms["loan_term_months"])
            )
        return value

    @validates("application_date", "submitted_at")
    def _validate_immutable(self, key, value):
        value = as_utc(value)
        current = getattr(self, key)
        if current is not None and value != current:
            raise StateInconsistencyError(f"{key} cannot be changed once set", {"field": key})
        return value

    def __repr__(self) -> str:
        return f"<LoanApplication id={self.id} status={self.status} amount={self.loan_amount}>"
