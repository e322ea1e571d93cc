from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, EmailStr, Field, ValidationInfo, computed_field, field_validator
from pydantic.alias_generators import to_camel

from exceptions import ComputationError
from services.financials import quantize_amount, quantize_rate
from utils.names import join_full_name

REQUIRED_TEXT_LABELS = {
    "first_name": "first name",
    "last_name": "last name",
    "phone_number": "phone number",
    "email": "email",
    "loan_type": "loan type",
}

OPTIONAL_TEXT_FIELDS = ("middle_name", "user_id", "purpose", "collateral")

MIN_LOAN_AMOUNT = Decimal("1000")


class LoanApplicationRequest(BaseModel):
    """Customer and loan details submitted by the frontend (camelCase or snake_case keys)."""

    # Customer
    first_name: str
    middle_name: Optional[str] = None
    last_name: str
    phone_number: str
    email: EmailStr
    user_id: Optional[str] = None

    # Loan
    loan_type: str
    loan_amount: Decimal
    interest_rate: Decimal
    loan_term_months: int
    purpose: Optional[str] = None
    collateral: Optional[str] = None

    model_config = {"alias_generator": to_camel, "populate_by_name": True}

    @field_validator(*REQUIRED_TEXT_LABELS, mode="before")
    @classmethod
    def _require_text(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValueError(f"{REQUIRED_TEXT_LABELS[info.field_name]} is required")
        return value.strip() if isinstance(value, str) else value

    @field_validator(*OPTIONAL_TEXT_FIELDS, mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip() or None
        return value

    # Amount and rate are rounded to their stored scale so EMI is computed on what gets persisted.
    @field_validator("loan_amount")
    @classmethod
    def _check_loan_amount(cls, value: Decimal) -> Decimal:
        try:
            value = quantize_amount(value)
        except ComputationError as e:
            raise ValueError("loan amount is too large") from e
        if value < MIN_LOAN_AMOUNT:
            raise ValueError("loan amount must be at least 1000")
        return value

    @field_validator("interest_rate")
    @classmethod
    def _check_interest_rate(cls, value: Decimal) -> Decimal:
        if value <= 0:
            raise ValueError("interest rate must be positive")
        try:
            value = quantize_rate(value)
        except ComputationError as e:
            raise ValueError("interest rate is too large") from e
        if value <= 0:
            raise ValueError("interest rate must be positive")
        return value

    @field_validator("loan_term_months")
    @classmethod
    def _check_loan_term(cls, value: int) -> int:
        if value < 1:
            raise ValueError("loan term must be at least 1 month")
        return value

    @property
    def full_name(self) -> str:
        return join_full_name(self.first_name, self.middle_name, self.last_name)


class LoanApplicationResponse(BaseModel):
    """Immutable snapshot of a loan application for API output."""

    id: Optional[int] = None

    first_name: str
    middle_name: Optional[str] = None
    last_name: str
    phone_number: str
    email: str
    user_id: Optional[str] = None

    loan_type: str
    loan_amount: Decimal
    interest_rate: Decimal
    loan_term_months: int
    monthly_emi: Decimal
    total_amount: Decimal
    status: str
    purpose: Optional[str] = None
    collateral: Optional[str] = None
    application_date: Optional[datetime] = None
    approval_date: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    submitted_at: Optional[datetime] = None

    model_config = {"alias_generator": to_camel, "populate_by_name": True, "frozen": True}

    @computed_field(alias="fullName")
    @property
    def full_name(self) -> str:
        return join_full_name(self.first_name, self.middle_name, self.last_name)


class EmiQuoteRequest(BaseModel):
    loan_amount: Decimal = Field(..., ge=MIN_LOAN_AMOUNT)
    interest_rate: Decimal = Field(..., gt=0)
    loan_term_months: int = Field(..., ge=1)

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class EmiQuoteResponse(BaseModel):
    loan_amount: Decimal
    interest_rate: Decimal
    loan_term_months: int
    monthly_emi: Decimal
    total_amount: Decimal
    total_interest: Decimal

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class ScheduleRowResponse(BaseModel):
    installment: int
    payment: Decimal
    principal: Decimal
    interest: Decimal
    balance: Decimal

    model_config = {"alias_generator": to_camel, "populate_by_name": True, "from_attributes": True}


class ApproveRequest(BaseModel):
    approval_date: Optional[datetime] = None

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class RejectRequest(BaseModel):
    reason: str = Field(..., min_length=1)

    @field_validator("reason")
    @classmethod
    def _strip_reason(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("rejection reason is required")
        return value
