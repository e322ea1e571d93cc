from __future__ import annotations

from models import LoanApplication, LoanStatus
from schemas.loan_application import LoanApplicationResponse

# Entity attributes copied 1:1 into the response; status is handled separately.
RESPONSE_FIELDS = (
    "id",
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
    "monthly_emi",
    "total_amount",
    "purpose",
    "collateral",
    "application_date",
    "approval_date",
    "rejection_reason",
    "created_at",
    "updated_at",
    "submitted_at",
)


def to_response(loan: LoanApplication) -> LoanApplicationResponse:
    """Frozen snapshot of ``loan``; status is emitted by name, never by position."""
    data = {name: getattr(loan, name) for name in RESPONSE_FIELDS}
    data["status"] = LoanStatus(loan.status).value
    return LoanApplicationResponse(**data)
