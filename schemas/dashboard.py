from decimal import Decimal

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from schemas.loan_application import LoanApplicationResponse


class DashboardSummary(BaseModel):
    total_applications: int
    pending_applications: int
    # Keyed by status name, e.g. {"SUBMITTED": 2, "APPROVED": 1, ...}
    status_counts: dict[str, int]
    total_requested: Decimal
    active_principal: Decimal
    monthly_obligation: Decimal
    recent_applications: list[LoanApplicationResponse] = Field(default_factory=list)

    model_config = {"alias_generator": to_camel, "populate_by_name": True}
