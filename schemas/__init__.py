from schemas.dashboard import DashboardSummary
from schemas.loan_application import (
    ApproveRequest,
    EmiQuoteRequest,
    EmiQuoteResponse,
    LoanApplicationRequest,
    LoanApplicationResponse,
    RejectRequest,
    ScheduleRowResponse,
)

__all__ = [
    "ApproveRequest",
    "DashboardSummary",
    "EmiQuoteRequest",
    "EmiQuoteResponse",
    "LoanApplicationRequest",
    "LoanApplicationResponse",
    "RejectRequest",
    "ScheduleRowResponse",
]
