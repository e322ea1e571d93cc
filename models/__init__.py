from models.loan_application import APPROVED_STATUSES, LoanApplication, LoanStatus

__all__ = [
    "APPROVED_STATUSES",
    "LoanApplication",
    "LoanStatus",
]
