"""Per-customer summary of loan applications for the dashboard view."""
from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from models import LoanApplication, LoanStatus
from schemas.dashboard import DashboardSummary
from services.projection import to_response

# Loans the customer is currently repaying.
ACTIVE_STATUSES = frozenset({LoanStatus.DISBURSED})
PENDING_STATUSES = frozenset({LoanStatus.SUBMITTED, LoanStatus.UNDER_REVIEW})

RECENT_LIMIT = 5


def summarize(applications: Iterable[LoanApplication]) -> DashboardSummary:
    apps = list(applications)
    counts = {s.value: 0 for s in LoanStatus}
    total_requested = Decimal("0")
    active_principal = Decimal("0")
    monthly_obligation = Decimal("0")

    for app in apps:
        status = LoanStatus(app.status)
        counts[status.value] += 1
        total_requested += app.loan_amount
        if status in ACTIVE_STATUSES:
            active_principal += app.loan_amount
            monthly_obligation += app.monthly_emi

    recent = sorted(apps, key=lambda a: a.submitted_at, reverse=True)[:RECENT_LIMIT]
    return DashboardSummary(
        total_applications=len(apps),
        pending_applications=sum(counts[s.value] for s in PENDING_STATUSES),
        status_counts=counts,
        total_requested=total_requested,
        active_principal=active_principal,
        monthly_obligation=monthly_obligation,
        recent_applications=[to_response(a) for a in recent],
    )
