import unittest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from services import loan_lifecycle
from services.dashboard import RECENT_LIMIT, summarize
from services.intake import validate_request

START = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _loan(amount: str, day: int):
    request = validate_request(
        {
            "firstName": "Ravi",
            "lastName": "Kumar",
            "phoneNumber": "9820000000",
            "email": "ravi.kumar@example.com",
            "loanType": "PERSONAL",
            "loanAmount": amount,
            "interestRate": "12",
            "loanTermMonths": 12,
        }
    )
    return loan_lifecycle.create_from_request(request, now=START + timedelta(days=day))


class TestSummarize(unittest.TestCase):
    def test_empty(self):
        summary = summarize([])
        self.assertEqual(summary.total_applications, 0)
        self.assertEqual(summary.pending_applications, 0)
        self.assertEqual(summary.total_requested, Decimal("0"))
        self.assertEqual(set(summary.status_counts.values()), {0})
        self.assertEqual(summary.recent_applications, [])

    def test_counts_and_totals(self):
        submitted = _loan("10000", 1)
        reviewing = _loan("20000", 2)
        loan_lifecycle.start_review(reviewing)
        disbursed = _loan("50000", 3)
        loan_lifecycle.approve(disbursed)
        loan_lifecycle.disburse(disbursed)
        rejected = _loan("5000", 4)
        loan_lifecycle.reject(rejected, "Low score")

        summary = summarize([submitted, reviewing, disbursed, rejected])
        self.assertEqual(summary.total_applications, 4)
        self.assertEqual(summary.pending_applications, 2)
        self.assertEqual(summary.status_counts["SUBMITTED"], 1)
        self.assertEqual(summary.status_counts["UNDER_REVIEW"], 1)
        self.assertEqual(summary.status_counts["DISBURSED"], 1)
        self.assertEqual(summary.status_counts["REJECTED"], 1)
        self.assertEqual(summary.status_counts["APPROVED"], 0)
        self.assertEqual(summary.total_requested, Decimal("85000"))
        self.assertEqual(summary.active_principal, Decimal("50000"))
        self.assertEqual(summary.monthly_obligation, disbursed.monthly_emi)

    def test_recent_applications_newest_first(self):
        loans = [_loan("1000", day) for day in range(RECENT_LIMIT + 2)]
        summary = summarize(loans)
        self.assertEqual(len(summary.recent_applications), RECENT_LIMIT)
        dates = [r.submitted_at for r in summary.recent_applications]
        self.assertEqual(dates, sorted(dates, reverse=True))
        self.assertEqual(dates[0], START + timedelta(days=RECENT_LIMIT + 1))


if __name__ == "__main__":
    unittest.main()
