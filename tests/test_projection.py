"""
Tests for the response snapshot and the shared full-name join.
"""
import unittest
from datetime import datetime, timezone
from decimal import Decimal

import pydantic

from models import LoanStatus
from services import loan_lifecycle
from services.intake import validate_request
from services.projection import RESPONSE_FIELDS, to_response
from utils.names import join_full_name

CREATED = datetime(2026, 2, 1, 12, 0, tzinfo=timezone.utc)


def _loan(**overrides):
    data = {
        "firstName": "Jane",
        "lastName": "Doe",
        "phoneNumber": "+1-555-0100",
        "email": "jane.doe@example.com",
        "loanType": "HOME",
        "loanAmount": "120000",
        "interestRate": "10",
        "loanTermMonths": 12,
    }
    data.update(overrides)
    return loan_lifecycle.create_from_request(validate_request(data), now=CREATED)


class TestJoinFullName(unittest.TestCase):
    def test_blank_or_missing_middle_name(self):
        self.assertEqual(join_full_name("Jane", "", "Doe"), "Jane Doe")
        self.assertEqual(join_full_name("Jane", None, "Doe"), "Jane Doe")
        self.assertEqual(join_full_name("Jane", "   ", "Doe"), "Jane Doe")

    def test_middle_name_included(self):
        self.assertEqual(join_full_name("Jane", "Quinn", "Doe"), "Jane Quinn Doe")

    def test_never_leading_trailing_or_double_spaces(self):
        self.assertEqual(join_full_name(None, "Quinn", "Doe"), "Quinn Doe")
        self.assertEqual(join_full_name("Jane", None, None), "Jane")
        self.assertEqual(join_full_name(" Jane ", " Q ", " Doe "), "Jane Q Doe")
        self.assertEqual(join_full_name(None, None, None), "")


class TestToResponse(unittest.TestCase):
    def test_copies_every_declared_field(self):
        loan = _loan(middleName="Q", purpose="Flat", collateral="Deposit", userId="u-1")
        response = to_response(loan)
        for name in RESPONSE_FIELDS:
            with self.subTest(field=name):
                self.assertEqual(getattr(response, name), getattr(loan, name))

    def test_status_is_textual(self):
        loan = _loan()
        loan_lifecycle.start_review(loan)
        response = to_response(loan)
        self.assertEqual(response.status, "UNDER_REVIEW")
        self.assertIsInstance(response.status, str)
        self.assertNotIsInstance(response.status, LoanStatus)

    def test_full_name_derived(self):
        loan = _loan()
        loan.middle_name = ""
        self.assertEqual(to_response(loan).full_name, "Jane Doe")
        loan.middle_name = "Q"
        self.assertEqual(to_response(loan).full_name, "Jane Q Doe")

    def test_snapshot_is_frozen(self):
        response = to_response(_loan())
        with self.assertRaises(pydantic.ValidationError):
            response.status = "APPROVED"

    def test_snapshot_detached_from_entity(self):
        loan = _loan()
        response = to_response(loan)
        loan_lifecycle.reject(loan, "Too risky")
        self.assertEqual(response.status, "SUBMITTED")
        self.assertIsNone(response.rejection_reason)

    def test_projection_does_not_mutate_entity(self):
        loan = _loan()
        before = {name: getattr(loan, name) for name in RESPONSE_FIELDS}
        to_response(loan)
        self.assertEqual({name: getattr(loan, name) for name in RESPONSE_FIELDS}, before)
        self.assertIs(loan.status, LoanStatus.SUBMITTED)

    def test_camel_case_serialization(self):
        data = to_response(_loan()).model_dump(by_alias=True, mode="json")
        self.assertEqual(data["fullName"], "Jane Doe")
        self.assertEqual(data["status"], "SUBMITTED")
        self.assertEqual(Decimal(str(data["monthlyEmi"])), Decimal("10549.91"))
        self.assertEqual(Decimal(str(data["totalAmount"])), Decimal("126598.92"))
        self.assertIn("loanTermMonths", data)
        self.assertIn("submittedAt", data)


if __name__ == "__main__":
    unittest.main()
