"""
Tests for EMI / total amount computation and the amortization schedule.
Run from repo root: python -m pytest tests/test_financials.py -v
"""
import unittest
from decimal import Decimal

from exceptions import ComputationError, ValidationError
from services.financials import (
    MAX_SCHEDULE_INSTALLMENTS,
    amortization_schedule,
    compute_financials,
    quantize_amount,
    quantize_rate,
)


class TestComputeFinancials(unittest.TestCase):
    def test_reference_example(self):
        """120,000 at 10% over 12 months."""
        emi, total = compute_financials(Decimal("120000"), Decimal("10"), 12)
        self.assertEqual(emi, Decimal("10549.91"))
        self.assertEqual(total, Decimal("126598.92"))

    def test_total_is_rounded_emi_times_term(self):
        for amount in ("1000", "5000.50", "250000", "1234567.89"):
            for rate in ("0.1", "7.25", "12", "36"):
                for term in (1, 12, 60, 360):
                    with self.subTest(amount=amount, rate=rate, term=term):
                        emi, total = compute_financials(Decimal(amount), Decimal(rate), term)
                        self.assertGreater(emi, 0)
                        self.assertEqual(emi, emi.quantize(Decimal("0.01")))
                        self.assertEqual(total, (emi * term).quantize(Decimal("0.01")))

    def test_single_month_pays_principal_plus_one_month_interest(self):
        emi, total = compute_financials(Decimal("1000"), Decimal("12"), 1)
        self.assertEqual(emi, Decimal("1010.00"))
        self.assertEqual(total, Decimal("1010.00"))

    def test_zero_rate_splits_principal_evenly(self):
        emi, total = compute_financials(Decimal("1200"), Decimal("0"), 12)
        self.assertEqual(emi, Decimal("100.00"))
        self.assertEqual(total, Decimal("1200.00"))

    def test_rounds_half_up(self):
        # 1000 / 8 = 125.0 exactly; 1001 / 8 = 125.125 -> 125.13
        emi, _ = compute_financials(Decimal("1001"), Decimal("0"), 8)
        self.assertEqual(emi, Decimal("125.13"))

    def test_float_and_string_inputs_match_decimal(self):
        expected = compute_financials(Decimal("1000.1"), Decimal("8.5"), 24)
        self.assertEqual(compute_financials(1000.1, 8.5, 24), expected)
        self.assertEqual(compute_financials("1000.1", "8.5", 24), expected)

    def test_repeated_computation_is_stable(self):
        first = compute_financials(Decimal("98765.43"), Decimal("9.99"), 84)
        for _ in range(5):
            self.assertEqual(compute_financials(Decimal("98765.43"), Decimal("9.99"), 84), first)

    def test_non_positive_term_raises(self):
        for term in (0, -3):
            with self.subTest(term=term):
                with self.assertRaises(ComputationError):
                    compute_financials(Decimal("5000"), Decimal("10"), term)

    def test_non_positive_result_raises(self):
        with self.assertRaises(ComputationError):
            compute_financials(Decimal("-5000"), Decimal("10"), 12)

    def test_non_numeric_input_raises(self):
        with self.assertRaises(ComputationError):
            compute_financials("lots", Decimal("10"), 12)

    def test_tiny_positive_rate_approaches_even_split(self):
        for rate in ("1E-26", "1E-80"):
            with self.subTest(rate=rate):
                emi, total = compute_financials(Decimal("120000"), Decimal(rate), 12)
                self.assertEqual(emi, Decimal("10000.00"))
                self.assertEqual(total, Decimal("120000.00"))

    def test_huge_term_pays_interest_only(self):
        # (1+r)^N overflows; EMI converges to P * r
        emi, total = compute_financials(Decimal("120000"), Decimal("10"), 400_000_000)
        self.assertEqual(emi, Decimal("1000.00"))
        self.assertEqual(total, Decimal("400000000000.00"))

    def test_arithmetic_failure_becomes_computation_error(self):
        with self.assertRaises(ComputationError):
            compute_financials(Decimal("1E+999990"), Decimal("10"), 12)


class TestQuantize(unittest.TestCase):
    def test_amount_rounds_half_up_to_cents(self):
        self.assertEqual(quantize_amount(Decimal("1000.005")), Decimal("1000.01"))
        self.assertEqual(quantize_amount(Decimal("9999999.994999")), Decimal("9999999.99"))

    def test_rate_rounds_half_up_to_four_places(self):
        self.assertEqual(quantize_rate(Decimal("10.12345")), Decimal("10.1235"))
        self.assertEqual(quantize_rate(Decimal("10.12344999")), Decimal("10.1234"))

    def test_unrepresentable_value_raises(self):
        with self.assertRaises(ComputationError):
            quantize_amount(Decimal("1E+100"))


class TestAmortizationSchedule(unittest.TestCase):
    def test_schedule_pays_down_to_zero(self):
        rows = amortization_schedule(Decimal("120000"), Decimal("10"), 12)
        self.assertEqual(len(rows), 12)
        self.assertEqual([r.installment for r in rows], list(range(1, 13)))
        self.assertEqual(rows[-1].balance, Decimal("0.00"))
        self.assertEqual(sum(r.principal for r in rows), Decimal("120000.00"))

    def test_first_installment_split(self):
        rows = amortization_schedule(Decimal("120000"), Decimal("10"), 12)
        self.assertEqual(rows[0].payment, Decimal("10549.91"))
        self.assertEqual(rows[0].interest, Decimal("1000.00"))
        self.assertEqual(rows[0].principal, Decimal("9549.91"))
        self.assertEqual(rows[0].balance, Decimal("110450.09"))

    def test_interest_declines_each_month(self):
        rows = amortization_schedule(Decimal("50000"), Decimal("11"), 36)
        interests = [r.interest for r in rows]
        self.assertEqual(interests, sorted(interests, reverse=True))

    def test_last_payment_absorbs_rounding(self):
        emi, _ = compute_financials(Decimal("50000"), Decimal("11"), 36)
        rows = amortization_schedule(Decimal("50000"), Decimal("11"), 36)
        self.assertTrue(all(r.payment == emi for r in rows[:-1]))
        self.assertLess(abs(rows[-1].payment - emi), Decimal("1.00"))

    def test_schedule_length_is_capped(self):
        rows = amortization_schedule(Decimal("120000"), Decimal("10"), MAX_SCHEDULE_INSTALLMENTS)
        self.assertEqual(len(rows), MAX_SCHEDULE_INSTALLMENTS)
        with self.assertRaises(ValidationError) as ctx:
            amortization_schedule(Decimal("120000"), Decimal("10"), MAX_SCHEDULE_INSTALLMENTS + 1)
        self.assertEqual(ctx.exception.field, "loan_term_months")


if __name__ == "__main__":
    unittest.main()
