"""
EMI and total repayable amount under reducing-balance amortization.
All arithmetic is Decimal; results are rounded half-up to 2 places.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, Overflow, ROUND_HALF_UP, localcontext
from typing import Any

from exceptions import ComputationError, ValidationError

TWOPLACES = Decimal("0.01")
RATE_PLACES = Decimal("0.0001")
ZERO = Decimal("0")
ONE = Decimal("1")

# Working precision for the power term; tiny monthly rates need more than the default 28 digits.
PRECISION = 60

MAX_SCHEDULE_INSTALLMENTS = 1200


@dataclass(frozen=True)
class ScheduleRow:
    installment: int
    payment: Decimal
    principal: Decimal
    interest: Decimal
    balance: Decimal


def as_decimal(value: Any) -> Decimal:
    """Coerce int/float/str to Decimal through its string form (no binary float drift)."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ComputationError(f"Expected a number, got {value!r}")
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ComputationError(f"Expected a number, got {value!r}") from e


def _round(value: Decimal, places: Decimal = TWOPLACES) -> Decimal:
    return value.quantize(places, rounding=ROUND_HALF_UP)


def _quantize(value: Decimal, places: Decimal) -> Decimal:
    try:
        with localcontext() as ctx:
            ctx.prec = PRECISION
            return _round(value, places)
    except InvalidOperation as e:
        raise ComputationError(f"Cannot store {value} with {-places.as_tuple().exponent} decimal places") from e


def quantize_amount(value: Decimal) -> Decimal:
    """Round a currency amount to the stored scale (2 places)."""
    return _quantize(value, TWOPLACES)


def quantize_rate(value: Decimal) -> Decimal:
    """Round an annual percentage rate to the stored scale (4 places)."""
    return _quantize(value, RATE_PLACES)


def monthly_rate(annual_rate_percent: Decimal) -> Decimal:
    return annual_rate_percent / Decimal("12") / Decimal("100")


def _installment(principal: Decimal, rate: Decimal, n: int) -> Decimal:
    if rate == 0:
        return principal / Decimal(n)
    try:
        factor = (ONE + rate) ** n
    except Overflow:
        # factor / (factor - 1) tends to 1
        return principal * rate
    if factor == ONE:
        return principal / Decimal(n)
    return principal * rate * factor / (factor - ONE)


def compute_financials(loan_amount: Any, interest_rate: Any, term_months: int) -> tuple[Decimal, Decimal]:
    """
    Return (monthly_emi, total_amount) for principal P, annual rate R (percent) and N months.

    emi = P * r * (1+r)^N / ((1+r)^N - 1), r = R/12/100; emi = P/N when r == 0.
    total = emi * N, using the already-rounded emi.
    """
    principal = as_decimal(loan_amount)
    annual_rate = as_decimal(interest_rate)
    if not isinstance(term_months, int) or isinstance(term_months, bool) or term_months < 1:
        raise ComputationError(f"Loan term must be a positive whole number of months, got {term_months!r}")
    n = int(term_months)

    try:
        with localcontext() as ctx:
            ctx.prec = PRECISION
            emi = _installment(principal, monthly_rate(annual_rate), n)
            if not emi.is_finite() or emi <= 0:
                raise ComputationError(
                    f"EMI computation produced {emi} for amount={principal}, rate={interest_rate}, term={n}"
                )
            monthly_emi = _round(emi)
            total_amount = _round(monthly_emi * Decimal(n))
    except ArithmeticError as e:
        raise ComputationError(
            f"EMI computation failed for amount={principal}, rate={interest_rate}, term={n}: {e!r}"
        ) from e
    return monthly_emi, total_amount


def amortization_schedule(loan_amount: Any, interest_rate: Any, term_months: int) -> list[ScheduleRow]:
    """Per-installment breakdown; the last installment absorbs rounding so the balance ends at zero."""
    if isinstance(term_months, int) and term_months > MAX_SCHEDULE_INSTALLMENTS:
        raise ValidationError(
            "loan_term_months",
            f"schedule is limited to {MAX_SCHEDULE_INSTALLMENTS} installments",
        )
    monthly_emi, _ = compute_financials(loan_amount, interest_rate, term_months)
    rate = monthly_rate(as_decimal(interest_rate))
    balance = _round(as_decimal(loan_amount))
    rows: list[ScheduleRow] = []
    for installment in range(1, int(term_months) + 1):
        interest = _round(balance * rate)
        if installment == term_months:
            principal = balance
            payment = principal + interest
        else:
            payment = monthly_emi
            principal = min(payment - interest, balance)
        balance = balance - principal
        rows.append(
            ScheduleRow(
                installment=installment,
                payment=payment,
                principal=principal,
                interest=interest,
                balance=balance,
            )
        )
    return rows
