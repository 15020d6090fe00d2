"""Core calculation engine for the loan simulator.

This module implements fixed-payment amortization (the "sistema francés"):
a constant monthly payment whose split between interest and principal shifts
over the life of the loan. Results are plain floats; rounding is left to the
code that displays or exports them.
"""

from __future__ import annotations

import logging
import math
from typing import Any, List, Optional

from .data_models import AmortizationResult, LoanInput, PaymentScheduleRow

logger = logging.getLogger(__name__)


class InsufficientPaymentError(ValueError):
    """Raised in strict mode when a payment does not cover the interest due."""

    def __init__(self, period: int, payment: float, interest: float) -> None:
        super().__init__(
            f"Payment {payment:.2f} does not cover interest {interest:.2f} in period {period}"
        )
        self.period = period
        self.payment = payment
        self.interest = interest


def _rate_fraction(monthly_rate_percent: Any) -> float:
    """Convert a percent rate to a fraction, treating junk as zero."""
    try:
        rate = float(monthly_rate_percent)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(rate):
        return 0.0
    return rate / 100


def _is_finite(value: Any) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value)


def monthly_payment(principal: float, monthly_rate_percent: float, term_periods: int) -> float:
    """Return the fixed monthly payment for a loan.

    The formula is:

        payment = P * (i * (1 + i)^n) / ((1 + i)^n - 1)

    where ``P`` is the principal, ``i`` is the monthly interest rate as a
    fraction and ``n`` is the number of payments. When the rate is zero the
    payment is simply ``P / n``. A missing or non-positive term gives 0.
    Never raises: a rate or term too large for a float gives a payment
    that may be ``inf`` or ``nan``, which :func:`calculate` rejects.
    """
    if not term_periods or term_periods <= 0:
        return 0.0
    i = _rate_fraction(monthly_rate_percent)
    if i == 0:
        return principal / term_periods
    try:
        factor = (1 + i) ** term_periods
    except OverflowError:
        # i * f / (f - 1) tends to i as f grows without bound
        return principal * i if i > 0 else math.nan
    if factor == 1:
        return principal / term_periods
    return principal * (i * factor) / (factor - 1)


def build_schedule(
    principal: float,
    monthly_rate_percent: float,
    term_periods: int,
    payment: float,
    strict: bool = False,
) -> List[PaymentScheduleRow]:
    """Build the period-by-period amortization table.

    Each period charges interest on the running balance and applies the rest
    of the payment to principal. Both the principal portion and the balance
    are floored at zero: a payment below the interest due leaves the balance
    where it was, and floating-point overshoot on the last period cannot turn
    the balance negative.

    Parameters
    ----------
    strict: bool
        When true, raise :class:`InsufficientPaymentError` instead of flooring
        a period whose payment is smaller than its interest.
    """
    i = _rate_fraction(monthly_rate_percent)
    schedule: List[PaymentScheduleRow] = []
    if not term_periods or term_periods <= 0:
        return schedule
    balance = principal
    for period in range(1, term_periods + 1):
        interest = balance * i
        if strict and payment < interest:
            raise InsufficientPaymentError(period, payment, interest)
        principal_part = max(payment - interest, 0.0)
        balance = max(balance - principal_part, 0.0)
        schedule.append(
            PaymentScheduleRow(
                period=period,
                payment=payment,
                interest=interest,
                principal=principal_part,
                balance=balance,
            )
        )
    return schedule


def calculate(
    price: float,
    down_payment: float,
    term_periods: int,
    monthly_rate_percent: float,
    strict: bool = False,
) -> Optional[AmortizationResult]:
    """Compute payment, totals and schedule for a loan.

    Returns ``None`` when the inputs are insufficient: nothing left to
    finance after the down payment, a price, down payment or rate that is
    not a finite number, a non-positive term, or figures so large that the
    payment itself is not finite. Callers show a "complete the inputs"
    message in that case and must not keep a previous schedule around.
    """
    loan = LoanInput(
        price=price,
        down_payment=down_payment,
        monthly_rate_percent=monthly_rate_percent,
        term_periods=term_periods,
    )
    principal = loan.principal
    if (
        not _is_finite(price)
        or not _is_finite(down_payment)
        or not _is_finite(principal)
        or principal <= 0
        or not term_periods
        or term_periods <= 0
        or not _is_finite(monthly_rate_percent)
    ):
        logger.debug(
            "Insufficient input: principal=%s term=%s rate=%s",
            principal,
            term_periods,
            monthly_rate_percent,
        )
        return None

    payment = monthly_payment(principal, monthly_rate_percent, term_periods)
    if not math.isfinite(payment):
        logger.debug("Payment overflows for rate=%s term=%s", monthly_rate_percent, term_periods)
        return None
    logger.debug(
        "Monthly payment %.6f for principal %.2f at %s%% over %d periods",
        payment,
        principal,
        monthly_rate_percent,
        term_periods,
    )
    schedule = build_schedule(principal, monthly_rate_percent, term_periods, payment, strict=strict)
    result = AmortizationResult(
        loan=loan,
        monthly_payment=payment,
        total_paid=payment * term_periods + down_payment,
        schedule=schedule,
    )
    if result.negative_amortization:
        logger.warning(
            "Payment %.2f does not cover the interest due; balance stops amortizing",
            payment,
        )
    return result
