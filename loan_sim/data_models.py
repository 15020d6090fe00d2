"""Data models for the loan simulator.

This module defines dataclasses representing the entities produced by a
calculation: the loan inputs, individual schedule rows and the overall
amortization result. All of them are transient; a new set is built for every
calculation and handed explicitly to whoever renders or exports it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass
class LoanInput:
    """The already-parsed loan parameters.

    Attributes
    ----------
    price: float
        Sticker price of the financed item, in currency units.
    down_payment: float
        Amount paid up front (the "enganche").
    monthly_rate_percent: float
        Interest rate per period, in percent (``1.0`` means 1 % per month).
    term_periods: int
        Number of monthly payments.
    """

    price: float
    down_payment: float
    monthly_rate_percent: float
    term_periods: int

    @property
    def principal(self) -> float:
        """Financed amount; never negative."""
        return max(self.price - self.down_payment, 0.0)


@dataclass
class PaymentScheduleRow:
    """One period of the amortization table."""

    period: int
    payment: float
    interest: float
    principal: float
    balance: float

    def as_tuple(self) -> Tuple[int, float, float, float, float]:
        """Return ``(period, payment, interest, principal, balance)``."""
        return (self.period, self.payment, self.interest, self.principal, self.balance)


@dataclass
class AmortizationResult:
    """Monthly payment, totals and schedule for a single calculation.

    ``total_paid`` includes the down payment, matching the figure shown by the
    quick simulator ("Total aprox").
    """

    loan: LoanInput
    monthly_payment: float
    total_paid: float
    schedule: List[PaymentScheduleRow] = field(default_factory=list)

    @property
    def principal(self) -> float:
        return self.loan.principal

    @property
    def total_interest(self) -> float:
        return sum(row.interest for row in self.schedule)

    @property
    def negative_amortization(self) -> bool:
        """True when some period's payment did not cover its interest.

        The schedule floors the principal portion at zero in that case, so
        the balance plateaus instead of growing.
        """
        return any(row.payment < row.interest for row in self.schedule)
