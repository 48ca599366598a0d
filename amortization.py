"""
Loan amortization helpers shared by the mortgage and loan calculators.

The month loop is a plain Python loop (a schedule is at most a few
hundred rows); the finished schedule is stored as numpy arrays so the
report module can plot it directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np

import config as cfg


def monthly_payment(principal: float, monthly_rate: float, n_payments: int) -> float:
    """Level payment that retires *principal* over *n_payments* months.

    A zero rate degenerates to straight division.
    """
    if n_payments <= 0:
        raise ValueError("Number of payments must be positive")
    if monthly_rate == 0:
        return principal / n_payments
    growth = (1 + monthly_rate) ** n_payments
    return principal * (monthly_rate * growth) / (growth - 1)


@dataclass
class AmortizationSchedule:
    """Month-by-month schedule; every array has one entry per payment."""

    payment_number: np.ndarray = field(repr=False)
    beginning_balance: np.ndarray = field(repr=False)
    payment: np.ndarray = field(repr=False)
    principal: np.ndarray = field(repr=False)
    interest: np.ndarray = field(repr=False)
    extra: np.ndarray = field(repr=False)
    ending_balance: np.ndarray = field(repr=False)
    cumulative_interest: np.ndarray = field(repr=False)

    @property
    def months(self) -> int:
        return int(len(self.payment_number))

    @property
    def total_interest(self) -> float:
        return float(self.interest.sum())

    @property
    def total_principal(self) -> float:
        return float(self.principal.sum() + self.extra.sum())

    @property
    def total_paid(self) -> float:
        return float(self.payment.sum())

    def rows(self, limit: Optional[int] = None) -> List[Dict[str, float]]:
        """Schedule as a list of dicts (optionally only the first *limit*)."""
        n = self.months if limit is None else min(limit, self.months)
        return [
            {
                "month": int(self.payment_number[i]),
                "beginning_balance": float(self.beginning_balance[i]),
                "payment": float(self.payment[i]),
                "principal": float(self.principal[i]),
                "interest": float(self.interest[i]),
                "extra": float(self.extra[i]),
                "ending_balance": float(self.ending_balance[i]),
                "cumulative_interest": float(self.cumulative_interest[i]),
            }
            for i in range(n)
        ]


def amortize(
    principal: float,
    monthly_rate: float,
    payment: float,
    max_months: int,
    extra_monthly: float = 0.0,
    extra_yearly: float = 0.0,
    one_time: Optional[Tuple[float, int]] = None,
) -> AmortizationSchedule:
    """Build an amortization schedule.

    Parameters
    ----------
    principal : float
        Starting balance.
    monthly_rate : float
        Interest rate per month as a decimal.
    payment : float
        Scheduled level payment (principal + interest).
    max_months : int
        Hard stop for the loop.
    extra_monthly, extra_yearly : float
        Additional principal every month / every twelfth month.
    one_time : (amount, month), optional
        A single additional principal payment.

    The final payment is trimmed so the balance never goes negative.
    """
    balance = float(principal)
    cols: Dict[str, List[float]] = {k: [] for k in (
        "n", "begin", "payment", "principal", "interest", "extra", "end", "cum")}
    cum_interest = 0.0
    n = 1

    while balance > cfg.LOAN_PAID_OFF_EPSILON and n <= max_months:
        interest = balance * monthly_rate
        principal_part = payment - interest

        extra = extra_monthly
        if n % 12 == 0:
            extra += extra_yearly
        if one_time is not None and n == one_time[1]:
            extra += one_time[0]

        if principal_part >= balance:
            principal_part = balance
            extra = 0.0
        elif principal_part + extra > balance:
            extra = balance - principal_part

        if principal_part + extra <= 0:
            # payment does not cover interest; balance would never fall
            break

        begin = balance
        balance -= principal_part + extra
        cum_interest += interest

        cols["n"].append(n)
        cols["begin"].append(begin)
        cols["payment"].append(interest + principal_part + extra)
        cols["principal"].append(principal_part)
        cols["interest"].append(interest)
        cols["extra"].append(extra)
        cols["end"].append(max(balance, 0.0))
        cols["cum"].append(cum_interest)
        n += 1

    return AmortizationSchedule(
        payment_number=np.array(cols["n"], dtype=int),
        beginning_balance=np.array(cols["begin"], dtype=float),
        payment=np.array(cols["payment"], dtype=float),
        principal=np.array(cols["principal"], dtype=float),
        interest=np.array(cols["interest"], dtype=float),
        extra=np.array(cols["extra"], dtype=float),
        ending_balance=np.array(cols["end"], dtype=float),
        cumulative_interest=np.array(cols["cum"], dtype=float),
    )


def biweekly_payoff(
    principal: float,
    annual_rate: float,
    payment: float,
    max_periods: int,
    periods_per_year: int = cfg.LOAN_BIWEEKLY_PERIODS,
) -> Tuple[int, float]:
    """Installments and total interest when *payment* is made every two weeks.

    *annual_rate* is a decimal. Stops early if a payment no longer
    covers the interest charged.
    """
    rate = annual_rate / periods_per_year
    balance = float(principal)
    interest = 0.0
    count = 0
    while balance > cfg.LOAN_PAID_OFF_EPSILON and count < max_periods:
        charge = balance * rate
        principal_part = min(payment - charge, balance)
        if principal_part <= 0:
            break
        interest += charge
        balance -= principal_part
        count += 1
    return count, interest
