"""
Loan payment calculator with extra payments, a biweekly option and an
affordability check against monthly income.
"""

from __future__ import annotations

from dataclasses import dataclass

import config as cfg
from amortization import amortize, biweekly_payoff, monthly_payment
from engine import CalculatorSpec, Component, Field, Mode, ResultRecord, require
from tiers import TierTable

RISK_TABLE = TierTable("loan debt-to-income risk", cfg.LOAN_RISK_TIERS, closed="right")


@dataclass
class LoanInputs:
    mode: str
    principal: float
    interest_rate: float
    term_years: int
    extra_monthly: float
    extra_yearly: float
    one_time_extra: float
    one_time_month: int
    monthly_income: float
    monthly_debts: float

    def __post_init__(self) -> None:
        require(self.principal > 0, "Loan amount must be greater than zero", "principal")
        require(0 <= self.interest_rate <= cfg.LOAN_MAX_RATE,
                f"Interest rate must be between 0% and {cfg.LOAN_MAX_RATE:g}%", "interest_rate")
        require(self.term_years > 0, "Loan term must be greater than zero", "term_years")
        for name in ("extra_monthly", "extra_yearly", "one_time_extra"):
            require(getattr(self, name) >= 0, "Extra payments cannot be negative", name)
        require(1 <= self.one_time_month <= self.months,
                "One-time payment month must fall within the loan term", "one_time_month")
        require(self.monthly_income > 0, "Monthly income must be greater than zero", "monthly_income")

    @property
    def months(self) -> int:
        return self.term_years * 12

    @property
    def monthly_rate(self) -> float:
        return self.interest_rate / 100 / 12


def standard(inputs: LoanInputs) -> ResultRecord:
    """Monthly amortization, with any extra payments applied to principal."""
    pay = monthly_payment(inputs.principal, inputs.monthly_rate, inputs.months)
    cap = inputs.months + cfg.LOAN_EXTRA_MONTHS_CAP
    baseline = amortize(inputs.principal, inputs.monthly_rate, pay, cap)
    one_time = (inputs.one_time_extra, inputs.one_time_month) if inputs.one_time_extra else None
    schedule = amortize(inputs.principal, inputs.monthly_rate, pay, cap,
                        extra_monthly=inputs.extra_monthly,
                        extra_yearly=inputs.extra_yearly,
                        one_time=one_time)

    interest = schedule.total_interest
    scenarios = [{
        "scenario": "Current loan",
        "term_years": inputs.term_years,
        "monthly_payment": pay,
        "total_interest": baseline.total_interest,
        "total_cost": inputs.principal + baseline.total_interest,
    }]
    short_years = cfg.LOAN_COMPARISON_TERM_YEARS
    if inputs.term_years > short_years:
        short_pay = monthly_payment(inputs.principal, inputs.monthly_rate, short_years * 12)
        short_interest = amortize(inputs.principal, inputs.monthly_rate, short_pay,
                                  short_years * 12).total_interest
        scenarios.append({
            "scenario": f"{short_years}-year term",
            "term_years": short_years,
            "monthly_payment": short_pay,
            "total_interest": short_interest,
            "total_cost": inputs.principal + short_interest,
            "interest_saved": baseline.total_interest - short_interest,
        })

    return ResultRecord(
        calculator=SPEC_SLUG,
        mode="standard",
        total=inputs.principal + interest,
        total_label="Total cost of loan",
        components=[
            Component("principal", "Principal", inputs.principal),
            Component("interest", "Total interest", interest),
        ],
        schedule=schedule,
        details={
            "monthly_payment": pay,
            "payoff_months": schedule.months,
            "payoff_years": schedule.months / 12,
            "total_extra_paid": float(schedule.extra.sum()),
            "interest_without_extras": baseline.total_interest,
            "interest_saved": baseline.total_interest - interest,
            "months_saved": baseline.months - schedule.months,
            "comparison_scenarios": scenarios,
        },
    )


def biweekly(inputs: LoanInputs) -> ResultRecord:
    """Half the monthly payment every two weeks (26 payments a year)."""
    pay = monthly_payment(inputs.principal, inputs.monthly_rate, inputs.months)
    monthly = amortize(inputs.principal, inputs.monthly_rate, pay, inputs.months)

    periods = cfg.LOAN_BIWEEKLY_PERIODS
    half = pay / 2
    count, interest = biweekly_payoff(inputs.principal, inputs.interest_rate / 100, half,
                                      inputs.term_years * periods)

    years = count / periods
    return ResultRecord(
        calculator=SPEC_SLUG,
        mode="biweekly",
        total=inputs.principal + interest,
        total_label="Total cost of loan (biweekly)",
        components=[
            Component("principal", "Principal", inputs.principal),
            Component("interest", "Total interest", interest),
        ],
        schedule=monthly,
        details={
            "monthly_payment": pay,
            "biweekly_payment": half,
            "installments": count,
            "payoff_years": years,
            "monthly_interest": monthly.total_interest,
            "interest_saved": monthly.total_interest - interest,
            "years_saved": inputs.term_years - years,
        },
    )


def _present_value(payment: float, monthly_rate: float, months: int) -> float:
    """Principal that *payment* a month retires over *months*."""
    if monthly_rate == 0:
        return payment * months
    return payment * (1 - (1 + monthly_rate) ** -months) / monthly_rate


def affordability(inputs: LoanInputs) -> ResultRecord:
    """Monthly debt load with this loan, graded by debt-to-income."""
    pay = monthly_payment(inputs.principal, inputs.monthly_rate, inputs.months)
    income = inputs.monthly_income
    dti = (inputs.monthly_debts + pay) * 100 / income
    pti = pay * 100 / income
    risk = RISK_TABLE.lookup(dti)

    notes = []
    if risk.label in ("high", "very-high"):
        notes.append("Your debt-to-income ratio is high. A longer loan term could reduce "
                     "monthly payments.")

    return ResultRecord(
        calculator=SPEC_SLUG,
        mode="affordability",
        total=pay + inputs.monthly_debts,
        total_label="Total monthly debt payments",
        components=[
            Component("loan_payment", "This loan", pay),
            Component("other_debts", "Other monthly debts", inputs.monthly_debts),
        ],
        tier=risk,
        notes=notes,
        details={
            "monthly_payment": pay,
            "debt_to_income": dti,
            "payment_to_income": pti,
            "risk_level": risk.label,
            "affordability_score": max(0.0, 100 - dti - pti),
            "recommended_income": pay * cfg.LOAN_RECOMMENDED_INCOME_MULTIPLE,
            "max_affordable_loan": _present_value(
                income * cfg.LOAN_AFFORDABLE_PAYMENT_SHARE, inputs.monthly_rate, inputs.months),
        },
    )


# ─── Spec ────────────────────────────────────────────────────────────

SPEC_SLUG = "loan-payment-calculator"

_EXTRAS = ("standard",)
_INCOME = ("affordability",)

SPEC = CalculatorSpec(
    slug=SPEC_SLUG,
    name="Loan Payment Calculator",
    description="Monthly loan payment, total interest and the effect of extra payments.",
    fields=(
        Field("principal", "Loan amount", "number", 25000, min_value=0, currency=True),
        Field("interest_rate", "Interest rate (%)", "number", 6.5, min_value=0),
        Field("term_years", "Loan term (years)", "integer", 5, min_value=1, max_value=50),
        Field("extra_monthly", "Extra monthly payment", "number", 0, min_value=0, currency=True,
              modes=_EXTRAS),
        Field("extra_yearly", "Extra yearly payment", "number", 0, min_value=0, currency=True,
              modes=_EXTRAS),
        Field("one_time_extra", "One-time extra payment", "number", 0, min_value=0, currency=True,
              modes=_EXTRAS),
        Field("one_time_month", "One-time payment month", "integer", 12, min_value=1, modes=_EXTRAS),
        Field("monthly_income", "Gross monthly income", "number", 6000, min_value=0, currency=True,
              modes=_INCOME),
        Field("monthly_debts", "Other monthly debts", "number", 400, min_value=0, currency=True,
              modes=_INCOME),
    ),
    modes=(
        Mode("standard", "Monthly payments", standard),
        Mode("biweekly", "Biweekly payments", biweekly),
        Mode("affordability", "Affordability", affordability),
    ),
    inputs_cls=LoanInputs,
)
