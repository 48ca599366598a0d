"""
Mortgage payment and affordability calculator.

Monthly housing cost = principal & interest + property tax + insurance
+ PMI (below 20% down, when enabled) + HOA dues. Affordability is judged
with the usual 28% payment-to-income and 36% debt-to-income guidelines.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

import config as cfg
from amortization import amortize, biweekly_payoff, monthly_payment
from engine import CalculatorSpec, Component, Field, Mode, ResultRecord, require
from tiers import TierTable

RISK_TABLE = TierTable("mortgage risk", cfg.MORTGAGE_RISK_TIERS, closed="right")
AFFORDABILITY_TABLE = TierTable("mortgage affordability", cfg.MORTGAGE_AFFORDABILITY_TIERS)

EXTRA_PAYMENT_SCENARIOS = [100, 200]


@dataclass
class MortgageInputs:
    mode: str
    home_price: float
    down_payment: float
    interest_rate: float
    loan_term: int
    property_tax_rate: float
    home_insurance: float
    include_pmi: str
    pmi_rate: float
    hoa_monthly: float
    credit_score: int
    annual_income: float
    monthly_debts: float
    closing_cost_rate: float
    maintenance_rate: float

    def __post_init__(self) -> None:
        require(self.home_price > 0, "Home price must be greater than zero", "home_price")
        require(self.down_payment >= 0, "Down payment cannot be negative", "down_payment")
        require(self.down_payment < self.home_price,
                "Down payment cannot be greater than or equal to home price", "down_payment")
        require(0 <= self.interest_rate <= cfg.MORTGAGE_MAX_RATE,
                f"Interest rate must be between 0% and {cfg.MORTGAGE_MAX_RATE:g}%", "interest_rate")
        require(self.loan_term > 0, "Loan term must be greater than zero", "loan_term")
        require(self.annual_income > 0, "Annual income must be greater than zero", "annual_income")

    @property
    def loan_amount(self) -> float:
        return self.home_price - self.down_payment

    @property
    def down_payment_pct(self) -> float:
        return self.down_payment / self.home_price * 100

    @property
    def monthly_rate(self) -> float:
        return self.interest_rate / 100 / 12


def escrow_components(inputs: MortgageInputs) -> List[Component]:
    """Monthly tax, insurance, PMI and HOA."""
    pmi_applies = (inputs.include_pmi == "yes"
                   and inputs.down_payment_pct < cfg.MORTGAGE_PMI_DOWN_PAYMENT_PCT)
    pmi = inputs.loan_amount * inputs.pmi_rate / 100 / 12 if pmi_applies else 0.0
    return [
        Component("property_tax", "Property tax", inputs.home_price * inputs.property_tax_rate / 100 / 12),
        Component("insurance", "Home insurance", inputs.home_insurance / 12),
        Component("pmi", "PMI", pmi),
        Component("hoa", "HOA dues", inputs.hoa_monthly),
    ]


def recommendations(inputs: MortgageInputs, pti: float, risk: str) -> List[str]:
    recs = []
    if inputs.down_payment_pct < cfg.MORTGAGE_PMI_DOWN_PAYMENT_PCT:
        recs.append("Consider saving for a 20% down payment to eliminate PMI and reduce monthly costs.")
    if pti > cfg.MORTGAGE_FRONT_END_LIMIT:
        recs.append("Your payment-to-income ratio is high. Consider a less expensive home "
                    "or larger down payment.")
    if inputs.credit_score < cfg.MORTGAGE_GOOD_CREDIT:
        recs.append("Improving your credit score could qualify you for better interest rates.")
    if risk == "high":
        recs.append("Consider building larger cash reserves before purchasing to improve "
                    "financial stability.")
    return recs


def _monthly_record(inputs: MortgageInputs, term_years: int, mode: str) -> ResultRecord:
    n = term_years * 12
    pi = monthly_payment(inputs.loan_amount, inputs.monthly_rate, n)
    schedule = amortize(inputs.loan_amount, inputs.monthly_rate, pi, n)
    components = [Component("principal_interest", "Principal & interest", pi)] + escrow_components(inputs)
    total = sum(c.value for c in components)

    pti = total * 12 / inputs.annual_income * 100
    dti = (total + inputs.monthly_debts) * 12 / inputs.annual_income * 100
    risk = RISK_TABLE.lookup(dti)

    escrow = total - pi
    stress = []
    for bump in cfg.MORTGAGE_STRESS_RATE_BUMPS:
        bumped = monthly_payment(inputs.loan_amount, (inputs.interest_rate + bump) / 100 / 12, n) + escrow
        stress.append({
            "scenario": f"+{bump:g}% interest rate",
            "payment": bumped,
            "payment_increase": bumped - total,
            "income_impact_pct": (bumped - total) * 12 / inputs.annual_income * 100,
        })

    score = 100
    if pti > cfg.MORTGAGE_FRONT_END_LIMIT:
        score -= 20
    if dti > cfg.MORTGAGE_BACK_END_LIMIT:
        score -= 20
    if inputs.down_payment_pct < cfg.MORTGAGE_PMI_DOWN_PAYMENT_PCT:
        score -= 10
    if inputs.credit_score < cfg.MORTGAGE_GOOD_CREDIT:
        score -= 15

    extra_scenarios = []
    for extra in EXTRA_PAYMENT_SCENARIOS:
        s = amortize(inputs.loan_amount, inputs.monthly_rate, pi, n, extra_monthly=extra)
        extra_scenarios.append({
            "extra_payment": extra,
            "payoff_months": s.months,
            "months_saved": schedule.months - s.months,
            "interest_saved": schedule.total_interest - s.total_interest,
        })

    closing = inputs.home_price * inputs.closing_cost_rate / 100
    return ResultRecord(
        calculator=SPEC_SLUG,
        mode=mode,
        total=total,
        total_label=f"Total monthly payment ({term_years}-year)",
        components=components,
        tier=risk,
        schedule=schedule,
        notes=recommendations(inputs, pti, risk.label),
        details={
            "loan_amount": inputs.loan_amount,
            "down_payment_pct": inputs.down_payment_pct,
            "loan_to_value": inputs.loan_amount / inputs.home_price * 100,
            "term_years": term_years,
            "total_interest": schedule.total_interest,
            "total_of_payments": pi * n,
            "closing_costs": closing,
            "cash_needed": inputs.down_payment + closing,
            "maintenance_reserve": inputs.home_price * inputs.maintenance_rate / 100 / 12,
            "annual_property_costs": escrow * 12,
            "five_year_cost": total * 60 + closing,
            "payment_to_income": pti,
            "debt_to_income": dti,
            "risk_level": risk.label,
            "affordability_score": max(0, score),
            "stress_tests": stress,
            "extra_payment_scenarios": extra_scenarios,
            "first_year": schedule.rows(cfg.MORTGAGE_SCHEDULE_PREVIEW_MONTHS),
        },
    )


# ─── Modes ───────────────────────────────────────────────────────────

def payment(inputs: MortgageInputs) -> ResultRecord:
    return _monthly_record(inputs, inputs.loan_term, "payment")


def affordability(inputs: MortgageInputs) -> ResultRecord:
    """Where the gross monthly income goes once the house is bought.

    Graded by the affordability score rather than by debt-to-income.
    """
    monthly = _monthly_record(inputs, inputs.loan_term, "affordability")
    income = inputs.annual_income / 12
    housing = monthly.total
    remaining = income - housing - inputs.monthly_debts
    score = monthly.details["affordability_score"]

    # largest housing payment inside both the 28% and 36% guidelines
    max_housing = min(income * cfg.MORTGAGE_FRONT_END_LIMIT / 100,
                      income * cfg.MORTGAGE_BACK_END_LIMIT / 100 - inputs.monthly_debts)

    details = dict(monthly.details)
    details.update({
        "gross_monthly_income": income,
        "housing_payment": housing,
        "remaining_income": remaining,
        "max_housing_payment": max(0.0, max_housing),
        "housing_payment_headroom": max_housing - housing,
    })
    return ResultRecord(
        calculator=SPEC_SLUG,
        mode="affordability",
        total=income,
        total_label="Gross monthly income",
        components=[
            Component("housing", "Total housing payment", housing),
            Component("debts", "Existing debt payments", inputs.monthly_debts),
            Component("remaining", "Remaining income", remaining),
        ],
        tier=AFFORDABILITY_TABLE.lookup(score),
        schedule=monthly.schedule,
        notes=monthly.notes,
        details=details,
    )


def comparison(inputs: MortgageInputs) -> ResultRecord:
    """Chosen term against a 15-year loan on the same principal, plus biweekly payments."""
    base = _monthly_record(inputs, inputs.loan_term, "comparison")
    short = _monthly_record(inputs, cfg.MORTGAGE_COMPARISON_TERM_YEARS, "comparison")
    long_pi = base.component("principal_interest").value
    short_pi = short.component("principal_interest").value

    periods = cfg.LOAN_BIWEEKLY_PERIODS
    installments, biweekly_interest = biweekly_payoff(
        inputs.loan_amount, inputs.interest_rate / 100, long_pi / 2, inputs.loan_term * periods)
    biweekly_years = installments / periods

    short.details.update({
        "long_term_years": inputs.loan_term,
        "long_term_payment": long_pi,
        "short_term_payment": short_pi,
        "payment_difference": short_pi - long_pi,
        "interest_saved": base.details["total_interest"] - short.details["total_interest"],
        "long_term_schedule": base.schedule,
        "biweekly": {
            "biweekly_payment": long_pi / 2,
            "payoff_years": biweekly_years,
            "years_saved": inputs.loan_term - biweekly_years,
            "interest_saved": base.details["total_interest"] - biweekly_interest,
        },
    })
    return short


# ─── Spec ────────────────────────────────────────────────────────────

SPEC_SLUG = "mortgage-payment-calculator"

SPEC = CalculatorSpec(
    slug=SPEC_SLUG,
    name="Mortgage Payment Calculator",
    description="Monthly mortgage payment with taxes, insurance, PMI and an affordability check.",
    fields=(
        Field("home_price", "Home price", "number", 400000, min_value=0, currency=True),
        Field("down_payment", "Down payment", "number", 80000, min_value=0, currency=True),
        Field("interest_rate", "Interest rate (%)", "number", 7.5, min_value=0),
        Field("loan_term", "Loan term (years)", "integer", 30, min_value=1, max_value=50),
        Field("property_tax_rate", "Property tax rate (%/yr)", "number", 1.2, min_value=0),
        Field("home_insurance", "Home insurance ($/yr)", "number", 1200, min_value=0, currency=True),
        Field("include_pmi", "Include PMI", "choice", "yes", choices=(("yes", "Yes"), ("no", "No"))),
        Field("pmi_rate", "PMI rate (%/yr)", "number", 0.5, min_value=0),
        Field("hoa_monthly", "HOA dues ($/month)", "number", 0, min_value=0, currency=True),
        Field("credit_score", "Credit score", "integer", 740, min_value=300, max_value=850),
        Field("annual_income", "Annual income", "number", 120000, min_value=0, currency=True),
        Field("monthly_debts", "Other monthly debts", "number", 500, min_value=0, currency=True),
        Field("closing_cost_rate", "Closing costs (% of price)", "number", 3.0, min_value=0),
        Field("maintenance_rate", "Maintenance (% of price/yr)", "number", 1.0, min_value=0),
    ),
    modes=(
        Mode("payment", "Monthly payment", payment),
        Mode("affordability", "Affordability", affordability),
        Mode("comparison", "15-year comparison", comparison),
    ),
    inputs_cls=MortgageInputs,
)
