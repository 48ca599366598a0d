"""
Compound interest calculator: investment growth, savings goals and
retirement projections.

Balances are projected month by month. The initial amount is the first
month's deposit and regular contributions start in month two; every
month earns the monthly equivalent of the nominal annual rate at the
chosen compounding frequency.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

import config as cfg
from engine import CalculatorSpec, Component, Field, Mode, ResultRecord, require


@dataclass
class CompoundInputs:
    mode: str
    initial_amount: float
    monthly_contribution: float
    annual_rate: float
    compounding: str
    years: int
    inflation_rate: float
    tax_rate: float
    account_type: str
    risk_tolerance: str
    goal_amount: float
    current_age: int
    retirement_age: int

    def __post_init__(self) -> None:
        require(self.initial_amount > 0 or self.monthly_contribution > 0,
                "Enter an initial amount or a monthly contribution", "initial_amount")
        if self.mode == "retirement":
            require(self.retirement_age > self.current_age,
                    "Retirement age must be after your current age", "retirement_age")
        if self.mode in ("goal", "retirement"):
            require(self.goal_amount > 0, "Goal amount must be greater than zero", "goal_amount")

    @property
    def horizon_years(self) -> int:
        if self.mode == "retirement":
            return self.retirement_age - self.current_age
        return self.years

    @property
    def growth(self) -> float:
        return monthly_growth(self.annual_rate / 100, self.compounding)


@dataclass
class GrowthProjection:
    """Month-by-month balances of one projection."""
    month: np.ndarray = field(repr=False)
    contribution: np.ndarray = field(repr=False)
    interest: np.ndarray = field(repr=False)
    balance: np.ndarray = field(repr=False)
    real_balance: np.ndarray = field(repr=False)

    @property
    def months(self) -> int:
        return len(self.month)

    @property
    def total_contributions(self) -> float:
        return float(self.contribution.sum())

    @property
    def total_interest(self) -> float:
        return float(self.interest.sum())

    @property
    def final_balance(self) -> float:
        return float(self.balance[-1]) if self.months else 0.0

    def yearly(self) -> List[Dict[str, float]]:
        """Year-end snapshot rows."""
        contributed = np.cumsum(self.contribution)
        earned = np.cumsum(self.interest)
        return [
            {
                "year": int(self.month[i] // 12),
                "contributions": float(contributed[i]),
                "interest": float(earned[i]),
                "balance": float(self.balance[i]),
                "real_balance": float(self.real_balance[i]),
            }
            for i in range(11, self.months, 12)
        ]


def monthly_growth(annual_rate: float, compounding: str) -> float:
    """Growth factor over one month for a nominal *annual_rate* (decimal)."""
    if compounding == "continuous":
        return math.exp(annual_rate / 12)
    periods = cfg.COMPOUND_PERIODS[compounding]
    return (1 + annual_rate / periods) ** (periods / 12)


def effective_annual_rate(annual_rate: float, compounding: str) -> float:
    if compounding == "continuous":
        return math.exp(annual_rate) - 1
    periods = cfg.COMPOUND_PERIODS[compounding]
    return (1 + annual_rate / periods) ** periods - 1


def project(initial: float, contribution: float, growth: float, months: int,
            inflation_rate: float = 0.0) -> GrowthProjection:
    """Project the balance; *inflation_rate* (decimal) deflates ``real_balance``."""
    cols: Dict[str, List[float]] = {k: [] for k in ("n", "dep", "int", "bal", "real")}
    balance = 0.0
    for n in range(1, months + 1):
        deposit = initial if n == 1 else contribution
        balance += deposit
        interest = balance * (growth - 1)
        balance += interest
        cols["n"].append(n)
        cols["dep"].append(deposit)
        cols["int"].append(interest)
        cols["bal"].append(balance)
        cols["real"].append(balance / (1 + inflation_rate) ** (n / 12))

    return GrowthProjection(
        month=np.array(cols["n"], dtype=int),
        contribution=np.array(cols["dep"], dtype=float),
        interest=np.array(cols["int"], dtype=float),
        balance=np.array(cols["bal"], dtype=float),
        real_balance=np.array(cols["real"], dtype=float),
    )


def required_contribution(initial: float, goal: float, growth: float, months: int) -> float:
    """Monthly contribution that makes the projection end exactly at *goal*."""
    # contributions are deposited in months 2..n and grow n-1 .. 1 months
    if growth == 1:
        factor = months - 1
    else:
        factor = growth * (growth ** (months - 1) - 1) / (growth - 1)
    return max(0.0, (goal - initial * growth ** months) / factor)


def months_to_goal(initial: float, contribution: float, growth: float, goal: float,
                   max_months: int = cfg.COMPOUND_MAX_YEARS * 12) -> Optional[int]:
    """First month whose closing balance reaches *goal*; ``None`` if never."""
    balance = 0.0
    for n in range(1, max_months + 1):
        balance += initial if n == 1 else contribution
        balance += balance * (growth - 1)
        if balance >= goal:
            return n
    return None


def success_probability(inputs: CompoundInputs, target: float,
                        seed: int = cfg.COMPOUND_SEED) -> float:
    """Share (%) of simulated market paths that end at or above *target*.

    Annual returns are drawn from a normal distribution for the chosen
    risk tolerance; contributions are added once a year.
    """
    mean, vol = cfg.COMPOUND_MARKET_SCENARIOS[inputs.risk_tolerance]
    rng = np.random.default_rng(seed)
    n = cfg.COMPOUND_SIMULATIONS
    T = inputs.horizon_years

    returns = np.clip(mean + vol * rng.standard_normal((T, n)), *cfg.COMPOUND_RETURN_CLIP)
    balance = np.full(n, float(inputs.initial_amount))
    for t in range(T):
        balance = balance * (1 + returns[t]) + inputs.monthly_contribution * 12
    return float(np.mean(balance >= target) * 100)


def after_tax_value(value: float, tax_rate: float, account_type: str) -> float:
    return value * (1 - tax_rate / 100 * cfg.COMPOUND_ACCOUNT_TAX_SHARE[account_type])


def years_to_deplete(balance: float, withdrawal: float, annual_rate: float,
                     max_years: int = cfg.COMPOUND_MAX_YEARS) -> Optional[int]:
    """Years a fixed annual withdrawal lasts; ``None`` if it outlasts *max_years*."""
    for year in range(1, max_years + 1):
        balance = balance * (1 + annual_rate) - withdrawal
        if balance <= 0:
            return year
    return None


def _growth_record(inputs: CompoundInputs, total_label: str) -> ResultRecord:
    months = inputs.horizon_years * 12
    growth = inputs.growth
    projection = project(inputs.initial_amount, inputs.monthly_contribution, growth, months,
                         inputs.inflation_rate / 100)
    continuous = project(inputs.initial_amount, inputs.monthly_contribution,
                         monthly_growth(inputs.annual_rate / 100, "continuous"), months)
    future = projection.final_balance

    return ResultRecord(
        calculator=SPEC_SLUG,
        mode=inputs.mode,
        total=future,
        total_label=total_label,
        components=[
            Component("contributions", "Total contributions", projection.total_contributions),
            Component("interest", "Interest earned", projection.total_interest),
        ],
        schedule=projection,
        details={
            "years": inputs.horizon_years,
            "effective_annual_rate_pct": effective_annual_rate(inputs.annual_rate / 100,
                                                               inputs.compounding) * 100,
            "real_value": float(projection.real_balance[-1]),
            "after_tax_value": after_tax_value(future, inputs.tax_rate, inputs.account_type),
            "account": cfg.COMPOUND_ACCOUNT_NAMES[inputs.account_type],
            "continuous_compounding_value": continuous.final_balance,
            "yearly": projection.yearly(),
        },
    )


# ─── Modes ───────────────────────────────────────────────────────────

def investment(inputs: CompoundInputs) -> ResultRecord:
    return _growth_record(inputs, f"Future value after {inputs.years} years")


def goal(inputs: CompoundInputs) -> ResultRecord:
    """Projected value against a savings goal."""
    record = _growth_record(inputs, f"Projected value after {inputs.years} years")
    growth = inputs.growth
    reach = months_to_goal(inputs.initial_amount, inputs.monthly_contribution, growth,
                           inputs.goal_amount)
    required = required_contribution(inputs.initial_amount, inputs.goal_amount, growth,
                                     inputs.years * 12)
    record.details.update({
        "goal_amount": inputs.goal_amount,
        "goal_reached": record.total >= inputs.goal_amount,
        "amount_over_goal": record.total - inputs.goal_amount,
        "months_to_goal": reach,
        "years_to_goal": reach / 12 if reach is not None else None,
        "required_monthly_contribution": required,
        "success_probability_pct": success_probability(inputs, inputs.goal_amount),
    })
    if reach is None:
        record.notes.append("At this rate the goal is not reached within "
                            f"{cfg.COMPOUND_MAX_YEARS} years.")
    elif required > inputs.monthly_contribution:
        record.notes.append("Increase your monthly contribution to reach the goal on time.")
    return record


def retirement(inputs: CompoundInputs) -> ResultRecord:
    """Nest egg at retirement and a 4% withdrawal plan."""
    years = inputs.horizon_years
    record = _growth_record(inputs, f"Balance at age {inputs.retirement_age}")
    nest_egg = record.total
    withdrawal = nest_egg * cfg.COMPOUND_SAFE_WITHDRAWAL_RATE
    lasts = years_to_deplete(nest_egg, withdrawal,
                             effective_annual_rate(inputs.annual_rate / 100, inputs.compounding))
    record.details.update({
        "years_until_retirement": years,
        "goal_amount": inputs.goal_amount,
        "safe_annual_withdrawal": withdrawal,
        "safe_monthly_withdrawal": withdrawal / 12,
        "years_to_deplete": lasts,
        "withdrawals_sustainable": lasts is None,
        "success_probability_pct": success_probability(inputs, inputs.goal_amount),
    })
    return record


# ─── Spec ────────────────────────────────────────────────────────────

SPEC_SLUG = "compound-interest-calculator"

_INVEST = ("investment", "goal")
_TARGET = ("goal", "retirement")


def _choices(names: Dict[str, str]):
    return tuple(names.items())


SPEC = CalculatorSpec(
    slug=SPEC_SLUG,
    name="Compound Interest Calculator",
    description="Grow an investment with regular contributions, plan for a goal or for retirement.",
    fields=(
        Field("initial_amount", "Initial amount", "number", 1000, min_value=0, currency=True),
        Field("monthly_contribution", "Monthly contribution", "number", 500, min_value=0,
              currency=True),
        Field("annual_rate", "Annual interest rate (%)", "number", 7,
              min_value=-cfg.COMPOUND_MAX_RATE, max_value=cfg.COMPOUND_MAX_RATE),
        Field("compounding", "Compounding", "choice", "monthly",
              choices=tuple((f, f.title()) for f in cfg.COMPOUND_FREQUENCIES)),
        Field("years", "Investment period (years)", "integer", 30, min_value=1,
              max_value=cfg.COMPOUND_MAX_YEARS, modes=_INVEST),
        Field("inflation_rate", "Inflation rate (%)", "number", 2.5, min_value=0, max_value=50),
        Field("tax_rate", "Tax rate (%)", "number", 22, min_value=0, max_value=100),
        Field("account_type", "Account type", "choice", "taxable",
              choices=_choices(cfg.COMPOUND_ACCOUNT_NAMES)),
        Field("risk_tolerance", "Risk tolerance", "choice", "moderate",
              choices=tuple((k, k.title()) for k in cfg.COMPOUND_MARKET_SCENARIOS), modes=_TARGET),
        Field("goal_amount", "Goal amount", "number", 1000000, min_value=0, currency=True,
              modes=_TARGET),
        Field("current_age", "Current age", "integer", 35, min_value=18, max_value=100,
              modes=("retirement",)),
        Field("retirement_age", "Retirement age", "integer", 65, min_value=18, max_value=100,
              modes=("retirement",)),
    ),
    modes=(
        Mode("investment", "Investment growth", investment),
        Mode("goal", "Savings goal", goal),
        Mode("retirement", "Retirement", retirement),
    ),
    inputs_cls=CompoundInputs,
)
