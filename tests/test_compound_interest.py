"""
Compound interest projections, goals and retirement plans.
"""

import math

import numpy as np
import pytest

import compound_interest as ci
from calculators import calculate
from engine import ValidationError

SLUG = "compound-interest-calculator"


def test_monthly_growth_per_frequency():
    assert ci.monthly_growth(0.12, "monthly") == pytest.approx(1.01)
    assert ci.monthly_growth(0.12, "annually") ** 12 == pytest.approx(1.12)
    assert ci.monthly_growth(0.12, "quarterly") ** 3 == pytest.approx(1.03)
    assert ci.monthly_growth(0.12, "continuous") == pytest.approx(math.exp(0.01))


def test_effective_annual_rate():
    assert ci.effective_annual_rate(0.12, "monthly") == pytest.approx(1.01 ** 12 - 1)
    assert ci.effective_annual_rate(0.12, "annually") == pytest.approx(0.12)
    assert ci.effective_annual_rate(0.12, "continuous") == pytest.approx(math.exp(0.12) - 1)


def test_projection_first_months():
    p = ci.project(1000, 100, 1.01, 3)
    assert list(p.contribution) == [1000, 100, 100]
    assert p.balance[0] == pytest.approx(1010)
    assert p.balance[1] == pytest.approx(1121.1)
    assert p.balance[2] == pytest.approx(1233.311)
    assert p.total_contributions == 1200
    assert p.total_interest == pytest.approx(33.311)
    assert np.allclose(p.real_balance, p.balance)


def test_yearly_rows():
    p = ci.project(1000, 100, 1.0, 36)
    rows = p.yearly()
    assert [r["year"] for r in rows] == [1, 2, 3]
    assert rows[0]["contributions"] == 1000 + 11 * 100
    assert rows[-1]["balance"] == pytest.approx(1000 + 35 * 100)


def test_investment_zero_rate():
    result = calculate(SLUG, {"mode": "investment", "annual_rate": "0"})
    assert result.total == pytest.approx(1000 + 500 * 359)
    assert result.component("interest").value == pytest.approx(0)
    assert result.details["real_value"] == pytest.approx(180500 / 1.025 ** 30)
    assert result.details["effective_annual_rate_pct"] == 0


def test_investment_defaults():
    result = calculate(SLUG, {"mode": "investment"})
    assert result.total == pytest.approx(result.schedule.final_balance)
    assert result.component("contributions").value == 1000 + 500 * 359
    assert result.details["continuous_compounding_value"] > result.total
    assert result.details["real_value"] < result.total
    assert len(result.details["yearly"]) == 30


@pytest.mark.parametrize("account,factor", [
    ("taxable", 1 - 0.22 * 0.15),
    ("401k", 0.78),
    ("ira", 0.78),
    ("roth_ira", 1.0),
])
def test_after_tax_value_by_account(account, factor):
    result = calculate(SLUG, {"mode": "investment", "account_type": account})
    assert result.details["after_tax_value"] == pytest.approx(result.total * factor)


def test_goal_required_contribution_reaches_goal():
    result = calculate(SLUG, {"mode": "goal"})
    required = result.details["required_monthly_contribution"]
    assert required > 500
    assert result.details["goal_reached"] is False
    assert result.notes

    growth = ci.monthly_growth(0.07, "monthly")
    assert ci.project(1000, required, growth, 360).final_balance == pytest.approx(1_000_000)


def test_goal_already_covered_needs_no_contribution():
    result = calculate(SLUG, {"mode": "goal", "initial_amount": "500000", "goal_amount": "100000"})
    assert result.details["required_monthly_contribution"] == 0
    assert result.details["goal_reached"] is True
    assert result.details["months_to_goal"] == 1


def test_months_to_goal_matches_projection():
    growth = ci.monthly_growth(0.07, "monthly")
    n = ci.months_to_goal(1000, 500, growth, 1_000_000)
    p = ci.project(1000, 500, growth, n)
    assert p.balance[-1] >= 1_000_000
    assert p.balance[-2] < 1_000_000


def test_goal_never_reached():
    assert ci.months_to_goal(1000, 0, 1.0, 2000) is None
    result = calculate(SLUG, {"mode": "goal", "annual_rate": "0", "monthly_contribution": "0",
                              "goal_amount": "2000"})
    assert result.details["months_to_goal"] is None
    assert "not reached" in result.notes[0]


def test_success_probability_is_seeded_and_bounded():
    first = calculate(SLUG, {"mode": "goal"}).details["success_probability_pct"]
    second = calculate(SLUG, {"mode": "goal"}).details["success_probability_pct"]
    assert first == second
    assert 0 <= first <= 100
    easy = calculate(SLUG, {"mode": "goal", "goal_amount": "1"})
    assert easy.details["success_probability_pct"] == 100
    hard = calculate(SLUG, {"mode": "goal", "goal_amount": "1000000000000"})
    assert hard.details["success_probability_pct"] == 0


def test_retirement_plan():
    result = calculate(SLUG, {"mode": "retirement", "current_age": "40", "retirement_age": "65"})
    assert result.details["years_until_retirement"] == 25
    assert result.schedule.months == 300
    assert result.details["safe_annual_withdrawal"] == pytest.approx(result.total * 0.04)
    assert result.details["safe_monthly_withdrawal"] == pytest.approx(result.total * 0.04 / 12)
    assert result.details["withdrawals_sustainable"] is True


def test_years_to_deplete():
    assert ci.years_to_deplete(1000, 300, 0.0) == 4
    assert ci.years_to_deplete(1000, 40, 0.05) is None


@pytest.mark.parametrize("form,field", [
    ({"mode": "retirement", "current_age": "65", "retirement_age": "60"}, "retirement_age"),
    ({"mode": "investment", "annual_rate": "60"}, "annual_rate"),
    ({"mode": "investment", "initial_amount": "0", "monthly_contribution": "0"}, "initial_amount"),
    ({"mode": "goal", "goal_amount": "0"}, "goal_amount"),
    ({"mode": "investment", "compounding": "hourly"}, "compounding"),
])
def test_rejects_bad_inputs(form, field):
    with pytest.raises(ValidationError) as exc:
        calculate(SLUG, form)
    assert exc.value.field == field
