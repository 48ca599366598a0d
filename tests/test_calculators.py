"""
Calculator formula tests.

Every calculator and mode is run on its defaults to check the
component invariant; the per-calculator tests pin worked examples and
the validation rules.
"""

from datetime import date, timedelta

import pytest

import boarding
import calculators
import mortgage
import passer_rating
from amortization import monthly_payment
from calculators import CALCULATORS, calculate, get_calculator
from engine import ValidationError

ALL_MODES = [(slug, m.key) for slug, spec in CALCULATORS.items() for m in spec.modes]


# Invariants

@pytest.mark.parametrize("slug,mode", ALL_MODES)
def test_total_matches_combined_components(slug, mode):
    """The displayed total is exactly the declared combination of the breakdown."""
    result = calculate(slug, {"mode": mode})
    assert result.calculator == slug
    assert result.mode == mode
    assert result.components
    assert result.total == pytest.approx(result.combined(), rel=1e-9, abs=1e-9)


@pytest.mark.parametrize("slug,mode", ALL_MODES)
def test_results_are_deterministic(slug, mode):
    form = {"mode": mode}
    if slug == "tire-life-calculator":
        form["as_of"] = "2024-06-01"
    first = calculate(slug, form)
    second = calculate(slug, form)
    assert first.total == second.total
    assert first.breakdown() == second.breakdown()
    assert (first.tier and first.tier.label) == (second.tier and second.tier.label)


def test_registry():
    assert len(calculators.list_calculators()) == 8
    assert calculators.is_implemented("bmi-calculator")
    assert not calculators.is_implemented("gpa-calculator")
    with pytest.raises(KeyError):
        get_calculator("gpa-calculator")


# Pet boarding

def test_boarding_basic_default():
    """Medium dog, suburban kennel, 7 nights: 40 x 1.15 x 0.93 per night."""
    result = calculate("pet-boarding-cost-calculator", {"mode": "basic"})
    assert result.total == pytest.approx(40 * 1.15 * 0.93 * 7)
    assert result.tier.label == "Weekly (7%)"
    assert result.component("duration_discount").value < 0


def test_boarding_discount_starts_at_seven_nights():
    six = calculate("pet-boarding-cost-calculator", {"mode": "basic", "nights": "6"})
    seven = calculate("pet-boarding-cost-calculator", {"mode": "basic", "nights": "7"})
    assert six.tier.label == "No discount"
    assert six.component("duration_discount").value == 0
    assert six.total == pytest.approx(46 * 6)
    assert seven.total / 7 < six.total / 6


def test_boarding_holiday_and_addons():
    form = {"mode": "basic", "nights": "2", "holiday_peak": "on", "webcam": "on", "grooming": "on"}
    result = calculate("pet-boarding-cost-calculator", form)
    assert result.component("holiday_premium").value == pytest.approx(46 * 0.35 * 2)
    assert result.component("daily_services").value == pytest.approx(5 * 2)
    assert result.component("one_time_services").value == pytest.approx(35)
    assert result.total == pytest.approx(46 * 1.35 * 2 + 10 + 35)


def test_boarding_cat_ignores_size():
    small = calculate("pet-boarding-cost-calculator",
                      {"mode": "basic", "pet_type": "cat", "pet_size": "small"})
    large = calculate("pet-boarding-cost-calculator",
                      {"mode": "basic", "pet_type": "cat", "pet_size": "extra-large"})
    assert small.total == large.total == pytest.approx(40 * 0.75 * 0.93 * 7)


def test_boarding_comparison_picks_cheapest():
    result = calculate("pet-boarding-cost-calculator", {"mode": "comparison"})
    assert result.combine == "min"
    assert result.details["cheapest"] == "Veterinary Boarding"
    assert result.total == pytest.approx(35 * 1.15 * 0.93 * 7)
    assert len(result.details["options"]) == 6


def test_boarding_budget_and_extended():
    budget = calculate("pet-boarding-cost-calculator", {"mode": "budget"})
    assert budget.total == pytest.approx(budget.component("economy").value)
    assert budget.details["savings_vs_premium"] == pytest.approx((110 - 40) * 1.15 * 0.93 * 7)

    extended = calculate("pet-boarding-cost-calculator", {"mode": "extended"})
    assert [s["nights"] for s in extended.details["stays"]] == [3, 7, 14, 30]
    assert extended.total == pytest.approx(46 * 0.82 * 30)


def test_boarding_multi_pet_discount():
    result = calculate("pet-boarding-cost-calculator", {"mode": "multi-pet", "pets": "3"})
    first = 46 * 0.93 * 7
    assert result.component("first_pet").value == pytest.approx(first)
    assert result.component("additional_pets").value == pytest.approx(first * 2 * 0.85)
    assert result.details["total_savings"] == pytest.approx(first * 2 * 0.15)


def test_boarding_rejects_zero_nights():
    with pytest.raises(ValidationError) as exc:
        calculate("pet-boarding-cost-calculator", {"mode": "basic", "nights": "0"})
    assert exc.value.field == "nights"


# Passer rating

def _passer(**values):
    form = {"mode": "nfl"}
    form.update({k: str(v) for k, v in values.items()})
    return calculate("nfl-passer-rating-calculator", form)


def test_passer_rating_default_line():
    result = _passer()
    assert result.total == pytest.approx(100.69, abs=0.01)
    assert result.tier.label == "Very Good"
    assert result.unit == "points"


def test_passer_rating_clamps_to_perfect():
    result = _passer(attempts=10, completions=10, yards=200, touchdowns=5, interceptions=0)
    assert result.total == pytest.approx(158.333, abs=0.001)
    assert result.tier.label == "Perfect"
    assert all(v == 2.375 for v in result.details["subscores"].values())


def test_passer_rating_floor_is_zero():
    result = _passer(attempts=10, completions=0, yards=0, touchdowns=0, interceptions=10)
    assert result.total == 0
    assert result.tier.label == "Poor"


@pytest.mark.parametrize("line,field", [
    (dict(attempts=0, completions=0, touchdowns=0, interceptions=0), "attempts"),
    (dict(attempts=10, completions=11), "completions"),
    (dict(attempts=10, completions=2, touchdowns=3, interceptions=0), "touchdowns"),
    (dict(attempts=10, completions=8, touchdowns=1, interceptions=3), "interceptions"),
])
def test_passer_rating_rejects_impossible_lines(line, field):
    with pytest.raises(ValidationError) as exc:
        _passer(**line)
    assert exc.value.field == field


def test_passer_comparison():
    result = calculate("nfl-passer-rating-calculator", {"mode": "comparison"})
    assert result.combine == "max"
    assert result.details["better"] == "Quarterback 2"
    assert result.total == pytest.approx(result.component("qb2").value)
    assert result.details["difference"] > 0


def test_passer_comparison_validates_second_quarterback():
    with pytest.raises(ValidationError) as exc:
        calculate("nfl-passer-rating-calculator", {"mode": "comparison", "qb2_attempts": "0"})
    assert exc.value.field == "qb2_attempts"


def test_passer_perfect_requirements():
    result = calculate("nfl-passer-rating-calculator", {"mode": "perfect", "attempts": "40",
                                                        "completions": "20"})
    need = result.details["perfect_requirements"]
    assert need == {"completions": 31, "yards": 500, "touchdowns": 5, "interceptions": 0}
    assert result.details["is_perfect"] is False
    assert result.details["completions_short"] == 11


def test_passer_season_and_ncaa():
    season = calculate("nfl-passer-rating-calculator", {"mode": "season"})
    assert season.details["yards_per_game"] == pytest.approx(250 / 16)

    ncaa = calculate("nfl-passer-rating-calculator", {"mode": "ncaa"})
    assert ncaa.total == pytest.approx(70 + 22 + 200 / 3 - 20 / 3)
    assert ncaa.tier.label == "Excellent"
    assert ncaa.details["nfl_rating"] == pytest.approx(passer_rating.nfl_rating(30, 20, 250, 2, 1))


@pytest.mark.parametrize("mode,field", [("nfl", "yards"), ("ncaa", "yards"), ("comparison", "qb2_yards")])
def test_passer_rejects_absurd_yardage(mode, field):
    with pytest.raises(ValidationError) as exc:
        calculate("nfl-passer-rating-calculator", {"mode": mode, field: "1e308"})
    assert exc.value.field == field


# Days on market

def test_dom_basic():
    result = calculate("days-on-market-calculator", {"mode": "basic"})
    assert result.total == 46
    assert result.tier.label == "Balanced Market"


def test_dom_basic_rejects_sale_before_listing():
    with pytest.raises(ValidationError) as exc:
        calculate("days-on-market-calculator",
                  {"mode": "basic", "list_date": "2024-03-01", "sale_date": "2024-02-01"})
    assert exc.value.field == "sale_date"


def test_dom_cumulative_with_relist():
    result = calculate("days-on-market-calculator", {"mode": "cdom"})
    assert result.component("first_listing").value == 45
    assert result.component("second_listing").value == 40
    assert result.total == 85
    assert result.details["days_off_market"] == 15
    assert result.details["reset_applied"] is False


def test_dom_cumulative_reset_after_long_break():
    result = calculate("days-on-market-calculator", {
        "mode": "cdom", "delist_date": "2024-02-01", "relist_date": "2024-04-01",
        "final_sale_date": "2024-04-21",
    })
    assert result.details["reset_applied"] is True
    assert result.details["cdom_with_reset"] == 20


def test_dom_cumulative_without_relist():
    result = calculate("days-on-market-calculator",
                       {"mode": "cdom", "delist_date": "", "relist_date": ""})
    assert result.total == 100
    assert result.details["relisted"] is False


def test_dom_cumulative_needs_both_relist_dates():
    with pytest.raises(ValidationError) as exc:
        calculate("days-on-market-calculator", {"mode": "cdom", "relist_date": ""})
    assert exc.value.field == "relist_date"


def test_dom_average():
    result = calculate("days-on-market-calculator", {"mode": "average"})
    assert result.combine == "mean"
    assert result.total == pytest.approx((40 + 33 + 75) / 3)
    assert result.details["median"] == 40
    assert result.details["fastest"] == 33
    assert result.details["slowest"] == 75


def test_dom_average_needs_two_listings():
    form = {"mode": "average", "listing_2_list": "", "listing_2_sale": "",
            "listing_3_list": "", "listing_3_sale": ""}
    with pytest.raises(ValidationError, match="at least two"):
        calculate("days-on-market-calculator", form)


def test_dom_pricing_boundary():
    result = calculate("days-on-market-calculator", {"mode": "pricing"})
    assert result.details["ratio"] == pytest.approx(1.5)
    assert result.tier.label == "Consider reducing price by 3-5%"
    assert result.total == pytest.approx(450000 * 0.97)


def test_dom_comparison():
    result = calculate("days-on-market-calculator", {"mode": "comparison"})
    assert result.total == 25
    assert result.details["faster"] == "Property 1"
    assert result.details["percent_difference"] == pytest.approx(35 / 60 * 100)


# Tire life

def test_tire_default_estimate():
    result = calculate("tire-life-calculator", {"as_of": "2024-01-01"})
    assert result.combine == "min"
    assert result.component("usage").value == pytest.approx(5 / 0.15 * 1000)
    assert result.total == pytest.approx(30000)
    assert result.details["replace_by"] == date(2024, 1, 1) + timedelta(days=900)
    assert result.details["safety_status"] == "Good Condition"
    assert result.tier.label == "Excellent"


def test_tire_at_minimum_depth():
    result = calculate("tire-life-calculator", {"current_depth": "2", "as_of": "2024-01-01"})
    assert result.total == 0
    assert result.details["safety_status"] == "Replace Immediately"


def test_tire_warranty_dropped_once_expired():
    result = calculate("tire-life-calculator", {"warranty_miles": "10000", "as_of": "2024-01-01"})
    assert "warranty" not in result.breakdown()


def test_tire_rejects_no_wear():
    with pytest.raises(ValidationError) as exc:
        calculate("tire-life-calculator", {"current_depth": "10", "initial_depth": "10"})
    assert exc.value.field == "current_depth"


def test_tire_rejects_rotation_after_current_mileage():
    with pytest.raises(ValidationError) as exc:
        calculate("tire-life-calculator", {"last_rotation": "25000"})
    assert exc.value.field == "last_rotation"


def _tire(**overrides):
    form = {"as_of": "2024-01-01"}
    form.update({k: str(v) for k, v in overrides.items()})
    return calculate("tire-life-calculator", form)


def test_tire_monitor_on_tread_alone():
    # long projected life, but 6/32" left
    result = _tire(initial_depth=10, current_depth=6, miles_on_tire=40000, last_rotation=38000,
                   warranty_miles=100000, treadwear_rating=800)
    assert result.total == pytest.approx(40000)
    assert result.details["safety_status"] == "Monitor Closely"


def test_tire_age_six_means_replace_soon():
    result = _tire(tire_age=7, current_depth=9, initial_depth=10, miles_on_tire=5000,
                   last_rotation=0, warranty_miles=100000, treadwear_rating=800)
    assert result.details["safety_status"] == "Replace Soon"


def test_tire_rotation_action_waits_for_overdue_factor():
    # 10,000 miles since rotation: past the 7,500 interval, under 1.5x
    due = _tire(miles_on_tire=25000, last_rotation=15000)
    assert not any("Rotate" in a for a in due.details["actions"])
    assert due.details["maintenance_score"] == 80
    overdue = _tire(miles_on_tire=27000, last_rotation=15000)
    assert any("Rotate" in a for a in overdue.details["actions"])


def test_tire_cost_per_mile_is_projected():
    result = _tire(tire_cost=1000, installation_cost=0)
    # 1000 / (20000 driven + 30000 remaining)
    assert result.details["cost_per_mile"] == pytest.approx(0.02)
    assert result.details["current_cost_per_mile"] == pytest.approx(0.05)
    assert not any("cost per mile" in a for a in result.details["actions"])
    pricey = _tire(tire_cost=3000, installation_cost=0)
    assert any("cost per mile" in a for a in pricey.details["actions"])


def test_tire_cold_climate():
    cold = _tire(climate="cold")
    moderate = _tire(climate="moderate")
    assert cold.details["condition_multiplier"] == moderate.details["condition_multiplier"] == 1.0


# Mortgage

def test_mortgage_payment_breakdown():
    result = calculate("mortgage-payment-calculator", {"mode": "payment"})
    pi = monthly_payment(320000, 0.075 / 12, 360)
    assert result.component("principal_interest").value == pytest.approx(pi)
    assert result.component("property_tax").value == pytest.approx(400)
    assert result.component("insurance").value == pytest.approx(100)
    assert result.component("pmi").value == 0
    assert result.tier.label == "low"
    assert len(result.details["first_year"]) == 12


def test_mortgage_pmi_below_twenty_percent_down():
    form = {"mode": "payment", "down_payment": "40000"}
    result = calculate("mortgage-payment-calculator", form)
    assert result.component("pmi").value == pytest.approx(360000 * 0.005 / 12)
    form["include_pmi"] = "no"
    assert calculate("mortgage-payment-calculator", form).component("pmi").value == 0


def test_mortgage_comparison_against_fifteen_years():
    result = calculate("mortgage-payment-calculator", {"mode": "comparison"})
    assert result.details["term_years"] == 15
    assert result.details["payment_difference"] > 0
    assert result.details["interest_saved"] > 0


def test_mortgage_extra_payment_scenarios_save_interest():
    result = calculate("mortgage-payment-calculator", {"mode": "payment"})
    for scenario in result.details["extra_payment_scenarios"]:
        assert scenario["months_saved"] > 0
        assert scenario["interest_saved"] > 0


@pytest.mark.parametrize("form,field", [
    ({"down_payment": "400000"}, "down_payment"),
    ({"interest_rate": "25"}, "interest_rate"),
    ({"home_price": "0"}, "home_price"),
])
def test_mortgage_rejects_bad_inputs(form, field):
    with pytest.raises(ValidationError) as exc:
        calculate("mortgage-payment-calculator", dict(form, mode="payment"))
    assert exc.value.field == field


def test_mortgage_risk_table_is_right_closed():
    assert mortgage.RISK_TABLE.lookup(35).label == "low"
    assert mortgage.RISK_TABLE.lookup(43).label == "moderate"


def test_mortgage_affordability_budget():
    result = calculate("mortgage-payment-calculator", {"mode": "affordability"})
    housing = calculate("mortgage-payment-calculator", {"mode": "payment"}).total
    assert result.total == pytest.approx(10000)
    assert result.component("housing").value == pytest.approx(housing)
    assert result.component("debts").value == 500
    assert result.component("remaining").value == pytest.approx(10000 - housing - 500)
    assert result.details["affordability_score"] == 100
    assert result.tier.label == "Excellent"
    assert result.details["max_housing_payment"] == pytest.approx(2800)


@pytest.mark.parametrize("form,score,grade", [
    # payment-to-income over 28% only
    ({"annual_income": "110000", "monthly_debts": "0"}, 80, "Excellent"),
    ({"annual_income": "100000"}, 60, "Good"),
    ({"annual_income": "100000", "credit_score": "700"}, 45, "Fair"),
    ({"annual_income": "100000", "credit_score": "700", "down_payment": "40000"}, 35, "Poor"),
])
def test_mortgage_affordability_grades(form, score, grade):
    result = calculate("mortgage-payment-calculator", dict(form, mode="affordability"))
    assert result.details["affordability_score"] == score
    assert result.tier.label == grade


def test_mortgage_annual_property_costs():
    result = calculate("mortgage-payment-calculator", {"mode": "payment", "hoa_monthly": "50"})
    assert result.details["annual_property_costs"] == pytest.approx((400 + 100 + 50) * 12)


def test_mortgage_comparison_biweekly():
    result = calculate("mortgage-payment-calculator", {"mode": "comparison"})
    biweekly = result.details["biweekly"]
    assert biweekly["biweekly_payment"] == pytest.approx(result.details["long_term_payment"] / 2)
    assert 0 < biweekly["years_saved"] < 30
    assert biweekly["interest_saved"] > 0


# Loan payment

def test_loan_standard():
    result = calculate("loan-payment-calculator", {"mode": "standard"})
    assert result.details["monthly_payment"] == pytest.approx(monthly_payment(25000, 0.065 / 12, 60))
    assert result.details["payoff_months"] == 60
    assert result.details["interest_saved"] == pytest.approx(0)


def test_loan_extra_payments_shorten_payoff():
    result = calculate("loan-payment-calculator", {
        "mode": "standard", "extra_monthly": "100", "extra_yearly": "500", "one_time_extra": "1000",
    })
    assert result.details["months_saved"] > 0
    assert result.details["interest_saved"] > 0
    assert result.details["total_extra_paid"] > 0


def test_loan_biweekly_saves_interest():
    result = calculate("loan-payment-calculator", {"mode": "biweekly"})
    assert result.details["interest_saved"] > 0
    assert result.details["installments"] < 5 * 26


def test_loan_one_time_month_outside_term():
    with pytest.raises(ValidationError) as exc:
        calculate("loan-payment-calculator", {"mode": "standard", "one_time_month": "61"})
    assert exc.value.field == "one_time_month"


def test_loan_zero_rate():
    result = calculate("loan-payment-calculator", {"mode": "standard", "interest_rate": "0"})
    assert result.details["monthly_payment"] == pytest.approx(25000 / 60)
    assert result.component("interest").value == 0


def test_loan_fifteen_year_scenario():
    result = calculate("loan-payment-calculator", {"mode": "standard", "term_years": "30"})
    current, short = result.details["comparison_scenarios"]
    assert current["term_years"] == 30
    assert short["term_years"] == 15
    assert short["monthly_payment"] == pytest.approx(monthly_payment(25000, 0.065 / 12, 180))
    assert short["interest_saved"] > 0

    five_year = calculate("loan-payment-calculator", {"mode": "standard"})
    assert len(five_year.details["comparison_scenarios"]) == 1


def _loan_affordability(debts):
    # 12,000 at 0% over a year: exactly 1,000 a month
    return calculate("loan-payment-calculator", {
        "mode": "affordability", "principal": "12000", "interest_rate": "0", "term_years": "1",
        "monthly_income": "10000", "monthly_debts": str(debts),
    })


@pytest.mark.parametrize("debts,risk", [
    (1800, "low"),
    (1801, "moderate"),
    (2600, "moderate"),
    (2601, "high"),
    (3300, "high"),
    (3301, "very-high"),
])
def test_loan_affordability_risk_boundaries(debts, risk):
    result = _loan_affordability(debts)
    assert result.tier.label == risk
    assert result.total == pytest.approx(1000 + debts)


def test_loan_affordability_details():
    result = _loan_affordability(1800)
    assert result.details["debt_to_income"] == 28
    assert result.details["payment_to_income"] == 10
    assert result.details["affordability_score"] == pytest.approx(62)
    assert result.details["recommended_income"] == pytest.approx(3000)
    assert result.details["max_affordable_loan"] == pytest.approx(2800 * 12)
    assert not result.notes
    assert _loan_affordability(3000).notes


def test_loan_affordability_needs_income():
    with pytest.raises(ValidationError) as exc:
        calculate("loan-payment-calculator", {"mode": "affordability", "monthly_income": "0"})
    assert exc.value.field == "monthly_income"


# BMI

def test_bmi_metric():
    result = calculate("bmi-calculator", {"mode": "metric"})
    assert result.combine == "product"
    assert result.total == pytest.approx(70 / 1.75 ** 2)
    assert result.tier.label == "Normal weight"
    assert result.notes


def test_bmi_imperial_matches_metric():
    imperial = calculate("bmi-calculator",
                         {"mode": "imperial", "weight_lb": "220", "height_ft": "6", "height_in": "0"})
    metres = 72 * 0.0254
    assert imperial.total == pytest.approx(220 * 0.453592 / metres ** 2)
    assert imperial.tier.label == "Overweight"
    assert imperial.details["weight_unit"] == "lb"


def test_bmi_rejects_zero_height():
    with pytest.raises(ValidationError):
        calculate("bmi-calculator", {"mode": "metric", "height_cm": "0"})


def test_boarding_spec_exposes_every_mode():
    assert [m.key for m in boarding.SPEC.modes] == ["basic", "comparison", "extended", "budget", "multi-pet"]
