"""
Tier table tests: every value lands in exactly one tier.
"""

import math

import numpy as np
import pytest

import boarding
import bmi
import days_on_market
import loan_payment
import mortgage
import passer_rating
import tire_life
from tiers import RuleTable, TierTable

INF = float("inf")

ALL_TABLES = [
    boarding.DISCOUNT_TABLE,
    passer_rating.NFL_GRADES,
    passer_rating.NCAA_GRADES,
    days_on_market.MARKET_TABLE,
    days_on_market.PRICING_TABLE,
    tire_life.SCORE_TABLE,
    mortgage.RISK_TABLE,
    mortgage.AFFORDABILITY_TABLE,
    loan_payment.RISK_TABLE,
    bmi.BMI_TABLE,
]


def _sweep(table):
    points = list(np.linspace(-50, 400, 4501))
    for b in table.boundaries():
        points.extend([b, math.nextafter(b, -INF), math.nextafter(b, INF)])
    points.extend([-1e12, 1e12])
    return points


@pytest.mark.parametrize("table", ALL_TABLES, ids=lambda t: t.name)
def test_exactly_one_tier_over_sweep(table):
    for x in _sweep(table):
        found = table.matches(x)
        assert len(found) == 1, (table.name, x, found)
        assert table.lookup(x) is found[0]


def test_left_closed_boundary():
    assert boarding.DISCOUNT_TABLE.lookup(6).value == 1.0
    assert boarding.DISCOUNT_TABLE.lookup(7).value == 0.93
    assert boarding.DISCOUNT_TABLE.lookup(14).value == 0.88
    assert boarding.DISCOUNT_TABLE.lookup(30).value == 0.82


def test_right_closed_boundary():
    table = days_on_market.PRICING_TABLE
    assert table.lookup(0.5).value == 0.03
    assert table.lookup(1.2).value == 0.0
    assert table.lookup(1.5).value == -0.03
    assert table.lookup(1.5000001).value == -0.05


def test_lookup_rejects_nan():
    with pytest.raises(ValueError):
        bmi.BMI_TABLE.lookup(float("nan"))


@pytest.mark.parametrize("rows", [
    [(-INF, 10, "a", 0), (11, INF, "b", 0)],                 # gap
    [(-INF, 10, "a", 0), (9, INF, "b", 0)],                  # overlap
    [(0, 10, "a", 0), (10, INF, "b", 0)],                    # open bottom
    [(-INF, 10, "a", 0), (10, 20, "b", 0)],                  # open top
    [(-INF, 10, "a", 0), (10, 10, "b", 0), (10, INF, "c", 0)],  # empty band
    [],
])
def test_broken_tables_are_rejected(rows):
    with pytest.raises(ValueError):
        TierTable("broken", rows)


def test_bad_closed_option():
    with pytest.raises(ValueError):
        TierTable("t", [(-INF, INF, "all", 0)], closed="both")


def test_rule_table_first_match_and_default():
    rules = RuleTable("parity", [("big", lambda x: x > 100), ("even", lambda x: x % 2 == 0)],
                      default="other")
    assert rules.classify(102) == "big"
    assert rules.classify(4) == "even"
    assert rules.classify(3) == "other"
    assert rules.labels() == ["big", "even", "other"]


@pytest.mark.parametrize("depth,age,life,expected", [
    (2, 0, 40000, "Replace Immediately"),
    (9, 10, 40000, "Replace Immediately"),
    (4, 0, 40000, "Replace Soon"),
    (9, 6, 40000, "Replace Soon"),
    (9, 0, 4999, "Replace Soon"),
    (9, 0, 5000, "Monitor Closely"),
    (6, 0, 40000, "Monitor Closely"),
    (9, 5, 14999, "Monitor Closely"),
    (7, 5, 15000, "Good Condition"),
])
def test_tire_safety_status_boundaries(depth, age, life, expected):
    assert tire_life.SAFETY_RULES.classify({"depth": depth, "age": age, "life": life}) == expected
