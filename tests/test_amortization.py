"""
Unit tests for the shared amortization helpers.
"""

import numpy as np
import pytest

from amortization import amortize, monthly_payment


def test_monthly_payment_known_value():
    # 100k at 6% over 30 years
    assert monthly_payment(100000, 0.06 / 12, 360) == pytest.approx(599.55, abs=0.01)


def test_monthly_payment_zero_rate():
    assert monthly_payment(1200, 0, 12) == 100


def test_monthly_payment_needs_positive_term():
    with pytest.raises(ValueError):
        monthly_payment(1000, 0.01, 0)


def test_schedule_pays_off_exactly():
    rate = 0.05 / 12
    pay = monthly_payment(20000, rate, 48)
    s = amortize(20000, rate, pay, 48)
    assert s.months == 48
    assert s.total_principal == pytest.approx(20000, abs=0.01)
    assert s.total_paid == pytest.approx(pay * 48, abs=0.01)
    assert s.ending_balance[-1] == pytest.approx(0, abs=0.01)
    assert np.all(s.ending_balance >= 0)
    assert np.all(np.diff(s.cumulative_interest) >= 0)


def test_extra_payments():
    rate = 0.06 / 12
    pay = monthly_payment(10000, rate, 60)
    base = amortize(10000, rate, pay, 60)
    s = amortize(10000, rate, pay, 60, extra_monthly=50, extra_yearly=300, one_time=(500, 3))
    assert s.extra[0] == 50
    assert s.extra[2] == 550
    assert s.extra[11] == 350
    assert s.months < base.months
    assert s.total_interest < base.total_interest
    assert np.all(s.ending_balance >= 0)


def test_final_extra_payment_is_trimmed():
    s = amortize(1000, 0.0, 100, 20, one_time=(5000, 2))
    assert s.months == 2
    assert s.ending_balance[-1] == 0
    assert s.total_principal == pytest.approx(1000)


def test_payment_below_interest_stops():
    s = amortize(1000, 0.01, 5, 100)
    assert s.months == 0
    assert s.total_interest == 0


def test_rows_limit():
    s = amortize(1200, 0.0, 100, 12)
    rows = s.rows(3)
    assert [r["month"] for r in rows] == [1, 2, 3]
    assert rows[0]["ending_balance"] == pytest.approx(1100)
    assert len(s.rows()) == 12
