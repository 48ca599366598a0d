"""
Chart rendering smoke tests.
"""

import base64

import matplotlib.pyplot as plt

import report
from calculators import calculate, get_calculator


def test_web_charts_without_schedule():
    result = calculate("bmi-calculator", {"mode": "metric"})
    charts = report.get_web_charts(result)
    assert len(charts) == 1
    assert base64.b64decode(charts[0]).startswith(b"\x89PNG")


def test_web_charts_with_schedule():
    result = calculate("mortgage-payment-calculator", {"mode": "payment"})
    charts = report.get_web_charts(result)
    assert len(charts) == 2
    assert all(charts)


def test_charts_are_closed_after_rendering():
    before = len(plt.get_fignums())
    report.get_web_charts(calculate("days-on-market-calculator", {"mode": "average"}))
    assert len(plt.get_fignums()) == before


def test_generate_pdf(tmp_path):
    spec = get_calculator("loan-payment-calculator")
    result = calculate(spec.slug, {"mode": "standard", "extra_monthly": "50"})
    path = report.generate_pdf(spec, result, str(tmp_path / "loan.pdf"))
    with open(path, "rb") as fh:
        assert fh.read(4) == b"%PDF"


def test_web_charts_with_growth_projection():
    result = calculate("compound-interest-calculator", {"mode": "investment"})
    charts = report.get_web_charts(result)
    assert len(charts) == 2
    assert base64.b64decode(charts[1]).startswith(b"\x89PNG")
