"""
Registry of the implemented calculators, keyed by catalog slug.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping

import bmi
import boarding
import compound_interest
import days_on_market
import loan_payment
import mortgage
import passer_rating
import tire_life
from engine import CalculatorSpec, ResultRecord

logger = logging.getLogger(__name__)

CALCULATORS: Dict[str, CalculatorSpec] = {
    spec.slug: spec
    for spec in (
        boarding.SPEC,
        passer_rating.SPEC,
        days_on_market.SPEC,
        tire_life.SPEC,
        mortgage.SPEC,
        loan_payment.SPEC,
        bmi.SPEC,
        compound_interest.SPEC,
    )
}


def get_calculator(slug: str) -> CalculatorSpec:
    """Look up a calculator; unknown slugs raise ``KeyError``."""
    try:
        return CALCULATORS[slug]
    except KeyError:
        raise KeyError(f"No calculator implemented for '{slug}'") from None


def is_implemented(slug: str) -> bool:
    return slug in CALCULATORS


def list_calculators() -> List[CalculatorSpec]:
    return list(CALCULATORS.values())


def calculate(slug: str, form: Mapping[str, Any]) -> ResultRecord:
    """Parse *form* and run the selected mode of calculator *slug*."""
    spec = get_calculator(slug)
    result = spec.calculate(form)
    logger.debug("%s/%s -> %s %.4f", slug, result.mode, result.total_label, result.total)
    return result
