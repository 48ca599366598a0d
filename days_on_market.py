"""
Days on market (DOM) for real estate listings.

DOM is the whole number of days between two calendar dates. Cumulative
DOM (CDOM) adds up the time on market across a delist / relist; a relist
after more than 45 days off market resets the counter.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple

import numpy as np

import config as cfg
from engine import CalculatorSpec, Component, Field, Mode, ResultRecord, require
from tiers import TierTable

MARKET_TABLE = TierTable("market speed", cfg.DOM_MARKET_TIERS)
PRICING_TABLE = TierTable("pricing recommendation", cfg.DOM_PRICING_TIERS, closed="right")


def days_between(start: date, end: date) -> int:
    """Whole days from *start* to *end* (negative if *end* is earlier)."""
    return (end - start).days


@dataclass
class DomInputs:
    mode: str
    list_date: Optional[date]
    sale_date: Optional[date]
    initial_list_date: Optional[date]
    delist_date: Optional[date]
    relist_date: Optional[date]
    final_sale_date: Optional[date]
    listing_1_list: Optional[date]
    listing_1_sale: Optional[date]
    listing_2_list: Optional[date]
    listing_2_sale: Optional[date]
    listing_3_list: Optional[date]
    listing_3_sale: Optional[date]
    listing_4_list: Optional[date]
    listing_4_sale: Optional[date]
    listing_5_list: Optional[date]
    listing_5_sale: Optional[date]
    property_dom: float
    list_price: float
    market_avg_dom: float
    property1_dom: float
    property2_dom: float

    def __post_init__(self) -> None:
        check = getattr(self, "_check_" + self.mode.replace("-", "_"), None)
        if check is not None:
            check()

    def _check_basic(self) -> None:
        require(self.sale_date >= self.list_date,
                "Sale date must be on or after the listing date", "sale_date")

    def _check_cdom(self) -> None:
        require((self.delist_date is None) == (self.relist_date is None),
                "Enter both a delist and a relist date, or neither", "relist_date")
        require(self.final_sale_date >= self.initial_list_date,
                "Final sale date must be on or after the initial listing date", "final_sale_date")
        if self.delist_date is not None:
            require(self.delist_date >= self.initial_list_date,
                    "Delist date must be on or after the initial listing date", "delist_date")
            require(self.relist_date >= self.delist_date,
                    "Relist date must be on or after the delist date", "relist_date")
            require(self.final_sale_date >= self.relist_date,
                    "Final sale date must be on or after the relist date", "final_sale_date")

    def _check_average(self) -> None:
        for i in range(1, cfg.DOM_MAX_LISTINGS + 1):
            listed = getattr(self, f"listing_{i}_list")
            sold = getattr(self, f"listing_{i}_sale")
            require((listed is None) == (sold is None),
                    f"Listing {i} needs both a list date and a sale date", f"listing_{i}_sale")
            if listed is not None:
                require(sold >= listed,
                        f"Listing {i} sale date must be on or after its list date",
                        f"listing_{i}_sale")
        require(len(self.listings()) >= 2, "Enter at least two complete listings",
                "listing_2_sale")

    def _check_pricing(self) -> None:
        require(self.market_avg_dom > 0, "Market average DOM must be greater than zero",
                "market_avg_dom")
        require(self.list_price > 0, "List price must be greater than zero", "list_price")

    def listings(self) -> List[Tuple[date, date]]:
        out = []
        for i in range(1, cfg.DOM_MAX_LISTINGS + 1):
            listed = getattr(self, f"listing_{i}_list")
            sold = getattr(self, f"listing_{i}_sale")
            if listed is not None and sold is not None:
                out.append((listed, sold))
        return out


def _market_details(days: float) -> dict:
    tier = MARKET_TABLE.lookup(days)
    return {"market": tier.label, "market_description": cfg.DOM_MARKET_DESCRIPTIONS[tier.label]}


# ─── Modes ───────────────────────────────────────────────────────────

def basic(inputs: DomInputs) -> ResultRecord:
    dom = days_between(inputs.list_date, inputs.sale_date)
    return ResultRecord(
        calculator=SPEC_SLUG,
        mode="basic",
        total=dom,
        total_label="Days on market",
        components=[Component("days_on_market", "Listing to sale", dom, "days")],
        unit="days",
        tier=MARKET_TABLE.lookup(dom),
        details=_market_details(dom),
    )


def cdom(inputs: DomInputs) -> ResultRecord:
    """Cumulative DOM across an optional delist / relist."""
    if inputs.delist_date is None:
        span = days_between(inputs.initial_list_date, inputs.final_sale_date)
        components = [Component("listing", "Time on market", span, "days")]
        details = {"dom": span, "days_off_market": 0, "relisted": False,
                   "reset_applied": False, "cdom_with_reset": span}
    else:
        first = days_between(inputs.initial_list_date, inputs.delist_date)
        second = days_between(inputs.relist_date, inputs.final_sale_date)
        off = days_between(inputs.delist_date, inputs.relist_date)
        reset = off > cfg.DOM_RELIST_RESET_DAYS
        components = [
            Component("first_listing", "First listing period", first, "days"),
            Component("second_listing", "Relisted period", second, "days"),
        ]
        details = {"dom": second, "days_off_market": off, "relisted": True,
                   "reset_applied": reset, "cdom_with_reset": second if reset else first + second}

    total = sum(c.value for c in components)
    details.update(_market_details(total))
    return ResultRecord(
        calculator=SPEC_SLUG,
        mode="cdom",
        total=total,
        total_label="Cumulative days on market",
        components=components,
        unit="days",
        tier=MARKET_TABLE.lookup(total),
        details=details,
    )


def average(inputs: DomInputs) -> ResultRecord:
    """Mean DOM over several sold listings."""
    doms = [days_between(listed, sold) for listed, sold in inputs.listings()]
    arr = np.array(doms, dtype=float)
    avg = float(arr.mean())
    ordered = sorted(doms)
    details = {
        "count": len(doms),
        "median": ordered[len(ordered) // 2],
        "fastest": int(arr.min()),
        "slowest": int(arr.max()),
    }
    details.update(_market_details(avg))
    return ResultRecord(
        calculator=SPEC_SLUG,
        mode="average",
        total=avg,
        total_label="Average days on market",
        components=[Component(f"listing_{i}", f"Listing {i}", d, "days")
                    for i, d in enumerate(doms, 1)],
        unit="days",
        combine="mean",
        tier=MARKET_TABLE.lookup(avg),
        details=details,
    )


def pricing(inputs: DomInputs) -> ResultRecord:
    """Suggest a price change from DOM relative to the market average."""
    ratio = inputs.property_dom / inputs.market_avg_dom
    tier = PRICING_TABLE.lookup(ratio)
    adjustment = inputs.list_price * tier.value
    details = {
        "ratio": ratio,
        "percent_vs_market": (ratio - 1) * 100,
        "recommendation": tier.label,
        "adjustment_pct": tier.value * 100,
    }
    details.update(_market_details(inputs.property_dom))
    return ResultRecord(
        calculator=SPEC_SLUG,
        mode="pricing",
        total=inputs.list_price + adjustment,
        total_label="Suggested list price",
        components=[
            Component("list_price", "Current list price", inputs.list_price),
            Component("price_adjustment", "Recommended adjustment", adjustment),
        ],
        tier=tier,
        details=details,
    )


def comparison(inputs: DomInputs) -> ResultRecord:
    """Two properties; total is the faster sale."""
    d1, d2 = inputs.property1_dom, inputs.property2_dom
    diff = abs(d1 - d2)
    slower = max(d1, d2)
    if d1 < d2:
        faster = "Property 1"
    elif d2 < d1:
        faster = "Property 2"
    else:
        faster = "Same"
    fastest = min(d1, d2)
    return ResultRecord(
        calculator=SPEC_SLUG,
        mode="comparison",
        total=fastest,
        total_label="Faster sale (days)",
        components=[
            Component("property1", "Property 1", d1, "days"),
            Component("property2", "Property 2", d2, "days"),
        ],
        unit="days",
        combine="min",
        tier=MARKET_TABLE.lookup(fastest),
        details={
            "difference": diff,
            "percent_difference": diff / slower * 100 if slower else 0.0,
            "faster": faster,
            "property1_market": MARKET_TABLE.lookup(d1).label,
            "property2_market": MARKET_TABLE.lookup(d2).label,
        },
    )


# ─── Spec ────────────────────────────────────────────────────────────

SPEC_SLUG = "days-on-market-calculator"


def _listing_fields():
    defaults = [
        (date(2024, 1, 1), date(2024, 2, 10)),
        (date(2024, 2, 1), date(2024, 3, 5)),
        (date(2024, 3, 1), date(2024, 5, 15)),
        (None, None),
        (None, None),
    ]
    out = []
    for i, (listed, sold) in enumerate(defaults, 1):
        out.append(Field(f"listing_{i}_list", f"Listing {i} list date", "date", listed,
                         required=False, modes=("average",)))
        out.append(Field(f"listing_{i}_sale", f"Listing {i} sale date", "date", sold,
                         required=False, modes=("average",)))
    return tuple(out)


SPEC = CalculatorSpec(
    slug=SPEC_SLUG,
    name="Days on Market Calculator",
    description="Measure how quickly a property sold and what that says about the market.",
    fields=(
        Field("list_date", "Listing date", "date", date(2024, 1, 15), modes=("basic",)),
        Field("sale_date", "Sale date", "date", date(2024, 3, 1), modes=("basic",)),
        Field("initial_list_date", "Initial listing date", "date", date(2024, 1, 1), modes=("cdom",)),
        Field("delist_date", "Delist date", "date", date(2024, 2, 15), required=False, modes=("cdom",),
              help="Leave blank if the property was never taken off the market"),
        Field("relist_date", "Relist date", "date", date(2024, 3, 1), required=False, modes=("cdom",)),
        Field("final_sale_date", "Final sale date", "date", date(2024, 4, 10), modes=("cdom",)),
    ) + _listing_fields() + (
        Field("property_dom", "Property days on market", "number", 45, min_value=0, modes=("pricing",)),
        Field("list_price", "List price", "number", 450000, min_value=0, currency=True, modes=("pricing",)),
        Field("market_avg_dom", "Market average DOM", "number", 30, min_value=0, modes=("pricing",)),
        Field("property1_dom", "Property 1 DOM", "number", 25, min_value=0, modes=("comparison",)),
        Field("property2_dom", "Property 2 DOM", "number", 60, min_value=0, modes=("comparison",)),
    ),
    modes=(
        Mode("basic", "Basic DOM", basic),
        Mode("cdom", "Cumulative DOM", cdom),
        Mode("average", "Average DOM", average),
        Mode("pricing", "Pricing strategy", pricing),
        Mode("comparison", "Compare properties", comparison),
    ),
    inputs_cls=DomInputs,
)
