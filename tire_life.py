"""
Tire life estimator.

Three independent estimates of remaining miles are produced (measured
wear rate adjusted for driving conditions, remaining warranty mileage,
UTQG treadwear rating) and the most conservative positive one wins.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, List

import config as cfg
from engine import CalculatorSpec, Component, Field, Mode, ResultRecord, clamp, require
from tiers import RuleTable, TierTable

SCORE_TABLE = TierTable("tire health score", cfg.TIRE_SCORE_TIERS)

SAFETY_RULES = RuleTable(
    "tire safety status",
    [
        ("Replace Immediately",
         lambda s: s["depth"] <= cfg.TIRE_MIN_SAFE_DEPTH or s["age"] >= cfg.TIRE_AGE_REPLACE_YEARS),
        ("Replace Soon",
         lambda s: (s["depth"] <= cfg.TIRE_REPLACE_SOON_DEPTH
                    or s["age"] >= cfg.TIRE_AGE_WARNING_YEARS
                    or s["life"] < cfg.TIRE_REPLACE_SOON_MILES)),
        ("Monitor Closely",
         lambda s: s["depth"] <= cfg.TIRE_MONITOR_DEPTH or s["life"] < cfg.TIRE_MONITOR_MILES),
    ],
    default="Good Condition",
)


@dataclass
class TireInputs:
    mode: str
    treadwear_rating: float
    warranty_miles: float
    initial_depth: float
    current_depth: float
    tire_age: float
    miles_on_tire: float
    avg_miles_per_year: float
    driving_style: str
    road_type: str
    climate: str
    rotation_frequency: float
    last_rotation: float
    alignment: str
    pressure_check: str
    tire_cost: float
    installation_cost: float
    as_of: date

    def __post_init__(self) -> None:
        require(self.initial_depth > 0, "Initial tread depth must be greater than zero", "initial_depth")
        require(self.current_depth < self.initial_depth,
                "Current tread depth must be less than the initial depth to measure wear",
                "current_depth")
        require(self.miles_on_tire > 0, "Miles on tire must be greater than zero", "miles_on_tire")
        require(self.avg_miles_per_year > 0, "Annual mileage must be greater than zero",
                "avg_miles_per_year")
        require(self.rotation_frequency > 0, "Rotation interval must be greater than zero",
                "rotation_frequency")
        require(self.last_rotation <= self.miles_on_tire,
                "Last rotation cannot be after the current mileage", "last_rotation")


def condition_multiplier(inputs: TireInputs) -> float:
    return (cfg.TIRE_DRIVING_STYLE[inputs.driving_style]
            * cfg.TIRE_ROAD_TYPE[inputs.road_type]
            * cfg.TIRE_CLIMATE[inputs.climate])


def maintenance_multiplier(inputs: TireInputs) -> float:
    rotation = cfg.TIRE_ROTATION_OVERDUE_MULTIPLIER if rotation_overdue(inputs) else 1.0
    return (rotation
            * cfg.TIRE_ALIGNMENT[inputs.alignment]
            * cfg.TIRE_PRESSURE_CHECK[inputs.pressure_check])


def health_scores(inputs: TireInputs) -> Dict[str, float]:
    """Maintenance, condition and overall scores, each 0 to 100."""
    since_rotation = inputs.miles_on_tire - inputs.last_rotation
    maintenance = 100.0
    if since_rotation > inputs.rotation_frequency:
        maintenance -= cfg.TIRE_ROTATION_PENALTY
    maintenance -= cfg.TIRE_ALIGNMENT_PENALTY[inputs.alignment]
    maintenance -= cfg.TIRE_PRESSURE_PENALTY[inputs.pressure_check]
    maintenance = clamp(maintenance, 0, 100)

    condition = inputs.current_depth / inputs.initial_depth * 100
    if inputs.tire_age >= cfg.TIRE_AGE_WARNING_YEARS:
        condition *= 0.7
    if inputs.tire_age >= cfg.TIRE_AGE_SEVERE_YEARS:
        condition *= 0.5
    condition = clamp(condition, 0, 100)

    return {
        "maintenance": maintenance,
        "condition": condition,
        "overall": clamp((maintenance + condition) / 2, 0, 100),
    }


def age_warning(age: float) -> str:
    if age >= cfg.TIRE_AGE_REPLACE_YEARS:
        return "Tires over 10 years old should be replaced regardless of tread depth"
    if age >= cfg.TIRE_AGE_SEVERE_YEARS:
        return "Tires over 8 years old have significantly increased failure risk"
    if age >= cfg.TIRE_AGE_WARNING_YEARS:
        return "Tires over 6 years old should be inspected annually"
    return ""


def rotation_overdue(inputs: TireInputs) -> bool:
    since_rotation = inputs.miles_on_tire - inputs.last_rotation
    return since_rotation > inputs.rotation_frequency * cfg.TIRE_ROTATION_OVERDUE_FACTOR


def maintenance_actions(inputs: TireInputs, projected_cost_per_mile: float) -> List[str]:
    actions = []
    if rotation_overdue(inputs):
        actions.append("Rotate tires now - rotation is overdue")
    if inputs.alignment in ("fair", "poor", "unknown"):
        actions.append("Get a wheel alignment check to prevent uneven wear")
    if inputs.pressure_check in ("rarely", "never"):
        actions.append("Check tire pressure monthly to extend tread life")
    if inputs.driving_style == "aggressive":
        actions.append("Smoother acceleration and braking can extend tire life by 15-20%")
    if inputs.current_depth <= cfg.TIRE_REPLACE_SOON_DEPTH:
        actions.append("Tread is getting low - start shopping for replacements")
    if projected_cost_per_mile > cfg.TIRE_HIGH_COST_PER_MILE:
        actions.append("High cost per mile - consider longer-lasting tires next time")
    return actions


def estimate(inputs: TireInputs) -> ResultRecord:
    usable = inputs.current_depth - cfg.TIRE_MIN_SAFE_DEPTH
    worn = inputs.initial_depth - inputs.current_depth
    wear_rate = worn / (inputs.miles_on_tire / 1000)    # 32nds per 1,000 miles

    remaining = max(0.0, usable / wear_rate * 1000)
    cond = condition_multiplier(inputs)
    maint = maintenance_multiplier(inputs)
    usage_life = remaining * cond * maint

    components = [Component("usage", "Usage-based estimate", usage_life, "miles")]
    warranty_left = inputs.warranty_miles - inputs.miles_on_tire
    if warranty_left > 0:
        components.append(Component("warranty", "Warranty remaining", warranty_left, "miles"))
    treadwear_left = inputs.treadwear_rating / 100 * cfg.TIRE_UTQG_BASELINE_MILES - inputs.miles_on_tire
    if treadwear_left > 0:
        components.append(Component("treadwear", "Treadwear rating remaining", treadwear_left, "miles"))

    life = min(c.value for c in components)
    months = life / inputs.avg_miles_per_year * 12
    days = int(math.floor(months * 30))

    total_cost = inputs.tire_cost + inputs.installation_cost
    cost_per_mile = total_cost / inputs.miles_on_tire
    projected_cost_per_mile = total_cost / (inputs.miles_on_tire + life)
    scores = health_scores(inputs)
    safety = SAFETY_RULES.classify({"depth": inputs.current_depth, "age": inputs.tire_age, "life": life})

    return ResultRecord(
        calculator=SPEC_SLUG,
        mode="estimate",
        total=life,
        total_label="Recommended remaining life",
        components=components,
        unit="miles",
        combine="min",
        tier=SCORE_TABLE.lookup(scores["overall"]),
        details={
            "wear_rate_per_1000": wear_rate,
            "usable_depth": usable,
            "raw_remaining_miles": remaining,
            "condition_multiplier": cond,
            "maintenance_multiplier": maint,
            "remaining_months": months,
            "days_until_replacement": days,
            "replace_by": inputs.as_of + timedelta(days=days),
            "safety_status": safety,
            "age_warning": age_warning(inputs.tire_age),
            "cost_per_mile": projected_cost_per_mile,
            "current_cost_per_mile": cost_per_mile,
            "cost_per_year": cost_per_mile * inputs.avg_miles_per_year,
            "replacement_set_cost": total_cost * cfg.TIRE_SET_SIZE,
            "maintenance_score": scores["maintenance"],
            "condition_score": scores["condition"],
            "overall_score": scores["overall"],
            "actions": maintenance_actions(inputs, projected_cost_per_mile),
        },
    )


# ─── Spec ────────────────────────────────────────────────────────────

SPEC_SLUG = "tire-life-calculator"


def _choices(table: Dict[str, float]):
    return tuple((k, k.title()) for k in table)


SPEC = CalculatorSpec(
    slug=SPEC_SLUG,
    name="Tire Life Calculator",
    description="Estimate remaining tread life, replacement date and running cost of your tires.",
    fields=(
        Field("treadwear_rating", "UTQG treadwear rating", "number", 400, min_value=0),
        Field("warranty_miles", "Mileage warranty", "number", 50000, min_value=0),
        Field("initial_depth", "Initial tread depth (32nds)", "number", 10, min_value=0, max_value=32),
        Field("current_depth", "Current tread depth (32nds)", "number", 7, min_value=0, max_value=32),
        Field("tire_age", "Tire age (years)", "number", 2, min_value=0),
        Field("miles_on_tire", "Miles on tire", "number", 20000, min_value=0),
        Field("avg_miles_per_year", "Miles driven per year", "number", 12000, min_value=0),
        Field("driving_style", "Driving style", "choice", "normal", choices=_choices(cfg.TIRE_DRIVING_STYLE)),
        Field("road_type", "Road type", "choice", "mixed", choices=_choices(cfg.TIRE_ROAD_TYPE)),
        Field("climate", "Climate", "choice", "moderate", choices=_choices(cfg.TIRE_CLIMATE)),
        Field("rotation_frequency", "Rotation interval (miles)", "number", 7500, min_value=0),
        Field("last_rotation", "Mileage at last rotation", "number", 15000, min_value=0),
        Field("alignment", "Alignment condition", "choice", "good", choices=_choices(cfg.TIRE_ALIGNMENT)),
        Field("pressure_check", "Pressure check frequency", "choice", "monthly",
              choices=_choices(cfg.TIRE_PRESSURE_CHECK)),
        Field("tire_cost", "Cost per tire", "number", 150, min_value=0, currency=True),
        Field("installation_cost", "Installation cost per tire", "number", 25, min_value=0, currency=True),
        Field("as_of", "As of date", "date", date.today),
    ),
    modes=(Mode("estimate", "Estimate", estimate),),
    inputs_cls=TireInputs,
)
