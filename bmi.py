"""
Body mass index, metric or imperial.
"""

from __future__ import annotations

from dataclasses import dataclass

import config as cfg
from engine import CalculatorSpec, Component, Field, Mode, ResultRecord, require
from tiers import TierTable

BMI_TABLE = TierTable("BMI category", cfg.BMI_TIERS)

HEALTHY_LOW = 18.5
HEALTHY_HIGH = 24.9


@dataclass
class BmiInputs:
    mode: str
    weight_kg: float
    height_cm: float
    weight_lb: float
    height_ft: float
    height_in: float

    def __post_init__(self) -> None:
        if self.mode == "metric":
            require(self.weight_kg > 0, "Weight must be greater than zero", "weight_kg")
            require(self.height_cm > 0, "Height must be greater than zero", "height_cm")
        else:
            require(self.weight_lb > 0, "Weight must be greater than zero", "weight_lb")
            require(self.height_ft > 0 or self.height_in > 0,
                    "Height must be greater than zero", "height_ft")

    def metric(self):
        """(kg, metres) regardless of the unit system entered."""
        if self.mode == "metric":
            return self.weight_kg, self.height_cm / 100
        inches = self.height_ft * 12 + self.height_in
        return self.weight_lb * cfg.KG_PER_LB, inches * cfg.M_PER_INCH


def calculate(inputs: BmiInputs) -> ResultRecord:
    kg, metres = inputs.metric()
    inverse_sq = 1 / (metres * metres)
    bmi = kg * inverse_sq
    tier = BMI_TABLE.lookup(bmi)
    low, high = HEALTHY_LOW * metres ** 2, HEALTHY_HIGH * metres ** 2
    if inputs.mode == "imperial":
        low, high = low / cfg.KG_PER_LB, high / cfg.KG_PER_LB
    return ResultRecord(
        calculator=SPEC_SLUG,
        mode=inputs.mode,
        total=bmi,
        total_label="Body mass index",
        components=[
            Component("weight_kg", "Weight (kg)", kg, "number"),
            Component("inverse_height_sq", "1 / height² (1/m²)", inverse_sq, "number"),
        ],
        unit="number",
        combine="product",
        tier=tier,
        notes=list(cfg.BMI_RECOMMENDATIONS[tier.label]),
        details={
            "category": tier.label,
            "health_risk": cfg.BMI_HEALTH_RISK[tier.label],
            "bmi_prime": bmi / 25,
            "healthy_weight_low": low,
            "healthy_weight_high": high,
            "weight_unit": "kg" if inputs.mode == "metric" else "lb",
        },
    )


SPEC_SLUG = "bmi-calculator"

SPEC = CalculatorSpec(
    slug=SPEC_SLUG,
    name="BMI Calculator",
    description="Body mass index with category, health risk and a healthy weight range.",
    fields=(
        Field("weight_kg", "Weight (kg)", "number", 70, min_value=0, max_value=cfg.BMI_MAX_KG,
              modes=("metric",)),
        Field("height_cm", "Height (cm)", "number", 175, min_value=0, max_value=cfg.BMI_MAX_CM,
              modes=("metric",)),
        Field("weight_lb", "Weight (lb)", "number", 160, min_value=0, max_value=cfg.BMI_MAX_POUNDS,
              modes=("imperial",)),
        Field("height_ft", "Height (ft)", "integer", 5, min_value=0, max_value=cfg.BMI_MAX_FEET,
              modes=("imperial",)),
        Field("height_in", "Height (in)", "number", 9, min_value=0, max_value=11.99,
              modes=("imperial",)),
    ),
    modes=(
        Mode("metric", "Metric (kg, cm)", calculate),
        Mode("imperial", "Imperial (lb, ft/in)", calculate),
    ),
    inputs_cls=BmiInputs,
)
