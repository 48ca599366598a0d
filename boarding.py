"""
Pet boarding cost calculator.

Nightly cost = facility base rate x pet size multiplier x location
multiplier, plus an optional holiday premium and per-day add-ons, then
discounted by the length-of-stay tier. One-time add-ons (grooming) are
added once per stay.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

import config as cfg
from engine import CalculatorSpec, Component, Field, Mode, ResultRecord, require
from tiers import TierTable

DISCOUNT_TABLE = TierTable("boarding duration discount", cfg.BOARDING_DISCOUNT_TIERS)


@dataclass
class BoardingInputs:
    """Boarding form values."""

    mode: str
    pet_type: str
    pet_size: str
    facility: str
    nights: int
    location: str
    holiday_peak: bool
    pets: int
    medication: bool
    grooming: bool
    playtime: bool
    webcam: bool
    training: bool

    def __post_init__(self) -> None:
        require(self.nights >= 1, "Stay must be at least one night", "nights")
        require(self.pets >= 1, "Number of pets must be at least 1", "pets")
        require(self.facility in cfg.BOARDING_BASE_RATES, "Unknown facility type", "facility")


# ─── Rate factors ────────────────────────────────────────────────────

def size_multiplier(pet_type: str, pet_size: str) -> float:
    """Cats and small animals use flat multipliers; dogs scale by size."""
    if pet_type == "cat":
        return cfg.BOARDING_CAT_MULTIPLIER
    if pet_type == "other":
        return cfg.BOARDING_OTHER_MULTIPLIER
    return cfg.BOARDING_DOG_SIZE_MULTIPLIERS[pet_size]


def daily_addons(inputs: BoardingInputs) -> float:
    return float(sum(cost for name, cost in cfg.BOARDING_DAILY_ADDONS.items()
                     if getattr(inputs, name)))


def one_time_addons(inputs: BoardingInputs) -> float:
    return float(sum(cost for name, cost in cfg.BOARDING_ONE_TIME_ADDONS.items()
                     if getattr(inputs, name)))


def stay_cost(inputs: BoardingInputs, facility: str, nights: int, mode: str = "basic") -> ResultRecord:
    """Cost of one pet staying *nights* nights at *facility*."""
    base_rate = cfg.BOARDING_BASE_RATES[facility]
    size_mult = size_multiplier(inputs.pet_type, inputs.pet_size)
    loc_mult = cfg.BOARDING_LOCATION_MULTIPLIERS[inputs.location]

    daily_base = base_rate * size_mult * loc_mult
    premium = daily_base * cfg.BOARDING_HOLIDAY_PREMIUM if inputs.holiday_peak else 0.0
    services = daily_addons(inputs)
    one_time = one_time_addons(inputs)
    daily_cost = daily_base + premium + services

    tier = DISCOUNT_TABLE.lookup(nights)
    discounted_daily = daily_cost * tier.value
    total = discounted_daily * nights + one_time

    components = [
        Component("base_stay", "Base boarding", daily_base * nights),
        Component("holiday_premium", "Holiday premium", premium * nights),
        Component("daily_services", "Daily add-on services", services * nights),
        Component("duration_discount", f"Stay discount ({tier.label})",
                  (tier.value - 1.0) * daily_cost * nights),
        Component("one_time_services", "One-time services", one_time),
    ]

    return ResultRecord(
        calculator=SPEC_SLUG,
        mode=mode,
        total=total,
        total_label=f"Total for {nights} night{'s' if nights != 1 else ''}",
        components=components,
        tier=tier,
        details={
            "facility": facility,
            "facility_name": cfg.BOARDING_FACILITY_NAMES[facility],
            "nights": nights,
            "daily_cost": daily_cost,
            "discounted_daily_cost": discounted_daily,
            "weekly_cost": discounted_daily * 7 + one_time / nights * 7,
            "monthly_cost": discounted_daily * 30 + one_time / nights * 30,
            "base_nightly_cost": daily_base,
            "size_fee": (size_mult - 1) * base_rate * loc_mult,
            "location_adjustment": (loc_mult - 1) * base_rate * size_mult,
            "additional_services": services + one_time,
        },
    )


# ─── Modes ───────────────────────────────────────────────────────────

def basic(inputs: BoardingInputs) -> ResultRecord:
    return stay_cost(inputs, inputs.facility, inputs.nights)


def comparison(inputs: BoardingInputs) -> ResultRecord:
    """Same stay priced at every facility type; total is the cheapest."""
    options = {f: stay_cost(inputs, f, inputs.nights) for f in cfg.BOARDING_BASE_RATES}
    totals = [r.total for r in options.values()]
    cheapest = min(options, key=lambda f: options[f].total)
    return ResultRecord(
        calculator=SPEC_SLUG,
        mode="comparison",
        total=min(totals),
        total_label="Cheapest option",
        components=[Component(f, cfg.BOARDING_FACILITY_NAMES[f], r.total)
                    for f, r in options.items()],
        combine="min",
        tier=DISCOUNT_TABLE.lookup(inputs.nights),
        details={
            "options": [
                {"facility": f, "name": r.details["facility_name"], "total": r.total,
                 "daily_cost": r.details["discounted_daily_cost"]}
                for f, r in options.items()
            ],
            "cheapest": cfg.BOARDING_FACILITY_NAMES[cheapest],
            "spread": max(totals) - min(totals),
        },
    )


def extended(inputs: BoardingInputs) -> ResultRecord:
    """Price the chosen facility at several stay lengths."""
    stays: List[Dict] = []
    for nights in cfg.BOARDING_EXTENDED_STAYS:
        r = stay_cost(inputs, inputs.facility, nights)
        stays.append({
            "nights": nights,
            "total": r.total,
            "nightly_cost": r.total / nights,
            "discount": r.tier.label,
        })
    result = stay_cost(inputs, inputs.facility, cfg.BOARDING_EXTENDED_STAYS[-1], mode="extended")
    result.details["stays"] = stays
    return result


def budget(inputs: BoardingInputs) -> ResultRecord:
    """Economy / standard / premium facility for the same stay."""
    options = {label: stay_cost(inputs, f, inputs.nights)
               for label, f in cfg.BOARDING_BUDGET_OPTIONS.items()}
    economy = options["economy"].total
    return ResultRecord(
        calculator=SPEC_SLUG,
        mode="budget",
        total=min(r.total for r in options.values()),
        total_label="Lowest-cost option",
        components=[Component(label, f"{label.title()} ({r.details['facility_name']})", r.total)
                    for label, r in options.items()],
        combine="min",
        tier=DISCOUNT_TABLE.lookup(inputs.nights),
        details={
            "savings_vs_standard": options["standard"].total - economy,
            "savings_vs_premium": options["premium"].total - economy,
        },
    )


def multi_pet(inputs: BoardingInputs) -> ResultRecord:
    """First pet at full price, every additional pet discounted."""
    first = stay_cost(inputs, inputs.facility, inputs.nights)
    extra_pets = inputs.pets - 1
    additional = first.total * extra_pets * (1 - cfg.BOARDING_MULTI_PET_DISCOUNT)
    total = first.total + additional
    return ResultRecord(
        calculator=SPEC_SLUG,
        mode="multi-pet",
        total=total,
        total_label=f"Total for {inputs.pets} pet{'s' if inputs.pets != 1 else ''}",
        components=[
            Component("first_pet", "First pet", first.total),
            Component("additional_pets", f"Additional pets ({extra_pets})", additional),
        ],
        tier=first.tier,
        details={
            "facility_name": first.details["facility_name"],
            "additional_pet_cost": additional / extra_pets if extra_pets else 0.0,
            "total_savings": first.total * inputs.pets - total,
            "per_pet_cost": total / inputs.pets,
        },
    )


# ─── Spec ────────────────────────────────────────────────────────────

SPEC_SLUG = "pet-boarding-cost-calculator"

_FACILITIES = tuple(cfg.BOARDING_FACILITY_NAMES.items())

SPEC = CalculatorSpec(
    slug=SPEC_SLUG,
    name="Pet Boarding Cost Calculator",
    description="Estimate kennel, pet hotel and sitter costs for your pet's stay.",
    fields=(
        Field("pet_type", "Pet type", "choice", "dog",
              choices=(("dog", "Dog"), ("cat", "Cat"), ("other", "Other small pet"))),
        Field("pet_size", "Pet size", "choice", "medium",
              choices=(("small", "Small"), ("medium", "Medium"), ("large", "Large"),
                       ("extra-large", "Extra large")),
              help="Only applies to dogs"),
        Field("facility", "Facility type", "choice", "traditional-kennel", choices=_FACILITIES,
              modes=("basic", "extended", "multi-pet")),
        Field("nights", "Number of nights", "integer", 7, min_value=1, max_value=365,
              modes=("basic", "comparison", "budget", "multi-pet")),
        Field("location", "Location", "choice", "suburban",
              choices=(("urban", "Urban"), ("suburban", "Suburban"), ("rural", "Rural"))),
        Field("holiday_peak", "Holiday / peak season", "bool", False),
        Field("pets", "Number of pets", "integer", 1, min_value=1, max_value=20,
              modes=("multi-pet",)),
        Field("medication", "Medication administration ($10/day)", "bool", False),
        Field("grooming", "Grooming ($35 one-time)", "bool", False),
        Field("playtime", "Extra playtime ($15/day)", "bool", False),
        Field("webcam", "Webcam access ($5/day)", "bool", False),
        Field("training", "Training sessions ($25/day)", "bool", False),
    ),
    modes=(
        Mode("basic", "Basic estimate", basic),
        Mode("comparison", "Compare facilities", comparison),
        Mode("extended", "Extended stay", extended),
        Mode("budget", "Budget options", budget),
        Mode("multi-pet", "Multiple pets", multi_pet),
    ),
    inputs_cls=BoardingInputs,
)
