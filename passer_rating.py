"""
Quarterback passer rating (NFL and NCAA formulas).

NFL rating: four sub-scores, each clamped to [0, 2.375], summed,
divided by 6 and multiplied by 100. The maximum is therefore 158.33.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict

import config as cfg
from engine import CalculatorSpec, Component, Field, Mode, ResultRecord, clamp, require
from tiers import TierTable

NFL_GRADES = TierTable("NFL passer rating", cfg.NFL_GRADE_TIERS)
NCAA_GRADES = TierTable("NCAA passer efficiency", cfg.NCAA_GRADE_TIERS)


def _check_line(att: int, cmp: int, td: int, ints: int, prefix: str = "") -> None:
    require(att > 0, "Attempts must be greater than zero", prefix + "attempts")
    require(cmp <= att, "Completions cannot exceed attempts", prefix + "completions")
    require(td <= cmp, "Touchdowns cannot exceed completions", prefix + "touchdowns")
    require(ints <= att - cmp, "Interceptions cannot exceed incomplete passes",
            prefix + "interceptions")


@dataclass
class PasserInputs:
    mode: str
    attempts: int
    completions: int
    yards: float
    touchdowns: int
    interceptions: int
    games: int
    qb2_attempts: int
    qb2_completions: int
    qb2_yards: float
    qb2_touchdowns: int
    qb2_interceptions: int

    def __post_init__(self) -> None:
        _check_line(self.attempts, self.completions, self.touchdowns, self.interceptions)
        if self.mode == "comparison":
            _check_line(self.qb2_attempts, self.qb2_completions,
                        self.qb2_touchdowns, self.qb2_interceptions, "qb2_")
        require(self.games >= 1, "Games played must be at least 1", "games")


# ─── NFL formula ─────────────────────────────────────────────────────

def nfl_subscores(att: int, cmp: int, yds: float, td: int, ints: int) -> Dict[str, float]:
    """The four clamped NFL sub-scores (each 0 to 2.375)."""
    top = cfg.PASSER_COMPONENT_MAX
    return {
        "completion": clamp((cmp / att - cfg.PASSER_COMPLETION_BASE) * cfg.PASSER_COMPLETION_FACTOR, 0, top),
        "yards": clamp((yds / att - cfg.PASSER_YARDS_BASE) * cfg.PASSER_YARDS_FACTOR, 0, top),
        "touchdowns": clamp(td / att * cfg.PASSER_TD_FACTOR, 0, top),
        "interceptions": clamp(top - ints / att * cfg.PASSER_INT_FACTOR, 0, top),
    }


_SUBSCORE_LABELS = {
    "completion": "Completion percentage",
    "yards": "Yards per attempt",
    "touchdowns": "Touchdown rate",
    "interceptions": "Interception rate",
}


def nfl_rating(att: int, cmp: int, yds: float, td: int, ints: int) -> float:
    subs = nfl_subscores(att, cmp, yds, td, ints)
    return math.fsum(subs.values()) / 6 * 100


def _line_stats(att: int, cmp: int, yds: float, td: int, ints: int) -> Dict[str, float]:
    return {
        "completion_pct": cmp / att * 100,
        "yards_per_attempt": yds / att,
        "td_pct": td / att * 100,
        "int_pct": ints / att * 100,
    }


def nfl_record(att: int, cmp: int, yds: float, td: int, ints: int, mode: str = "nfl") -> ResultRecord:
    """Rating record whose components are the weighted sub-score points."""
    subs = nfl_subscores(att, cmp, yds, td, ints)
    components = [Component(k, _SUBSCORE_LABELS[k], v / 6 * 100, "points") for k, v in subs.items()]
    rating = math.fsum(subs.values()) / 6 * 100
    details: Dict[str, object] = {"subscores": subs}
    details.update(_line_stats(att, cmp, yds, td, ints))
    return ResultRecord(
        calculator=SPEC_SLUG,
        mode=mode,
        total=rating,
        total_label="Passer rating",
        components=components,
        unit="points",
        tier=NFL_GRADES.lookup(rating),
        details=details,
    )


# ─── Modes ───────────────────────────────────────────────────────────

def nfl(inputs: PasserInputs) -> ResultRecord:
    return nfl_record(inputs.attempts, inputs.completions, inputs.yards,
                      inputs.touchdowns, inputs.interceptions)


def comparison(inputs: PasserInputs) -> ResultRecord:
    """Two quarterbacks side by side; total is the better rating."""
    qb1 = nfl(inputs)
    qb2 = nfl_record(inputs.qb2_attempts, inputs.qb2_completions, inputs.qb2_yards,
                     inputs.qb2_touchdowns, inputs.qb2_interceptions)
    diff = qb1.total - qb2.total
    if diff > 0:
        better = "Quarterback 1"
    elif diff < 0:
        better = "Quarterback 2"
    else:
        better = "Tie"
    top = max(qb1.total, qb2.total)
    return ResultRecord(
        calculator=SPEC_SLUG,
        mode="comparison",
        total=top,
        total_label="Best rating",
        components=[
            Component("qb1", "Quarterback 1", qb1.total, "points"),
            Component("qb2", "Quarterback 2", qb2.total, "points"),
        ],
        unit="points",
        combine="max",
        tier=NFL_GRADES.lookup(top),
        details={
            "qb1_grade": qb1.tier.label,
            "qb2_grade": qb2.tier.label,
            "qb1_subscores": qb1.details["subscores"],
            "qb2_subscores": qb2.details["subscores"],
            "difference": abs(diff),
            "better": better,
        },
    )


def season(inputs: PasserInputs) -> ResultRecord:
    """Season totals plus per-game averages."""
    result = nfl_record(inputs.attempts, inputs.completions, inputs.yards,
                        inputs.touchdowns, inputs.interceptions, mode="season")
    g = inputs.games
    result.details.update({
        "games": g,
        "attempts_per_game": inputs.attempts / g,
        "completions_per_game": inputs.completions / g,
        "yards_per_game": inputs.yards / g,
        "touchdowns_per_game": inputs.touchdowns / g,
        "interceptions_per_game": inputs.interceptions / g,
    })
    return result


def _at_least(attempts: int, rate: float) -> int:
    # round first so 40 * 0.775 does not ceil to 32
    return int(math.ceil(round(attempts * rate, 9)))


def perfect(inputs: PasserInputs) -> ResultRecord:
    """Current rating plus the minimum line for a perfect game."""
    result = nfl_record(inputs.attempts, inputs.completions, inputs.yards,
                        inputs.touchdowns, inputs.interceptions, mode="perfect")
    att = inputs.attempts
    need = {
        "completions": _at_least(att, cfg.PASSER_PERFECT_COMPLETION_RATE),
        "yards": _at_least(att, cfg.PASSER_PERFECT_YARDS_PER_ATTEMPT),
        "touchdowns": _at_least(att, cfg.PASSER_PERFECT_TD_RATE),
        "interceptions": 0,
    }
    result.details.update({
        "perfect_requirements": need,
        "is_perfect": result.total >= cfg.PASSER_PERFECT_RATING,
        "completions_short": max(0, need["completions"] - inputs.completions),
        "yards_short": max(0.0, need["yards"] - inputs.yards),
        "touchdowns_short": max(0, need["touchdowns"] - inputs.touchdowns),
    })
    return result


def ncaa(inputs: PasserInputs) -> ResultRecord:
    """NCAA passing efficiency: unbounded weighted sum per attempt."""
    att = inputs.attempts
    components = [
        Component("yards", "Yards (8.4 per yard)", cfg.NCAA_YARDS_WEIGHT * inputs.yards / att, "points"),
        Component("touchdowns", "Touchdowns (330 each)", cfg.NCAA_TD_WEIGHT * inputs.touchdowns / att, "points"),
        Component("completions", "Completions (100 each)",
                  cfg.NCAA_COMPLETION_WEIGHT * inputs.completions / att, "points"),
        Component("interceptions", "Interceptions (-200 each)",
                  cfg.NCAA_INT_WEIGHT * inputs.interceptions / att, "points"),
    ]
    rating = math.fsum(c.value for c in components)
    details: Dict[str, object] = {
        "nfl_rating": nfl_rating(att, inputs.completions, inputs.yards,
                                 inputs.touchdowns, inputs.interceptions),
    }
    details.update(_line_stats(att, inputs.completions, inputs.yards,
                               inputs.touchdowns, inputs.interceptions))
    return ResultRecord(
        calculator=SPEC_SLUG,
        mode="ncaa",
        total=rating,
        total_label="Passing efficiency",
        components=components,
        unit="points",
        tier=NCAA_GRADES.lookup(rating),
        details=details,
    )


# ─── Spec ────────────────────────────────────────────────────────────

SPEC_SLUG = "nfl-passer-rating-calculator"

_QB2 = ("comparison",)

SPEC = CalculatorSpec(
    slug=SPEC_SLUG,
    name="NFL Passer Rating Calculator",
    description="Rate quarterback passing performance with the official NFL and NCAA formulas.",
    fields=(
        Field("attempts", "Pass attempts", "integer", 30, min_value=0),
        Field("completions", "Completions", "integer", 20, min_value=0),
        Field("yards", "Passing yards", "number", 250,
              min_value=-cfg.PASSER_MAX_YARDS, max_value=cfg.PASSER_MAX_YARDS),
        Field("touchdowns", "Touchdown passes", "integer", 2, min_value=0),
        Field("interceptions", "Interceptions", "integer", 1, min_value=0),
        Field("games", "Games played", "integer", 16, min_value=1, modes=("season",)),
        Field("qb2_attempts", "QB 2 pass attempts", "integer", 35, min_value=0, modes=_QB2),
        Field("qb2_completions", "QB 2 completions", "integer", 22, min_value=0, modes=_QB2),
        Field("qb2_yards", "QB 2 passing yards", "number", 275,
              min_value=-cfg.PASSER_MAX_YARDS, max_value=cfg.PASSER_MAX_YARDS, modes=_QB2),
        Field("qb2_touchdowns", "QB 2 touchdown passes", "integer", 3, min_value=0, modes=_QB2),
        Field("qb2_interceptions", "QB 2 interceptions", "integer", 0, min_value=0, modes=_QB2),
    ),
    modes=(
        Mode("nfl", "NFL rating", nfl),
        Mode("comparison", "Compare quarterbacks", comparison),
        Mode("season", "Season totals", season),
        Mode("perfect", "Perfect rating", perfect),
        Mode("ncaa", "NCAA efficiency", ncaa),
    ),
    inputs_cls=PasserInputs,
)
