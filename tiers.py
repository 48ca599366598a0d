"""
Tiered adjustment lookup for the calculator hub.

A tier table maps a continuous quantity (nights boarded, days on market,
passer rating, BMI ...) onto a discrete label plus an associated number
(a multiplier, an offset, or nothing). Tables are built from the
``(lower, upper, label, value)`` rows in ``config`` and validated on
construction so that every real number falls into exactly one tier.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, List, Sequence, Tuple


# ─── Step tables ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class Tier:
    """One band of a tier table."""

    label: str
    lower: float
    upper: float
    value: float = 0.0
    note: str = ""


class TierTable:
    """Ordered, gap-free, non-overlapping step function.

    Parameters
    ----------
    name : str
        Used in error messages.
    rows : sequence of (lower, upper, label, value)
        Bands in ascending threshold order. The first lower bound must be
        ``-inf`` and the last upper bound ``+inf``; neighbouring bands
        must share their boundary exactly.
    closed : str
        ``'left'`` (default) makes each band ``[lower, upper)``,
        ``'right'`` makes it ``(lower, upper]``.
    order : str
        Scan order used by :meth:`lookup`. ``'descending'`` checks the
        highest band first, mirroring "at least N" threshold checks.
    """

    def __init__(
        self,
        name: str,
        rows: Sequence[Tuple[float, float, str, float]],
        closed: str = "left",
        order: str = "descending",
    ) -> None:
        if closed not in ("left", "right"):
            raise ValueError(f"{name}: closed must be 'left' or 'right'")
        if order not in ("ascending", "descending"):
            raise ValueError(f"{name}: order must be 'ascending' or 'descending'")
        if not rows:
            raise ValueError(f"{name}: at least one tier is required")

        tiers = [Tier(label=label, lower=float(lo), upper=float(hi), value=float(val))
                 for lo, hi, label, val in rows]

        if not math.isinf(tiers[0].lower) or tiers[0].lower > 0:
            raise ValueError(f"{name}: first tier must start at -inf")
        if not math.isinf(tiers[-1].upper) or tiers[-1].upper < 0:
            raise ValueError(f"{name}: last tier must end at +inf")
        for prev, cur in zip(tiers, tiers[1:]):
            if prev.upper != cur.lower:
                raise ValueError(
                    f"{name}: tiers '{prev.label}' and '{cur.label}' "
                    f"leave a gap or overlap ({prev.upper} vs {cur.lower})"
                )
        for t in tiers:
            if not t.lower < t.upper:
                raise ValueError(f"{name}: tier '{t.label}' is empty")

        self.name = name
        self.closed = closed
        self.order = order
        self.tiers: Tuple[Tier, ...] = tuple(tiers)

    def _contains(self, tier: Tier, x: float) -> bool:
        if self.closed == "left":
            return tier.lower <= x < tier.upper
        return tier.lower < x <= tier.upper

    def _scan_order(self) -> Sequence[Tier]:
        if self.order == "descending":
            return tuple(reversed(self.tiers))
        return self.tiers

    def lookup(self, x: float) -> Tier:
        """Return the first tier (in scan order) containing *x*."""
        x = float(x)
        if math.isnan(x):
            raise ValueError(f"{self.name}: cannot classify NaN")
        for tier in self._scan_order():
            if self._contains(tier, x):
                return tier
        # unreachable for a validated table
        raise ValueError(f"{self.name}: no tier matches {x}")

    def matches(self, x: float) -> List[Tier]:
        """Every tier containing *x*; a valid table always yields one."""
        x = float(x)
        return [t for t in self.tiers if self._contains(t, x)]

    def labels(self) -> List[str]:
        return [t.label for t in self.tiers]

    def boundaries(self) -> List[float]:
        """Finite thresholds between neighbouring tiers."""
        return [t.upper for t in self.tiers[:-1]]

    def __len__(self) -> int:
        return len(self.tiers)

    def __repr__(self) -> str:
        return f"TierTable({self.name!r}, {len(self.tiers)} tiers, closed={self.closed!r})"


# ─── Ordered predicate rules ─────────────────────────────────────────

class RuleTable:
    """First-match classification over several inputs.

    Used where a label depends on more than one quantity (tire safety
    status looks at tread depth, tire age and projected life at once).
    Rules are checked in the given order; the default label applies when
    none is satisfied, so exactly one label is always produced.
    """

    def __init__(
        self,
        name: str,
        rules: Sequence[Tuple[str, Callable[[Any], bool]]],
        default: str,
    ) -> None:
        self.name = name
        self.rules = tuple(rules)
        self.default = default

    def classify(self, record: Any) -> str:
        for label, predicate in self.rules:
            if predicate(record):
                return label
        return self.default

    def labels(self) -> List[str]:
        return [label for label, _ in self.rules] + [self.default]
