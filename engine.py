"""
Generic calculator engine: form schema, input parsing, result records.

Every calculator in the hub is described declaratively by a
:class:`CalculatorSpec` (its fields, its modes and the formula behind
each mode). The engine turns raw form values into a validated input
dataclass, runs the selected formula and returns a :class:`ResultRecord`
whose total is guaranteed to equal the declared combination of its
components.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields as dc_fields
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

import config as cfg
from tiers import Tier


# ─── Errors ──────────────────────────────────────────────────────────

class ValidationError(ValueError):
    """Input rejected before any computation runs.

    ``field`` names the offending form field (or ``None`` when the
    problem spans several fields).
    """

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


# ─── Helpers ─────────────────────────────────────────────────────────

def clamp(value: float, low: float, high: float) -> float:
    """Limit *value* to ``[low, high]``."""
    return max(low, min(high, value))


def require(condition: bool, message: str, field: Optional[str] = None) -> None:
    """Raise :class:`ValidationError` unless *condition* holds."""
    if not condition:
        raise ValidationError(message, field)


def _strip_number(raw: str, currency: bool) -> str:
    s = raw.strip().replace(",", "").replace(" ", "")
    if currency:
        s = s.replace("$", "")
    return s.rstrip("%")


# ─── Form schema ─────────────────────────────────────────────────────

FIELD_KINDS = ("number", "integer", "choice", "bool", "date")


@dataclass(frozen=True)
class Field:
    """One input on a calculator form."""

    name: str
    label: str
    kind: str = "number"
    default: Any = None                      # value or zero-arg callable
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    choices: Tuple[Tuple[str, str], ...] = ()  # (value, label)
    required: bool = True
    currency: bool = False
    modes: Tuple[str, ...] = ()              # empty = every mode
    help: str = ""

    def __post_init__(self) -> None:
        if self.kind not in FIELD_KINDS:
            raise ValueError(f"Unknown field kind '{self.kind}' for {self.name}")
        if self.kind == "choice" and not self.choices:
            raise ValueError(f"Choice field {self.name} needs choices")

    def default_value(self) -> Any:
        return self.default() if callable(self.default) else self.default

    def applies_to(self, mode: str) -> bool:
        return not self.modes or mode in self.modes

    def choice_values(self) -> List[str]:
        return [value for value, _ in self.choices]

    def to_form(self, value: Any) -> str:
        """String form of a typed value, as a form input would hold it."""
        if value is None:
            return ""
        if self.kind == "bool":
            return "on" if value else ""
        if isinstance(value, date):
            return value.isoformat()
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)

    def parse(self, raw: Any) -> Any:
        """Coerce a raw form value to this field's type.

        Raises
        ------
        ValidationError
            On missing required values, unparsable text, out-of-range
            numbers or unknown choices.
        """
        if self.kind == "bool":
            if isinstance(raw, bool):
                return raw
            return str(raw or "").strip().lower() in ("on", "true", "1", "yes", "y")

        text = "" if raw is None else str(raw).strip()
        if not text:
            if self.required:
                raise ValidationError(f"{self.label} is required", self.name)
            return None

        if self.kind == "choice":
            if text not in self.choice_values():
                raise ValidationError(
                    f"{self.label} must be one of: {', '.join(self.choice_values())}",
                    self.name,
                )
            return text

        if self.kind == "date":
            try:
                return date.fromisoformat(text)
            except ValueError:
                raise ValidationError(f"{self.label} must be a date (YYYY-MM-DD)", self.name)

        try:
            value = float(_strip_number(text, self.currency))
        except ValueError:
            raise ValidationError(f"{self.label} must be a number", self.name)
        if math.isnan(value) or math.isinf(value):
            raise ValidationError(f"{self.label} must be a finite number", self.name)
        if self.kind == "integer":
            if not value.is_integer():
                raise ValidationError(f"{self.label} must be a whole number", self.name)
            value = int(value)
        if self.min_value is not None and value < self.min_value:
            raise ValidationError(f"{self.label} must be at least {self.min_value:g}", self.name)
        if self.max_value is not None and value > self.max_value:
            raise ValidationError(f"{self.label} must be at most {self.max_value:g}", self.name)
        return value


# ─── Results ─────────────────────────────────────────────────────────

UNITS = ("currency", "percent", "days", "miles", "points", "ratio", "number", "months", "years")


@dataclass(frozen=True)
class Component:
    """A named intermediate value that feeds the result total."""

    key: str
    label: str
    value: float
    unit: str = "currency"


def _mean(values: Sequence[float]) -> float:
    return math.fsum(values) / len(values)


COMBINERS: Dict[str, Callable[[Sequence[float]], float]] = {
    "sum": math.fsum,
    "product": math.prod,
    "min": min,
    "max": max,
    "mean": _mean,
}


@dataclass
class ResultRecord:
    """Outcome of one calculation.

    ``total`` must equal ``combine`` applied to the component values;
    this is checked on construction so no hidden adjustment can slip
    into a displayed total.
    """

    calculator: str
    mode: str
    total: float
    total_label: str
    components: List[Component]
    unit: str = "currency"
    combine: str = "sum"
    tier: Optional[Tier] = None
    details: Dict[str, Any] = field(default_factory=dict)
    notes: List[str] = field(default_factory=list)
    schedule: Any = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.combine not in COMBINERS:
            raise ValueError(f"Unknown combine '{self.combine}'")
        if not self.components:
            raise ValueError("A result needs at least one component")
        combined = self.combined()
        if abs(self.total - combined) > cfg.RESULT_TOLERANCE * max(1.0, abs(combined)):
            raise ValueError(
                f"{self.calculator}/{self.mode}: total {self.total!r} does not match "
                f"{self.combine} of components {combined!r}"
            )

    def combined(self) -> float:
        return COMBINERS[self.combine]([c.value for c in self.components])

    def component(self, key: str) -> Component:
        for c in self.components:
            if c.key == key:
                return c
        raise KeyError(key)

    def breakdown(self) -> Dict[str, float]:
        return {c.key: c.value for c in self.components}


# ─── Calculator spec ─────────────────────────────────────────────────

Formula = Callable[[Any], ResultRecord]


@dataclass(frozen=True)
class Mode:
    key: str
    label: str
    formula: Formula


@dataclass(frozen=True)
class CalculatorSpec:
    """Form schema + formula plugin for one calculator."""

    slug: str
    name: str
    description: str
    fields: Tuple[Field, ...]
    modes: Tuple[Mode, ...]
    inputs_cls: type

    def __post_init__(self) -> None:
        if not self.modes:
            raise ValueError(f"{self.slug}: at least one mode is required")
        names = [f.name for f in self.fields]
        if len(set(names)) != len(names):
            raise ValueError(f"{self.slug}: duplicate field names")
        accepted = {f.name for f in dc_fields(self.inputs_cls)}
        missing = set(names + ["mode"]) - accepted
        if missing:
            raise ValueError(f"{self.slug}: inputs class lacks {sorted(missing)}")

    @property
    def default_mode(self) -> str:
        return self.modes[0].key

    def mode(self, key: str) -> Mode:
        for m in self.modes:
            if m.key == key:
                return m
        raise ValidationError(
            f"Unknown mode '{key}'; choose from {', '.join(m.key for m in self.modes)}",
            "mode",
        )

    def field(self, name: str) -> Field:
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(name)

    def fields_for(self, mode: str) -> List[Field]:
        return [f for f in self.fields if f.applies_to(mode)]

    def defaults(self) -> Dict[str, Any]:
        """Typed default of every field, plus the default mode."""
        values = {f.name: f.default_value() for f in self.fields}
        values["mode"] = self.default_mode
        return values

    def form_defaults(self) -> Dict[str, str]:
        """Defaults as the strings a fresh form shows."""
        values = {f.name: f.to_form(f.default_value()) for f in self.fields}
        values["mode"] = self.default_mode
        return values

    def calculate(self, form: Mapping[str, Any]) -> ResultRecord:
        inputs = parse_form(self, form)
        return self.mode(inputs.mode).formula(inputs)


def parse_form(spec: CalculatorSpec, form: Mapping[str, Any]) -> Any:
    """Build the validated input record for *spec* from raw form values.

    Fields of the selected mode are parsed from *form*; absent keys fall
    back to the field default (bool fields to ``False``), blank values of
    required fields are rejected and blank optional values become
    ``None``. Fields of other modes keep their
    defaults. Cross-field checks run in the input class.
    """
    mode = str(form.get("mode") or spec.default_mode)
    spec.mode(mode)

    values: Dict[str, Any] = {"mode": mode}
    for f in spec.fields:
        if not f.applies_to(mode):
            values[f.name] = f.default_value()
        elif f.name not in form:
            values[f.name] = False if f.kind == "bool" else f.parse(f.to_form(f.default_value()))
        else:
            values[f.name] = f.parse(form[f.name])
    return spec.inputs_cls(**values)


# ─── Form session ────────────────────────────────────────────────────

class Overlay(Enum):
    """Result overlay state of one form."""

    CLOSED = "closed"
    OPEN = "open"


class FormSession:
    """Transient state of one calculator form.

    Holds the values as displayed, the last result, the last validation
    message and whether the result overlay is showing. Nothing here
    outlives the page view that created it.
    """

    def __init__(self, spec: CalculatorSpec, values: Optional[Mapping[str, Any]] = None) -> None:
        self.spec = spec
        self.values: Dict[str, str] = spec.form_defaults()
        if values:
            self.values.update({k: str(v) for k, v in values.items()})
        self.result: Optional[ResultRecord] = None
        self.error: Optional[str] = None
        self.error_field: Optional[str] = None
        self.overlay = Overlay.CLOSED

    @property
    def mode(self) -> str:
        return self.values.get("mode") or self.spec.default_mode

    def submit(self, form: Mapping[str, Any]) -> Optional[ResultRecord]:
        """Run the calculator on *form*; return the result or ``None``."""
        self.values = self.spec.form_defaults()
        for f in self.spec.fields:
            if f.kind == "bool":
                self.values[f.name] = f.to_form(f.parse(form.get(f.name)))
        self.values.update({k: "" if v is None else str(v) for k, v in form.items()})
        try:
            self.result = self.spec.calculate(form)
        except ValidationError as exc:
            self.result = None
            self.error = exc.message
            self.error_field = exc.field
            self.overlay = Overlay.CLOSED
            return None
        self.error = None
        self.error_field = None
        self.overlay = Overlay.OPEN
        return self.result

    def close(self) -> None:
        self.overlay = Overlay.CLOSED

    def reset(self) -> None:
        """Restore every field default and clear any result."""
        self.values = self.spec.form_defaults()
        self.result = None
        self.error = None
        self.error_field = None
        self.overlay = Overlay.CLOSED
