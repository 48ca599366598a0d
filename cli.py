"""
CLI interface and shared display formatting for the calculator hub.
"""

from __future__ import annotations

import sys
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

import config as cfg
from calculators import CALCULATORS, get_calculator
from engine import CalculatorSpec, Field, ResultRecord, ValidationError


# ═══════════════════════════════════════════════════════════════════
# Formatting helpers
# ═══════════════════════════════════════════════════════════════════

def fmt(val: float, decimals: int = 2) -> str:
    """Format number as $X,XXX.XX (negative as -$X)."""
    sign = "-" if val < 0 else ""
    return f"{sign}${abs(val):,.{decimals}f}"


def pct(val: float, decimals: int = 1) -> str:
    return f"{val:.{decimals}f}%"


UNIT_SUFFIX = {
    "days": " days",
    "miles": " miles",
    "points": "",
    "number": "",
    "months": " months",
    "years": " years",
}


def fmt_value(val: float, unit: str = "currency") -> str:
    """Render *val* for display in its unit. Rounding happens only here."""
    if unit == "currency":
        return fmt(val)
    if unit == "percent":
        return pct(val)
    if unit == "ratio":
        return f"{val:.2f}"
    if unit == "miles":
        return f"{val:,.0f} miles"
    if unit == "days":
        return f"{val:,.0f} days" if float(val).is_integer() else f"{val:,.1f} days"
    if unit == "points":
        return f"{val:.1f}"
    return f"{val:,.2f}{UNIT_SUFFIX.get(unit, '')}"


_PERCENT_KEYS = ("pct", "percent", "to_income", "loan_to_value")
_CURRENCY_KEYS = ("cost", "payment", "price", "interest", "savings", "amount", "cash",
                  "reserve", "spread", "paid", "adjustment", "fee", "services", "saved",
                  "total", "balance", "principal", "extra", "income", "loan", "value",
                  "contribution", "withdrawal")


def fmt_detail(key: str, val: Any) -> str:
    """Best-effort formatting of a detail value from its key name."""
    if isinstance(val, bool):
        return "Yes" if val else "No"
    if isinstance(val, date):
        return val.isoformat()
    if isinstance(val, str):
        return val
    if any(k in key for k in _PERCENT_KEYS):
        return pct(val)
    if "per_mile" in key:
        return fmt(val, 4)
    if any(k in key for k in _CURRENCY_KEYS) and "months" not in key and "years" not in key:
        return fmt(val)
    if isinstance(val, int):
        return f"{val:,}"
    return f"{val:,.2f}"


def label_for(key: str) -> str:
    return key.replace("_", " ").capitalize()


def detail_rows(result: ResultRecord) -> List[Tuple[str, str]]:
    """Scalar details as (label, text) pairs; nested values are skipped."""
    rows = []
    for key, val in result.details.items():
        if isinstance(val, (list, dict, tuple)) or val is None or hasattr(val, "months"):
            continue
        rows.append((label_for(key), fmt_detail(key, val)))
    return rows


def detail_tables(result: ResultRecord) -> List[Tuple[str, List[Dict[str, Any]]]]:
    """Dict and list-of-dict details (comparison options, stress tests ...)."""
    tables = []
    for key, val in result.details.items():
        if isinstance(val, dict):
            tables.append((label_for(key), [val]))
        elif isinstance(val, list) and val and isinstance(val[0], dict):
            tables.append((label_for(key), val))
    return tables


def detail_lists(result: ResultRecord) -> List[str]:
    """Plain string lists from details plus the result notes."""
    out = list(result.notes)
    for val in result.details.values():
        if isinstance(val, list) and val and isinstance(val[0], str):
            out.extend(val)
    return out


# ═══════════════════════════════════════════════════════════════════
# Input collection (CLI)
# ═══════════════════════════════════════════════════════════════════

def _prompt_choice(label: str, options: List[str], default: str) -> str:
    opts = "/".join(options)
    while True:
        raw = input(f"  {label} ({opts}) [{default}]: ").strip().lower()
        if not raw:
            return default
        if raw in options:
            return raw
        print(f"    Choose from: {opts}")


def _prompt_field(f: Field, default: str) -> str:
    """Prompt until the field's own parser accepts the answer."""
    while True:
        if f.kind == "choice":
            return _prompt_choice(f.label, f.choice_values(), default)
        if f.kind == "bool":
            shown = "yes" if default else "no"
            raw = input(f"  {f.label} (yes/no) [{shown}]: ").strip().lower()
            return "on" if f.parse(raw or shown) else ""
        raw = input(f"  {f.label} [{default}]: ").strip()
        value = raw or default
        try:
            f.parse(value)
        except ValidationError as exc:
            print(f"    {exc.message}")
            continue
        return value


def collect_inputs(spec: CalculatorSpec) -> Dict[str, str]:
    """Prompt for the mode, then for every field that mode uses."""
    print("\n  Enter your details (press Enter for defaults):\n")
    defaults = spec.form_defaults()
    form = {"mode": spec.default_mode}
    if len(spec.modes) > 1:
        form["mode"] = _prompt_choice("Mode", [m.key for m in spec.modes], spec.default_mode)
    for f in spec.fields_for(form["mode"]):
        form[f.name] = _prompt_field(f, defaults[f.name])
    return form


def _pick_calculator() -> CalculatorSpec:
    slugs = list(CALCULATORS)
    print("\n  Available calculators:\n")
    for i, slug in enumerate(slugs, 1):
        print(f"    {i}. {CALCULATORS[slug].name}")
    while True:
        raw = input(f"\n  Choose 1-{len(slugs)} [1]: ").strip()
        if not raw:
            return CALCULATORS[slugs[0]]
        if raw.isdigit() and 1 <= int(raw) <= len(slugs):
            return CALCULATORS[slugs[int(raw) - 1]]
        if raw in CALCULATORS:
            return CALCULATORS[raw]
        print("    Invalid choice, try again.")


# ═══════════════════════════════════════════════════════════════════
# Box-drawing CLI output
# ═══════════════════════════════════════════════════════════════════

W = 78  # box width (characters)
H = "═"


def _box_top(title: str) -> str:
    inner = W - 2
    return (
        f"╔{H * inner}╗\n"
        f"║  {title:<{inner - 2}}║\n"
        f"╠{H * inner}╣"
    )


def _box_line(text: str = "") -> str:
    inner = W - 4
    if len(text) > inner:
        text = text[:inner]
    return f"║  {text:<{inner}}║"


def _box_row(label: str, value: str, lw: int = 38) -> str:
    return _box_line(f"{label:<{lw}}{value}")


def _box_bottom() -> str:
    return f"╚{H * (W - 2)}╝"


def _print_section(title: str, rows: List[str]) -> None:
    """Print a titled box with content rows."""
    print(_box_top(title))
    for r in rows:
        print(r)
    print(_box_bottom())
    print()


def _wrap(text: str, width: int = W - 8) -> List[str]:
    lines, line = [], ""
    for word in text.split():
        if len(line) + len(word) + 1 <= width:
            line = f"{line} {word}" if line else word
        else:
            lines.append(line)
            line = word
    if line:
        lines.append(line)
    return lines


# ═══════════════════════════════════════════════════════════════════
# CLI Section Printers
# ═══════════════════════════════════════════════════════════════════

def result_rows(spec: CalculatorSpec, result: ResultRecord) -> List[str]:
    mode = spec.mode(result.mode)
    rows = [
        _box_row("Calculator", spec.name),
        _box_row("Mode", mode.label),
        _box_line(),
        _box_row(result.total_label, fmt_value(result.total, result.unit)),
    ]
    if result.tier is not None:
        rows.append(_box_row("Rating", result.tier.label))
    return rows


def breakdown_rows(result: ResultRecord) -> List[str]:
    rows = [_box_row(c.label, fmt_value(c.value, c.unit)) for c in result.components]
    rows.append(_box_line())
    rows.append(_box_row(f"= {result.combine} of the above", fmt_value(result.total, result.unit)))
    return rows


def details_rows(result: ResultRecord) -> List[str]:
    rows = [_box_row(label, text) for label, text in detail_rows(result)]
    for title, table in detail_tables(result):
        rows.append(_box_line())
        rows.append(_box_line(title))
        for entry in table:
            cells = ", ".join(f"{label_for(k)}: {fmt_detail(k, v)}" for k, v in entry.items())
            for i, line in enumerate(_wrap(cells, W - 10)):
                rows.append(_box_line(("  - " if i == 0 else "    ") + line))
    notes = detail_lists(result)
    if notes:
        rows.append(_box_line())
        for note in notes:
            for i, line in enumerate(_wrap(note, W - 10)):
                rows.append(_box_line(("  * " if i == 0 else "    ") + line))
    return rows


def print_result(spec: CalculatorSpec, result: ResultRecord) -> None:
    _print_section("RESULT", result_rows(spec, result))
    _print_section("BREAKDOWN", breakdown_rows(result))
    rows = details_rows(result)
    if rows:
        _print_section("DETAILS", rows)


# ═══════════════════════════════════════════════════════════════════
# Main CLI entry point
# ═══════════════════════════════════════════════════════════════════

def run_cli(slug: Optional[str] = None, pdf_path: Optional[str] = None) -> None:
    """Run one calculator interactively."""
    # Ensure box-drawing characters render on Windows
    try:
        sys.stdout.reconfigure(encoding="utf-8")
    except (AttributeError, OSError):
        pass
    print()
    print("=" * W)
    print("  Calculator Hub")
    print("=" * W)

    spec = get_calculator(slug) if slug else _pick_calculator()
    print(f"\n  {spec.name}: {spec.description}")

    while True:
        form = collect_inputs(spec)
        try:
            result = spec.calculate(form)
            break
        except ValidationError as exc:
            print(f"\n  Error: {exc.message}\n  Please try again.")

    print()
    print_result(spec, result)

    if pdf_path:
        import report
        print("  Generating PDF report...")
        path = report.generate_pdf(spec, result, pdf_path)
        _print_section("CHARTS", [_box_line(f"PDF report saved to: {path}")])
    else:
        _print_section("CHARTS", [
            _box_line("Charts available in the web app:"),
            _box_line(f"  python main.py  (opens {cfg.WEB_HOST}:{cfg.WEB_PORT})"),
        ])


if __name__ == "__main__":
    run_cli()
