"""
PDF report generation and reusable chart rendering for the calculator hub.

Provides:
  - Multi-page PDF report for one result (generate_pdf)
  - Base64-encoded chart images for web embedding (get_web_charts)
  - Individual chart renderers reusable by both CLI and web
"""

from __future__ import annotations

import base64
import io
from typing import List

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.ticker import FuncFormatter
import numpy as np

import config as cfg
from amortization import AmortizationSchedule
from compound_interest import GrowthProjection
from cli import detail_lists, detail_rows, fmt_value
from engine import CalculatorSpec, ResultRecord

# ═══════════════════════════════════════════════════════════════════
# Style constants
# ═══════════════════════════════════════════════════════════════════

BG = "#0a101f"
CARD = "#131b2e"
TEXT = "#f1f5f9"
TEXT2 = "#cbd5e1"
INDIGO = "#818cf8"
EMERALD = "#34d399"
AMBER = "#fbbf24"
RED = "#f87171"
SLATE = "#94a3b8"
BORDER = "#1e293b"
INDIGO_DEEP = "#6366f1"
EMERALD_DEEP = "#10b981"

A4W, A4H = 8.27, 11.69
WEB_W, WEB_H = 10, 6


# ═══════════════════════════════════════════════════════════════════
# Axis formatters
# ═══════════════════════════════════════════════════════════════════

def _usd_fmt(x, _):
    if abs(x) >= 1e6:
        return f"${x / 1e6:.1f}M"
    if abs(x) >= 1e3:
        return f"${x / 1e3:.0f}k"
    return f"${x:.0f}"


def _num_fmt(x, _):
    if abs(x) >= 1e3:
        return f"{x / 1e3:.0f}k"
    return f"{x:g}"


USD_FMT = FuncFormatter(_usd_fmt)
NUM_FMT = FuncFormatter(_num_fmt)


# ═══════════════════════════════════════════════════════════════════
# Style helpers
# ═══════════════════════════════════════════════════════════════════

def _style(fig, *axes):
    """Apply dark theme to figure and all axes."""
    fig.patch.set_facecolor(BG)
    for ax in axes:
        ax.set_facecolor(CARD)
        ax.tick_params(colors=TEXT, labelsize=8)
        ax.xaxis.label.set_color(TEXT)
        ax.yaxis.label.set_color(TEXT)
        ax.title.set_color(TEXT)
        for spine in ax.spines.values():
            spine.set_color(BORDER)
        ax.grid(True, alpha=0.15, color=SLATE)


def _legend(ax, loc="upper right"):
    ax.legend(loc=loc, fontsize=8, facecolor=CARD, edgecolor=BORDER, labelcolor=TEXT)


# ═══════════════════════════════════════════════════════════════════
# Summary page (text only, dark background)
# ═══════════════════════════════════════════════════════════════════

def _page_summary(spec: CalculatorSpec, result: ResultRecord) -> plt.Figure:
    fig = plt.figure(figsize=(A4W, A4H))
    fig.patch.set_facecolor(BG)

    fig.text(0.50, 0.93, spec.name, ha="center", fontsize=18, color=TEXT, fontweight="bold")
    fig.text(0.50, 0.91, spec.mode(result.mode).label, ha="center", fontsize=11, color=TEXT2)

    y = 0.85
    fig.text(0.08, y, result.total_label, fontsize=13, color=TEXT, fontweight="bold")
    y -= 0.035
    fig.text(0.10, y, fmt_value(result.total, result.unit), fontsize=20, color=EMERALD,
             fontweight="bold")
    if result.tier is not None:
        fig.text(0.60, y, result.tier.label, fontsize=13, color=AMBER, fontweight="bold")

    y -= 0.05
    fig.text(0.08, y, "Breakdown", fontsize=13, color=TEXT, fontweight="bold")
    y -= 0.028
    for c in result.components:
        fig.text(0.10, y, c.label, fontsize=9.5, color=TEXT2)
        fig.text(0.70, y, fmt_value(c.value, c.unit), fontsize=9.5,
                 color=RED if c.value < 0 else TEXT2)
        y -= 0.022
    fig.text(0.10, y, f"({result.combine} of the above)", fontsize=8, color=SLATE, style="italic")

    rows = detail_rows(result)
    if rows:
        y -= 0.04
        fig.text(0.08, y, "Details", fontsize=13, color=TEXT, fontweight="bold")
        y -= 0.028
        for label, text in rows:
            if y < 0.12:
                break
            fig.text(0.10, y, label, fontsize=9, color=TEXT2)
            fig.text(0.60, y, text, fontsize=9, color=TEXT2)
            y -= 0.02

    notes = detail_lists(result)
    if notes and y > 0.16:
        y -= 0.03
        fig.text(0.08, y, "Recommendations", fontsize=13, color=INDIGO, fontweight="bold")
        y -= 0.028
        for note in notes:
            if y < 0.08:
                break
            fig.text(0.10, y, f"- {note}", fontsize=8.5, color=TEXT2)
            y -= 0.02

    fig.text(0.50, 0.03,
             "Estimates only. Rates and thresholds are illustrative, not professional advice.",
             ha="center", fontsize=8, color=SLATE, style="italic")
    return fig


# ═══════════════════════════════════════════════════════════════════
# Component breakdown (horizontal bars)
# ═══════════════════════════════════════════════════════════════════

def _chart_breakdown(result: ResultRecord, figsize=(WEB_W, WEB_H)) -> plt.Figure:
    """One bar per component; the bar selected by min/max is highlighted."""
    fig, ax = plt.subplots(figsize=figsize, constrained_layout=True)
    _style(fig, ax)

    labels = [c.label for c in result.components]
    values = np.array([c.value for c in result.components], dtype=float)
    colors = [RED if v < 0 else INDIGO for v in values]
    if result.combine in ("min", "max"):
        pick = int(values.argmin() if result.combine == "min" else values.argmax())
        colors[pick] = EMERALD

    y = np.arange(len(values))
    ax.barh(y, values, color=colors, edgecolor=INDIGO_DEEP, linewidth=0.5)
    ax.set_yticks(y)
    ax.set_yticklabels(labels, fontsize=8)
    ax.invert_yaxis()
    ax.axvline(0, color=SLATE, linewidth=0.8)

    if result.unit == "currency":
        ax.xaxis.set_major_formatter(USD_FMT)
    else:
        ax.xaxis.set_major_formatter(NUM_FMT)
    if result.combine == "mean":
        ax.axvline(result.total, color=AMBER, linestyle="--", linewidth=1.2, label="Mean")
        _legend(ax)

    ax.set_title(f"{result.total_label}: {fmt_value(result.total, result.unit)}",
                 fontsize=13, pad=12)
    return fig


# ═══════════════════════════════════════════════════════════════════
# Amortization (balance + cumulative interest, payment split)
# ═══════════════════════════════════════════════════════════════════

def _chart_amortization(schedule: AmortizationSchedule, figsize=(WEB_W, WEB_H + 2)) -> plt.Figure:
    fig, (ax_bal, ax_pay) = plt.subplots(2, 1, figsize=figsize, constrained_layout=True,
                                         gridspec_kw={"height_ratios": [1.3, 1]})
    _style(fig, ax_bal, ax_pay)
    months = schedule.payment_number

    ax_bal.plot(months, schedule.ending_balance, color=INDIGO, linewidth=2.2, label="Balance")
    ax_bal.plot(months, schedule.cumulative_interest, color=AMBER, linewidth=1.8,
                label="Cumulative interest")
    ax_bal.fill_between(months, 0, schedule.ending_balance, color=INDIGO, alpha=0.15)
    ax_bal.yaxis.set_major_formatter(USD_FMT)
    ax_bal.set_ylabel("Amount")
    ax_bal.set_title("Loan Balance Over Time", fontsize=13, pad=12)
    _legend(ax_bal)

    principal_paid = schedule.principal + schedule.extra
    ax_pay.stackplot(months, principal_paid, schedule.interest,
                     colors=[EMERALD, RED], alpha=0.8, labels=["Principal", "Interest"])
    ax_pay.yaxis.set_major_formatter(USD_FMT)
    ax_pay.set_xlabel("Payment number (month)")
    ax_pay.set_ylabel("Per payment")
    _legend(ax_pay)
    return fig


# ═══════════════════════════════════════════════════════════════════
# Investment growth (balance vs contributions, real value)
# ═══════════════════════════════════════════════════════════════════

def _chart_growth(projection: GrowthProjection, figsize=(WEB_W, WEB_H)) -> plt.Figure:
    fig, ax = plt.subplots(figsize=figsize, constrained_layout=True)
    _style(fig, ax)
    years = projection.month / 12
    contributed = np.cumsum(projection.contribution)

    ax.fill_between(years, 0, contributed, color=INDIGO, alpha=0.25, label="Contributions")
    ax.fill_between(years, contributed, projection.balance, color=EMERALD, alpha=0.25,
                    label="Interest")
    ax.plot(years, projection.balance, color=EMERALD, linewidth=2.2, label="Balance")
    ax.plot(years, projection.real_balance, color=AMBER, linewidth=1.6, linestyle="--",
            label="Inflation-adjusted")
    ax.yaxis.set_major_formatter(USD_FMT)
    ax.set_xlabel("Years")
    ax.set_ylabel("Balance")
    ax.set_title("Investment Growth Over Time", fontsize=13, pad=12)
    _legend(ax, loc="upper left")
    return fig


# ═══════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════

def result_figures(result: ResultRecord, figsize=(WEB_W, WEB_H)) -> List[plt.Figure]:
    figs = [_chart_breakdown(result, figsize=figsize)]
    if isinstance(result.schedule, AmortizationSchedule) and result.schedule.months:
        figs.append(_chart_amortization(result.schedule, figsize=(figsize[0], figsize[1] + 2)))
    elif isinstance(result.schedule, GrowthProjection) and result.schedule.months:
        figs.append(_chart_growth(result.schedule, figsize=figsize))
    return figs


def figure_to_base64(fig: plt.Figure) -> str:
    """Convert a matplotlib figure to a base64-encoded PNG string."""
    buf = io.BytesIO()
    fig.savefig(buf, format="png", facecolor=fig.get_facecolor(),
                dpi=120, bbox_inches="tight")
    buf.seek(0)
    b64 = base64.b64encode(buf.read()).decode()
    buf.close()
    return b64


def generate_pdf(spec: CalculatorSpec, result: ResultRecord, path: str = cfg.REPORT_PATH) -> str:
    """Write summary page plus charts to *path*. Returns the file path."""
    pages = [_page_summary(spec, result)]
    pages.extend(result_figures(result, figsize=(A4W, A4H * 0.5)))

    with PdfPages(path) as pdf:
        for fig in pages:
            pdf.savefig(fig, facecolor=fig.get_facecolor())
    for fig in pages:
        plt.close(fig)
    return path


def get_web_charts(result: ResultRecord) -> List[str]:
    """Return base64-encoded PNG chart images for web embedding.

    Always the component breakdown; the amortization chart is added
    when the result carries a payment schedule, the growth chart when it
    carries an investment projection.
    """
    chart_figs = result_figures(result)
    images = [figure_to_base64(f) for f in chart_figs]
    for f in chart_figs:
        plt.close(f)
    return images
