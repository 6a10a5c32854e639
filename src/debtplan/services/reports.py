"""Payoff chart rendering."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.ticker as mticker
from matplotlib.figure import Figure

from ..models.debt import Strategy
from ..models.plan import PlanResult
from .planning import StrategyComparison


class ReportRenderer(Protocol):
    """Protocol describing renderer behavior."""

    def render(self, figure: Figure, *, output_path: Path) -> None:  # pragma: no cover - interface
        ...


def _balance_series(plan: PlanResult) -> tuple[list[int], dict[str, list[float]]]:
    """Remaining balance per debt per month, zero once a debt leaves the timeline."""

    months = [0] + [record.month for record in plan.timeline]
    names: list[str] = []
    for record in plan.timeline:
        for entry in record.breakdown:
            if entry.name not in names:
                names.append(entry.name)

    series: dict[str, list[float]] = {name: [] for name in names}
    if plan.timeline:
        first = plan.timeline[0]
        # Month 0 shows the opening balance: what was left plus what month 1 paid off.
        for name in names:
            entry = first.entry_for(name)
            opening = 0.0
            if entry is not None:
                opening = entry.remaining_balance + max(entry.total_payment - entry.interest_accrued, 0.0)
            series[name].append(round(opening, 2))

    for record in plan.timeline:
        for name in names:
            entry = record.entry_for(name)
            series[name].append(entry.remaining_balance if entry is not None else 0.0)

    return months, series


def build_payoff_chart(*, plan: PlanResult, currency: str = "INR") -> Figure:
    """Create a stacked area chart of remaining balance per debt over time."""

    fig, ax = plt.subplots(figsize=(10, 6))

    if not plan.timeline:
        ax.text(0.5, 0.5, "No active debts", ha="center", va="center", fontsize=14, color="#666")
        ax.axis("off")
        return fig

    months, series = _balance_series(plan)
    cmap = plt.get_cmap("tab20")
    colors = [cmap(i / max(len(series), 1)) for i in range(len(series))]

    ax.stackplot(months, *series.values(), labels=list(series.keys()), colors=colors, alpha=0.85)

    for record in plan.cleared_debts:
        if record.cleared_month > 0:
            ax.axvline(record.cleared_month, color="#9CA3AF", linestyle=":", linewidth=1)

    ax.grid(True, linestyle="--", alpha=0.3)
    ax.set_axisbelow(True)
    ax.set_title(f"{plan.strategy.value} payoff timeline", fontsize=14, fontweight="bold", pad=15)
    ax.set_xlabel("Month", fontsize=11)
    ax.set_ylabel(f"Remaining balance ({currency})", fontsize=11)
    ax.set_xlim(0, max(months))
    ax.yaxis.set_major_formatter(mticker.FuncFormatter(lambda x, p: f"{x:,.0f}"))
    ax.legend(loc="upper right", framealpha=0.9)

    textstr = (
        f"Months: {plan.months}\n"
        f"Interest: {currency} {plan.total_interest_paid:,.2f}"
    )
    props = dict(boxstyle="round", facecolor="#F3F4F6", alpha=0.9, edgecolor="#E5E7EB")
    ax.text(0.02, 0.04, textstr, transform=ax.transAxes, fontsize=9, bbox=props, color="#374151")

    plt.tight_layout()
    return fig


def build_strategy_comparison_chart(*, comparison: StrategyComparison, currency: str = "INR") -> Figure:
    """Plot total remaining balance for Avalanche and Snowball on one axis."""

    fig, ax = plt.subplots(figsize=(10, 6))
    styles = {
        Strategy.AVALANCHE: {"color": "#2563EB", "marker": "o"},
        Strategy.SNOWBALL: {"color": "#F97316", "marker": "s"},
    }

    plotted = False
    for strategy in Strategy:
        outcome = comparison.outcome_for(strategy)
        if not isinstance(outcome, PlanResult) or not outcome.timeline:
            continue
        months = [record.month for record in outcome.timeline]
        remaining = [record.remaining_balance for record in outcome.timeline]
        label = f"{strategy.value} ({outcome.months} mo, {currency} {outcome.total_interest_paid:,.0f} interest)"
        ax.plot(months, remaining, linewidth=2, markersize=3, label=label, **styles[strategy])
        plotted = True

    if not plotted:
        ax.text(0.5, 0.5, "No plan to compare", ha="center", va="center", fontsize=14, color="#666")
        ax.axis("off")
        return fig

    ax.grid(True, linestyle="--", alpha=0.3)
    ax.set_title("Avalanche vs Snowball", fontsize=14, fontweight="bold", pad=15)
    ax.set_xlabel("Month", fontsize=11)
    ax.set_ylabel(f"Total remaining ({currency})", fontsize=11)
    ax.yaxis.set_major_formatter(mticker.FuncFormatter(lambda x, p: f"{x:,.0f}"))
    ax.legend(loc="upper right", framealpha=0.9)
    if comparison.best is not None:
        ax.text(
            0.02, 0.04, f"Cheaper: {comparison.best.value}", transform=ax.transAxes,
            fontsize=10, fontweight="bold", color="#16A34A",
        )

    plt.tight_layout()
    return fig


def _save(fig: Figure, output_path: Path, renderer: ReportRenderer | None) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if renderer is not None:
        renderer.render(fig, output_path=output_path)
    else:
        fig.savefig(output_path, bbox_inches="tight", dpi=120)
    plt.close(fig)
    return output_path


def export_payoff_png(
    *,
    plan: PlanResult,
    output_path: Path,
    currency: str = "INR",
    renderer: ReportRenderer | None = None,
) -> Path:
    """Render the payoff chart to PNG and return the path."""

    return _save(build_payoff_chart(plan=plan, currency=currency), output_path, renderer)


def export_comparison_png(
    *,
    comparison: StrategyComparison,
    output_path: Path,
    currency: str = "INR",
    renderer: ReportRenderer | None = None,
) -> Path:
    """Render the strategy comparison chart to PNG and return the path."""

    return _save(build_strategy_comparison_chart(comparison=comparison, currency=currency), output_path, renderer)
