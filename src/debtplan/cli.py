"""Command line interface for DebtPlan."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path

import click

from .config import BaseConfig
from .logging_config import setup_logging
from .models.debt import DebtRecord, Strategy
from .models.plan import InsufficientSurplus, NoDebts, NonConvergentSimulation, PlanResult
from .services.budgeting import compute_surplus
from .services.debts import MAX_SIMULATION_MONTHS
from .services.export_csv import export_cleared_csv, export_timeline_csv
from .services.import_csv import load_cashflow_csv, load_debts_csv
from .services.money import format_money, require_finite
from .services.planning import NoSurplus, PlanReport, build_plan, compare_strategies
from .services.reports import export_comparison_png, export_payoff_png

STRATEGY_CHOICE = click.Choice([s.value for s in Strategy], case_sensitive=False)


def _failure_message(outcome: object, currency: str) -> str:
    if isinstance(outcome, NoSurplus):
        return f"No surplus available ({format_money(outcome.surplus, currency)}). {outcome.message}"
    if isinstance(outcome, InsufficientSurplus):
        return (
            f"Surplus of {format_money(outcome.supplied_surplus, currency)} does not cover minimum "
            f"payments of {format_money(outcome.required_minimum, currency)}. "
            "Increase income or reduce expenses."
        )
    if isinstance(outcome, NonConvergentSimulation):
        return (
            f"Plan did not finish within {MAX_SIMULATION_MONTHS} months "
            f"({format_money(outcome.remaining_balance, currency)} still owed). "
            "Check that every minimum payment exceeds its monthly interest."
        )
    return f"Unexpected result: {outcome!r}"


def _load_inputs(
    debts_csv: Path, surplus: float | None, cashflow: Path | None
) -> tuple[list[DebtRecord], float]:
    if (surplus is None) == (cashflow is None):
        raise click.UsageError("Provide exactly one of --surplus or --cashflow.")
    try:
        records = load_debts_csv(debts_csv)
        if cashflow is not None:
            incomes, expenses = load_cashflow_csv(cashflow)
            surplus = compute_surplus(incomes=incomes, expenses=expenses)
        surplus = require_finite("surplus", surplus)
    except (ValueError, OSError) as exc:
        raise click.ClickException(str(exc)) from exc
    return records, surplus


def _echo_plan(report: PlanReport) -> None:
    plan = report.plan
    currency = report.currency
    click.echo(f"Strategy: {plan.strategy.value} (cheapest: {report.best_strategy.value})")
    click.echo(f"Monthly surplus: {format_money(report.surplus, currency)}")
    click.echo(f"Months to debt-free: {plan.months}")
    click.echo(f"Total principal: {format_money(report.total_principal, currency)}")
    click.echo(f"Future interest: {format_money(report.total_future_interest, currency)}")
    click.echo(f"Total cost: {format_money(report.total_debt, currency)}")
    for shortage in report.one_time_shortages:
        click.echo(
            f"One-time debt {shortage.name} exceeds the surplus by "
            f"{format_money(shortage.shortage, currency)}"
        )
    if report.cleared_debts:
        click.echo("Cleared debts:")
        for record in report.cleared_debts:
            when = "already cleared" if record.cleared_month == 0 else f"month {record.cleared_month}"
            click.echo(
                f"  {record.name}: {when}, paid {format_money(record.total_paid, currency)}, "
                f"saved {format_money(record.amount_saved, currency)}"
            )


def _report_as_dict(report: PlanReport) -> dict:
    payload = asdict(report)
    payload["kind"] = report.kind
    return payload


@click.group()
@click.version_option(package_name="debtplan")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Plan debt repayment with the avalanche or snowball strategy."""

    try:
        config = BaseConfig()
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    setup_logging(config)
    ctx.obj = config


@cli.command("simulate")
@click.argument("debts_csv", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--surplus", type=float, default=None, help="Monthly income minus expenses")
@click.option(
    "--cashflow",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="CSV of kind,label,amount rows to derive the surplus from",
)
@click.option("--strategy", type=STRATEGY_CHOICE, default=None, help="Avalanche or Snowball")
@click.option("--forget", multiple=True, help="Hide a cleared debt by name (repeatable)")
@click.option("--timeline-csv", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.option("--cleared-csv", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.option("--chart", type=click.Path(dir_okay=False, path_type=Path), default=None, help="PNG output path")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the report as JSON")
@click.pass_obj
def simulate_command(
    config: BaseConfig,
    debts_csv: Path,
    surplus: float | None,
    cashflow: Path | None,
    strategy: str | None,
    forget: tuple[str, ...],
    timeline_csv: Path | None,
    cleared_csv: Path | None,
    chart: Path | None,
    as_json: bool,
) -> None:
    """Project the repayment plan for DEBTS_CSV."""

    records, monthly_surplus = _load_inputs(debts_csv, surplus, cashflow)
    if not records:
        click.echo("No debts to plan.")
        return
    chosen = Strategy.parse(strategy) if strategy else config.DEFAULT_STRATEGY

    outcome = build_plan(
        records=records,
        surplus=monthly_surplus,
        strategy=chosen,
        forgotten=forget,
        currency=config.CURRENCY,
    )
    if not isinstance(outcome, PlanReport):
        raise click.ClickException(_failure_message(outcome, config.CURRENCY))

    if as_json:
        click.echo(json.dumps(_report_as_dict(outcome), indent=2))
    else:
        _echo_plan(outcome)

    if timeline_csv is not None:
        export_timeline_csv(plan=outcome.plan, output_path=timeline_csv)
        click.echo(f"Timeline written: {timeline_csv}", err=as_json)
    if cleared_csv is not None:
        export_cleared_csv(plan=outcome.plan, output_path=cleared_csv)
        click.echo(f"Cleared debts written: {cleared_csv}", err=as_json)
    if chart is not None:
        export_payoff_png(plan=outcome.plan, output_path=chart, currency=config.CURRENCY)
        click.echo(f"Chart written: {chart}", err=as_json)


@cli.command("compare")
@click.argument("debts_csv", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--surplus", type=float, default=None, help="Monthly income minus expenses")
@click.option(
    "--cashflow",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="CSV of kind,label,amount rows to derive the surplus from",
)
@click.option("--chart", type=click.Path(dir_okay=False, path_type=Path), default=None, help="PNG output path")
@click.pass_obj
def compare_command(
    config: BaseConfig,
    debts_csv: Path,
    surplus: float | None,
    cashflow: Path | None,
    chart: Path | None,
) -> None:
    """Compare Avalanche and Snowball for DEBTS_CSV."""

    records, monthly_surplus = _load_inputs(debts_csv, surplus, cashflow)
    active = [record.to_input() for record in records if not record.is_settled and not record.is_one_time]
    comparison = compare_strategies(active, monthly_surplus)

    for strategy in Strategy:
        outcome = comparison.outcome_for(strategy)
        if isinstance(outcome, PlanResult):
            click.echo(
                f"{strategy.value}: {outcome.months} months, "
                f"interest {format_money(outcome.total_interest_paid, config.CURRENCY)}"
            )
        elif isinstance(outcome, NoDebts):
            click.echo(f"{strategy.value}: no active debts")
        else:
            raise click.ClickException(_failure_message(outcome, config.CURRENCY))

    if comparison.best is not None:
        click.echo(f"Cheaper strategy: {comparison.best.value}")
        difference = comparison.interest_difference
        if difference:
            click.echo(f"Interest difference: {format_money(abs(difference), config.CURRENCY)}")

    if chart is not None:
        export_comparison_png(comparison=comparison, output_path=chart, currency=config.CURRENCY)
        click.echo(f"Chart written: {chart}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
