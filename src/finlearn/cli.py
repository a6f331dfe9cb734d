"""Command-line entry points for FinLearn."""

from __future__ import annotations

import json
from typing import Any

import click

from .calculators.debt import DebtCalculator, default_values
from .config import BaseConfig
from .context import create_app_context
from .logging_config import get_logger, setup_logging
from .models.debt import Debt
from .services.financial import format_currency, format_percentage

logger = get_logger(__name__)

# Accept the camelCase keys used by the web forms as well as snake_case.
_FIELD_ALIASES = {
    "monthlyIncome": "monthly_income",
    "extraPayment": "extra_payment",
    "paymentStrategy": "payment_strategy",
    "consolidationRate": "consolidation_rate",
    "monthlyExpenses": "monthly_expenses",
    "creditScore": "credit_score",
}


def _load_values(payload: dict[str, Any]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for key, value in payload.items():
        name = _FIELD_ALIASES.get(key, key)
        if name in default_values():
            values[name] = value
    if "debts" in values:
        entries = values["debts"] or []
        if not isinstance(entries, list):
            raise click.ClickException("debts must be a list of objects")
        try:
            values["debts"] = [Debt.from_mapping(entry) for entry in entries]
        except (TypeError, ValueError) as exc:
            raise click.ClickException(f"Invalid debt entry: {exc}") from exc
    return values


@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """FinLearn calculator tools."""

    config = BaseConfig()
    setup_logging(config)
    ctx.obj = config


@cli.command("debt-plan")
@click.argument("input_file", type=click.File("r"))
@click.option("--strategy", type=click.Choice(["avalanche", "snowball"]), default=None)
@click.option("--extra-payment", type=float, default=None, help="Override the extra monthly payment")
@click.option("--consolidation-rate", type=float, default=None, help="Consolidation loan APR to compare")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the full plan as JSON")
@click.option("--no-track", is_flag=True, default=False, help="Do not record calculator usage")
@click.pass_obj
def debt_plan(
    config: BaseConfig,
    input_file,
    strategy: str | None,
    extra_payment: float | None,
    consolidation_rate: float | None,
    as_json: bool,
    no_track: bool,
) -> None:
    """Compute a payoff plan from a JSON file of debts and income."""

    try:
        payload = json.load(input_file)
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"Input is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise click.ClickException("Input must be a JSON object")

    values = _load_values(payload)
    if strategy is not None:
        values["payment_strategy"] = strategy
    if extra_payment is not None:
        values["extra_payment"] = extra_payment
    if consolidation_rate is not None:
        values["consolidation_rate"] = consolidation_rate

    progress = None if no_track else create_app_context(config).progress_repo
    calculator = DebtCalculator(progress=progress)
    calculator.set_values(values)

    state = calculator.state
    if not state.is_valid:
        details = "; ".join(f"{error.field}: {error.message}" for error in state.errors)
        raise click.ClickException(f"Invalid input: {details}")
    plan = state.result
    if plan is None:
        raise click.ClickException("Calculation failed; see the log for details")

    logger.info("Debt plan generated", extra={"months_to_payoff": plan.summary.months_to_payoff})

    if as_json:
        click.echo(json.dumps(plan.to_dict(), default=str, indent=2))
        return

    summary = plan.summary
    click.echo(f"Total debt:            {format_currency(summary.total_debt)}")
    click.echo(f"Minimum payments:      {format_currency(summary.total_minimum_payment)}")
    click.echo(f"Weighted average rate: {format_percentage(summary.weighted_average_rate, 2)}")
    click.echo(f"Months to payoff:      {summary.months_to_payoff}")
    click.echo(f"Total interest:        {format_currency(summary.total_interest_paid)}")
    click.echo("Payoff order:")
    for position, name in enumerate(plan.payoff_strategy.order, start=1):
        amount = plan.payoff_strategy.monthly_allocation.get(name, 0.0)
        click.echo(f"  {position}. {name} ({format_currency(amount)}/month)")
    for insight in plan.insights:
        click.echo(f"[{insight.type}] {insight.message}")


@cli.command("usage")
@click.pass_obj
def usage(config: BaseConfig) -> None:
    """Show how often each calculator has been used."""

    summary = create_app_context(config).progress_repo.usage_summary()
    if not summary:
        click.echo("No calculator usage recorded.")
        return
    for calculator_id, count in summary.items():
        click.echo(f"{calculator_id}: {count}")


if __name__ == "__main__":  # pragma: no cover
    cli()
