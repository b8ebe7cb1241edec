"""Currency management commands."""

import click
from spendtrack.cli.error_handling import fail
from spendtrack.domain.errors import currency_not_found


@click.group()
def currency_group():
    """Manage currencies."""
    pass


@currency_group.command("list")
@click.pass_context
def list_currencies(ctx):
    """List all currencies. The primary currency is marked with '*'."""
    tracker = ctx.obj["tracker"]
    primary = tracker.primary_currency

    click.echo("\nCurrencies:")
    click.echo("-" * 40)
    for currency in tracker.currencies:
        marker = "*" if currency == primary else " "
        click.echo(f"{marker} {currency.code:<6} {currency.symbol:<4} {currency.name}")


@currency_group.command("add")
@click.argument("code")
@click.argument("symbol")
@click.argument("name")
@click.pass_context
def add_currency(ctx, code: str, symbol: str, name: str):
    """Add a currency.

    Examples:
        spendtrack currency add gbp £ "Pound Sterling"
    """
    tracker = ctx.obj["tracker"]
    currency = tracker.add_currency(code, symbol, name)
    if currency is None:
        fail(ctx, "Code, symbol and name are all required")
    click.echo(f"Added currency {currency.code} ({currency.symbol} {currency.name})")


@currency_group.command("primary")
@click.argument("code")
@click.pass_context
def set_primary(ctx, code: str):
    """Set the primary currency used for totals.

    Amounts already recorded for past expenses are not recalculated.
    """
    tracker = ctx.obj["tracker"]
    currency = tracker.set_primary_currency(code)
    if currency is None:
        fail(ctx, currency_not_found(code))
    click.echo(f"Primary currency set to {currency.code} ({currency.name})")


def register_commands(cli):
    """Register currency commands with main CLI."""
    cli.add_command(currency_group, name="currency")
