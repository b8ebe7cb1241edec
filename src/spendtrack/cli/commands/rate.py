"""Exchange rate and conversion commands."""

import click
from spendtrack.cli.error_handling import fail
from spendtrack.cli.formatting import format_money, format_rate
from spendtrack.domain.entities import RATE_WINDOW
from spendtrack.domain.errors import currency_not_found
from spendtrack.utils.amount_parser import parse_amount, parse_rate


def _require_currency(ctx, tracker, code: str):
    currency = tracker.get_currency(code)
    if currency is None:
        fail(ctx, currency_not_found(code))
    return currency


@click.group()
def rate_group():
    """Manage exchange rates."""
    pass


@rate_group.command("record")
@click.argument("from_code", metavar="FROM")
@click.argument("to_code", metavar="TO")
@click.argument("rate")
@click.pass_context
def record_rate(ctx, from_code: str, to_code: str, rate: str):
    """Record that 1 FROM is worth RATE TO.

    The current rate of a pair is the average of its last 10 observations.

    Examples:
        spendtrack rate record USD RUB 92.5
    """
    tracker = ctx.obj["tracker"]
    source = _require_currency(ctx, tracker, from_code)
    target = _require_currency(ctx, tracker, to_code)

    try:
        value = parse_rate(rate)
    except ValueError as e:
        fail(ctx, f"Invalid rate: {e}")

    record = tracker.record_rate(source.code, target.code, value)
    if record is None:
        fail(ctx, "Rate was not recorded")
    click.echo(
        f"1 {source.code} = {format_rate(record.current_rate)} {target.code} "
        f"(average of {min(len(record.history), RATE_WINDOW)} observation(s))"
    )


@rate_group.command("list")
@click.pass_context
def list_rates(ctx):
    """List recorded exchange rates."""
    tracker = ctx.obj["tracker"]
    records = tracker.rates.records
    if not records:
        click.echo("No exchange rates recorded.")
        return

    click.echo("\nExchange rates:")
    click.echo("-" * 60)
    for record in records:
        latest = record.history[-1]
        click.echo(
            f"1 {record.from_code} = {format_rate(record.current_rate)} {record.to_code}"
            f"  ({len(record.history)} observation(s), last {format_rate(latest.rate)}"
            f" on {latest.observed_at.date()})"
        )


@click.command("convert")
@click.argument("amount")
@click.argument("from_code", metavar="FROM")
@click.argument("to_code", metavar="TO")
@click.option("--rate", help="Rate to use and record (1 FROM = RATE TO)")
@click.pass_context
def convert(ctx, amount: str, from_code: str, to_code: str, rate: str | None):
    """Convert AMOUNT from one currency to another.

    With --rate the rate is also recorded for the pair. Without it the best
    known rate is used.

    Examples:
        spendtrack convert 100 USD RUB --rate 92.5
        spendtrack convert 100 RUB USD
    """
    tracker = ctx.obj["tracker"]
    source = _require_currency(ctx, tracker, from_code)
    target = _require_currency(ctx, tracker, to_code)

    try:
        value = parse_amount(amount)
        rate_value = parse_rate(rate) if rate is not None else None
    except ValueError as e:
        fail(ctx, str(e))

    if rate_value is None and not tracker.has_rate(source.code, target.code):
        click.echo(f"Warning: no rate known for {source.code}/{target.code}, assumed 1:1", err=True)

    result = tracker.convert(value, source.code, target.code, rate=rate_value)
    if result is None:
        fail(ctx, "Conversion failed")
    click.echo(f"{format_money(value, source)} = {format_money(result, target)}")


def register_commands(cli):
    """Register rate and convert commands with main CLI."""
    cli.add_command(rate_group, name="rate")
    cli.add_command(convert)
