"""Add expense command."""

import click
from spendtrack.cli.error_handling import fail, handle_domain_error
from spendtrack.cli.formatting import format_money
from spendtrack.domain.categories import require_category
from spendtrack.domain.errors import DomainError, currency_not_found
from spendtrack.utils.amount_parser import parse_positive
from spendtrack.utils.date_parser import parse_timestamp


@click.command("add")
@click.option(
    "--amount",
    required=True,
    help="Expense amount (e.g., 123.45, 1,234.56 or 12,50; a comma before 1-2 final digits is a decimal comma)",
)
@click.option("--currency", help="Currency code (defaults to the primary currency)")
@click.option("--category", help="Category name or ID (defaults to the first category)")
@click.option("--description", help="Expense description")
@click.option(
    "--date",
    help="Expense date (YYYY-MM-DD, D.M.YYYY or relative like 'today', 'yesterday')",
)
@click.pass_context
def add_expense(
    ctx,
    amount: str,
    currency: str | None,
    category: str | None,
    description: str | None,
    date: str | None,
):
    """Record an expense.

    Examples:
        spendtrack add --amount 250 --category Groceries --description "Market"
        spendtrack add --amount 12.50 --currency EUR --category Transport --date yesterday
    """
    tracker = ctx.obj["tracker"]

    try:
        expense_amount = parse_positive(amount)
    except ValueError as e:
        fail(ctx, f"Invalid amount: {e}")

    currency_obj = tracker.primary_currency
    if currency:
        currency_obj = tracker.get_currency(currency)
        if currency_obj is None:
            fail(ctx, currency_not_found(currency))

    category_obj = None
    if category:
        try:
            category_obj = require_category(category)
        except DomainError as e:
            handle_domain_error(ctx, e)

    try:
        timestamp = parse_timestamp(date)
    except ValueError as e:
        fail(ctx, f"Invalid date format: {e}")

    expense = tracker.add_expense(
        expense_amount,
        description=description,
        category=category_obj,
        currency=currency_obj,
        at=timestamp,
    )
    if expense is None:
        fail(ctx, "Expense was not recorded")

    click.echo(f"Created expense {expense.id}")
    click.echo(f"  Amount: {format_money(expense.amount, expense.currency)}")
    if expense.currency.code != tracker.primary_currency.code:
        click.echo(f"  In {tracker.primary_currency.code}: "
                   f"{format_money(expense.primary_amount, tracker.primary_currency)}")
        if not tracker.has_rate(expense.currency.code, tracker.primary_currency.code):
            click.echo(
                f"  Warning: no rate known for {expense.currency.code}/"
                f"{tracker.primary_currency.code}, assumed 1:1"
            )
    click.echo(f"  Category: {expense.category.name}")
    if expense.description:
        click.echo(f"  Description: {expense.description}")


@click.command("delete")
@click.argument("expense_id")
@click.pass_context
def delete_expense(ctx, expense_id: str):
    """Delete an expense by ID.

    Deleting an unknown ID changes nothing.
    """
    tracker = ctx.obj["tracker"]
    if tracker.delete_expense(expense_id):
        click.echo(f"Deleted expense {expense_id}")
    else:
        click.echo(f"No expense with ID {expense_id}")


def register_commands(cli):
    """Register add and delete commands with main CLI."""
    cli.add_command(add_expense)
    cli.add_command(delete_expense)
