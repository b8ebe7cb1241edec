"""Expense viewing commands."""

import click
from spendtrack.cli.formatting import format_money


@click.command("view")
@click.option("--verbose", "-v", is_flag=True, help="Show IDs and the amount recorded in the primary currency")
@click.pass_context
def view_expenses(ctx, verbose: bool):
    """View expenses grouped by day, newest first.

    Amounts in other currencies are followed by their current value in the
    primary currency. Use --verbose to also show the value recorded when the
    expense was added.
    """
    tracker = ctx.obj["tracker"]
    primary = tracker.primary_currency

    groups = tracker.grouped_expenses()
    if not groups:
        click.echo("No expenses found.")
        return

    click.echo(f"\nTotal: {format_money(tracker.total_in_primary(), primary)}")
    for group in groups:
        click.echo(f"\n{group.label}")
        click.echo("-" * 60)
        for expense in group.expenses:
            label = (expense.description or expense.category.name)[:30]
            line = f"  {label:<30} {format_money(expense.amount, expense.currency):>14}"
            if expense.currency.code != primary.code:
                line += f"  ≈ {format_money(tracker.display_conversion(expense), primary)}"
            click.echo(line)
            if verbose:
                click.echo(f"    ID: {expense.id}")
                click.echo(f"    Category: {expense.category.name}")
                click.echo(f"    Time: {expense.date.isoformat(timespec='minutes')}")
                click.echo(f"    Recorded as: {expense.primary_amount:,.2f} (primary at the time)")


@click.command("total")
@click.option("--by-category", is_flag=True, help="Break the total down by category")
@click.pass_context
def show_total(ctx, by_category: bool):
    """Show the total of all expenses in the primary currency.

    The total uses the current exchange rates.
    """
    tracker = ctx.obj["tracker"]
    primary = tracker.primary_currency

    click.echo(f"Total: {format_money(tracker.total_in_primary(), primary)}")
    if by_category:
        for name, amount in tracker.totals_by_category().items():
            click.echo(f"  {name:<20} {format_money(amount, primary):>14}")

    unknown = sorted(
        {
            expense.currency.code
            for expense in tracker.expenses
            if not tracker.has_rate(expense.currency.code, primary.code)
        }
    )
    if unknown:
        click.echo(f"Warning: no rate known for {', '.join(unknown)}; counted 1:1 with {primary.code}")


def register_commands(cli):
    """Register view and total commands with main CLI."""
    cli.add_command(view_expenses)
    cli.add_command(show_total)
