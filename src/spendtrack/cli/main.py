"""Main CLI entry point."""

import click
from spendtrack.database.factories import DB_PATH_ENV, create_sqlite_database
from spendtrack.domain.tracker import ExpenseTracker
from spendtrack.logging_config import init_logging

# Import and register all commands at module level
from spendtrack.cli.commands import (
    add,
    view,
    currency,
    rate,
    category,
    export_cmd,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENV} environment variable)",
    envvar=DB_PATH_ENV,
)
@click.option("--debug", is_flag=True, help="Show debug logging on stderr")
@click.pass_context
def cli(ctx, db_path: str | None, debug: bool):
    """Spendtrack - Expense tracking in several currencies.

    Record expenses in any currency, enter exchange rates by hand and see
    totals in your primary currency.
    """
    ctx.ensure_object(dict)
    init_logging(debug)

    # Open the database only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.call_on_close(db.disconnect)
        ctx.obj["db"] = db
        ctx.obj["tracker"] = ExpenseTracker.load(db)


# Register all commands
add.register_commands(cli)
view.register_commands(cli)
currency.register_commands(cli)
rate.register_commands(cli)
category.register_commands(cli)
export_cmd.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
