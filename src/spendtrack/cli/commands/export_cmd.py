"""Export and import of tracker data as JSON."""

from pathlib import Path

import click
from spendtrack.cli.error_handling import fail, handle_domain_error
from spendtrack.domain import snapshot
from spendtrack.domain.errors import DomainError


@click.command("export")
@click.argument("path", type=click.Path(dir_okay=False, writable=True, path_type=Path))
@click.pass_context
def export_data(ctx, path: Path):
    """Write all expenses, currencies and rates to a JSON file."""
    tracker = ctx.obj["tracker"]
    path.write_text(snapshot.dumps(tracker.state()), encoding="utf-8")
    click.echo(f"Exported {len(tracker.expenses)} expense(s) to {path}")


@click.command("import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def import_data(ctx, path: Path):
    """Replace all data with the contents of a JSON export.

    Missing sections fall back to defaults: no expenses, the default
    currencies and no exchange rates.
    """
    tracker = ctx.obj["tracker"]
    try:
        state = snapshot.loads(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError:
        fail(ctx, f"{path} is not a UTF-8 text file")
    except DomainError as e:
        handle_domain_error(ctx, e)

    tracker.apply_state(state)
    click.echo(
        f"Imported {len(state.expenses)} expense(s), {len(state.currencies)} currencies "
        f"and {len(state.exchange_rates)} exchange rate(s)"
    )


def register_commands(cli):
    """Register export and import commands with main CLI."""
    cli.add_command(export_data)
    cli.add_command(import_data)
