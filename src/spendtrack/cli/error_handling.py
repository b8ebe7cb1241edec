"""CLI error handling helpers."""

import click

from spendtrack.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def fail(ctx: click.Context, message: str) -> None:
    """Render an error message and exit with failure."""
    click.echo(f"Error: {message}", err=True)
    ctx.exit(1)
