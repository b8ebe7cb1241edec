"""Category listing command."""

import click


@click.command("categories")
@click.pass_context
def list_categories(ctx):
    """List the expense categories."""
    tracker = ctx.obj["tracker"]

    click.echo("\nCategories:")
    for category in tracker.categories:
        click.echo(f"{category.id:3d} | {category.name:<15} | {category.color}")


def register_commands(cli):
    """Register categories command with main CLI."""
    cli.add_command(list_categories)
