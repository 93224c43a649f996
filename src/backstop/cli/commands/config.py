"""Config command implementation."""

import typer

from ..state import CLIState


def show_config(ctx: typer.Context) -> None:
    """Show the resolved settings.

    Examples:
        backstop config
        BACKSTOP_MAX_RETRIES=5 backstop config
    """
    state: CLIState = ctx.obj
    for key, value in state.settings.to_dict().items():
        typer.echo(f"{key}: {value}")
