"""Schedule command implementation."""

import typer

from ..output.display import display_schedule
from ..state import CLIState


def schedule(
    ctx: typer.Context,
    attempts: int | None = typer.Option(
        None,
        "--attempts",
        "-n",
        help="Number of retries to show (defaults to max retries)",
        min=0,
        max=100,
    ),
) -> None:
    """Show the backoff delays of the configured retry policy.

    Delays are shown before jitter, which spreads each one by ±20%.

    Examples:
        backstop schedule
        backstop --initial-delay 0.5 --max-delay 10 schedule -n 8
    """
    state: CLIState = ctx.obj
    policy = state.settings.retry_policy()
    display_schedule(policy.schedule(attempts), policy.max_elapsed)
