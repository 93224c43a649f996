"""Display functions for CLI output."""

import typer

from ...domain.batch import BatchResult
from ...domain.exceptions import BatchOperationError


def display_schedule(delays: list[float], max_elapsed: float) -> None:
    """Print the pre-jitter backoff delay before each retry."""
    if not delays:
        typer.echo("No retries configured.")
        return

    cumulative = 0.0
    typer.echo(f"{'retry':>5}  {'delay':>10}  {'cumulative':>12}")
    for retry, delay in enumerate(delays, start=1):
        cumulative += delay
        line = f"{retry:>5}  {delay:>9.2f}s  {cumulative:>11.2f}s"
        if cumulative >= max_elapsed:
            typer.secho(
                f"{line}  (over {max_elapsed:.0f}s budget)", fg=typer.colors.YELLOW
            )
        else:
            typer.echo(line)


def display_progress(completed: int, total: int) -> None:
    typer.echo(f"Progress: {completed}/{total}")


def display_batch_summary(result: BatchResult) -> None:
    """Print succeeded/failed counts and each failure by index."""
    typer.secho(f"✓ {result.succeeded} succeeded", fg=typer.colors.GREEN)
    if not result.failures:
        return

    typer.secho(f"✗ {result.failed} failed", fg=typer.colors.RED)
    for outcome in result.failures:
        typer.secho(
            f"  [{outcome.index}] {type(outcome.error).__name__}: {outcome.error}",
            fg=typer.colors.RED,
        )


def display_batch_error(error: BatchOperationError) -> None:
    typer.secho(f"✗ Batch failed at operation {error.index}", fg=typer.colors.RED)
    typer.secho(f"  {type(error.error).__name__}: {error.error}", fg=typer.colors.RED)
