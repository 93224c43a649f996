"""Simulate command implementation."""

import asyncio
import random
import typing as t

import typer

from ...domain.batch import BatchConfig, BatchResult
from ...domain.exceptions import ApiRequestError, BatchOperationError
from ..output.display import (
    display_batch_error,
    display_batch_summary,
    display_progress,
)
from ..state import CLIState


def build_flaky_operations(
    count: int, failure_rate: float, rng: random.Random, latency: float = 0.0
) -> list[t.Callable[[], t.Awaitable[int]]]:
    """Create operations that fail with HTTP 503 at ``failure_rate`` per call.

    Each operation returns its own index when it succeeds.
    """

    def make(index: int) -> t.Callable[[], t.Awaitable[int]]:
        async def operation() -> int:
            if latency:
                await asyncio.sleep(latency)
            if rng.random() < failure_rate:
                raise ApiRequestError("Service unavailable", status_code=503)
            return index

        return operation

    return [make(index) for index in range(count)]


def simulate(
    ctx: typer.Context,
    count: int = typer.Option(10, "--count", "-c", help="Number of operations", min=1),
    failure_rate: float = typer.Option(
        0.3,
        "--failure-rate",
        "-f",
        help="Probability that any single call fails with 503",
        min=0.0,
        max=1.0,
    ),
    seed: int | None = typer.Option(None, "--seed", help="Random seed"),
    latency: float = typer.Option(
        0.0, "--latency", help="Seconds each call takes", min=0.0
    ),
    partial: bool = typer.Option(
        False, "--partial", help="Collect failures instead of failing the batch"
    ),
    no_retry: bool = typer.Option(False, "--no-retry", help="Disable retries"),
) -> None:
    """Run a synthetic batch of flaky operations through the batch executor.

    Useful for seeing how a retry policy and concurrency setting behave
    before pointing them at a real service.

    Examples:
        backstop simulate --count 20 --failure-rate 0.5
        backstop --initial-delay 0.05 simulate --partial --seed 42
    """
    state: CLIState = ctx.obj
    base = state.settings.batch_config(retry=not no_retry)
    config = BatchConfig(
        concurrency=base.concurrency,
        retry=base.retry,
        retry_policy=base.retry_policy,
        on_progress=display_progress,
    )
    executor = state.create_executor(config)
    operations = build_flaky_operations(
        count, failure_rate, random.Random(seed), latency
    )

    async def run() -> BatchResult[int] | list[int]:
        if partial:
            return await executor.run_settled(operations)
        return await executor.run(operations)

    try:
        outcome = asyncio.run(run())
    except BatchOperationError as e:
        display_batch_error(e)
        raise typer.Exit(code=1)

    if isinstance(outcome, BatchResult):
        display_batch_summary(outcome)
    else:
        typer.secho(
            f"✓ All {len(outcome)} operations succeeded", fg=typer.colors.GREEN
        )
