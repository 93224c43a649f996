"""CLI application factory."""

import typer

from ..config.settings import LogLevel, Settings, build_settings, settings_from_env
from ..infrastructure.logging import setup_logging
from .commands import schedule, show_config, simulate
from .state import CLIState


def create_cli_app(
    settings: Settings | None = None, state: CLIState | None = None
) -> typer.Typer:
    """Create CLI application with optional settings or state override.

    Args:
        settings: Optional Settings override for testing. Command-line
            options are ignored when given.
        state: Optional fully built CLIState (e.g. with a mocked executor
            factory). Takes precedence over settings.

    Returns:
        Configured Typer application with commands registered
    """
    app = typer.Typer(
        name="backstop",
        help="Backstop - retries with backoff and bounded-concurrency batches",
        no_args_is_help=True,
    )

    @app.callback()
    def setup(
        ctx: typer.Context,
        max_retries: int | None = typer.Option(
            None,
            "--max-retries",
            "-r",
            help="Maximum retries per call",
            min=0,
            max=100,
        ),
        initial_delay: float | None = typer.Option(
            None, "--initial-delay", help="First backoff delay in seconds", min=0.0
        ),
        max_delay: float | None = typer.Option(
            None, "--max-delay", help="Backoff delay cap in seconds", min=0.0
        ),
        concurrency: int | None = typer.Option(
            None,
            "--concurrency",
            "-j",
            help="Operations run at once in a batch",
            min=1,
            max=100,
        ),
        verbose: bool = typer.Option(
            False,
            "--verbose",
            "-v",
            help="Enable verbose output (DEBUG logging)",
        ),
    ) -> None:
        """Global options available to all commands."""
        if state is not None:
            ctx.obj = state
            return

        try:
            if settings is not None:
                resolved_settings = settings
            else:
                resolved_settings = build_settings(
                    settings_from_env(),
                    max_retries=max_retries,
                    initial_delay=initial_delay,
                    max_delay=max_delay,
                    batch_concurrency=concurrency,
                    log_level=LogLevel.DEBUG if verbose else None,
                )
            resolved_settings.retry_policy()
        except ValueError as e:
            # pydantic.ValidationError is a ValueError
            typer.secho(f"✗ Invalid settings: {e}", fg=typer.colors.RED)
            raise typer.Exit(code=2)

        setup_logging(resolved_settings)
        ctx.obj = CLIState(resolved_settings)

    app.command("schedule")(schedule)
    app.command("simulate")(simulate)
    app.command("config")(show_config)

    return app


def main() -> None:
    """Run the CLI application."""
    app = create_cli_app()
    app()
