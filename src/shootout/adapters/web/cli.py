"""CLI for running the coordinator server.

This module provides a command-line interface for starting the FastAPI-based
coordinator with configurable options.
"""

import random
from pathlib import Path

import click
import uvicorn

from shootout.adapters.web.server import create_web_adapter
from shootout.config import ConfigError, load_config, validate_config
from shootout.core.coordinator import Coordinator
from shootout.core.loader import file_loader
from shootout.utils.errors import ConfigLoadError
from shootout.utils.telemetry import (
    get_logger,
    setup_logging,
    setup_tracing,
    start_metrics_server,
)


@click.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to configuration file (YAML)",
)
@click.option("--roster", "-r", help="Path to the roster file (JSON or YAML)")
@click.option("--host", help="Host to bind to")
@click.option("--port", type=int, help="Port to bind to")
@click.option("--log-level", help="Log level")
@click.option("--seed", type=int, help="Seed for target selection")
def run_server(
    config: str | None,
    roster: str | None,
    host: str | None,
    port: int | None,
    log_level: str | None,
    seed: int | None,
) -> None:
    """Run the coordinator server."""
    try:
        settings = load_config(Path(config) if config else None)
        if roster:
            settings.roster.path = roster
        if host:
            settings.server.host = host
        if port:
            settings.server.port = port
        if log_level:
            settings.server.log_level = log_level.lower()
            settings.logging.level = log_level.upper()  # type: ignore[assignment]
        if seed is not None:
            settings.seed = seed
        validate_config(settings)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    setup_logging(settings.logging.level, settings.logging.format)
    logger = get_logger("shootout.web_cli")

    if settings.tracing.enabled:
        setup_tracing("shootout-coordinator", settings.tracing.otlp_endpoint)
    if settings.metrics.enabled:
        start_metrics_server(settings.metrics.port)

    try:
        coordinator = Coordinator(
            file_loader(settings.roster.path),
            rng=random.Random(settings.seed) if settings.seed is not None else None,
        )
    except ConfigLoadError as e:
        logger.error("Cannot start without a roster", error=str(e))
        raise click.ClickException(str(e)) from e

    logger.info(
        "Starting coordinator",
        host=settings.server.host,
        port=settings.server.port,
        roster=settings.roster.path,
    )

    web_adapter = create_web_adapter(
        coordinator, enable_tracing=settings.tracing.enabled
    )

    uvicorn.run(
        web_adapter.app,
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.server.log_level,
    )


@click.group()
def cli() -> None:
    """Coordinator server CLI."""
    pass


cli.add_command(run_server, name="server")


if __name__ == "__main__":
    cli()
