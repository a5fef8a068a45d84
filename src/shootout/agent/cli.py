"""CLI for running cowboy agents against a coordinator."""

import asyncio
from pathlib import Path

import click

from shootout.agent.cowboy import AgentOutcome, run_agents
from shootout.config import ConfigError, load_config, validate_config
from shootout.utils.telemetry import get_logger, setup_logging


@click.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to configuration file (YAML)",
)
@click.option("--server-url", help="Coordinator URL")
@click.option("--count", "-n", default=1, show_default=True, help="Agents to run")
@click.option("--poll-interval", type=float, help="Seconds between shots")
@click.option("--retry-backoff", type=float, help="Seconds between retries")
def run_agent(
    config: str | None,
    server_url: str | None,
    count: int,
    poll_interval: float | None,
    retry_backoff: float | None,
) -> None:
    """Run one or more cowboy agents until the round has a winner."""
    try:
        settings = load_config(Path(config) if config else None)
        if server_url:
            settings.agent.server_url = server_url
        if poll_interval is not None:
            settings.agent.poll_interval_seconds = poll_interval
        if retry_backoff is not None:
            settings.agent.retry_backoff_seconds = retry_backoff
        validate_config(settings)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    setup_logging(settings.logging.level, settings.logging.format)
    logger = get_logger("shootout.agent_cli")
    logger.info("Starting agents", count=count, server_url=settings.agent.server_url)

    outcomes = asyncio.run(
        run_agents(
            count,
            settings.agent.server_url,
            poll_interval=settings.agent.poll_interval_seconds,
            retry_backoff=settings.agent.retry_backoff_seconds,
            timeout=settings.agent.request_timeout_seconds,
            max_registration_attempts=settings.agent.max_registration_attempts,
        )
    )

    failed = False
    for outcome in outcomes:
        if isinstance(outcome, AgentOutcome):
            verdict = "won" if outcome.won else f"lost to {outcome.winner}"
            click.echo(f"{outcome.name}: {verdict} ({outcome.shots_fired} shots)")
        else:
            failed = True
            click.echo(f"agent stopped: {outcome}", err=True)
    if failed:
        raise SystemExit(1)
