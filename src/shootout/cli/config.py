"""``shootout config``: inspect, validate and create settings files."""

import json
import os
from pathlib import Path

import click
import yaml

from shootout.config import (
    Config,
    ConfigError,
    detect_environment,
    find_config_file,
    load_config,
    validate_config,
)

ENV_VARS = [
    "SHOOTOUT_ENVIRONMENT",
    "SHOOTOUT_DEBUG",
    "SHOOTOUT_SEED",
    "SHOOTOUT_ROSTER_PATH",
    "SHOOTOUT_HOST",
    "SHOOTOUT_PORT",
    "SHOOTOUT_SERVER_URL",
    "SHOOTOUT_POLL_INTERVAL",
    "SHOOTOUT_RETRY_BACKOFF",
    "SHOOTOUT_LOG_LEVEL",
    "SHOOTOUT_LOG_FORMAT",
    "SHOOTOUT_METRICS_PORT",
    "SHOOTOUT_OTLP_ENDPOINT",
]


def _render(config: Config, fmt: str) -> str:
    data = config.model_dump(mode="json")
    if fmt == "json":
        return json.dumps(data, indent=2)
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=True)


@click.group(name="config")
def config_cli() -> None:
    """Configuration management."""


@config_cli.command()
@click.argument(
    "path", required=False, type=click.Path(dir_okay=False, path_type=Path)
)
def validate(path: Path | None) -> None:
    """Validate PATH, or the environment variables when PATH is omitted."""
    if path is not None and not path.exists():
        raise click.ClickException(f"Configuration file not found: {path}")

    try:
        validate_config(load_config(path))
    except ConfigError as e:
        raise click.ClickException(f"Configuration validation failed: {e}") from e

    source = path or "environment variables"
    click.echo(f"✓ Configuration from {source} is valid")


@config_cli.command()
@click.argument(
    "path",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--format",
    "-f",
    "fmt",
    type=click.Choice(["yaml", "json"]),
    default="yaml",
    show_default=True,
)
def show(path: Path | None, fmt: str) -> None:
    """Print the effective configuration."""
    try:
        config = load_config(path or find_config_file())
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    click.echo(_render(config, fmt))


@config_cli.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("shootout.yaml"),
    show_default=True,
)
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def init(output: Path, force: bool) -> None:
    """Write a configuration file holding every default."""
    if output.exists() and not force:
        raise click.ClickException(
            f"Configuration file already exists: {output} (use --force to overwrite)"
        )
    try:
        output.write_text(_render(Config(), "yaml"))
    except OSError as e:
        raise click.ClickException(f"Cannot write {output}: {e}") from e
    click.echo(f"✓ Configuration file created: {output}")


@config_cli.command()
@click.option("--all", "-a", "show_all", is_flag=True, help="Include unset variables")
def env(show_all: bool) -> None:
    """List the SHOOTOUT_* environment variables."""
    click.echo(f"Environment: {detect_environment()}")
    click.echo(f"Config file: {find_config_file() or 'none found'}")
    click.echo()
    for var in ENV_VARS:
        value = os.getenv(var)
        if value or show_all:
            click.echo(f"  {var}={value or '(not set)'}")
