"""Core configuration management for shootout.

This module provides the configuration model and loading functionality
with YAML file and environment variable support.
"""

import os
from pathlib import Path
from typing import Literal, get_args

import yaml
from pydantic import BaseModel, Field, ValidationError

EnvironmentName = Literal["development", "staging", "production", "testing"]
ENVIRONMENTS = get_args(EnvironmentName)


class ConfigError(Exception):
    """Configuration-related errors."""

    pass


class RosterConfig(BaseModel):
    """Where the static roster lives."""

    path: str = "/config/config.json"


class ServerConfig(BaseModel):
    """Coordinator HTTP server configuration."""

    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "info"


class AgentConfig(BaseModel):
    """Cowboy agent configuration."""

    server_url: str = "http://server:8080"
    poll_interval_seconds: float = 1.0
    retry_backoff_seconds: float = 1.0
    request_timeout_seconds: float = 5.0
    max_registration_attempts: int | None = None


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "text"] = "json"


class MetricsConfig(BaseModel):
    """Metrics configuration."""

    enabled: bool = False
    port: int = 9100


class TracingConfig(BaseModel):
    """Tracing configuration."""

    enabled: bool = False
    otlp_endpoint: str | None = None


class Config(BaseModel):
    """Main configuration class for shootout."""

    roster: RosterConfig = Field(default_factory=RosterConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    agent: AgentConfig = Field(default_factory=AgentConfig)

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    tracing: TracingConfig = Field(default_factory=TracingConfig)

    environment: EnvironmentName = "development"
    debug: bool = False
    seed: int | None = None


def load_config_from_file(config_path: Path) -> Config:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        Loaded configuration

    Raises:
        ConfigError: If configuration is invalid or file cannot be read
    """
    try:
        with open(config_path) as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            config_data = {}

        return Config(**config_data)

    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {config_path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in configuration file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"Configuration validation failed: {e}") from e


def _env_number(name: str, cast: type) -> int | float | None:
    env_val = os.getenv(name)
    if not env_val:
        return None
    try:
        return cast(env_val)
    except ValueError as e:
        raise ConfigError(f"Invalid {name}: {env_val}") from e


def load_config_from_env() -> Config:
    """Load configuration from environment variables.

    Environment variables are mapped as follows:
    - SHOOTOUT_ENVIRONMENT: Environment name
    - SHOOTOUT_DEBUG: Enable debug mode (true/false)
    - SHOOTOUT_SEED: Seed for target selection
    - SHOOTOUT_ROSTER_PATH: Roster file location
    - SHOOTOUT_HOST / SHOOTOUT_PORT: Coordinator bind address
    - SHOOTOUT_SERVER_URL: Coordinator URL used by agents
    - SHOOTOUT_POLL_INTERVAL: Seconds between agent shots
    - SHOOTOUT_RETRY_BACKOFF: Seconds between agent retries
    - SHOOTOUT_LOG_LEVEL / SHOOTOUT_LOG_FORMAT: Logging setup
    - SHOOTOUT_METRICS_PORT: Enables the metrics server on this port
    - SHOOTOUT_OTLP_ENDPOINT: Enables tracing to this OTLP endpoint

    Returns:
        Configuration loaded from environment variables
    """
    config_data: dict = {}

    if env_val := os.getenv("SHOOTOUT_ENVIRONMENT"):
        config_data["environment"] = env_val.lower()
    if env_val := os.getenv("SHOOTOUT_DEBUG"):
        config_data["debug"] = env_val.lower() in ("true", "1", "yes", "on")
    if (seed := _env_number("SHOOTOUT_SEED", int)) is not None:
        config_data["seed"] = seed

    if env_val := os.getenv("SHOOTOUT_ROSTER_PATH"):
        config_data["roster"] = {"path": env_val}

    server_config: dict = {}
    if env_val := os.getenv("SHOOTOUT_HOST"):
        server_config["host"] = env_val
    if (port := _env_number("SHOOTOUT_PORT", int)) is not None:
        server_config["port"] = port
    if server_config:
        config_data["server"] = server_config

    agent_config: dict = {}
    if env_val := os.getenv("SHOOTOUT_SERVER_URL"):
        agent_config["server_url"] = env_val
    if (interval := _env_number("SHOOTOUT_POLL_INTERVAL", float)) is not None:
        agent_config["poll_interval_seconds"] = interval
    if (backoff := _env_number("SHOOTOUT_RETRY_BACKOFF", float)) is not None:
        agent_config["retry_backoff_seconds"] = backoff
    if agent_config:
        config_data["agent"] = agent_config

    logging_config: dict = {}
    if env_val := os.getenv("SHOOTOUT_LOG_LEVEL"):
        logging_config["level"] = env_val.upper()
    if env_val := os.getenv("SHOOTOUT_LOG_FORMAT"):
        logging_config["format"] = env_val.lower()
    if logging_config:
        config_data["logging"] = logging_config

    if (metrics_port := _env_number("SHOOTOUT_METRICS_PORT", int)) is not None:
        config_data["metrics"] = {"enabled": True, "port": metrics_port}

    if env_val := os.getenv("SHOOTOUT_OTLP_ENDPOINT"):
        config_data["tracing"] = {"enabled": True, "otlp_endpoint": env_val}

    try:
        return Config(**config_data)
    except ValidationError as e:
        raise ConfigError(f"Environment configuration validation failed: {e}") from e


def _merge(base: dict, override: dict) -> dict:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from file and environment variables.

    Configuration is loaded in the following order (later sources override earlier):
    1. Default values
    2. Configuration file (if provided)
    3. Environment variables

    Args:
        config_path: Optional path to configuration file

    Returns:
        Merged configuration
    """
    config_data = Config().model_dump()

    if config_path and config_path.exists():
        file_config = load_config_from_file(config_path)
        config_data = _merge(config_data, file_config.model_dump(exclude_unset=True))

    env_config = load_config_from_env()
    config_data = _merge(config_data, env_config.model_dump(exclude_unset=True))

    return Config(**config_data)


def validate_config(config: Config) -> None:
    """Validate configuration for consistency and correctness.

    Args:
        config: Configuration to validate

    Raises:
        ConfigError: If configuration is invalid
    """
    if not config.roster.path:
        raise ConfigError("roster.path must be set")

    for name, port in (
        ("server.port", config.server.port),
        ("metrics.port", config.metrics.port),
    ):
        if port <= 0 or port > 65535:
            raise ConfigError(f"{name} must be between 1 and 65535")

    if config.metrics.enabled and config.metrics.port == config.server.port:
        raise ConfigError("metrics.port must differ from server.port")

    if config.agent.poll_interval_seconds < 0:
        raise ConfigError("agent.poll_interval_seconds must be non-negative")

    if config.agent.retry_backoff_seconds < 0:
        raise ConfigError("agent.retry_backoff_seconds must be non-negative")

    if config.agent.request_timeout_seconds <= 0:
        raise ConfigError("agent.request_timeout_seconds must be positive")

    if (
        config.agent.max_registration_attempts is not None
        and config.agent.max_registration_attempts <= 0
    ):
        raise ConfigError("agent.max_registration_attempts must be positive")

    if config.environment == "production":
        if config.debug:
            raise ConfigError("Debug mode should not be enabled in production")

        if config.logging.level == "DEBUG":
            raise ConfigError("DEBUG logging should not be used in production")


def detect_environment() -> str:
    """Name of the deployment environment.

    ``SHOOTOUT_ENVIRONMENT`` wins when it names a known environment; otherwise
    a ``.env.<name>`` marker in the working directory decides; otherwise
    ``development``.
    """
    name = os.getenv("SHOOTOUT_ENVIRONMENT", "").lower()
    if name in ENVIRONMENTS:
        return name
    for candidate in ("production", "staging", "testing"):
        if Path(f".env.{candidate}").exists():
            return candidate
    return "development"


def find_config_file(environment: str | None = None) -> Path | None:
    """Return the first settings file present for ``environment``, if any."""
    environment = environment or detect_environment()
    for candidate in (
        Path("config") / f"{environment}.yaml",
        Path(f"shootout.{environment}.yaml"),
        Path("config") / "shootout.yaml",
        Path("shootout.yaml"),
    ):
        if candidate.exists():
            return candidate
    return None
