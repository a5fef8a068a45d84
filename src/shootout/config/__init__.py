"""Configuration management for shootout.

Settings for the coordinator server and the cowboy agents come from defaults,
an optional YAML file and ``SHOOTOUT_*`` environment variables.
"""

from .config import (
    ENVIRONMENTS,
    AgentConfig,
    Config,
    ConfigError,
    LoggingConfig,
    MetricsConfig,
    RosterConfig,
    ServerConfig,
    TracingConfig,
    detect_environment,
    find_config_file,
    load_config,
    load_config_from_env,
    load_config_from_file,
    validate_config,
)

__all__ = [
    "ENVIRONMENTS",
    "AgentConfig",
    "Config",
    "ConfigError",
    "LoggingConfig",
    "MetricsConfig",
    "RosterConfig",
    "ServerConfig",
    "TracingConfig",
    "detect_environment",
    "find_config_file",
    "load_config",
    "load_config_from_env",
    "load_config_from_file",
    "validate_config",
]
