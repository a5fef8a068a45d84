# Shared utilities and helpers

from .errors import (
    ConfigLoadError,
    NoSurvivorError,
    ParticipantDeadError,
    RecoveryAction,
    RegistrationClosedError,
    RoundNotActiveError,
    ShootoutError,
    StaleShotError,
    TransientTransportError,
    UnknownParticipantError,
    WrongRoundError,
)
from .telemetry import (
    PerformanceTimer,
    get_logger,
    get_tracer,
    log_operation,
    setup_logging,
    setup_tracing,
)

__all__ = [
    "ConfigLoadError",
    "NoSurvivorError",
    "ParticipantDeadError",
    "PerformanceTimer",
    "RecoveryAction",
    "RegistrationClosedError",
    "RoundNotActiveError",
    "ShootoutError",
    "StaleShotError",
    "TransientTransportError",
    "UnknownParticipantError",
    "WrongRoundError",
    "get_logger",
    "get_tracer",
    "log_operation",
    "setup_logging",
    "setup_tracing",
]
