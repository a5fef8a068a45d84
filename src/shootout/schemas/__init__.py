"""Data models for the shootout coordinator."""

from .models import (
    ErrorResponse,
    Participant,
    RegistrationResponse,
    RoundState,
    RoundStatusResponse,
    ShotAck,
    ShotReport,
    StartResponse,
    TargetResponse,
    Winner,
    WinnerResponse,
)

__all__ = [
    "ErrorResponse",
    "Participant",
    "RegistrationResponse",
    "RoundState",
    "RoundStatusResponse",
    "ShotAck",
    "ShotReport",
    "StartResponse",
    "TargetResponse",
    "Winner",
    "WinnerResponse",
]
