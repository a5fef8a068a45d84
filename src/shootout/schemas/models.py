"""Pydantic models for roster records and coordinator wire payloads."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class RoundState(Enum):
    """Lifecycle of a single shootout round."""

    WAITING = "waiting"
    ACTIVE = "active"
    CONCLUDED = "concluded"


class Participant(BaseModel):
    """One combat entity in the roster."""

    name: str = Field(
        description="Unique participant identifier",
        min_length=1,
        json_schema_extra={"example": "Johnny"},
    )
    health: int = Field(
        description="Remaining health, 0 once dead",
        ge=0,
        json_schema_extra={"example": 10},
    )
    damage: int = Field(
        description="Damage dealt per shot",
        ge=0,
        json_schema_extra={"example": 1},
    )
    is_alive: bool = Field(
        default=True,
        description="True while health is above zero",
    )

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "examples": [{"name": "Johnny", "health": 10, "damage": 1, "is_alive": True}]
        },
    )

    @model_validator(mode="after")
    def check_alive_matches_health(self) -> "Participant":
        """Reject records where the alive flag contradicts the health."""
        if self.is_alive != (self.health > 0):
            raise ValueError(
                f"is_alive={self.is_alive} contradicts health={self.health} "
                f"for participant {self.name!r}"
            )
        return self


class RegistrationResponse(Participant):
    """Identity issued to a registering agent."""

    round_number: int = Field(ge=1, description="Round the identity belongs to")


class Winner(Participant):
    """The lone survivor of a concluded round."""

    won: bool = Field(default=True, description="Always true for a declared winner")
    round_number: int | None = Field(
        default=None, ge=1, description="Round this participant won"
    )


class ShotReport(BaseModel):
    """Outcome of a shot as computed by the shooting agent.

    The coordinator applies these values as-is; it does not recompute damage.
    """

    name: str = Field(description="Name of the participant that was shot", min_length=1)
    health: int = Field(description="Target health after the shot")
    is_alive: bool | None = Field(
        default=None,
        description="Target alive flag after the shot; derived from health if omitted",
    )
    round_number: int | None = Field(
        default=None,
        ge=1,
        description="Round the shooter registered for; unchecked when omitted",
    )

    model_config = ConfigDict(extra="ignore")

    @field_validator("health")
    @classmethod
    def clamp_health(cls, v: int) -> int:
        """Health bottoms out at zero."""
        return max(v, 0)

    @model_validator(mode="after")
    def derive_alive(self) -> "ShotReport":
        """Fill in or validate the alive flag against the reported health."""
        alive = self.health > 0
        if self.is_alive is None:
            self.is_alive = alive
        elif self.is_alive != alive:
            raise ValueError(
                f"is_alive={self.is_alive} contradicts health={self.health} "
                f"for participant {self.name!r}"
            )
        return self


class StartResponse(BaseModel):
    """Response for round activity polling."""

    start: bool = Field(description="True once every participant has registered")
    round_number: int | None = Field(default=None, description="Current round")


class TargetResponse(BaseModel):
    """Target handed to a requesting agent, or the winner once concluded."""

    name: str
    health: int
    damage: int
    is_alive: bool
    won: bool = False

    @classmethod
    def from_participant(cls, participant: Participant) -> "TargetResponse":
        """Build a response from a roster record or a winner."""
        return cls(
            name=participant.name,
            health=participant.health,
            damage=participant.damage,
            is_alive=participant.is_alive,
            won=isinstance(participant, Winner),
        )


class WinnerResponse(BaseModel):
    """Response for winner polling; only `won` is set while no winner is held."""

    won: bool = False
    name: str | None = None
    health: int | None = None
    damage: int | None = None
    is_alive: bool | None = None
    round_number: int | None = None

    @classmethod
    def from_winner(cls, winner: Winner | None) -> "WinnerResponse":
        if winner is None:
            return cls(won=False)
        return cls(
            won=True,
            name=winner.name,
            health=winner.health,
            damage=winner.damage,
            is_alive=winner.is_alive,
            round_number=winner.round_number,
        )


class ShotAck(BaseModel):
    """Acknowledgement of a committed shot."""

    status: str = "ok"
    round_concluded: bool = False


class RoundStatusResponse(BaseModel):
    """Snapshot of the coordinator's round state."""

    state: RoundState
    round_number: int = Field(ge=1)
    roster_size: int = Field(ge=0)
    registered: int = Field(ge=0)
    alive: int = Field(ge=0)
    winner: str | None = None


class ErrorResponse(BaseModel):
    """Error response model."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    details: dict[str, Any] | None = Field(
        default=None, description="Additional details"
    )
