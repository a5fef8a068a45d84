"""Structured error types for the shootout coordinator.

Every error carries a suggested recovery action so that callers (the web
adapter and the agent loop) can decide whether to retry, back off or stop
without inspecting error messages.
"""

from enum import Enum


class RecoveryAction(Enum):
    """Recovery actions for error handling."""

    RETRY = "retry"
    RETRY_WITH_DELAY = "retry_with_delay"
    STOP = "stop"
    ABORT = "abort"


class ShootoutError(Exception):
    """Base exception for coordinator and agent errors."""

    def __init__(
        self, message: str, recovery_action: RecoveryAction = RecoveryAction.ABORT
    ):
        """Initialize shootout error.

        Args:
            message: Error message
            recovery_action: Suggested recovery action
        """
        super().__init__(message)
        self.recovery_action = recovery_action


class ConfigLoadError(ShootoutError):
    """Error raised when the roster configuration cannot be loaded.

    This is fatal at startup: the coordinator cannot run without a roster.
    """

    def __init__(self, source: str, reason: str):
        """Initialize config load error.

        Args:
            source: Path or description of the roster source
            reason: Why loading failed
        """
        self.source = source
        self.reason = reason

        super().__init__(
            f"Failed to load roster from {source}: {reason}", RecoveryAction.ABORT
        )


class UnknownParticipantError(ShootoutError):
    """Error raised when a name matches no roster entry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown participant: {name!r}", RecoveryAction.STOP)


class RegistrationClosedError(ShootoutError):
    """Error raised when every roster identity has already been issued.

    Callers must stop registering and only poll the round status.
    """

    def __init__(self, roster_size: int):
        self.roster_size = roster_size
        super().__init__(
            f"Registration closed: all {roster_size} identities issued",
            RecoveryAction.STOP,
        )


class RoundNotActiveError(ShootoutError):
    """Error raised when a round operation arrives outside an active round."""

    def __init__(self, state: str, operation: str):
        self.state = state
        self.operation = operation
        super().__init__(
            f"Cannot {operation}: round is {state}", RecoveryAction.RETRY_WITH_DELAY
        )


class ParticipantDeadError(ShootoutError):
    """Error raised when a dead participant asks for a target."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Participant {name!r} is dead and cannot shoot", RecoveryAction.STOP
        )


class StaleShotError(ShootoutError):
    """Error raised when a shot report would raise a participant's health.

    Health never increases within a round, so such a report was computed
    against an outdated copy of the participant.
    """

    def __init__(self, name: str, reported_health: int, current_health: int):
        self.name = name
        self.reported_health = reported_health
        self.current_health = current_health

        super().__init__(
            f"Stale shot report for {name!r}: reported health {reported_health} "
            f"exceeds current health {current_health}",
            RecoveryAction.RETRY,
        )


class WrongRoundError(ShootoutError):
    """Error raised when a shot report was computed for another round.

    The reporter's round has already concluded or been reset; its identity
    means nothing in the current round.
    """

    def __init__(self, reported_round: int, current_round: int):
        self.reported_round = reported_round
        self.current_round = current_round

        super().__init__(
            f"Shot report for round {reported_round} arrived during round "
            f"{current_round}",
            RecoveryAction.STOP,
        )


class NoSurvivorError(ShootoutError):
    """Error raised when the roster would have nobody left alive."""

    def __init__(self, message: str = "No participant is alive"):
        super().__init__(message, RecoveryAction.ABORT)


class TransientTransportError(ShootoutError):
    """Error raised by the agent when the coordinator cannot be reached."""

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(
            f"Transport failure during {operation}: {reason}",
            RecoveryAction.RETRY_WITH_DELAY,
        )
