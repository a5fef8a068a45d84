"""Opponent selection."""

import random

from shootout.core.roster import RosterStore
from shootout.schemas.models import Participant, Winner
from shootout.utils.errors import NoSurvivorError, ParticipantDeadError


class TargetSelector:
    """Picks a living opponent for a requesting participant."""

    def __init__(self, rng: random.Random | None = None):
        """Initialize selector.

        Args:
            rng: Random source; pass a seeded instance for reproducible picks
        """
        self._rng = rng or random.Random()

    def select(self, requester: str, roster: RosterStore) -> Participant:
        """Choose a target uniformly among the other living participants.

        When nobody else is alive the requester is the lone survivor and is
        returned as a ``Winner``; the caller is responsible for concluding the
        round.

        Args:
            requester: Name of the asking participant
            roster: Live roster

        Returns:
            Copy of the chosen target, or the survivor as a ``Winner``

        Raises:
            UnknownParticipantError: If the requester is not in the roster
            ParticipantDeadError: If the requester is already dead
            NoSurvivorError: If nobody at all is alive
        """
        if not roster.get(requester).is_alive:
            raise ParticipantDeadError(requester)

        candidates = roster.list_alive(excluding=requester)
        if candidates:
            return self._rng.choice(candidates)

        survivors = roster.list_alive()
        if len(survivors) == 1:
            return Winner(**survivors[0].model_dump())
        raise NoSurvivorError(
            f"No target for {requester!r}: {len(survivors)} participants alive"
        )
