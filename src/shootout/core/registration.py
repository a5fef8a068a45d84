"""Identity assignment for connecting agents."""

from shootout.core.roster import RosterStore
from shootout.schemas.models import Participant
from shootout.utils.errors import RegistrationClosedError


class RegistrationGate:
    """Hands out each roster identity exactly once per round.

    Identities are issued in roster declaration order. The coordinator calls
    ``register`` and ``is_full`` inside one critical section so that the scan,
    the insert and the activation check cannot interleave with another caller.
    """

    def __init__(self) -> None:
        self._registered: list[str] = []
        self._issued: set[str] = set()

    def __len__(self) -> int:
        return len(self._registered)

    @property
    def registered(self) -> tuple[str, ...]:
        """Names issued this round, in issue order."""
        return tuple(self._registered)

    def register(self, roster: RosterStore) -> Participant:
        """Issue the first roster identity not yet handed out.

        Args:
            roster: Live roster to scan

        Returns:
            Copy of the assigned participant

        Raises:
            RegistrationClosedError: If every identity is already issued
        """
        for participant in roster.participants():
            if participant.name not in self._issued:
                self._issued.add(participant.name)
                self._registered.append(participant.name)
                return participant.model_copy()
        raise RegistrationClosedError(len(roster))

    def is_full(self, roster: RosterStore) -> bool:
        return len(self._registered) == len(roster)

    def reset(self) -> None:
        """Forget every issued identity."""
        self._registered.clear()
        self._issued.clear()
