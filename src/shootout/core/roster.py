"""Authoritative roster of participants and their combat state."""

from shootout.core.loader import RosterLoader
from shootout.schemas.models import Participant
from shootout.utils.errors import UnknownParticipantError


class RosterStore:
    """Owns the live roster for the current round.

    The store does no locking of its own: the coordinator serializes every
    call under its round lock. Nothing here awaits, so each method runs to
    completion before any other request handler can observe the roster.
    Readers only ever receive copies.
    """

    def __init__(self, loader: RosterLoader):
        """Initialize the store and load the first roster.

        Args:
            loader: Callable returning a fresh roster; called at startup and
                on every reload

        Raises:
            ConfigLoadError: If the initial roster cannot be loaded
        """
        self._loader = loader
        self._participants: list[Participant] = []
        self.install(self.load())

    def __len__(self) -> int:
        return len(self._participants)

    @property
    def names(self) -> list[str]:
        """Participant names in declaration order."""
        return [p.name for p in self._participants]

    def load(self) -> list[Participant]:
        """Read a fresh roster without installing it."""
        return self._loader()

    def install(self, roster: list[Participant]) -> None:
        """Replace the live roster."""
        self._participants = [p.model_copy() for p in roster]

    def reload(self) -> None:
        """Re-read the static roster and replace the live one."""
        self.install(self.load())

    def get(self, name: str) -> Participant:
        """Return a copy of the named participant.

        Raises:
            UnknownParticipantError: If no participant has that name
        """
        return self._find(name).model_copy()

    def snapshot(self) -> list[Participant]:
        """Return copies of every participant in declaration order."""
        return [p.model_copy() for p in self._participants]

    def list_alive(self, excluding: str | None = None) -> list[Participant]:
        """Return copies of alive participants, optionally skipping one name."""
        return [
            p.model_copy()
            for p in self._participants
            if p.is_alive and p.name != excluding
        ]

    def count_alive(self) -> int:
        return sum(1 for p in self._participants if p.is_alive)

    def index_of(self, name: str) -> int:
        """Position of the named participant in declaration order.

        Raises:
            UnknownParticipantError: If no participant has that name
        """
        for i, participant in enumerate(self._participants):
            if participant.name == name:
                return i
        raise UnknownParticipantError(name)

    def participants(self) -> list[Participant]:
        """Live records, for coordinator components that mutate them."""
        return self._participants

    def apply_shot_result(self, name: str, health: int, is_alive: bool) -> None:
        """Overwrite the named participant's health and alive flag together.

        Raises:
            UnknownParticipantError: If no participant has that name
            ValueError: If ``is_alive`` contradicts ``health``
        """
        if is_alive != (health > 0):
            raise ValueError(
                f"is_alive={is_alive} contradicts health={health} for {name!r}"
            )
        participant = self._find(name)
        participant.health = health
        participant.is_alive = is_alive

    def _find(self, name: str) -> Participant:
        return self._participants[self.index_of(name)]
