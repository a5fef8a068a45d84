"""Round coordinator: the single owner of all shared shootout state."""

import asyncio
import random

from shootout.core.loader import RosterLoader
from shootout.core.registration import RegistrationGate
from shootout.core.roster import RosterStore
from shootout.core.selector import TargetSelector
from shootout.core.shots import ShotProcessor
from shootout.schemas.models import (
    Participant,
    RegistrationResponse,
    RoundState,
    RoundStatusResponse,
    ShotReport,
    Winner,
)
from shootout.utils.errors import RoundNotActiveError, WrongRoundError
from shootout.utils.telemetry import (
    PerformanceTimer,
    get_logger,
    record_registration,
    record_round_completed,
    record_shot,
    update_alive_count,
    update_round_active,
)


class Coordinator:
    """Central coordinator for a shootout.

    Owns the roster, the registration set, the round state and the winner
    slot. Every public method, including read-only queries, runs under one
    ``asyncio.Lock`` so the round flag is never observed mid-transition.

    Round lifecycle:
        WAITING -> ACTIVE when every roster identity has been issued.
        ACTIVE -> CONCLUDED when exactly one participant is left alive; the
        winner is captured and the roster is reloaded in the same step.
        CONCLUDED -> WAITING when the first agent registers for the next
        round. The previous winner stays visible until the next round
        activates.

    Shot reports are a trust boundary: the coordinator applies the outcome the
    shooting agent computed and does not recompute damage.
    """

    def __init__(self, loader: RosterLoader, rng: random.Random | None = None):
        """Initialize coordinator.

        Args:
            loader: Callable returning a fresh roster, used at startup and on
                every reset
            rng: Random source for target selection

        Raises:
            ConfigLoadError: If the initial roster cannot be loaded
        """
        self._roster = RosterStore(loader)
        self._gate = RegistrationGate()
        self._selector = TargetSelector(rng)
        self._shots = ShotProcessor()

        self._state = RoundState.WAITING
        self._winner: Winner | None = None
        self._round_number = 1
        self._lock = asyncio.Lock()

        self._logger = get_logger("shootout.coordinator")
        update_round_active(False)
        update_alive_count(self._roster.count_alive())

        self._logger.info(
            "Coordinator initialized, waiting for registrations",
            participants=self._roster.names,
        )

    async def register(self) -> RegistrationResponse:
        """Issue the next free identity and activate the round once full.

        The identity is stamped with the round it belongs to.

        Raises:
            RegistrationClosedError: If every identity is already issued
        """
        async with self._lock:
            with PerformanceTimer("register", round_number=self._round_number):
                if self._state is RoundState.CONCLUDED:
                    self._state = RoundState.WAITING

                participant = self._gate.register(self._roster)
                record_registration()
                self._logger.info(
                    "Participant registered",
                    participant=participant.name,
                    registered=list(self._gate.registered),
                    round_number=self._round_number,
                )

                issued = RegistrationResponse(
                    **participant.model_dump(), round_number=self._round_number
                )
                if self._gate.is_full(self._roster):
                    self._activate()
                return issued

    async def is_active(self) -> bool:
        async with self._lock:
            return self._state is RoundState.ACTIVE

    async def round_state(self) -> RoundState:
        async with self._lock:
            return self._state

    async def current_winner(self) -> Winner | None:
        """Return the winner of the last concluded round, if still held.

        ``None`` both before any round concluded and while a round is active;
        use ``is_active`` to tell the two apart.
        """
        async with self._lock:
            if self._winner is None:
                return None
            return self._winner.model_copy()

    async def select_target(self, requester: str) -> Participant:
        """Pick a living opponent for ``requester``.

        Outside an active round the held winner is returned instead. If the
        requester turns out to be the lone survivor it is returned as a
        ``Winner`` and the round concludes.

        Raises:
            RoundNotActiveError: If no round is active and no winner is held
            UnknownParticipantError: If the requester is not in the roster
            ParticipantDeadError: If the requester is dead
            NoSurvivorError: If nobody is alive
            ConfigLoadError: If concluding requires a reload that fails
        """
        async with self._lock:
            if self._state is not RoundState.ACTIVE:
                if self._winner is not None:
                    return self._winner.model_copy()
                raise RoundNotActiveError(self._state.value, "select a target")

            with PerformanceTimer(
                "select_target",
                participant=requester,
                round_number=self._round_number,
            ):
                target = self._selector.select(requester, self._roster)
                if isinstance(target, Winner):
                    self._logger.info(
                        "All participants except one are dead",
                        participant=requester,
                    )
                    return self._conclude(target, await self._load_fresh())
                return target

    async def commit_shot(self, report: ShotReport) -> Winner | None:
        """Apply a reported shot outcome.

        The update, the survivor count, the winner capture and the roster
        reload happen in one critical section, so concurrent shots can never
        declare two winners. Nothing is mutated if any check fails.

        Returns:
            The winner if this shot ended the round, otherwise ``None``

        Raises:
            WrongRoundError: If the report carries another round's number
            RoundNotActiveError: If no round is active
            UnknownParticipantError: If the report names nobody in the roster
            StaleShotError: If the report would raise the target's health
            NoSurvivorError: If the shot would leave nobody alive
            ConfigLoadError: If the post-round reload fails
        """
        async with self._lock:
            if (
                report.round_number is not None
                and report.round_number != self._round_number
            ):
                raise WrongRoundError(report.round_number, self._round_number)
            if self._state is not RoundState.ACTIVE:
                raise RoundNotActiveError(self._state.value, "commit a shot")

            with PerformanceTimer(
                "commit_shot",
                participant=report.name,
                round_number=self._round_number,
            ):
                plan = self._shots.plan(report, self._roster)
                fresh = await self._load_fresh() if plan.concludes_round else None

                winner = self._shots.apply(plan, self._roster)
                update_alive_count(plan.alive_after)
                if winner is not None:
                    record_shot("winning_kill")
                elif plan.killed:
                    record_shot("kill")
                else:
                    record_shot("hit")

                self._logger.info(
                    "Shot committed",
                    participant=report.name,
                    health=report.health,
                    is_alive=report.is_alive,
                    alive=plan.alive_after,
                )

                if winner is not None and fresh is not None:
                    return self._conclude(winner, fresh)
                return winner

    async def reload(self) -> None:
        """Abandon the current round and start over from the static roster.

        Raises:
            ConfigLoadError: If the roster cannot be reloaded; state is unchanged
        """
        async with self._lock:
            fresh = await self._load_fresh()
            if self._state is RoundState.ACTIVE:
                self._round_number += 1
            self._roster.install(fresh)
            self._gate.reset()
            self._state = RoundState.WAITING
            self._winner = None
            update_round_active(False)
            update_alive_count(self._roster.count_alive())
            self._logger.info("Roster reloaded", round_number=self._round_number)

    async def status(self) -> RoundStatusResponse:
        async with self._lock:
            return RoundStatusResponse(
                state=self._state,
                round_number=self._round_number,
                roster_size=len(self._roster),
                registered=len(self._gate),
                alive=self._roster.count_alive(),
                winner=self._winner.name if self._winner else None,
            )

    async def roster(self) -> list[Participant]:
        """Copies of every participant in the live roster."""
        async with self._lock:
            return self._roster.snapshot()

    async def _load_fresh(self) -> list[Participant]:
        return await asyncio.to_thread(self._roster.load)

    def _activate(self) -> None:
        self._state = RoundState.ACTIVE
        self._winner = None
        update_round_active(True)
        self._logger.info(
            "All participants registered, round started",
            round_number=self._round_number,
        )

    def _conclude(self, winner: Winner, fresh: list[Participant]) -> Winner:
        """Record the winner, then reset for the next round.

        The winner is captured before the live roster is replaced.
        """
        winner = winner.model_copy(update={"round_number": self._round_number})
        self._state = RoundState.CONCLUDED
        self._winner = winner
        record_round_completed()
        self._logger.info(
            "Winner declared",
            winner=winner.name,
            health=winner.health,
            round_number=self._round_number,
        )

        self._roster.install(fresh)
        self._gate.reset()
        self._round_number += 1
        update_round_active(False)
        update_alive_count(self._roster.count_alive())
        self._logger.info(
            "Roster reloaded, waiting for registrations",
            round_number=self._round_number,
        )
        return winner.model_copy()
