"""Cowboy agent: registers, waits for the round, then shoots until a winner exists."""

import asyncio
from dataclasses import dataclass

import httpx

from shootout.agent.client import CoordinatorClient
from shootout.schemas.models import (
    Participant,
    RegistrationResponse,
    ShotReport,
    TargetResponse,
    WinnerResponse,
)
from shootout.utils.errors import (
    ParticipantDeadError,
    RegistrationClosedError,
    RoundNotActiveError,
    ShootoutError,
    StaleShotError,
    TransientTransportError,
    WrongRoundError,
)
from shootout.utils.telemetry import get_logger


def shoot(
    shooter: Participant,
    target: TargetResponse | Participant,
    round_number: int | None = None,
) -> ShotReport:
    """Apply ``shooter``'s damage to ``target`` and build the report to send.

    Health bottoms out at zero, at which point the target is dead.
    """
    health = max(target.health - shooter.damage, 0)
    return ShotReport(
        name=target.name,
        health=health,
        is_alive=health > 0,
        round_number=round_number,
    )


@dataclass
class AgentOutcome:
    """How a round ended from one agent's point of view."""

    name: str
    won: bool
    winner: str | None
    shots_fired: int


class CowboyAgent:
    """One shootout participant driven against a coordinator."""

    def __init__(
        self,
        client: CoordinatorClient,
        poll_interval: float = 1.0,
        retry_backoff: float = 1.0,
        max_registration_attempts: int | None = None,
    ):
        """Initialize agent.

        Args:
            client: Coordinator client
            poll_interval: Seconds to wait between shots and status polls
            retry_backoff: Seconds to wait after a transport failure
            max_registration_attempts: Give up registering after this many
                failed attempts; retry forever when None
        """
        self.client = client
        self.poll_interval = poll_interval
        self.retry_backoff = retry_backoff
        self.max_registration_attempts = max_registration_attempts
        self.identity: Participant | None = None
        self.round_number: int | None = None
        self.shots_fired = 0
        self._logger = get_logger("shootout.agent")

    async def run(self) -> AgentOutcome:
        """Play one round to completion.

        Raises:
            RegistrationClosedError: If every identity was already taken
            UnknownParticipantError: If the coordinator no longer knows us
        """
        me = await self.register()
        ended = await self.wait_for_start()
        if ended is not None:
            return self._finish(me, ended.name)
        return await self.fight(me)

    async def register(self) -> RegistrationResponse:
        """Obtain an identity, retrying transport failures with a fixed backoff."""
        attempts = 0
        while True:
            attempts += 1
            try:
                issued = await self.client.register()
                break
            except RegistrationClosedError:
                self._logger.warning("Registration closed, no identity left")
                raise
            except TransientTransportError as e:
                if (
                    self.max_registration_attempts is not None
                    and attempts >= self.max_registration_attempts
                ):
                    raise
                self._logger.info(
                    "Registration failed, trying again", error=str(e), attempt=attempts
                )
                await asyncio.sleep(self.retry_backoff)

        self.identity = issued
        self.round_number = issued.round_number
        self._logger = get_logger(
            "shootout.agent",
            participant=issued.name,
            round_number=self.round_number,
        )
        self._logger.info("Registered, waiting for signal to shoot")
        return issued

    async def wait_for_start(self) -> WinnerResponse | None:
        """Poll until every participant has registered.

        Returns:
            None once this agent's round is active; the round's result if it
            already ended without this agent seeing it start
        """
        while True:
            try:
                start = await self.client.start_status()
                if (
                    self.round_number is not None
                    and start.round_number is not None
                    and start.round_number != self.round_number
                ):
                    self._logger.info(
                        "Round ended before it started for me",
                        current_round=start.round_number,
                    )
                    return await self.round_result()
                if start.start:
                    return None
            except TransientTransportError as e:
                self._logger.info("Start poll failed", error=str(e))
                await asyncio.sleep(self.retry_backoff)
                continue
            await asyncio.sleep(self.poll_interval)

    async def fight(self, me: Participant) -> AgentOutcome:
        """Shoot at random opponents until a winner is visible."""
        shooting = True
        while True:
            await asyncio.sleep(self.poll_interval)

            try:
                result = await self.client.check_winner()
                if result.won:
                    return self._finish(me, result.name)

                if not shooting:
                    continue

                target = await self.client.get_target(me.name)
                if target.won:
                    self._logger.info("Shootout is over")
                    return self._finish(me, target.name)

                report = shoot(me, target, self.round_number)
                await self.client.report_shot(report)
                self.shots_fired += 1
                if report.is_alive:
                    self._logger.info(
                        "Shot target", target=target.name, health=report.health
                    )
                else:
                    self._logger.info("Killed target", target=target.name)

            except ParticipantDeadError:
                self._logger.info("I'm dead, waiting for the winner")
                shooting = False
            except WrongRoundError:
                self._logger.info("My round is already over")
                return self._finish(me, (await self.round_result()).name)
            except (StaleShotError, RoundNotActiveError) as e:
                self._logger.debug("Shot not applied", error=str(e))
            except TransientTransportError as e:
                self._logger.warning("Coordinator unreachable", error=str(e))
                await asyncio.sleep(self.retry_backoff)

    async def round_result(self) -> WinnerResponse:
        """Winner of this agent's round, or ``won=False`` once no longer held."""
        while True:
            try:
                result = await self.client.check_winner()
            except TransientTransportError as e:
                self._logger.info("Winner poll failed", error=str(e))
                await asyncio.sleep(self.retry_backoff)
                continue
            if result.won and result.round_number == self.round_number:
                return result
            return WinnerResponse(won=False)

    def _finish(self, me: Participant, winner: str | None) -> AgentOutcome:
        won = winner == me.name
        if won:
            self._logger.info("I won the shootout", shots_fired=self.shots_fired)
        elif winner is None:
            self._logger.info("Round is over, winner no longer known")
        else:
            self._logger.info("Lost the shootout", winner=winner)
        return AgentOutcome(
            name=me.name, won=won, winner=winner, shots_fired=self.shots_fired
        )


async def run_agents(
    count: int,
    server_url: str,
    poll_interval: float = 1.0,
    retry_backoff: float = 1.0,
    timeout: float = 5.0,
    max_registration_attempts: int | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[AgentOutcome | ShootoutError]:
    """Run ``count`` agents concurrently against one coordinator.

    Returns:
        One outcome per agent, or the error that stopped it
    """

    async def play() -> AgentOutcome:
        async with CoordinatorClient(
            server_url, timeout=timeout, transport=transport
        ) as client:
            agent = CowboyAgent(
                client,
                poll_interval=poll_interval,
                retry_backoff=retry_backoff,
                max_registration_attempts=max_registration_attempts,
            )
            return await agent.run()

    results = await asyncio.gather(
        *(play() for _ in range(count)), return_exceptions=True
    )
    outcomes: list[AgentOutcome | ShootoutError] = []
    for result in results:
        if isinstance(result, (AgentOutcome, ShootoutError)):
            outcomes.append(result)
        else:
            raise result
    return outcomes
