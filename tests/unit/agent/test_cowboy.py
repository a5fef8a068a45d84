"""Unit tests for the cowboy agent loop."""

from typing import Any

import pytest

from shootout.agent.cowboy import CowboyAgent, shoot
from shootout.schemas.models import (
    Participant,
    RegistrationResponse,
    ShotAck,
    ShotReport,
    StartResponse,
    TargetResponse,
    WinnerResponse,
)
from shootout.utils.errors import (
    ParticipantDeadError,
    RegistrationClosedError,
    StaleShotError,
    TransientTransportError,
    WrongRoundError,
)

JOHN = Participant(name="John", health=10, damage=3)
ISSUED = RegistrationResponse(name="John", health=10, damage=3, round_number=1)


def target(name: str, health: int, won: bool = False) -> TargetResponse:
    return TargetResponse(
        name=name, health=health, damage=1, is_alive=health > 0, won=won
    )


class ScriptedClient:
    """Stand-in for CoordinatorClient that replays queued results.

    Each queue entry is either a value to return or an exception to raise.
    """

    def __init__(self, **scripts: list[Any]):
        self.scripts = scripts
        self.reports: list[ShotReport] = []

    def _next(self, method: str) -> Any:
        queue = self.scripts[method]
        result = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(result, Exception):
            raise result
        return result

    async def register(self) -> RegistrationResponse:
        return self._next("register")

    async def start_status(self) -> StartResponse:
        return self._next("start_status")

    async def get_target(self, name: str) -> TargetResponse:
        return self._next("get_target")

    async def report_shot(self, report: ShotReport) -> ShotAck:
        self.reports.append(report)
        return self._next("report_shot")

    async def check_winner(self) -> WinnerResponse:
        return self._next("check_winner")


class TestShoot:
    """Test the damage calculation."""

    def test_hit(self) -> None:
        report = shoot(JOHN, target("Bill", 8))
        assert (report.name, report.health, report.is_alive) == ("Bill", 5, True)

    def test_exact_kill(self) -> None:
        report = shoot(JOHN, target("Bill", 3))
        assert (report.health, report.is_alive) == (0, False)

    def test_overkill_clamps_to_zero(self) -> None:
        report = shoot(JOHN, target("Bill", 1))
        assert (report.health, report.is_alive) == (0, False)


class TestRegistration:
    """Test agent registration retries."""

    async def test_retries_transport_errors(self) -> None:
        client = ScriptedClient(
            register=[TransientTransportError("register", "refused"), ISSUED]
        )
        agent = CowboyAgent(client, retry_backoff=0)

        assert (await agent.register()).name == "John"
        assert agent.identity == ISSUED
        assert agent.round_number == 1

    async def test_gives_up_after_max_attempts(self) -> None:
        client = ScriptedClient(
            register=[TransientTransportError("register", "refused")]
        )
        agent = CowboyAgent(client, retry_backoff=0, max_registration_attempts=3)

        with pytest.raises(TransientTransportError):
            await agent.register()

    async def test_registration_closed_is_final(self) -> None:
        client = ScriptedClient(register=[RegistrationClosedError(3)])
        agent = CowboyAgent(client, retry_backoff=0)

        with pytest.raises(RegistrationClosedError):
            await agent.register()

    async def test_wait_for_start_polls(self) -> None:
        started = StartResponse(start=True, round_number=1)
        client = ScriptedClient(
            start_status=[
                StartResponse(start=False, round_number=1),
                TransientTransportError("start", "timeout"),
                StartResponse(start=False, round_number=1),
                started,
            ]
        )
        agent = CowboyAgent(client, poll_interval=0, retry_backoff=0)
        agent.round_number = 1

        assert await agent.wait_for_start() is None
        assert client.scripts["start_status"] == [started]

    async def test_previous_winner_does_not_end_wait(self) -> None:
        client = ScriptedClient(
            start_status=[
                StartResponse(start=False, round_number=2),
                StartResponse(start=True, round_number=2),
            ],
            check_winner=[WinnerResponse(won=True, name="Bill", round_number=1)],
        )
        agent = CowboyAgent(client, poll_interval=0)
        agent.round_number = 2

        assert await agent.wait_for_start() is None

    async def test_round_concluded_while_waiting(self) -> None:
        client = ScriptedClient(
            register=[ISSUED],
            start_status=[StartResponse(start=False, round_number=2)],
            check_winner=[WinnerResponse(won=True, name="Bill", round_number=1)],
        )
        agent = CowboyAgent(client, poll_interval=0)

        outcome = await agent.run()

        assert not outcome.won
        assert outcome.winner == "Bill"
        assert outcome.shots_fired == 0
        assert client.reports == []

    async def test_next_round_already_active_while_waiting(self) -> None:
        client = ScriptedClient(
            register=[ISSUED],
            start_status=[StartResponse(start=True, round_number=2)],
            check_winner=[WinnerResponse(won=False)],
        )
        agent = CowboyAgent(client, poll_interval=0)

        outcome = await agent.run()

        assert outcome.winner is None
        assert client.reports == []


class TestFight:
    """Test the shooting loop."""

    async def test_shoots_until_winner(self) -> None:
        client = ScriptedClient(
            check_winner=[
                WinnerResponse(won=False),
                WinnerResponse(won=False),
                WinnerResponse(won=True, name="John"),
            ],
            get_target=[target("Bill", 6), target("Bill", 3)],
            report_shot=[ShotAck()],
        )
        agent = CowboyAgent(client, poll_interval=0)

        outcome = await agent.fight(JOHN)

        assert outcome.won
        assert outcome.winner == "John"
        assert outcome.shots_fired == 2
        assert [r.health for r in client.reports] == [3, 0]

    async def test_target_with_won_flag_ends_loop(self) -> None:
        client = ScriptedClient(
            check_winner=[WinnerResponse(won=False)],
            get_target=[target("Sam", 4, won=True)],
            report_shot=[ShotAck()],
        )
        agent = CowboyAgent(client, poll_interval=0)

        outcome = await agent.fight(JOHN)

        assert not outcome.won
        assert outcome.winner == "Sam"
        assert client.reports == []

    async def test_dead_agent_stops_shooting(self) -> None:
        client = ScriptedClient(
            check_winner=[
                WinnerResponse(won=False),
                WinnerResponse(won=False),
                WinnerResponse(won=True, name="Bill"),
            ],
            get_target=[ParticipantDeadError("John"), target("Bill", 5)],
            report_shot=[ShotAck()],
        )
        agent = CowboyAgent(client, poll_interval=0)

        outcome = await agent.fight(JOHN)

        assert outcome.winner == "Bill"
        assert outcome.shots_fired == 0
        assert client.reports == []

    async def test_rejected_and_failed_shots_are_not_counted(self) -> None:
        client = ScriptedClient(
            check_winner=[
                WinnerResponse(won=False),
                WinnerResponse(won=False),
                WinnerResponse(won=False),
                WinnerResponse(won=True, name="John"),
            ],
            get_target=[target("Bill", 6)],
            report_shot=[
                StaleShotError("Bill", 3, 1),
                TransientTransportError("report_shot", "reset"),
                ShotAck(round_concluded=True),
            ],
        )
        agent = CowboyAgent(client, poll_interval=0, retry_backoff=0)

        outcome = await agent.fight(JOHN)

        assert outcome.won
        assert outcome.shots_fired == 1
        assert len(client.reports) == 3

    async def test_report_for_finished_round_ends_fight(self) -> None:
        client = ScriptedClient(
            check_winner=[
                WinnerResponse(won=False),
                WinnerResponse(won=True, name="Sam", round_number=1),
            ],
            get_target=[target("Bill", 6)],
            report_shot=[WrongRoundError(1, 2)],
        )
        agent = CowboyAgent(client, poll_interval=0)
        agent.round_number = 1

        outcome = await agent.fight(JOHN)

        assert outcome.winner == "Sam"
        assert outcome.shots_fired == 0
        assert client.reports[0].round_number == 1

    async def test_run_plays_full_round(self) -> None:
        client = ScriptedClient(
            register=[ISSUED],
            start_status=[StartResponse(start=True, round_number=1)],
            check_winner=[
                WinnerResponse(won=False),
                WinnerResponse(won=True, name="John"),
            ],
            get_target=[target("Bill", 2)],
            report_shot=[ShotAck(round_concluded=True)],
        )
        agent = CowboyAgent(client, poll_interval=0)

        outcome = await agent.run()

        assert outcome.name == "John"
        assert outcome.won
        assert outcome.shots_fired == 1
        assert client.reports[0].round_number == 1
