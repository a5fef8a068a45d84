"""Unit tests for the coordinator HTTP client."""

import json

import httpx
import pytest

from shootout.agent.client import CoordinatorClient
from shootout.schemas.models import ShotReport
from shootout.utils.errors import (
    ParticipantDeadError,
    RegistrationClosedError,
    RoundNotActiveError,
    StaleShotError,
    TransientTransportError,
    UnknownParticipantError,
    WrongRoundError,
)


def error_body(code: str, message: str = "", details: dict | None = None) -> dict:
    return {"detail": {"error": code, "message": message, "details": details}}


def make_client(handler) -> CoordinatorClient:
    return CoordinatorClient(
        "http://coordinator", transport=httpx.MockTransport(handler)
    )


class TestSuccessfulCalls:
    """Test decoding of successful responses."""

    async def test_register(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/register"
            return httpx.Response(
                200,
                json={
                    "name": "John",
                    "health": 10,
                    "damage": 1,
                    "is_alive": True,
                    "round_number": 2,
                },
            )

        async with make_client(handler) as client:
            me = await client.register()

        assert (me.name, me.health, me.damage) == ("John", 10, 1)
        assert me.round_number == 2

    async def test_is_started(self) -> None:
        async with make_client(
            lambda request: httpx.Response(200, json={"start": True})
        ) as client:
            assert await client.is_started()

    async def test_start_status_reports_round(self) -> None:
        body = {"start": False, "round_number": 3}
        async with make_client(lambda request: httpx.Response(200, json=body)) as client:
            start = await client.start_status()

        assert (start.start, start.round_number) == (False, 3)

    async def test_get_target_sends_name(self) -> None:
        seen: list[str | None] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.params.get("name"))
            return httpx.Response(
                200,
                json={
                    "name": "Bill",
                    "health": 8,
                    "damage": 2,
                    "is_alive": True,
                    "won": False,
                },
            )

        async with make_client(handler) as client:
            target = await client.get_target("John")

        assert seen == ["John"]
        assert target.name == "Bill"
        assert not target.won

    async def test_report_shot_posts_json(self) -> None:
        bodies: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.method == "POST"
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"status": "ok", "round_concluded": False})

        async with make_client(handler) as client:
            ack = await client.report_shot(ShotReport(name="Bill", health=6))

        assert bodies == [{"name": "Bill", "health": 6, "is_alive": True}]
        assert not ack.round_concluded

    async def test_check_winner_without_winner(self) -> None:
        async with make_client(
            lambda request: httpx.Response(200, json={"won": False})
        ) as client:
            result = await client.check_winner()

        assert not result.won
        assert result.name is None


class TestErrorMapping:
    """Test typed errors rebuilt from coordinator responses."""

    @pytest.mark.parametrize(
        "status_code, body, error_type",
        [
            (
                409,
                error_body("REGISTRATION_CLOSED", details={"roster_size": 3}),
                RegistrationClosedError,
            ),
            (409, error_body("PARTICIPANT_DEAD"), ParticipantDeadError),
            (404, error_body("UNKNOWN_PARTICIPANT"), UnknownParticipantError),
            (
                409,
                error_body("ROUND_NOT_ACTIVE", details={"state": "waiting"}),
                RoundNotActiveError,
            ),
        ],
    )
    async def test_error_codes(
        self, status_code: int, body: dict, error_type: type
    ) -> None:
        async with make_client(
            lambda request: httpx.Response(status_code, json=body)
        ) as client:
            with pytest.raises(error_type):
                await client.get_target("John")

    async def test_registration_closed_keeps_roster_size(self) -> None:
        body = error_body("REGISTRATION_CLOSED", details={"roster_size": 3})
        async with make_client(lambda request: httpx.Response(409, json=body)) as client:
            with pytest.raises(RegistrationClosedError) as exc_info:
                await client.register()

        assert exc_info.value.roster_size == 3

    async def test_stale_shot_keeps_health(self) -> None:
        body = error_body(
            "STALE_SHOT", details={"reported_health": 6, "current_health": 4}
        )
        async with make_client(lambda request: httpx.Response(409, json=body)) as client:
            with pytest.raises(StaleShotError) as exc_info:
                await client.report_shot(ShotReport(name="Bill", health=6))

        assert exc_info.value.name == "Bill"
        assert exc_info.value.current_health == 4

    async def test_wrong_round_keeps_round_numbers(self) -> None:
        body = error_body(
            "WRONG_ROUND", details={"reported_round": 1, "current_round": 2}
        )
        async with make_client(lambda request: httpx.Response(409, json=body)) as client:
            with pytest.raises(WrongRoundError) as exc_info:
                await client.report_shot(
                    ShotReport(name="Bill", health=6, round_number=1)
                )

        assert exc_info.value.reported_round == 1
        assert exc_info.value.current_round == 2

    async def test_unrecognized_error_is_transient(self) -> None:
        async with make_client(
            lambda request: httpx.Response(503, text="Service Unavailable")
        ) as client:
            with pytest.raises(TransientTransportError, match="HTTP 503"):
                await client.is_started()

    async def test_validation_error_list_detail(self) -> None:
        body = {"detail": [{"loc": ["body", "name"], "msg": "Field required"}]}
        async with make_client(lambda request: httpx.Response(422, json=body)) as client:
            with pytest.raises(TransientTransportError, match="HTTP 422"):
                await client.report_shot(ShotReport(name="Bill", health=6))


class TestTransportFailures:
    """Test network and payload failures."""

    async def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with make_client(handler) as client:
            with pytest.raises(TransientTransportError) as exc_info:
                await client.register()

        assert exc_info.value.operation == "register"

    async def test_invalid_json(self) -> None:
        async with make_client(
            lambda request: httpx.Response(200, text="not json")
        ) as client:
            with pytest.raises(TransientTransportError, match="invalid JSON"):
                await client.is_started()

    async def test_unexpected_payload(self) -> None:
        async with make_client(
            lambda request: httpx.Response(200, json={"begin": True})
        ) as client:
            with pytest.raises(TransientTransportError, match="unexpected payload"):
                await client.is_started()
