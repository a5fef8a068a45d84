"""HTTP client for the coordinator API."""

from typing import Any

import httpx
from pydantic import ValidationError

from shootout.schemas.models import (
    RegistrationResponse,
    ShotAck,
    ShotReport,
    StartResponse,
    TargetResponse,
    WinnerResponse,
)
from shootout.utils.errors import (
    ConfigLoadError,
    NoSurvivorError,
    ParticipantDeadError,
    RegistrationClosedError,
    RoundNotActiveError,
    ShootoutError,
    StaleShotError,
    TransientTransportError,
    UnknownParticipantError,
    WrongRoundError,
)


class CoordinatorClient:
    """Async client for one coordinator.

    Transport failures and unparseable responses raise
    ``TransientTransportError``; error responses from the coordinator are
    mapped back to the matching ``ShootoutError`` subclass.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize client.

        Args:
            base_url: Coordinator URL, e.g. ``http://server:8080``
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests pass an ASGI transport)
        """
        self._client = httpx.AsyncClient(
            base_url=base_url, timeout=timeout, transport=transport
        )

    async def __aenter__(self) -> "CoordinatorClient":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def register(self) -> RegistrationResponse:
        """Obtain an identity, stamped with the round it is valid for."""
        data = await self._request("register", "GET", "/register")
        return self._parse("register", RegistrationResponse, data)

    async def start_status(self) -> StartResponse:
        data = await self._request("start", "GET", "/start")
        return self._parse("start", StartResponse, data)

    async def is_started(self) -> bool:
        return (await self.start_status()).start

    async def get_target(self, name: str) -> TargetResponse:
        """Ask for an opponent; the response has ``won`` set once the round is over."""
        data = await self._request(
            "get_target", "GET", "/cowboys", subject=name, params={"name": name}
        )
        return self._parse("get_target", TargetResponse, data)

    async def report_shot(self, report: ShotReport) -> ShotAck:
        data = await self._request(
            "report_shot",
            "POST",
            "/update",
            subject=report.name,
            json=report.model_dump(),
        )
        return self._parse("report_shot", ShotAck, data)

    async def check_winner(self) -> WinnerResponse:
        data = await self._request("check_winner", "GET", "/winner")
        return self._parse("check_winner", WinnerResponse, data)

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        subject: str | None = None,
        **kwargs: Any,
    ) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise TransientTransportError(operation, str(e)) from e

        if response.is_error:
            raise _error_from_response(operation, response, subject)

        try:
            return response.json()
        except ValueError as e:
            raise TransientTransportError(operation, f"invalid JSON: {e}") from e

    @staticmethod
    def _parse(operation: str, model: type, data: Any) -> Any:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise TransientTransportError(operation, f"unexpected payload: {e}") from e


def _error_from_response(
    operation: str, response: httpx.Response, subject: str | None = None
) -> ShootoutError:
    """Rebuild the coordinator's typed error from an error response."""
    try:
        body = response.json()
    except ValueError:
        body = {}
    detail = body.get("detail", {}) if isinstance(body, dict) else body
    if not isinstance(detail, dict):
        detail = {"message": str(detail)}

    code = detail.get("error", "")
    message = detail.get("message", response.text)
    details = detail.get("details") or {}

    if code == "REGISTRATION_CLOSED":
        return RegistrationClosedError(details.get("roster_size", 0))
    if code == "ROUND_NOT_ACTIVE":
        return RoundNotActiveError(details.get("state", "unknown"), operation)
    if code == "PARTICIPANT_DEAD":
        return ParticipantDeadError(subject or message)
    if code == "UNKNOWN_PARTICIPANT":
        return UnknownParticipantError(subject or message)
    if code == "STALE_SHOT":
        return StaleShotError(
            subject or message,
            details.get("reported_health", 0),
            details.get("current_health", 0),
        )
    if code == "WRONG_ROUND":
        return WrongRoundError(
            details.get("reported_round", 0), details.get("current_round", 0)
        )
    if code == "NO_SURVIVOR":
        return NoSurvivorError(message)
    if code == "CONFIG_LOAD_ERROR":
        return ConfigLoadError("coordinator", message)
    return TransientTransportError(
        operation, f"HTTP {response.status_code}: {message}"
    )
