"""FastAPI-based Web adapter exposing the coordinator to cowboy agents.

Routes:
- GET  /register   issue the next free identity
- GET  /start      poll whether the round is active
- GET  /cowboys    get a target (or the winner once the round is over)
- POST /update     commit a shot outcome
- GET  /winner     poll for the winner
- GET  /status     round state snapshot
- POST /reset      reload the roster and start over
- GET  /health     liveness
"""

import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware

from shootout.core.coordinator import Coordinator
from shootout.schemas.models import (
    ErrorResponse,
    RegistrationResponse,
    RoundState,
    RoundStatusResponse,
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
    UnknownParticipantError,
    WrongRoundError,
)
from shootout.utils.telemetry import get_logger, instrument_app

# error class -> (HTTP status, error code)
ERROR_CODES: dict[type[ShootoutError], tuple[int, str]] = {
    RegistrationClosedError: (status.HTTP_409_CONFLICT, "REGISTRATION_CLOSED"),
    RoundNotActiveError: (status.HTTP_409_CONFLICT, "ROUND_NOT_ACTIVE"),
    ParticipantDeadError: (status.HTTP_409_CONFLICT, "PARTICIPANT_DEAD"),
    StaleShotError: (status.HTTP_409_CONFLICT, "STALE_SHOT"),
    WrongRoundError: (status.HTTP_409_CONFLICT, "WRONG_ROUND"),
    UnknownParticipantError: (status.HTTP_404_NOT_FOUND, "UNKNOWN_PARTICIPANT"),
    NoSurvivorError: (status.HTTP_500_INTERNAL_SERVER_ERROR, "NO_SURVIVOR"),
    ConfigLoadError: (status.HTTP_500_INTERNAL_SERVER_ERROR, "CONFIG_LOAD_ERROR"),
}

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    code: {"model": ErrorResponse} for code in (400, 404, 409, 500)
}


def _error_details(error: ShootoutError) -> dict[str, Any] | None:
    if isinstance(error, StaleShotError):
        return {
            "reported_health": error.reported_health,
            "current_health": error.current_health,
        }
    if isinstance(error, WrongRoundError):
        return {
            "reported_round": error.reported_round,
            "current_round": error.current_round,
        }
    if isinstance(error, RegistrationClosedError):
        return {"roster_size": error.roster_size}
    if isinstance(error, RoundNotActiveError):
        return {"state": error.state}
    return None


def to_http_exception(error: ShootoutError) -> HTTPException:
    """Translate a coordinator error into an HTTP error response."""
    status_code, code = ERROR_CODES.get(
        type(error), (status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR")
    )
    return HTTPException(
        status_code=status_code,
        detail=ErrorResponse(
            error=code,
            message=str(error),
            details=_error_details(error),
        ).model_dump(),
    )


class WebAdapter:
    """FastAPI application wrapping a ``Coordinator``."""

    def __init__(
        self,
        coordinator: Coordinator,
        allowed_origins: list[str] | None = None,
        enable_tracing: bool = False,
    ):
        """Initialize Web adapter.

        Args:
            coordinator: Coordinator instance owning the round state
            allowed_origins: CORS origins; defaults to all
            enable_tracing: Attach OpenTelemetry FastAPI instrumentation
        """
        self.coordinator = coordinator
        self.logger = get_logger("shootout.web_adapter")

        @asynccontextmanager
        async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
            self.logger.info("Web adapter started")
            yield
            self.logger.info("Web adapter stopped")

        self.app = FastAPI(
            title="Shootout Coordinator API",
            description="Registration, targeting and shot reporting for cowboy agents",
            version="1.0.0",
            lifespan=lifespan,
        )

        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=allowed_origins or ["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        if enable_tracing:
            instrument_app(self.app)

        self._setup_routes()

    def _setup_routes(self) -> None:
        """Set up API routes."""

        @self.app.get("/health")
        async def health_check() -> dict[str, Any]:
            """Health check endpoint."""
            return {"status": "healthy", "timestamp": time.time()}

        @self.app.get(
            "/register",
            response_model=RegistrationResponse,
            responses=ERROR_RESPONSES,
        )
        async def register() -> RegistrationResponse:
            """Assign the next free identity to the calling agent."""
            try:
                return await self.coordinator.register()
            except ShootoutError as e:
                self.logger.info("Registration rejected", error=str(e))
                raise to_http_exception(e) from e

        @self.app.get("/start", response_model=StartResponse)
        async def start() -> StartResponse:
            """Report whether every agent has registered, and for which round."""
            snapshot = await self.coordinator.status()
            return StartResponse(
                start=snapshot.state is RoundState.ACTIVE,
                round_number=snapshot.round_number,
            )

        @self.app.get(
            "/cowboys", response_model=TargetResponse, responses=ERROR_RESPONSES
        )
        async def get_target(name: str | None = None) -> TargetResponse:
            """Return a random living opponent for ``name``."""
            if not name:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=ErrorResponse(
                        error="BAD_REQUEST",
                        message="'name' query parameter is required",
                    ).model_dump(),
                )
            try:
                target = await self.coordinator.select_target(name)
            except ShootoutError as e:
                self.logger.info(
                    "Target selection rejected", participant=name, error=str(e)
                )
                raise to_http_exception(e) from e
            return TargetResponse.from_participant(target)

        @self.app.post("/update", response_model=ShotAck, responses=ERROR_RESPONSES)
        async def update(report: ShotReport) -> ShotAck:
            """Commit the outcome of a shot computed by the shooting agent."""
            self.logger.info(
                "Shot received, updating participant", participant=report.name
            )
            try:
                winner = await self.coordinator.commit_shot(report)
            except ShootoutError as e:
                self.logger.warning(
                    "Shot rejected", participant=report.name, error=str(e)
                )
                raise to_http_exception(e) from e
            return ShotAck(round_concluded=winner is not None)

        @self.app.get(
            "/winner", response_model=WinnerResponse, response_model_exclude_none=True
        )
        async def winner() -> WinnerResponse:
            """Return the winner once declared, ``{"won": false}`` until then."""
            return WinnerResponse.from_winner(await self.coordinator.current_winner())

        @self.app.get("/status", response_model=RoundStatusResponse)
        async def round_status() -> RoundStatusResponse:
            return await self.coordinator.status()

        @self.app.post(
            "/reset", response_model=RoundStatusResponse, responses=ERROR_RESPONSES
        )
        async def reset() -> RoundStatusResponse:
            """Reload the roster and reopen registration."""
            try:
                await self.coordinator.reload()
            except ShootoutError as e:
                self.logger.error("Roster reload failed", error=str(e))
                raise to_http_exception(e) from e
            return await self.coordinator.status()


def create_web_adapter(
    coordinator: Coordinator,
    allowed_origins: list[str] | None = None,
    enable_tracing: bool = False,
) -> WebAdapter:
    """Create a Web adapter instance.

    Args:
        coordinator: Coordinator instance
        allowed_origins: CORS origins
        enable_tracing: Attach OpenTelemetry FastAPI instrumentation

    Returns:
        WebAdapter instance
    """
    return WebAdapter(
        coordinator=coordinator,
        allowed_origins=allowed_origins,
        enable_tracing=enable_tracing,
    )
