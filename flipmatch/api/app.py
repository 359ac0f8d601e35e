"""
FastAPI Application - REST API for game clients.

Endpoints:
    GET    /api/v1/health                      Service health
    GET    /api/v1/rules                       How to Play panel
    POST   /api/v1/sessions                    Start a game
    GET    /api/v1/sessions                    List sessions
    GET    /api/v1/sessions/{id}/state         Get game state
    POST   /api/v1/sessions/{id}/flip          Flip a card
    POST   /api/v1/sessions/{id}/reset         Start over, same size
    PUT    /api/v1/sessions/{id}/grid-size     Start over, new size
    POST   /api/v1/sessions/{id}/instructions  Show or hide the rules panel
    DELETE /api/v1/sessions/{id}               End session

Reveal Window:
    The second flip of a pair leaves both cards up and the session in the
    "resolving" phase for FLIPMATCH_REVEAL_DELAY seconds. Flips sent during
    that window come back with accepted=false, reason=RESOLVING. Clients
    poll /state (or just retry) to see the cards hidden again.

All responses are JSON with explicit Pydantic schemas. Errors, including
invalid request bodies, use ErrorResponse.

Logging follows FLIPMATCH_LOG_LEVEL when served with uvicorn.
"""

from typing import Union
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..config import ALLOWED_ORIGINS, FLIPMATCH_ENV, LOG_LEVEL, REVEAL_DELAY_SECONDS
from ..session import AsyncioScheduler, SessionManager
from ..session.game import INSTRUCTIONS, INSTRUCTIONS_TITLE
from .service import APIService
from .schemas import (
    CreateSessionRequest,
    FlipRequest,
    GridSizeRequest,
    GameStateResponse,
    FlipResponse,
    GridSizeResponse,
    SessionListResponse,
    EndSessionResponse,
    HealthResponse,
    RulesResponse,
    ErrorResponse,
    ErrorCode,
)

logger = logging.getLogger(__name__)

_ERROR_STATUS = {
    ErrorCode.SESSION_NOT_FOUND: 404,
    ErrorCode.UNKNOWN_CARD: 404,
    ErrorCode.VALIDATION_ERROR: 422,
    ErrorCode.INTERNAL_ERROR: 500,
}


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Send flipmatch logs to stderr at the given level."""
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("flipmatch").setLevel(level.upper())


def create_app(service: APIService | None = None) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        service: Optional APIService instance. The default one arms reveal
            timers on the server's event loop.

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="Flipmatch API",
        description="""
Single-player memory game engine.

## Rules

- The board is `grid_size x grid_size` face-down cards; every value is dealt twice.
- Each flip costs one move; a game starts with `2 x total_cards` moves.
- Two flips make a pair. Matching pairs stay face up, others hide again after the reveal window.
- Solve every card to win. Run out of moves first and the game is lost.

## Error Codes

| Code | Description |
|------|-------------|
| `SESSION_NOT_FOUND` | Session does not exist |
| `UNKNOWN_CARD` | Card id is not on the current board |
| `VALIDATION_ERROR` | Request body is invalid |
| `INTERNAL_ERROR` | Unexpected failure |
        """,
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    api_service = service or APIService(
        session_manager=SessionManager(
            scheduler_factory=AsyncioScheduler,
            reveal_delay=REVEAL_DELAY_SECONDS,
        )
    )

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Render an ErrorResponse with its HTTP status."""
        return JSONResponse(
            status_code=_ERROR_STATUS.get(error.error_code, 400),
            content=error.model_dump(mode="json"),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return make_error_response(ErrorResponse(
            error="Request validation failed",
            error_code=ErrorCode.VALIDATION_ERROR,
            details={"errors": jsonable_encoder(exc.errors())},
        ))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return make_error_response(ErrorResponse(
            error=str(exc) or exc.__class__.__name__,
            error_code=ErrorCode.INTERNAL_ERROR,
        ))

    # =========================================================================
    # Health
    # =========================================================================

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["Health"],
        summary="Service health check",
    )
    async def health() -> HealthResponse:
        return HealthResponse(
            status="ok",
            environment=FLIPMATCH_ENV,
            active_sessions=len(api_service.session_manager.list_active_sessions()),
        )

    @app.get(
        "/api/v1/rules",
        response_model=RulesResponse,
        tags=["Game"],
        summary="How to Play",
    )
    async def rules() -> RulesResponse:
        return RulesResponse(title=INSTRUCTIONS_TITLE, rules=list(INSTRUCTIONS))

    # =========================================================================
    # Session Endpoints
    # =========================================================================

    @app.post(
        "/api/v1/sessions",
        response_model=GameStateResponse,
        responses={422: {"model": ErrorResponse, "description": "grid_size outside 2..10"}},
        tags=["Sessions"],
        summary="Start a new game",
    )
    async def create_session(request: CreateSessionRequest) -> GameStateResponse:
        """Deal a fresh board and return its opening state."""
        return api_service.create_session(request)

    @app.get(
        "/api/v1/sessions",
        response_model=SessionListResponse,
        tags=["Sessions"],
        summary="List sessions",
    )
    async def list_sessions() -> SessionListResponse:
        sessions = api_service.list_sessions()
        return SessionListResponse(sessions=sessions, count=len(sessions))

    @app.delete(
        "/api/v1/sessions/{session_id}",
        response_model=EndSessionResponse,
        tags=["Sessions"],
        summary="End a session",
    )
    async def end_session(session_id: str) -> EndSessionResponse:
        return api_service.end_session(session_id)

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/sessions/{session_id}/state",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Get the current board",
    )
    async def get_state(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        response = api_service.get_game_state(session_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/flip",
        response_model=FlipResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Flip a card",
    )
    async def flip(session_id: str, request: FlipRequest) -> Union[FlipResponse, JSONResponse]:
        """
        Flip one card face up.

        A flip that the rules ignore (card already up, pair resolving, game
        over, no moves left) returns 200 with `accepted=false`.
        """
        response = api_service.flip(session_id, request)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        if response.won_now:
            logger.info("Session %s won", session_id)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/reset",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Start over on the same board size",
    )
    async def reset(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        response = api_service.reset(session_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.put(
        "/api/v1/sessions/{session_id}/grid-size",
        response_model=GridSizeResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Change the board size and start over",
    )
    async def set_grid_size(
        session_id: str,
        request: GridSizeRequest,
    ) -> Union[GridSizeResponse, JSONResponse]:
        """Sizes outside 2..10 leave the game as it is (`applied=false`)."""
        response = api_service.set_grid_size(session_id, request)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    @app.post(
        "/api/v1/sessions/{session_id}/instructions",
        response_model=GameStateResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Game"],
        summary="Show or hide the rules panel",
    )
    async def toggle_instructions(session_id: str) -> Union[GameStateResponse, JSONResponse]:
        """The panel also closes on the next accepted flip."""
        response = api_service.toggle_instructions(session_id)
        if isinstance(response, ErrorResponse):
            return make_error_response(response)
        return response

    return app


# For running directly: uvicorn flipmatch.api.app:app
configure_logging()
app = create_app()
