"""
API Module - HTTP interface for game clients.

Exposes the engine via REST API. A client:
1. Starts a session with a board size
2. Flips cards and renders the returned state
3. Resets or resizes the board
4. Ends the session when done

All state is session-scoped and in memory.
"""

from .schemas import (
    # Requests
    CreateSessionRequest,
    FlipRequest,
    GridSizeRequest,
    # Responses
    GameStateResponse,
    FlipResponse,
    GridSizeResponse,
    SessionListResponse,
    EndSessionResponse,
    HealthResponse,
    RulesResponse,
    ErrorResponse,
    # Shared
    CardInfo,
    ErrorCode,
)
from .service import APIService
from .app import create_app

__all__ = [
    # Requests
    "CreateSessionRequest",
    "FlipRequest",
    "GridSizeRequest",
    # Responses
    "GameStateResponse",
    "FlipResponse",
    "GridSizeResponse",
    "SessionListResponse",
    "EndSessionResponse",
    "HealthResponse",
    "RulesResponse",
    "ErrorResponse",
    # Shared
    "CardInfo",
    "ErrorCode",
    # Service
    "APIService",
    "create_app",
]
