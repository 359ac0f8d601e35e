"""
Pydantic Schemas for API - Request/response models for OpenAPI.

These models define the exact contract between a client UI and the engine.
Face-down card values are never part of a response.

Error Codes:
- SESSION_NOT_FOUND: Session does not exist or has been ended
- UNKNOWN_CARD: Card id is not on the current board
- VALIDATION_ERROR: Request body failed validation
- INTERNAL_ERROR: Unexpected failure
"""

from enum import Enum
from typing import Optional, Any
from pydantic import BaseModel, Field

from ..config import DEFAULT_GRID_SIZE, MIN_GRID_SIZE, MAX_GRID_SIZE


# =============================================================================
# Enums
# =============================================================================

class OutcomeValue(str, Enum):
    """Game outcome values."""
    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"


class PhaseValue(str, Enum):
    """Turn phase values."""
    IDLE = "idle"
    ONE_FLIPPED = "one_flipped"
    RESOLVING = "resolving"
    WON = "won"
    LOST = "lost"


class ErrorCode(str, Enum):
    """Structured error codes."""
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    UNKNOWN_CARD = "UNKNOWN_CARD"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class CardInfo(BaseModel):
    """One card as the player sees it."""
    card_id: int
    visible: bool
    value: Optional[int] = Field(default=None, description="Only set while face up")
    solved: bool = False

    model_config = {"from_attributes": True}


# =============================================================================
# Request Models
# =============================================================================

class CreateSessionRequest(BaseModel):
    """Request to start a new game."""
    grid_size: int = Field(
        default=DEFAULT_GRID_SIZE,
        ge=MIN_GRID_SIZE,
        le=MAX_GRID_SIZE,
        description="Side length of the square board",
    )


class FlipRequest(BaseModel):
    """Request to turn one card face up."""
    card_id: int = Field(description="Board position, 0-based, row by row")


class GridSizeRequest(BaseModel):
    """
    Request to change the board size.

    Not range-checked here: sizes outside 2..10 are ignored by the game
    and reported with applied=false.
    """
    grid_size: int


# =============================================================================
# Response Models
# =============================================================================

class GameStateResponse(BaseModel):
    """Full, player-visible state of a session."""
    session_id: str
    grid_size: int
    total_cards: int
    remaining_moves: int
    outcome: OutcomeValue
    phase: PhaseValue
    is_resolving: bool
    flipped: list[int] = Field(default_factory=list)
    solved_count: int = 0
    cards: list[CardInfo] = Field(default_factory=list)
    generation: int = 0
    status_message: Optional[str] = Field(default=None, description="'You Won!' or 'Game Over!'")
    reset_label: str = "Reset"
    instructions_visible: bool = Field(default=False, description="Rules panel open; closes on the next accepted flip")


class FlipResponse(BaseModel):
    """Result of a flip request."""
    accepted: bool
    reason: Optional[str] = Field(
        default=None,
        description="Why the flip was ignored: RESOLVING, GAME_OVER, ALREADY_VISIBLE, NO_MOVES_LEFT",
    )
    matched: Optional[bool] = Field(default=None, description="Set on the second card of a pair")
    won_now: bool = Field(default=False, description="True on the one flip that wins the game")
    state: GameStateResponse


class GridSizeResponse(BaseModel):
    """Result of a grid size change."""
    applied: bool
    state: GameStateResponse


class SessionListResponse(BaseModel):
    """List of session ids."""
    sessions: list[str]
    count: int


class EndSessionResponse(BaseModel):
    """Result of ending a session."""
    success: bool
    session_id: str


class HealthResponse(BaseModel):
    """Service health."""
    status: str = "ok"
    environment: str
    active_sessions: int = 0


class RulesResponse(BaseModel):
    """The "How to Play" rules panel."""
    title: str
    rules: list[str]


class ErrorResponse(BaseModel):
    """Standard error body."""
    error: str
    error_code: ErrorCode
    details: Optional[dict[str, Any]] = None
