"""
API Service - Business logic layer between API and engine.

The service:
1. Translates API requests to game calls
2. Manages sessions
3. Formats responses for clients

This layer is framework-agnostic; the FastAPI app is a thin shell over it.
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from ..config import SESSION_MAX_AGE_SECONDS
from ..engine_core.reducer import UNKNOWN_CARD
from ..session import Session, SessionManager
from .schemas import (
    CardInfo,
    CreateSessionRequest,
    EndSessionResponse,
    ErrorCode,
    ErrorResponse,
    FlipRequest,
    FlipResponse,
    GameStateResponse,
    GridSizeRequest,
    GridSizeResponse,
    OutcomeValue,
    PhaseValue,
)

logger = logging.getLogger(__name__)


@dataclass
class APIService:
    """
    Main API service.

    Usage:
        service = APIService()
        state = service.create_session(CreateSessionRequest(grid_size=4))
        response = service.flip(state.session_id, FlipRequest(card_id=0))
    """
    session_manager: SessionManager = field(default_factory=SessionManager)
    session_max_age: int = SESSION_MAX_AGE_SECONDS

    def create_session(self, request: CreateSessionRequest) -> GameStateResponse:
        """Start a new game, dropping sessions nobody has touched in a while."""
        removed = self.session_manager.cleanup_stale_sessions(self.session_max_age)
        if removed:
            logger.info("Cleaned up %d stale session(s)", removed)
        session = self.session_manager.create_session(grid_size=request.grid_size)
        return self._build_game_state(session)

    def get_game_state(self, session_id: str) -> GameStateResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)
        return self._build_game_state(session)

    def flip(self, session_id: str, request: FlipRequest) -> FlipResponse | ErrorResponse:
        """
        Flip one card.

        Ignored flips are not errors: they come back with accepted=false and
        a reason. Only an id that is not on the board is an error.
        """
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)

        session.touch()
        result = session.game.flip(request.card_id)
        if not result.success and result.error_code == UNKNOWN_CARD:
            return ErrorResponse(
                error=result.error,
                error_code=ErrorCode.UNKNOWN_CARD,
                details={"card_id": request.card_id, "total_cards": session.game.total_cards},
            )

        return FlipResponse(
            accepted=result.success,
            reason=None if result.success else result.error_code,
            matched=result.matched,
            won_now=result.won_now,
            state=self._build_game_state(session),
        )

    def reset(self, session_id: str) -> GameStateResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)
        session.touch()
        session.game.reset()
        return self._build_game_state(session)

    def set_grid_size(
        self,
        session_id: str,
        request: GridSizeRequest,
    ) -> GridSizeResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)
        session.touch()
        applied = session.game.configure(request.grid_size)
        return GridSizeResponse(applied=applied, state=self._build_game_state(session))

    def toggle_instructions(self, session_id: str) -> GameStateResponse | ErrorResponse:
        session = self.session_manager.get_session(session_id)
        if not session:
            return _session_not_found(session_id)
        session.touch()
        session.game.toggle_instructions()
        return self._build_game_state(session)

    def end_session(self, session_id: str) -> EndSessionResponse:
        success = self.session_manager.end_session(session_id, reason="client")
        return EndSessionResponse(success=success, session_id=session_id)

    def list_sessions(self) -> list[str]:
        return self.session_manager.list_sessions()

    def _build_game_state(self, session: Session) -> GameStateResponse:
        game = session.game
        return GameStateResponse(
            session_id=session.session_id,
            grid_size=game.grid_size,
            total_cards=game.total_cards,
            remaining_moves=game.remaining_moves,
            outcome=OutcomeValue(game.outcome.value),
            phase=PhaseValue(game.phase.value),
            is_resolving=game.is_resolving,
            flipped=list(game.flipped),
            solved_count=len(game.solved),
            cards=[CardInfo.model_validate(view) for view in game.board()],
            generation=game.generation,
            status_message=game.status_message,
            reset_label=game.reset_label,
            instructions_visible=game.instructions_visible,
        )


def _session_not_found(session_id: str) -> ErrorResponse:
    return ErrorResponse(
        error="Session not found",
        error_code=ErrorCode.SESSION_NOT_FOUND,
        details={"session_id": session_id},
    )
