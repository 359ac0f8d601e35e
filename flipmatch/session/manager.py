"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. Client starts a session -> new MemoryGame (in-memory only)
2. Client flips, resets and resizes through the session
3. Client ends the session, or it goes stale and is cleaned up

PERSISTENCE RULES:
- No database; sessions live as long as the process
- Nothing survives an end_session() call
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable
import logging
import time
import uuid

from ..config import DEFAULT_GRID_SIZE, REVEAL_DELAY_SECONDS
from .game import MemoryGame
from .timers import ManualScheduler, RevealScheduler

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """
    One player's game, addressed by id.

    `wins` counts how many times the win notification fired over the
    session's lifetime (at most once per board).
    """
    session_id: str
    game: MemoryGame
    created_at: float
    last_active_at: float
    wins: int = 0

    def touch(self) -> None:
        self.last_active_at = time.time()

    def is_active(self) -> bool:
        """A session with a finished board is idle until it is reset."""
        return not self.game.state.is_over


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions with their own scheduler
    - Track active sessions
    - Clean up stale sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(
        self,
        scheduler_factory: Callable[[], RevealScheduler] = ManualScheduler,
        reveal_delay: float = REVEAL_DELAY_SECONDS,
    ):
        self._sessions: dict[str, Session] = {}
        self._scheduler_factory = scheduler_factory
        self._reveal_delay = reveal_delay

    def create_session(self, grid_size: int = DEFAULT_GRID_SIZE) -> Session:
        """
        Create a new game session.

        Raises ValueError for a grid size outside 2..10.
        """
        game = MemoryGame(
            grid_size=grid_size,
            scheduler=self._scheduler_factory(),
            reveal_delay=self._reveal_delay,
        )
        now = time.time()
        session = Session(
            session_id=str(uuid.uuid4()),
            game=game,
            created_at=now,
            last_active_at=now,
        )

        def _count_win(_game: MemoryGame) -> None:
            session.wins += 1

        game.add_win_listener(_count_win)
        self._sessions[session.session_id] = session
        logger.info("Session %s created (%dx%d)", session.session_id, grid_size, grid_size)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and forget it.

        Returns False if there was no such session.
        """
        session = self._sessions.pop(session_id, None)
        if not session:
            return False
        session.game.close()
        logger.info("Session %s ended (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions whose game is still in progress."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def list_sessions(self) -> list[str]:
        return list(self._sessions)

    def cleanup_stale_sessions(self, max_age_seconds: int) -> int:
        """
        End sessions untouched for longer than max_age_seconds.

        Returns how many were removed.
        """
        current_time = time.time()
        stale = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.last_active_at > max_age_seconds
        ]
        for session_id in stale:
            self.end_session(session_id, reason="stale")
        return len(stale)
