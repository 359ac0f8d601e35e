"""
Session Module - Owns the live game and its reveal timers.

A session represents one player's board:
- Created when a client starts a game
- Holds the current game state behind a MemoryGame
- Reset or resized in place; a new board bumps the generation
- Forgotten when the client ends it

Sessions are EPHEMERAL: nothing is written to disk.
"""

from .game import MemoryGame
from .manager import SessionManager, Session
from .timers import RevealScheduler, TimerHandle, AsyncioScheduler, ManualScheduler

__all__ = [
    "MemoryGame",
    "SessionManager",
    "Session",
    "RevealScheduler",
    "TimerHandle",
    "AsyncioScheduler",
    "ManualScheduler",
]
