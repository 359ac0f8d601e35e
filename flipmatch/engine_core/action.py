"""
Action System - Actions, payloads, and results.

Actions represent:
1. Player actions (flip a card)
2. Session actions (reset, change grid size)
3. Timer actions (close the reveal window)

All state changes flow through actions.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ActionType(Enum):
    """Types of actions in the system."""
    FLIP = "flip"
    RESET = "reset"
    CONFIGURE = "configure"
    COMPLETE_REVEAL = "complete_reveal"


@dataclass
class ActionPayload:
    """
    Payload for an action - contains the action parameters.

    Validation happens in the reducer.
    """
    card_id: Any = None
    grid_size: Any = None

    # Session generation a reveal timer was armed in
    generation: int | None = None


@dataclass
class Action:
    """
    A complete action to be applied to the game state.

    Actions are logged in the state's history and applied atomically by
    the reducer.
    """
    action_type: ActionType
    payload: ActionPayload = field(default_factory=ActionPayload)

    @classmethod
    def flip(cls, card_id: int) -> Action:
        """Factory for flip action."""
        return cls(action_type=ActionType.FLIP, payload=ActionPayload(card_id=card_id))

    @classmethod
    def reset(cls, grid_size: int | None = None) -> Action:
        """Factory for reset; None keeps the current grid size."""
        return cls(action_type=ActionType.RESET, payload=ActionPayload(grid_size=grid_size))

    @classmethod
    def configure(cls, grid_size: int) -> Action:
        """Factory for a grid size change."""
        return cls(action_type=ActionType.CONFIGURE, payload=ActionPayload(grid_size=grid_size))

    @classmethod
    def complete_reveal(cls, generation: int) -> Action:
        """Factory for the reveal timer firing."""
        return cls(
            action_type=ActionType.COMPLETE_REVEAL,
            payload=ActionPayload(generation=generation),
        )


@dataclass
class ActionResult:
    """
    Result of applying an action.

    Contains:
    - Whether action was accepted
    - New state (if accepted)
    - Error code and message (if rejected)
    - What happened, for logs and UI
    """
    success: bool
    new_state: Any | None = None  # GameState
    error: str | None = None
    error_code: str | None = None

    state_changes: list[str] = field(default_factory=list)

    # Set on the second flip of a pair
    matched: bool | None = None
    # The reveal window must be closed by a timer
    reveal_pending: bool = False
    # This action moved the outcome to WON
    won_now: bool = False

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ActionResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: Any,
        changes: list[str] | None = None,
        **flags: Any,
    ) -> ActionResult:
        """Create a success result with new state."""
        return cls(success=True, new_state=state, state_changes=changes or [], **flags)
