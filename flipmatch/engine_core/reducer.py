"""
Reducer - Applies actions to game state.

The reducer is the single point of state mutation.
All state changes must go through apply_action().

Design principles:
- Pure function: (state, action) -> new_state
- Validates before applying
- Returns ActionResult with success/failure
- Rejected actions never touch the state
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable
import logging
import random

from ..config import is_valid_grid_size
from .action import Action, ActionType, ActionResult
from .deck import Deck, generate_deck
from .state import GameState, Outcome

logger = logging.getLogger(__name__)

# Rejection codes. Everything except UNKNOWN_CARD is an expected race
# between player input and game state.
RESOLVING = "RESOLVING"
GAME_OVER = "GAME_OVER"
ALREADY_VISIBLE = "ALREADY_VISIBLE"
NO_MOVES_LEFT = "NO_MOVES_LEFT"
UNKNOWN_CARD = "UNKNOWN_CARD"
INVALID_GRID_SIZE = "INVALID_GRID_SIZE"
STALE_REVEAL = "STALE_REVEAL"
NOT_RESOLVING = "NOT_RESOLVING"
NO_HANDLER = "NO_HANDLER"
HANDLER_ERROR = "HANDLER_ERROR"


@dataclass
class Reducer:
    """
    Reducer applies actions to game state.

    Stateless apart from the random source used to deal new decks.
    """
    rng: random.Random = field(default_factory=random.Random)
    deck_factory: Callable[[int, random.Random], Deck] = generate_deck

    def apply(self, state: GameState, action: Action) -> ActionResult:
        """
        Apply an action to the game state.

        Returns ActionResult with new state or error.
        """
        validation = self._validate_action(state, action)
        if validation:
            error_code, message = validation
            return ActionResult.failure(message, error_code=error_code)

        handler = self._get_handler(action.action_type)
        if not handler:
            return ActionResult.failure(
                f"No handler for action type: {action.action_type}",
                error_code=NO_HANDLER,
            )

        try:
            result = handler(state, action)
        except Exception as e:
            logger.exception("Handler for %s failed", action.action_type.value)
            return ActionResult.failure(str(e), error_code=HANDLER_ERROR)

        if result.success and result.new_state:
            result.new_state.action_history.append(action)
        return result

    def new_session(self, grid_size: int, generation: int = 0) -> GameState:
        """Deal a fresh deck and return the opening state."""
        return GameState.new(grid_size, self.deck_factory(grid_size, self.rng), generation)

    def _validate_action(self, state: GameState, action: Action) -> tuple[str, str] | None:
        """
        Validate that an action is legal in the current state.

        Returns (error_code, message) if invalid, None if valid.
        """
        payload = action.payload

        if action.action_type == ActionType.FLIP:
            card_id = payload.card_id
            if not state.has_card(card_id):
                return UNKNOWN_CARD, (
                    f"Card {card_id!r} is not on the board "
                    f"(valid ids are 0..{state.total_cards - 1})"
                )
            if state.is_resolving:
                return RESOLVING, "A pair is still being revealed"
            if state.is_over:
                return GAME_OVER, f"Game is over ({state.outcome.value})"
            if state.is_visible(card_id):
                return ALREADY_VISIBLE, f"Card {card_id} is already face up"
            if state.remaining_moves <= 0:
                return NO_MOVES_LEFT, "No moves remaining"

        elif action.action_type in {ActionType.CONFIGURE, ActionType.RESET}:
            grid_size = payload.grid_size
            if action.action_type == ActionType.RESET and grid_size is None:
                return None
            if not is_valid_grid_size(grid_size):
                return INVALID_GRID_SIZE, f"Grid size {grid_size!r} is out of range"

        elif action.action_type == ActionType.COMPLETE_REVEAL:
            if payload.generation != state.generation:
                return STALE_REVEAL, (
                    f"Reveal timer from generation {payload.generation} "
                    f"ignored in generation {state.generation}"
                )
            if not state.is_resolving:
                return NOT_RESOLVING, "No pair is being revealed"

        return None

    def _get_handler(self, action_type: ActionType):
        """Get the handler function for an action type."""
        handlers = {
            ActionType.FLIP: self._handle_flip,
            ActionType.RESET: self._handle_reset,
            ActionType.CONFIGURE: self._handle_reset,
            ActionType.COMPLETE_REVEAL: self._handle_complete_reveal,
        }
        return handlers.get(action_type)

    def _handle_flip(self, state: GameState, action: Action) -> ActionResult:
        """Turn one card face up, resolving the pair on the second flip."""
        card_id = action.payload.card_id
        card = state.get_card(card_id)
        remaining = state.remaining_moves - 1

        if not state.flipped:
            new_state = state._copy_with(flipped=(card_id,), remaining_moves=remaining)
            return self._finish_move(
                state,
                new_state,
                changes=[f"Flipped card {card_id} ({card.value})"],
            )

        first_id = state.flipped[0]
        first = state.get_card(first_id)
        matched = first.value == card.value
        solved = state.solved | {first_id, card_id} if matched else state.solved

        new_state = state._copy_with(
            flipped=(first_id, card_id),
            solved=solved,
            remaining_moves=remaining,
            is_resolving=True,
        )
        verdict = "match" if matched else "no match"
        return self._finish_move(
            state,
            new_state,
            changes=[
                f"Flipped card {card_id} ({card.value})",
                f"Cards {first_id} and {card_id}: {verdict}",
            ],
            matched=matched,
            reveal_pending=True,
        )

    def _finish_move(
        self,
        before: GameState,
        after: GameState,
        changes: list[str],
        **flags,
    ) -> ActionResult:
        """Settle the outcome after an accepted flip."""
        outcome = evaluate_outcome(after)
        won_now = outcome == Outcome.WON and before.outcome != Outcome.WON
        if outcome != after.outcome:
            after = after._copy_with(outcome=outcome)
            changes.append(f"Game {outcome.value}")
        return ActionResult.success_with_state(after, changes=changes, won_now=won_now, **flags)

    def _handle_reset(self, state: GameState, action: Action) -> ActionResult:
        """Deal a new deck; used for both reset and grid size changes."""
        grid_size = action.payload.grid_size or state.grid_size
        new_state = self.new_session(grid_size, generation=state.generation + 1)
        return ActionResult.success_with_state(
            new_state,
            changes=[f"New {grid_size}x{grid_size} game"],
        )

    def _handle_complete_reveal(self, state: GameState, action: Action) -> ActionResult:
        """Close the reveal window: hide unsolved cards, release the lock."""
        hidden = [card_id for card_id in state.flipped if card_id not in state.solved]
        new_state = state._copy_with(flipped=(), is_resolving=False)
        changes = [f"Hid cards {hidden}"] if hidden else ["Reveal window closed"]
        return ActionResult.success_with_state(new_state, changes=changes)


def evaluate_outcome(state: GameState) -> Outcome:
    """A full board beats an empty move budget."""
    if state.total_cards and len(state.solved) == state.total_cards:
        return Outcome.WON
    if state.remaining_moves == 0:
        return Outcome.LOST
    return Outcome.IN_PROGRESS


def apply_action(state: GameState, action: Action, rng: random.Random | None = None) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer(rng=rng) if rng is not None else Reducer()
    return reducer.apply(state, action)
