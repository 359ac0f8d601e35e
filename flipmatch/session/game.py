"""
Memory Game - The owned session object a presentation layer drives.

A MemoryGame wraps one GameState and is the only thing that swaps it:
- flip(), reset() and configure() go through the reducer
- the second flip of a pair arms a reveal timer tagged with the session
  generation; a reset cancels it and bumps the generation, so a late
  timer can never touch a newer board
- win listeners are told exactly once per session

Rejected input is never raised; callers get an ActionResult back.
"""

from __future__ import annotations
from typing import Callable
import logging
import random

from ..config import DEFAULT_GRID_SIZE, REVEAL_DELAY_SECONDS, is_valid_grid_size
from ..engine_core.action import Action, ActionResult
from ..engine_core.deck import Deck, generate_deck
from ..engine_core.reducer import Reducer, UNKNOWN_CARD
from ..engine_core.state import CardView, GameState, Outcome, TurnPhase
from .timers import ManualScheduler, RevealScheduler, TimerHandle

logger = logging.getLogger(__name__)

WinListener = Callable[["MemoryGame"], None]

INSTRUCTIONS_TITLE = "How to Play"
INSTRUCTIONS = (
    "Flip a card to reveal its number.",
    "Find matching pairs to solve them.",
    "Match all pairs to win!",
    "Change the grid size to adjust difficulty.",
)


class MemoryGame:
    """
    Single-player memory game session.

    Usage:
        game = MemoryGame(grid_size=4, scheduler=AsyncioScheduler())
        game.add_win_listener(lambda g: celebrate())

        result = game.flip(3)
        if not result.success:
            ...  # ignored: already visible, resolving, game over, ...

        game.card_view(3)  # CardView(visible=True, value=..., solved=False)

    Without a scheduler, a ManualScheduler is used and the reveal window
    only closes when that scheduler is advanced.
    """

    def __init__(
        self,
        grid_size: int = DEFAULT_GRID_SIZE,
        scheduler: RevealScheduler | None = None,
        reveal_delay: float = REVEAL_DELAY_SECONDS,
        rng: random.Random | None = None,
        deck_factory: Callable[[int, random.Random], Deck] = generate_deck,
    ):
        if not is_valid_grid_size(grid_size):
            raise ValueError(f"grid_size must be an integer in 2..10, got {grid_size!r}")

        self.scheduler = scheduler or ManualScheduler()
        self.reveal_delay = reveal_delay
        self.reducer = Reducer(rng=rng or random.Random(), deck_factory=deck_factory)

        self._win_listeners: list[WinListener] = []
        self._reveal_timer: TimerHandle | None = None
        self.instructions_visible = False
        self._state = self.reducer.new_session(grid_size)
        logger.info("New %dx%d game", grid_size, grid_size)

    # -- queries ------------------------------------------------------------

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def grid_size(self) -> int:
        return self._state.grid_size

    @property
    def total_cards(self) -> int:
        return self._state.total_cards

    @property
    def remaining_moves(self) -> int:
        return self._state.remaining_moves

    @property
    def outcome(self) -> Outcome:
        return self._state.outcome

    @property
    def phase(self) -> TurnPhase:
        return self._state.phase

    @property
    def is_resolving(self) -> bool:
        return self._state.is_resolving

    @property
    def flipped(self) -> tuple[int, ...]:
        return self._state.flipped

    @property
    def solved(self) -> frozenset[int]:
        return self._state.solved

    @property
    def generation(self) -> int:
        return self._state.generation

    def card_view(self, card_id: int) -> CardView:
        """Raises UnknownCardError for ids not on the board."""
        return self._state.card_view(card_id)

    def board(self) -> list[CardView]:
        return self._state.board()

    @property
    def status_message(self) -> str | None:
        if self.outcome == Outcome.WON:
            return "You Won!"
        if self.outcome == Outcome.LOST:
            return "Game Over!"
        return None

    @property
    def reset_label(self) -> str:
        return "Play Again" if self._state.is_over else "Reset"

    @property
    def instructions(self) -> tuple[str, ...]:
        return INSTRUCTIONS

    # -- commands -----------------------------------------------------------

    def add_win_listener(self, listener: WinListener) -> None:
        self._win_listeners.append(listener)

    def flip(self, card_id: int) -> ActionResult:
        """Reveal one card. Rejected flips leave the state untouched."""
        result = self._dispatch(Action.flip(card_id))
        if not result.success:
            if result.error_code == UNKNOWN_CARD:
                logger.warning("Flip rejected: %s", result.error)
            else:
                logger.debug("Flip of %s ignored: %s", card_id, result.error_code)
        else:
            self.instructions_visible = False
        return result

    def reset(self) -> ActionResult:
        """Start over on the current grid size."""
        return self._dispatch(Action.reset())

    def configure(self, grid_size: int) -> bool:
        """
        Change the grid size and start over.

        Out-of-range sizes are ignored and the current game carries on.
        Returns whether the change was applied.
        """
        result = self._dispatch(Action.configure(grid_size))
        if not result.success:
            logger.debug("Grid size %r ignored", grid_size)
        return result.success

    set_grid_size = configure

    def toggle_instructions(self) -> bool:
        """Show or hide the rules panel; the first accepted flip hides it."""
        self.instructions_visible = not self.instructions_visible
        return self.instructions_visible

    def close(self) -> None:
        """Cancel any armed reveal timer; the game is not used afterwards."""
        self._cancel_reveal_timer()

    # -- internals ----------------------------------------------------------

    def _dispatch(self, action: Action) -> ActionResult:
        before = self._state
        result = self.reducer.apply(before, action)
        if not result.success:
            return result

        self._state = result.new_state
        for change in result.state_changes:
            logger.debug(change)

        if self._state.generation != before.generation:
            self._cancel_reveal_timer()
            logger.info("New %dx%d game", self.grid_size, self.grid_size)

        if result.reveal_pending:
            self._arm_reveal_timer()

        if result.won_now:
            logger.info("Game won with %d moves left", self.remaining_moves)
            self._announce_win()
        elif self.outcome == Outcome.LOST and before.outcome != Outcome.LOST:
            logger.info("Game lost with %d of %d cards solved", len(self.solved), self.total_cards)

        return result

    def _arm_reveal_timer(self) -> None:
        generation = self._state.generation
        self._reveal_timer = self.scheduler.call_later(
            self.reveal_delay,
            lambda: self._complete_reveal(generation),
        )

    def _cancel_reveal_timer(self) -> None:
        if self._reveal_timer is not None:
            self._reveal_timer.cancel()
            self._reveal_timer = None

    def _complete_reveal(self, generation: int) -> None:
        if generation == self._state.generation:
            self._reveal_timer = None
        result = self._dispatch(Action.complete_reveal(generation))
        if not result.success:
            logger.debug("Reveal timer ignored: %s", result.error)

    def _announce_win(self) -> None:
        for listener in list(self._win_listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Win listener %r failed", listener)
