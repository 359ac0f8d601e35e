"""
Game State - Snapshot of one memory game session.

Design principles:
- Immutable-friendly: the reducer never mutates, it returns a new state
- One object per session: deck, flips, solved cards, move budget, outcome
- Generation-tagged: every reset bumps the generation so late reveal
  timers from an older session can be recognised and ignored
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
from enum import Enum

from ..config import DEFAULT_GRID_SIZE, MOVES_PER_CARD
from .deck import Card, Deck


class UnknownCardError(LookupError):
    """A card id that does not exist on the current board."""


class Outcome(Enum):
    """How the session stands."""
    IN_PROGRESS = "in_progress"
    WON = "won"
    LOST = "lost"


class TurnPhase(Enum):
    """Where the session is in the flip/resolve cycle."""
    IDLE = "idle"
    ONE_FLIPPED = "one_flipped"
    RESOLVING = "resolving"
    WON = "won"
    LOST = "lost"


@dataclass(frozen=True)
class CardView:
    """What a presentation layer may know about one card."""
    card_id: int
    visible: bool
    value: int | None  # None while face down
    solved: bool


@dataclass
class GameState:
    """
    Complete session state at a point in time.

    All changes go through the reducer. `flipped` keeps flip order because
    the second flip is compared against the first; visibility only cares
    about membership.
    """
    grid_size: int = DEFAULT_GRID_SIZE
    deck: Deck = ()

    flipped: tuple[int, ...] = ()
    solved: frozenset[int] = frozenset()
    remaining_moves: int = 0
    is_resolving: bool = False
    outcome: Outcome = Outcome.IN_PROGRESS

    # Bumped on every reset
    generation: int = 0

    # Accepted actions since the last reset
    action_history: list[Any] = field(default_factory=list)

    @classmethod
    def new(cls, grid_size: int, deck: Deck, generation: int = 0) -> GameState:
        """Fresh session: nothing flipped, full move budget."""
        return cls(
            grid_size=grid_size,
            deck=deck,
            remaining_moves=MOVES_PER_CARD * len(deck),
            generation=generation,
        )

    @property
    def total_cards(self) -> int:
        return len(self.deck)

    @property
    def is_over(self) -> bool:
        return self.outcome != Outcome.IN_PROGRESS

    @property
    def phase(self) -> TurnPhase:
        if self.outcome == Outcome.WON:
            return TurnPhase.WON
        if self.outcome == Outcome.LOST:
            return TurnPhase.LOST
        if self.is_resolving:
            return TurnPhase.RESOLVING
        if self.flipped:
            return TurnPhase.ONE_FLIPPED
        return TurnPhase.IDLE

    def has_card(self, card_id: Any) -> bool:
        if isinstance(card_id, bool) or not isinstance(card_id, int):
            return False
        return 0 <= card_id < len(self.deck)

    def get_card(self, card_id: int) -> Card:
        return self.deck[card_id]

    def is_visible(self, card_id: int) -> bool:
        return card_id in self.flipped or card_id in self.solved

    def card_view(self, card_id: int) -> CardView:
        if not self.has_card(card_id):
            raise UnknownCardError(
                f"Card {card_id!r} is not on the board (valid ids are 0..{len(self.deck) - 1})"
            )
        visible = self.is_visible(card_id)
        return CardView(
            card_id=card_id,
            visible=visible,
            value=self.deck[card_id].value if visible else None,
            solved=card_id in self.solved,
        )

    def board(self) -> list[CardView]:
        return [self.card_view(card.card_id) for card in self.deck]

    def _copy_with(self, **kwargs) -> GameState:
        """Create a copy with some fields replaced."""
        return GameState(
            grid_size=kwargs.get("grid_size", self.grid_size),
            deck=kwargs.get("deck", self.deck),
            flipped=kwargs.get("flipped", self.flipped),
            solved=kwargs.get("solved", self.solved),
            remaining_moves=kwargs.get("remaining_moves", self.remaining_moves),
            is_resolving=kwargs.get("is_resolving", self.is_resolving),
            outcome=kwargs.get("outcome", self.outcome),
            generation=kwargs.get("generation", self.generation),
            action_history=kwargs.get("action_history", list(self.action_history)),
        )
