"""
Engine Core - Deterministic memory game state management.

The engine is the runtime that:
1. Deals a deck for the chosen grid size
2. Manages GameState
3. Applies actions via the reducer
4. Decides when the game is won or lost
"""

from .deck import Card, Deck, generate_deck, deck_from_values, total_cards, pair_count
from .state import GameState, Outcome, TurnPhase, CardView, UnknownCardError
from .action import Action, ActionType, ActionPayload, ActionResult
from .reducer import Reducer, apply_action, evaluate_outcome

__all__ = [
    "Card",
    "Deck",
    "generate_deck",
    "deck_from_values",
    "total_cards",
    "pair_count",
    "GameState",
    "Outcome",
    "TurnPhase",
    "CardView",
    "UnknownCardError",
    "Action",
    "ActionType",
    "ActionPayload",
    "ActionResult",
    "Reducer",
    "apply_action",
    "evaluate_outcome",
]
