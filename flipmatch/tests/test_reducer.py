"""
Tests for the reducer (state transitions).

Tests:
- Flip sequencing and move accounting
- Match resolution
- Terminal outcomes
- Rejections leave state untouched
"""

import random

import pytest

from ..engine_core.action import Action, ActionType
from ..engine_core.deck import deck_from_values
from ..engine_core.reducer import (
    Reducer,
    apply_action,
    evaluate_outcome,
    RESOLVING,
    GAME_OVER,
    ALREADY_VISIBLE,
    NO_MOVES_LEFT,
    UNKNOWN_CARD,
    INVALID_GRID_SIZE,
    STALE_REVEAL,
    NOT_RESOLVING,
)
from ..engine_core.state import GameState, Outcome, TurnPhase


def play(state, *actions):
    """Apply actions in order, asserting each is accepted."""
    reducer = Reducer()
    for action in actions:
        result = reducer.apply(state, action)
        assert result.success, result.error
        state = result.new_state
    return state


def close_window(state):
    return play(state, Action.complete_reveal(state.generation))


class TestFlip:
    """Tests for the flip action."""

    def test_new_state_has_full_budget(self, opening_state):
        assert opening_state.remaining_moves == 8
        assert opening_state.phase == TurnPhase.IDLE

    def test_first_flip(self, opening_state):
        result = apply_action(opening_state, Action.flip(0))

        assert result.success
        assert result.new_state.flipped == (0,)
        assert result.new_state.remaining_moves == 7
        assert result.new_state.phase == TurnPhase.ONE_FLIPPED
        assert not result.reveal_pending
        assert result.matched is None

    def test_matching_pair_is_solved_immediately(self, opening_state):
        state = play(opening_state, Action.flip(0))
        result = apply_action(state, Action.flip(1))

        assert result.matched is True
        assert result.reveal_pending
        assert result.new_state.solved == {0, 1}
        assert result.new_state.flipped == (0, 1)
        assert result.new_state.is_resolving
        assert result.new_state.phase == TurnPhase.RESOLVING
        assert result.new_state.remaining_moves == 6

    def test_mismatch_leaves_solved_alone(self, opening_state):
        state = play(opening_state, Action.flip(0))
        result = apply_action(state, Action.flip(2))

        assert result.matched is False
        assert result.new_state.solved == frozenset()
        assert result.new_state.flipped == (0, 2)

    def test_flip_order_is_kept(self, opening_state):
        state = play(opening_state, Action.flip(3), Action.flip(0))
        assert state.flipped == (3, 0)

    def test_input_state_is_not_mutated(self, opening_state):
        apply_action(opening_state, Action.flip(0))
        assert opening_state.flipped == ()
        assert opening_state.remaining_moves == 8


class TestRejections:
    """Rejected flips never change the state."""

    def test_flip_while_resolving(self, opening_state):
        state = play(opening_state, Action.flip(0), Action.flip(2))
        result = apply_action(state, Action.flip(1))

        assert not result.success
        assert result.error_code == RESOLVING
        assert result.new_state is None

    def test_flip_same_card_twice(self, opening_state):
        state = play(opening_state, Action.flip(0))
        result = apply_action(state, Action.flip(0))

        assert result.error_code == ALREADY_VISIBLE

    def test_flip_solved_card(self, opening_state):
        state = close_window(play(opening_state, Action.flip(0), Action.flip(1)))
        result = apply_action(state, Action.flip(1))

        assert result.error_code == ALREADY_VISIBLE

    def test_flip_after_game_over(self, opening_state):
        state = play(opening_state, Action.flip(0), Action.flip(1))
        state = close_window(state)
        state = play(state, Action.flip(2), Action.flip(3))
        state = close_window(state)

        result = apply_action(state, Action.flip(0))
        assert result.error_code == GAME_OVER

    def test_flip_with_no_moves(self, opening_state):
        state = opening_state._copy_with(remaining_moves=0)
        result = apply_action(state, Action.flip(0))

        assert result.error_code == NO_MOVES_LEFT

    @pytest.mark.parametrize("card_id", [4, 99, -1, "1", None, True, 1.0])
    def test_unknown_card(self, opening_state, card_id):
        result = apply_action(opening_state, Action.flip(card_id))

        assert not result.success
        assert result.error_code == UNKNOWN_CARD
        assert "not on the board" in result.error

    def test_rejections_record_nothing(self, opening_state):
        apply_action(opening_state, Action.flip(42))
        assert opening_state.action_history == []


class TestRevealWindow:
    """Tests for closing the reveal window."""

    def test_mismatch_hides_both(self, opening_state):
        state = play(opening_state, Action.flip(0), Action.flip(2))
        state = close_window(state)

        assert state.flipped == ()
        assert not state.is_resolving
        assert state.solved == frozenset()
        assert state.phase == TurnPhase.IDLE

    def test_match_stays_solved(self, opening_state):
        state = close_window(play(opening_state, Action.flip(0), Action.flip(1)))

        assert state.flipped == ()
        assert state.solved == {0, 1}
        assert state.card_view(0).visible

    def test_stale_generation_is_ignored(self, opening_state):
        state = play(opening_state, Action.flip(0), Action.flip(2))
        result = apply_action(state, Action.complete_reveal(state.generation - 1))

        assert result.error_code == STALE_REVEAL
        assert state.is_resolving

    def test_nothing_to_close(self, opening_state):
        result = apply_action(opening_state, Action.complete_reveal(opening_state.generation))
        assert result.error_code == NOT_RESOLVING


class TestOutcome:
    """Win and loss detection."""

    def test_win_on_last_pair(self, opening_state):
        state = close_window(play(opening_state, Action.flip(0), Action.flip(1)))
        state = play(state, Action.flip(2))
        result = apply_action(state, Action.flip(3))

        assert result.won_now
        assert result.new_state.outcome == Outcome.WON
        assert result.new_state.phase == TurnPhase.WON
        assert result.new_state.remaining_moves == 4

    def test_loss_when_moves_run_out(self):
        state = GameState.new(2, deck_from_values([1, 2, 1, 2]))
        for _ in range(3):
            state = close_window(play(state, Action.flip(0), Action.flip(1)))
        result = apply_action(play(state, Action.flip(0)), Action.flip(1))

        assert result.new_state.remaining_moves == 0
        assert result.new_state.outcome == Outcome.LOST
        assert not result.won_now

    def test_win_beats_loss_on_the_last_move(self):
        state = GameState.new(2, deck_from_values([1, 2, 1, 2]))
        state = close_window(play(state, Action.flip(0), Action.flip(1)))
        state = close_window(play(state, Action.flip(0), Action.flip(1)))
        state = close_window(play(state, Action.flip(0), Action.flip(2)))
        result = apply_action(play(state, Action.flip(1)), Action.flip(3))

        assert result.new_state.remaining_moves == 0
        assert result.new_state.outcome == Outcome.WON
        assert result.won_now

    def test_odd_board_cannot_be_won(self):
        state = GameState.new(3, deck_from_values([1, 1, 2, 2, 3, 3, 4, 4, 5]))
        state = state._copy_with(solved=frozenset(range(8)))
        assert evaluate_outcome(state) == Outcome.IN_PROGRESS

    def test_window_closes_after_win(self, opening_state):
        state = close_window(play(opening_state, Action.flip(0), Action.flip(1)))
        state = close_window(play(state, Action.flip(2), Action.flip(3)))

        assert state.outcome == Outcome.WON
        assert state.flipped == ()
        assert all(view.visible for view in state.board())


class TestReset:
    """Tests for reset and configure."""

    def test_reset_restores_opening_state(self, opening_state):
        state = play(opening_state, Action.flip(0), Action.flip(2))
        state = play(state, Action.reset())

        assert state.remaining_moves == 8
        assert state.flipped == ()
        assert state.solved == frozenset()
        assert not state.is_resolving
        assert state.outcome == Outcome.IN_PROGRESS
        assert state.generation == opening_state.generation + 1
        assert [a.action_type for a in state.action_history] == [ActionType.RESET]

    def test_reset_after_loss(self):
        state = GameState.new(2, deck_from_values([1, 2, 1, 2]))._copy_with(
            remaining_moves=0, outcome=Outcome.LOST,
        )
        state = play(state, Action.reset())
        assert state.outcome == Outcome.IN_PROGRESS
        assert state.remaining_moves == 8

    def test_configure_changes_size(self, opening_state):
        state = play(opening_state, Action.configure(6))

        assert state.grid_size == 6
        assert state.total_cards == 36
        assert state.remaining_moves == 72

    @pytest.mark.parametrize("grid_size", [1, 11, 0, -3, "4", 4.0, None, True])
    def test_configure_rejects_bad_sizes(self, opening_state, grid_size):
        result = apply_action(opening_state, Action.configure(grid_size))

        assert result.error_code == INVALID_GRID_SIZE

    def test_reducer_uses_its_rng(self):
        first = Reducer(rng=random.Random(3)).new_session(4)
        second = Reducer(rng=random.Random(3)).new_session(4)
        assert first.deck == second.deck
