"""Tests for card state transitions and invariant checks."""

from dataclasses import replace
from datetime import datetime

import pytest

from deckflow.errors import StateInvariantError
from deckflow.models.card import Card, CardState, Rating
from deckflow.models.settings import LearningMode, Settings
from deckflow.srs.state_machine import (
    LEGAL_TRANSITIONS,
    Transition,
    check_transition,
    current_step,
    ladder_for,
    transition,
)

NOW = datetime(2026, 3, 2, 9, 30)


def _card(state: CardState, step: int = 0, interval: int = 0) -> Card:
    return Card(
        id="c1",
        deck_id="d1",
        front="f",
        back="b",
        due_at=NOW,
        state=state,
        learning_step_index=step,
        interval_days=interval,
    )


class TestLadders:
    def test_learning_modes(self) -> None:
        assert ladder_for(CardState.LEARNING, Settings(learning_mode=LearningMode.FAST)) == (10, 1440)
        assert ladder_for(CardState.NEW, Settings(learning_mode=LearningMode.NORMAL)) == (10, 1440, 4320)
        assert ladder_for(CardState.LEARNING, Settings(learning_mode=LearningMode.DEEP)) == (
            10,
            1440,
            4320,
            10080,
        )

    def test_relearning_is_a_single_again_delay_step(self) -> None:
        assert ladder_for(CardState.RELEARNING, Settings(again_delay_minutes=25)) == (25,)

    def test_review_has_no_ladder(self) -> None:
        assert ladder_for(CardState.REVIEW, Settings()) == ()

    def test_current_step_is_clamped(self) -> None:
        assert current_step(_card(CardState.LEARNING, step=7), (10, 1440)) == 1
        assert current_step(_card(CardState.LEARNING, step=1), (10, 1440)) == 1
        assert current_step(_card(CardState.LEARNING, step=1), ()) == 0


class TestTransition:
    def setup_method(self) -> None:
        self.settings = Settings(learning_mode=LearningMode.FAST)

    def test_new_goes_to_first_learning_step(self) -> None:
        assert transition(_card(CardState.NEW), Rating.HARD, self.settings) == Transition(
            CardState.LEARNING, 0
        )

    def test_review_again_is_a_lapse(self) -> None:
        move = transition(_card(CardState.REVIEW, interval=4), Rating.AGAIN, self.settings)
        assert move == Transition(CardState.RELEARNING, 0, lapsed=True)

    def test_review_success_stays_in_review(self) -> None:
        for rating in (Rating.HARD, Rating.GOOD, Rating.EASY):
            move = transition(_card(CardState.REVIEW, interval=4), rating, self.settings)
            assert move == Transition(CardState.REVIEW)

    def test_learning_steps_then_graduates(self) -> None:
        assert transition(_card(CardState.LEARNING, 0), Rating.GOOD, self.settings) == Transition(
            CardState.LEARNING, 1
        )
        assert transition(_card(CardState.LEARNING, 1), Rating.GOOD, self.settings) == Transition(
            CardState.REVIEW, graduated=True
        )

    def test_relearning_graduates_after_one_step(self) -> None:
        move = transition(_card(CardState.RELEARNING, 0, interval=8), Rating.HARD, self.settings)
        assert move == Transition(CardState.REVIEW, graduated=True)

    def test_every_decision_is_legal(self) -> None:
        for state in CardState:
            for rating in Rating:
                move = transition(_card(state, interval=3), rating, self.settings)
                assert move.state in LEGAL_TRANSITIONS[state]


class TestCheckTransition:
    def setup_method(self) -> None:
        self.settings = Settings()

    def test_accepts_valid_result(self) -> None:
        before = _card(CardState.REVIEW, interval=10)
        after = replace(before, interval_days=25, reps=1)
        check_transition(before, after, self.settings)

    def test_rejects_illegal_state_change(self) -> None:
        before = _card(CardState.REVIEW, interval=10)
        with pytest.raises(StateInvariantError):
            check_transition(before, replace(before, state=CardState.NEW), self.settings)

    def test_rejects_ease_below_floor(self) -> None:
        before = _card(CardState.REVIEW, interval=10)
        with pytest.raises(StateInvariantError):
            check_transition(before, replace(before, ease=1.2), self.settings)

    def test_rejects_zero_interval_in_review(self) -> None:
        before = _card(CardState.LEARNING, step=2)
        after = replace(before, state=CardState.REVIEW, learning_step_index=0, interval_days=0)
        with pytest.raises(StateInvariantError):
            check_transition(before, after, self.settings)

    def test_rejects_uncounted_lapse(self) -> None:
        before = _card(CardState.REVIEW, interval=10)
        after = replace(before, state=CardState.RELEARNING)
        with pytest.raises(StateInvariantError):
            check_transition(before, after, self.settings)

    def test_rejects_step_outside_ladder(self) -> None:
        before = _card(CardState.LEARNING, step=0)
        with pytest.raises(StateInvariantError):
            check_transition(before, replace(before, learning_step_index=3), self.settings)

    def test_rejects_counters_going_backwards(self) -> None:
        before = replace(_card(CardState.REVIEW, interval=10), reps=4)
        with pytest.raises(StateInvariantError):
            check_transition(before, replace(before, reps=3), self.settings)
