"""Card state machine: legal transitions and card invariants.

States:
- new: never studied
- learning: climbing the learning ladder for the first time
- review: graduated, scheduled in whole days by interval and ease
- relearning: lapsed from review, climbing the single-step relearning ladder

The calculator asks ``transition`` where a rating moves a card, fills in the
numbers, then calls ``check_transition`` on the result.
"""

from __future__ import annotations

from dataclasses import dataclass

from deckflow.errors import StateInvariantError
from deckflow.models.card import MIN_EASE, Card, CardState, Rating
from deckflow.models.settings import Settings

LEGAL_TRANSITIONS: dict[CardState, frozenset[CardState]] = {
    CardState.NEW: frozenset({CardState.LEARNING, CardState.REVIEW}),
    CardState.LEARNING: frozenset({CardState.LEARNING, CardState.REVIEW}),
    CardState.REVIEW: frozenset({CardState.REVIEW, CardState.RELEARNING}),
    CardState.RELEARNING: frozenset({CardState.RELEARNING, CardState.REVIEW}),
}


@dataclass(frozen=True)
class Transition:
    """Where a rating moves a card, before any interval arithmetic."""

    state: CardState
    step_index: int = 0
    graduated: bool = False  # left a ladder for review
    lapsed: bool = False  # review card forgotten


def ladder_for(state: CardState, settings: Settings) -> tuple[int, ...]:
    """Return the ladder (minutes) a card in ``state`` climbs."""
    if state is CardState.RELEARNING:
        return settings.relearning_steps
    if state in (CardState.NEW, CardState.LEARNING):
        return settings.learning_steps
    return ()


def current_step(card: Card, ladder: tuple[int, ...]) -> int:
    """Return the card's step, clamped to the last step of ``ladder``.

    The ladder can shrink under a card if its deck's learning mode changes.
    """
    if not ladder:
        return 0
    return max(0, min(card.learning_step_index, len(ladder) - 1))


def transition(card: Card, rating: Rating, settings: Settings) -> Transition:
    """Decide the next state and ladder step for ``card`` rated ``rating``."""
    if card.state is CardState.NEW:
        if not settings.learning_steps:
            return Transition(CardState.REVIEW, graduated=True)
        return Transition(CardState.LEARNING, 0)

    if card.state is CardState.REVIEW:
        if rating is Rating.AGAIN:
            return Transition(CardState.RELEARNING, 0, lapsed=True)
        return Transition(CardState.REVIEW)

    ladder = ladder_for(card.state, settings)
    if not ladder or rating is Rating.EASY:
        return Transition(CardState.REVIEW, graduated=True)
    if rating is Rating.AGAIN:
        return Transition(card.state, 0)

    step = current_step(card, ladder)
    if step + 1 < len(ladder):
        return Transition(card.state, step + 1)
    return Transition(CardState.REVIEW, graduated=True)


def check_transition(before: Card, after: Card, settings: Settings) -> None:
    """Verify that ``before`` -> ``after`` is legal and ``after`` is consistent.

    Raises:
        StateInvariantError: If the engine produced an impossible card.
    """
    if after.state not in LEGAL_TRANSITIONS[before.state]:
        raise StateInvariantError(
            f"Illegal transition {before.state.value} -> {after.state.value} for card {before.id}"
        )
    if after.ease < MIN_EASE:
        raise StateInvariantError(f"Ease {after.ease} below {MIN_EASE} for card {after.id}")
    if after.state is CardState.REVIEW and after.interval_days < 1:
        raise StateInvariantError(f"Review interval {after.interval_days} below 1 day for card {after.id}")
    if after.reps < before.reps or after.lapses < before.lapses:
        raise StateInvariantError(f"Counters went backwards for card {after.id}")
    if before.state is CardState.REVIEW and after.state is CardState.RELEARNING:
        if after.lapses != before.lapses + 1:
            raise StateInvariantError(f"Lapse not counted for card {after.id}")

    ladder = ladder_for(after.state, settings)
    if after.is_learning:
        if not 0 <= after.learning_step_index < len(ladder):
            raise StateInvariantError(
                f"Step {after.learning_step_index} outside ladder of {len(ladder)} for card {after.id}"
            )
    elif after.learning_step_index != 0:
        raise StateInvariantError(f"Step index set outside a ladder for card {after.id}")
