"""SM-2 style interval and ease calculator.

Key concepts:
- Ladder: short delays in minutes a card climbs while learning or relearning.
- Interval: whole days until a review card is due again.
- Ease: multiplier controlling how fast review intervals grow (min 1.30).
- Lapse: a review card rated Again; it relearns and comes back at half
  its previous interval.
"""

import logging
import math
from dataclasses import replace
from datetime import datetime, timedelta

from deckflow.models.card import MIN_EASE, Card, CardState, Rating
from deckflow.models.settings import Settings
from deckflow.srs.state_machine import check_transition, ladder_for, transition

logger = logging.getLogger(__name__)

AGAIN_EASE_PENALTY = 0.20
HARD_EASE_PENALTY = 0.15
EASY_EASE_BONUS = 0.15
HARD_INTERVAL_FACTOR = 1.2
EASY_INTERVAL_BONUS = 1.3
LAPSE_INTERVAL_FACTOR = 0.5
GRADUATING_INTERVAL_DAYS = 1


def round_half_away(value: float) -> int:
    """Round to the nearest integer, with .5 going away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _clamp_ease(ease: float) -> float:
    return round(max(MIN_EASE, ease), 2)


def _days(interval: float) -> int:
    return max(1, round_half_away(interval))


def schedule_review(
    card: Card,
    rating: Rating | str | int,
    settings: Settings,
    now: datetime,
) -> Card:
    """Apply a rating to a card and return its next scheduling state.

    Args:
        card: The card as it was shown to the learner.
        rating: again/hard/good/easy (enum, name, or 1-4).
        settings: Effective settings for the card's deck.
        now: When the review happened.

    Returns:
        A new Card; ``card`` itself is left untouched.

    Raises:
        InvalidRatingError: If ``rating`` is not a valid rating.
    """
    rating = Rating.parse(rating)
    move = transition(card, rating, settings)

    ease = card.ease
    interval = card.interval_days
    lapses = card.lapses

    if move.lapsed:
        lapses += 1
        ease -= AGAIN_EASE_PENALTY
        # Interval is kept until relearning graduates
    elif move.graduated:
        if card.state is CardState.RELEARNING:
            interval = _days(card.interval_days * LAPSE_INTERVAL_FACTOR)
        else:
            interval = GRADUATING_INTERVAL_DAYS
    elif card.state is CardState.REVIEW:
        if rating is Rating.HARD:
            ease -= HARD_EASE_PENALTY
            interval = _days(card.interval_days * HARD_INTERVAL_FACTOR)
        elif rating is Rating.GOOD:
            interval = _days(card.interval_days * ease)
        else:
            ease += EASY_EASE_BONUS
            interval = _days(card.interval_days * ease * EASY_INTERVAL_BONUS)

    ease = _clamp_ease(ease)

    if move.state is CardState.REVIEW:
        due_at = now + timedelta(days=interval)
    else:
        due_at = now + timedelta(minutes=ladder_for(move.state, settings)[move.step_index])

    updated = replace(
        card,
        state=move.state,
        learning_step_index=move.step_index,
        interval_days=interval,
        ease=ease,
        reps=card.reps + 1,
        lapses=lapses,
        due_at=due_at,
    )
    check_transition(card, updated, settings)

    logger.debug(
        "Card %s rated %s: %s -> %s, interval %d, ease %.2f, due %s",
        card.id,
        rating.value,
        card.state.value,
        updated.state.value,
        updated.interval_days,
        updated.ease,
        updated.due_at.isoformat(),
    )
    return updated
