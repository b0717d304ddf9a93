"""Flashcard scheduling state, ratings and review log entries."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from deckflow.config import utcnow
from deckflow.errors import InvalidInputError, InvalidRatingError

INITIAL_EASE = 2.5
MIN_EASE = 1.3


class CardState(Enum):
    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"
    RELEARNING = "relearning"


class Rating(Enum):
    """How well the learner recalled a card."""

    AGAIN = "again"
    HARD = "hard"
    GOOD = "good"
    EASY = "easy"

    @classmethod
    def parse(cls, value: Rating | str | int) -> Rating:
        """Coerce a rating from an enum member, its name, or 1-4.

        Raises:
            InvalidRatingError: If the value is not one of the four ratings.
        """
        if isinstance(value, cls):
            return value
        # bool is an int subclass; True/False are never ratings
        if isinstance(value, int) and not isinstance(value, bool):
            if 1 <= value <= 4:
                return _RATINGS_BY_NUMBER[value]
        elif isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidRatingError(f"Rating must be again, hard, good or easy, got {value!r}")


_RATINGS_BY_NUMBER = {1: Rating.AGAIN, 2: Rating.HARD, 3: Rating.GOOD, 4: Rating.EASY}


@dataclass(frozen=True)
class Card:
    """A flashcard with its scheduling state.

    The engine never looks at ``front``/``back``. Instances are immutable;
    scheduling and edits return new values.
    """

    id: str
    deck_id: str
    front: str
    back: str
    due_at: datetime
    state: CardState = CardState.NEW
    suspended: bool = False
    interval_days: int = 0
    ease: float = INITIAL_EASE
    reps: int = 0
    lapses: int = 0
    learning_step_index: int = 0

    @property
    def is_new(self) -> bool:
        return self.state is CardState.NEW

    @property
    def is_learning(self) -> bool:
        """Return True while the card is on a learning or relearning ladder."""
        return self.state in (CardState.LEARNING, CardState.RELEARNING)

    def is_due(self, now: datetime) -> bool:
        return self.due_at <= now


def new_card(
    deck_id: str,
    front: str,
    back: str,
    now: datetime | None = None,
    card_id: str | None = None,
) -> Card:
    """Create a card that is immediately eligible for study."""
    return Card(
        id=card_id or str(uuid.uuid4()),
        deck_id=deck_id,
        front=front,
        back=back,
        due_at=now or utcnow(),
    )


def suspend(card: Card) -> Card:
    """Exclude a card from due selection, keeping its scheduling state."""
    return replace(card, suspended=True)


def unsuspend(card: Card) -> Card:
    return replace(card, suspended=False)


def move_to_deck(card: Card, deck_id: str) -> Card:
    return replace(card, deck_id=deck_id)


def edit_content(card: Card, front: str, back: str) -> Card:
    """Replace a card's text. Both sides must be non-blank."""
    front, back = front.strip(), back.strip()
    if not front or not back:
        raise InvalidInputError("Card front and back must not be empty")
    return replace(card, front=front, back=back)


@dataclass(frozen=True)
class ReviewLog:
    """An immutable record of one rating, appended by the caller after saving."""

    card_id: str
    rating: Rating
    reviewed_at: datetime
    state_before: CardState

    @classmethod
    def record(cls, card: Card, rating: Rating | str | int, reviewed_at: datetime) -> ReviewLog:
        """Build a log entry for ``card`` as it was before the review."""
        return cls(
            card_id=card.id,
            rating=Rating.parse(rating),
            reviewed_at=reviewed_at,
            state_before=card.state,
        )
