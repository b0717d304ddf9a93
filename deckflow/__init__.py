"""Spaced-repetition scheduling engine.

Two entry points cover a study session:
- schedule_review: next scheduling state of a card after a rating
- select_due_cards: the ordered, capped cards to study in a deck now

Everything else supports them: settings inheritance, the in-session queue,
deck counters, and a conditional-write review flow for callers' stores.
"""

from deckflow.errors import (
    InvalidInputError,
    InvalidRatingError,
    ReviewConflictError,
    SchedulingError,
    StateInvariantError,
    UnknownDeckError,
)
from deckflow.models import (
    Card,
    CardState,
    Deck,
    DeckSettings,
    DeckTree,
    LearningMode,
    Override,
    Rating,
    ReviewLog,
    ReviewOrder,
    Settings,
    new_card,
)
from deckflow.srs.queue import StudiedCounts, select_due_cards
from deckflow.srs.resolver import resolve
from deckflow.srs.review import CardStore, ReviewOutcome, review_card
from deckflow.srs.scheduler import schedule_review
from deckflow.srs.session import SessionQueue

__all__ = [
    "Card",
    "CardState",
    "CardStore",
    "Deck",
    "DeckSettings",
    "DeckTree",
    "InvalidInputError",
    "InvalidRatingError",
    "LearningMode",
    "Override",
    "Rating",
    "ReviewConflictError",
    "ReviewLog",
    "ReviewOrder",
    "ReviewOutcome",
    "SchedulingError",
    "SessionQueue",
    "Settings",
    "StateInvariantError",
    "StudiedCounts",
    "UnknownDeckError",
    "new_card",
    "resolve",
    "review_card",
    "schedule_review",
    "select_due_cards",
]
