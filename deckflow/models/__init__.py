"""Value types for cards, decks and settings."""

from deckflow.models.card import Card, CardState, Rating, ReviewLog, new_card
from deckflow.models.deck import Deck, DeckTree
from deckflow.models.settings import (
    INHERIT,
    DeckSettings,
    Inherit,
    LearningMode,
    Override,
    ReviewOrder,
    Settings,
)

__all__ = [
    "INHERIT",
    "Card",
    "CardState",
    "Deck",
    "DeckSettings",
    "DeckTree",
    "Inherit",
    "LearningMode",
    "Override",
    "Rating",
    "ReviewLog",
    "ReviewOrder",
    "Settings",
    "new_card",
]
