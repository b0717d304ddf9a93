"""Per-deck card counters for deck lists and overview screens."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from deckflow.models.card import Card, CardState, ReviewLog
from deckflow.models.deck import DeckTree
from deckflow.models.settings import Settings
from deckflow.srs.queue import StudiedCounts, build_queue


@dataclass(frozen=True)
class CardStateBreakdown:
    """What is waiting right now: new cards, learning cards due, reviews due."""

    new: int = 0
    learning: int = 0
    review: int = 0


@dataclass(frozen=True)
class CardDistribution:
    """The deck's overall stock of cards by progress."""

    new: int = 0
    learning: int = 0
    learned: int = 0


def _deck_cards(deck_id: str, cards: Iterable[Card], decks: DeckTree) -> list[Card]:
    deck_ids = decks.expand(deck_id)
    return [card for card in cards if card.deck_id in deck_ids and not card.suspended]


def due_count(
    deck_id: str,
    cards: Iterable[Card],
    decks: DeckTree,
    settings: Settings,
    now: datetime,
    studied: StudiedCounts | None = None,
) -> int:
    """Return how many cards a session on ``deck_id`` could study today."""
    return build_queue(deck_id, cards, decks, settings, now, studied).total


def card_state_breakdown(
    deck_id: str,
    cards: Iterable[Card],
    decks: DeckTree,
    now: datetime,
) -> CardStateBreakdown:
    new = learning = review = 0
    for card in _deck_cards(deck_id, cards, decks):
        if card.is_new:
            new += 1
        elif card.is_learning and card.is_due(now):
            learning += 1
        elif card.state is CardState.REVIEW and card.is_due(now):
            review += 1
    return CardStateBreakdown(new=new, learning=learning, review=review)


def card_distribution(deck_id: str, cards: Iterable[Card], decks: DeckTree) -> CardDistribution:
    new = learning = learned = 0
    for card in _deck_cards(deck_id, cards, decks):
        if card.reps == 0:
            # Never studied
            new += 1
        elif card.is_learning:
            learning += 1
        elif card.state is CardState.REVIEW:
            learned += 1
    return CardDistribution(new=new, learning=learning, learned=learned)


def start_of_day(now: datetime) -> datetime:
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def studied_today(logs: Iterable[ReviewLog], day_start: datetime) -> StudiedCounts:
    """Count distinct cards studied since ``day_start``, split into new and reviews.

    A card first seen as new today counts once as new, even if it was rated
    again later in the day.
    """
    new_ids: set[str] = set()
    review_ids: set[str] = set()
    for log in logs:
        if log.reviewed_at < day_start:
            continue
        if log.state_before is CardState.NEW:
            new_ids.add(log.card_id)
        else:
            review_ids.add(log.card_id)
    return StudiedCounts(new=len(new_ids), reviews=len(review_ids - new_ids))
