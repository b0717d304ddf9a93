"""Due card selection for study sessions.

Handles deck expansion, daily new/review caps, and the review order
policy that decides how new cards are mixed with due ones.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from deckflow.config import config
from deckflow.errors import InvalidInputError
from deckflow.models.card import Card
from deckflow.models.deck import DeckTree
from deckflow.models.settings import ReviewOrder, Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StudiedCounts:
    """Cards already studied today, supplied by the caller's review log."""

    new: int = 0
    reviews: int = 0


@dataclass
class DueQueue:
    """Capped new and due cards for one deck, before session truncation."""

    due_cards: list[Card] = field(default_factory=list)
    new_cards: list[Card] = field(default_factory=list)
    review_order: ReviewOrder = ReviewOrder.MIXED

    @property
    def total(self) -> int:
        return len(self.due_cards) + len(self.new_cards)

    def ordered(self) -> list[Card]:
        """Return all cards in study order.

        mixed alternates one new card and one due card; when either pool
        runs out the rest of the other follows. oldFirst/newFirst show due
        cards before new ones.
        """
        if self.review_order is not ReviewOrder.MIXED:
            return self.due_cards + self.new_cards

        result: list[Card] = []
        for i in range(max(len(self.new_cards), len(self.due_cards))):
            if i < len(self.new_cards):
                result.append(self.new_cards[i])
            if i < len(self.due_cards):
                result.append(self.due_cards[i])
        return result


def remaining_headroom(settings: Settings, studied: StudiedCounts) -> tuple[int, int]:
    """Return how many (new, due) cards may still be studied today."""
    return (
        max(0, settings.new_cards_per_day - studied.new),
        max(0, settings.max_reviews_per_day - studied.reviews),
    )


def build_queue(
    deck_id: str,
    cards: Iterable[Card],
    decks: DeckTree,
    settings: Settings,
    now: datetime,
    studied: StudiedCounts | None = None,
) -> DueQueue:
    """Collect the cards of a deck and its sub-decks that can be studied now.

    Candidates are non-suspended cards that are new or due at ``now``.
    New cards keep creation order; due cards follow ``settings.review_order``.
    Both pools are capped by the remaining daily headroom.

    Raises:
        UnknownDeckError: If ``deck_id`` is not in ``decks``.
    """
    studied = studied or StudiedCounts()
    deck_ids = decks.expand(deck_id)

    new_candidates: list[Card] = []
    due_candidates: list[Card] = []
    for card in cards:
        if card.suspended or card.deck_id not in deck_ids:
            continue
        if card.is_new:
            new_candidates.append(card)
        elif card.is_due(now):
            due_candidates.append(card)

    new_candidates.sort(key=lambda c: c.due_at)
    due_candidates.sort(
        key=lambda c: c.due_at,
        reverse=settings.review_order is ReviewOrder.NEW_FIRST,
    )

    new_slots, due_slots = remaining_headroom(settings, studied)
    return DueQueue(
        due_cards=due_candidates[:due_slots],
        new_cards=new_candidates[:new_slots],
        review_order=settings.review_order,
    )


def select_due_cards(
    deck_id: str,
    cards: Iterable[Card],
    decks: DeckTree,
    settings: Settings,
    now: datetime,
    limit: int | None = None,
    studied: StudiedCounts | None = None,
) -> list[Card]:
    """Build the ordered list of cards for a study session.

    Args:
        deck_id: Deck to study; its sub-decks are included.
        cards: Candidate cards from the caller's store.
        decks: The deck hierarchy.
        settings: Effective settings for ``deck_id``.
        now: Current time.
        limit: Session size cap (defaults to ``config.session_limit``).
        studied: Counts already studied today, for the daily caps.

    Returns:
        Cards in study order; empty when nothing is due.

    Raises:
        InvalidInputError: If ``limit`` is negative.
        UnknownDeckError: If ``deck_id`` is not in ``decks``.
    """
    if limit is None:
        limit = config.session_limit
    if limit < 0:
        raise InvalidInputError(f"Session limit must not be negative, got {limit}")

    queue = build_queue(deck_id, cards, decks, settings, now, studied)
    selected = queue.ordered()[:limit]

    logger.info(
        "Selected %d cards for deck %s: %d due + %d new available (limit %d)",
        len(selected),
        deck_id,
        len(queue.due_cards),
        len(queue.new_cards),
        limit,
    )
    return selected
