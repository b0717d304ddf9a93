"""In-memory queue for one study session.

Cards rated Again come back a few cards later in the same session, no
matter how far out the scheduler put their due date. Nothing here waits
on storage: the queue moves on as soon as a rating is given.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from deckflow.errors import InvalidInputError
from deckflow.models.card import Card, Rating

logger = logging.getLogger(__name__)

# An Again card resurfaces after at most this many other cards
REINSERT_AFTER = 3


@dataclass
class SessionStats:
    """Counts for the current session."""

    cards_rated: int = 0
    again: int = 0
    hard: int = 0
    good: int = 0
    easy: int = 0
    removed: int = 0

    def record(self, rating: Rating) -> None:
        self.cards_rated += 1
        setattr(self, rating.value, getattr(self, rating.value) + 1)


@dataclass
class SessionQueue:
    """Ordered cards left to study, with a cursor on the current one.

    ``queued_ids`` always holds the ids of the cards still in ``cards``.
    """

    cards: list[Card] = field(default_factory=list)
    index: int = 0
    again_pending: int = 0
    queued_ids: set[str] = field(default_factory=set)
    stats: SessionStats = field(default_factory=SessionStats)

    def __post_init__(self) -> None:
        # Own the list; rate/remove_current pop from it
        self.cards = list(self.cards)
        self.queued_ids = {card.id for card in self.cards}

    @classmethod
    def start(cls, cards: Iterable[Card]) -> SessionQueue:
        queue = cls(cards=list(cards))
        logger.info("Started session with %d cards", len(queue.cards))
        return queue

    @property
    def remaining(self) -> int:
        return len(self.cards)

    @property
    def is_complete(self) -> bool:
        return not self.cards

    @property
    def current(self) -> Card | None:
        """Return the card under the cursor or None if the session is complete."""
        if 0 <= self.index < len(self.cards):
            return self.cards[self.index]
        return None

    def _check_index(self, current_index: int | None) -> int:
        if current_index is None:
            current_index = self.index
        if not 0 <= current_index < len(self.cards):
            raise InvalidInputError(
                f"No card at index {current_index} in a queue of {len(self.cards)}"
            )
        return current_index

    def _move_cursor(self, current_index: int) -> Card | None:
        if not self.cards:
            self.index = 0
            logger.info("Session complete: %d ratings", self.stats.cards_rated)
            return None
        self.index = max(0, min(current_index, len(self.cards) - 1))
        return self.cards[self.index]

    def rate(self, rating: Rating | str | int, current_index: int | None = None) -> Card | None:
        """Take the rated card out of the queue and move to the next one.

        Again puts the card back ``REINSERT_AFTER`` cards ahead, or at the end
        if fewer remain. Any other rating ends the card's session.

        Args:
            rating: The rating given to the card at ``current_index``.
            current_index: Position of the rated card (defaults to the cursor).

        Returns:
            The new current card, or None when the queue is empty.

        Raises:
            InvalidRatingError: If ``rating`` is not a valid rating.
            InvalidInputError: If ``current_index`` is outside the queue.
        """
        rating = Rating.parse(rating)
        current_index = self._check_index(current_index)
        card = self.cards.pop(current_index)
        self.stats.record(rating)

        if rating is Rating.AGAIN:
            remaining = len(self.cards)
            insert_at = min(remaining, current_index + min(REINSERT_AFTER, remaining))
            self.cards.insert(insert_at, card)
            self.queued_ids.add(card.id)
            self.again_pending += 1
            logger.debug("Card %s requeued at position %d", card.id, insert_at)
            # The card after the rated one slid into current_index
            return self._move_cursor(min(current_index, remaining - 1))

        self.queued_ids.discard(card.id)
        self.again_pending = max(0, self.again_pending - 1)
        return self._move_cursor(current_index)

    def remove_current(self, current_index: int | None = None) -> Card | None:
        """Drop a card without rating it, e.g. after it was suspended."""
        current_index = self._check_index(current_index)
        card = self.cards.pop(current_index)
        self.queued_ids.discard(card.id)
        self.stats.removed += 1
        return self._move_cursor(current_index)

    def update_card(self, card: Card) -> bool:
        """Replace the queued copy of ``card`` (matched by id) after an edit.

        Returns False if the card is not in the queue.
        """
        found = False
        for i, queued in enumerate(self.cards):
            if queued.id == card.id:
                self.cards[i] = card
                found = True
        return found
