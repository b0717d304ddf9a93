"""Rate a stored card with a conditional write.

The engine itself never touches storage. This module drives a
caller-supplied ``CardStore``: read the card, schedule it, and save only if
nobody else reviewed it in between. A conflicting write is retried against a
fresh read.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from tenacity import Retrying, before_sleep_log, retry_if_exception_type, stop_after_attempt, wait_exponential

from deckflow.config import config
from deckflow.errors import InvalidInputError, ReviewConflictError
from deckflow.models.card import Card, Rating, ReviewLog
from deckflow.models.settings import Settings
from deckflow.srs.scheduler import schedule_review

logger = logging.getLogger(__name__)


class CardStore(Protocol):
    """Storage operations the review flow needs from the caller."""

    def get_card(self, card_id: str) -> Card: ...

    def save_card_if_unchanged(self, card: Card, expected: Card) -> bool:
        """Persist ``card`` only if the stored copy still matches ``expected``.

        Implementations compare the ``reps`` and ``due_at`` snapshot and
        return False on mismatch.
        """
        ...

    def append_review_log(self, log: ReviewLog) -> None: ...


@dataclass(frozen=True)
class ReviewOutcome:
    card: Card
    log: ReviewLog


def _review_once(
    store: CardStore,
    card_id: str,
    rating: Rating,
    settings: Settings,
    now: datetime,
) -> ReviewOutcome:
    card = store.get_card(card_id)
    updated = schedule_review(card, rating, settings, now)
    if not store.save_card_if_unchanged(updated, expected=card):
        raise ReviewConflictError(card_id)
    log = ReviewLog.record(card, rating, now)
    store.append_review_log(log)
    return ReviewOutcome(card=updated, log=log)


def review_card(
    store: CardStore,
    card_id: str,
    rating: Rating | str | int,
    settings: Settings,
    now: datetime,
    attempts: int | None = None,
    backoff_seconds: float = 0.1,
) -> ReviewOutcome:
    """Schedule and save one review, retrying on concurrent modification.

    Args:
        store: Caller's card storage.
        card_id: Card being rated.
        rating: again/hard/good/easy.
        settings: Effective settings for the card's deck.
        now: When the review happened.
        attempts: Total tries before giving up (defaults to
            ``config.review_conflict_retries``).
        backoff_seconds: Base of the exponential wait between tries.

    Returns:
        ReviewOutcome with the saved card and its log entry.

    Raises:
        InvalidRatingError: If ``rating`` is invalid (never retried).
        InvalidInputError: If ``attempts`` is below 1.
        ReviewConflictError: If every attempt hit a concurrent write.
    """
    rating = Rating.parse(rating)
    attempts = config.review_conflict_retries if attempts is None else attempts
    if attempts < 1:
        raise InvalidInputError(f"attempts must be at least 1, got {attempts}")
    retrying = Retrying(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=backoff_seconds, max=2),
        retry=retry_if_exception_type(ReviewConflictError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    for attempt in retrying:
        with attempt:
            outcome = _review_once(store, card_id, rating, settings, now)
    return outcome
