"""Tests for deck counters and studied-today counts."""

from datetime import datetime, timedelta

from deckflow.models.card import Card, CardState, Rating, ReviewLog
from deckflow.models.deck import Deck, DeckTree
from deckflow.models.settings import Settings
from deckflow.srs.queue import StudiedCounts
from deckflow.srs.stats import (
    CardDistribution,
    CardStateBreakdown,
    card_distribution,
    card_state_breakdown,
    due_count,
    start_of_day,
    studied_today,
)

NOW = datetime(2026, 3, 2, 9, 30)
DECKS = DeckTree([Deck("root", "Root"), Deck("child", "Child", parent_deck_id="root"), Deck("other", "Other")])


def _card(card_id: str, state: CardState, due_in_hours: float = -1, deck_id: str = "root", **kwargs) -> Card:
    return Card(
        id=card_id,
        deck_id=deck_id,
        front="f",
        back="b",
        due_at=NOW + timedelta(hours=due_in_hours),
        state=state,
        **kwargs,
    )


class TestCounters:
    def setup_method(self) -> None:
        self.cards = [
            _card("new1", CardState.NEW),
            _card("new2", CardState.NEW, deck_id="child"),
            _card("new-suspended", CardState.NEW, suspended=True),
            _card("learn-due", CardState.LEARNING, reps=1),
            _card("relearn-due", CardState.RELEARNING, reps=6, interval_days=4, lapses=1),
            _card("learn-later", CardState.LEARNING, due_in_hours=2, reps=1),
            _card("review-due", CardState.REVIEW, reps=3, interval_days=2, deck_id="child"),
            _card("review-later", CardState.REVIEW, due_in_hours=30, reps=3, interval_days=5),
            _card("elsewhere", CardState.REVIEW, reps=3, interval_days=2, deck_id="other"),
        ]

    def test_state_breakdown(self) -> None:
        assert card_state_breakdown("root", self.cards, DECKS, NOW) == CardStateBreakdown(
            new=2, learning=2, review=1
        )

    def test_distribution(self) -> None:
        assert card_distribution("root", self.cards, DECKS) == CardDistribution(
            new=2, learning=3, learned=2
        )

    def test_due_count_matches_selection_without_limit(self) -> None:
        assert due_count("root", self.cards, DECKS, Settings(), NOW) == 5

    def test_due_count_respects_caps(self) -> None:
        settings = Settings(new_cards_per_day=1, max_reviews_per_day=10)
        assert due_count("root", self.cards, DECKS, settings, NOW, StudiedCounts(reviews=9)) == 2

    def test_child_deck_only_counts_its_cards(self) -> None:
        assert card_state_breakdown("child", self.cards, DECKS, NOW) == CardStateBreakdown(
            new=1, learning=0, review=1
        )


class TestStudiedToday:
    def test_start_of_day(self) -> None:
        assert start_of_day(NOW) == datetime(2026, 3, 2)

    def test_counts_distinct_cards_since_day_start(self) -> None:
        day_start = start_of_day(NOW)
        logs = [
            ReviewLog("a", Rating.AGAIN, NOW - timedelta(hours=1), CardState.NEW),
            ReviewLog("a", Rating.GOOD, NOW - timedelta(minutes=30), CardState.LEARNING),
            ReviewLog("b", Rating.GOOD, NOW - timedelta(hours=2), CardState.REVIEW),
            ReviewLog("b", Rating.AGAIN, NOW - timedelta(hours=1), CardState.REVIEW),
            ReviewLog("c", Rating.HARD, NOW - timedelta(minutes=5), CardState.RELEARNING),
            ReviewLog("old", Rating.GOOD, day_start - timedelta(minutes=1), CardState.NEW),
        ]
        assert studied_today(logs, day_start) == StudiedCounts(new=1, reviews=2)

    def test_no_logs(self) -> None:
        assert studied_today([], start_of_day(NOW)) == StudiedCounts()

    def test_record_captures_state_before_review(self) -> None:
        card = _card("x", CardState.NEW)
        log = ReviewLog.record(card, "again", NOW)
        assert log == ReviewLog("x", Rating.AGAIN, NOW, CardState.NEW)
