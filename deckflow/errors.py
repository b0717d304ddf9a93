"""Exceptions raised by the scheduling engine."""


class SchedulingError(Exception):
    """Base exception for scheduling engine errors."""


class InvalidInputError(SchedulingError, ValueError):
    """Raised when a caller passes a value outside the engine's contract."""


class InvalidRatingError(InvalidInputError):
    """Raised when a rating is not one of again/hard/good/easy."""


class UnknownDeckError(InvalidInputError):
    """Raised when a deck id is not part of the deck tree."""

    def __init__(self, deck_id: str) -> None:
        super().__init__(f"Unknown deck: {deck_id}")
        self.deck_id = deck_id


class ReviewConflictError(SchedulingError):
    """Raised when a card changed in storage between read and write."""

    def __init__(self, card_id: str) -> None:
        super().__init__(f"Card {card_id} was modified concurrently")
        self.card_id = card_id


class StateInvariantError(SchedulingError):
    """Raised when a computed card breaks a state machine invariant.

    This indicates a defect in the engine, never bad user data.
    """
