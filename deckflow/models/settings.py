"""Global study settings and per-deck overrides."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from deckflow.config import EngineConfig, config

T = TypeVar("T")


class LearningMode(Enum):
    """How many short steps a new card goes through before graduating."""

    FAST = "fast"
    NORMAL = "normal"
    DEEP = "deep"


class ReviewOrder(Enum):
    MIXED = "mixed"
    OLD_FIRST = "oldFirst"
    NEW_FIRST = "newFirst"


# Learning steps in minutes for each mode
LEARNING_STEPS: dict[LearningMode, tuple[int, ...]] = {
    LearningMode.FAST: (10, 1440),  # 10 minutes, 1 day
    LearningMode.NORMAL: (10, 1440, 4320),  # 10 minutes, 1 day, 3 days
    LearningMode.DEEP: (10, 1440, 4320, 10080),  # 10 minutes, 1 day, 3 days, 7 days
}


class Settings(BaseModel):
    """Effective study settings, either global or resolved for one deck."""

    model_config = ConfigDict(frozen=True)

    new_cards_per_day: int = Field(20, ge=0)
    max_reviews_per_day: int = Field(9999, ge=0)
    learning_mode: LearningMode = LearningMode.NORMAL
    again_delay_minutes: int = Field(10, ge=1)
    review_order: ReviewOrder = ReviewOrder.MIXED

    @property
    def learning_steps(self) -> tuple[int, ...]:
        """Return the learning ladder in minutes for this settings' mode."""
        return LEARNING_STEPS[self.learning_mode]

    @property
    def relearning_steps(self) -> tuple[int, ...]:
        """Return the single-step ladder used after a lapse."""
        return (self.again_delay_minutes,)


def default_settings(engine_config: EngineConfig | None = None) -> Settings:
    """Build the default global settings from engine configuration."""
    engine_config = engine_config or config
    return Settings(
        new_cards_per_day=engine_config.default_new_cards_per_day,
        max_reviews_per_day=engine_config.default_max_reviews_per_day,
        learning_mode=engine_config.default_learning_mode,
        again_delay_minutes=engine_config.default_again_delay_minutes,
        review_order=engine_config.default_review_order,
    )


def load_global_settings(stored: Settings | None) -> Settings:
    """Return the stored global settings, materializing defaults if absent."""
    if stored is None:
        return default_settings()
    return stored


def update_global_settings(current: Settings, **changes: Any) -> Settings:
    """Return a validated copy of ``current`` with ``changes`` applied."""
    return Settings.model_validate({**current.model_dump(), **changes})


class Inherit:
    """Marker for a deck setting that falls back to the global value."""

    _instance: Inherit | None = None

    def __new__(cls) -> Inherit:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "INHERIT"


INHERIT = Inherit()


@dataclass(frozen=True)
class Override(Generic[T]):
    """A deck setting that replaces the global value."""

    value: T


@dataclass(frozen=True)
class DeckSettings:
    """Per-deck overrides. Each field either inherits or overrides as a whole."""

    new_cards_per_day: Inherit | Override[int] = INHERIT
    max_reviews_per_day: Inherit | Override[int] = INHERIT
    learning_mode: Inherit | Override[LearningMode] = INHERIT
    again_delay_minutes: Inherit | Override[int] = INHERIT
    review_order: Inherit | Override[ReviewOrder] = INHERIT

    @classmethod
    def inherit_all(cls) -> DeckSettings:
        return cls()

    @classmethod
    def from_nullable(cls, **values: Any) -> DeckSettings:
        """Build overrides from nullable values, where ``None`` means inherit.

        Unknown field names raise ``TypeError`` like a regular constructor.
        """
        return cls(**{
            name: INHERIT if value is None else Override(value)
            for name, value in values.items()
        })

    def overrides(self) -> dict[str, Any]:
        """Return the overridden fields as plain values."""
        return {
            f.name: getattr(self, f.name).value
            for f in fields(self)
            if isinstance(getattr(self, f.name), Override)
        }
