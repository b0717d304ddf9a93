from datetime import UTC, datetime

from pydantic_settings import BaseSettings


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime.

    Card timestamps are kept naive UTC throughout the engine, so callers
    comparing against ``due_at`` should use this rather than ``datetime.now()``.
    """
    return datetime.now(UTC).replace(tzinfo=None)


class EngineConfig(BaseSettings):
    default_new_cards_per_day: int = 20
    default_max_reviews_per_day: int = 9999
    default_learning_mode: str = "normal"
    default_again_delay_minutes: int = 10
    default_review_order: str = "mixed"
    session_limit: int = 100
    review_conflict_retries: int = 3

    model_config = {"env_prefix": "DECKFLOW_", "env_file": ".env"}


config = EngineConfig()
