"""Merge global settings with a deck's overrides."""

from deckflow.models.settings import DeckSettings, Settings


def resolve(global_settings: Settings, deck_override: DeckSettings | None = None) -> Settings:
    """Return the effective settings for a deck.

    Each field takes the deck's override when one is set, otherwise the
    global value. Resolving against an all-inherit override returns settings
    equal to ``global_settings``.
    """
    if deck_override is None:
        return global_settings
    overrides = deck_override.overrides()
    if not overrides:
        return global_settings
    return Settings.model_validate({**global_settings.model_dump(), **overrides})
