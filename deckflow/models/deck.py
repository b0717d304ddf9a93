"""Deck hierarchy."""

from __future__ import annotations

from collections import defaultdict, deque
from collections.abc import Iterable
from dataclasses import dataclass

from deckflow.errors import UnknownDeckError


@dataclass(frozen=True)
class Deck:
    id: str
    name: str
    parent_deck_id: str | None = None


class DeckTree:
    """Index over a set of decks for parent/child lookups.

    Studying a deck always means studying it together with all of its
    sub-decks, so most callers go through ``expand``.
    """

    def __init__(self, decks: Iterable[Deck]) -> None:
        self._decks: dict[str, Deck] = {deck.id: deck for deck in decks}
        self._children: dict[str, list[str]] = defaultdict(list)
        for deck in self._decks.values():
            if deck.parent_deck_id is not None:
                self._children[deck.parent_deck_id].append(deck.id)

    def __contains__(self, deck_id: object) -> bool:
        return deck_id in self._decks

    def __len__(self) -> int:
        return len(self._decks)

    def get(self, deck_id: str) -> Deck:
        try:
            return self._decks[deck_id]
        except KeyError:
            raise UnknownDeckError(deck_id) from None

    def children(self, deck_id: str) -> list[Deck]:
        self.get(deck_id)
        return [self._decks[child_id] for child_id in self._children.get(deck_id, [])]

    def expand(self, deck_id: str) -> set[str]:
        """Return ``deck_id`` and the ids of all its descendant decks.

        Raises:
            UnknownDeckError: If ``deck_id`` is not in the tree.
        """
        self.get(deck_id)
        found = {deck_id}
        pending = deque([deck_id])
        while pending:
            current = pending.popleft()
            for child_id in self._children.get(current, []):
                # Guard against parent cycles in corrupted data
                if child_id not in found:
                    found.add(child_id)
                    pending.append(child_id)
        return found

    def path(self, deck_id: str) -> list[Deck]:
        """Return the decks from the root down to ``deck_id`` (breadcrumb)."""
        path: list[Deck] = []
        seen: set[str] = set()
        current: str | None = deck_id
        while current is not None and current not in seen:
            seen.add(current)
            deck = self._decks.get(current)
            if deck is None:
                if current == deck_id:
                    raise UnknownDeckError(deck_id)
                # Dangling parent reference: treat the last known deck as root
                break
            path.append(deck)
            current = deck.parent_deck_id
        path.reverse()
        return path
