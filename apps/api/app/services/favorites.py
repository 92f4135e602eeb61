"""Favorite listings with publish/subscribe fan-out between components."""
from __future__ import annotations

import logging
from typing import Callable, FrozenSet, List

from .preferences import PreferenceStore, read_json, write_json

logger = logging.getLogger(__name__)

FAVORITES_KEY = "property_favorites"

FavoritesSet = FrozenSet[str]
FavoritesHandler = Callable[[FavoritesSet], None]


class FavoritesChannel:
    """In-process broadcast of the full favorites set to every subscriber."""

    def __init__(self) -> None:
        self._handlers: List[FavoritesHandler] = []

    def subscribe(self, handler: FavoritesHandler) -> Callable[[], None]:
        """Register ``handler`` and return a callable that unsubscribes it."""

        self._handlers.append(handler)

        def _unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return _unsubscribe

    def publish(self, favorites: FavoritesSet) -> None:
        snapshot = frozenset(favorites)
        for handler in list(self._handlers):
            try:
                handler(snapshot)
            except Exception:  # noqa: BLE001 - one bad subscriber must not starve the rest
                logger.exception("Favorites subscriber failed")

    @property
    def subscriber_count(self) -> int:
        return len(self._handlers)


def load_favorites(store: PreferenceStore) -> FavoritesSet:
    """Read the persisted favorites; anything but a JSON list of strings counts as empty."""

    raw = read_json(store, FAVORITES_KEY, [])
    if not isinstance(raw, list):
        return frozenset()
    return frozenset(item for item in raw if isinstance(item, str))


class Favorites:
    """One component's view of the favorites set, kept in sync through the channel."""

    def __init__(self, store: PreferenceStore, channel: FavoritesChannel) -> None:
        self._store = store
        self._channel = channel
        self._ids: FavoritesSet = load_favorites(store)
        self._unsubscribe = channel.subscribe(self._on_change)

    @property
    def ids(self) -> FavoritesSet:
        return self._ids

    def is_favorite(self, property_id: str) -> bool:
        return property_id in self._ids

    def toggle(self, property_id: str) -> bool:
        """Flip membership of ``property_id`` and return whether it is now a favorite."""

        if property_id in self._ids:
            updated = self._ids - {property_id}
        else:
            updated = self._ids | {property_id}
        self._ids = updated
        write_json(self._store, FAVORITES_KEY, sorted(updated))
        self._channel.publish(updated)
        return property_id in updated

    def close(self) -> None:
        self._unsubscribe()

    def _on_change(self, favorites: FavoritesSet) -> None:
        self._ids = favorites
