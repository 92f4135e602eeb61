"""In-memory browser session registry for preferences, favorites, search and the admin tour."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Dict, Optional
from uuid import uuid4

from fastapi import Header, Response

from ..core.config import settings
from .favorites import Favorites, FavoritesChannel
from .preferences import InMemoryPreferenceStore
from .search import PropertySearch
from .tour import TourController
from .view import RecordedNavigator, ReportedElements


@dataclass
class BrowserSession:
    """Everything one browser keeps client-side, held server-side for the API."""

    session_id: str
    preferences: InMemoryPreferenceStore = field(default_factory=InMemoryPreferenceStore)
    channel: FavoritesChannel = field(default_factory=FavoritesChannel)
    navigator: RecordedNavigator = field(default_factory=RecordedNavigator)
    elements: ReportedElements = field(default_factory=ReportedElements)
    favorites: Favorites = field(init=False)
    search: PropertySearch = field(init=False)
    tour: TourController = field(init=False)

    def __post_init__(self) -> None:
        self.favorites = Favorites(self.preferences, self.channel)
        self.search = PropertySearch(self.favorites, self.channel)
        self.tour = TourController(self.preferences, self.navigator, self.elements)

    def close(self) -> None:
        self.tour.unmount()
        self.search.close()
        self.favorites.close()


@dataclass
class _SessionEntry:
    session: BrowserSession
    last_seen: float


class SessionStore:
    """Very small in-memory session registry with TTL eviction."""

    def __init__(self, ttl_seconds: int = 3600) -> None:
        self._ttl = ttl_seconds
        self._sessions: Dict[str, _SessionEntry] = {}

    def get(self, session_id: str) -> Optional[BrowserSession]:
        self._evict_expired()
        entry = self._sessions.get(session_id)
        if not entry:
            return None
        entry.last_seen = time.time()
        return entry.session

    def get_or_create(self, session_id: str) -> BrowserSession:
        existing = self.get(session_id)
        if existing is not None:
            return existing
        session = BrowserSession(session_id=session_id)
        self._sessions[session_id] = _SessionEntry(session=session, last_seen=time.time())
        return session

    def clear(self, session_id: str) -> None:
        entry = self._sessions.pop(session_id, None)
        if entry:
            entry.session.close()

    def _evict_expired(self) -> None:
        now = time.time()
        expired = [key for key, entry in self._sessions.items() if now - entry.last_seen > self._ttl]
        for key in expired:
            self.clear(key)


session_store = SessionStore(ttl_seconds=settings.session_ttl_seconds)


SESSION_HEADER = "X-Session-Id"


async def get_browser_session(
    response: Response,
    session_id: str | None = Header(default=None, alias=SESSION_HEADER),
) -> BrowserSession:
    """FastAPI dependency resolving the caller's browser session, minting one if needed."""

    resolved = session_id or str(uuid4())
    response.headers[SESSION_HEADER] = resolved
    return session_store.get_or_create(resolved)
