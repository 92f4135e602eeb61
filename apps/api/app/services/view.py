"""Route and on-screen element state reported by the admin front-end."""
from __future__ import annotations

from typing import Iterable, List, Protocol, Set


class Navigator(Protocol):
    def current_path(self) -> str: ...

    def navigate(self, path: str) -> None: ...


class ElementProbe(Protocol):
    def exists(self, selector: str) -> bool: ...


class RecordedNavigator:
    """Tracks the admin route; navigations are queued for the client to follow."""

    def __init__(self, path: str = "/admin") -> None:
        self._path = path
        self.history: List[str] = []

    def current_path(self) -> str:
        return self._path

    def navigate(self, path: str) -> None:
        self._path = path
        self.history.append(path)

    def sync(self, path: str) -> None:
        """Record where the client actually is without counting it as a navigation."""

        self._path = path


class ReportedElements:
    """Selectors the client reported as rendered on the current page."""

    def __init__(self, selectors: Iterable[str] = ()) -> None:
        self._selectors: Set[str] = set(selectors)

    def exists(self, selector: str) -> bool:
        return selector in self._selectors

    def replace(self, selectors: Iterable[str]) -> None:
        self._selectors = set(selectors)
