"""Per-browser key/value preference storage."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Protocol

logger = logging.getLogger(__name__)


class PreferenceStore(Protocol):
    """String key/value store with local-storage semantics (last write wins)."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class InMemoryPreferenceStore:
    """Dict-backed preference store scoped to one browser session."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = str(value)

    def remove(self, key: str) -> None:
        self._values.pop(key, None)

    def snapshot(self) -> Dict[str, str]:
        return dict(self._values)


def read_json(store: PreferenceStore, key: str, default: Any) -> Any:
    """Decode a JSON preference, falling back to ``default`` when absent or malformed."""

    raw = store.get(key)
    if raw is None:
        return default
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Ignoring malformed preference %s", key)
        return default


def write_json(store: PreferenceStore, key: str, value: Any) -> None:
    store.set(key, json.dumps(value))
