"""Cookie consent preferences kept in the browser's preference store."""
from __future__ import annotations

import logging

from pydantic import ValidationError

from ..schemas.properties import ConsentPayload, ConsentResponse
from .preferences import PreferenceStore, read_json, write_json

logger = logging.getLogger(__name__)

CONSENT_KEY = "cookie_consent"


def load_consent(store: PreferenceStore) -> ConsentResponse:
    """Return stored consent; a missing or malformed entry means no consent yet."""

    raw = read_json(store, CONSENT_KEY, None)
    if not isinstance(raw, dict):
        return ConsentResponse(preferences=ConsentPayload(), has_consent=False)
    try:
        preferences = ConsentPayload.model_validate(raw)
    except ValidationError:
        logger.warning("Ignoring malformed cookie consent entry")
        return ConsentResponse(preferences=ConsentPayload(), has_consent=False)
    return ConsentResponse(preferences=preferences.model_copy(update={"necessary": True}), has_consent=True)


def save_consent(store: PreferenceStore, preferences: ConsentPayload) -> ConsentResponse:
    """Persist consent. Necessary cookies cannot be declined."""

    stored = preferences.model_copy(update={"necessary": True})
    write_json(store, CONSENT_KEY, stored.model_dump())
    logger.info(
        "Cookie consent saved (analytics=%s, marketing=%s, personalization=%s)",
        stored.analytics,
        stored.marketing,
        stored.personalization,
    )
    return ConsentResponse(preferences=stored, has_consent=True)


def reset_consent(store: PreferenceStore) -> ConsentResponse:
    store.remove(CONSENT_KEY)
    return ConsentResponse(preferences=ConsentPayload(), has_consent=False)
