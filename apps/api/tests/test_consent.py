"""Tests for cookie consent persistence."""
from __future__ import annotations

from app.schemas.properties import ConsentPayload
from app.services import consent as consent_service
from app.services.preferences import InMemoryPreferenceStore


def test_missing_consent_has_defaults():
    response = consent_service.load_consent(InMemoryPreferenceStore())

    assert response.has_consent is False
    assert response.preferences == ConsentPayload()


def test_save_forces_necessary_and_round_trips():
    store = InMemoryPreferenceStore()

    saved = consent_service.save_consent(store, ConsentPayload(necessary=False, analytics=True))
    loaded = consent_service.load_consent(store)

    assert saved.preferences.necessary is True
    assert loaded.has_consent is True
    assert loaded.preferences.analytics is True
    assert loaded.preferences.marketing is False


def test_malformed_consent_is_ignored():
    store = InMemoryPreferenceStore({consent_service.CONSENT_KEY: "{oops"})
    assert consent_service.load_consent(store).has_consent is False

    store.set(consent_service.CONSENT_KEY, '{"analytics": "very"}')
    assert consent_service.load_consent(store).has_consent is False


def test_reset_removes_entry():
    store = InMemoryPreferenceStore()
    consent_service.save_consent(store, ConsentPayload(marketing=True))

    response = consent_service.reset_consent(store)

    assert response.has_consent is False
    assert store.get(consent_service.CONSENT_KEY) is None
