"""Shared factories for listing tests."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app.repositories.properties import PropertyRecord

BASE_TIME = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)


def build_record(property_id: str, *, age_days: int = 0, **overrides) -> PropertyRecord:
    values = dict(
        id=property_id,
        title=f"Listing {property_id}",
        property_type="house",
        status="for_sale",
        city="Springfield",
        neighborhood="Downtown",
        price=500_000.0,
        bedrooms=2,
        bathrooms=1,
        parking_spots=1,
        total_area=120.0,
        featured=False,
        created_at=BASE_TIME - timedelta(days=age_days),
    )
    values.update(overrides)
    return PropertyRecord(**values)


@pytest.fixture
def make_record():
    return build_record
