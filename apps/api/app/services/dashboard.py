"""Admin dashboard counters."""
from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from ..models.interaction import Interaction, InteractionType
from ..models.property import PropertyType
from ..repositories import interactions as interactions_repo
from ..repositories import properties as properties_repo
from ..schemas import admin as schemas

WINDOW = timedelta(hours=24)
LEAD_TYPES = (InteractionType.WHATSAPP, InteractionType.PHONE, InteractionType.EMAIL)


async def get_dashboard(session: AsyncSession, *, now: datetime | None = None) -> schemas.DashboardResponse:
    """Collect listing and interaction counts for the last 24 hours."""

    now = now or datetime.now(timezone.utc)
    total = await properties_repo.count_properties(session)
    featured = await properties_repo.count_properties(session, featured=True)
    interactions = await interactions_repo.list_since(session, now - WINDOW)
    property_types = await properties_repo.list_property_types(session)

    return build_dashboard(
        total_properties=total,
        featured_properties=featured,
        interactions=interactions,
        property_types=property_types,
    )


def build_dashboard(
    *,
    total_properties: int,
    featured_properties: int,
    interactions: Iterable[Interaction],
    property_types: Iterable[str],
) -> schemas.DashboardResponse:
    """Pure counting over already-fetched rows."""

    hourly = {
        f"{hour:02d}": schemas.HourlyInteractions(hour=f"{hour:02d}:00")
        for hour in range(24)
    }
    totals: Counter[str] = Counter()
    for interaction in interactions:
        kind = InteractionType(interaction.type).value
        totals[kind] += 1
        bucket = hourly[f"{interaction.created_at.hour:02d}"]
        setattr(bucket, _HOURLY_FIELDS[kind], getattr(bucket, _HOURLY_FIELDS[kind]) + 1)

    views = totals[InteractionType.VIEW.value]
    leads = sum(totals[kind.value] for kind in LEAD_TYPES)
    conversion_rate = round(leads / views * 100, 1) if views else 0.0

    type_counts = {kind.value: 0 for kind in PropertyType}
    for property_type in property_types:
        if property_type in type_counts:
            type_counts[property_type] += 1

    return schemas.DashboardResponse(
        stats=schemas.DashboardStats(
            total_properties=total_properties,
            featured_properties=featured_properties,
            active_properties=total_properties,
            total_views=views,
            total_leads=leads,
            total_whatsapp=totals[InteractionType.WHATSAPP.value],
            total_phone=totals[InteractionType.PHONE.value],
            total_email=totals[InteractionType.EMAIL.value],
            conversion_rate=conversion_rate,
        ),
        hourly=list(hourly.values()),
        property_types=[
            schemas.PropertyTypeCount(type=kind, count=count) for kind, count in type_counts.items() if count > 0
        ],
    )


_HOURLY_FIELDS = {
    InteractionType.VIEW.value: "views",
    InteractionType.WHATSAPP.value: "whatsapp",
    InteractionType.PHONE.value: "phone",
    InteractionType.EMAIL.value: "email",
}
