"""Site settings repository helpers."""
from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from ..models.site_settings import GENERAL_SETTINGS_ID, SiteSettings


async def get_general(session: AsyncSession) -> SiteSettings | None:
    """Return the single settings row if it has been created."""

    return await session.get(SiteSettings, GENERAL_SETTINGS_ID)


async def ensure_general(session: AsyncSession, values: dict[str, Any]) -> SiteSettings:
    """Fetch the settings row or create it, then apply ``values``."""

    row = await session.get(SiteSettings, GENERAL_SETTINGS_ID)
    if row is None:
        row = SiteSettings(id=GENERAL_SETTINGS_ID)
        session.add(row)
    for key, value in values.items():
        setattr(row, key, value)
    await session.flush()
    return row
