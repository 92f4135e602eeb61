"""Interaction repository helpers."""
from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.interaction import Interaction, InteractionSource, InteractionType


async def record_interaction(
    session: AsyncSession,
    *,
    type: InteractionType,
    source: InteractionSource,
    device_type: str,
    created_at: datetime,
) -> Interaction:
    """Insert a single interaction row."""

    interaction = Interaction(
        id=str(uuid4()),
        type=type,
        source=source,
        device_type=device_type,
        created_at=created_at,
    )
    session.add(interaction)
    await session.flush()
    return interaction


async def list_since(session: AsyncSession, since: datetime) -> list[Interaction]:
    """Return interactions created at or after ``since``, oldest first."""

    stmt = select(Interaction).where(Interaction.created_at >= since).order_by(Interaction.created_at.asc())
    result = await session.execute(stmt)
    return list(result.scalars().all())
