"""Recording of visitor interactions for the dashboard."""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from ..repositories import interactions as interactions_repo
from ..schemas import properties as schemas

logger = logging.getLogger(__name__)


async def track_interaction(
    payload: schemas.InteractionCreate,
    session: AsyncSession,
) -> schemas.InteractionCreated:
    async with session.begin():
        interaction = await interactions_repo.record_interaction(
            session,
            type=payload.type,
            source=payload.source,
            device_type=payload.device_type or "desktop",
            created_at=datetime.now(timezone.utc),
        )
    logger.info("Interaction recorded: %s from %s", payload.type.value, payload.source.value)
    return schemas.InteractionCreated(id=interaction.id, created_at=interaction.created_at)
