"""Site contact settings and the links derived from them."""
from __future__ import annotations

import re
from urllib.parse import quote

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..repositories import site_settings as settings_repo
from ..schemas import admin as schemas

WHATSAPP_BASE_URL = "https://wa.me/"


async def get_site_settings(session: AsyncSession) -> schemas.SiteSettingsResponse:
    row = await settings_repo.get_general(session)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Settings not configured")
    return _to_response(row)


async def update_site_settings(
    payload: schemas.SiteSettingsUpdate,
    session: AsyncSession,
) -> schemas.SiteSettingsResponse:
    """Apply the supplied fields, creating the settings row on first save."""

    async with session.begin():
        row = await settings_repo.ensure_general(session, payload.model_dump(exclude_unset=True, exclude_none=True))
    return _to_response(row)


def whatsapp_link(number: str, message: str | None = None) -> str:
    """Click-to-chat URL for ``number``; empty when no number is configured."""

    if not number:
        return ""
    suffix = f"?text={quote(message, safe='')}" if message else ""
    return f"{WHATSAPP_BASE_URL}{number}{suffix}"


def format_phone_number(phone: str) -> str:
    """Format a country-prefixed number as ``(AA) NNNNN-NNNN``."""

    if not phone:
        return ""
    digits = re.sub(r"\D", "", phone)
    return f"({digits[2:4]}) {digits[4:9]}-{digits[9:]}"


def _to_response(row: object) -> schemas.SiteSettingsResponse:
    response = schemas.SiteSettingsResponse.model_validate(row)
    return response.model_copy(update={"whatsapp_link": whatsapp_link(response.whatsapp_number)})
