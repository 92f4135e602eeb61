"""Site-wide contact and company settings."""
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

GENERAL_SETTINGS_ID = "general"


class SiteSettings(Base):
    """Single-row table edited from the admin settings page."""

    __tablename__ = "site_settings"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=GENERAL_SETTINGS_ID)
    whatsapp_number: Mapped[str] = mapped_column(String, default="", nullable=False)
    email_contact: Mapped[str] = mapped_column(String, default="", nullable=False)
    phone_contact: Mapped[str] = mapped_column(String, default="", nullable=False)
    instagram_url: Mapped[str] = mapped_column(String, default="", nullable=False)
    facebook_url: Mapped[str] = mapped_column(String, default="", nullable=False)
    youtube_url: Mapped[str] = mapped_column(String, default="", nullable=False)
    linkedin_url: Mapped[str] = mapped_column(String, default="", nullable=False)
    company_name: Mapped[str] = mapped_column(String, default="", nullable=False)
    company_address: Mapped[str] = mapped_column(String, default="", nullable=False)
    company_creci: Mapped[str] = mapped_column(String, default="", nullable=False)
    company_postal_code: Mapped[str] = mapped_column(String, default="", nullable=False)
    company_city: Mapped[str] = mapped_column(String, default="", nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
