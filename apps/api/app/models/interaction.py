"""Visitor interaction model."""
from __future__ import annotations

from datetime import datetime, timezone
import enum

from sqlalchemy import DateTime, Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class InteractionType(str, enum.Enum):
    VIEW = "view"
    WHATSAPP = "whatsapp"
    PHONE = "phone"
    EMAIL = "email"


class InteractionSource(str, enum.Enum):
    NAVBAR = "navbar"
    FOOTER = "footer"
    FLOATING = "floating"
    PROPERTY_DETAILS = "property_details"
    PROPERTY_CARD = "property_card"


class Interaction(Base):
    """Contact or page-view event counted on the admin dashboard."""

    __tablename__ = "interactions"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    type: Mapped[InteractionType] = mapped_column(Enum(InteractionType, name="interaction_type"), nullable=False)
    source: Mapped[InteractionSource] = mapped_column(
        Enum(InteractionSource, name="interaction_source"), nullable=False
    )
    device_type: Mapped[str] = mapped_column(String, default="desktop", nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False, index=True
    )
