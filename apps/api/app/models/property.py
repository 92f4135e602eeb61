"""Property listing model."""
from __future__ import annotations

from datetime import datetime, timezone
import enum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Enum, Float, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base

if TYPE_CHECKING:
    from .property_image import PropertyImage


class PropertyType(str, enum.Enum):
    HOUSE = "house"
    APARTMENT = "apartment"
    LAND = "land"
    COMMERCIAL = "commercial"
    COUNTRY = "country"
    CONDO = "condo"


class PropertyStatus(str, enum.Enum):
    FOR_SALE = "for_sale"
    FOR_RENT = "for_rent"
    BOTH = "both"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Property(Base):
    """A listing shown in the public catalog and managed from the back-office."""

    __tablename__ = "properties"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False, index=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    price: Mapped[float] = mapped_column(Numeric(14, 2), nullable=False)
    property_type: Mapped[PropertyType] = mapped_column(Enum(PropertyType, name="property_type"), nullable=False)
    status: Mapped[PropertyStatus] = mapped_column(
        Enum(PropertyStatus, name="property_status"), default=PropertyStatus.FOR_SALE, nullable=False
    )
    total_area: Mapped[float | None] = mapped_column(Float)
    built_area: Mapped[float | None] = mapped_column(Float)
    bedrooms: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    bathrooms: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    parking_spots: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    address_street: Mapped[str | None] = mapped_column(String)
    address_number: Mapped[str | None] = mapped_column(String)
    address_neighborhood: Mapped[str | None] = mapped_column(String)
    address_city: Mapped[str] = mapped_column(String, nullable=False, index=True)
    address_state: Mapped[str | None] = mapped_column(String)
    address_postal_code: Mapped[str | None] = mapped_column(String)
    latitude: Mapped[float | None] = mapped_column(Float)
    longitude: Mapped[float | None] = mapped_column(Float)

    images: Mapped[list["PropertyImage"]] = relationship(
        "PropertyImage",
        back_populates="property",
        cascade="all, delete-orphan",
        order_by="PropertyImage.position",
    )
