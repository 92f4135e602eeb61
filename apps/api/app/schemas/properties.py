"""Schemas for the public catalog."""
from __future__ import annotations

import math
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.interaction import InteractionSource, InteractionType


def parse_number(value: object) -> float | None:
    """Coerce form input to a number; anything non-numeric becomes ``None``."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


class FilterCriteria(BaseModel):
    """Immutable snapshot of the visitor's search form."""

    model_config = ConfigDict(frozen=True)

    property_type: str | None = None
    city: str | None = None
    price_range: str | None = None
    custom_price_min: float | None = None
    custom_price_max: float | None = None
    min_bedrooms: int | None = None
    min_parking_spots: int | None = None
    code_fragment: str | None = None
    favorites_only: bool = False

    @field_validator("property_type", "city", "price_range", "code_fragment", mode="before")
    @classmethod
    def _blank_as_absent(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator("custom_price_min", "custom_price_max", mode="before")
    @classmethod
    def _coerce_price(cls, value: object) -> float | None:
        return parse_number(value)

    @field_validator("min_bedrooms", "min_parking_spots", mode="before")
    @classmethod
    def _coerce_minimum(cls, value: object) -> int | None:
        number = parse_number(value)
        return int(number) if number is not None else None

    @field_validator("favorites_only", mode="before")
    @classmethod
    def _coerce_flag(cls, value: object) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in {"true", "1", "yes"}
        return bool(value)


class PropertyCard(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    code: str
    title: str
    property_type: str
    status: str
    city: str
    neighborhood: str | None = None
    price: float
    bedrooms: int
    bathrooms: int
    parking_spots: int
    total_area: float | None = None
    featured: bool = False
    created_at: datetime
    images: list[str] = Field(default_factory=list)


class PropertyDetail(PropertyCard):
    description: str = ""
    is_favorite: bool = False


class PropertySearchResponse(BaseModel):
    results: list[PropertyCard]
    total: int
    error: str | None = None
    superseded: bool = False
    params: dict[str, str] = Field(default_factory=dict)


class CitiesResponse(BaseModel):
    cities: list[str]


class FavoritesResponse(BaseModel):
    favorites: list[str]


class ToggleFavoriteResponse(BaseModel):
    property_id: str
    is_favorite: bool
    favorites: list[str]


class ConsentPayload(BaseModel):
    necessary: bool = True
    analytics: bool = False
    marketing: bool = False
    personalization: bool = False


class ConsentResponse(BaseModel):
    preferences: ConsentPayload
    has_consent: bool


class InteractionCreate(BaseModel):
    type: InteractionType
    source: InteractionSource
    device_type: str = Field(default="desktop")


class InteractionCreated(BaseModel):
    id: str
    created_at: datetime
