"""Schemas for admin API."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from ..models.property import PropertyStatus, PropertyType


class PropertyWrite(BaseModel):
    title: str = Field(min_length=1)
    description: str = ""
    price: float = Field(ge=0)
    property_type: PropertyType
    status: PropertyStatus = PropertyStatus.FOR_SALE
    total_area: float | None = Field(default=None, ge=0)
    built_area: float | None = Field(default=None, ge=0)
    bedrooms: int = Field(default=0, ge=0)
    bathrooms: int = Field(default=0, ge=0)
    parking_spots: int = Field(default=0, ge=0)
    featured: bool = False
    address_street: str | None = None
    address_number: str | None = None
    address_neighborhood: str | None = None
    address_city: str = Field(min_length=1)
    address_state: str | None = None
    address_postal_code: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    images: list[str] = Field(default_factory=list)


class PropertyUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    price: float | None = Field(default=None, ge=0)
    property_type: PropertyType | None = None
    status: PropertyStatus | None = None
    total_area: float | None = Field(default=None, ge=0)
    built_area: float | None = Field(default=None, ge=0)
    bedrooms: int | None = Field(default=None, ge=0)
    bathrooms: int | None = Field(default=None, ge=0)
    parking_spots: int | None = Field(default=None, ge=0)
    featured: bool | None = None
    address_street: str | None = None
    address_number: str | None = None
    address_neighborhood: str | None = None
    address_city: str | None = Field(default=None, min_length=1)
    address_state: str | None = None
    address_postal_code: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    images: list[str] | None = None


class PropertySaved(BaseModel):
    id: str


class BulkDeleteRequest(BaseModel):
    ids: list[str] = Field(min_length=1)


class BulkDeleteResponse(BaseModel):
    deleted: int


class FeaturedRequest(BaseModel):
    featured: bool


class HourlyInteractions(BaseModel):
    hour: str
    views: int = 0
    whatsapp: int = 0
    phone: int = 0
    email: int = 0


class DashboardStats(BaseModel):
    total_properties: int
    featured_properties: int
    active_properties: int
    total_views: int
    total_leads: int
    total_whatsapp: int
    total_phone: int
    total_email: int
    conversion_rate: float


class PropertyTypeCount(BaseModel):
    type: str
    count: int


class DashboardResponse(BaseModel):
    stats: DashboardStats
    hourly: list[HourlyInteractions]
    property_types: list[PropertyTypeCount]


class SiteSettingsUpdate(BaseModel):
    whatsapp_number: str | None = None
    email_contact: str | None = None
    phone_contact: str | None = None
    instagram_url: str | None = None
    facebook_url: str | None = None
    youtube_url: str | None = None
    linkedin_url: str | None = None
    company_name: str | None = None
    company_address: str | None = None
    company_creci: str | None = None
    company_postal_code: str | None = None
    company_city: str | None = None


class SiteSettingsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    whatsapp_number: str = ""
    email_contact: str = ""
    phone_contact: str = ""
    instagram_url: str = ""
    facebook_url: str = ""
    youtube_url: str = ""
    linkedin_url: str = ""
    company_name: str = ""
    company_address: str = ""
    company_creci: str = ""
    company_postal_code: str = ""
    company_city: str = ""
    updated_at: datetime | None = None
    whatsapp_link: str = ""
