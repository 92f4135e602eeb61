"""Expose ORM models."""
from .interaction import Interaction, InteractionSource, InteractionType
from .property import Property, PropertyStatus, PropertyType
from .property_image import PropertyImage
from .site_settings import SiteSettings

__all__ = [
    "Interaction",
    "InteractionSource",
    "InteractionType",
    "Property",
    "PropertyImage",
    "PropertyStatus",
    "PropertyType",
    "SiteSettings",
]
