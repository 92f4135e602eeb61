"""Data access helpers for property listings."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
import enum
from typing import Any, Iterable, Sequence
from uuid import uuid4

from sqlalchemy import ColumnElement, delete, false, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models.property import Property, PropertyStatus, PropertyType
from ..models.property_image import PropertyImage


class Operator(str, enum.Enum):
    EQ = "eq"
    GTE = "gte"
    LTE = "lte"


@dataclass(frozen=True, slots=True)
class Predicate:
    """Single filter condition over a :class:`PropertyRecord` field."""

    field: str
    op: Operator
    value: Any

    def matches(self, record: object) -> bool:
        """Evaluate the predicate against an in-memory record."""

        actual = getattr(record, self.field, None)
        if actual is None:
            return False
        if self.op is Operator.EQ:
            return actual == self.value
        if self.op is Operator.GTE:
            return actual >= self.value
        return actual <= self.value


@dataclass(frozen=True, slots=True)
class OrderBy:
    field: str = "created_at"
    descending: bool = True


@dataclass(frozen=True, slots=True)
class PropertyQuery:
    """Store-agnostic description of a catalog query: conjunctive predicates plus ordering."""

    predicates: tuple[Predicate, ...] = ()
    order_by: OrderBy = field(default_factory=OrderBy)


@dataclass(frozen=True, slots=True)
class PropertyRecord:
    """Flattened, read-only listing used by the service layer."""

    id: str
    title: str
    property_type: str
    status: str
    city: str
    neighborhood: str | None
    price: float
    bedrooms: int
    bathrooms: int
    parking_spots: int
    total_area: float | None
    featured: bool
    created_at: datetime
    description: str = ""
    images: tuple[str, ...] = ()


_COLUMNS = {
    "id": Property.id,
    "title": Property.title,
    "property_type": Property.property_type,
    "status": Property.status,
    "city": Property.address_city,
    "neighborhood": Property.address_neighborhood,
    "price": Property.price,
    "bedrooms": Property.bedrooms,
    "bathrooms": Property.bathrooms,
    "parking_spots": Property.parking_spots,
    "total_area": Property.total_area,
    "featured": Property.featured,
    "created_at": Property.created_at,
}

_ENUM_FIELDS: dict[str, type[enum.Enum]] = {
    "property_type": PropertyType,
    "status": PropertyStatus,
}


def to_record(prop: Property) -> PropertyRecord:
    """Flatten an ORM listing and its images."""

    return PropertyRecord(
        id=prop.id,
        title=prop.title,
        property_type=_enum_value(prop.property_type),
        status=_enum_value(prop.status),
        city=prop.address_city,
        neighborhood=prop.address_neighborhood,
        price=float(prop.price),
        bedrooms=prop.bedrooms,
        bathrooms=prop.bathrooms,
        parking_spots=prop.parking_spots,
        total_area=prop.total_area,
        featured=prop.featured,
        created_at=prop.created_at,
        description=prop.description or "",
        images=tuple(image.url for image in prop.images or []),
    )


def predicate_clause(predicate: Predicate) -> ColumnElement[bool]:
    """Translate a predicate into a SQL boolean clause."""

    column = _COLUMNS.get(predicate.field)
    if column is None:
        raise ValueError(f"Unsupported filter field: {predicate.field}")

    value = predicate.value
    enum_cls = _ENUM_FIELDS.get(predicate.field)
    if enum_cls is not None:
        try:
            value = enum_cls(value)
        except ValueError:
            # Unknown enum values can never match a stored row.
            return false()

    if predicate.op is Operator.EQ:
        return column == value
    if predicate.op is Operator.GTE:
        return column >= value
    return column <= value


async def query_properties(session: AsyncSession, query: PropertyQuery) -> list[PropertyRecord]:
    """Return listings matching every predicate of the query, in the requested order."""

    stmt = select(Property).options(selectinload(Property.images))
    for predicate in query.predicates:
        stmt = stmt.where(predicate_clause(predicate))

    order_column = _COLUMNS[query.order_by.field]
    stmt = stmt.order_by(order_column.desc() if query.order_by.descending else order_column.asc())

    rows: Sequence[Property] = (await session.execute(stmt)).scalars().all()
    return [to_record(prop) for prop in rows]


async def get_by_id(session: AsyncSession, property_id: str) -> Property | None:
    """Return a listing with its images loaded."""

    stmt = select(Property).options(selectinload(Property.images)).where(Property.id == property_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def list_cities(session: AsyncSession) -> list[str]:
    """Distinct, sorted cities that currently have listings."""

    stmt = select(Property.address_city).where(Property.address_city.is_not(None)).distinct()
    result = await session.execute(stmt)
    return sorted({city for city in result.scalars().all() if city})


async def create_property(
    session: AsyncSession,
    *,
    values: dict[str, Any],
    image_urls: Iterable[str] = (),
) -> Property:
    """Insert a listing and its image rows."""

    prop = Property(id=str(uuid4()), **values)
    prop.images = _build_images(prop.id, image_urls)
    session.add(prop)
    await session.flush()
    return prop


def apply_changes(prop: Property, *, values: dict[str, Any], image_urls: Iterable[str] | None = None) -> Property:
    """Copy updated column values onto a loaded listing, replacing images when supplied."""

    for key, value in values.items():
        setattr(prop, key, value)
    if image_urls is not None:
        prop.images = _build_images(prop.id, image_urls)
    return prop


async def delete_properties(session: AsyncSession, property_ids: Sequence[str]) -> int:
    """Delete listings (images cascade) and return the affected row count."""

    if not property_ids:
        return 0
    await session.execute(delete(PropertyImage).where(PropertyImage.property_id.in_(property_ids)))
    result = await session.execute(delete(Property).where(Property.id.in_(property_ids)))
    return int(result.rowcount or 0)


async def count_properties(session: AsyncSession, *, featured: bool | None = None) -> int:
    """Count listings, optionally restricted to featured ones."""

    stmt = select(func.count()).select_from(Property)
    if featured is not None:
        stmt = stmt.where(Property.featured.is_(featured))
    result = await session.execute(stmt)
    return int(result.scalar_one())


async def list_property_types(session: AsyncSession) -> list[str]:
    """Return the type of every listing; counting happens in the service layer."""

    result = await session.execute(select(Property.property_type))
    return [_enum_value(value) for value in result.scalars().all()]


def _build_images(property_id: str, image_urls: Iterable[str]) -> list[PropertyImage]:
    return [
        PropertyImage(id=str(uuid4()), property_id=property_id, url=url, position=position)
        for position, url in enumerate(url for url in image_urls if url)
    ]


def _enum_value(value: object) -> str:
    return value.value if isinstance(value, enum.Enum) else str(value)
