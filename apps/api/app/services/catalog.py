"""Business logic for the public catalog and the back-office listing manager."""
from __future__ import annotations

from dataclasses import asdict
from functools import partial
from typing import Mapping

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..repositories import properties as properties_repo
from ..schemas import admin as admin_schemas
from ..schemas import properties as schemas
from . import search
from .session_store import BrowserSession

# Optional columns an update may reset to null; nulls for any other field are ignored.
CLEARABLE_FIELDS = frozenset(
    {
        "total_area",
        "built_area",
        "address_street",
        "address_number",
        "address_neighborhood",
        "address_state",
        "address_postal_code",
        "latitude",
        "longitude",
    }
)


async def search_properties(
    params: Mapping[str, str],
    browser: BrowserSession,
    session: AsyncSession,
) -> schemas.PropertySearchResponse:
    """Run the visitor's search from its query-string mirror.

    Store failures come back as an empty result with ``error`` set. If a newer
    search from the same browser started while this one was in flight, the
    response is flagged ``superseded`` and carries no results.
    """

    criteria = search.criteria_from_params(params)
    echoed = search.criteria_to_params(criteria)

    result = await browser.search.search(criteria, partial(properties_repo.query_properties, session))
    if result is None:
        return schemas.PropertySearchResponse(results=[], total=0, superseded=True, params=echoed)

    cards = [_to_card(record) for record in result.records]
    return schemas.PropertySearchResponse(results=cards, total=len(cards), error=result.error, params=echoed)


async def get_property_detail(
    property_id: str,
    browser: BrowserSession,
    session: AsyncSession,
) -> schemas.PropertyDetail:
    prop = await properties_repo.get_by_id(session, property_id)
    if prop is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Property not found")

    record = properties_repo.to_record(prop)
    return schemas.PropertyDetail(
        code=search.short_code(record.id),
        is_favorite=browser.favorites.is_favorite(record.id),
        **asdict(record),
    )


async def list_cities(session: AsyncSession) -> schemas.CitiesResponse:
    return schemas.CitiesResponse(cities=await properties_repo.list_cities(session))


def toggle_favorite(property_id: str, browser: BrowserSession) -> schemas.ToggleFavoriteResponse:
    is_favorite = browser.favorites.toggle(property_id)
    return schemas.ToggleFavoriteResponse(
        property_id=property_id,
        is_favorite=is_favorite,
        favorites=sorted(browser.favorites.ids),
    )


async def list_admin_properties(
    session: AsyncSession,
    *,
    search_term: str | None,
    status_filter: str,
    type_filter: str,
    sort_key: str,
    direction: str,
) -> list[schemas.PropertyCard]:
    """Full catalog for the listing manager, filtered and sorted in memory."""

    records = await properties_repo.query_properties(session, properties_repo.PropertyQuery())
    try:
        ordered = search.filter_and_sort_admin(
            records,
            search_term=search_term,
            status=status_filter,
            property_type=type_filter,
            sort_key=sort_key,
            direction=direction,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return [_to_card(record) for record in ordered]


async def create_property(
    payload: admin_schemas.PropertyWrite,
    session: AsyncSession,
) -> admin_schemas.PropertySaved:
    async with session.begin():
        prop = await properties_repo.create_property(
            session,
            values=payload.model_dump(exclude={"images"}),
            image_urls=payload.images,
        )
    return admin_schemas.PropertySaved(id=prop.id)


async def update_property(
    property_id: str,
    payload: admin_schemas.PropertyUpdate,
    session: AsyncSession,
) -> admin_schemas.PropertySaved:
    """Apply only the fields the client sent; ``images`` replaces the gallery when present."""

    async with session.begin():
        prop = await properties_repo.get_by_id(session, property_id)
        if prop is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Property not found")

        image_urls = payload.images if "images" in payload.model_fields_set else None
        values = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True, exclude={"images"}).items()
            if value is not None or key in CLEARABLE_FIELDS
        }
        properties_repo.apply_changes(
            prop,
            values=values,
            image_urls=image_urls,
        )
        session.add(prop)
    return admin_schemas.PropertySaved(id=property_id)


async def delete_property(property_id: str, session: AsyncSession) -> None:
    async with session.begin():
        deleted = await properties_repo.delete_properties(session, [property_id])
        if not deleted:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Property not found")


async def bulk_delete(
    payload: admin_schemas.BulkDeleteRequest,
    session: AsyncSession,
) -> admin_schemas.BulkDeleteResponse:
    async with session.begin():
        deleted = await properties_repo.delete_properties(session, payload.ids)
    return admin_schemas.BulkDeleteResponse(deleted=deleted)


async def set_featured(
    property_id: str,
    payload: admin_schemas.FeaturedRequest,
    session: AsyncSession,
) -> admin_schemas.PropertySaved:
    async with session.begin():
        prop = await properties_repo.get_by_id(session, property_id)
        if prop is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Property not found")
        prop.featured = payload.featured
        session.add(prop)
    return admin_schemas.PropertySaved(id=property_id)


def _to_card(record: properties_repo.PropertyRecord) -> schemas.PropertyCard:
    return schemas.PropertyCard(code=search.short_code(record.id), **asdict(record))
