"""Admin endpoints for listings, dashboard counters and site settings."""
from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import get_session
from ..schemas import admin as admin_schema
from ..schemas import properties as properties_schema
from ..services import catalog as catalog_service
from ..services import dashboard as dashboard_service
from ..services import site_settings as settings_service

router = APIRouter()


@router.get("/properties", response_model=list[properties_schema.PropertyCard])
async def list_properties(
    q: str | None = None,
    status_filter: str = Query(default="all", alias="status"),
    type_filter: str = Query(default="all", alias="type"),
    sort: str = "created_at",
    direction: Literal["asc", "desc"] = "desc",
    session: AsyncSession = Depends(get_session),
) -> list[properties_schema.PropertyCard]:
    """Return every listing, filtered and sorted for the listing manager table."""

    return await catalog_service.list_admin_properties(
        session,
        search_term=q,
        status_filter=status_filter,
        type_filter=type_filter,
        sort_key=sort,
        direction=direction,
    )


@router.post("/properties", response_model=admin_schema.PropertySaved, status_code=status.HTTP_201_CREATED)
async def create_property(
    payload: admin_schema.PropertyWrite,
    session: AsyncSession = Depends(get_session),
) -> admin_schema.PropertySaved:
    return await catalog_service.create_property(payload, session)


@router.put("/properties/{property_id}", response_model=admin_schema.PropertySaved)
async def update_property(
    property_id: str,
    payload: admin_schema.PropertyUpdate,
    session: AsyncSession = Depends(get_session),
) -> admin_schema.PropertySaved:
    return await catalog_service.update_property(property_id, payload, session)


@router.delete("/properties/{property_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_property(property_id: str, session: AsyncSession = Depends(get_session)) -> Response:
    await catalog_service.delete_property(property_id, session)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/properties/bulk-delete", response_model=admin_schema.BulkDeleteResponse)
async def bulk_delete(
    payload: admin_schema.BulkDeleteRequest,
    session: AsyncSession = Depends(get_session),
) -> admin_schema.BulkDeleteResponse:
    return await catalog_service.bulk_delete(payload, session)


@router.post("/properties/{property_id}/featured", response_model=admin_schema.PropertySaved)
async def set_featured(
    property_id: str,
    payload: admin_schema.FeaturedRequest,
    session: AsyncSession = Depends(get_session),
) -> admin_schema.PropertySaved:
    return await catalog_service.set_featured(property_id, payload, session)


@router.get("/dashboard", response_model=admin_schema.DashboardResponse)
async def get_dashboard(session: AsyncSession = Depends(get_session)) -> admin_schema.DashboardResponse:
    """Listing totals and the last 24 hours of interactions."""

    return await dashboard_service.get_dashboard(session)


@router.get("/settings", response_model=admin_schema.SiteSettingsResponse)
async def get_settings(session: AsyncSession = Depends(get_session)) -> admin_schema.SiteSettingsResponse:
    return await settings_service.get_site_settings(session)


@router.put("/settings", response_model=admin_schema.SiteSettingsResponse)
async def update_settings(
    payload: admin_schema.SiteSettingsUpdate,
    session: AsyncSession = Depends(get_session),
) -> admin_schema.SiteSettingsResponse:
    return await settings_service.update_site_settings(payload, session)
