"""Public catalog endpoints: search, detail, favorites, consent and interactions."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.session import get_session
from ..schemas import properties as schemas
from ..services import catalog as catalog_service
from ..services import consent as consent_service
from ..services import interactions as interactions_service
from ..services.session_store import BrowserSession, get_browser_session

router = APIRouter()


@router.get("/properties", response_model=schemas.PropertySearchResponse)
async def search_properties(
    request: Request,
    browser: BrowserSession = Depends(get_browser_session),
    session: AsyncSession = Depends(get_session),
) -> schemas.PropertySearchResponse:
    """Search the catalog using the same query string the listing page keeps in its URL."""

    return await catalog_service.search_properties(dict(request.query_params), browser, session)


@router.get("/properties/cities", response_model=schemas.CitiesResponse)
async def list_cities(session: AsyncSession = Depends(get_session)) -> schemas.CitiesResponse:
    """Return the cities offered in the location filter."""

    return await catalog_service.list_cities(session)


@router.get("/properties/{property_id}", response_model=schemas.PropertyDetail)
async def get_property(
    property_id: str,
    browser: BrowserSession = Depends(get_browser_session),
    session: AsyncSession = Depends(get_session),
) -> schemas.PropertyDetail:
    return await catalog_service.get_property_detail(property_id, browser, session)


@router.get("/favorites", response_model=schemas.FavoritesResponse)
async def list_favorites(browser: BrowserSession = Depends(get_browser_session)) -> schemas.FavoritesResponse:
    return schemas.FavoritesResponse(favorites=sorted(browser.favorites.ids))


@router.post("/favorites/{property_id}/toggle", response_model=schemas.ToggleFavoriteResponse)
async def toggle_favorite(
    property_id: str,
    browser: BrowserSession = Depends(get_browser_session),
) -> schemas.ToggleFavoriteResponse:
    """Add or remove a favorite; every view of this browser sees the change."""

    return catalog_service.toggle_favorite(property_id, browser)


@router.get("/consent", response_model=schemas.ConsentResponse)
async def get_consent(browser: BrowserSession = Depends(get_browser_session)) -> schemas.ConsentResponse:
    return consent_service.load_consent(browser.preferences)


@router.put("/consent", response_model=schemas.ConsentResponse)
async def save_consent(
    payload: schemas.ConsentPayload,
    browser: BrowserSession = Depends(get_browser_session),
) -> schemas.ConsentResponse:
    return consent_service.save_consent(browser.preferences, payload)


@router.delete("/consent", response_model=schemas.ConsentResponse)
async def reset_consent(browser: BrowserSession = Depends(get_browser_session)) -> schemas.ConsentResponse:
    return consent_service.reset_consent(browser.preferences)


@router.post("/interactions", response_model=schemas.InteractionCreated, status_code=status.HTTP_201_CREATED)
async def track_interaction(
    payload: schemas.InteractionCreate,
    session: AsyncSession = Depends(get_session),
) -> schemas.InteractionCreated:
    """Record a page view or contact click for the dashboard."""

    return await interactions_service.track_interaction(payload, session)
