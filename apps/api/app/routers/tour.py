"""Admin onboarding tour endpoints.

The front-end reports the page it is on and which tour anchors are rendered;
the returned state tells it whether to show the tour, which step, and where
to navigate next.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from ..schemas import tour as tour_schema
from ..services.session_store import BrowserSession, get_browser_session
from ..services.tour import Step

router = APIRouter()


@router.post("/mount", response_model=tour_schema.TourStateResponse)
async def mount_tour(
    payload: tour_schema.TourMountRequest,
    browser: BrowserSession = Depends(get_browser_session),
) -> tour_schema.TourStateResponse:
    """Enter an admin page. The tour becomes ready after a short settle delay; poll ``GET``."""

    browser.navigator.sync(payload.path)
    browser.elements.replace(payload.targets)
    browser.tour.mount()
    return _snapshot(browser)


@router.get("", response_model=tour_schema.TourStateResponse)
async def get_tour(browser: BrowserSession = Depends(get_browser_session)) -> tour_schema.TourStateResponse:
    return _snapshot(browser)


@router.post("/advance", response_model=tour_schema.TourStateResponse)
async def advance_tour(
    payload: tour_schema.TourAdvanceRequest,
    browser: BrowserSession = Depends(get_browser_session),
) -> tour_schema.TourStateResponse:
    browser.tour.advance(payload.action, payload.index)
    return _snapshot(browser)


@router.post("/restart", response_model=tour_schema.TourStateResponse)
async def restart_tour(browser: BrowserSession = Depends(get_browser_session)) -> tour_schema.TourStateResponse:
    browser.tour.restart_all()
    return _snapshot(browser)


@router.post("/restart-section", response_model=tour_schema.TourStateResponse)
async def restart_section(
    payload: tour_schema.TourRestartSectionRequest,
    browser: BrowserSession = Depends(get_browser_session),
) -> tour_schema.TourStateResponse:
    """Replay one section. Without ``confirmed`` nothing changes."""

    browser.tour.restart_section(payload.section, confirmed=payload.confirmed)
    return _snapshot(browser)


@router.delete("", response_model=tour_schema.TourStateResponse)
async def unmount_tour(browser: BrowserSession = Depends(get_browser_session)) -> tour_schema.TourStateResponse:
    """Leave the admin area; pending tour timers are cancelled."""

    browser.tour.unmount()
    return _snapshot(browser)


def _snapshot(browser: BrowserSession) -> tour_schema.TourStateResponse:
    tour = browser.tour
    state = tour.state
    current = tour.current_step
    return tour_schema.TourStateResponse(
        is_running=state.is_running,
        is_initialized=state.is_initialized,
        current_step_index=state.current_step_index,
        current_section=state.current_section,
        completed_sections=sorted(state.completed_sections, key=lambda section: section.value),
        overall_status=tour.overall_status,
        current_path=browser.navigator.current_path(),
        steps=[_step(step) for step in tour.steps],
        current_step=_step(current) if current is not None else None,
    )


def _step(step: Step) -> tour_schema.TourStep:
    return tour_schema.TourStep(
        target=step.target,
        content=step.content,
        placement=step.placement,
        is_first=step.is_first,
    )
