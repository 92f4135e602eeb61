"""Tests for the admin onboarding tour controller."""
from __future__ import annotations

import pytest

from app.services.preferences import InMemoryPreferenceStore
from app.services.tour import (
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
    STATUS_KEY,
    STEP_TABLES,
    WHOLE_PAGE,
    TourController,
    TourSection,
    seen_key,
    section_for_path,
)
from app.services.view import RecordedNavigator, ReportedElements

ALL_ANCHORS = {step.target for table in STEP_TABLES.values() for step in table if step.target != WHOLE_PAGE}


def make_tour(*, path="/admin", preferences=None, anchors=ALL_ANCHORS, settle=0, transition=0):
    store = InMemoryPreferenceStore(preferences)
    navigator = RecordedNavigator(path)
    tour = TourController(
        store,
        navigator,
        ReportedElements(anchors),
        settle_delay=settle,
        transition_delay=transition,
    )
    return tour, store, navigator


async def start(tour):
    tour.mount()
    await tour.drain()


@pytest.mark.asyncio
async def test_first_visit_starts_after_settle_delay():
    tour, _, _ = make_tour()

    tour.mount()

    assert tour.state.is_initialized is False
    assert tour.state.is_running is False
    assert tour.has_pending_timers

    await tour.drain()

    assert tour.state.is_initialized is True
    assert tour.state.is_running is True
    assert tour.state.current_section is TourSection.DASHBOARD
    assert tour.current_step.is_first
    assert tour.current_step.target == WHOLE_PAGE


@pytest.mark.asyncio
async def test_completed_tour_never_starts():
    tour, _, navigator = make_tour(preferences={STATUS_KEY: STATUS_COMPLETED})

    tour.mount()

    assert tour.state.is_initialized is True
    assert tour.state.is_running is False
    assert not tour.has_pending_timers
    assert tour.current_step is None
    assert navigator.history == []


@pytest.mark.asyncio
async def test_seen_section_does_not_restart():
    tour, _, _ = make_tour(
        path="/admin/properties",
        preferences={STATUS_KEY: STATUS_IN_PROGRESS, seen_key(TourSection.PROPERTIES): "true"},
    )

    await start(tour)

    assert tour.state.is_running is False
    assert tour.state.is_initialized is True
    assert TourSection.PROPERTIES in tour.state.completed_sections


@pytest.mark.asyncio
async def test_corrupt_status_is_treated_as_unset():
    tour, _, _ = make_tour(preferences={STATUS_KEY: "maybe"})

    await start(tour)

    assert tour.overall_status is None
    assert tour.state.is_running is True


@pytest.mark.asyncio
async def test_next_prev_and_error_move_the_index():
    tour, _, _ = make_tour()
    await start(tour)

    tour.advance("prev")
    assert tour.state.current_step_index == 0

    tour.advance("next")
    tour.advance("next")
    tour.advance("prev")
    assert tour.state.current_step_index == 1

    tour.advance("error")
    assert tour.state.current_step_index == 2
    assert tour.state.is_running is True


@pytest.mark.asyncio
async def test_unknown_action_is_ignored():
    tour, store, _ = make_tour()
    await start(tour)

    tour.advance("dance")

    assert tour.state.is_running is True
    assert tour.state.current_step_index == 0
    assert store.get(STATUS_KEY) is None


@pytest.mark.asyncio
async def test_finishing_a_section_moves_to_the_next():
    tour, store, navigator = make_tour()
    await start(tour)

    tour.advance("finished")

    assert tour.state.is_running is False
    assert store.get(STATUS_KEY) == STATUS_IN_PROGRESS
    assert store.get(seen_key(TourSection.DASHBOARD)) == "true"
    assert TourSection.DASHBOARD in tour.state.completed_sections

    await tour.drain()

    assert navigator.history == ["/admin/properties"]
    assert tour.state.current_section is TourSection.PROPERTIES
    assert tour.state.current_step_index == 0
    assert tour.state.is_running is True


@pytest.mark.asyncio
async def test_finishing_the_last_section_completes_the_tour():
    tour, store, navigator = make_tour(path="/admin/settings")
    await start(tour)
    tour.advance("next")
    tour.advance("next")

    tour.advance("finished")
    await tour.drain()

    assert store.get(STATUS_KEY) == STATUS_COMPLETED
    assert tour.state.is_running is False
    assert navigator.history == []

    tour.unmount()
    tour.mount()
    assert tour.state.is_running is False
    assert not tour.has_pending_timers


@pytest.mark.asyncio
async def test_skip_completes_the_whole_tour():
    tour, store, navigator = make_tour()
    await start(tour)

    tour.advance("skip")
    await tour.drain()

    assert store.get(STATUS_KEY) == STATUS_COMPLETED
    assert tour.state.is_running is False
    assert navigator.history == []


@pytest.mark.asyncio
async def test_finish_on_last_step_index_is_terminal():
    tour, store, navigator = make_tour()
    await start(tour)
    last_index = len(tour.steps) - 1

    tour.advance("finished", index=last_index)
    await tour.drain()

    assert store.get(STATUS_KEY) == STATUS_COMPLETED
    assert navigator.history == []


@pytest.mark.asyncio
async def test_missing_anchors_are_left_out():
    tour, _, _ = make_tour(anchors={'[data-tutorial="nav-menu"]'})
    await start(tour)

    assert [step.target for step in tour.steps] == [WHOLE_PAGE, '[data-tutorial="nav-menu"]']


@pytest.mark.asyncio
async def test_unmount_cancels_pending_transition():
    tour, store, navigator = make_tour(transition=10)
    await start(tour)

    tour.advance("finished")
    assert tour.has_pending_timers

    tour.unmount()
    await tour.drain()

    assert navigator.history == []
    assert tour.state.is_running is False
    assert tour.state.current_section is TourSection.DASHBOARD
    assert store.get(seen_key(TourSection.DASHBOARD)) == "true"


@pytest.mark.asyncio
async def test_unmount_cancels_pending_settle():
    tour, _, _ = make_tour(settle=10)

    tour.mount()
    tour.unmount()
    await tour.drain()

    assert tour.state.is_running is False
    assert tour.state.is_initialized is False


@pytest.mark.asyncio
async def test_restart_all_clears_progress():
    tour, store, navigator = make_tour(
        path="/admin/settings",
        preferences={
            STATUS_KEY: STATUS_COMPLETED,
            seen_key(TourSection.DASHBOARD): "true",
            seen_key(TourSection.PROPERTIES): "true",
        },
    )
    tour.mount()

    tour.restart_all()

    assert store.snapshot() == {}
    assert tour.state.completed_sections == set()
    assert tour.state.current_section is TourSection.DASHBOARD
    assert tour.state.is_running is True
    assert navigator.history == ["/admin"]


@pytest.mark.asyncio
async def test_restart_section_requires_confirmation():
    tour, store, _ = make_tour(
        path="/admin/properties",
        preferences={
            STATUS_KEY: STATUS_IN_PROGRESS,
            seen_key(TourSection.DASHBOARD): "true",
            seen_key(TourSection.PROPERTIES): "true",
        },
    )
    await start(tour)

    assert tour.restart_section() is False
    assert store.get(seen_key(TourSection.PROPERTIES)) == "true"
    assert tour.state.is_running is False

    assert tour.restart_section(confirmed=True) is True
    assert store.get(seen_key(TourSection.PROPERTIES)) is None
    assert store.get(seen_key(TourSection.DASHBOARD)) == "true"
    assert store.get(STATUS_KEY) == STATUS_IN_PROGRESS
    assert tour.state.is_running is True
    assert tour.state.current_step_index == 0


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/admin", TourSection.DASHBOARD),
        ("/admin/", TourSection.DASHBOARD),
        ("/admin/properties", TourSection.PROPERTIES),
        ("/admin/properties/new?draft=1", TourSection.PROPERTIES),
        ("/admin/settings", TourSection.SETTINGS),
        ("/admin/reports", TourSection.DASHBOARD),
    ],
)
def test_section_for_path(path, expected):
    assert section_for_path(path) is expected


@pytest.mark.asyncio
async def test_finishing_dashboard_from_its_last_step_moves_to_properties():
    tour, store, navigator = make_tour()
    await start(tour)
    while tour.state.current_step_index < len(tour.steps) - 1:
        tour.advance("next")

    tour.advance("finished")
    await tour.drain()

    assert store.get(STATUS_KEY) == STATUS_IN_PROGRESS
    assert navigator.history == ["/admin/properties"]
    assert tour.state.current_section is TourSection.PROPERTIES
    assert tour.state.current_step_index == 0
    assert tour.state.is_running is True


@pytest.mark.asyncio
async def test_repeated_finish_after_skip_keeps_tour_completed():
    tour, store, navigator = make_tour()
    await start(tour)

    tour.advance("skip")
    tour.advance("finished")
    await tour.drain()

    assert store.get(STATUS_KEY) == STATUS_COMPLETED
    assert store.get(seen_key(TourSection.DASHBOARD)) is None
    assert tour.state.is_running is False
    assert tour.state.current_section is TourSection.DASHBOARD
    assert navigator.history == []


@pytest.mark.asyncio
async def test_finish_before_tour_starts_is_ignored():
    tour, store, navigator = make_tour(settle=10)
    tour.mount()

    tour.advance("finished")
    tour.unmount()
    await tour.drain()

    assert store.get(STATUS_KEY) is None
    assert navigator.history == []


@pytest.mark.asyncio
async def test_restart_section_cancels_pending_transition():
    tour, store, navigator = make_tour(transition=10)
    await start(tour)
    tour.advance("finished")
    assert tour.has_pending_timers

    assert tour.restart_section(confirmed=True) is True
    await tour.drain()

    assert navigator.history == []
    assert tour.state.current_section is TourSection.DASHBOARD
    assert tour.state.is_running is True
    assert store.get(seen_key(TourSection.DASHBOARD)) is None
