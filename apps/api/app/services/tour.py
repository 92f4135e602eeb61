"""Guided onboarding tour for the admin back-office.

The tour walks a new admin through three sections in a fixed order
(dashboard, properties, settings). Each section has a static table of steps
anchored to elements of the page; steps whose anchor is not rendered are left
out. Progress is persisted in the browser's preference store so a finished
tour never comes back, and finishing one section navigates to the next one
and starts it after a short delay.

Timers run as asyncio tasks owned by the controller; :meth:`TourController.unmount`
cancels them so nothing fires once the admin area is left.
"""
from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass, field
from functools import partial
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Set

from ..core.config import settings
from .preferences import PreferenceStore
from .view import ElementProbe, Navigator

logger = logging.getLogger(__name__)


class TourSection(str, enum.Enum):
    DASHBOARD = "dashboard"
    PROPERTIES = "properties"
    SETTINGS = "settings"


class TourAction(str, enum.Enum):
    NEXT = "next"
    PREV = "prev"
    SKIP = "skip"
    FINISHED = "finished"
    ERROR = "error"


SECTION_ORDER: tuple[TourSection, ...] = (
    TourSection.DASHBOARD,
    TourSection.PROPERTIES,
    TourSection.SETTINGS,
)
SECTION_ROUTES: Mapping[TourSection, str] = MappingProxyType(
    {
        TourSection.DASHBOARD: "/admin",
        TourSection.PROPERTIES: "/admin/properties",
        TourSection.SETTINGS: "/admin/settings",
    }
)

WHOLE_PAGE = "body"

STATUS_KEY = "admin_tutorial_status"
SEEN_KEY_PREFIX = "admin_tutorial_seen_"
STATUS_IN_PROGRESS = "true"
STATUS_COMPLETED = "completed"


@dataclass(frozen=True)
class Step:
    target: str
    content: str
    placement: str = "bottom"
    is_first: bool = False


def _anchor(name: str) -> str:
    return f'[data-tutorial="{name}"]'


STEP_TABLES: Mapping[TourSection, tuple[Step, ...]] = MappingProxyType(
    {
        TourSection.DASHBOARD: (
            Step(
                WHOLE_PAGE,
                "Welcome to your admin panel! Let's take a quick tour of everything it can do.",
                placement="center",
                is_first=True,
            ),
            Step(_anchor("nav-menu"), "This is the main menu, which takes you to every section of the panel."),
            Step(_anchor("dashboard-link"), "The dashboard gives you an overview of your metrics and statistics."),
            Step(
                _anchor("dashboard-stats"),
                "Here are the key numbers for your site: views, leads, conversion rate and active listings.",
            ),
            Step(
                _anchor("dashboard-charts"),
                "These charts show interactions per hour and how your listings split by type.",
                placement="top",
            ),
            Step(_anchor("profile-menu"), "Your account options live here.", placement="left"),
        ),
        TourSection.PROPERTIES: (
            Step(
                _anchor("properties-header"),
                "Welcome to the listing manager. Add, edit, delete and organize every property in your catalog.",
                is_first=True,
            ),
            Step(
                _anchor("properties-add"),
                "Use this button to add a new listing through the full property form.",
                placement="left",
            ),
            Step(_anchor("properties-view-mode"), "Switch between the detailed list view and the image grid."),
            Step(_anchor("properties-search"), "Search listings by title, city, neighborhood or type."),
            Step(_anchor("properties-status-filter"), "Filter listings by deal status: sale, rent or both."),
            Step(_anchor("properties-type-filter"), "Filter by property type: house, apartment, land or commercial."),
            Step(_anchor("properties-total"), "How many listings match the current filters, and how many are selected."),
            Step(
                _anchor("properties-bulk-actions"),
                "With listings selected you can delete or feature them all at once.",
            ),
            Step(_anchor("properties-table-header"), "Click a column header to sort by title, price, date and more."),
            Step(
                _anchor("properties-checkbox"),
                "Select one or more listings here; the header checkbox selects the whole page.",
                placement="right",
            ),
            Step(
                _anchor("properties-featured"),
                "The star marks featured listings, which appear first on the public site.",
                placement="left",
            ),
            Step(
                _anchor("properties-actions"),
                "Quick actions for each listing: edit, delete, or open it on the public site.",
                placement="left",
            ),
            Step(
                WHOLE_PAGE,
                "That's the listing manager. Use these tools to keep your catalog current.",
                placement="center",
            ),
        ),
        TourSection.SETTINGS: (
            Step(
                _anchor("settings-header"),
                "Welcome to settings. Customize the panel and manage your preferences here.",
                is_first=True,
            ),
            Step(_anchor("settings-profile"), "Update your name, email, phone and profile picture."),
            Step(_anchor("settings-security"), "Change your password and set up two-step verification."),
            Step(_anchor("settings-notifications"), "Choose which lead, visit and interaction alerts you receive."),
            Step(_anchor("settings-appearance"), "Pick the theme, main colors and preferred layout."),
            Step(_anchor("settings-integrations"), "Connect analytics, WhatsApp and social networks."),
            Step(_anchor("settings-export"), "Set the export format (CSV or Excel) and the fields to include."),
            Step(_anchor("settings-tutorial"), "Restart this tour any time from here."),
            Step(
                WHOLE_PAGE,
                "You've finished the tour and know every tool for managing your catalog.",
                placement="center",
            ),
        ),
    }
)


def seen_key(section: TourSection) -> str:
    return f"{SEEN_KEY_PREFIX}{section.value}"


def section_for_path(path: str) -> TourSection:
    """Section named by the path segment after ``/admin/``; anything else is the dashboard."""

    segments = path.split("?", 1)[0].split("/")
    segment = segments[2] if len(segments) > 2 else ""
    try:
        return TourSection(segment)
    except ValueError:
        return TourSection.DASHBOARD


def next_section(section: TourSection) -> Optional[TourSection]:
    position = SECTION_ORDER.index(section)
    if position + 1 < len(SECTION_ORDER):
        return SECTION_ORDER[position + 1]
    return None


@dataclass
class TourRunState:
    is_running: bool = False
    current_step_index: int = 0
    current_section: TourSection = TourSection.DASHBOARD
    completed_sections: Set[TourSection] = field(default_factory=set)
    is_initialized: bool = False


class TourController:
    """Drives the tour for one browser session.

    ``mount``/``advance``/``restart_*`` schedule their delays on the running
    event loop, so they must be called from within it.
    """

    def __init__(
        self,
        store: PreferenceStore,
        navigator: Navigator,
        elements: ElementProbe,
        *,
        settle_delay: Optional[float] = None,
        transition_delay: Optional[float] = None,
    ) -> None:
        self._store = store
        self._navigator = navigator
        self._elements = elements
        self._settle_delay = settings.tour_settle_delay if settle_delay is None else settle_delay
        self._transition_delay = settings.tour_transition_delay if transition_delay is None else transition_delay
        self._tasks: Set[asyncio.Task[None]] = set()
        self._settle_task: Optional[asyncio.Task[None]] = None
        self._mounted = False
        self.state = TourRunState()

    @property
    def overall_status(self) -> Optional[str]:
        raw = self._store.get(STATUS_KEY)
        if raw in (STATUS_IN_PROGRESS, STATUS_COMPLETED):
            return raw
        return None

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    @property
    def has_pending_timers(self) -> bool:
        return any(not task.done() for task in self._tasks)

    def is_section_seen(self, section: TourSection) -> bool:
        return self._store.get(seen_key(section)) == "true"

    @property
    def steps(self) -> tuple[Step, ...]:
        """Steps of the current section whose anchor is on screen."""

        table = STEP_TABLES[self.state.current_section]
        return tuple(step for step in table if step.target == WHOLE_PAGE or self._elements.exists(step.target))

    @property
    def current_step(self) -> Optional[Step]:
        steps = self.steps
        index = self.state.current_step_index
        if self.state.is_running and 0 <= index < len(steps):
            return steps[index]
        return None

    def mount(self) -> None:
        """Enter an admin page: read persisted progress, then start after the settle delay."""

        self._mounted = True
        state = self.state
        state.current_section = section_for_path(self._navigator.current_path())
        if self.is_section_seen(state.current_section):
            state.completed_sections.add(state.current_section)

        if self.overall_status == STATUS_COMPLETED:
            state.is_running = False
            state.is_initialized = True
            return

        state.is_initialized = False
        if self._settle_task is not None:
            self._settle_task.cancel()
        self._settle_task = self._schedule(self._settle_delay, self._on_settled)

    def advance(self, action: TourAction | str, index: Optional[int] = None) -> None:
        """Apply a dismissal from the host UI.

        ``index`` is given when a finish/skip signal comes from a step's own
        "after" event; a tour-level finish omits it.
        """

        try:
            action = TourAction(action)
        except ValueError:
            logger.warning("Ignoring unknown tour action %r", action)
            return

        state = self.state
        if action is TourAction.NEXT:
            state.current_step_index += 1
        elif action is TourAction.PREV:
            state.current_step_index = max(0, state.current_step_index - 1)
        elif action is TourAction.ERROR:
            logger.debug("Tour anchor missing at step %s; moving on", state.current_step_index)
            state.current_step_index += 1
        elif not state.is_running:
            logger.debug("Ignoring tour %s while the tour is not running", action.value)
        else:
            self._complete_section(action, index)

    def restart_all(self) -> None:
        """Forget all progress and start again from the dashboard."""

        self._cancel_pending()
        self._store.remove(STATUS_KEY)
        for section in SECTION_ORDER:
            self._store.remove(seen_key(section))

        state = self.state
        state.completed_sections.clear()
        state.current_step_index = 0
        state.current_section = TourSection.DASHBOARD
        state.is_running = True
        state.is_initialized = True
        self._navigator.navigate(SECTION_ROUTES[TourSection.DASHBOARD])

    def restart_section(self, section: Optional[TourSection | str] = None, *, confirmed: bool = False) -> bool:
        """Replay one section, keeping the others' progress. Needs explicit confirmation."""

        if not confirmed:
            return False

        self._cancel_pending()
        state = self.state
        target = state.current_section if section is None else TourSection(section)
        self._store.remove(seen_key(target))
        state.completed_sections.discard(target)
        state.current_step_index = 0
        state.is_running = True
        state.is_initialized = True
        return True

    def unmount(self) -> None:
        """Leave the admin area; pending timers are cancelled and never fire."""

        self._mounted = False
        self._cancel_pending()
        self.state.is_initialized = False

    async def drain(self) -> None:
        """Wait for scheduled timers to run (or be cancelled)."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _complete_section(self, action: TourAction, index: Optional[int]) -> None:
        state = self.state
        section = state.current_section
        state.is_running = False

        last_index = len(self.steps) - 1
        if action is TourAction.SKIP or section is SECTION_ORDER[-1] or (index is not None and index == last_index):
            self._store.set(STATUS_KEY, STATUS_COMPLETED)
            state.completed_sections.add(section)
            logger.info("Admin tour completed in section %s", section.value)
            return

        self._store.set(STATUS_KEY, STATUS_IN_PROGRESS)
        self._store.set(seen_key(section), "true")
        state.completed_sections.add(section)

        upcoming = next_section(section)
        if upcoming is None:
            return
        self._schedule(self._transition_delay, partial(self._start_section, upcoming))

    def _start_section(self, section: TourSection) -> None:
        self._navigator.navigate(SECTION_ROUTES[section])
        state = self.state
        state.current_section = section
        state.current_step_index = 0
        state.is_running = True

    def _on_settled(self) -> None:
        """Start the tour unless it is completed or this section was already seen.

        Checking the seen flag as well keeps a finished section from replaying
        when the admin comes back to its page mid-tour.
        """

        state = self.state
        if self.overall_status != STATUS_COMPLETED and not self.is_section_seen(state.current_section):
            state.is_running = True
        state.is_initialized = True

    def _schedule(self, delay: float, callback: Callable[[], None]) -> asyncio.Task[None]:
        async def _fire() -> None:
            await asyncio.sleep(delay)
            if self._mounted:
                callback()

        task = asyncio.get_running_loop().create_task(_fire())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _cancel_pending(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        self._settle_task = None
