"""Schemas for the admin onboarding tour."""
from __future__ import annotations

from pydantic import BaseModel, Field

from ..services.tour import TourAction, TourSection


class TourMountRequest(BaseModel):
    path: str = Field(default="/admin")
    targets: list[str] = Field(default_factory=list)


class TourAdvanceRequest(BaseModel):
    action: TourAction
    index: int | None = Field(default=None, ge=0)


class TourRestartSectionRequest(BaseModel):
    section: TourSection | None = None
    confirmed: bool = False


class TourStep(BaseModel):
    target: str
    content: str
    placement: str
    is_first: bool


class TourStateResponse(BaseModel):
    is_running: bool
    is_initialized: bool
    current_step_index: int
    current_section: TourSection
    completed_sections: list[TourSection]
    overall_status: str | None = None
    current_path: str
    steps: list[TourStep]
    current_step: TourStep | None = None
