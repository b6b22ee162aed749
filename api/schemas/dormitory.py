"""
Pydantic schemas for dormitory assignment endpoints.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from dormitory.models import (
    AssignmentStrategy,
    CapacityBasis,
    Dormitory,
    DormitoryAssignmentPreview,
    ExistingAssignment,
    Gender,
    Registrant,
    Schedule,
    WireModel,
)


class PreviewAssignDormitoryRequest(WireModel):
    """Request to preview a dormitory assignment for a retreat."""

    capacity_basis: CapacityBasis = CapacityBasis.OPTIMAL
    assignment_strategy: AssignmentStrategy = AssignmentStrategy.SAME_GBS_SAME_DORMITORY
    registrants: list[Registrant]
    dormitories: list[Dormitory]
    schedules: list[Schedule]
    existing_assignments: list[ExistingAssignment] = Field(default_factory=list)
    # Operator selection; None means everything in the snapshot
    user_retreat_registration_ids: list[int] | None = None
    dormitory_ids: list[int] | None = None
    gender: Gender | None = None
    seed: int | None = Field(default=None, ge=0)
    config: dict[str, Any] | None = None  # Engine config overrides


class PreviewAssignDormitoryResponse(WireModel):
    """Response carrying the preview, read by the admin UI as response.data.preview."""

    retreat_slug: str
    preview: DormitoryAssignmentPreview
