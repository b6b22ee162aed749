"""
Dormitory Router - Endpoints for dormitory assignment previews.

This router handles:
- Previewing a dormitory assignment for a retreat (dry run, nothing persisted)
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from dormitory.config import ConfigError, ConfigLoader
from dormitory.engine import DormitoryAssignmentEngine, select_snapshot
from dormitory.errors import AssignmentConfigurationError, AssignmentInvariantError
from dormitory.models import AssignmentRequest

from ..schemas import PreviewAssignDormitoryRequest, PreviewAssignDormitoryResponse
from ..settings import get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/retreat", tags=["dormitory"])


def _configuration_error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc), "error": type(exc).__name__})


@router.post(
    "/{retreat_slug}/dormitory/preview-assign-dormitory",
    response_model=PreviewAssignDormitoryResponse,
)
def preview_assign_dormitory(
    retreat_slug: str, request: PreviewAssignDormitoryRequest
) -> PreviewAssignDormitoryResponse | JSONResponse:
    """Run the assignment engine over the posted snapshot and return the preview."""
    settings = get_settings()
    seed = request.seed if request.seed is not None else settings.assignment_random_seed

    try:
        config = ConfigLoader(overrides=request.config) if request.config else ConfigLoader.get_instance()
        registrants, dormitories = select_snapshot(
            request.registrants,
            request.dormitories,
            registrant_ids=request.user_retreat_registration_ids,
            dormitory_ids=request.dormitory_ids,
            gender=request.gender,
        )
        engine = DormitoryAssignmentEngine(
            AssignmentRequest(
                registrants=registrants,
                dormitories=dormitories,
                schedules=request.schedules,
                existing_assignments=request.existing_assignments,
                assignment_strategy=request.assignment_strategy,
                capacity_basis=request.capacity_basis,
                seed=seed,
            ),
            config=config,
        )
        result = engine.run()
    except (AssignmentConfigurationError, ConfigError) as e:
        logger.warning(f"Rejected preview for retreat {retreat_slug}: {e}")
        return _configuration_error(e)
    except AssignmentInvariantError as e:
        logger.error(f"Assignment engine defect for retreat {retreat_slug}: {e}")
        raise HTTPException(status_code=500, detail="Assignment engine produced an inconsistent result") from e

    if settings.save_run_logs:
        engine.save_log(retreat_slug)

    logger.info(
        f"Preview for retreat {retreat_slug}: {len(result.preview.preview_assignments)} assignments, "
        f"assignable={result.preview.is_assignable}"
    )
    return PreviewAssignDormitoryResponse(retreat_slug=retreat_slug, preview=result.preview)
