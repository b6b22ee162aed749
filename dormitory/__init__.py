"""
Dormitory - Core logic for retreat dormitory assignment.

This package contains:
- models: Domain models (Registrant, Dormitory, Schedule, preview shape)
- engine: Greedy assignment engine and preview compiler
- config: Schema-driven engine configuration
- errors: Configuration, infeasibility and invariant errors
"""

from dormitory.engine import AssignmentResult, DormitoryAssignmentEngine, assign
from dormitory.errors import (
    AssignmentConfigurationError,
    AssignmentInvariantError,
    PreviewNotAssignableError,
)
from dormitory.models import (
    AssignmentRequest,
    AssignmentStrategy,
    CapacityBasis,
    Dormitory,
    DormitoryAssignmentPreview,
    Gender,
    Registrant,
    Schedule,
)

__all__ = [
    "AssignmentConfigurationError",
    "AssignmentInvariantError",
    "AssignmentRequest",
    "AssignmentResult",
    "AssignmentStrategy",
    "CapacityBasis",
    "Dormitory",
    "DormitoryAssignmentEngine",
    "DormitoryAssignmentPreview",
    "Gender",
    "PreviewNotAssignableError",
    "Registrant",
    "Schedule",
    "assign",
]
