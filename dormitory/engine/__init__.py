"""
Dormitory Engine - greedy per-night dormitory packing.

This package contains:
- DormitoryAssignmentEngine: Runs one assignment over a snapshot
- AssignmentLogger: Run-scoped event log
- Capacity resolver, grouping index and placement strategies
- Preview compiler and result analysis
"""

from .analysis import build_bulk_assignments, find_split_units, find_unplaced
from .capacity import CapacityTable, resolve_capacity
from .engine import AssignmentResult, DormitoryAssignmentEngine, assign
from .grouping import build_units
from .logging import AssignmentLogger
from .preview import compile_preview
from .selection import select_snapshot
from .validation import check_feasibility, validate_request

__all__ = [
    "AssignmentLogger",
    "AssignmentResult",
    "CapacityTable",
    "DormitoryAssignmentEngine",
    "assign",
    "build_units",
    "compile_preview",
    "resolve_capacity",
    "select_snapshot",
    # Validation
    "check_feasibility",
    "validate_request",
    # Result analysis functions
    "build_bulk_assignments",
    "find_split_units",
    "find_unplaced",
]
