"""Error classes for the dormitory assignment engine.

Configuration errors are fatal: the engine refuses to run and reports the
specific violation. Infeasibility (not enough beds) is never an error, it is
reported as data on the preview. Invariant errors indicate a defect in the
packing logic itself.
"""

from __future__ import annotations


class AssignmentConfigurationError(ValueError):
    """Base exception for invalid engine input."""

    pass


class DuplicateRegistrantError(AssignmentConfigurationError):
    """Raised when the roster contains the same registrant id twice."""

    pass


class DuplicateDormitoryError(AssignmentConfigurationError):
    """Raised when the dormitory snapshot contains the same id twice."""

    pass


class UnknownNightError(AssignmentConfigurationError):
    """Raised when a registrant or occupant references a schedule not in the run."""

    pass


class UnknownRegistrantError(AssignmentConfigurationError):
    """Raised when a selection references a registrant not in the roster."""

    pass


class UnknownDormitoryError(AssignmentConfigurationError):
    """Raised when a selection references a dormitory not in the snapshot."""

    pass


class MixedGenderDormitoryError(AssignmentConfigurationError):
    """Raised when a dormitory is not tagged for exactly one gender."""

    pass


class InvalidCapacityError(AssignmentConfigurationError):
    """Raised when a capacity value is negative, missing, or inconsistent."""

    pass


class AlreadyAssignedError(AssignmentConfigurationError):
    """Raised when a registrant to place is also listed as an existing occupant."""

    pass


class PreviewNotAssignableError(Exception):
    """Raised when a commit payload is requested for an infeasible preview."""

    pass


class AssignmentInvariantError(AssertionError):
    """Raised when the engine output breaks a packing invariant (engine defect)."""

    pass
