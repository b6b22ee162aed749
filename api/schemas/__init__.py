"""
Pydantic schemas for the Dormitory API.

Re-exports all schemas for convenient importing.
"""

from __future__ import annotations

from .dormitory import PreviewAssignDormitoryRequest, PreviewAssignDormitoryResponse

__all__ = [
    "PreviewAssignDormitoryRequest",
    "PreviewAssignDormitoryResponse",
]
