"""
Pydantic schemas for API request/response validation.
"""

from academy.schemas.catalog import FeatureCatalogResponse, RoleListResponse
from academy.schemas.common import ErrorResponse, HealthResponse
from academy.schemas.progress import (
    LearningPathView,
    ProgressMutationResponse,
    RoleChangeRequest,
)

__all__ = [
    "FeatureCatalogResponse",
    "RoleListResponse",
    "ErrorResponse",
    "HealthResponse",
    "LearningPathView",
    "ProgressMutationResponse",
    "RoleChangeRequest",
]
