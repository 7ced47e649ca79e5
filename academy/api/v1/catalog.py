"""
Catalog endpoints - roles, path templates and onboarding features.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, status

from academy.catalog.features import EngineerRole, SentryFeature, coerce_role, features_for_role
from academy.catalog.paths import LearningPath, ROLES, get_learning_path_template
from academy.schemas.catalog import FeatureCatalogResponse, RoleListResponse

router = APIRouter()


def _known_role(role: str) -> EngineerRole:
    known = coerce_role(role)
    if known is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown role '{role}'")
    return known


@router.get("/roles", response_model=RoleListResponse)
async def list_roles():
    """List every engineer role."""
    return RoleListResponse(roles=list(ROLES.values()))


@router.get("/roles/{role}/path", response_model=LearningPath)
async def get_path_template(role: str):
    """Get the unannotated learning path template for a role."""
    template = get_learning_path_template(_known_role(role))
    if template is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No learning path for role '{role}'")
    return template


@router.get("/features", response_model=FeatureCatalogResponse)
async def list_features(role: Optional[str] = None):
    """Features offered at onboarding, for one role or all of them."""
    if role is None:
        return FeatureCatalogResponse(features=list(SentryFeature))
    known = _known_role(role)
    return FeatureCatalogResponse(role=known, features=features_for_role(known))
