"""
Pydantic schemas for the catalog API.
"""

from typing import List, Optional

from pydantic import BaseModel

from academy.catalog.features import EngineerRole, SentryFeature
from academy.catalog.paths import RoleInfo


class RoleListResponse(BaseModel):
    """All roles a learner can pick."""

    roles: List[RoleInfo]


class FeatureCatalogResponse(BaseModel):
    """Features offered at onboarding, for one role or for all."""

    role: Optional[EngineerRole] = None
    features: List[SentryFeature]
