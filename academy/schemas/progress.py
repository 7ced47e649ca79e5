"""
Pydantic schemas for the progress API.
"""

from typing import List, Optional

from pydantic import BaseModel

from academy.catalog.features import EngineerRole
from academy.catalog.paths import LearningPath, LearningPathStep
from academy.catalog.personalization import PersonalizedContent
from academy.engines.learning.types import (
    NextContentRecommendation,
    ProgressSummary,
    UserProgress,
)


class RoleChangeRequest(BaseModel):
    """Pick a role and list the features the learner already knows."""

    role: EngineerRole
    selected_features: List[str] = []


class ProgressMutationResponse(BaseModel):
    """Outcome of a progress write, with the stored record on success."""

    success: bool
    error: Optional[str] = None
    progress: Optional[UserProgress] = None


class LearningPathView(BaseModel):
    """A learner's resolved path and what to do next."""

    role: Optional[EngineerRole] = None
    path: Optional[LearningPath] = None
    current_step: Optional[LearningPathStep] = None
    recommendation: Optional[NextContentRecommendation] = None
    upcoming: List[NextContentRecommendation] = []
    summary: ProgressSummary
    personalized_content: Optional[PersonalizedContent] = None
