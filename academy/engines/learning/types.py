"""
Shared types for the learning engine.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from academy.catalog.features import EngineerRole, SentryFeature


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class ContentType(str, Enum):
    """Preferred style of learning content."""

    HANDS_ON = "hands-on"
    CONCEPTUAL = "conceptual"
    MIXED = "mixed"


class UserProgress(BaseModel):
    """
    One user's learning progress.

    The completed_* collections behave as sets: duplicates are dropped on
    validation while first-seen order is kept for stable output.
    """

    role: Optional[EngineerRole] = None
    current_step: int = Field(default=0, ge=0)
    completed_steps: List[str] = []
    completed_modules: List[str] = []
    completed_features: List[SentryFeature] = []
    onboarding_completed: bool = False
    preferred_content_type: ContentType = ContentType.MIXED
    has_seen_onboarding: bool = False
    last_active_date: datetime = Field(default_factory=utcnow)

    @field_validator("completed_steps", "completed_modules", "completed_features")
    @classmethod
    def _dedupe(cls, value: list) -> list:
        return list(dict.fromkeys(value))


class ProgressUpdate(BaseModel):
    """Partial update of a UserProgress record. Unset fields are left alone."""

    model_config = ConfigDict(extra="forbid")

    role: Optional[EngineerRole] = None
    current_step: Optional[int] = Field(default=None, ge=0)
    completed_steps: Optional[List[str]] = None
    completed_modules: Optional[List[str]] = None
    completed_features: Optional[List[SentryFeature]] = None
    onboarding_completed: Optional[bool] = None
    preferred_content_type: Optional[ContentType] = None
    has_seen_onboarding: Optional[bool] = None


class MappedProgress(BaseModel):
    """Progress implied by the features a user already knows."""

    completed_modules: List[str] = []
    completed_features: List[SentryFeature] = []
    completed_step_ids: List[str] = []


class NextContentRecommendation(BaseModel):
    """The next thing a user should study."""

    module_id: str
    step_id: str
    priority: int
    reasoning: str
    time_estimate: str


class ProgressSummary(BaseModel):
    """Completion counts for a resolved path."""

    total_steps: int
    completed_steps: int
    remaining_steps: int
    percentage: int


class PersistResult(BaseModel):
    """Outcome of a persistence call. `progress` is the canonical record when the collaborator returns one."""

    success: bool
    error: Optional[str] = None
    progress: Optional[UserProgress] = None
