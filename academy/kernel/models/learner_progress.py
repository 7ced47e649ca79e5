"""
Learner progress model - one learning progress record per user.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from academy.kernel.models.base import Base, TimestampMixin, generate_uuid


class LearnerProgress(Base, TimestampMixin):
    """
    Per-user learning path progress.

    user_id is the opaque identity handed to us by the gateway, not a foreign
    key. The completed_* columns hold JSON lists that are treated as sets.
    """

    __tablename__ = "learner_progress"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=generate_uuid,
    )
    user_id: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )

    engineer_role: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    current_step: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    completed_steps: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    completed_modules: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    completed_features: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    onboarding_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    preferred_content_type: Mapped[str] = mapped_column(String(20), nullable=False, default="mixed")
    has_seen_onboarding: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    last_active_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
