"""
Progress Repository - server-side progress records (DB-backed).
"""

from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from academy.catalog.features import EngineerRole
from academy.engines.learning.mutations import (
    default_user_progress,
    merge_progress,
    with_completed_module,
    with_role_change,
)
from academy.engines.learning.path_resolver import resolve_learning_path
from academy.engines.learning.types import UserProgress, utcnow
from academy.kernel.models import LearnerProgress
from academy.logging_config import get_logger

logger = get_logger(__name__)


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ProgressRepository:
    """
    Reads and writes LearnerProgress rows for opaque user ids.

    Every write goes through the same pure helpers the client-side store
    uses. The only server-side adjustment is clamping current_step into the
    range of the user's learning path.
    """

    def __init__(self, session: AsyncSession, clock: Callable[[], datetime] = utcnow):
        self.session = session
        self.clock = clock

    def _row_to_progress(self, row: LearnerProgress) -> UserProgress:
        """Build UserProgress Pydantic from a DB row."""
        return UserProgress(
            role=row.engineer_role,
            current_step=row.current_step,
            completed_steps=list(row.completed_steps or []),
            completed_modules=list(row.completed_modules or []),
            completed_features=list(row.completed_features or []),
            onboarding_completed=row.onboarding_completed,
            preferred_content_type=row.preferred_content_type,
            has_seen_onboarding=row.has_seen_onboarding,
            last_active_date=_aware(row.last_active_at),
        )

    def _apply(self, row: LearnerProgress, progress: UserProgress) -> None:
        data = progress.model_dump(mode="json")
        row.engineer_role = data["role"]
        row.current_step = data["current_step"]
        row.completed_steps = data["completed_steps"]
        row.completed_modules = data["completed_modules"]
        row.completed_features = data["completed_features"]
        row.onboarding_completed = data["onboarding_completed"]
        row.preferred_content_type = data["preferred_content_type"]
        row.has_seen_onboarding = data["has_seen_onboarding"]
        row.last_active_at = progress.last_active_date

    def _clamp(self, progress: UserProgress) -> UserProgress:
        path = resolve_learning_path(progress.role, progress.completed_steps)
        if path is None or progress.current_step <= len(path.steps):
            return progress
        logger.info(
            "Clamped current_step",
            extra={"requested": progress.current_step, "steps": len(path.steps)},
        )
        return progress.model_copy(update={"current_step": len(path.steps)})

    async def _select_row(self, user_id: str) -> Optional[LearnerProgress]:
        result = await self.session.execute(
            select(LearnerProgress).where(LearnerProgress.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def _get_row(self, user_id: str) -> LearnerProgress:
        """
        Get or create the row for user_id.

        Must run before anything else in the transaction: when a concurrent
        request inserts the same user first, the transaction is rolled back
        and the winner's row is read instead.
        """
        row = await self._select_row(user_id)
        if row is not None:
            return row
        row = LearnerProgress(user_id=user_id)
        self._apply(row, default_user_progress(self.clock()))
        self.session.add(row)
        try:
            await self.session.flush()
        except IntegrityError:
            await self.session.rollback()
            logger.info("Learner progress created concurrently, reusing it", extra={"learner_id": user_id})
            existing = await self._select_row(user_id)
            if existing is None:
                raise
            return existing
        await self.session.refresh(row)
        logger.info("Created learner progress", extra={"learner_id": user_id})
        return row

    async def _save(self, row: LearnerProgress, progress: UserProgress) -> UserProgress:
        progress = self._clamp(progress)
        self._apply(row, progress)
        await self.session.flush()
        return progress

    async def get_progress(self, user_id: str) -> UserProgress:
        """Get or create a user's progress record."""
        row = await self._get_row(user_id)
        return self._row_to_progress(row)

    async def change_role(
        self,
        user_id: str,
        role: EngineerRole,
        selected_features: Iterable[str],
    ) -> UserProgress:
        """Select a role and credit the features the user already knows."""
        row = await self._get_row(user_id)
        progress = with_role_change(self._row_to_progress(row), role, selected_features, self.clock())
        logger.info(
            "Role changed",
            extra={"learner_id": user_id, "role": progress.role.value if progress.role else None},
        )
        return await self._save(row, progress)

    async def update_progress(self, user_id: str, updates: Mapping[str, Any]) -> UserProgress:
        """Merge a partial update. Raises ValueError for unknown fields."""
        row = await self._get_row(user_id)
        progress = merge_progress(self._row_to_progress(row), updates, self.clock())
        return await self._save(row, progress)

    async def complete_module(self, user_id: str, module_id: str) -> UserProgress:
        """Mark a module completed; repeating it changes only last_active_date."""
        row = await self._get_row(user_id)
        progress = with_completed_module(self._row_to_progress(row), module_id, self.clock())
        return await self._save(row, progress)

    async def reset(self, user_id: str) -> UserProgress:
        """Reset a user's progress to defaults."""
        row = await self._get_row(user_id)
        progress = default_user_progress(self.clock())
        logger.info("Progress reset", extra={"learner_id": user_id})
        return await self._save(row, progress)
