"""
Progress endpoints - the caller's learning progress and resolved path.

Every route acts for the user id forwarded by the gateway. Writes are
committed before the response goes out so that a follow-up read sees them.
"""

from typing import Awaitable

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from academy.api.deps import CurrentUserId, DbSession, Repository
from academy.catalog.personalization import get_personalized_content
from academy.engines.learning.path_resolver import LearningPathResolver
from academy.engines.learning.types import ProgressUpdate, UserProgress
from academy.logging_config import get_logger
from academy.schemas.progress import (
    LearningPathView,
    ProgressMutationResponse,
    RoleChangeRequest,
)

logger = get_logger(__name__)

router = APIRouter()


async def _mutation(db: DbSession, write: Awaitable[UserProgress]):
    try:
        progress = await write
    except ValueError as exc:
        await db.rollback()
        logger.info("Rejected progress write", extra={"error": str(exc)})
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ProgressMutationResponse(success=False, error=str(exc)).model_dump(mode="json"),
        )
    await db.commit()
    return ProgressMutationResponse(success=True, progress=progress)


@router.get("", response_model=UserProgress)
async def get_progress(user_id: CurrentUserId, repo: Repository, db: DbSession):
    """Get the caller's progress, creating a default record on first use."""
    progress = await repo.get_progress(user_id)
    await db.commit()
    return progress


@router.get("/path", response_model=LearningPathView)
async def get_learning_path(user_id: CurrentUserId, repo: Repository, db: DbSession):
    """Resolve the caller's learning path with current step and recommendations."""
    progress = await repo.get_progress(user_id)
    await db.commit()
    resolver = LearningPathResolver(progress.role, progress.completed_steps)
    recommendation = resolver.get_next_recommendation()
    personalized = None
    if recommendation is not None:
        personalized = get_personalized_content(recommendation.module_id, progress.role)
    return LearningPathView(
        role=progress.role,
        path=resolver.path,
        current_step=resolver.current_step(),
        recommendation=recommendation,
        upcoming=resolver.upcoming_recommendations(),
        summary=resolver.progress_summary(),
        personalized_content=personalized,
    )


@router.put("/role", response_model=ProgressMutationResponse)
async def change_role(body: RoleChangeRequest, user_id: CurrentUserId, repo: Repository, db: DbSession):
    """Pick a role and credit the features the caller already knows."""
    return await _mutation(db, repo.change_role(user_id, body.role, body.selected_features))


@router.patch("", response_model=ProgressMutationResponse)
async def update_progress(body: ProgressUpdate, user_id: CurrentUserId, repo: Repository, db: DbSession):
    """Merge a partial update. Completed sets are unioned, never shrunk."""
    updates = body.model_dump(exclude_unset=True)
    return await _mutation(db, repo.update_progress(user_id, updates))


@router.post("/modules/{module_id:path}/complete", response_model=ProgressMutationResponse)
async def complete_module(module_id: str, user_id: CurrentUserId, repo: Repository, db: DbSession):
    """Mark a module completed. Safe to repeat."""
    return await _mutation(db, repo.complete_module(user_id, module_id))


@router.post("/reset", response_model=ProgressMutationResponse)
async def reset_progress(user_id: CurrentUserId, repo: Repository, db: DbSession):
    """Reset the caller's progress to defaults."""
    return await _mutation(db, repo.reset(user_id))
