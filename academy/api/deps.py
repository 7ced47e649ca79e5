"""
FastAPI dependencies for identity and database sessions.

Authentication happens upstream. The gateway forwards an opaque user id in
the configured header and we trust it as-is.
"""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from academy.config import get_settings
from academy.database import get_db
from academy.engines.learning.repository import ProgressRepository


DbSession = Annotated[AsyncSession, Depends(get_db)]


def get_user_id_optional(request: Request) -> Optional[str]:
    """Identity forwarded by the gateway, or None."""
    value = request.headers.get(get_settings().user_id_header, "").strip()
    return value or None


def get_current_user_id(
    user_id: Annotated[Optional[str], Depends(get_user_id_optional)],
) -> str:
    """Identity forwarded by the gateway, or 401."""
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing user identity",
        )
    return user_id


CurrentUserId = Annotated[str, Depends(get_current_user_id)]


def get_progress_repository(db: DbSession) -> ProgressRepository:
    return ProgressRepository(db)


Repository = Annotated[ProgressRepository, Depends(get_progress_repository)]
