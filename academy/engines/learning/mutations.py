"""
Pure progress mutations shared by the optimistic store and the repository.

Both sides build the next record with the same functions, so an optimistic
guess and the server's answer only differ where the server clamps values.
"""

from datetime import datetime
from typing import Any, Iterable, Mapping, Optional

from academy.catalog.features import EngineerRole
from academy.engines.learning.progress_mapper import map_features_to_progress
from academy.engines.learning.types import UserProgress, utcnow

SET_FIELDS = ("completed_steps", "completed_modules", "completed_features")
UPDATABLE_FIELDS = frozenset(UserProgress.model_fields) - {"last_active_date"}


def default_user_progress(now: Optional[datetime] = None) -> UserProgress:
    """Fresh record for a user seen for the first time, or after a reset."""
    return UserProgress(last_active_date=now or utcnow())


def merge_progress(progress: UserProgress, updates: Mapping[str, Any], now: datetime) -> UserProgress:
    """
    Return a new record with `updates` merged in and last_active_date set to `now`.

    Completed sets are unioned, never shrunk. Scalar fields are replaced.
    Raises ValueError for unknown field names or invalid values.
    """
    unknown = set(updates) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Unknown progress fields: {', '.join(sorted(unknown))}")

    data = progress.model_dump()
    for key, value in updates.items():
        if key in SET_FIELDS:
            data[key] = [*data[key], *(value or [])]
        else:
            data[key] = value
    data["last_active_date"] = now
    return UserProgress.model_validate(data)


def with_completed_module(progress: UserProgress, module_id: str, now: datetime) -> UserProgress:
    """Mark a module completed. Completing it twice is a no-op for the set."""
    return merge_progress(progress, {"completed_modules": [module_id]}, now)


def role_change_updates(role: EngineerRole, selected_features: Iterable[str]) -> dict:
    """Updates applied when a user picks a role and declares known features."""
    selected = list(selected_features)
    mapped = map_features_to_progress(role, selected)
    return {
        "role": role,
        "current_step": 0,
        "completed_steps": mapped.completed_step_ids,
        "completed_modules": mapped.completed_modules,
        "completed_features": mapped.completed_features,
        "onboarding_completed": len(selected) > 0,
        "has_seen_onboarding": True,
    }


def with_role_change(
    progress: UserProgress,
    role: EngineerRole,
    selected_features: Iterable[str],
    now: datetime,
) -> UserProgress:
    """Apply a role selection to a record."""
    return merge_progress(progress, role_change_updates(role, selected_features), now)
