"""
Pytest fixtures for academy tests.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, List, Mapping, Optional

import pytest

from academy.catalog.features import EngineerRole
from academy.engines.learning.exceptions import PersistenceError
from academy.engines.learning.mutations import (
    default_user_progress,
    merge_progress,
    with_completed_module,
    with_role_change,
)
from academy.engines.learning.persistence import ProgressPersistence
from academy.engines.learning.types import PersistResult, UserProgress


FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class Clock:
    """Deterministic clock that advances one second per call."""

    def __init__(self, start: datetime = FIXED_NOW):
        self.now = start

    def __call__(self) -> datetime:
        self.now = self.now + timedelta(seconds=1)
        return self.now


class InMemoryProgressPersistence(ProgressPersistence):
    """
    ProgressPersistence backed by a single in-memory record.

    Set `fail_next` to make the next persist call raise, or `reject_next` to
    make it answer success=False. `calls` records every persist call made.
    """

    def __init__(self, record: Optional[UserProgress] = None, return_progress: bool = True):
        self.record = record or default_user_progress(FIXED_NOW)
        self.return_progress = return_progress
        self.fail_next = False
        self.reject_next = False
        self.fail_fetch = False
        self.calls: List[tuple] = []

    def _store(self, operation: str, record: UserProgress) -> PersistResult:
        if self.fail_next:
            self.fail_next = False
            raise PersistenceError(f"{operation} unavailable")
        if self.reject_next:
            self.reject_next = False
            return PersistResult(success=False, error=f"{operation} rejected")
        self.record = record
        return PersistResult(success=True, progress=record if self.return_progress else None)

    async def fetch_progress(self) -> UserProgress:
        if self.fail_fetch:
            raise PersistenceError("fetch unavailable")
        return self.record

    async def persist_role_change(self, role: EngineerRole, selected_features: Iterable[str]) -> PersistResult:
        selected = list(selected_features)
        self.calls.append(("role_change", role, selected))
        return self._store("role_change", with_role_change(self.record, role, selected, FIXED_NOW))

    async def persist_progress_update(self, updates: Mapping[str, Any]) -> PersistResult:
        self.calls.append(("update", dict(updates)))
        return self._store("update", merge_progress(self.record, updates, FIXED_NOW))

    async def persist_module_completion(self, module_id: str) -> PersistResult:
        self.calls.append(("complete_module", module_id))
        return self._store("complete_module", with_completed_module(self.record, module_id, FIXED_NOW))

    async def persist_reset(self) -> PersistResult:
        self.calls.append(("reset",))
        return self._store("reset", default_user_progress(FIXED_NOW))


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def persistence() -> InMemoryProgressPersistence:
    return InMemoryProgressPersistence()


@pytest.fixture
def backend_progress() -> UserProgress:
    """Backend learner who finished the error-tracking step."""
    return UserProgress(
        role=EngineerRole.BACKEND,
        completed_steps=["backend-error-tracking"],
        completed_modules=["nodejs-integration", "sentry-fundamentals"],
        completed_features=["error-tracking"],
        onboarding_completed=True,
        has_seen_onboarding=True,
        last_active_date=FIXED_NOW,
    )


@pytest.fixture
def make_persistence():
    """Factory for in-memory persistence with custom options."""
    return InMemoryProgressPersistence
