"""
Progress Store Reconciler - one user's progress with optimistic updates.

Without a persistence collaborator every mutation is applied directly to the
in-memory record. With one, the mutation is shown immediately as an overlay
and a background task persists it; the task then commits the server's record
or reverts to a freshly fetched one. Overlapping round trips settle
independently, and reads see the authoritative record with every change
still in flight applied on top.
"""

import asyncio
import itertools
from collections import OrderedDict
from datetime import datetime
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Set

from academy.catalog.features import EngineerRole
from academy.catalog.paths import LearningPath, LearningPathStep
from academy.engines.learning.mutations import (
    default_user_progress,
    merge_progress,
    role_change_updates,
    with_completed_module,
)
from academy.engines.learning.path_resolver import LearningPathResolver
from academy.engines.learning.persistence import ProgressPersistence
from academy.engines.learning.types import (
    NextContentRecommendation,
    PersistResult,
    UserProgress,
    utcnow,
)
from academy.logging_config import get_logger

logger = get_logger(__name__)


Change = Callable[[UserProgress], UserProgress]


class ProgressState:
    """
    Authoritative record plus the optimistic changes still waiting on the server.

    Each pending change is kept as a function of the record it applies to, so
    when one round trip settles the others are replayed on top of the new
    authoritative record. get() returns that replayed overlay while any change
    is pending.
    """

    def __init__(self, authoritative: UserProgress):
        self._authoritative = authoritative
        self._pending: "OrderedDict[int, Change]" = OrderedDict()
        self._overlay: Optional[UserProgress] = None
        self._tokens = itertools.count(1)

    @property
    def authoritative(self) -> UserProgress:
        return self._authoritative

    @property
    def has_overlay(self) -> bool:
        return bool(self._pending)

    def get(self) -> UserProgress:
        if self._overlay is not None:
            return self._overlay
        return self._authoritative

    def mutate(self, updates: Dict[str, Any], now: datetime) -> int:
        """Stage a partial update stamped with `now`."""
        return self.stage(lambda progress: merge_progress(progress, updates, now))

    def stage(self, change: Change) -> int:
        """
        Apply change to what reads currently see and keep it pending.

        Returns the token that later settles this change. A change that
        raises is not staged.
        """
        record = change(self.get())
        token = next(self._tokens)
        self._pending[token] = change
        self._overlay = record
        return token

    def commit(self, record: UserProgress, token: Optional[int] = None) -> None:
        """Adopt record as authoritative and settle `token` if given."""
        self._authoritative = record
        if token is not None:
            self._pending.pop(token, None)
        self._replay()

    def promote(self, token: int) -> None:
        """Fold a pending change into the authoritative record."""
        change = self._pending.pop(token, None)
        if change is not None:
            self._authoritative = change(self._authoritative)
        self._replay()

    def revert(self, record: Optional[UserProgress] = None, token: Optional[int] = None) -> None:
        """
        Drop one pending change, or all of them when no token is given,
        optionally replacing the authoritative record.
        """
        if record is not None:
            self._authoritative = record
        if token is None:
            self._pending.clear()
        else:
            self._pending.pop(token, None)
        self._replay()

    def _replay(self) -> None:
        if not self._pending:
            self._overlay = None
            return
        record = self._authoritative
        for change in self._pending.values():
            record = change(record)
        self._overlay = record


class ProgressStoreReconciler:
    """
    Owns a single user's progress record.

    Mutations never raise for persistence problems: failures are logged and
    the state is reverted to what the collaborator reports. Unknown update
    fields are a programming error and raise ValueError straight away.

    In authenticated mode each mutation returns the asyncio.Task doing the
    round trip; await it (or wait_idle()) to observe the reconciled state.
    Round trips may overlap. Each settles only its own change, and changes
    still in flight stay visible on top of whatever record the server sent.
    """

    def __init__(
        self,
        persistence: Optional[ProgressPersistence] = None,
        *,
        initial: Optional[UserProgress] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._clock = clock
        self._persistence = persistence
        self._state = ProgressState(initial or default_user_progress(clock()))
        self._tasks: Set[asyncio.Task] = set()

    # State

    @property
    def is_authenticated(self) -> bool:
        return self._persistence is not None

    @property
    def progress(self) -> UserProgress:
        """What reads observe: the overlay if present, otherwise the authoritative record."""
        return self._state.get()

    @property
    def authoritative(self) -> UserProgress:
        return self._state.authoritative

    @property
    def has_pending_changes(self) -> bool:
        return self._state.has_overlay

    # Identity

    async def load(self) -> UserProgress:
        """
        Replace the authoritative record with the canonical one.

        A no-op without persistence. Changes still in flight are replayed on
        top of the loaded record. PersistenceError from the collaborator
        propagates; the local state is left untouched in that case.
        """
        persistence = self._persistence
        if persistence is None:
            return self.progress
        record = await persistence.fetch_progress()
        if persistence is self._persistence:
            self._state.commit(record)
            logger.info("Progress loaded", extra={"role": _role_value(record)})
        return self.progress

    def attach(self, persistence: ProgressPersistence) -> None:
        """Switch to authenticated mode. Call load() to pull the canonical record."""
        self._persistence = persistence

    def detach(self) -> None:
        """Switch to local mode; results of in-flight round trips are ignored."""
        self._persistence = None
        self._state.revert()

    async def wait_idle(self) -> None:
        """Wait until every scheduled persistence task has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    # Mutations

    def update_progress(self, **updates: Any) -> Optional[asyncio.Task]:
        """Merge a partial update. Completed sets are unioned, scalars replaced."""
        now = self._clock()
        return self._apply(
            "update_progress",
            lambda progress: merge_progress(progress, updates, now),
            lambda persistence: persistence.persist_progress_update(updates),
        )

    def complete_module(self, module_id: str) -> Optional[asyncio.Task]:
        """Add a module to the completed set. Repeating it only touches last_active_date."""
        now = self._clock()
        return self._apply(
            "complete_module",
            lambda progress: with_completed_module(progress, module_id, now),
            lambda persistence: persistence.persist_module_completion(module_id),
        )

    def reset_progress(self) -> Optional[asyncio.Task]:
        """Return to the default record."""
        now = self._clock()
        return self._apply(
            "reset_progress",
            lambda progress: default_user_progress(now),
            lambda persistence: persistence.persist_reset(),
        )

    def set_engineer_role(
        self,
        role: EngineerRole,
        selected_features: Iterable[str] = (),
    ) -> Optional[asyncio.Task]:
        """Select a role and credit the features the user says they already know."""
        role = EngineerRole(role)
        selected: List[str] = list(selected_features)
        updates = role_change_updates(role, selected)
        now = self._clock()
        return self._apply(
            "set_engineer_role",
            lambda progress: merge_progress(progress, updates, now),
            lambda persistence: persistence.persist_role_change(role, selected),
        )

    # Derived views

    def resolver(self) -> LearningPathResolver:
        """Resolver over what reads currently observe."""
        progress = self.progress
        return LearningPathResolver(progress.role, progress.completed_steps)

    @property
    def learning_path(self) -> Optional[LearningPath]:
        return self.resolver().path

    @property
    def current_step(self) -> Optional[LearningPathStep]:
        return self.resolver().current_step()

    def get_next_recommendation(self) -> Optional[NextContentRecommendation]:
        return self.resolver().get_next_recommendation()

    # Reconciliation

    def _apply(
        self,
        operation: str,
        change: Change,
        call: Callable[[ProgressPersistence], Awaitable[PersistResult]],
    ) -> Optional[asyncio.Task]:
        persistence = self._persistence
        if persistence is None:
            self._state.commit(change(self._state.get()))
            return None
        loop = asyncio.get_running_loop()
        token = self._state.stage(change)
        task = loop.create_task(
            self._reconcile(operation, persistence, token, lambda: call(persistence))
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _reconcile(
        self,
        operation: str,
        persistence: ProgressPersistence,
        token: int,
        call: Callable[[], Awaitable[PersistResult]],
    ) -> None:
        try:
            result = await call()
        except Exception as exc:
            logger.warning(
                "Progress persistence failed",
                extra={"operation": operation, "error": str(exc)},
            )
            await self._revert(operation, persistence, token)
            return

        if not result.success:
            logger.warning(
                "Progress persistence rejected",
                extra={"operation": operation, "error": result.error},
            )
            await self._revert(operation, persistence, token)
            return

        record = result.progress
        if record is None:
            try:
                record = await persistence.fetch_progress()
            except Exception as exc:
                logger.warning(
                    "Could not fetch progress after save, keeping local changes",
                    extra={"operation": operation, "error": str(exc)},
                )
                if persistence is self._persistence:
                    self._state.promote(token)
                return
        if persistence is self._persistence:
            self._state.commit(record, token)

    async def _revert(self, operation: str, persistence: ProgressPersistence, token: int) -> None:
        try:
            record = await persistence.fetch_progress()
        except Exception as exc:
            logger.warning(
                "Could not fetch progress after failure, dropping local changes",
                extra={"operation": operation, "error": str(exc)},
            )
            record = None
        if persistence is self._persistence:
            self._state.revert(record, token)
            logger.info("Progress reverted", extra={"operation": operation})


def _role_value(progress: UserProgress) -> Optional[str]:
    return progress.role.value if progress.role is not None else None
