"""Unit tests for the progress store reconciler."""

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from academy.catalog.features import EngineerRole, SentryFeature
from academy.engines.learning.exceptions import PersistenceError
from academy.engines.learning.mutations import default_user_progress
from academy.engines.learning.progress_store import ProgressState, ProgressStoreReconciler
from academy.engines.learning.types import PersistResult, UserProgress

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class TestProgressState:
    """Authoritative record plus the changes still waiting on the server."""

    def test_overlay_shadows_authoritative(self):
        state = ProgressState(default_user_progress(NOW))
        state.mutate({"completed_modules": ["a"]}, NOW)
        assert state.has_overlay is True
        assert state.get().completed_modules == ["a"]
        assert state.authoritative.completed_modules == []

    def test_commit_settles_its_change(self):
        state = ProgressState(default_user_progress(NOW))
        token = state.mutate({"completed_modules": ["a"]}, NOW)
        server = UserProgress(completed_modules=["a", "b"], last_active_date=NOW)
        state.commit(server, token)
        assert state.has_overlay is False
        assert state.get() == server

    def test_commit_replays_other_pending_changes(self):
        state = ProgressState(default_user_progress(NOW))
        first = state.mutate({"completed_modules": ["a"]}, NOW)
        state.mutate({"completed_modules": ["b"]}, NOW)
        state.commit(UserProgress(completed_modules=["a", "z"], last_active_date=NOW), first)
        assert state.has_overlay is True
        assert state.authoritative.completed_modules == ["a", "z"]
        assert state.get().completed_modules == ["a", "z", "b"]

    def test_revert_drops_only_its_change(self):
        state = ProgressState(default_user_progress(NOW))
        first = state.mutate({"onboarding_completed": True}, NOW)
        state.mutate({"completed_modules": ["b"]}, NOW)
        state.revert(token=first)
        assert state.get().onboarding_completed is False
        assert state.get().completed_modules == ["b"]

    def test_revert_without_token_drops_everything(self):
        original = default_user_progress(NOW)
        state = ProgressState(original)
        state.mutate({"onboarding_completed": True}, NOW)
        state.mutate({"completed_modules": ["b"]}, NOW)
        state.revert()
        assert state.has_overlay is False
        assert state.get() == original

    def test_promote_folds_change_into_authoritative(self):
        state = ProgressState(default_user_progress(NOW))
        token = state.mutate({"current_step": 2}, NOW)
        state.promote(token)
        assert state.has_overlay is False
        assert state.authoritative.current_step == 2

    def test_mutations_stack_on_overlay(self):
        state = ProgressState(default_user_progress(NOW))
        state.mutate({"completed_modules": ["a"]}, NOW)
        state.mutate({"completed_modules": ["b"]}, NOW)
        assert state.get().completed_modules == ["a", "b"]

    def test_failing_change_is_not_staged(self):
        state = ProgressState(default_user_progress(NOW))
        with pytest.raises(ValueError):
            state.mutate({"favourite_colour": "blue"}, NOW)
        assert state.has_overlay is False


class TestLocalMode:
    """Without persistence, mutations apply synchronously and return None."""

    def test_update_progress(self, clock):
        store = ProgressStoreReconciler(clock=clock)
        before = store.progress.last_active_date
        assert store.update_progress(current_step=2, completed_steps=["x"]) is None
        assert store.progress.current_step == 2
        assert store.progress.completed_steps == ["x"]
        assert store.progress.last_active_date > before
        assert store.has_pending_changes is False

    def test_completed_sets_only_grow(self, clock):
        store = ProgressStoreReconciler(clock=clock)
        store.update_progress(completed_modules=["a", "b"])
        store.update_progress(completed_modules=["c"])
        assert store.progress.completed_modules == ["a", "b", "c"]

    def test_complete_module_is_idempotent(self, clock):
        store = ProgressStoreReconciler(clock=clock)
        store.complete_module("mod-x")
        first = store.progress
        store.complete_module("mod-x")
        second = store.progress
        assert second.completed_modules == ["mod-x"]
        assert second.model_dump(exclude={"last_active_date"}) == first.model_dump(exclude={"last_active_date"})
        assert second.last_active_date > first.last_active_date

    def test_reset_returns_defaults(self, clock, backend_progress):
        store = ProgressStoreReconciler(initial=backend_progress, clock=clock)
        store.reset_progress()
        defaults = default_user_progress(NOW)
        assert store.progress.model_dump(exclude={"last_active_date"}) == defaults.model_dump(
            exclude={"last_active_date"}
        )

    def test_unknown_field_raises(self, clock):
        store = ProgressStoreReconciler(clock=clock)
        with pytest.raises(ValueError, match="Unknown progress fields"):
            store.update_progress(favourite_colour="blue")

    def test_set_engineer_role_maps_known_features(self, clock):
        store = ProgressStoreReconciler(clock=clock)
        store.set_engineer_role(EngineerRole.FRONTEND, ["performance-monitoring"])
        progress = store.progress
        assert progress.role == EngineerRole.FRONTEND
        assert progress.onboarding_completed is True
        assert progress.has_seen_onboarding is True
        assert progress.completed_features == [
            SentryFeature.ERROR_TRACKING,
            SentryFeature.PERFORMANCE_MONITORING,
        ]
        assert store.get_next_recommendation().step_id == "frontend-session-replay"

    def test_derived_views_follow_progress(self, clock):
        store = ProgressStoreReconciler(clock=clock)
        assert store.learning_path is None
        assert store.get_next_recommendation() is None
        store.update_progress(role=EngineerRole.BACKEND)
        assert store.current_step.id == "backend-error-tracking"
        store.update_progress(completed_steps=["backend-error-tracking"])
        assert store.get_next_recommendation().priority == 2


class TestAuthenticatedMode:
    """With persistence, the overlay shows first and the server decides."""

    @pytest.mark.asyncio
    async def test_overlay_visible_before_round_trip(self, clock, persistence):
        store = ProgressStoreReconciler(persistence, clock=clock)
        task = store.complete_module("mod-x")
        assert "mod-x" in store.progress.completed_modules
        assert "mod-x" not in store.authoritative.completed_modules
        assert store.has_pending_changes is True
        await task
        assert store.has_pending_changes is False
        assert store.progress == persistence.record

    @pytest.mark.asyncio
    async def test_success_commits_server_record(self, clock, persistence):
        store = ProgressStoreReconciler(persistence, clock=clock)
        await store.update_progress(current_step=1)
        assert store.authoritative == persistence.record
        assert persistence.calls == [("update", {"current_step": 1})]

    @pytest.mark.asyncio
    async def test_success_without_record_refetches(self, clock, make_persistence):
        persistence = make_persistence(return_progress=False)
        store = ProgressStoreReconciler(persistence, clock=clock)
        await store.complete_module("mod-y")
        assert store.progress == persistence.record
        assert store.progress.completed_modules == ["mod-y"]

    @pytest.mark.asyncio
    async def test_failure_reverts_to_fetched_record(self, clock):
        """A failed completion shows exactly what fetch_progress returns afterwards."""
        server_record = UserProgress(
            role=EngineerRole.BACKEND,
            completed_modules=["nodejs-integration"],
            last_active_date=NOW,
        )
        persistence = AsyncMock()
        persistence.persist_module_completion.side_effect = PersistenceError("boom")
        persistence.fetch_progress.return_value = server_record

        store = ProgressStoreReconciler(persistence, clock=clock)
        task = store.complete_module("mod-x")
        assert "mod-x" in store.progress.completed_modules
        await task

        assert store.progress == server_record
        assert "mod-x" not in store.progress.completed_modules
        assert store.has_pending_changes is False
        persistence.fetch_progress.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_rejection_reverts(self, clock, persistence):
        store = ProgressStoreReconciler(persistence, clock=clock)
        persistence.reject_next = True
        await store.update_progress(onboarding_completed=True)
        assert store.progress.onboarding_completed is False
        assert store.progress == persistence.record

    @pytest.mark.asyncio
    async def test_failed_refetch_drops_overlay(self, clock, backend_progress):
        persistence = AsyncMock()
        persistence.persist_reset.return_value = PersistResult(success=False, error="nope")
        persistence.fetch_progress.side_effect = PersistenceError("down")

        store = ProgressStoreReconciler(persistence, initial=backend_progress, clock=clock)
        await store.reset_progress()
        assert store.progress == backend_progress
        assert store.has_pending_changes is False

    @pytest.mark.asyncio
    async def test_failures_are_logged_not_raised(self, clock, persistence, caplog):
        store = ProgressStoreReconciler(persistence, clock=clock)
        persistence.fail_next = True
        with caplog.at_level("WARNING"):
            await store.complete_module("mod-z")
        assert "Progress persistence failed" in caplog.text
        assert "mod-z" not in store.progress.completed_modules

    @pytest.mark.asyncio
    async def test_unknown_field_raises_before_scheduling(self, clock, persistence):
        store = ProgressStoreReconciler(persistence, clock=clock)
        with pytest.raises(ValueError):
            store.update_progress(not_a_field=1)
        assert persistence.calls == []
        assert store.has_pending_changes is False

    @pytest.mark.asyncio
    async def test_set_engineer_role_persists_selection(self, clock, persistence):
        store = ProgressStoreReconciler(persistence, clock=clock)
        task = store.set_engineer_role("pm-manager", ["metrics-insights"])
        assert store.progress.role == EngineerRole.PM_MANAGER
        await task
        assert persistence.calls == [("role_change", EngineerRole.PM_MANAGER, ["metrics-insights"])]
        assert store.progress.completed_steps == ["pm-understanding-metrics"]
        assert SentryFeature.ERROR_TRACKING not in store.progress.completed_features

    @pytest.mark.asyncio
    async def test_overlapping_completions_both_land(self, clock, persistence):
        store = ProgressStoreReconciler(persistence, clock=clock)
        store.complete_module("a")
        store.complete_module("b")
        await store.wait_idle()
        assert store.progress.completed_modules == ["a", "b"]
        assert store.progress == persistence.record

    @pytest.mark.asyncio
    async def test_load_replaces_local_state(self, clock, backend_progress, make_persistence):
        persistence = make_persistence(record=backend_progress)
        store = ProgressStoreReconciler(clock=clock)
        store.attach(persistence)
        assert store.is_authenticated is True
        loaded = await store.load()
        assert loaded == backend_progress

    @pytest.mark.asyncio
    async def test_detach_ignores_in_flight_results(self, clock, persistence):
        store = ProgressStoreReconciler(persistence, clock=clock)
        task = store.complete_module("mod-x")
        store.detach()
        await task
        assert store.is_authenticated is False
        assert store.progress.completed_modules == []
        assert persistence.record.completed_modules == ["mod-x"]


def _gated(persistence, module_id: str) -> asyncio.Event:
    """Hold the completion of `module_id` until the returned event is set."""
    gate = asyncio.Event()
    complete = persistence.persist_module_completion

    async def persist_module_completion(requested: str):
        if requested == module_id:
            await gate.wait()
        return await complete(requested)

    persistence.persist_module_completion = persist_module_completion
    return gate


class TestOverlappingRoundTrips:
    """Each round trip settles its own change and leaves the others visible."""

    @pytest.mark.asyncio
    async def test_earlier_commit_keeps_later_change_visible(self, clock, persistence):
        gate = _gated(persistence, "b")
        store = ProgressStoreReconciler(persistence, clock=clock)
        first = store.complete_module("a")
        second = store.complete_module("b")

        await first
        assert store.authoritative.completed_modules == ["a"]
        assert store.progress.completed_modules == ["a", "b"]
        assert store.has_pending_changes is True

        gate.set()
        await second
        assert store.progress.completed_modules == ["a", "b"]
        assert store.has_pending_changes is False
        assert store.progress == persistence.record

    @pytest.mark.asyncio
    async def test_earlier_rejection_keeps_later_change_visible(self, clock, persistence):
        gate = _gated(persistence, "b")
        store = ProgressStoreReconciler(persistence, clock=clock)
        persistence.reject_next = True
        first = store.complete_module("a")
        second = store.complete_module("b")

        await first
        assert store.progress.completed_modules == ["b"]
        assert store.has_pending_changes is True

        gate.set()
        await second
        assert store.progress.completed_modules == ["b"]
        assert store.has_pending_changes is False

    @pytest.mark.asyncio
    async def test_reads_between_settles_see_both_updates(self, clock, persistence):
        gate = _gated(persistence, "b")
        store = ProgressStoreReconciler(persistence, clock=clock)
        update = store.update_progress(current_step=1)
        store.complete_module("b")
        await update

        assert store.authoritative.current_step == 1
        assert store.authoritative.completed_modules == []
        assert store.progress.current_step == 1
        assert store.progress.completed_modules == ["b"]

        gate.set()
        await store.wait_idle()
        assert store.progress.current_step == 1
        assert store.progress.completed_modules == ["b"]
