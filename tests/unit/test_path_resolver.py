"""Unit tests for learning path resolution and recommendations."""

from unittest.mock import patch

import pytest

from academy.catalog.features import EngineerRole, SentryFeature
from academy.catalog.paths import (
    LEARNING_PATHS,
    LearningPath,
    LearningPathStep,
    get_learning_path_template,
)
from academy.engines.learning.path_resolver import LearningPathResolver, resolve_learning_path


def _step(step_id: str, priority: int) -> LearningPathStep:
    return LearningPathStep(
        id=step_id,
        title=step_id.title(),
        description=f"Learn {step_id}",
        feature=SentryFeature.LOGGING,
        modules=[f"{step_id}-module"],
        estimated_time="1 hour",
        priority=priority,
    )


def _shuffled_path() -> LearningPath:
    return LearningPath(
        id="shuffled-path",
        role=EngineerRole.BACKEND,
        title="Shuffled",
        description="Steps listed out of priority order",
        total_estimated_time="3 hours",
        steps=[_step("third", 3), _step("first", 1), _step("second", 2)],
    )


class TestResolveLearningPath:
    """Annotation of completion and unlock flags."""

    def test_no_role_has_no_path(self):
        assert resolve_learning_path(None, []) is None

    def test_unknown_role_has_no_path(self):
        assert resolve_learning_path("astronaut", []) is None

    def test_backend_fresh_start(self):
        """Priority 1 is unlocked and current; nothing else is unlocked."""
        path = resolve_learning_path(EngineerRole.BACKEND, [])
        first = path.steps[0]
        assert first.priority == 1
        assert first.is_unlocked is True
        assert first.is_completed is False
        assert all(not step.is_unlocked for step in path.steps[1:])

    def test_completing_priority_one_unlocks_priority_two(self):
        path = resolve_learning_path(EngineerRole.BACKEND, ["backend-error-tracking"])
        by_id = {step.id: step for step in path.steps}
        assert by_id["backend-error-tracking"].is_completed is True
        assert by_id["backend-performance"].is_unlocked is True
        assert by_id["backend-distributed-tracing"].is_unlocked is False

    def test_completed_step_is_unlocked_even_after_a_gap(self):
        """A completed step is unlocked although a lower-priority step is still open."""
        path = resolve_learning_path(EngineerRole.BACKEND, ["backend-release-health"])
        by_id = {step.id: step for step in path.steps}
        assert by_id["backend-release-health"].is_unlocked is True
        assert by_id["backend-release-health"].is_completed is True
        assert by_id["backend-performance"].is_unlocked is False
        assert by_id["backend-dashboards-alerts"].is_unlocked is False

    def test_template_is_not_modified(self):
        resolve_learning_path(EngineerRole.FRONTEND, ["frontend-error-tracking"])
        template = get_learning_path_template(EngineerRole.FRONTEND)
        assert all(not step.is_completed and not step.is_unlocked for step in template.steps)

    def test_steps_sorted_by_priority_regardless_of_template_order(self):
        with patch(
            "academy.engines.learning.path_resolver.get_learning_path_template",
            return_value=_shuffled_path(),
        ):
            path = resolve_learning_path(EngineerRole.BACKEND, ["first"])
        assert [step.id for step in path.steps] == ["first", "second", "third"]
        assert [step.is_unlocked for step in path.steps] == [True, True, False]

    def test_unknown_completed_ids_are_ignored(self):
        path = resolve_learning_path(EngineerRole.SRE, ["not-a-step"])
        assert not any(step.is_completed for step in path.steps)


class TestLearningPathResolver:
    """Current step, recommendations and summary."""

    def test_current_step_on_fresh_backend_path(self):
        resolver = LearningPathResolver(EngineerRole.BACKEND, [])
        current = resolver.current_step()
        assert current.id == "backend-error-tracking"
        assert current.priority == 1

    def test_next_recommendation_after_priority_one(self):
        resolver = LearningPathResolver(EngineerRole.BACKEND, ["backend-error-tracking"])
        recommendation = resolver.get_next_recommendation()
        assert recommendation.priority == 2
        assert recommendation.step_id == "backend-performance"
        assert recommendation.module_id == "performance-monitoring"
        assert recommendation.time_estimate == "2 hours"
        assert recommendation.reasoning == resolver.current_step().description

    def test_recommendation_uses_primary_module(self):
        resolver = LearningPathResolver(EngineerRole.FRONTEND, [])
        assert resolver.get_next_recommendation().module_id == "sentry-fundamentals"

    def test_no_recommendation_without_role(self):
        resolver = LearningPathResolver(None, ["backend-error-tracking"])
        assert resolver.path is None
        assert resolver.current_step() is None
        assert resolver.get_next_recommendation() is None
        assert resolver.upcoming_recommendations() == []
        assert resolver.progress_percentage() == 0
        assert resolver.is_complete() is False

    def test_no_recommendation_when_path_complete(self):
        template = get_learning_path_template(EngineerRole.PM_MANAGER)
        resolver = LearningPathResolver(EngineerRole.PM_MANAGER, [step.id for step in template.steps])
        assert resolver.current_step() is None
        assert resolver.get_next_recommendation() is None
        assert resolver.is_complete() is True
        assert resolver.progress_percentage() == 100

    def test_recommendation_is_lowest_open_step_after_a_gap(self):
        """Completing a later step does not skip the open lower-priority one."""
        resolver = LearningPathResolver(
            EngineerRole.BACKEND,
            ["backend-error-tracking", "backend-distributed-tracing"],
        )
        assert resolver.get_next_recommendation().step_id == "backend-performance"

    def test_upcoming_recommendations_include_locked_steps(self):
        resolver = LearningPathResolver(EngineerRole.BACKEND, [])
        upcoming = resolver.upcoming_recommendations()
        assert [r.priority for r in upcoming] == [1, 2, 3]
        assert resolver.upcoming_recommendations(limit=0) == []

    def test_progress_summary(self):
        resolver = LearningPathResolver(
            EngineerRole.BACKEND,
            ["backend-error-tracking", "backend-performance"],
        )
        summary = resolver.progress_summary()
        assert summary.total_steps == 6
        assert summary.completed_steps == 2
        assert summary.remaining_steps == 4
        assert summary.percentage == 33
        assert [step.id for step in resolver.remaining_steps()][0] == "backend-distributed-tracing"


def _completion_cases():
    """Every role paired with a spread of completed-step subsets."""
    for role, template in LEARNING_PATHS.items():
        ids = [step.id for step in sorted(template.steps, key=lambda step: step.priority)]
        subsets = {
            "none": [],
            "all": ids,
            "first": ids[:1],
            "second-only": ids[1:2],
            "all-but-first": ids[1:],
            "all-but-last": ids[:-1],
            "last": ids[-1:],
            "every-other": ids[::2],
        }
        for name, completed in subsets.items():
            yield pytest.param(role, completed, id=f"{role.value}-{name}")


class TestUnlockRulesAcrossPaths:
    """Unlock and recommendation rules hold for every shipped path."""

    @pytest.mark.parametrize("role, completed", list(_completion_cases()))
    def test_unlock_rule(self, role, completed):
        path = resolve_learning_path(role, completed)
        done = set(completed)
        assert path is not None
        assert [step.priority for step in path.steps] == sorted(step.priority for step in path.steps)

        for index, step in enumerate(path.steps):
            earlier_done = all(previous.id in done for previous in path.steps[:index])
            assert step.is_completed == (step.id in done)
            assert step.is_unlocked == (step.is_completed or earlier_done or step.priority == 1)
            if step.priority == 1 or earlier_done:
                assert step.is_unlocked

    @pytest.mark.parametrize("role, completed", list(_completion_cases()))
    def test_recommendation_is_lowest_open_unlocked_step(self, role, completed):
        resolver = LearningPathResolver(role, completed)
        open_steps = [step for step in resolver.steps if step.is_unlocked and not step.is_completed]
        recommendation = resolver.get_next_recommendation()

        if not open_steps:
            assert recommendation is None
            assert resolver.current_step() is None
        else:
            expected = min(open_steps, key=lambda step: step.priority)
            assert resolver.current_step().id == expected.id
            assert recommendation.step_id == expected.id
            assert recommendation.module_id == expected.modules[0]

    @pytest.mark.parametrize("role", list(LEARNING_PATHS))
    def test_fully_completed_path_has_no_recommendation(self, role):
        ids = [step.id for step in LEARNING_PATHS[role].steps]
        resolver = LearningPathResolver(role, ids)
        assert resolver.is_complete() is True
        assert resolver.get_next_recommendation() is None
