"""
Learning Path Resolver - annotate a role's path with completion and unlock state.

A step is unlocked when it is completed, when every step of strictly lower
priority is completed, or when it has priority 1. The current step is the
lowest-priority step that is unlocked but not yet completed.
"""

from typing import Iterable, List, Optional, Tuple

from academy.catalog.features import EngineerRole, coerce_role
from academy.catalog.paths import LearningPath, LearningPathStep, get_learning_path_template
from academy.engines.learning.types import NextContentRecommendation, ProgressSummary


def resolve_learning_path(
    role: Optional[EngineerRole],
    completed_step_ids: Iterable[str],
) -> Optional[LearningPath]:
    """
    Return an annotated copy of the role's path, or None when there is no role or template.

    Steps come back sorted by ascending priority whatever order the template
    lists them in. The template itself is never modified.
    """
    known_role = coerce_role(role)
    if known_role is None:
        return None
    template = get_learning_path_template(known_role)
    if template is None:
        return None

    completed = set(completed_step_ids)
    ordered = sorted(template.steps, key=lambda step: step.priority)

    steps: List[LearningPathStep] = []
    all_previous_completed = True
    for step in ordered:
        is_completed = step.id in completed
        is_unlocked = is_completed or all_previous_completed or step.priority == 1
        steps.append(
            step.model_copy(
                update={"is_completed": is_completed, "is_unlocked": is_unlocked},
                deep=True,
            )
        )
        # priorities are unique, so "all lower priorities" is "all earlier steps"
        all_previous_completed = all_previous_completed and is_completed

    return template.model_copy(update={"steps": tuple(steps)}, deep=True)


def _recommend(step: LearningPathStep) -> NextContentRecommendation:
    return NextContentRecommendation(
        module_id=step.modules[0],
        step_id=step.id,
        priority=step.priority,
        reasoning=step.description,
        time_estimate=step.estimated_time,
    )


class LearningPathResolver:
    """
    Side-effect-free view over one role's path and a set of completed steps.

    Build a new resolver whenever progress changes; nothing is cached across
    instances.
    """

    def __init__(self, role: Optional[EngineerRole], completed_step_ids: Iterable[str] = ()):
        self.role = coerce_role(role)
        self.path = resolve_learning_path(self.role, completed_step_ids)

    @property
    def steps(self) -> Tuple[LearningPathStep, ...]:
        if self.path is None:
            return ()
        return self.path.steps

    def current_step(self) -> Optional[LearningPathStep]:
        """Lowest-priority unlocked step that is not completed, if any."""
        for step in self.steps:
            if step.is_unlocked and not step.is_completed:
                return step
        return None

    def get_next_recommendation(self) -> Optional[NextContentRecommendation]:
        """Recommend the current step's primary module, or None when nothing is actionable."""
        step = self.current_step()
        if step is None:
            return None
        return _recommend(step)

    def remaining_steps(self) -> List[LearningPathStep]:
        return [step for step in self.steps if not step.is_completed]

    def upcoming_recommendations(self, limit: int = 3) -> List[NextContentRecommendation]:
        """Next incomplete steps in priority order, locked or not."""
        if limit <= 0:
            return []
        return [_recommend(step) for step in self.remaining_steps()[:limit]]

    def progress_percentage(self) -> int:
        total = len(self.steps)
        if total == 0:
            return 0
        done = total - len(self.remaining_steps())
        return round(done * 100 / total)

    def is_complete(self) -> bool:
        """True when the path exists and every step is completed."""
        return bool(self.steps) and not self.remaining_steps()

    def progress_summary(self) -> ProgressSummary:
        total = len(self.steps)
        remaining = len(self.remaining_steps())
        return ProgressSummary(
            total_steps=total,
            completed_steps=total - remaining,
            remaining_steps=remaining,
            percentage=self.progress_percentage(),
        )
