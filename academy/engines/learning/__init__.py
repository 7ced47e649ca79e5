"""
Learning Engine - role-based learning paths and progress reconciliation.

Components:
- Progress Mapper: known features -> completed modules, features and steps
- Learning Path Resolver: unlock graph, current step, next recommendation
- Progress Store Reconciler: optimistic local state committed or reverted
  after a persistence round trip

Unlock rule: a step is unlocked when it is completed, when every step of
lower priority is completed, or when it has priority 1.
"""

from academy.engines.learning.exceptions import PersistenceError
from academy.engines.learning.path_resolver import LearningPathResolver, resolve_learning_path
from academy.engines.learning.persistence import HttpProgressPersistence, ProgressPersistence
from academy.engines.learning.progress_mapper import map_features_to_progress
from academy.engines.learning.progress_store import ProgressState, ProgressStoreReconciler
from academy.engines.learning.types import (
    ContentType,
    MappedProgress,
    NextContentRecommendation,
    PersistResult,
    ProgressSummary,
    ProgressUpdate,
    UserProgress,
)

__all__ = [
    "PersistenceError",
    "LearningPathResolver",
    "resolve_learning_path",
    "HttpProgressPersistence",
    "ProgressPersistence",
    "map_features_to_progress",
    "ProgressState",
    "ProgressStoreReconciler",
    "ContentType",
    "MappedProgress",
    "NextContentRecommendation",
    "PersistResult",
    "ProgressSummary",
    "ProgressUpdate",
    "UserProgress",
]
