"""
Progress Mapper - translate a role plus known features into completed progress.
"""

from typing import Iterable, List

from academy.catalog.features import (
    ERROR_TRACKING_START,
    EngineerRole,
    SentryFeature,
    coerce_role,
    get_feature_mapping,
)
from academy.engines.learning.types import MappedProgress


def map_features_to_progress(role: EngineerRole, selected_features: Iterable[str]) -> MappedProgress:
    """
    Work out which modules, features and steps a user has already covered.

    Any non-empty selection implies the user already has error tracking set
    up, whether or not "error-tracking" itself was selected, so the role's
    error-tracking entry point is emitted first. Roles without an entry point
    (pm-manager) get nothing for it. Every selected key with a mapping then
    contributes, in input order. Unknown keys and role/feature combinations
    without steps contribute nothing. No de-duplication happens here.
    """
    selected: List[str] = list(selected_features)
    known_role = coerce_role(role)
    completed_modules: List[str] = []
    completed_features: List[SentryFeature] = []
    completed_step_ids: List[str] = []

    if selected and known_role is not None:
        start = ERROR_TRACKING_START.get(known_role)
        if start is not None:
            completed_features.append(SentryFeature.ERROR_TRACKING)
            completed_modules.append(start.module_id)
            completed_step_ids.append(start.step_id)

    for feature_key in selected:
        mapping = get_feature_mapping(feature_key)
        if mapping is None:
            continue
        completed_features.append(mapping.feature)
        completed_modules.extend(mapping.modules)
        if known_role is not None:
            completed_step_ids.extend(mapping.steps_for(known_role))

    return MappedProgress(
        completed_modules=completed_modules,
        completed_features=completed_features,
        completed_step_ids=completed_step_ids,
    )
