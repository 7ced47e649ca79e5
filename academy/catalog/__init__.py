"""
Static catalog - roles, features, learning path templates, personalization.

Loaded once at import and never mutated.
"""

from academy.catalog.features import (
    ERROR_TRACKING_START,
    FEATURE_MAPPINGS,
    ROLE_FEATURES,
    EngineerRole,
    FeatureMapping,
    SentryFeature,
    coerce_role,
    features_for_role,
    get_feature_mapping,
)
from academy.catalog.paths import (
    LEARNING_PATHS,
    ROLES,
    LearningPath,
    LearningPathStep,
    RoleInfo,
    get_learning_path_template,
    get_role_info,
    validate_learning_paths,
)
from academy.catalog.personalization import (
    Difficulty,
    PersonalizedContent,
    get_personalized_content,
)

__all__ = [
    "ERROR_TRACKING_START",
    "FEATURE_MAPPINGS",
    "ROLE_FEATURES",
    "EngineerRole",
    "FeatureMapping",
    "SentryFeature",
    "coerce_role",
    "features_for_role",
    "get_feature_mapping",
    "LEARNING_PATHS",
    "ROLES",
    "LearningPath",
    "LearningPathStep",
    "RoleInfo",
    "get_learning_path_template",
    "get_role_info",
    "validate_learning_paths",
    "Difficulty",
    "PersonalizedContent",
    "get_personalized_content",
]
