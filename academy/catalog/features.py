"""
Feature catalog - engineer roles, product features and the feature mapping table.

The mapping table says which modules and learning-path steps a user has
already covered when they tell us they know a feature. It is plain data so
that it can be inspected, tested and serialized; role dispatch is a dict
lookup, not code.
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict


class EngineerRole(str, Enum):
    """Professional persona that selects a learning path."""

    FRONTEND = "frontend"
    BACKEND = "backend"
    SRE = "sre"
    FULLSTACK = "fullstack"
    AI_ML = "ai-ml"
    PM_MANAGER = "pm-manager"


class SentryFeature(str, Enum):
    """Capability area a user may already know."""

    ERROR_TRACKING = "error-tracking"
    PERFORMANCE_MONITORING = "performance-monitoring"
    LOGGING = "logging"
    SESSION_REPLAY = "session-replay"
    DISTRIBUTED_TRACING = "distributed-tracing"
    RELEASE_HEALTH = "release-health"
    DASHBOARDS_ALERTS = "dashboards-alerts"
    INTEGRATIONS = "integrations"
    USER_FEEDBACK = "user-feedback"
    SEER_MCP = "seer-mcp"
    CUSTOM_METRICS = "custom-metrics"
    METRICS_INSIGHTS = "metrics-insights"
    STAKEHOLDER_REPORTING = "stakeholder-reporting"


class FeatureMapping(BaseModel):
    """What knowing one feature completes: the feature, its modules, per-role steps."""

    model_config = ConfigDict(frozen=True)

    feature: SentryFeature
    modules: Tuple[str, ...]
    step_ids: Dict[EngineerRole, Tuple[str, ...]] = {}

    def steps_for(self, role: EngineerRole) -> Tuple[str, ...]:
        """Step ids this feature completes for a role (empty when the role has none)."""
        return self.step_ids.get(role, ())


class ErrorTrackingStart(BaseModel):
    """Module and step that mark a role's error-tracking foundation as done."""

    model_config = ConfigDict(frozen=True)

    module_id: str
    step_id: str


R = EngineerRole
F = SentryFeature

# pm-manager has no error-tracking step; its paths start from metrics
ERROR_TRACKING_START: Dict[EngineerRole, ErrorTrackingStart] = {
    R.FRONTEND: ErrorTrackingStart(module_id="sentry-fundamentals", step_id="frontend-error-tracking"),
    R.BACKEND: ErrorTrackingStart(module_id="nodejs-integration", step_id="backend-error-tracking"),
    R.SRE: ErrorTrackingStart(module_id="nodejs-integration", step_id="sre-error-tracking"),
    R.AI_ML: ErrorTrackingStart(module_id="nodejs-integration", step_id="ai-ml-error-tracking"),
    R.FULLSTACK: ErrorTrackingStart(module_id="sentry-fundamentals", step_id="fullstack-error-tracking"),
}

FEATURE_MAPPINGS: Dict[str, FeatureMapping] = {
    F.PERFORMANCE_MONITORING.value: FeatureMapping(
        feature=F.PERFORMANCE_MONITORING,
        modules=("performance-monitoring",),
        step_ids={
            R.FRONTEND: ("frontend-performance",),
            R.BACKEND: ("backend-performance",),
            R.FULLSTACK: ("fullstack-performance",),
            R.SRE: ("sre-performance-tracing",),
            R.AI_ML: ("ai-ml-performance",),
        },
    ),
    F.SESSION_REPLAY.value: FeatureMapping(
        feature=F.SESSION_REPLAY,
        modules=("react-error-boundaries",),
        step_ids={
            R.FRONTEND: ("frontend-session-replay",),
            R.FULLSTACK: ("fullstack-session-replay",),
        },
    ),
    F.LOGGING.value: FeatureMapping(
        feature=F.LOGGING,
        # logging course lives in the error boundaries module for now
        modules=("react-error-boundaries",),
        step_ids={
            R.FRONTEND: ("frontend-logging",),
            R.BACKEND: ("backend-logging",),
            R.FULLSTACK: ("fullstack-logging",),
            R.SRE: ("sre-logging",),
            R.AI_ML: ("ai-ml-logging",),
        },
    ),
    F.DISTRIBUTED_TRACING.value: FeatureMapping(
        feature=F.DISTRIBUTED_TRACING,
        modules=("distributed-tracing",),
        step_ids={
            R.BACKEND: ("backend-distributed-tracing",),
            R.FULLSTACK: ("fullstack-distributed-tracing",),
            R.SRE: ("sre-performance-tracing",),
            R.AI_ML: ("ai-ml-distributed-tracing",),
        },
    ),
    F.RELEASE_HEALTH.value: FeatureMapping(
        feature=F.RELEASE_HEALTH,
        modules=("release-health",),
        step_ids={
            R.BACKEND: ("backend-release-health",),
            R.SRE: ("sre-release-health",),
        },
    ),
    F.DASHBOARDS_ALERTS.value: FeatureMapping(
        feature=F.DASHBOARDS_ALERTS,
        modules=("custom-dashboards",),
        step_ids={
            R.FRONTEND: ("frontend-dashboards-alerts",),
            R.BACKEND: ("backend-dashboards-alerts",),
            R.FULLSTACK: ("fullstack-dashboards-alerts",),
            R.SRE: ("sre-dashboards",),
            R.AI_ML: ("ai-ml-dashboards-alerts",),
        },
    ),
    F.INTEGRATIONS.value: FeatureMapping(
        feature=F.INTEGRATIONS,
        modules=("team-workflows",),
        step_ids={
            R.FRONTEND: ("frontend-integrations",),
            R.SRE: ("sre-integrations",),
        },
    ),
    F.USER_FEEDBACK.value: FeatureMapping(
        feature=F.USER_FEEDBACK,
        modules=("user-feedback",),
        step_ids={R.FRONTEND: ("frontend-user-feedback",)},
    ),
    F.SEER_MCP.value: FeatureMapping(
        feature=F.SEER_MCP,
        modules=("seer-mcp",),
        step_ids={R.AI_ML: ("ai-ml-seer-mcp",)},
    ),
    F.CUSTOM_METRICS.value: FeatureMapping(
        feature=F.CUSTOM_METRICS,
        modules=("custom-metrics",),
        step_ids={R.AI_ML: ("ai-ml-custom-metrics",)},
    ),
    F.METRICS_INSIGHTS.value: FeatureMapping(
        feature=F.METRICS_INSIGHTS,
        modules=("metrics-insights",),
        step_ids={R.PM_MANAGER: ("pm-understanding-metrics",)},
    ),
    F.STAKEHOLDER_REPORTING.value: FeatureMapping(
        feature=F.STAKEHOLDER_REPORTING,
        modules=("stakeholder-dashboards",),
        step_ids={R.PM_MANAGER: ("pm-stakeholder-reporting",)},
    ),
}

# Onboarding checklist: features offered per role, in display order
ROLE_FEATURES: Dict[EngineerRole, List[SentryFeature]] = {
    R.FRONTEND: [
        F.ERROR_TRACKING,
        F.PERFORMANCE_MONITORING,
        F.SESSION_REPLAY,
        F.LOGGING,
        F.DASHBOARDS_ALERTS,
        F.INTEGRATIONS,
        F.USER_FEEDBACK,
    ],
    R.BACKEND: [
        F.ERROR_TRACKING,
        F.PERFORMANCE_MONITORING,
        F.LOGGING,
        F.DISTRIBUTED_TRACING,
        F.RELEASE_HEALTH,
        F.DASHBOARDS_ALERTS,
    ],
    R.SRE: [
        F.ERROR_TRACKING,
        F.PERFORMANCE_MONITORING,
        F.DISTRIBUTED_TRACING,
        F.LOGGING,
        F.RELEASE_HEALTH,
        F.DASHBOARDS_ALERTS,
        F.INTEGRATIONS,
    ],
    R.FULLSTACK: [
        F.ERROR_TRACKING,
        F.PERFORMANCE_MONITORING,
        F.SESSION_REPLAY,
        F.LOGGING,
        F.DISTRIBUTED_TRACING,
        F.DASHBOARDS_ALERTS,
    ],
    R.AI_ML: [
        F.ERROR_TRACKING,
        F.PERFORMANCE_MONITORING,
        F.LOGGING,
        F.DISTRIBUTED_TRACING,
        F.DASHBOARDS_ALERTS,
        F.SEER_MCP,
        F.CUSTOM_METRICS,
    ],
    R.PM_MANAGER: [
        F.METRICS_INSIGHTS,
        F.STAKEHOLDER_REPORTING,
    ],
}


def features_for_role(role: EngineerRole) -> List[SentryFeature]:
    """Return the onboarding feature checklist for a role."""
    return list(ROLE_FEATURES.get(role, []))


def get_feature_mapping(feature_key: str) -> Optional[FeatureMapping]:
    """Look up the mapping for a feature key; unknown keys map to None."""
    if isinstance(feature_key, Enum):
        feature_key = feature_key.value
    return FEATURE_MAPPINGS.get(feature_key)


def coerce_role(role: object) -> Optional[EngineerRole]:
    """Return the EngineerRole for a role value, or None when it is not a known role."""
    if role is None:
        return None
    try:
        return EngineerRole(role)
    except ValueError:
        return None
