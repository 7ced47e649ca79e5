"""
Role path definitions - one learning path template per engineer role.

Templates are immutable. Per-user completion and unlock flags are derived by
the learning path resolver, which annotates deep copies of these templates.
"""

from typing import Dict, Iterable, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from academy.catalog.features import EngineerRole, SentryFeature


class RoleInfo(BaseModel):
    """Display information for an engineer role."""

    model_config = ConfigDict(frozen=True)

    id: EngineerRole
    title: str
    description: str
    common_tasks: Tuple[str, ...] = ()


class LearningPathStep(BaseModel):
    """One step of a role's learning path. Lower priority comes first."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    feature: SentryFeature
    modules: Tuple[str, ...]
    outcomes: Tuple[str, ...] = ()
    estimated_time: str
    priority: int
    is_completed: bool = False
    is_unlocked: bool = False


class LearningPath(BaseModel):
    """Ordered curriculum for one role."""

    model_config = ConfigDict(frozen=True)

    id: str
    role: EngineerRole
    title: str
    description: str
    total_estimated_time: str
    steps: Tuple[LearningPathStep, ...]


ROLES: Dict[EngineerRole, RoleInfo] = {
    EngineerRole.BACKEND: RoleInfo(
        id=EngineerRole.BACKEND,
        title="Backend Engineer",
        description="You build APIs, services, and server-side logic. Focus on reliability, performance, and data integrity.",
        common_tasks=[
            "Building REST APIs and microservices",
            "Database optimization and queries",
            "Server performance monitoring",
            "Service-to-service communication",
        ],
    ),
    EngineerRole.FRONTEND: RoleInfo(
        id=EngineerRole.FRONTEND,
        title="Frontend Engineer",
        description="You create user interfaces and experiences. Focus on performance, accessibility, and user satisfaction.",
        common_tasks=[
            "Building responsive web applications",
            "Optimizing page load performance",
            "Debugging user interaction issues",
            "Cross-browser compatibility",
        ],
    ),
    EngineerRole.SRE: RoleInfo(
        id=EngineerRole.SRE,
        title="SRE / DevOps",
        description="You maintain infrastructure and ensure system reliability. Focus on uptime, scalability, and incident response.",
        common_tasks=[
            "Managing infrastructure and deployments",
            "Setting up monitoring and alerting",
            "Incident response and on-call",
            "System capacity planning",
        ],
    ),
    EngineerRole.FULLSTACK: RoleInfo(
        id=EngineerRole.FULLSTACK,
        title="Full-Stack Engineer",
        description="You work across the entire stack. Focus on end-to-end user experiences and system integration.",
        common_tasks=[
            "Building complete features end-to-end",
            "Integrating frontend and backend systems",
            "Debugging across multiple layers",
            "Coordinating releases and deployments",
        ],
    ),
    EngineerRole.AI_ML: RoleInfo(
        id=EngineerRole.AI_ML,
        title="AI / ML Engineer",
        description="You ship models and LLM-powered features. Focus on inference latency, pipeline health, and model quality.",
        common_tasks=[
            "Serving models and LLM applications",
            "Monitoring inference latency and cost",
            "Debugging data and training pipelines",
            "Tracking model quality over time",
        ],
    ),
    EngineerRole.PM_MANAGER: RoleInfo(
        id=EngineerRole.PM_MANAGER,
        title="Product / Engineering Manager",
        description="You steer teams and products. Focus on quality trends, release confidence, and reporting to stakeholders.",
        common_tasks=[
            "Tracking product quality and user impact",
            "Prioritizing issues with engineering",
            "Reporting health to stakeholders",
            "Reviewing release readiness",
        ],
    ),
}


LEARNING_PATHS: Dict[EngineerRole, LearningPath] = {
    EngineerRole.FRONTEND: LearningPath(
        id="frontend-path",
        role=EngineerRole.FRONTEND,
        title="Frontend Engineer Learning Path",
        description="Optimize user experience with error tracking, performance monitoring, and session replay",
        total_estimated_time="9 hours",
        steps=[
            LearningPathStep(
                id="frontend-error-tracking",
                title="JavaScript Error Tracking",
                description="Capture and debug client-side errors and exceptions",
                feature=SentryFeature.ERROR_TRACKING,
                modules=["sentry-fundamentals", "react-error-boundaries"],
                outcomes=[
                    "Install Sentry in your frontend application",
                    "Capture JavaScript exceptions and unhandled promises",
                    "Add user context for better error debugging",
                ],
                estimated_time="1.5 hours",
                priority=1,
            ),
            LearningPathStep(
                id="frontend-performance",
                title="Web Performance Monitoring",
                description="Measure and optimize Core Web Vitals and page performance",
                feature=SentryFeature.PERFORMANCE_MONITORING,
                modules=["performance-monitoring"],
                outcomes=[
                    "Track LCP, INP, and CLS metrics",
                    "Monitor page load performance",
                    "Identify slow components and renders",
                ],
                estimated_time="2 hours",
                priority=2,
            ),
            LearningPathStep(
                id="frontend-session-replay",
                title="Session Replay & Debugging",
                description="See exactly what users experienced when errors occurred",
                feature=SentryFeature.SESSION_REPLAY,
                modules=["react-error-boundaries"],
                outcomes=[
                    "Enable session replay for error context",
                    "Debug user interactions and UI issues",
                ],
                estimated_time="1.5 hours",
                priority=3,
            ),
            LearningPathStep(
                id="frontend-logging",
                title="Frontend Logging",
                description="Send structured browser logs alongside errors and traces",
                feature=SentryFeature.LOGGING,
                modules=["react-error-boundaries"],
                outcomes=[
                    "Emit structured logs from the browser",
                    "Correlate logs with issues and replays",
                ],
                estimated_time="1 hour",
                priority=4,
            ),
            LearningPathStep(
                id="frontend-user-feedback",
                title="User Feedback",
                description="Collect feedback from users right where problems happen",
                feature=SentryFeature.USER_FEEDBACK,
                modules=["user-feedback"],
                outcomes=[
                    "Add the feedback widget to your app",
                    "Link feedback to errors and replays",
                ],
                estimated_time="45 minutes",
                priority=5,
            ),
            LearningPathStep(
                id="frontend-dashboards-alerts",
                title="Dashboards & Alerts",
                description="Watch user-facing health and get alerted on regressions",
                feature=SentryFeature.DASHBOARDS_ALERTS,
                modules=["custom-dashboards"],
                outcomes=[
                    "Build a frontend health dashboard",
                    "Alert on error spikes and Web Vitals regressions",
                ],
                estimated_time="1 hour",
                priority=6,
            ),
            LearningPathStep(
                id="frontend-integrations",
                title="Team Integrations",
                description="Route frontend issues into your team's tools",
                feature=SentryFeature.INTEGRATIONS,
                modules=["team-workflows"],
                outcomes=[
                    "Connect source control and issue trackers",
                    "Assign ownership with code owners",
                ],
                estimated_time="1 hour",
                priority=7,
            ),
        ],
    ),
    EngineerRole.BACKEND: LearningPath(
        id="backend-path",
        role=EngineerRole.BACKEND,
        title="Backend Engineer Learning Path",
        description="Master error tracking, tracing, and performance monitoring for server-side applications",
        total_estimated_time="8.5 hours",
        steps=[
            LearningPathStep(
                id="backend-error-tracking",
                title="Error Tracking Foundation",
                description="Capture and understand exceptions in your APIs and services",
                feature=SentryFeature.ERROR_TRACKING,
                modules=["nodejs-integration", "sentry-fundamentals"],
                outcomes=[
                    "Install Sentry SDK in your backend services",
                    "Capture API exceptions and server errors",
                    "Set up context for better debugging",
                ],
                estimated_time="1.5 hours",
                priority=1,
            ),
            LearningPathStep(
                id="backend-performance",
                title="API Performance Monitoring",
                description="Monitor API performance and find slow endpoints",
                feature=SentryFeature.PERFORMANCE_MONITORING,
                modules=["performance-monitoring"],
                outcomes=[
                    "Track API response times and throughput",
                    "Identify slow database queries and external calls",
                ],
                estimated_time="2 hours",
                priority=2,
            ),
            LearningPathStep(
                id="backend-distributed-tracing",
                title="Distributed Tracing",
                description="Track requests across services to find latency bottlenecks",
                feature=SentryFeature.DISTRIBUTED_TRACING,
                modules=["distributed-tracing"],
                outcomes=[
                    "Instrument APIs with distributed tracing",
                    "Follow requests across microservices",
                ],
                estimated_time="2 hours",
                priority=3,
            ),
            LearningPathStep(
                id="backend-logging",
                title="Structured Logging",
                description="Connect service logs to the errors and traces they explain",
                feature=SentryFeature.LOGGING,
                modules=["structured-logging"],
                outcomes=[
                    "Forward structured logs from your services",
                    "Search logs in the context of a trace",
                ],
                estimated_time="1 hour",
                priority=4,
            ),
            LearningPathStep(
                id="backend-release-health",
                title="Release Health",
                description="Know whether a deploy made things better or worse",
                feature=SentryFeature.RELEASE_HEALTH,
                modules=["release-health"],
                outcomes=[
                    "Associate commits and deploys with releases",
                    "Track crash-free rates per release",
                ],
                estimated_time="1 hour",
                priority=5,
            ),
            LearningPathStep(
                id="backend-dashboards-alerts",
                title="Dashboards & Alerts",
                description="Monitor service health and get alerted on regressions",
                feature=SentryFeature.DASHBOARDS_ALERTS,
                modules=["custom-dashboards"],
                outcomes=[
                    "Set up performance alerts for slow endpoints",
                    "Monitor database and cache performance",
                ],
                estimated_time="1 hour",
                priority=6,
            ),
        ],
    ),
    EngineerRole.SRE: LearningPath(
        id="sre-path",
        role=EngineerRole.SRE,
        title="SRE/DevOps Learning Path",
        description="Build comprehensive monitoring, alerting, and incident response workflows",
        total_estimated_time="8 hours",
        steps=[
            LearningPathStep(
                id="sre-error-tracking",
                title="Infrastructure Error Monitoring",
                description="Aggregate errors across all services and infrastructure",
                feature=SentryFeature.ERROR_TRACKING,
                modules=["nodejs-integration", "sentry-fundamentals"],
                outcomes=[
                    "Monitor errors across multiple services",
                    "Set up service-level error tracking",
                ],
                estimated_time="1.5 hours",
                priority=1,
            ),
            LearningPathStep(
                id="sre-performance-tracing",
                title="Distributed System Tracing",
                description="Trace requests across microservices and infrastructure",
                feature=SentryFeature.DISTRIBUTED_TRACING,
                modules=["performance-monitoring", "distributed-tracing"],
                outcomes=[
                    "Implement end-to-end request tracing",
                    "Monitor service dependencies and latency",
                ],
                estimated_time="2 hours",
                priority=2,
            ),
            LearningPathStep(
                id="sre-logging",
                title="Centralized Logging",
                description="Bring infrastructure logs next to errors and traces",
                feature=SentryFeature.LOGGING,
                modules=["structured-logging"],
                outcomes=[
                    "Ship logs from every service",
                    "Pivot from an alert to the relevant logs",
                ],
                estimated_time="1 hour",
                priority=3,
            ),
            LearningPathStep(
                id="sre-release-health",
                title="Release & Deploy Health",
                description="Catch bad deploys before they become incidents",
                feature=SentryFeature.RELEASE_HEALTH,
                modules=["release-health"],
                outcomes=[
                    "Track deploys across environments",
                    "Alert on crash-free rate drops after a release",
                ],
                estimated_time="1 hour",
                priority=4,
            ),
            LearningPathStep(
                id="sre-dashboards",
                title="Dashboards & Incident Response",
                description="Create dashboards for infrastructure health and on-call",
                feature=SentryFeature.DASHBOARDS_ALERTS,
                modules=["custom-dashboards"],
                outcomes=[
                    "Build infrastructure health dashboards",
                    "Set up automated alerting and escalation",
                ],
                estimated_time="1.5 hours",
                priority=5,
            ),
            LearningPathStep(
                id="sre-integrations",
                title="On-call Integrations",
                description="Integrate alerts with paging and chat workflows",
                feature=SentryFeature.INTEGRATIONS,
                modules=["team-workflows"],
                outcomes=[
                    "Integrate with PagerDuty and Slack",
                    "Route issues to the owning team",
                ],
                estimated_time="1 hour",
                priority=6,
            ),
        ],
    ),
    EngineerRole.FULLSTACK: LearningPath(
        id="fullstack-path",
        role=EngineerRole.FULLSTACK,
        title="Full-Stack Engineer Learning Path",
        description="Monitor complete user journeys from frontend to backend with comprehensive observability",
        total_estimated_time="9.5 hours",
        steps=[
            LearningPathStep(
                id="fullstack-error-tracking",
                title="End-to-End Error Tracking",
                description="Connect frontend and backend errors for complete visibility",
                feature=SentryFeature.ERROR_TRACKING,
                modules=["sentry-fundamentals", "nodejs-integration", "react-error-boundaries"],
                outcomes=[
                    "Track errors across frontend and backend",
                    "Correlate user actions with server errors",
                ],
                estimated_time="2.5 hours",
                priority=1,
            ),
            LearningPathStep(
                id="fullstack-performance",
                title="Cross-Service Performance",
                description="Monitor performance from user interaction to database",
                feature=SentryFeature.PERFORMANCE_MONITORING,
                modules=["performance-monitoring"],
                outcomes=[
                    "Monitor both client and server performance",
                    "Identify performance bottlenecks across layers",
                ],
                estimated_time="2 hours",
                priority=2,
            ),
            LearningPathStep(
                id="fullstack-distributed-tracing",
                title="Full-Stack Tracing",
                description="Follow a click all the way to the database and back",
                feature=SentryFeature.DISTRIBUTED_TRACING,
                modules=["distributed-tracing"],
                outcomes=[
                    "Propagate traces from browser to backend",
                    "Read a trace waterfall across layers",
                ],
                estimated_time="1.5 hours",
                priority=3,
            ),
            LearningPathStep(
                id="fullstack-session-replay",
                title="Session Replay",
                description="Replay user sessions that hit backend failures",
                feature=SentryFeature.SESSION_REPLAY,
                modules=["react-error-boundaries"],
                outcomes=[
                    "Enable replay on error",
                    "Jump from a replay to the backend trace",
                ],
                estimated_time="1 hour",
                priority=4,
            ),
            LearningPathStep(
                id="fullstack-logging",
                title="Logging Across the Stack",
                description="Correlate browser and server logs with one trace id",
                feature=SentryFeature.LOGGING,
                modules=["structured-logging"],
                outcomes=[
                    "Send logs from client and server",
                    "Filter logs by trace",
                ],
                estimated_time="1 hour",
                priority=5,
            ),
            LearningPathStep(
                id="fullstack-dashboards-alerts",
                title="Release Dashboards & Alerts",
                description="Monitor releases and catch regressions across the stack",
                feature=SentryFeature.DASHBOARDS_ALERTS,
                modules=["custom-dashboards", "team-workflows"],
                outcomes=[
                    "Create unified dashboards for stack health",
                    "Set up deployment monitoring and rollback alerts",
                ],
                estimated_time="1.5 hours",
                priority=6,
            ),
        ],
    ),
    EngineerRole.AI_ML: LearningPath(
        id="ai-ml-path",
        role=EngineerRole.AI_ML,
        title="AI/ML Engineer Learning Path",
        description="Observe model serving, pipelines, and LLM features from error to insight",
        total_estimated_time="8.5 hours",
        steps=[
            LearningPathStep(
                id="ai-ml-error-tracking",
                title="Error Tracking for ML Services",
                description="Capture failures in inference services and pipelines",
                feature=SentryFeature.ERROR_TRACKING,
                modules=["nodejs-integration", "sentry-fundamentals"],
                outcomes=[
                    "Instrument model-serving endpoints",
                    "Capture pipeline task failures with context",
                ],
                estimated_time="1.5 hours",
                priority=1,
            ),
            LearningPathStep(
                id="ai-ml-performance",
                title="Inference Performance",
                description="Measure latency and throughput of model calls",
                feature=SentryFeature.PERFORMANCE_MONITORING,
                modules=["performance-monitoring"],
                outcomes=[
                    "Track inference latency percentiles",
                    "Spot slow preprocessing steps",
                ],
                estimated_time="1.5 hours",
                priority=2,
            ),
            LearningPathStep(
                id="ai-ml-distributed-tracing",
                title="Tracing LLM Pipelines",
                description="Trace prompts through retrieval, tools, and model calls",
                feature=SentryFeature.DISTRIBUTED_TRACING,
                modules=["distributed-tracing"],
                outcomes=[
                    "Trace multi-step agent runs",
                    "Attribute latency to each pipeline stage",
                ],
                estimated_time="1.5 hours",
                priority=3,
            ),
            LearningPathStep(
                id="ai-ml-logging",
                title="Pipeline Logging",
                description="Keep structured logs of training and inference runs",
                feature=SentryFeature.LOGGING,
                modules=["structured-logging"],
                outcomes=[
                    "Log run metadata in a structured way",
                    "Link logs to failed runs",
                ],
                estimated_time="1 hour",
                priority=4,
            ),
            LearningPathStep(
                id="ai-ml-custom-metrics",
                title="Custom Model Metrics",
                description="Emit token usage, cost, and quality metrics",
                feature=SentryFeature.CUSTOM_METRICS,
                modules=["custom-metrics"],
                outcomes=[
                    "Track token usage and cost per request",
                    "Record model quality signals",
                ],
                estimated_time="1 hour",
                priority=5,
            ),
            LearningPathStep(
                id="ai-ml-dashboards-alerts",
                title="Model Health Dashboards",
                description="Alert on drift in latency, cost, and error rates",
                feature=SentryFeature.DASHBOARDS_ALERTS,
                modules=["custom-dashboards"],
                outcomes=[
                    "Build a model health dashboard",
                    "Alert on cost and latency regressions",
                ],
                estimated_time="1 hour",
                priority=6,
            ),
            LearningPathStep(
                id="ai-ml-seer-mcp",
                title="Seer & MCP",
                description="Use AI-assisted debugging and MCP tooling on your issues",
                feature=SentryFeature.SEER_MCP,
                modules=["seer-mcp"],
                outcomes=[
                    "Run root cause analysis with Seer",
                    "Query issues from your editor through MCP",
                ],
                estimated_time="1 hour",
                priority=7,
            ),
        ],
    ),
    EngineerRole.PM_MANAGER: LearningPath(
        id="pm-manager-path",
        role=EngineerRole.PM_MANAGER,
        title="Product & Engineering Manager Learning Path",
        description="Turn monitoring data into product decisions and stakeholder reports",
        total_estimated_time="2.75 hours",
        steps=[
            LearningPathStep(
                id="pm-understanding-metrics",
                title="Understanding Quality Metrics",
                description="Learn which numbers describe product health and user impact",
                feature=SentryFeature.METRICS_INSIGHTS,
                modules=["metrics-insights"],
                outcomes=[
                    "Read crash-free rates and user impact",
                    "Prioritize issues by affected users",
                ],
                estimated_time="1 hour",
                priority=1,
            ),
            LearningPathStep(
                id="pm-stakeholder-reporting",
                title="Stakeholder Reporting",
                description="Build dashboards that answer leadership questions",
                feature=SentryFeature.STAKEHOLDER_REPORTING,
                modules=["stakeholder-dashboards"],
                outcomes=[
                    "Create a weekly quality dashboard",
                    "Share trends with stakeholders",
                ],
                estimated_time="1 hour",
                priority=2,
            ),
            LearningPathStep(
                id="pm-release-insights",
                title="Release Confidence",
                description="Judge whether a release is ready to roll out further",
                feature=SentryFeature.RELEASE_HEALTH,
                modules=["release-health"],
                outcomes=[
                    "Compare adoption and stability between releases",
                ],
                estimated_time="45 minutes",
                priority=3,
            ),
        ],
    ),
}


def validate_learning_paths(paths: Iterable[LearningPath]) -> None:
    """Reject templates whose steps cannot be totally ordered by priority."""
    for path in paths:
        step_ids = set()
        priorities = set()
        for step in path.steps:
            if step.id in step_ids:
                raise ValueError(f"Path '{path.id}' has duplicate step id '{step.id}'.")
            if step.priority < 1:
                raise ValueError(f"Step '{step.id}' has non-positive priority {step.priority}.")
            if step.priority in priorities:
                raise ValueError(f"Path '{path.id}' has duplicate priority {step.priority}.")
            if not step.modules:
                raise ValueError(f"Step '{step.id}' has no modules.")
            step_ids.add(step.id)
            priorities.add(step.priority)


validate_learning_paths(LEARNING_PATHS.values())


def get_role_info(role: EngineerRole) -> Optional[RoleInfo]:
    """Return display information for a role."""
    return ROLES.get(role)


def get_learning_path_template(role: EngineerRole) -> Optional[LearningPath]:
    """Return the immutable path template for a role, or None when undefined."""
    return LEARNING_PATHS.get(role)
