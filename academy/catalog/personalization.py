"""
Role personalization - why a module matters for a given role.
"""

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel

from academy.catalog.features import EngineerRole


class Difficulty(str, Enum):
    """Difficulty of a module for a role."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class ModulePersonalization(BaseModel):
    """Role-specific copy for one module."""

    explanation: str
    why_relevant: str
    next_step_nudge: str


class PersonalizedContent(BaseModel):
    """Personalized content returned to clients."""

    module_id: str
    role_specific_explanation: str
    why_relevant_to_role: str
    next_step_nudge: str
    difficulty_for_role: Difficulty


ADVANCED_MODULES = frozenset({"custom-dashboards", "team-workflows", "distributed-tracing", "seer-mcp"})
INTERMEDIATE_MODULES = frozenset(
    {"performance-monitoring", "react-error-boundaries", "release-health", "custom-metrics", "structured-logging"}
)


ROLE_PERSONALIZATIONS: Dict[EngineerRole, Dict[str, ModulePersonalization]] = {
    EngineerRole.BACKEND: {
        "nodejs-integration": ModulePersonalization(
            explanation="Error tracking helps you catch API failures, database connection issues, and service exceptions before users complain.",
            why_relevant="As a backend engineer, you need visibility into server-side errors that can affect multiple users and downstream services.",
            next_step_nudge="Next, we'll measure API performance so you can find slow endpoints and queries.",
        ),
        "performance-monitoring": ModulePersonalization(
            explanation="Performance monitoring shows you API response times, database query performance, and service throughput.",
            why_relevant="Your APIs are the backbone of the application: slow backend performance directly impacts user experience.",
            next_step_nudge="Let's add distributed tracing to follow requests across your services.",
        ),
        "custom-dashboards": ModulePersonalization(
            explanation="Dashboards give you a centralized view of service health, error rates, and performance metrics.",
            why_relevant="You are responsible for backend reliability and need proactive monitoring to catch issues before they cascade.",
            next_step_nudge="You're building a monitoring foundation that keeps service availability high.",
        ),
    },
    EngineerRole.FRONTEND: {
        "sentry-fundamentals": ModulePersonalization(
            explanation="Error tracking captures JavaScript exceptions, promise rejections, and React component errors that break the user experience.",
            why_relevant="Frontend errors directly impact users and can lead to lost conversions and frustrated users.",
            next_step_nudge="Next, we'll monitor your app's performance to ensure fast loading and smooth interactions.",
        ),
        "performance-monitoring": ModulePersonalization(
            explanation="Performance monitoring tracks Core Web Vitals that search engines and users care about.",
            why_relevant="Slow frontend performance hurts engagement, SEO rankings, and conversion rates, especially on mobile.",
            next_step_nudge="Let's add session replay so you can see exactly what users experienced.",
        ),
        "react-error-boundaries": ModulePersonalization(
            explanation="Session replay shows you the exact user interactions that led to errors.",
            why_relevant="Frontend bugs are often hard to reproduce; replay lets you see the user's perspective.",
            next_step_nudge="You're building frontend monitoring that helps you deliver great user experiences.",
        ),
    },
    EngineerRole.SRE: {
        "nodejs-integration": ModulePersonalization(
            explanation="Error monitoring aggregates issues across your infrastructure, giving you visibility into service health.",
            why_relevant="You own system reliability; error tracking helps you identify and respond to incidents quickly.",
            next_step_nudge="Next, we'll add distributed tracing to understand request flows across microservices.",
        ),
        "performance-monitoring": ModulePersonalization(
            explanation="Performance monitoring shows service latency, throughput, and dependency health across distributed systems.",
            why_relevant="Performance issues cascade through distributed systems; you need visibility to keep your SLOs.",
            next_step_nudge="Let's build dashboards and alerts that plug into your on-call process.",
        ),
        "custom-dashboards": ModulePersonalization(
            explanation="Dashboards centralize infrastructure health metrics and integrate with PagerDuty, Slack, and Grafana.",
            why_relevant="Unified dashboards help you correlate issues across services during incident response.",
            next_step_nudge="You're building a monitoring stack that will reduce MTTR.",
        ),
    },
    EngineerRole.FULLSTACK: {
        "sentry-fundamentals": ModulePersonalization(
            explanation="Error tracking connects frontend and backend errors, giving you end-to-end visibility into user journeys.",
            why_relevant="You need to understand how frontend issues relate to backend problems and vice versa.",
            next_step_nudge="Next, we'll track performance from browser interactions to database queries.",
        ),
        "performance-monitoring": ModulePersonalization(
            explanation="Performance monitoring shows the complete user journey, from page load to API response to database query.",
            why_relevant="Full-stack performance issues require understanding both client rendering and server processing.",
            next_step_nudge="Let's trace requests across the whole stack next.",
        ),
        "team-workflows": ModulePersonalization(
            explanation="Release monitoring tracks deployment health across frontend and backend.",
            why_relevant="When you deploy full-stack changes, you need to see how they affect the entire user experience.",
            next_step_nudge="You're building observability that covers your entire technology stack.",
        ),
    },
    EngineerRole.AI_ML: {
        "performance-monitoring": ModulePersonalization(
            explanation="Performance monitoring shows where inference time goes, from preprocessing to the model call.",
            why_relevant="Latency is a product feature for AI applications, and cost follows it.",
            next_step_nudge="Next, we'll trace multi-step LLM pipelines end to end.",
        ),
        "custom-metrics": ModulePersonalization(
            explanation="Custom metrics let you record token usage, cost, and quality signals per request.",
            why_relevant="Model behaviour changes silently; metrics make drift visible.",
            next_step_nudge="Let's turn those metrics into a model health dashboard.",
        ),
    },
    EngineerRole.PM_MANAGER: {
        "metrics-insights": ModulePersonalization(
            explanation="Quality metrics summarize how many users hit problems and how often.",
            why_relevant="Prioritization is easier when you can see user impact instead of raw error counts.",
            next_step_nudge="Next, we'll package these metrics for stakeholders.",
        ),
        "stakeholder-dashboards": ModulePersonalization(
            explanation="Stakeholder dashboards present product health in a form leadership can act on.",
            why_relevant="Regular, trusted reporting builds confidence in release decisions.",
            next_step_nudge="You're ready to judge release readiness with data.",
        ),
    },
}


def difficulty_for_role(module_id: str, role: EngineerRole) -> Difficulty:
    """Heuristic difficulty of a module; error-tracking basics are beginner for everyone."""
    if module_id in ADVANCED_MODULES:
        # managers only read these dashboards, they do not build them
        if role == EngineerRole.PM_MANAGER:
            return Difficulty.INTERMEDIATE
        return Difficulty.ADVANCED
    if module_id in INTERMEDIATE_MODULES:
        return Difficulty.INTERMEDIATE
    return Difficulty.BEGINNER


def get_personalized_content(module_id: str, role: Optional[EngineerRole]) -> Optional[PersonalizedContent]:
    """Return role-specific copy for a module, or None when no adaptation exists."""
    if role is None:
        return None
    personalization = ROLE_PERSONALIZATIONS.get(role, {}).get(module_id)
    if personalization is None:
        return None
    return PersonalizedContent(
        module_id=module_id,
        role_specific_explanation=personalization.explanation,
        why_relevant_to_role=personalization.why_relevant,
        next_step_nudge=personalization.next_step_nudge,
        difficulty_for_role=difficulty_for_role(module_id, role),
    )
