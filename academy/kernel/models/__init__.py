"""
Kernel Data Models

SQLAlchemy models backing the progress service.
"""

from academy.kernel.models.base import Base, TimestampMixin, generate_uuid
from academy.kernel.models.learner_progress import LearnerProgress

__all__ = [
    "Base",
    "TimestampMixin",
    "generate_uuid",
    "LearnerProgress",
]
