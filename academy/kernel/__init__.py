"""
Kernel Layer

Storage models for the progress service. Nothing above the repository layer
touches these directly.
"""

from academy.kernel.models import Base, LearnerProgress

__all__ = [
    "Base",
    "LearnerProgress",
]
