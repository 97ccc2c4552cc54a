"""Business logic services."""

from .credentials import resolve_credential
from .nutrition import NutritionAnalysisService

__all__ = [
    "NutritionAnalysisService",
    "resolve_credential",
]
