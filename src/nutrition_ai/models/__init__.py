"""Pydantic models for requests, credentials and result metadata."""

from .analysis import (
    AnalysisMetadata,
    AnalysisRequest,
    ImageAnalysis,
    ImageFile,
    NameAnalysis,
    RecipeRequest,
    ServiceAccountCredential,
    StructuredResult,
)

__all__ = [
    "AnalysisMetadata",
    "AnalysisRequest",
    "ImageAnalysis",
    "ImageFile",
    "NameAnalysis",
    "RecipeRequest",
    "ServiceAccountCredential",
    "StructuredResult",
]
