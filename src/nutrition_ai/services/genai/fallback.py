"""Placeholder results returned whenever an analysis cannot be completed."""

from typing import Any, Iterable

from nutrition_ai.models.analysis import AnalysisMetadata, StructuredResult

UNKNOWN_ERROR = "Unknown error"


def clean_conditions(health_conditions: Iterable[Any] | None) -> list[str]:
    """Materialize health conditions once, dropping None entries and stringifying the rest."""
    return [str(c) for c in (health_conditions or []) if c is not None]


def build_fallback_response(
    error: BaseException | str | None,
    health_conditions: Iterable[str] | None = None,
    *,
    model: str = "unknown",
    operation: str | None = None,
) -> StructuredResult:
    """
    Build a schema-compatible error record.

    Callers get the same top-level shape as a successful analysis, with
    ``analysisMetadata.status == "error"`` and the captured error message.

    Args:
        error: The exception (or message) that caused the failure
        health_conditions: Health conditions supplied with the request
        model: Model name the request was meant for
        operation: Public operation that failed

    Returns:
        Fallback result dict
    """
    if isinstance(error, BaseException):
        message = getattr(error, "message", None) or str(error) or type(error).__name__
    else:
        message = error or UNKNOWN_ERROR

    metadata = AnalysisMetadata(
        status="error",
        model=model,
        health_conditions=clean_conditions(health_conditions),
        operation=operation,
        error_message=message,
    )

    result: dict[str, Any] = {
        "foodName": "Analysis Failed",
        "description": "Unable to complete the analysis. Please try again.",
        "status": "error",
        "error": message,
        "nutritionalInfo": {},
        "healthAnalysis": {
            "suitable": None,
            "warnings": [],
            "recommendations": [],
        },
        "analysisMetadata": metadata.to_dict(),
    }
    return result
