"""
Nutrition analysis service.

Public entry points for food image analysis, food name analysis and recipe
generation. Every operation always returns a structured result: failures of
any kind (client not initialized, remote error, unparseable response) turn
into a fallback record with ``analysisMetadata.status == "error"``.
"""

import logging
from typing import Any, Callable, Iterable, Sequence

from pydantic import ValidationError

from nutrition_ai.core.exceptions import NutritionAIError
from nutrition_ai.models.analysis import (
    AnalysisMetadata,
    AnalysisRequest,
    ImageAnalysis,
    ImageFile,
    NameAnalysis,
    RecipeRequest,
    StructuredResult,
)
from nutrition_ai.services.genai import (
    ModelClient,
    build_fallback_response,
    clean_conditions,
    extract_json,
)

logger = logging.getLogger(__name__)

PARSE_FAILURE_MESSAGE = "Failed to parse JSON response from AI."


class NutritionAnalysisService:
    """Runs analysis requests against an injected model client."""

    def __init__(self, model_client: ModelClient):
        self._model_client = model_client

    @property
    def model_client(self) -> ModelClient:
        return self._model_client

    async def analyze_food_image(
        self,
        image_file: ImageFile,
        health_conditions: Iterable[str] | None = (),
    ) -> StructuredResult:
        """Analyze the food shown in an uploaded image."""
        return await self._run(
            "analyze_food_image",
            health_conditions,
            lambda conditions: ImageAnalysis(
                image_bytes=image_file.data,
                mime_type=image_file.mime_type,
                health_conditions=conditions,
            ),
        )

    async def analyze_food_by_name(
        self,
        food_name: str,
        health_conditions: Iterable[str] | None = (),
    ) -> StructuredResult:
        """Analyze a food described by name (e.g. "one banana")."""
        return await self._run(
            "analyze_food_by_name",
            health_conditions,
            lambda conditions: NameAnalysis(
                food_name=food_name,
                health_conditions=conditions,
            ),
        )

    async def generate_healthy_recipe(
        self,
        ingredients: Sequence[str],
        health_conditions: Iterable[str] | None = (),
        dietary_preferences: dict[str, Any] | None = None,
    ) -> StructuredResult:
        """Generate a healthy recipe from the given ingredients."""
        return await self._run(
            "generate_healthy_recipe",
            health_conditions,
            lambda conditions: RecipeRequest(
                ingredients=list(ingredients or []),
                health_conditions=conditions,
                dietary_preferences=dietary_preferences or {},
            ),
        )

    async def _run(
        self,
        operation: str,
        health_conditions: Iterable[str] | None,
        build_request: Callable[[list[str]], AnalysisRequest],
    ) -> StructuredResult:
        model = self._model_client.model
        conditions = clean_conditions(health_conditions)

        try:
            request = build_request(conditions)
            conditions = request.health_conditions
            response_text = await self._model_client.invoke(request)
        except NutritionAIError as e:
            logger.error(f"{operation} failed: {e.message}")
            return build_fallback_response(e, conditions, model=model, operation=operation)
        except ValidationError as e:
            logger.warning(f"{operation} received an invalid request: {e}")
            return build_fallback_response(e, conditions, model=model, operation=operation)
        except Exception as e:
            logger.exception(f"Unexpected error in {operation}")
            return build_fallback_response(e, conditions, model=model, operation=operation)

        parsed = extract_json(response_text)
        if parsed is None:
            logger.error(f"{operation}: {PARSE_FAILURE_MESSAGE}")
            return build_fallback_response(
                PARSE_FAILURE_MESSAGE, conditions, model=model, operation=operation
            )

        return _with_metadata(parsed, model, conditions, operation)


def _with_metadata(
    parsed: dict[str, Any],
    model: str,
    health_conditions: list[str],
    operation: str,
) -> StructuredResult:
    """Attach success metadata without touching the model's own fields."""
    metadata = AnalysisMetadata(
        status="success",
        model=model,
        health_conditions=health_conditions,
        operation=operation,
    ).to_dict()

    existing = parsed.get("analysisMetadata")
    if isinstance(existing, dict):
        metadata = {**existing, **metadata}

    return {**parsed, "analysisMetadata": metadata}
