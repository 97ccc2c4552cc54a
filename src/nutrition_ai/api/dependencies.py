"""FastAPI dependency injection factories."""

from typing import Annotated

from fastapi import Depends, Request

from nutrition_ai.services.nutrition import NutritionAnalysisService


def get_nutrition_service(request: Request) -> NutritionAnalysisService:
    """
    Get the NutritionAnalysisService built at startup.

    The model client is initialized once in the app lifespan and shared by
    every request through ``app.state``.
    """
    return request.app.state.nutrition_service


NutritionServiceDep = Annotated[NutritionAnalysisService, Depends(get_nutrition_service)]
