"""Nutrition analysis and recipe API routes."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status
from pydantic import BaseModel, Field

from nutrition_ai.api.dependencies import NutritionServiceDep
from nutrition_ai.models.analysis import ImageFile

router = APIRouter()
logger = logging.getLogger(__name__)

MAX_IMAGE_SIZE = 10 * 1024 * 1024  # 10 MB
ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/webp", "image/heic"}


class FoodNameRequest(BaseModel):
    """Request body for food name analysis."""

    food_name: str = Field(..., min_length=1, description="Food to analyze, e.g. 'one banana'")
    health_conditions: list[str] = Field(default_factory=list)


class RecipeGenerationRequest(BaseModel):
    """Request body for recipe generation."""

    ingredients: list[str] = Field(..., min_length=1)
    health_conditions: list[str] = Field(default_factory=list)
    dietary_preferences: dict[str, Any] = Field(default_factory=dict)


def parse_health_conditions(raw: str | None) -> list[str]:
    """Split a comma-separated form value into condition names."""
    if not raw:
        return []
    return [c.strip() for c in raw.split(",") if c.strip()]


@router.post("/analysis/image")
async def analyze_image(
    service: NutritionServiceDep,
    image: Annotated[UploadFile, File(description="Food photo (JPEG, PNG or WebP)")],
    health_conditions: Annotated[
        str | None, Form(description="Comma-separated health conditions")
    ] = None,
) -> dict[str, Any]:
    """
    Analyze the food in an uploaded photo.

    Always returns a result; check ``analysisMetadata.status`` to tell a
    successful analysis from a fallback.
    """
    content_type = image.content_type or "image/jpeg"
    if content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported image type: {content_type}",
        )

    data = await image.read()
    if not data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Image file is empty",
        )
    if len(data) > MAX_IMAGE_SIZE:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Image exceeds {MAX_IMAGE_SIZE // (1024 * 1024)} MB",
        )

    return await service.analyze_food_image(
        ImageFile(data=data, mime_type=content_type),
        parse_health_conditions(health_conditions),
    )


@router.post("/analysis/name")
async def analyze_name(
    body: FoodNameRequest,
    service: NutritionServiceDep,
) -> dict[str, Any]:
    """Analyze a food by name."""
    return await service.analyze_food_by_name(body.food_name, body.health_conditions)


@router.post("/recipes/generate")
async def generate_recipe(
    body: RecipeGenerationRequest,
    service: NutritionServiceDep,
) -> dict[str, Any]:
    """Generate a healthy recipe from a list of ingredients."""
    return await service.generate_healthy_recipe(
        body.ingredients,
        body.health_conditions,
        body.dietary_preferences,
    )
