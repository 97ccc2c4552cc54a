"""Prompts for Gemini nutrition analysis and recipe generation."""

import json
from typing import Any

JSON_ONLY_INSTRUCTION = (
    "Respond with ONLY a single valid JSON object. "
    "Do not include any text outside the JSON."
)

FOOD_IMAGE_PROMPT = """You are an expert nutritionist. Identify the food in this image and provide a detailed nutritional analysis.

Estimate the portion shown and report values for that portion.

Return JSON with this structure:
{
  "foodName": "grilled chicken salad",
  "description": "Mixed greens with grilled chicken breast and vinaigrette",
  "servingSize": "1 bowl (350 g)",
  "nutritionalInfo": {
    "calories": "420",
    "protein": "35 g",
    "carbohydrates": "18 g",
    "fat": "22 g",
    "fiber": "6 g",
    "sugar": "7 g",
    "sodium": "640 mg"
  },
  "ingredients": ["chicken breast", "lettuce", "tomato", "olive oil"],
  "healthScore": 8,
  "healthAnalysis": {
    "suitable": true,
    "warnings": [],
    "recommendations": []
  }
}"""

FOOD_NAME_PROMPT = """Provide a comprehensive nutritional analysis for "{food_name}".

Use a typical single serving unless the name specifies a quantity.

Return JSON with this structure:
{{
  "foodName": "{food_name}",
  "description": "short description",
  "servingSize": "typical serving",
  "nutritionalInfo": {{
    "calories": "",
    "protein": "",
    "carbohydrates": "",
    "fat": "",
    "fiber": "",
    "sugar": "",
    "sodium": ""
  }},
  "healthScore": 0,
  "healthAnalysis": {{
    "suitable": true,
    "warnings": [],
    "recommendations": []
  }}
}}"""

RECIPE_PROMPT = """Create a healthy recipe using these ingredients: {ingredients}.

You may add common pantry staples. Keep the recipe practical for a home cook.

Return JSON with this structure:
{{
  "recipeName": "",
  "description": "",
  "servings": 2,
  "prepTime": "",
  "cookTime": "",
  "ingredients": [{{"name": "", "quantity": ""}}],
  "instructions": [""],
  "nutritionalInfo": {{
    "calories": "",
    "protein": "",
    "carbohydrates": "",
    "fat": "",
    "fiber": ""
  }},
  "healthBenefits": [""],
  "tips": [""]
}}"""


def health_conditions_context(health_conditions: list[str]) -> str:
    """Context paragraph for the user's health conditions, or empty."""
    if not health_conditions:
        return ""
    return (
        f"\n\nIMPORTANT: The user has these health conditions: "
        f"{', '.join(health_conditions)}. Assess suitability for these "
        "conditions and include specific warnings and recommendations."
    )


def dietary_preferences_context(dietary_preferences: dict[str, Any]) -> str:
    """Context paragraph for dietary preferences, or empty."""
    if not dietary_preferences:
        return ""
    return (
        "\n\nDietary preferences to respect: "
        f"{json.dumps(dietary_preferences, sort_keys=True, default=str)}."
    )


def build_image_prompt(health_conditions: list[str]) -> str:
    return (
        FOOD_IMAGE_PROMPT
        + health_conditions_context(health_conditions)
        + "\n\n"
        + JSON_ONLY_INSTRUCTION
    )


def build_food_name_prompt(food_name: str, health_conditions: list[str]) -> str:
    return (
        FOOD_NAME_PROMPT.format(food_name=food_name)
        + health_conditions_context(health_conditions)
        + "\n\n"
        + JSON_ONLY_INSTRUCTION
    )


def build_recipe_prompt(
    ingredients: list[str],
    health_conditions: list[str],
    dietary_preferences: dict[str, Any],
) -> str:
    return (
        RECIPE_PROMPT.format(ingredients=", ".join(ingredients))
        + health_conditions_context(health_conditions)
        + dietary_preferences_context(dietary_preferences)
        + "\n\n"
        + JSON_ONLY_INSTRUCTION
    )
