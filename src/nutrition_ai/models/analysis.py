"""
Request and value models for nutrition analysis.

Requests come in three variants (image, food name, recipe) and are turned into
a single model call each. Results are plain dicts since their shape is
decided by the model; only the metadata block is fixed.
"""

from datetime import UTC, datetime
from typing import Annotated, Any, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

# Parsed model output, always carrying an ``analysisMetadata`` block
StructuredResult = dict[str, Any]

GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"


def _dedupe(values: list[str]) -> list[str]:
    """Drop blanks and duplicates, keeping first-seen order."""
    seen: dict[str, None] = {}
    for value in values:
        value = value.strip()
        if value:
            seen.setdefault(value, None)
    return list(seen)


HealthConditions = Annotated[list[str], AfterValidator(_dedupe)]


class ServiceAccountCredential(BaseModel):
    """Google service account key, as found in a service-account JSON file."""

    model_config = ConfigDict(frozen=True, extra="allow")

    project_id: str = Field(..., min_length=1)
    client_email: str = Field(..., min_length=1)
    private_key: str = Field(..., min_length=1)

    @field_validator("private_key")
    @classmethod
    def _unescape_newlines(cls, value: str) -> str:
        # Keys injected through env vars often arrive with literal "\n"
        return value.replace("\\r\\n", "\n").replace("\\n", "\n")

    def to_info(self) -> dict[str, Any]:
        """Dict form accepted by ``google.oauth2.service_account``."""
        info = self.model_dump()
        info.setdefault("type", "service_account")
        info.setdefault("token_uri", GOOGLE_TOKEN_URI)
        return info


class ImageFile(BaseModel):
    """An uploaded image."""

    data: bytes
    mime_type: str = "image/jpeg"


class ImageAnalysis(BaseModel):
    """Analyze the food shown in an image."""

    kind: Literal["image"] = "image"
    image_bytes: bytes
    mime_type: str
    health_conditions: HealthConditions = Field(default_factory=list)


class NameAnalysis(BaseModel):
    """Analyze a food described by name."""

    kind: Literal["name"] = "name"
    food_name: str
    health_conditions: HealthConditions = Field(default_factory=list)


class RecipeRequest(BaseModel):
    """Generate a recipe from a list of ingredients."""

    kind: Literal["recipe"] = "recipe"
    ingredients: list[str]
    health_conditions: HealthConditions = Field(default_factory=list)
    dietary_preferences: dict[str, Any] = Field(default_factory=dict)


AnalysisRequest = ImageAnalysis | NameAnalysis | RecipeRequest


class AnalysisMetadata(BaseModel):
    """Metadata block attached to every structured result."""

    model_config = ConfigDict(populate_by_name=True)

    status: Literal["success", "error"]
    model: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    health_conditions: list[str] = Field(default_factory=list, alias="healthConditions")
    operation: str | None = None
    error_message: str | None = Field(None, alias="errorMessage")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
