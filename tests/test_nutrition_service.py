"""Unit tests for the nutrition analysis service."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from conftest import TINY_PNG_BYTES, make_response
from nutrition_ai.models.analysis import ImageFile
from nutrition_ai.services.nutrition import PARSE_FAILURE_MESSAGE, NutritionAnalysisService


async def call_operation(
    service: NutritionAnalysisService, operation: str, health_conditions=("diabetes",)
) -> dict:
    if operation == "analyze_food_image":
        return await service.analyze_food_image(
            ImageFile(data=TINY_PNG_BYTES, mime_type="image/png"), health_conditions
        )
    if operation == "analyze_food_by_name":
        return await service.analyze_food_by_name("one banana", health_conditions)
    return await service.generate_healthy_recipe(
        ["oats", "blueberries"], health_conditions, {"vegan": True}
    )


OPERATIONS = ["analyze_food_image", "analyze_food_by_name", "generate_healthy_recipe"]


class TestSuccessfulAnalysis:
    """Responses that parse are returned as-is plus metadata."""

    @pytest.mark.asyncio
    async def test_banana_fields_unmodified(self, model_client):
        service = NutritionAnalysisService(model_client)

        result = await service.analyze_food_by_name("one banana", ["diabetes"])

        assert result["foodName"] == "banana"
        assert result["calories"] == "105"
        assert set(result) == {"foodName", "calories", "analysisMetadata"}

        metadata = result["analysisMetadata"]
        assert metadata["status"] == "success"
        assert metadata["model"] == "gemini-1.5-flash-001"
        assert metadata["healthConditions"] == ["diabetes"]
        assert "timestamp" in metadata

    @pytest.mark.asyncio
    async def test_fenced_response(self, model_client, genai_client):
        genai_client.aio.models.generate_content = AsyncMock(
            return_value=make_response(
                'Here you go:\n```json\n{"recipeName": "Overnight oats", "servings": 2}\n```'
            )
        )
        service = NutritionAnalysisService(model_client)

        result = await service.generate_healthy_recipe(["oats", "milk"])

        assert result["recipeName"] == "Overnight oats"
        assert result["servings"] == 2
        assert result["analysisMetadata"]["operation"] == "generate_healthy_recipe"

    @pytest.mark.asyncio
    async def test_model_metadata_keys_kept(self, model_client, genai_client):
        genai_client.aio.models.generate_content = AsyncMock(
            return_value=make_response(
                '{"foodName": "apple", "analysisMetadata": {"confidence": 0.9, "status": "weird"}}'
            )
        )
        service = NutritionAnalysisService(model_client)

        result = await service.analyze_food_by_name("apple")

        assert result["analysisMetadata"]["confidence"] == 0.9
        assert result["analysisMetadata"]["status"] == "success"

    @pytest.mark.asyncio
    async def test_image_request_sent_to_model(self, model_client, genai_client):
        service = NutritionAnalysisService(model_client)

        await service.analyze_food_image(ImageFile(data=TINY_PNG_BYTES, mime_type="image/png"))

        contents = genai_client.aio.models.generate_content.call_args.kwargs["contents"]
        assert contents[0].parts[0].inline_data.data == TINY_PNG_BYTES


class TestFallbacks:
    """Every failure turns into an error record instead of an exception."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation", OPERATIONS)
    async def test_remote_failure(self, operation, model_client, genai_client):
        genai_client.aio.models.generate_content = AsyncMock(
            side_effect=ConnectionError("connection reset")
        )
        service = NutritionAnalysisService(model_client)

        result = await call_operation(service, operation)

        assert result["foodName"] == "Analysis Failed"
        assert result["analysisMetadata"]["status"] == "error"
        assert "connection reset" in result["analysisMetadata"]["errorMessage"]
        assert result["analysisMetadata"]["healthConditions"] == ["diabetes"]
        assert result["analysisMetadata"]["operation"] == operation

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation", OPERATIONS)
    async def test_not_initialized(self, operation, degraded_client):
        service = NutritionAnalysisService(degraded_client)

        result = await call_operation(service, operation)

        assert result["analysisMetadata"]["status"] == "error"
        assert "not initialized" in result["analysisMetadata"]["errorMessage"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation", OPERATIONS)
    async def test_unparseable_response(self, operation, model_client, genai_client):
        genai_client.aio.models.generate_content = AsyncMock(
            return_value=make_response("I'm sorry, I can't identify that food.")
        )
        service = NutritionAnalysisService(model_client)

        result = await call_operation(service, operation)

        assert result["analysisMetadata"]["status"] == "error"
        assert result["analysisMetadata"]["errorMessage"] == PARSE_FAILURE_MESSAGE

    @pytest.mark.asyncio
    async def test_empty_response(self, model_client, genai_client):
        genai_client.aio.models.generate_content = AsyncMock(
            return_value=make_response("")
        )
        service = NutritionAnalysisService(model_client)

        result = await service.analyze_food_by_name("banana")

        assert result["analysisMetadata"]["status"] == "error"

    @pytest.mark.asyncio
    async def test_unexpected_error(self, model_client, monkeypatch):
        async def explode(request):
            raise KeyError("candidates")

        monkeypatch.setattr(model_client, "invoke", explode)
        service = NutritionAnalysisService(model_client)

        result = await service.analyze_food_by_name("banana")

        assert result["analysisMetadata"]["status"] == "error"

    @pytest.mark.asyncio
    async def test_none_inputs(self, model_client, genai_client):
        service = NutritionAnalysisService(model_client)

        result = await service.generate_healthy_recipe(None, None, None)

        assert result["analysisMetadata"]["status"] == "success"
        assert result["analysisMetadata"]["healthConditions"] == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation", OPERATIONS)
    async def test_none_condition_entry(self, operation, model_client):
        service = NutritionAnalysisService(model_client)

        result = await call_operation(service, operation, ["diabetes", None])

        assert result["analysisMetadata"]["status"] == "success"
        assert result["analysisMetadata"]["healthConditions"] == ["diabetes"]

    @pytest.mark.asyncio
    async def test_none_condition_entry_with_remote_failure(self, model_client, genai_client):
        genai_client.aio.models.generate_content = AsyncMock(
            side_effect=ConnectionError("connection reset")
        )
        service = NutritionAnalysisService(model_client)

        result = await service.analyze_food_by_name("banana", ["diabetes", None])

        assert result["analysisMetadata"]["status"] == "error"
        assert result["analysisMetadata"]["healthConditions"] == ["diabetes"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation", OPERATIONS)
    async def test_one_shot_iterator_conditions(self, operation, model_client, genai_client):
        service = NutritionAnalysisService(model_client)
        conditions = (c for c in ["diabetes", "hypertension"])

        result = await call_operation(service, operation, conditions)

        assert result["analysisMetadata"]["healthConditions"] == ["diabetes", "hypertension"]
        contents = genai_client.aio.models.generate_content.call_args.kwargs["contents"]
        prompt = " ".join(part.text for part in contents[0].parts if part.text)
        assert "diabetes" in prompt
        assert "hypertension" in prompt


class TestConcurrency:
    """Concurrent calls do not share state."""

    @pytest.mark.asyncio
    async def test_concurrent_name_analyses(self, model_client, genai_client):
        async def fake_generate(*, model, contents, config):
            prompt = contents[0].parts[0].text
            await asyncio.sleep(0.01 if "apple" in prompt else 0)
            name = "apple" if "apple" in prompt else "banana"
            return make_response(f'{{"foodName": "{name}"}}')

        genai_client.aio.models.generate_content = AsyncMock(side_effect=fake_generate)
        service = NutritionAnalysisService(model_client)

        apple, banana = await asyncio.gather(
            service.analyze_food_by_name("apple", ["diabetes"]),
            service.analyze_food_by_name("banana", ["celiac disease"]),
        )

        assert apple["foodName"] == "apple"
        assert apple["analysisMetadata"]["healthConditions"] == ["diabetes"]
        assert banana["foodName"] == "banana"
        assert banana["analysisMetadata"]["healthConditions"] == ["celiac disease"]
        assert apple["analysisMetadata"] is not banana["analysisMetadata"]
