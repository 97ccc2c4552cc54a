"""
Gemini on Vertex AI client adapter.

The SDK client is constructed once per process by ``initialize_model_client``.
If construction fails the returned ``ModelClient`` is degraded for good: every
call raises ``ModelNotInitializedError`` and nothing is retried.
"""

import logging
from typing import Any, Callable

from google import genai
from google.genai import types
from google.oauth2 import service_account

from nutrition_ai.core.config import CredentialKind, Settings, get_settings
from nutrition_ai.core.exceptions import (
    CredentialNotFoundError,
    ModelInitializationError,
    ModelNotInitializedError,
    RemoteInvocationError,
)
from nutrition_ai.models.analysis import (
    AnalysisRequest,
    ImageAnalysis,
    NameAnalysis,
    RecipeRequest,
    ServiceAccountCredential,
)
from nutrition_ai.services.credentials import resolve_credential

from . import prompts

logger = logging.getLogger(__name__)

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"

# (project=, location=, credential=) -> SDK client
ClientFactory = Callable[..., Any]


def _default_client_factory(
    *,
    project: str,
    location: str,
    credential: ServiceAccountCredential | None,
) -> genai.Client:
    credentials = None
    if credential is not None:
        credentials = service_account.Credentials.from_service_account_info(
            credential.to_info(),
            scopes=[CLOUD_PLATFORM_SCOPE],
        )
    return genai.Client(
        vertexai=True,
        project=project,
        location=location,
        credentials=credentials,
    )


def build_contents(request: AnalysisRequest) -> list[types.Content]:
    """
    Build the Gemini request contents for an analysis request.

    Image bytes go in as an inline data part tagged with the mime type; the
    SDK base64-encodes them on the wire.
    """
    match request:
        case ImageAnalysis():
            parts = [
                types.Part.from_bytes(data=request.image_bytes, mime_type=request.mime_type),
                types.Part.from_text(text=prompts.build_image_prompt(request.health_conditions)),
            ]
        case NameAnalysis():
            parts = [
                types.Part.from_text(
                    text=prompts.build_food_name_prompt(
                        request.food_name, request.health_conditions
                    )
                ),
            ]
        case RecipeRequest():
            parts = [
                types.Part.from_text(
                    text=prompts.build_recipe_prompt(
                        request.ingredients,
                        request.health_conditions,
                        request.dietary_preferences,
                    )
                ),
            ]
        case _:
            raise TypeError(f"Unsupported analysis request: {type(request).__name__}")

    return [types.Content(role="user", parts=parts)]


def extract_response_text(response: Any) -> str:
    """Return the first non-empty text part of the first candidate."""
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        if not content:
            continue
        for part in getattr(content, "parts", None) or []:
            text = getattr(part, "text", None)
            if isinstance(text, str) and text.strip():
                return text
    top = getattr(response, "text", None)
    return top if isinstance(top, str) else ""


class ModelClient:
    """
    Thin wrapper around one long-lived Gemini client.

    The wrapper holds no per-call state, so concurrent ``invoke`` calls
    are independent of each other.
    """

    def __init__(
        self,
        client: Any | None,
        model: str,
        *,
        temperature: float = 0.2,
        init_error: str | None = None,
    ):
        self._client = client
        self._model = model
        self._temperature = temperature
        self._init_error = init_error

    @property
    def model(self) -> str:
        return self._model

    @property
    def is_initialized(self) -> bool:
        return self._client is not None

    @property
    def init_error(self) -> str | None:
        return self._init_error

    async def invoke(self, request: AnalysisRequest) -> str:
        """
        Send one analysis request to the model and return its raw text.

        Raises:
            ModelNotInitializedError: If the client failed to initialize
            RemoteInvocationError: If the remote call raised
        """
        if self._client is None:
            raise ModelNotInitializedError(self._init_error)

        contents = build_contents(request)
        logger.info(f"Sending {request.kind} analysis request to {self._model}")

        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=contents,
                config=types.GenerateContentConfig(temperature=self._temperature),
            )
        except Exception as e:
            logger.exception(f"Gemini {request.kind} request failed")
            raise RemoteInvocationError(
                message=f"Model request failed: {e}",
                model=self._model,
            ) from e

        text = extract_response_text(response)
        logger.debug(f"Raw Gemini response: {text[:500]}...")
        return text


def initialize_model_client(
    settings: Settings | None = None,
    credential: ServiceAccountCredential | None = None,
    client_factory: ClientFactory | None = None,
) -> ModelClient:
    """
    Initialize the Vertex AI model client once.

    Never raises: any failure is logged and returns a degraded client that
    remembers why it could not start.

    Args:
        settings: Application settings (uses default if not provided)
        credential: Pre-resolved credential (resolved from settings if not provided)
        client_factory: SDK client constructor, for tests

    Returns:
        ModelClient, initialized or degraded
    """
    if settings is None:
        settings = get_settings()
    if client_factory is None:
        client_factory = _default_client_factory

    logger.info("Initializing Vertex AI service...")
    try:
        if credential is None:
            try:
                credential = resolve_credential(CredentialKind.VERTEX, settings)
            except CredentialNotFoundError:
                if not settings.allow_default_credentials:
                    raise
                logger.warning("Falling back to Application Default Credentials")

        project = settings.google_cloud_project or (credential.project_id if credential else "")
        if not project:
            raise ModelInitializationError(
                "No Google Cloud project configured. "
                "Set GOOGLE_CLOUD_PROJECT in your .env file."
            )

        client = client_factory(
            project=project,
            location=settings.google_cloud_location,
            credential=credential,
        )
    except Exception as e:
        logger.error(f"Failed to initialize Vertex AI service: {e}")
        return ModelClient(
            None,
            settings.gemini_model,
            temperature=settings.llm_temperature,
            init_error=getattr(e, "message", None) or str(e),
        )

    logger.info(
        f"Vertex AI service initialized: project={project}, "
        f"location={settings.google_cloud_location}, model={settings.gemini_model}"
    )
    return ModelClient(
        client,
        settings.gemini_model,
        temperature=settings.llm_temperature,
    )
