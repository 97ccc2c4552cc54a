"""Custom exception classes for the nutrition AI integration."""

from typing import Any


class NutritionAIError(Exception):
    """Base exception for nutrition AI errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "NUTRITION_AI_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class CredentialNotFoundError(NutritionAIError):
    """No credential source yielded a usable service account."""

    def __init__(self, kind: str, attempted: list[str] | None = None):
        super().__init__(
            message=f"No usable '{kind}' service account credential found",
            error_code="CREDENTIAL_NOT_FOUND",
            details={"kind": kind, "attempted": attempted or []},
        )
        self.kind = kind


class ModelInitializationError(NutritionAIError):
    """The generative model client could not be constructed."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            error_code="INITIALIZATION_FAILURE",
            details=details,
        )


class ModelNotInitializedError(NutritionAIError):
    """The model client is degraded and cannot serve requests."""

    def __init__(self, reason: str | None = None):
        message = "Vertex AI service not initialized"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message=message,
            error_code="NOT_INITIALIZED",
            details={"reason": reason},
        )


class RemoteInvocationError(NutritionAIError):
    """The call to the remote model raised."""

    def __init__(self, message: str, model: str = "unknown"):
        super().__init__(
            message=message,
            error_code="REMOTE_INVOCATION_FAILURE",
            details={"model": model},
        )
