"""Application configuration using Pydantic Settings."""

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Relative credential paths are anchored here, not at the working directory
PACKAGE_DIR = Path(__file__).resolve().parent.parent


class CredentialKind(str, Enum):
    """Service account credential families managed by the application."""
    VERTEX = "vertex"
    FIREBASE = "firebase"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Google Cloud / Vertex AI
    google_cloud_project: str = ""
    google_cloud_location: str = "us-central1"

    # Gemini model
    gemini_model: str = "gemini-1.5-flash-001"
    llm_temperature: float = 0.2

    # Service account sources, in resolution order: base64 blob, raw JSON blob, file
    vertex_service_account_key_base64: str = ""
    vertex_service_account_key: str = ""
    firebase_service_account_key_base64: str = ""
    firebase_service_account_key: str = ""

    # Local development credential files
    credentials_dir: Path = PACKAGE_DIR / "config"
    vertex_credentials_file: str = "service-account.json"
    firebase_credentials_file: str = "service-account1.json"

    # Fall back to Application Default Credentials when no vertex key resolves
    allow_default_credentials: bool = False

    # App
    debug: bool = False
    log_level: str = "INFO"
    app_name: str = "Nutrition AI API"
    api_version: str = "1.0.0"
    allowed_origins: list[str] = ["*"]

    @field_validator("credentials_dir")
    @classmethod
    def _anchor_credentials_dir(cls, value: Path) -> Path:
        return value if value.is_absolute() else PACKAGE_DIR / value

    def credential_sources(self, kind: CredentialKind) -> tuple[str, str, Path]:
        """Return the (base64, raw JSON, file path) sources for a credential kind."""
        match kind:
            case CredentialKind.VERTEX:
                return (
                    self.vertex_service_account_key_base64,
                    self.vertex_service_account_key,
                    self.credentials_dir / self.vertex_credentials_file,
                )
            case CredentialKind.FIREBASE:
                return (
                    self.firebase_service_account_key_base64,
                    self.firebase_service_account_key,
                    self.credentials_dir / self.firebase_credentials_file,
                )
            case _:
                raise ValueError(f"Unsupported credential kind: {kind}")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
