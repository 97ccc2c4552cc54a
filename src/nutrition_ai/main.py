"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from nutrition_ai.api.routes import analysis
from nutrition_ai.core.config import Settings, get_settings
from nutrition_ai.services.genai import ModelClient, initialize_model_client
from nutrition_ai.services.nutrition import NutritionAnalysisService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Initializes the Vertex AI client once. A failed initialization leaves
    the app running in degraded mode; analysis endpoints then return
    fallback results.
    """
    settings: Settings = app.state.settings
    logger.info(f"Starting {settings.app_name} v{settings.api_version}")

    if getattr(app.state, "nutrition_service", None) is None:
        model_client = initialize_model_client(settings)
        app.state.nutrition_service = NutritionAnalysisService(model_client)

    yield

    logger.info("Shutting down...")


def create_app(
    settings: Settings | None = None,
    model_client: ModelClient | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings (uses default if not provided)
        model_client: Pre-built model client; initialized at startup if not provided

    Returns:
        Configured FastAPI instance
    """
    if settings is None:
        settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(
        title=settings.app_name,
        version=settings.api_version,
        description="Food image analysis, nutrition lookup and recipe generation with Gemini on Vertex AI",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        debug=settings.debug,
    )
    app.state.settings = settings
    app.state.nutrition_service = (
        NutritionAnalysisService(model_client) if model_client is not None else None
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check endpoint
    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint."""
        service: NutritionAnalysisService | None = request.app.state.nutrition_service
        client = service.model_client if service else None
        initialized = bool(client and client.is_initialized)

        return {
            "status": "ok" if initialized else "degraded",
            "service": settings.app_name,
            "version": settings.api_version,
            "model": settings.gemini_model,
            "model_initialized": initialized,
            "init_error": client.init_error if client else None,
        }

    # Root endpoint
    @app.get("/")
    async def root():
        """Root endpoint with API info."""
        return {
            "name": settings.app_name,
            "version": settings.api_version,
            "docs": "/docs",
            "health": "/health",
        }

    app.include_router(analysis.router, tags=["Analysis"])

    return app


# Create app instance
app = create_app()
