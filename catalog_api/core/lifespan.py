"""
Application lifespan handler.
Manages startup and shutdown events for the FastAPI application.
"""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from catalog_shared.infrastructure.db import engine
from catalog_shared.config.settings import settings
from catalog_shared.config.logging import setup_logging, rest_api_logger as logger
from catalog_api.models import Base
from catalog_api.services.media import get_image_store


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Runs on startup and shutdown.
    """
    # Initialize logging
    setup_logging()

    # Validate configuration before startup
    config_errors = settings.validate_production_settings()
    if config_errors:
        for error in config_errors:
            logger.error("Configuration error: %s", error)
        if settings.environment == "production":
            raise RuntimeError(
                f"Production configuration errors: {'; '.join(config_errors)}. "
                "Server will not start with an unsafe configuration."
            )

    # Startup
    logger.info("Starting REST API", port=settings.rest_api_port, env=settings.environment)

    if settings.create_tables_on_startup:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created/verified")

    # Image directory and upload staging area
    get_image_store().ensure_directory()
    Path(settings.upload_tmp_dir).mkdir(parents=True, exist_ok=True)
    logger.info(
        "Storage directories ready",
        image_dir=str(settings.product_image_dir),
        upload_tmp_dir=settings.upload_tmp_dir,
    )

    yield

    # Shutdown
    logger.info("Shutting down REST API")
    engine.dispose()
