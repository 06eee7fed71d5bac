"""
REST API main application.
Entry point for the FastAPI REST server.
"""

from fastapi import FastAPI

from catalog_api.core import lifespan, configure_cors, register_middlewares
from catalog_api.routers import products_router
from catalog_shared.config.settings import settings
from catalog_shared.infrastructure.correlation import CorrelationIdMiddleware


# Create FastAPI application
app = FastAPI(
    title="Catalog REST API",
    description="Product catalog with color and size variants",
    version="0.1.0",
    lifespan=lifespan,
)

# Middlewares run in reverse registration order: CORS outermost
register_middlewares(app)
app.add_middleware(CorrelationIdMiddleware)
configure_cors(app)


# =============================================================================
# Health Check
# =============================================================================


@app.get("/api/health")
def health_check():
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "service": "catalog-api",
        "environment": settings.environment,
    }


# =============================================================================
# Include Routers
# =============================================================================

app.include_router(products_router)


# =============================================================================
# Development entry point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "catalog_api.main:app",
        host="0.0.0.0",
        port=settings.rest_api_port,
        reload=True,
    )
