"""
Estimator Backend API

FastAPI application for rule-based construction material estimation.
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from estimator.api.catalog import router as catalog_router
from estimator.api.estimates import router as estimates_router
from estimator.api.recommendations import router as recommendations_router
from estimator.api.comparisons import router as comparisons_router
from estimator.api.suggestions import router as suggestions_router
from estimator.api.usage import router as usage_router
from estimator.core.config import Settings, settings as default_settings
from estimator.services.catalog import CatalogSnapshot, load_catalog
from estimator.services.usage_intelligence import MaterialIntelligenceStore

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    catalog: Optional[CatalogSnapshot] = None,
) -> FastAPI:
    """
    Build the API application.

    Args:
        settings: Settings to use (defaults to the environment settings)
        catalog: Catalog snapshot to serve (defaults to loading settings' catalog file)
    """
    settings = settings or default_settings
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(
        title=settings.app_name,
        description="""
## Estimator Materials API

Rule-based material estimation from job geometry.

### Core Principle: Explainable Quantities

Every quantity comes from a fixed formula over the job's dimensions:
- Catalog quantity rules with waste factors and unit rounding
- Job-type material lists priced from the catalog
- Archetype recommendations (paint, drywall, flooring, tile, deck, roofing)

### Also Available

- **Comparisons**: closest catalog items for any material
- **Usage Intelligence**: frequently used and commonly paired materials from history
- **Keyword Suggestions**: starter material lists from a job description
        """,
        version=settings.app_version,
        debug=settings.debug,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.settings = settings
    app.state.catalog = catalog if catalog is not None else load_catalog(settings.resolved_catalog_path)
    app.state.intelligence_store = MaterialIntelligenceStore(settings.usage_rebuild_debounce_seconds)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",  # Web dev server
            "http://127.0.0.1:3000",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API routers
    app.include_router(catalog_router, prefix="/api/v1")
    app.include_router(estimates_router, prefix="/api/v1")
    app.include_router(recommendations_router, prefix="/api/v1")
    app.include_router(comparisons_router, prefix="/api/v1")
    app.include_router(suggestions_router, prefix="/api/v1")
    app.include_router(usage_router, prefix="/api/v1")

    @app.on_event("shutdown")
    def shutdown_intelligence_store():
        app.state.intelligence_store.shutdown()

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
            "description": "Rule-based construction material estimation API",
            "docs": "/docs",
            "health": "/health",
        }

    @app.get("/health")
    async def health():
        """Global health check endpoint."""
        return {
            "status": "ok",
            "app": settings.app_name,
            "version": settings.app_version,
            "catalog_items": len(app.state.catalog),
        }

    logger.info(f"{settings.app_name} {settings.app_version} ready with {len(app.state.catalog)} catalog items")
    return app


app = create_app()
