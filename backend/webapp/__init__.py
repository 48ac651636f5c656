import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import Settings
from .core.errors import register_exception_handlers
from .core.metrics import create_metrics
from .api.deps import AppResources
from .services.db_service import Database, FileRepository, HealthCheckRepository
from .services.storage_service import create_blob_store
# routers
from .api.v1 import health as health_router
from .api.v1 import files as files_router

logger = logging.getLogger(__name__)


def build_resources(settings: Settings) -> AppResources:
    """Wire the MySQL, S3 and StatsD handles from settings."""
    database = Database(settings)
    return AppResources(
        health_repo=HealthCheckRepository(database),
        file_repo=FileRepository(database),
        blob_store=create_blob_store(settings),
        metrics=create_metrics(settings),
        database=database,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    App startup/shutdown:
      - build backend handles unless they were injected
      - create missing tables (failure is logged; /healthz reports 503 until the DB is up)
      - close the DB pool on shutdown
    """
    if app.state.resources is None:
        app.state.resources = build_resources(app.state.settings)
    database = app.state.resources.database
    if database is not None:
        await database.sync_schema()
    try:
        yield
    finally:
        if database is not None:
            await database.close()


def create_app(settings: Optional[Settings] = None, resources: Optional[AppResources] = None) -> FastAPI:
    settings = settings or Settings()

    # "/healthz/" and friends are unmatched paths (404), not redirects
    app = FastAPI(title="Webapp API", version="1.0.0", lifespan=lifespan, redirect_slashes=False)
    app.state.settings = settings
    app.state.resources = resources

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    app.middleware("http")(health_router.no_cache_headers)

    register_exception_handlers(app)

    # Register routers
    app.include_router(health_router.router)
    app.include_router(files_router.router)

    return app
