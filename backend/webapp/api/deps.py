from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from ..core.config import Settings
from ..core.metrics import Metrics
from ..services.db_service import Database, FileRepository, HealthCheckRepository
from ..services.storage_service import S3BlobStore


@dataclass
class AppResources:
    """Backend handles shared by all requests, built once at startup."""

    health_repo: HealthCheckRepository
    file_repo: FileRepository
    blob_store: S3BlobStore
    metrics: Metrics
    database: Optional[Database] = None


def get_resources(request: Request) -> AppResources:
    resources = getattr(request.app.state, "resources", None)
    if resources is None:
        raise RuntimeError("AppResources not available on app.state (lifespan not initialized).")
    return resources


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_health_repo(request: Request) -> HealthCheckRepository:
    return get_resources(request).health_repo


def get_file_repo(request: Request) -> FileRepository:
    return get_resources(request).file_repo


def get_blob_store(request: Request) -> S3BlobStore:
    return get_resources(request).blob_store


def get_metrics(request: Request) -> Metrics:
    return get_resources(request).metrics
