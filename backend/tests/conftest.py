from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from webapp import create_app
from webapp.api.deps import AppResources
from webapp.core.config import Settings
from webapp.services.storage_service import S3BlobStore

from .fakes import FakeFileRepo, FakeHealthRepo, FakeS3Client, RecordingMetrics

BUCKET = "test-bucket"


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, s3_bucket=BUCKET, statsd_enabled=False)


@pytest.fixture
def s3_client() -> FakeS3Client:
    return FakeS3Client()


@pytest.fixture
def resources(s3_client: FakeS3Client) -> AppResources:
    return AppResources(
        health_repo=FakeHealthRepo(),
        file_repo=FakeFileRepo(),
        blob_store=S3BlobStore(s3_client, BUCKET),
        metrics=RecordingMetrics(),
    )


@pytest.fixture
def client(settings: Settings, resources: AppResources) -> TestClient:
    return TestClient(create_app(settings, resources))
