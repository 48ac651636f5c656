"""Liveness check backed by a database write."""
from __future__ import annotations

import logging

from ..core.errors import ServiceUnavailable
from ..core.metrics import Metrics, timed
from ..models import HealthCheck
from .db_service import HealthCheckRepository

logger = logging.getLogger(__name__)


async def check_liveness(repo: HealthCheckRepository, metrics: Metrics) -> HealthCheck:
    """Insert one health_checks row; any failure means the service is unavailable."""
    metrics.increment("api.healthz.count")
    with timed(metrics, "api.healthz.duration"):
        try:
            with timed(metrics, "api.healthz.db_duration"):
                check = await repo.create()
        except Exception as e:
            logger.error(f"Error during health check: {e!r}")
            metrics.increment("api.healthz.error")
            raise ServiceUnavailable("health check insert failed") from e

    logger.debug(f"Health check recorded - Check ID: {check.check_id}")
    return check
