"""StatsD counters and timers.

Metrics are observers only: a failing StatsD client is logged and ignored,
it never changes how a request is answered.
"""
from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterator, Protocol

import statsd

from .config import Settings

logger = logging.getLogger(__name__)


class Metrics(Protocol):
    def increment(self, name: str) -> None: ...

    def timing(self, name: str, milliseconds: float) -> None: ...


class NullMetrics:
    """Sink used when StatsD is disabled."""

    def increment(self, name: str) -> None:
        pass

    def timing(self, name: str, milliseconds: float) -> None:
        pass


class StatsdMetrics:
    def __init__(self, client: statsd.StatsClient):
        self._client = client

    def increment(self, name: str) -> None:
        try:
            self._client.incr(name)
        except Exception as e:
            logger.warning(f"StatsD increment {name} failed: {e}")

    def timing(self, name: str, milliseconds: float) -> None:
        try:
            self._client.timing(name, milliseconds)
        except Exception as e:
            logger.warning(f"StatsD timing {name} failed: {e}")


def create_metrics(settings: Settings) -> Metrics:
    if not settings.statsd_enabled:
        return NullMetrics()
    try:
        client = statsd.StatsClient(
            host=settings.statsd_host,
            port=settings.statsd_port,
            prefix=settings.statsd_prefix,
        )
    except Exception as e:
        logger.error(f"StatsD client could not be created, metrics disabled: {e}")
        return NullMetrics()
    logger.info(f"Sending metrics to StatsD at {settings.statsd_host}:{settings.statsd_port}")
    return StatsdMetrics(client)


@contextmanager
def timed(metrics: Metrics, name: str) -> Iterator[None]:
    """Record the wall time of the block, in milliseconds, as ``name``.

    Nothing is recorded when the block raises.
    """
    start = time.perf_counter()
    yield
    metrics.timing(name, (time.perf_counter() - start) * 1000)

