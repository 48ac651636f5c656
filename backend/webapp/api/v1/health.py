from fastapi import APIRouter, Depends, Request, Response

from ...core.errors import MethodNotAllowed
from ...core.metrics import Metrics
from ...services.db_service import HealthCheckRepository
from ...services.health_service import check_liveness
from ..deps import get_health_repo, get_metrics
from ..validation import reject_client_input

HEALTH_PATH = "/healthz"

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "X-Content-Type-Options": "nosniff",
}

router = APIRouter()


async def no_cache_headers(request: Request, call_next):
    """HTTP middleware: every /healthz response is uncacheable, whatever its status."""
    response = await call_next(request)
    if request.url.path == HEALTH_PATH:
        response.headers.update(NO_CACHE_HEADERS)
    return response


@router.get(HEALTH_PATH, tags=["health"], dependencies=[Depends(reject_client_input)])
async def health_check(
    repo: HealthCheckRepository = Depends(get_health_repo),
    metrics: Metrics = Depends(get_metrics),
):
    """Liveness check: records one row in health_checks, answers with an empty 200."""
    await check_liveness(repo, metrics)
    return Response(status_code=200)


@router.api_route(
    HEALTH_PATH,
    methods=["HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    include_in_schema=False,
)
async def health_method_not_allowed():
    raise MethodNotAllowed(allow="GET")
