"""Probe endpoints reporting the overall health status."""

import logging

from fastapi import APIRouter, Response
from starlette.concurrency import run_in_threadpool

from healthchecker import __version__
from healthchecker.api.deps import RunnerDep
from healthchecker.models.health import HealthStatus
from healthchecker.models.report import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(runner: RunnerDep, response: Response) -> HealthResponse:
    """Overall status of the (cached) health report.

    - HTTP 200: report is good or has warnings
    - HTTP 503: at least one check is critical
    """
    report = await run_in_threadpool(runner.run_with_cache)

    if report.overall == HealthStatus.CRITICAL:
        response.status_code = 503

    return HealthResponse(
        status=report.overall,
        version=__version__,
        timestamp=report.last_run,
        summary=report.summary,
        categories=report.by_category,
    )


@router.get("/health/live")
async def liveness_check() -> dict:
    """Liveness probe; answers without running any check."""
    return {"status": "alive"}


@router.get("/health/ready", response_model=HealthResponse)
async def readiness_check(runner: RunnerDep, response: Response) -> HealthResponse:
    """Readiness probe; same verdict as /health."""
    return await health_check(runner, response)
