"""Report endpoints: full report, stats, metadata, single category or check."""

import logging

from fastapi import APIRouter, Query
from starlette.concurrency import run_in_threadpool

from healthchecker.api.deps import RunnerDep
from healthchecker.core.aggregator import aggregate
from healthchecker.models.health import CheckResult
from healthchecker.models.report import (
    CategoryResults,
    Report,
    ReportMetadata,
    ReportStats,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/report")


@router.get("", response_model=Report)
async def get_report(
    runner: RunnerDep,
    cache: bool = Query(default=False, description="Serve a cached report when fresh"),
) -> Report:
    """Run every registered check and return the full report."""
    if cache:
        return await run_in_threadpool(runner.run_with_cache)
    return await runner.arun()


@router.get("/stats", response_model=ReportStats)
async def get_stats(
    runner: RunnerDep,
    cache: bool = Query(default=False, description="Serve cached counts when fresh"),
) -> ReportStats:
    """Counts of critical, warning and good results."""
    return await run_in_threadpool(runner.stats, cache)


@router.get("/metadata", response_model=ReportMetadata)
async def get_metadata(runner: RunnerDep) -> ReportMetadata:
    """Registered categories, providers and checks, without running anything."""
    return await run_in_threadpool(runner.metadata)


@router.get("/categories/{category}", response_model=CategoryResults)
async def run_category(category: str, runner: RunnerDep) -> CategoryResults:
    """Run the checks of a single category."""
    results = await run_in_threadpool(runner.run_category, category)
    logger.debug(f"Ran {len(results)} checks in category {category}")

    return CategoryResults(
        category=category,
        status=aggregate(results).by_category.get(category),
        results=results,
    )


@router.get("/checks/{slug}", response_model=CheckResult)
async def run_check(slug: str, runner: RunnerDep) -> CheckResult:
    """Run a single check by slug."""
    return await run_in_threadpool(runner.run_single, slug)


@router.delete("/cache")
async def clear_cache(runner: RunnerDep) -> dict:
    """Drop the cached report so the next cached request runs every check."""
    runner.clear_cache()
    return {"success": True, "message": "Health report cache cleared"}
