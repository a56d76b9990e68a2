"""API route registration."""

from fastapi import APIRouter

from healthchecker.api.handlers.health import router as health_router
from healthchecker.api.handlers.report import router as report_router

# Main API router that aggregates all endpoint routers
api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(report_router, tags=["report"])
