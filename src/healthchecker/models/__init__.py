"""Data models for check results, report metadata and API responses."""

from healthchecker.models.health import CheckResult, HealthStatus
from healthchecker.models.metadata import Category, ProviderMetadata
from healthchecker.models.report import (
    CategoryResults,
    CheckInfo,
    HealthResponse,
    Report,
    ReportMetadata,
    ReportStats,
    ReportSummary,
)

__all__ = [
    "Category",
    "CategoryResults",
    "CheckInfo",
    "CheckResult",
    "HealthResponse",
    "HealthStatus",
    "ProviderMetadata",
    "Report",
    "ReportMetadata",
    "ReportStats",
    "ReportSummary",
]
