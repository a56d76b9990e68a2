"""Report and API response models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from healthchecker.models.health import CheckResult, HealthStatus
from healthchecker.models.metadata import Category, ProviderMetadata


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReportSummary(_CamelModel):
    """Result counts per status."""

    critical: int = 0
    warning: int = 0
    good: int = 0
    total: int = 0


class ReportStats(ReportSummary):
    """Summary counts with the time of the run they describe."""

    last_run: datetime | None = None


class Report(_CamelModel):
    """Complete outcome of one report generation.

    ``results`` keeps check registration order; ``overall`` and
    ``by_category`` hold the worst status overall and per category.
    """

    last_run: datetime
    overall: HealthStatus
    by_category: dict[str, HealthStatus] = Field(default_factory=dict)
    summary: ReportSummary
    categories: list[Category] = Field(default_factory=list)
    providers: list[ProviderMetadata] = Field(default_factory=list)
    results: list[CheckResult] = Field(default_factory=list)


class CheckInfo(_CamelModel):
    """Identity of a registered check, without running it."""

    slug: str
    category: str
    provider: str
    title: str
    docs_url: str | None = None
    action_url: str | None = None


class ReportMetadata(_CamelModel):
    """Everything registered for a report, for clients that run checks lazily."""

    categories: list[Category]
    providers: list[ProviderMetadata]
    checks: list[CheckInfo]


class CategoryResults(_CamelModel):
    """Results of the checks in a single category."""

    category: str
    status: HealthStatus | None = None
    results: list[CheckResult]


class HealthResponse(_CamelModel):
    """Probe response: overall status of the latest report."""

    status: HealthStatus
    version: str
    timestamp: datetime
    summary: ReportSummary
    categories: dict[str, HealthStatus] = Field(default_factory=dict)
