"""Report generation: collect, inject resources, execute, aggregate."""

import asyncio
import logging
import threading
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime, timezone
from typing import Any

from cachetools import TTLCache

from healthchecker.config import RunnerSettings
from healthchecker.core.aggregator import aggregate, summarize
from healthchecker.core.check import HealthCheck, check_identity, contain
from healthchecker.core.executor import Executor
from healthchecker.core.registry import Collector, Registry
from healthchecker.models.health import CheckResult
from healthchecker.models.report import (
    CheckInfo,
    Report,
    ReportMetadata,
    ReportStats,
)
from healthchecker.utils.errors import (
    CategoryNotFoundError,
    CheckNotFoundError,
    NoChecksAvailableError,
)

logger = logging.getLogger(__name__)

_REPORT_CACHE_KEY = "report"


def requires_database(check: Any) -> bool:
    """Whether ``check`` asks for a database handle and can receive one."""
    try:
        return bool(getattr(check, "requires_database", False)) and callable(
            getattr(check, "set_database", None)
        )
    except Exception:
        return False


def _optional_url(check: Any, name: str) -> str | None:
    try:
        value = getattr(check, name, None)
    except Exception:
        return None
    return value if isinstance(value, str) and value else None


class DatabaseScope:
    """Runs a check with a database handle injected for that run only.

    With a factory, the handle is opened in the thread running the check
    and closed once the check finishes. A factory that raises turns into
    a Warning result for this check alone.

    Args:
        check: Check declaring ``requires_database``.
        database: Shared handle, used when ``factory`` is None.
        factory: Callable returning a fresh handle.
    """

    def __init__(
        self,
        check: HealthCheck,
        database: Any | None = None,
        factory: Callable[[], Any] | None = None,
    ):
        self.check = check
        self.database = database
        self.factory = factory

    def __getattr__(self, name: str) -> Any:
        return getattr(self.check, name)

    def run(self) -> CheckResult:
        return contain(self.check, self._run)

    def _run(self) -> CheckResult:
        if self.factory is None:
            self.check.set_database(self.database)
            return self.check.run()

        handle = self.factory()
        try:
            self.check.set_database(handle)
            return self.check.run()
        finally:
            self._close(handle)

    def _close(self, handle: Any) -> None:
        close = getattr(handle, "close", None)
        if not callable(close):
            return
        try:
            close()
        except Exception as exc:
            slug = check_identity(self.check)["slug"]
            logger.warning(
                f"Closing the database handle of {slug} failed: {exc}",
                extra={"check_slug": slug, "error_type": type(exc).__name__},
            )

    def __repr__(self) -> str:
        return f"<DatabaseScope({self.check!r})>"


class HealthCheckRunner:
    """Builds health reports from a fixed list of collectors.

    Collectors are invoked afresh for every report. Checks that set
    ``requires_database`` receive a database handle right before they run:
    a fresh one from ``database_factory`` when given (closed after the
    check), otherwise the shared ``database``. A shared handle is never
    used by two checks at once, so concurrency is reduced to 1 in that
    case.

    Args:
        collectors: Check sources, invoked in order.
        database: Shared handle injected into checks that need one.
        database_factory: Callable returning a fresh handle per check.
        settings: Execution and cache settings.
        disabled_checks: Slugs of checks to leave out of every report.
    """

    def __init__(
        self,
        collectors: Iterable[Collector] = (),
        *,
        database: Any | None = None,
        database_factory: Callable[[], Any] | None = None,
        settings: RunnerSettings | None = None,
        disabled_checks: Iterable[str] = (),
    ):
        self.collectors: list[Collector] = list(collectors)
        self.database = database
        self.database_factory = database_factory
        self.settings = settings or RunnerSettings()
        self.disabled_checks = frozenset(disabled_checks)
        self._cache: TTLCache | None = (
            TTLCache(maxsize=1, ttl=self.settings.cache_ttl_seconds)
            if self.settings.cache_ttl_seconds > 0
            else None
        )
        self._cache_lock = threading.Lock()
        self.last_run: datetime | None = None

    def add_collector(self, collector: Collector) -> Collector:
        """Append a collector; usable as a decorator."""
        self.collectors.append(collector)
        return collector

    def collect(self) -> Registry:
        """Run every collector into a new registry, minus disabled checks."""
        registry = Registry.from_collectors(self.collectors, strict=self.settings.strict_slugs)
        if self.disabled_checks:
            removed = registry.remove_checks(self.disabled_checks)
            logger.debug(f"Skipped {removed} disabled checks")
        return registry

    def _scoped(self, checks: Sequence[HealthCheck]) -> list[HealthCheck]:
        if self.database is None and self.database_factory is None:
            return list(checks)
        return [
            DatabaseScope(check, self.database, self.database_factory)
            if requires_database(check)
            else check
            for check in checks
        ]

    def _executor(self) -> Executor:
        concurrency = self.settings.max_concurrency
        if concurrency > 1 and self.database is not None and self.database_factory is None:
            logger.warning(
                "A shared database handle cannot be used concurrently; running checks sequentially"
            )
            concurrency = 1
        return Executor(max_concurrency=concurrency, timeout_seconds=self.settings.timeout_seconds)

    def _build_report(self, registry: Registry, results: list[CheckResult]) -> Report:
        self.last_run = datetime.now(timezone.utc)
        totals = aggregate(results)
        summary = summarize(results)

        logger.info(
            f"Health report complete: {summary.total} checks, "
            f"{summary.critical} critical, {summary.warning} warning, {summary.good} good",
            extra={"overall_status": totals.overall.value},
        )

        return Report(
            last_run=self.last_run,
            overall=totals.overall,
            by_category=totals.by_category,
            summary=summary,
            categories=registry.sorted_categories(),
            providers=registry.providers,
            results=results,
        )

    def run(self) -> Report:
        """Run every registered check sequentially and build a report."""
        registry = self.collect()
        results = Executor().run_all(self._scoped(registry.checks))
        return self._build_report(registry, results)

    async def arun(self) -> Report:
        """Run every registered check with the configured concurrency and timeout.

        Collection and database connects happen in worker threads, never on
        the event loop.
        """
        registry = await asyncio.to_thread(self.collect)
        results = await self._executor().run_all_async(self._scoped(registry.checks))
        return self._build_report(registry, results)

    def run_single(self, slug: str) -> CheckResult:
        """Run one check by slug.

        Raises:
            CheckNotFoundError: If no registered check has this slug.
        """
        registry = self.collect()
        check = registry.get_check(slug)
        if check is None:
            raise CheckNotFoundError(slug)
        return Executor().run(self._scoped([check])[0])

    def run_category(self, category: str) -> list[CheckResult]:
        """Run the checks of one category, in registration order.

        Raises:
            CategoryNotFoundError: If the category is unknown and has no checks.
        """
        registry = self.collect()
        checks = registry.checks_in_category(category)
        if not checks and not registry.has_category(category):
            raise CategoryNotFoundError(category)
        return Executor().run_all(self._scoped(checks))

    def metadata(self) -> ReportMetadata:
        """Describe registered categories, providers and checks without running them.

        Raises:
            NoChecksAvailableError: If no checks are registered.
        """
        registry = self.collect()
        checks = registry.checks
        if not checks:
            raise NoChecksAvailableError()

        return ReportMetadata(
            categories=registry.sorted_categories(),
            providers=registry.providers,
            checks=[
                CheckInfo(
                    **check_identity(check),
                    docs_url=_optional_url(check, "docs_url"),
                    action_url=_optional_url(check, "action_url"),
                )
                for check in checks
            ],
        )

    def run_with_cache(self) -> Report:
        """Return the cached report if still fresh, otherwise run and cache."""
        if self._cache is None:
            return self.run()

        with self._cache_lock:
            report = self._cache.get(_REPORT_CACHE_KEY)
            if report is not None:
                logger.debug("Serving cached health report")
                return report

            report = self.run()
            self._cache[_REPORT_CACHE_KEY] = report
            return report

    def clear_cache(self) -> None:
        if self._cache is not None:
            with self._cache_lock:
                self._cache.clear()
        logger.info("Health report cache cleared")

    def stats(self, use_cache: bool = False) -> ReportStats:
        """Summary counts for a (possibly cached) report."""
        report = self.run_with_cache() if use_cache else self.run()
        return ReportStats(last_run=report.last_run, **report.summary.model_dump())
