"""Database checks.

These checks take a DB-API 2.0 connection through ``set_database()``.
"""

import sqlite3
import time
from collections.abc import Callable
from contextlib import closing
from typing import Any

from healthchecker.config import DatabaseSettings, SiteConfig
from healthchecker.core.check import BaseCheck
from healthchecker.models.health import CheckResult


def ping(database: Any) -> None:
    """Execute a trivial query on a DB-API connection."""
    with closing(database.cursor()) as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()


def sqlite_connection_factory(settings: DatabaseSettings) -> Callable[[], sqlite3.Connection]:
    """Build a factory opening the configured SQLite database.

    The file is opened read-write without being created, so a missing
    database fails the connection instead of producing an empty one.

    Args:
        settings: Database settings with a configured ``path``.

    Returns:
        Zero-argument callable returning a new connection per call.
    """
    if settings.path is None:
        raise ValueError("database.path is not configured")

    uri = f"{settings.path.resolve().as_uri()}?mode=rw"

    def connect() -> sqlite3.Connection:
        return sqlite3.connect(
            uri,
            uri=True,
            timeout=settings.timeout_seconds,
            check_same_thread=False,
        )

    return connect


class ConnectionCheck(BaseCheck):
    slug = "database.connection"
    category = "database"
    title = "Database connection"
    requires_database = True

    def perform_check(self) -> CheckResult:
        database = self.require_database()

        try:
            ping(database)
        except Exception as exc:
            return self.critical(f"Database connection failed: {exc}")

        return self.good("Database connection is working correctly.")


class QueryLatencyCheck(BaseCheck):
    """Round-trip time of a trivial query."""

    slug = "database.query_latency"
    category = "database"
    title = "Database latency"
    requires_database = True

    def __init__(self, site: SiteConfig, database: Any | None = None):
        super().__init__(database=database)
        self.site = site

    def perform_check(self) -> CheckResult:
        database = self.require_database()

        start_time = time.perf_counter()
        ping(database)
        latency_ms = (time.perf_counter() - start_time) * 1000

        if latency_ms > self.site.slow_query_ms:
            return self.warning(
                f"A trivial query took {latency_ms:.0f}ms "
                f"(threshold {self.site.slow_query_ms}ms). The database server may be overloaded."
            )

        return self.good(f"Database responded in {latency_ms:.1f}ms.")
