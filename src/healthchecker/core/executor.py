"""Check execution with per-check failure containment."""

import asyncio
import logging
from collections.abc import Iterable

from healthchecker.core.check import HealthCheck, check_identity, contain, make_result
from healthchecker.models.health import CheckResult, HealthStatus

logger = logging.getLogger(__name__)


class Executor:
    """Runs checks and returns one result per check, in input order.

    A check that raises, returns something other than a CheckResult, or
    (in the async variant) exceeds ``timeout_seconds`` is reported as a
    Warning result; the remaining checks always run.

    Args:
        max_concurrency: Maximum checks running at once in run_all_async().
        timeout_seconds: Per-check time limit in run_all_async(); None disables it.
    """

    def __init__(self, max_concurrency: int = 1, timeout_seconds: float | None = None):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.max_concurrency = max_concurrency
        self.timeout_seconds = timeout_seconds

    def run(self, check: HealthCheck) -> CheckResult:
        """Run a single check inside its own fault boundary."""
        return contain(check, check.run)

    def run_all(self, checks: Iterable[HealthCheck]) -> list[CheckResult]:
        """Run checks one after another.

        Args:
            checks: Checks in registration order.

        Returns:
            Results in the same order as ``checks``.
        """
        return [self.run(check) for check in checks]

    async def run_all_async(self, checks: Iterable[HealthCheck]) -> list[CheckResult]:
        """Run checks in worker threads, at most ``max_concurrency`` at a time.

        The timeout of each check starts when the check starts, not when it
        is queued. A timed-out check's thread cannot be interrupted; it keeps
        its slot until it finishes, so later checks may wait for it but
        never run alongside more than ``max_concurrency - 1`` others.

        Args:
            checks: Checks in registration order.

        Returns:
            Results in the same order as ``checks``, regardless of completion order.
        """
        checks = list(checks)
        if not checks:
            return []

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def run_one(check: HealthCheck) -> CheckResult:
            await semaphore.acquire()
            worker = asyncio.ensure_future(asyncio.to_thread(self.run, check))
            worker.add_done_callback(lambda _: semaphore.release())

            try:
                return await asyncio.wait_for(asyncio.shield(worker), timeout=self.timeout_seconds)
            except asyncio.TimeoutError:
                slug = check_identity(check)["slug"]
                logger.warning(
                    f"Health check {slug} timed out after {self.timeout_seconds}s",
                    extra={"check_slug": slug, "error_type": "TimeoutError"},
                )
                return make_result(
                    check,
                    HealthStatus.WARNING,
                    f"Check timed out after {self.timeout_seconds:g}s",
                )

        return list(await asyncio.gather(*(run_one(check) for check in checks)))
