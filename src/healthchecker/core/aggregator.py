"""Reductions over a finished list of check results.

Every function here is total: it accepts any list of results, including an
empty one. Status reduction takes the worst status and is independent of
input order.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from healthchecker.models.health import CheckResult, HealthStatus, worst_status
from healthchecker.models.metadata import Category
from healthchecker.models.report import ReportSummary

# Sort position for results whose category was never registered
UNKNOWN_CATEGORY_ORDER = 999

# Overall status reported when there are no results at all
EMPTY_STATUS = HealthStatus.GOOD


@dataclass(frozen=True)
class Aggregate:
    """Overall and per-category worst status."""

    overall: HealthStatus
    by_category: dict[str, HealthStatus] = field(default_factory=dict)


def aggregate(results: Iterable[CheckResult]) -> Aggregate:
    """Reduce results to the worst status overall and per category.

    Categories without results get no entry. An empty input is vacuously
    healthy and yields ``EMPTY_STATUS``.

    Args:
        results: Check results in any order.

    Returns:
        Aggregate with overall and per-category status.
    """
    overall = EMPTY_STATUS
    by_category: dict[str, HealthStatus] = {}

    for result in results:
        status = result.health_status
        overall = max(overall, status)
        current = by_category.get(result.category)
        by_category[result.category] = status if current is None else max(current, status)

    return Aggregate(overall=overall, by_category=by_category)


def overall_status(results: Iterable[CheckResult]) -> HealthStatus:
    return worst_status(result.health_status for result in results)


def summarize(results: Iterable[CheckResult]) -> ReportSummary:
    """Count results per status."""
    counts = {status: 0 for status in HealthStatus}
    for result in results:
        counts[result.health_status] += 1

    return ReportSummary(
        critical=counts[HealthStatus.CRITICAL],
        warning=counts[HealthStatus.WARNING],
        good=counts[HealthStatus.GOOD],
        total=sum(counts.values()),
    )


def group_by_status(results: Iterable[CheckResult]) -> dict[HealthStatus, list[CheckResult]]:
    """Group results by status, most severe first; every status has a key."""
    grouped: dict[HealthStatus, list[CheckResult]] = {
        status: [] for status in sorted(HealthStatus, key=lambda s: s.sort_order)
    }
    for result in results:
        grouped[result.health_status].append(result)
    return grouped


def group_by_category(
    results: Iterable[CheckResult],
    categories: Sequence[Category] = (),
) -> dict[str, list[CheckResult]]:
    """Group results by category slug.

    Known categories come first, in (sort_order, slug) order; categories
    that were never registered follow in the order they were first seen.
    Categories without results are left out.

    Args:
        results: Check results.
        categories: Registered categories.

    Returns:
        Ordered mapping of category slug to results.
    """
    grouped: dict[str, list[CheckResult]] = {}
    for result in results:
        grouped.setdefault(result.category, []).append(result)

    ordered: dict[str, list[CheckResult]] = {}
    for category in sorted(categories, key=lambda c: c.sort_key):
        if category.slug in grouped:
            ordered[category.slug] = grouped[category.slug]

    for slug, category_results in grouped.items():
        if slug not in ordered:
            ordered[slug] = category_results

    return ordered


def sort_for_display(
    results: Iterable[CheckResult],
    categories: Sequence[Category] = (),
) -> list[CheckResult]:
    """Order results most severe first, then by category sort order.

    The sort is stable, so results tied on both keys keep their input order.
    """
    order = {category.slug: category.sort_order for category in categories}
    return sorted(
        results,
        key=lambda result: (
            result.health_status.sort_order,
            order.get(result.category, UNKNOWN_CATEGORY_ORDER),
        ),
    )
