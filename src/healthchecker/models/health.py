"""Health status and check result models."""

from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class HealthStatus(str, Enum):
    """Severity of a check outcome.

    Statuses are totally ordered by severity: good < warning < critical.
    """

    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def severity(self) -> int:
        """Rank used for worst-case reduction (higher is worse)."""
        return _SEVERITY[self]

    @property
    def sort_order(self) -> int:
        """Display position, most severe first."""
        return 3 - _SEVERITY[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, HealthStatus):
            return NotImplemented
        return self.severity < other.severity

    def __le__(self, other: object) -> bool:
        if not isinstance(other, HealthStatus):
            return NotImplemented
        return self.severity <= other.severity

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, HealthStatus):
            return NotImplemented
        return self.severity > other.severity

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, HealthStatus):
            return NotImplemented
        return self.severity >= other.severity


_SEVERITY = {
    HealthStatus.GOOD: 0,
    HealthStatus.WARNING: 1,
    HealthStatus.CRITICAL: 2,
}


def worst_status(
    statuses: Iterable[HealthStatus],
    default: HealthStatus = HealthStatus.GOOD,
) -> HealthStatus:
    """Return the most severe status, or ``default`` when there are none.

    Args:
        statuses: Statuses to reduce.
        default: Value returned for an empty input.

    Returns:
        The worst status found.
    """
    return max(statuses, key=lambda status: status.severity, default=default)


class CheckResult(BaseModel):
    """Outcome of running a single health check.

    Results are immutable once created. Identity fields are copied from the
    check that produced them.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    slug: str
    title: str
    category: str
    provider: str = "core"
    health_status: HealthStatus
    description: str
