"""Built-in plugin: core provider, core categories and the standard checks."""

from healthchecker.config import SiteConfig
from healthchecker.core.registry import Collector, Contribution
from healthchecker.plugins.core.categories import CORE_CATEGORIES, CORE_PROVIDER
from healthchecker.plugins.core.checks import (
    ConnectionCheck,
    DebugModeCheck,
    DiskSpaceCheck,
    ForceSslCheck,
    PythonVersionCheck,
    QueryLatencyCheck,
    TempDirectoryCheck,
)


def make_core_collector(site: SiteConfig) -> Collector:
    """Create the collector for the built-in plugin.

    Checks are created on every collection so a report never reuses a
    check instance (or its injected database handle) from an earlier run.

    Args:
        site: Site options the checks inspect.

    Returns:
        Collector contributing the core provider, categories and checks.
    """

    def collect_core(contribution: Contribution) -> None:
        contribution.add_provider(CORE_PROVIDER)

        for category in CORE_CATEGORIES:
            contribution.add_category(category)

        for check in (
            PythonVersionCheck(site),
            DiskSpaceCheck(site),
            TempDirectoryCheck(site),
            ConnectionCheck(),
            QueryLatencyCheck(site),
            DebugModeCheck(site),
            ForceSslCheck(site),
        ):
            contribution.add_check(check)

    return collect_core


__all__ = ["CORE_CATEGORIES", "CORE_PROVIDER", "make_core_collector"]
