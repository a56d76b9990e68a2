"""Collector registry.

Collectors are plain callables that receive a :class:`Contribution` and
add checks, categories and provider metadata to it. The :class:`Registry`
runs collectors in order and merges what they contributed, deduplicating
by slug.
"""

import logging
from collections import Counter
from collections.abc import Callable, Iterable

from healthchecker.core.check import HealthCheck, check_identity
from healthchecker.models.metadata import Category, ProviderMetadata
from healthchecker.utils.errors import DuplicateCheckError

logger = logging.getLogger(__name__)

CORE_PROVIDER_SLUG = "core"


class Contribution:
    """Sink handed to a collector.

    Each ``add_*`` method validates the type of what it receives so a
    misbehaving collector fails at the point of contribution.
    """

    def __init__(self):
        self.checks: list[HealthCheck] = []
        self.categories: list[Category] = []
        self.providers: list[ProviderMetadata] = []

    def add_check(self, check: HealthCheck) -> None:
        if not isinstance(check, HealthCheck):
            raise TypeError(f"add_check() only accepts health checks. Got {type(check).__name__}.")
        slug = check.slug
        if not isinstance(slug, str) or not slug:
            raise ValueError(f"Health check {check!r} has no slug")
        self.checks.append(check)

    def add_category(self, category: Category) -> None:
        if not isinstance(category, Category):
            raise TypeError(f"add_category() only accepts Category. Got {type(category).__name__}.")
        self.categories.append(category)

    def add_provider(self, provider: ProviderMetadata) -> None:
        if not isinstance(provider, ProviderMetadata):
            raise TypeError(
                f"add_provider() only accepts ProviderMetadata. Got {type(provider).__name__}."
            )
        self.providers.append(provider)


Collector = Callable[[Contribution], None]


class Registry:
    """Checks, categories and providers gathered from collectors.

    Collision policy:
    - checks: the first registration of a slug wins; later ones are dropped
      and counted, or raise :class:`DuplicateCheckError` when ``strict``.
    - categories and providers: the last registration wins for display
      fields; the slug keeps its original position.

    A collector that raises is logged and skipped; anything it contributed
    before failing is discarded. In strict mode a collector is also checked
    for duplicate slugs before any of its contributions are merged.
    """

    def __init__(self, strict: bool = False):
        self.strict = strict
        self._checks: dict[str, HealthCheck] = {}
        self._categories: dict[str, Category] = {}
        self._providers: dict[str, ProviderMetadata] = {}
        self.duplicates: Counter[str] = Counter()
        self.failed_collectors: list[str] = []

    @classmethod
    def from_collectors(cls, collectors: Iterable[Collector], strict: bool = False) -> "Registry":
        """Build a registry by running each collector in order."""
        registry = cls(strict=strict)
        for collector in collectors:
            registry.collect(collector)
        return registry

    def collect(self, collector: Collector) -> None:
        """Run one collector and merge its contributions.

        Args:
            collector: Callable receiving a fresh Contribution.

        Raises:
            DuplicateCheckError: In strict mode, on a duplicate check slug.
        """
        contribution = Contribution()
        name = getattr(collector, "__qualname__", repr(collector))

        try:
            collector(contribution)
        except Exception:
            logger.exception(
                f"Collector {name} failed; its contributions were discarded",
                extra={"collector": name},
            )
            self.failed_collectors.append(name)
            return

        if self.strict:
            self._ensure_unique(contribution.checks)

        for provider in contribution.providers:
            self.add_provider(provider)
        for category in contribution.categories:
            self.add_category(category)
        for check in contribution.checks:
            self.add_check(check)

        logger.debug(
            f"Collector {name} contributed {len(contribution.checks)} checks, "
            f"{len(contribution.categories)} categories, "
            f"{len(contribution.providers)} providers"
        )

    def _ensure_unique(self, checks: Iterable[HealthCheck]) -> None:
        seen = set(self._checks)
        for check in checks:
            if check.slug in seen:
                raise DuplicateCheckError(check.slug)
            seen.add(check.slug)

    def add_check(self, check: HealthCheck) -> bool:
        """Register a check unless its slug is taken.

        Returns:
            True if the check was added, False if it was a dropped duplicate.
        """
        slug = check.slug
        if slug in self._checks:
            if self.strict:
                raise DuplicateCheckError(slug)
            self.duplicates["checks"] += 1
            logger.warning(
                f"Duplicate health check slug {slug!r} from provider "
                f"{check_identity(check)['provider']!r} ignored; keeping the one from "
                f"{check_identity(self._checks[slug])['provider']!r}",
                extra={"check_slug": slug},
            )
            return False
        self._checks[slug] = check
        return True

    def add_category(self, category: Category) -> None:
        if category.slug in self._categories:
            self.duplicates["categories"] += 1
            logger.debug(f"Category {category.slug!r} re-registered; using latest metadata")
        self._categories[category.slug] = category

    def add_provider(self, provider: ProviderMetadata) -> None:
        if provider.slug in self._providers:
            self.duplicates["providers"] += 1
            logger.debug(f"Provider {provider.slug!r} re-registered; using latest metadata")
        self._providers[provider.slug] = provider

    @property
    def checks(self) -> list[HealthCheck]:
        """Registered checks in registration order."""
        return list(self._checks.values())

    @property
    def categories(self) -> list[Category]:
        """Registered categories in registration order."""
        return list(self._categories.values())

    @property
    def providers(self) -> list[ProviderMetadata]:
        """Registered providers in registration order."""
        return list(self._providers.values())

    def get_check(self, slug: str) -> HealthCheck | None:
        return self._checks.get(slug)

    def get_category(self, slug: str) -> Category | None:
        return self._categories.get(slug)

    def get_provider(self, slug: str) -> ProviderMetadata | None:
        return self._providers.get(slug)

    def has_category(self, slug: str) -> bool:
        return slug in self._categories

    def has_provider(self, slug: str) -> bool:
        return slug in self._providers

    def checks_in_category(self, category: str) -> list[HealthCheck]:
        return [check for check in self._checks.values() if check.category == category]

    def sorted_categories(self) -> list[Category]:
        """Categories ordered by sort order, then slug."""
        return sorted(self._categories.values(), key=lambda category: category.sort_key)

    def third_party_providers(self) -> list[ProviderMetadata]:
        return [p for p in self._providers.values() if p.slug != CORE_PROVIDER_SLUG]

    def remove_checks(self, slugs: Iterable[str]) -> int:
        """Drop checks by slug.

        Returns:
            Number of checks removed.
        """
        removed = 0
        for slug in slugs:
            if self._checks.pop(slug, None) is not None:
                removed += 1
        return removed

    def __len__(self) -> int:
        return len(self._checks)

    def __contains__(self, slug: object) -> bool:
        return slug in self._checks
