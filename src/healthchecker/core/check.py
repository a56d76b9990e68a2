"""Health check contract and failure containment.

Any object with ``slug``, ``category``, ``provider`` and ``title``
attributes and a ``run()`` method returning a :class:`CheckResult` is a
health check. Failure containment is provided by :func:`contain` and the
:func:`guarded` decorator so checks do not have to inherit from anything;
:class:`BaseCheck` bundles the usual helpers for checks that want them.
"""

import logging
from collections.abc import Callable
from functools import wraps
from typing import Any, Protocol, TypeVar, runtime_checkable

from healthchecker.models.health import CheckResult, HealthStatus
from healthchecker.utils.errors import MissingResourceError, describe_exception

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER = "core"
UNKNOWN_IDENTITY = "unknown"
FAILURE_PREFIX = "Unable to complete check"

C = TypeVar("C")


@runtime_checkable
class HealthCheck(Protocol):
    """Structural interface every health check satisfies."""

    slug: str
    category: str
    provider: str
    title: str

    def run(self) -> CheckResult:
        """Run the check. Must never raise."""
        ...


def _read(check: Any, name: str, default: str) -> str:
    try:
        value = getattr(check, name)
    except Exception:
        return default
    return value if isinstance(value, str) and value else default


def check_identity(check: Any) -> dict[str, str]:
    """Read a check's identity fields without trusting its accessors.

    Accessors that raise or return something other than a non-empty string
    are replaced by fallbacks, so a broken check can still be reported.

    Args:
        check: The check to inspect.

    Returns:
        Mapping with slug, title, category and provider.
    """
    slug = _read(check, "slug", UNKNOWN_IDENTITY)
    return {
        "slug": slug,
        "title": _read(check, "title", slug),
        "category": _read(check, "category", UNKNOWN_IDENTITY),
        "provider": _read(check, "provider", DEFAULT_PROVIDER),
    }


def make_result(check: Any, status: HealthStatus, description: str) -> CheckResult:
    """Build a result carrying the identity of ``check``.

    Args:
        check: The check the result belongs to.
        status: Outcome severity.
        description: Human-readable message.

    Returns:
        New immutable CheckResult.
    """
    return CheckResult(
        health_status=status,
        description=description,
        **check_identity(check),
    )


def failure_result(
    check: Any,
    exc: BaseException,
    prefix: str = FAILURE_PREFIX,
) -> CheckResult:
    """Turn an exception raised by a check into a Warning result."""
    return make_result(
        check,
        HealthStatus.WARNING,
        f"{prefix}: {describe_exception(exc)}",
    )


def contain(check: Any, perform: Callable[[], CheckResult]) -> CheckResult:
    """Run ``perform`` inside a fault boundary for ``check``.

    Exceptions and non-result return values are converted to a Warning
    result with the check's identity. Only ``BaseException`` subclasses
    that are not ``Exception`` (KeyboardInterrupt, SystemExit) propagate.

    Args:
        check: The check being run, used for identity and logging.
        perform: Zero-argument callable producing the real result.

    Returns:
        The check's own result, or a synthesized Warning result.
    """
    try:
        result = perform()
    except Exception as exc:
        slug = check_identity(check)["slug"]
        logger.warning(
            f"Health check {slug} failed: {type(exc).__name__}: {exc}",
            extra={"check_slug": slug, "error_type": type(exc).__name__},
        )
        return failure_result(check, exc)

    if not isinstance(result, CheckResult):
        return failure_result(
            check,
            TypeError(f"expected CheckResult, got {type(result).__name__}"),
        )
    return result


def guarded(perform: Callable[[C], CheckResult]) -> Callable[[C], CheckResult]:
    """Decorate a check method so it never raises.

    Example:
        class CacheCheck:
            slug = "performance.cache"
            category = "performance"
            provider = "core"
            title = "Cache enabled"

            @guarded
            def run(self) -> CheckResult:
                ...
    """

    @wraps(perform)
    def wrapper(self: C) -> CheckResult:
        return contain(self, lambda: perform(self))

    return wrapper


class BaseCheck:
    """Convenience base for checks.

    Subclasses set ``slug`` and ``category`` (and optionally ``provider``
    and ``title``) and implement :meth:`perform_check`. A database handle
    can be passed to the constructor or injected with :meth:`set_database`
    before :meth:`run` is called; the runner only injects one into checks
    that set ``requires_database``.

    ``docs_url`` and ``action_url`` are optional links shown next to the
    check by report clients.
    """

    slug: str = ""
    category: str = ""
    provider: str = DEFAULT_PROVIDER
    title: str = ""
    requires_database: bool = False
    docs_url: str | None = None
    action_url: str | None = None

    def __init__(self, database: Any | None = None):
        self._database = database
        if not self.title:
            self.title = self.slug

    def set_database(self, database: Any) -> None:
        """Inject the database handle used by :meth:`require_database`."""
        self._database = database

    @property
    def database(self) -> Any | None:
        return self._database

    def require_database(self) -> Any:
        """Return the injected database handle.

        Raises:
            MissingResourceError: If no handle was injected.
        """
        if self._database is None:
            raise MissingResourceError(self.slug)
        return self._database

    def perform_check(self) -> CheckResult:
        raise NotImplementedError(f"{type(self).__name__} must implement perform_check()")

    def run(self) -> CheckResult:
        return contain(self, self.perform_check)

    def good(self, description: str) -> CheckResult:
        return make_result(self, HealthStatus.GOOD, description)

    def warning(self, description: str) -> CheckResult:
        return make_result(self, HealthStatus.WARNING, description)

    def critical(self, description: str) -> CheckResult:
        return make_result(self, HealthStatus.CRITICAL, description)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}({self.slug})>"


class FunctionCheck(BaseCheck):
    """Check whose logic is a plain function taking the check itself."""

    def __init__(
        self,
        func: Callable[["FunctionCheck"], CheckResult],
        slug: str,
        category: str,
        provider: str = DEFAULT_PROVIDER,
        title: str | None = None,
        database: Any | None = None,
        requires_database: bool = False,
    ):
        self.slug = slug
        self.category = category
        self.provider = provider
        self.title = title or slug
        self.requires_database = requires_database
        self._func = func
        super().__init__(database=database)

    def perform_check(self) -> CheckResult:
        return self._func(self)


def health_check(
    slug: str,
    *,
    category: str,
    provider: str = DEFAULT_PROVIDER,
    title: str | None = None,
    requires_database: bool = False,
) -> Callable[[Callable[[FunctionCheck], CheckResult]], FunctionCheck]:
    """Turn a function into a :class:`FunctionCheck`.

    Example:
        @health_check("system.debug_mode", category="system")
        def debug_mode(check):
            return check.good("Debug mode is off.")
    """

    def decorator(func: Callable[[FunctionCheck], CheckResult]) -> FunctionCheck:
        return FunctionCheck(
            func,
            slug=slug,
            category=category,
            provider=provider,
            title=title,
            requires_database=requires_database,
        )

    return decorator
