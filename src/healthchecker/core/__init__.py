"""Check contract, registry, executor, aggregator and report runner."""

from healthchecker.core.aggregator import (
    Aggregate,
    aggregate,
    group_by_category,
    group_by_status,
    sort_for_display,
    summarize,
)
from healthchecker.core.check import (
    BaseCheck,
    FunctionCheck,
    HealthCheck,
    contain,
    guarded,
    health_check,
    make_result,
)
from healthchecker.core.executor import Executor
from healthchecker.core.registry import Collector, Contribution, Registry
from healthchecker.core.runner import HealthCheckRunner

__all__ = [
    "Aggregate",
    "BaseCheck",
    "Collector",
    "Contribution",
    "Executor",
    "FunctionCheck",
    "HealthCheck",
    "HealthCheckRunner",
    "Registry",
    "aggregate",
    "contain",
    "group_by_category",
    "group_by_status",
    "guarded",
    "health_check",
    "make_result",
    "sort_for_display",
    "summarize",
]
