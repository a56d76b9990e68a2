"""Tests for result aggregation."""

from hypothesis import given, settings
from hypothesis import strategies as st

from healthchecker.core.aggregator import (
    EMPTY_STATUS,
    UNKNOWN_CATEGORY_ORDER,
    Aggregate,
    aggregate,
    group_by_category,
    group_by_status,
    overall_status,
    sort_for_display,
    summarize,
)
from healthchecker.core.check import FunctionCheck
from healthchecker.core.executor import Executor
from healthchecker.models.health import CheckResult, HealthStatus
from healthchecker.models.metadata import Category

GOOD = HealthStatus.GOOD
WARNING = HealthStatus.WARNING
CRITICAL = HealthStatus.CRITICAL

CATEGORIES = [
    Category(slug="security", label="Security", icon="fa-shield-alt", sort_order=30),
    Category(slug="system", label="System", icon="fa-server", sort_order=10),
    Category(slug="database", label="Database", icon="fa-database", sort_order=20),
]


def result(slug: str, status: HealthStatus, category: str = "system") -> CheckResult:
    return CheckResult(
        slug=slug,
        title=slug,
        category=category,
        health_status=status,
        description=f"{slug} is {status.value}",
    )


def check(slug: str, status: HealthStatus, category: str = "system") -> FunctionCheck:
    return FunctionCheck(
        lambda c: result(c.slug, status, c.category),
        slug=slug,
        category=category,
    )


results_strategy = st.lists(
    st.builds(
        result,
        slug=st.sampled_from(["a", "b", "c"]),
        status=st.sampled_from(list(HealthStatus)),
        category=st.sampled_from(["system", "database", "security"]),
    ),
    max_size=20,
)


class TestEndToEnd:
    """Executor followed by aggregation."""

    def test_all_good(self):
        """Test three good checks yield good."""
        checks = [check("system.a", GOOD), check("system.b", GOOD), check("system.c", GOOD)]
        assert aggregate(Executor().run_all(checks)).overall == GOOD

    def test_one_warning(self):
        """Test a single warning makes the report warning."""
        checks = [
            check("system.a", GOOD),
            check("security.b", WARNING, category="security"),
            check("system.c", GOOD),
        ]

        totals = aggregate(Executor().run_all(checks))

        assert totals.overall == WARNING
        assert totals.by_category == {"system": GOOD, "security": WARNING}

    def test_critical_dominates(self):
        """Test critical outranks warning."""
        checks = [check("system.a", GOOD), check("system.b", CRITICAL), check("system.c", WARNING)]
        assert aggregate(Executor().run_all(checks)).overall == CRITICAL

    def test_raising_check(self):
        """Test a raising check is reported and the rest still run."""

        def explode(c):
            raise RuntimeError("simulated failure")

        checks = [
            check("system.a", GOOD),
            FunctionCheck(explode, slug="system.broken", category="system"),
            check("system.c", GOOD),
        ]

        results = Executor().run_all(checks)

        assert [r.slug for r in results] == ["system.a", "system.broken", "system.c"]
        assert results[1].health_status == WARNING
        assert results[1].description
        assert aggregate(results).overall == WARNING

    def test_no_checks(self):
        """Test an empty run is vacuously good."""
        results = Executor().run_all([])

        assert results == []
        totals = aggregate(results)
        assert totals.overall == EMPTY_STATUS == GOOD
        assert totals.by_category == {}


class TestAggregate:
    """Tests for aggregate function."""

    def test_returns_aggregate(self):
        """Test the return type."""
        assert isinstance(aggregate([]), Aggregate)

    def test_category_without_results_has_no_entry(self):
        """Test only categories seen in results appear."""
        totals = aggregate([result("a", WARNING, "database")])
        assert totals.by_category == {"database": WARNING}

    def test_accepts_generator(self):
        """Test a one-shot iterable is reduced in a single pass."""
        totals = aggregate(r for r in [result("a", GOOD), result("b", CRITICAL, "seo")])
        assert totals.overall == CRITICAL
        assert totals.by_category == {"system": GOOD, "seo": CRITICAL}

    @given(results_strategy)
    @settings(deadline=None)
    def test_critical_iff_any_critical(self, results):
        """Test overall is critical exactly when some result is critical."""
        has_critical = any(r.health_status == CRITICAL for r in results)
        assert (aggregate(results).overall == CRITICAL) == has_critical

    @given(results_strategy)
    @settings(deadline=None)
    def test_warning_iff_warning_without_critical(self, results):
        """Test overall is warning exactly when the worst result is a warning."""
        statuses = {r.health_status for r in results}
        expected = WARNING in statuses and CRITICAL not in statuses
        assert (aggregate(results).overall == WARNING) == expected

    @given(results_strategy)
    @settings(deadline=None)
    def test_good_iff_all_good(self, results):
        """Test overall is good exactly when every result is good."""
        all_good = all(r.health_status == GOOD for r in results)
        assert (aggregate(results).overall == GOOD) == all_good

    @given(st.data())
    @settings(deadline=None)
    def test_order_independent(self, data):
        """Test reordering results does not change the aggregate."""
        results = data.draw(results_strategy)
        shuffled = data.draw(st.permutations(results))

        assert aggregate(shuffled) == aggregate(results)

    @given(results_strategy)
    @settings(deadline=None)
    def test_category_status_is_worst_in_category(self, results):
        """Test each category reports the worst of its own results."""
        totals = aggregate(results)
        for category, status in totals.by_category.items():
            members = [r.health_status for r in results if r.category == category]
            assert status == max(members)

    @given(results_strategy)
    @settings(deadline=None)
    def test_overall_matches_overall_status(self, results):
        """Test the single-pass and standalone reductions agree."""
        assert aggregate(results).overall == overall_status(results)


class TestSummarize:
    """Tests for summarize function."""

    def test_counts(self):
        """Test results are counted per status."""
        summary = summarize(
            [result("a", GOOD), result("b", CRITICAL), result("c", GOOD), result("d", WARNING)]
        )

        assert summary.critical == 1
        assert summary.warning == 1
        assert summary.good == 2
        assert summary.total == 4

    def test_empty(self):
        """Test no results gives zero counts."""
        summary = summarize([])
        assert summary.total == 0
        assert summary.critical == summary.warning == summary.good == 0


class TestGroupByStatus:
    """Tests for group_by_status function."""

    def test_every_status_present_most_severe_first(self):
        """Test all statuses are keys, critical first."""
        grouped = group_by_status([result("a", GOOD)])

        assert list(grouped) == [CRITICAL, WARNING, GOOD]
        assert grouped[CRITICAL] == []
        assert [r.slug for r in grouped[GOOD]] == ["a"]

    def test_keeps_input_order_within_group(self):
        """Test results within a status keep their order."""
        grouped = group_by_status([result("b", WARNING), result("a", WARNING)])
        assert [r.slug for r in grouped[WARNING]] == ["b", "a"]


class TestGroupByCategory:
    """Tests for group_by_category function."""

    def test_known_categories_sorted(self):
        """Test known categories follow sort order."""
        grouped = group_by_category(
            [
                result("a", GOOD, "security"),
                result("b", GOOD, "system"),
                result("c", GOOD, "database"),
            ],
            CATEGORIES,
        )

        assert list(grouped) == ["system", "database", "security"]

    def test_unknown_categories_last(self):
        """Test unregistered categories follow in first-seen order."""
        grouped = group_by_category(
            [
                result("a", GOOD, "zzz"),
                result("b", GOOD, "security"),
                result("c", GOOD, "aaa"),
            ],
            CATEGORIES,
        )

        assert list(grouped) == ["security", "zzz", "aaa"]

    def test_empty_categories_omitted(self):
        """Test categories without results are left out."""
        grouped = group_by_category([result("a", GOOD, "system")], CATEGORIES)
        assert list(grouped) == ["system"]


class TestSortForDisplay:
    """Tests for sort_for_display function."""

    def test_status_then_category(self):
        """Test results sort by severity, then category order."""
        ordered = sort_for_display(
            [
                result("good-system", GOOD, "system"),
                result("warning-security", WARNING, "security"),
                result("critical-database", CRITICAL, "database"),
                result("warning-system", WARNING, "system"),
            ],
            CATEGORIES,
        )

        assert [r.slug for r in ordered] == [
            "critical-database",
            "warning-system",
            "warning-security",
            "good-system",
        ]

    def test_unknown_category_sorts_last(self):
        """Test unregistered categories use the fallback order."""
        assert UNKNOWN_CATEGORY_ORDER > max(c.sort_order for c in CATEGORIES)

        ordered = sort_for_display(
            [result("x", GOOD, "custom"), result("y", GOOD, "security")],
            CATEGORIES,
        )

        assert [r.slug for r in ordered] == ["y", "x"]

    def test_stable(self):
        """Test ties keep input order."""
        ordered = sort_for_display([result("b", GOOD), result("a", GOOD)], CATEGORIES)
        assert [r.slug for r in ordered] == ["b", "a"]
