"""Tests for report endpoint handlers."""

import pytest
from fastapi.testclient import TestClient

from healthchecker.config import RunnerSettings, Settings
from healthchecker.core.check import BaseCheck
from healthchecker.core.registry import Contribution
from healthchecker.core.runner import HealthCheckRunner
from healthchecker.main import create_app
from healthchecker.models.health import CheckResult
from healthchecker.models.metadata import Category, ProviderMetadata


class StatusCheck(BaseCheck):
    def __init__(self, slug, category, status):
        self.slug = slug
        self.category = category
        self.status = status
        super().__init__()

    def perform_check(self) -> CheckResult:
        if self.status == "raise":
            raise RuntimeError("probe crashed")
        return getattr(self, self.status)(f"{self.slug} is {self.status}")


def collect(contribution: Contribution) -> None:
    contribution.add_provider(ProviderMetadata(slug="core", name="Health Checker"))
    contribution.add_provider(ProviderMetadata(slug="acme", name="Acme"))
    contribution.add_category(Category(slug="system", label="System", icon="fa-server", sort_order=10))
    contribution.add_category(Category(slug="seo", label="SEO", icon="fa-search", sort_order=70))
    contribution.add_check(StatusCheck("system.a", "system", "good"))
    contribution.add_check(StatusCheck("system.b", "system", "warning"))
    contribution.add_check(StatusCheck("security.c", "security", "critical"))
    contribution.add_check(StatusCheck("security.d", "security", "raise"))


@pytest.fixture
def runner():
    return HealthCheckRunner([collect], settings=RunnerSettings(max_concurrency=2))


@pytest.fixture
def client(runner):
    """Test client for an app using the sample runner."""
    return TestClient(create_app(Settings(), runner=runner))


class TestReportEndpoint:
    """Tests for GET /report."""

    def test_full_report(self, client):
        """Test the report lists every result in registration order."""
        response = client.get("/report")

        assert response.status_code == 200
        data = response.json()
        assert data["overall"] == "critical"
        assert data["byCategory"] == {"system": "warning", "security": "critical"}
        assert data["summary"] == {"critical": 1, "warning": 2, "good": 1, "total": 4}
        assert [r["slug"] for r in data["results"]] == [
            "system.a",
            "system.b",
            "security.c",
            "security.d",
        ]
        assert [c["slug"] for c in data["categories"]] == ["system", "seo"]
        assert [p["slug"] for p in data["providers"]] == ["core", "acme"]

    def test_camel_case_results(self, client):
        """Test results use camelCase field names."""
        result = client.get("/report").json()["results"][0]

        assert result == {
            "slug": "system.a",
            "title": "system.a",
            "category": "system",
            "provider": "core",
            "healthStatus": "good",
            "description": "system.a is good",
        }

    def test_failed_check_reported_as_warning(self, client):
        """Test a raising check shows up as a warning result."""
        result = client.get("/report").json()["results"][3]

        assert result["healthStatus"] == "warning"
        assert result["description"] == "Unable to complete check: probe crashed"

    def test_uncached_by_default(self, client):
        """Test each request runs the checks again."""
        first = client.get("/report").json()["lastRun"]
        second = client.get("/report").json()["lastRun"]
        assert first != second

    def test_cached(self, client):
        """Test cache=true reuses a fresh report."""
        first = client.get("/report", params={"cache": "true"}).json()["lastRun"]
        second = client.get("/report", params={"cache": "true"}).json()["lastRun"]
        assert first == second


class TestStatsEndpoint:
    """Tests for GET /report/stats."""

    def test_counts(self, client):
        """Test stats return counts only."""
        data = client.get("/report/stats").json()

        assert data["critical"] == 1
        assert data["warning"] == 2
        assert data["good"] == 1
        assert data["total"] == 4
        assert "lastRun" in data
        assert "results" not in data


class TestMetadataEndpoint:
    """Tests for GET /report/metadata."""

    def test_metadata(self, client):
        """Test metadata lists checks without results."""
        data = client.get("/report/metadata").json()

        assert [c["slug"] for c in data["checks"]] == [
            "system.a",
            "system.b",
            "security.c",
            "security.d",
        ]
        assert data["checks"][0] == {
            "slug": "system.a",
            "category": "system",
            "provider": "core",
            "title": "system.a",
            "docsUrl": None,
            "actionUrl": None,
        }
        assert data["categories"][0]["sortOrder"] == 10

    def test_no_checks_returns_503(self):
        """Test an empty registry is reported as unavailable."""
        client = TestClient(create_app(Settings(), runner=HealthCheckRunner()))

        response = client.get("/report/metadata")

        assert response.status_code == 503
        assert response.json()["code"] == "NO_CHECKS_AVAILABLE"


class TestCategoryEndpoint:
    """Tests for GET /report/categories/{category}."""

    def test_category_results(self, client):
        """Test only checks of the category are run."""
        data = client.get("/report/categories/system").json()

        assert data["category"] == "system"
        assert data["status"] == "warning"
        assert [r["slug"] for r in data["results"]] == ["system.a", "system.b"]

    def test_registered_empty_category(self, client):
        """Test a registered category without checks has no status."""
        data = client.get("/report/categories/seo").json()

        assert data["status"] is None
        assert data["results"] == []

    def test_unknown_category_returns_404(self, client):
        """Test unknown categories return 404."""
        response = client.get("/report/categories/nonexistent")

        assert response.status_code == 404
        assert response.json()["code"] == "CATEGORY_NOT_FOUND"


class TestCheckEndpoint:
    """Tests for GET /report/checks/{slug}."""

    def test_single_check(self, client):
        """Test a single check result is returned."""
        response = client.get("/report/checks/security.c")

        assert response.status_code == 200
        assert response.json()["healthStatus"] == "critical"

    def test_unknown_check_returns_404(self, client):
        """Test unknown slugs return 404 with the request ID."""
        response = client.get(
            "/report/checks/system.missing",
            headers={"X-Request-ID": "req-404-abcdef"},
        )

        assert response.status_code == 404
        assert response.json() == {
            "detail": "Check not found: system.missing",
            "code": "CHECK_NOT_FOUND",
            "request_id": "req-404-abcdef",
        }


class TestClearCacheEndpoint:
    """Tests for DELETE /report/cache."""

    def test_clear_cache(self, client):
        """Test clearing the cache forces a new run."""
        first = client.get("/report", params={"cache": "true"}).json()["lastRun"]

        response = client.delete("/report/cache")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Health report cache cleared"}
        second = client.get("/report", params={"cache": "true"}).json()["lastRun"]
        assert first != second
