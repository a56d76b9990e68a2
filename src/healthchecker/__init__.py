"""Health check orchestration engine with a JSON report API."""

__version__ = "1.0.0"
