"""Provider and categories registered by the built-in plugin."""

from healthchecker import __version__
from healthchecker.models.metadata import Category, ProviderMetadata

CORE_PROVIDER = ProviderMetadata(
    slug="core",
    name="Health Checker",
    description="Built-in health checks",
    icon="fa-heartbeat",
    version=__version__,
)

# Sort orders leave gaps of 10 so plugins can slot their own categories in
CORE_CATEGORIES: tuple[Category, ...] = (
    Category(slug="system", label="System & Hosting", icon="fa-server", sort_order=10),
    Category(slug="database", label="Database", icon="fa-database", sort_order=20),
    Category(slug="security", label="Security", icon="fa-shield-alt", sort_order=30),
    Category(slug="users", label="Users", icon="fa-users", sort_order=40),
    Category(slug="extensions", label="Extensions", icon="fa-puzzle-piece", sort_order=50),
    Category(slug="performance", label="Performance", icon="fa-tachometer-alt", sort_order=60),
    Category(slug="seo", label="SEO", icon="fa-search", sort_order=70),
    Category(slug="content", label="Content Quality", icon="fa-file-alt", sort_order=80),
)
