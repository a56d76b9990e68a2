"""Descriptive records used to group and attribute check results."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

DEFAULT_SORT_ORDER = 50


class Category(BaseModel):
    """Display group for checks.

    Lower ``sort_order`` values are shown first; ties are broken by slug.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    slug: str
    label: str
    icon: str
    sort_order: int = DEFAULT_SORT_ORDER
    logo_url: str | None = None

    @property
    def sort_key(self) -> tuple[int, str]:
        return (self.sort_order, self.slug)


class ProviderMetadata(BaseModel):
    """Attribution record for the plugin that contributed checks."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    slug: str
    name: str
    description: str = ""
    url: str | None = None
    icon: str | None = None
    logo_url: str | None = None
    version: str | None = None
