"""Scraped website model."""

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import Field

from siteforge.models.base import CamelModel

ScrapeMethod = Literal[
    "sitemap-comprehensive",
    "single-page",
    "enhanced-fallback",
    "error-fallback",
]


class ImageRef(CamelModel):
    """An image found on the scraped site."""

    url: str
    alt: str = ""


class ScrapeMetadata(CamelModel):
    """How and when a site was scraped."""

    scraped_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    url: str = ""
    method: ScrapeMethod = "single-page"
    word_count: int = 0
    image_count: int = 0
    has_contact_info: bool = False

    # Sitemap strategy counters
    total_pages_discovered: int | None = None
    pages_scraped: int | None = None
    priority_pages_found: int | None = None
    scraped_urls: list[str] | None = None
    sitemap_complete: bool | None = None

    # Provider page metadata (single-page strategy)
    source_metadata: dict[str, Any] | None = None

    # Set on the error-fallback path
    error: str | None = None


class ScrapedSite(CamelModel):
    """Result of scraping one logical site."""

    title: str = ""
    description: str = ""
    content: str = ""
    full_content: str = ""
    links: list[str] = Field(default_factory=list)
    images: list[ImageRef] = Field(default_factory=list)
    business_info: dict[str, str] = Field(default_factory=dict)
    sitemap: list[str] | None = None
    metadata: ScrapeMetadata | None = None

    @property
    def source_text(self) -> str:
        """Text handed to the LLM: the untruncated aggregate when available."""
        return self.full_content or self.content

    @property
    def url(self) -> str:
        return self.metadata.url if self.metadata else ""
