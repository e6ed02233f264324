"""Scraping provider binding using the Firecrawl API."""

import logging
from typing import Any

from firecrawl import Firecrawl

logger = logging.getLogger(__name__)


def is_rate_limit_error(error: Exception) -> bool:
    """True when a provider exception signals HTTP 429 / rate limiting."""
    if getattr(error, "status_code", None) == 429:
        return True
    return "rate limit" in str(error).lower()


def _metadata_dict(meta: Any) -> dict[str, Any]:
    """Normalize Firecrawl's metadata object (or dict) into a plain dict."""
    if meta is None:
        return {}
    if isinstance(meta, dict):
        return {k: v for k, v in meta.items() if v is not None}
    if hasattr(meta, "model_dump"):
        return meta.model_dump(exclude_none=True)
    return {k: v for k, v in vars(meta).items() if v is not None and not k.startswith("_")}


class FirecrawlScraper:
    """Map and scrape websites through Firecrawl."""

    def __init__(self, api_key: str):
        """Initialize the Firecrawl client.

        Args:
            api_key: Firecrawl API key
        """
        if not api_key:
            raise ValueError("FIRECRAWL_API_KEY is required")

        self.client = Firecrawl(api_key=api_key)

    def map_website(self, url: str, limit: int = 100) -> list[str]:
        """Discover page URLs on a website using the Firecrawl /map endpoint.

        Uses the site's sitemap when one exists, without subdomains.

        Args:
            url: The website URL to map
            limit: Maximum number of URLs to request

        Returns:
            Discovered URLs in provider order
        """
        logger.info(f"Mapping website URLs: {url} (limit {limit})")

        result = self.client.map(
            url=url,
            limit=limit,
            include_subdomains=False,
            sitemap="include",
        )
        raw_links = result.links if hasattr(result, "links") and result.links else []

        urls = []
        for link in raw_links:
            if isinstance(link, str):
                urls.append(link)
            elif isinstance(link, dict) and link.get("url"):
                urls.append(link["url"])
            elif getattr(link, "url", None):
                urls.append(link.url)

        logger.info(f"Map completed: {len(urls)} URLs discovered")
        return urls

    def scrape_page(
        self,
        url: str,
        *,
        include_tags: list[str],
        exclude_tags: list[str],
        only_main_content: bool = True,
        wait_for: int | None = None,
        timeout: int | None = None,
    ) -> dict[str, Any] | None:
        """Scrape one page as markdown + HTML.

        Args:
            url: The URL to scrape
            include_tags: Tags the provider should keep
            exclude_tags: Tags the provider should drop
            only_main_content: Strip boilerplate around the main content
            wait_for: Milliseconds to wait for JavaScript rendering
            timeout: Request timeout in milliseconds

        Returns:
            Page dictionary, or None when the provider returned no markdown.
            Provider errors propagate to the caller.
        """
        logger.info(f"Scraping page: {url}")

        options: dict[str, Any] = {
            "formats": ["markdown", "html"],
            "only_main_content": only_main_content,
            "include_tags": include_tags,
            "exclude_tags": exclude_tags,
        }
        if wait_for is not None:
            options["wait_for"] = wait_for
        if timeout is not None:
            options["timeout"] = timeout

        doc = self.client.scrape(url, **options)

        markdown = getattr(doc, "markdown", None) or ""
        if not markdown:
            logger.warning(f"No markdown returned for {url}")
            return None

        metadata = _metadata_dict(getattr(doc, "metadata", None))
        return {
            "url": url,
            "title": metadata.get("title") or "",
            "description": metadata.get("description") or "",
            "markdown": markdown,
            "html": getattr(doc, "html", None) or "",
            "metadata": metadata,
        }
