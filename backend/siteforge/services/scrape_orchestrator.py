"""Scrape orchestration: sitemap-driven scrape with graceful degradation.

Strategies are tried in a fixed order and only ever degrade forward:

    SITEMAP_SCRAPE -> SINGLE_PAGE -> ENHANCED_FALLBACK

A failed or empty map moves to SINGLE_PAGE. A sitemap run where no page
could be scraped skips straight to ENHANCED_FALLBACK. ENHANCED_FALLBACK
fetches the page directly and, if even that fails, returns an
``error-fallback`` result instead of raising.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable

from siteforge.config import ConfigStore, Settings
from siteforge.models import ImageRef, ScrapedSite, ScrapeMetadata
from siteforge.services.content_extractor import (
    MAX_IMAGES,
    MAX_LINKS,
    extract_business_info,
    extract_description_from_content,
    extract_images,
    extract_links,
    extract_title_from_content,
)
from siteforge.services.direct_fetch import DirectFetcher, FetchedPage
from siteforge.services.firecrawl_client import FirecrawlScraper, is_rate_limit_error

logger = logging.getLogger(__name__)

# URL substrings that mark a page as worth scraping early
PRIORITY_KEYWORDS = [
    "about",
    "service",
    "contact",
    "product",
    "team",
    "portfolio",
    "pricing",
    "features",
]
MAX_KEYWORD_MATCHES = 12
MAX_DISCOVERY_ORDER_URLS = 8

SITEMAP_INCLUDE_TAGS = ["title", "meta", "h1", "h2", "h3", "p", "article", "section"]
SITEMAP_EXCLUDE_TAGS = ["script", "style", "nav", "footer", "aside"]
SINGLE_PAGE_INCLUDE_TAGS = ["title", "meta", "h1", "h2", "h3", "p", "a", "img"]
SINGLE_PAGE_EXCLUDE_TAGS = ["script", "style", "nav", "footer"]

# Display-text bounds per strategy; full_content is never truncated
SITEMAP_CONTENT_LIMIT = 50000
SINGLE_PAGE_CONTENT_LIMIT = 10000
ENHANCED_CONTENT_LIMIT = 8000

ERROR_FALLBACK_TITLE = "Website Title"
ERROR_FALLBACK_DESCRIPTION = "Website description not available"
ERROR_FALLBACK_CONTENT = (
    "Could not extract content from this website. Please check the URL and try again."
)


def select_priority_urls(url: str, discovered: list[str], max_pages: int = 8) -> list[str]:
    """Ordered list of pages to scrape for a sitemap run.

    The homepage always comes first, then up to 12 keyword matches, then up
    to 8 URLs in discovery order. The cap applies after deduplication, so
    discovery-order URLs can crowd out later keyword matches.
    """
    keyword_matches = [
        candidate
        for candidate in discovered
        if any(keyword in candidate.lower() for keyword in PRIORITY_KEYWORDS)
    ][:MAX_KEYWORD_MATCHES]

    ordered = [url] + keyword_matches + discovered[:MAX_DISCOVERY_ORDER_URLS]
    return list(dict.fromkeys(ordered))[:max_pages]


def build_scraped_site(
    *,
    title: str,
    description: str,
    content: str,
    full_content: str,
    business_info: dict[str, str],
    links: list[str] | None = None,
    images: list[dict[str, str]] | None = None,
    sitemap: list[str] | None = None,
    **metadata: Any,
) -> ScrapedSite:
    """Assemble a ScrapedSite, deriving the counters every strategy shares."""
    images = images or []
    return ScrapedSite(
        title=title,
        description=description,
        content=content,
        full_content=full_content,
        links=links or [],
        images=[ImageRef(**image) for image in images],
        business_info=business_info,
        sitemap=sitemap,
        metadata=ScrapeMetadata(
            word_count=len(full_content.split()),
            image_count=len(images),
            has_contact_info=bool(business_info.get("email") or business_info.get("phone")),
            **metadata,
        ),
    )


def error_fallback_site(url: str, error: str) -> ScrapedSite:
    """Terminal placeholder result used when every strategy failed."""
    return build_scraped_site(
        title=ERROR_FALLBACK_TITLE,
        description=ERROR_FALLBACK_DESCRIPTION,
        content=ERROR_FALLBACK_CONTENT,
        full_content=ERROR_FALLBACK_CONTENT,
        business_info={},
        url=url,
        method="error-fallback",
        error=error,
    )


def _merge_images(target: list[dict[str, str]], seen: set[str], found: list[dict[str, str]]) -> None:
    for image in found:
        if len(target) >= MAX_IMAGES:
            return
        if image["url"] not in seen:
            seen.add(image["url"])
            target.append(image)


class ScrapeOrchestrator:
    """Runs the scraping cascade for one URL at a time.

    Provider SDK calls and result building (regex extraction over the
    aggregated text) run in worker threads; pacing delays go through the
    injectable ``sleep`` coroutine.
    """

    def __init__(
        self,
        config_store: ConfigStore,
        settings: Settings,
        scraper_factory: Callable[[str], FirecrawlScraper] = FirecrawlScraper,
        fetcher: DirectFetcher | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.config_store = config_store
        self.settings = settings
        self.scraper_factory = scraper_factory
        self.fetcher = fetcher or DirectFetcher(
            user_agent=settings.direct_fetch_user_agent,
            timeout=settings.direct_fetch_timeout_seconds,
        )
        self.sleep = sleep
        self._scraper: FirecrawlScraper | None = None
        self._scraper_key: str | None = None

    def _get_scraper(self) -> FirecrawlScraper | None:
        """Scraper for the current credential, rebuilt when the key changes."""
        api_key = self.config_store.current().scraping_api_key
        if api_key is None:
            return None
        if self._scraper is None or self._scraper_key != api_key:
            self._scraper = self.scraper_factory(api_key)
            self._scraper_key = api_key
        return self._scraper

    async def scrape(self, url: str) -> ScrapedSite:
        """Scrape ``url``, degrading through the strategies as needed. Never raises."""
        scraper = self._get_scraper()
        if scraper is None:
            logger.warning("No scraping credential configured, using direct fetch")
            return await self._enhanced_fallback(url)

        logger.info(f"Starting sitemap scrape of {url}")
        try:
            discovered = await asyncio.to_thread(
                scraper.map_website, url, self.settings.map_limit
            )
        except Exception as e:
            logger.warning(f"Map failed for {url}: {e}")
            discovered = []

        if not discovered:
            logger.info(f"No URLs discovered for {url}, falling back to single page")
            return await self._single_page(scraper, url)

        priority_urls = select_priority_urls(url, discovered, self.settings.max_scrape_pages)
        logger.info(f"Scraping {len(priority_urls)} of {len(discovered)} discovered pages")

        pages = await self._scrape_pages(scraper, priority_urls)
        if not pages:
            logger.warning(f"No pages scraped for {url}, falling back to direct fetch")
            return await self._enhanced_fallback(url)

        return await asyncio.to_thread(self._aggregate, url, discovered, priority_urls, pages)

    async def _scrape_pages(
        self, scraper: FirecrawlScraper, urls: list[str]
    ) -> list[dict[str, Any]]:
        """Scrape ``urls`` strictly in order, pacing requests for the provider's rate limit."""
        pages: list[dict[str, Any]] = []

        for index, page_url in enumerate(urls):
            is_last = index == len(urls) - 1
            backed_off = False
            try:
                page = await asyncio.to_thread(
                    scraper.scrape_page,
                    page_url,
                    include_tags=SITEMAP_INCLUDE_TAGS,
                    exclude_tags=SITEMAP_EXCLUDE_TAGS,
                    only_main_content=True,
                )
                if page:
                    pages.append(page)
                    logger.info(f"Scraped page {index + 1}/{len(urls)}: {page_url}")
                else:
                    logger.warning(f"No content for {page_url}")
            except Exception as e:
                if is_rate_limit_error(e) and is_last:
                    logger.warning(f"Rate limited on last page {page_url}, skipping it")
                elif is_rate_limit_error(e):
                    logger.warning(
                        f"Rate limited on {page_url}, backing off "
                        f"{self.settings.rate_limit_backoff_seconds}s"
                    )
                    await self.sleep(self.settings.rate_limit_backoff_seconds)
                    backed_off = True
                else:
                    logger.error(f"Error scraping {page_url}: {e}")

            if not is_last and not backed_off:
                await self.sleep(self.settings.scrape_page_delay_seconds)

        return pages

    def _aggregate(
        self,
        url: str,
        discovered: list[str],
        priority_urls: list[str],
        pages: list[dict[str, Any]],
    ) -> ScrapedSite:
        sections = []
        business_info: dict[str, str] = {}
        links: list[str] = []
        images: list[dict[str, str]] = []
        seen_images: set[str] = set()

        for page in pages:
            markdown = page["markdown"]
            sections.append(
                f"\n\n=== PAGE: {page['url']} ===\n"
                f"TITLE: {page['title']}\n"
                f"DESCRIPTION: {page['description']}\n"
                f"CONTENT: {markdown}\n"
            )
            # Later pages overwrite earlier ones field by field
            business_info.update(extract_business_info(markdown))

            if page["html"]:
                for link in extract_links(page["html"], page["url"]):
                    if link not in links:
                        links.append(link)
                _merge_images(images, seen_images, extract_images(page["html"], page["url"]))

        combined = "".join(sections)
        homepage = next((page for page in pages if page["url"] == url), pages[0])

        logger.info(f"Sitemap scrape of {url} complete: {len(pages)} pages, {len(combined)} chars")
        return build_scraped_site(
            title=homepage["title"] or extract_title_from_content(homepage["markdown"]),
            description=homepage["description"]
            or extract_description_from_content(homepage["markdown"]),
            content=combined[:SITEMAP_CONTENT_LIMIT],
            full_content=combined,
            business_info=business_info,
            links=links[:MAX_LINKS],
            images=images,
            sitemap=discovered,
            url=url,
            method="sitemap-comprehensive",
            total_pages_discovered=len(discovered),
            pages_scraped=len(pages),
            priority_pages_found=len(priority_urls),
            scraped_urls=[page["url"] for page in pages],
            sitemap_complete=True,
        )

    async def _single_page(self, scraper: FirecrawlScraper, url: str) -> ScrapedSite:
        try:
            page = await asyncio.to_thread(
                scraper.scrape_page,
                url,
                include_tags=SINGLE_PAGE_INCLUDE_TAGS,
                exclude_tags=SINGLE_PAGE_EXCLUDE_TAGS,
                only_main_content=True,
                wait_for=self.settings.single_page_wait_ms,
                timeout=self.settings.single_page_timeout_ms,
            )
        except Exception as e:
            logger.warning(f"Single page scrape failed for {url}: {e}")
            return await self._enhanced_fallback(url)

        if page is None:
            logger.warning(f"Single page scrape returned no content for {url}")
            return await self._enhanced_fallback(url)

        return await asyncio.to_thread(self._single_page_site, url, page)

    def _single_page_site(self, url: str, page: dict[str, Any]) -> ScrapedSite:
        markdown = page["markdown"]
        html = page["html"]
        return build_scraped_site(
            title=page["title"] or extract_title_from_content(markdown),
            description=page["description"] or extract_description_from_content(markdown),
            content=markdown[:SINGLE_PAGE_CONTENT_LIMIT],
            full_content=markdown,
            business_info=extract_business_info(markdown),
            links=extract_links(html, url) if html else [],
            images=extract_images(html, url) if html else [],
            url=url,
            method="single-page",
            source_metadata=page["metadata"],
        )

    async def _enhanced_fallback(self, url: str) -> ScrapedSite:
        try:
            fetched = await self.fetcher.fetch(url)
        except Exception as e:
            logger.error(f"Direct fetch failed for {url}: {e}")
            return error_fallback_site(url, str(e))

        return await asyncio.to_thread(self._fetched_site, url, fetched)

    def _fetched_site(self, url: str, fetched: FetchedPage) -> ScrapedSite:
        text = fetched.text
        return build_scraped_site(
            title=fetched.title or extract_title_from_content(text),
            description=fetched.description or extract_description_from_content(text),
            content=text[:ENHANCED_CONTENT_LIMIT],
            full_content=text,
            business_info=extract_business_info(text),
            links=extract_links(fetched.html, url),
            images=extract_images(fetched.html, url),
            url=url,
            method="enhanced-fallback",
        )
