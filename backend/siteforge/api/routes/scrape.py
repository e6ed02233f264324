"""Website scraping route."""

import logging

from fastapi import APIRouter

from siteforge.api.deps import Orchestrator
from siteforge.errors import InvalidInputError
from siteforge.models import CamelModel, ScrapedSite
from siteforge.validation import require_url, sanitize_string

logger = logging.getLogger(__name__)

router = APIRouter()


class ScrapeRequest(CamelModel):
    """Request to scrape a website."""

    url: str | None = None


@router.post("/scrape", response_model=ScrapedSite)
async def scrape_website(request: ScrapeRequest, orchestrator: Orchestrator) -> ScrapedSite:
    """Scrape a website through the strategy cascade."""
    url = sanitize_string(require_url(request.url))
    logger.info(f"Scraping website: {url}")

    site = await orchestrator.scrape(url)

    if not (site.title or site.content or site.description):
        raise InvalidInputError(
            "Unable to extract meaningful data from this website. The site may be "
            "blocking scraping or may not contain readable content.",
            "url",
        )
    return site
