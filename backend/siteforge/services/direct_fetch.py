"""Direct HTTP fetching for sites the scraping provider cannot handle."""

import asyncio
import html
import re
from dataclasses import dataclass

import httpx
from bs4 import BeautifulSoup

# Page chrome removed before extracting text
STRIPPED_TAGS = ["script", "style", "nav", "footer", "header"]

_TITLE_PATTERN = re.compile(r"<title[^>]*>([^<]+)</title>", re.IGNORECASE)
_DESCRIPTION_PATTERNS = [
    re.compile(r"""<meta[^>]*name=["']description["'][^>]*content=["']([^"']+)["']""", re.IGNORECASE),
    re.compile(r"""<meta[^>]*property=["']og:description["'][^>]*content=["']([^"']+)["']""", re.IGNORECASE),
]


@dataclass
class FetchedPage:
    """Raw HTML plus the text and metadata derived from it."""
    url: str
    html: str
    text: str
    title: str | None = None
    description: str | None = None


def html_to_text(raw_html: str) -> str:
    """Plain text of ``raw_html`` without page chrome, whitespace collapsed."""
    soup = BeautifulSoup(raw_html, "html.parser")
    for tag in soup(STRIPPED_TAGS):
        tag.decompose()
    text = soup.get_text(" ")
    return re.sub(r"\s+", " ", text).strip()


def extract_title(raw_html: str) -> str | None:
    """Page ``<title>``, HTML entities decoded."""
    match = _TITLE_PATTERN.search(raw_html)
    if match:
        return html.unescape(match.group(1).strip())
    return None


def extract_meta_description(raw_html: str) -> str | None:
    """``meta name=description``, falling back to ``og:description``."""
    for pattern in _DESCRIPTION_PATTERNS:
        match = pattern.search(raw_html)
        if match:
            return html.unescape(match.group(1).strip())
    return None


class DirectFetcher:
    """Fetches pages over plain HTTP with a browser-like user agent."""

    def __init__(self, user_agent: str, timeout: float = 20.0):
        self.user_agent = user_agent
        self.timeout = timeout

    async def fetch(self, url: str) -> FetchedPage:
        """GET ``url`` and derive text content.

        Raises:
            httpx.HTTPError: on connection failures, timeouts and 4xx/5xx responses
        """
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            headers={"User-Agent": self.user_agent},
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
            raw_html = response.text

        return FetchedPage(
            url=str(response.url),
            html=raw_html,
            text=await asyncio.to_thread(html_to_text, raw_html),
            title=extract_title(raw_html),
            description=extract_meta_description(raw_html),
        )
