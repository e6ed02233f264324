"""Shared fixtures and fake collaborators for the siteforge test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from siteforge.config import ConfigStore, LLMConfig, Settings
from siteforge.services.direct_fetch import FetchedPage


def make_page(
    url: str,
    markdown: str,
    html: str = "",
    title: str = "",
    description: str = "",
) -> dict[str, Any]:
    """Page dictionary shaped like ``FirecrawlScraper.scrape_page`` output."""

    return {
        "url": url,
        "title": title,
        "description": description,
        "markdown": markdown,
        "html": html,
        "metadata": {"title": title, "sourceURL": url},
    }


class FakeScraper:
    """In-memory stand-in for ``FirecrawlScraper``."""

    def __init__(
        self,
        map_result: list[str] | None = None,
        pages: dict[str, dict[str, Any] | None] | None = None,
        errors: dict[str, Exception] | None = None,
        map_error: Exception | None = None,
    ) -> None:
        self.map_result = map_result or []
        self.pages = pages or {}
        self.errors = errors or {}
        self.map_error = map_error
        self.scraped: list[str] = []
        self.scrape_kwargs: list[dict[str, Any]] = []

    def map_website(self, url: str, limit: int = 100) -> list[str]:
        if self.map_error is not None:
            raise self.map_error
        return list(self.map_result)

    def scrape_page(self, url: str, **kwargs: Any) -> dict[str, Any] | None:
        self.scraped.append(url)
        self.scrape_kwargs.append(kwargs)
        if url in self.errors:
            raise self.errors[url]
        return self.pages.get(url)


class FakeFetcher:
    """Stand-in for ``DirectFetcher`` returning a canned page or raising."""

    def __init__(self, page: FetchedPage | None = None, error: Exception | None = None) -> None:
        self.page = page
        self.error = error
        self.fetched: list[str] = []

    async def fetch(self, url: str) -> FetchedPage:
        self.fetched.append(url)
        if self.error is not None:
            raise self.error
        assert self.page is not None
        return self.page


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class FakeGateway:
    """LLM gateway double.

    ``reply`` is either a fixed string or a callable taking the prompt.
    """

    def __init__(
        self,
        reply: str | Callable[[str], str] = "",
        error: Exception | None = None,
    ) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, int]] = []

    async def generate(self, prompt: str, max_tokens: int, model: str | None = None) -> str:
        self.calls.append((prompt, max_tokens))
        if self.error is not None:
            raise self.error
        if callable(self.reply):
            return self.reply(prompt)
        return self.reply

    async def probe(self) -> str:
        return await self.generate('Say "Hello" in one word', 10)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings isolated from the environment and any ``.env`` file."""

    return Settings(
        _env_file=None,
        environment="development",
        hosted_sites_dir=str(tmp_path / "hosted-sites"),
        public_base_url="http://testserver",
        google_api_key=None,
        openai_api_key=None,
        anthropic_api_key=None,
        firecrawl_api_key=None,
    )


@pytest.fixture
def config_store(settings: Settings) -> ConfigStore:
    return ConfigStore(LLMConfig.from_settings(settings))


@pytest.fixture
def scraping_config_store(settings: Settings) -> ConfigStore:
    """Config store with a usable scraping credential."""

    return ConfigStore(LLMConfig.from_settings(settings).model_copy(update={"firecrawl_api_key": "fc-test"}))
