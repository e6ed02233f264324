"""Application configuration via environment variables."""

import logging
import threading
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

LLMProviderName = Literal["default", "gemini", "openai", "claude"]

LLM_PROVIDERS: tuple[str, ...] = ("default", "gemini", "openai", "claude")

# Value shipped in the sample .env; treated as "no key configured"
FIRECRAWL_PLACEHOLDER_KEY = "fc-your_firecrawl_key_here"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "SiteForge"
    debug: bool = False
    environment: Literal["development", "staging", "production"] = "development"

    # CORS
    cors_origins: list[str] = ["*"]

    # Hosting
    public_base_url: str = "http://localhost:8000"
    hosted_sites_dir: str = "hosted-sites"

    # Scraping provider
    firecrawl_api_key: str | None = None
    map_limit: int = 100  # Max URLs requested from the map endpoint
    max_scrape_pages: int = 8  # Pages scraped per sitemap run (10 req/min incl. map call)
    scrape_page_delay_seconds: float = 6.0
    rate_limit_backoff_seconds: float = 60.0
    single_page_wait_ms: int = 1000
    single_page_timeout_ms: int = 30000

    # Direct HTTP fetch (last-resort scraping)
    direct_fetch_timeout_seconds: float = 20.0
    direct_fetch_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
    )

    # LLM API Keys (operator credentials)
    google_api_key: str | None = None
    openai_api_key: str | None = None
    anthropic_api_key: str | None = None
    llm_provider: LLMProviderName = "default"
    gemini_model: str = "gemini-2.5-flash"
    openai_model: str = "gpt-4o"
    claude_model: str = "claude-sonnet-4-5-20250929"

    # Token budgets
    max_website_tokens: int = 8000
    max_outreach_tokens: int = 3000
    max_analysis_tokens: int = 4000

    # Caller-side deadline for LLM-bound requests
    request_timeout_seconds: float = 300.0

    @property
    def is_development(self) -> bool:
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


class LLMConfig(BaseModel):
    """Snapshot of the runtime-reconfigurable provider configuration."""

    model_config = ConfigDict(frozen=True)

    llm_provider: LLMProviderName = "default"
    # Operator credential backing the built-in "default" provider
    google_api_key: str | None = None
    # User-supplied credentials
    gemini_api_key: str | None = None
    openai_api_key: str | None = None
    claude_api_key: str | None = None
    firecrawl_api_key: str | None = None

    gemini_model: str = "gemini-2.5-flash"
    openai_model: str = "gpt-4o"
    claude_model: str = "claude-sonnet-4-5-20250929"

    max_website_tokens: int = 8000
    max_outreach_tokens: int = 3000
    max_analysis_tokens: int = 4000

    @classmethod
    def from_settings(cls, settings: Settings) -> "LLMConfig":
        return cls(
            llm_provider=settings.llm_provider,
            google_api_key=settings.google_api_key,
            gemini_api_key=settings.google_api_key,
            openai_api_key=settings.openai_api_key,
            claude_api_key=settings.anthropic_api_key,
            firecrawl_api_key=settings.firecrawl_api_key,
            gemini_model=settings.gemini_model,
            openai_model=settings.openai_model,
            claude_model=settings.claude_model,
            max_website_tokens=settings.max_website_tokens,
            max_outreach_tokens=settings.max_outreach_tokens,
            max_analysis_tokens=settings.max_analysis_tokens,
        )

    @property
    def scraping_api_key(self) -> str | None:
        """Firecrawl key, or None when unset or still the sample placeholder."""
        key = self.firecrawl_api_key
        if not key or key == FIRECRAWL_PLACEHOLDER_KEY:
            return None
        return key

    def public_view(self) -> dict:
        """Configuration summary that is safe to return to clients."""
        return {
            "llmProvider": self.llm_provider,
            "hasGeminiKey": bool(self.gemini_api_key),
            "hasOpenAIKey": bool(self.openai_api_key),
            "hasClaudeKey": bool(self.claude_api_key),
            "hasFirecrawlKey": bool(self.firecrawl_api_key),
            "maxWebsiteTokens": self.max_website_tokens,
            "maxOutreachTokens": self.max_outreach_tokens,
        }


class ConfigStore:
    """Holds the current LLMConfig and serializes updates to it.

    Readers get an immutable snapshot; ``update`` swaps in a new snapshot
    under a lock so concurrent saves never interleave.
    """

    def __init__(self, initial: LLMConfig):
        self._config = initial
        self._lock = threading.Lock()

    def current(self) -> LLMConfig:
        return self._config

    def update(self, **changes) -> LLMConfig:
        """Apply ``changes`` (LLMConfig field names) and return the new snapshot."""
        unknown = set(changes) - set(LLMConfig.model_fields)
        if unknown:
            raise ValueError(f"Unknown configuration fields: {sorted(unknown)}")

        with self._lock:
            updated = LLMConfig.model_validate({**self._config.model_dump(), **changes})
            self._config = updated

        logger.info(
            "Provider configuration updated: provider=%s gemini=%s openai=%s claude=%s firecrawl=%s",
            updated.llm_provider,
            "set" if updated.gemini_api_key else "not set",
            "set" if updated.openai_api_key else "not set",
            "set" if updated.claude_api_key else "not set",
            "set" if updated.firecrawl_api_key else "not set",
        )
        return updated
