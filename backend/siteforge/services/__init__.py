"""Business logic services."""

from siteforge.services.firecrawl_client import FirecrawlScraper
from siteforge.services.generation import GenerationPipeline
from siteforge.services.llm_gateway import LLMGateway
from siteforge.services.scrape_orchestrator import ScrapeOrchestrator

__all__ = [
    "FirecrawlScraper",
    "GenerationPipeline",
    "LLMGateway",
    "ScrapeOrchestrator",
]
