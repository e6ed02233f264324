"""Domain models shared by services and API routes."""

from siteforge.models.base import CamelModel
from siteforge.models.business import BusinessAnalysis, BusinessFacts
from siteforge.models.generated_site import GeneratedSite, OutreachResult
from siteforge.models.hosted_site import HostedSite, HostedSiteMeta
from siteforge.models.project import Project
from siteforge.models.scraped_site import ImageRef, ScrapedSite, ScrapeMetadata, ScrapeMethod

__all__ = [
    "CamelModel",
    "BusinessAnalysis",
    "BusinessFacts",
    "GeneratedSite",
    "OutreachResult",
    "HostedSite",
    "HostedSiteMeta",
    "Project",
    "ImageRef",
    "ScrapedSite",
    "ScrapeMetadata",
    "ScrapeMethod",
]
