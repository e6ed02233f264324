"""Hosted website models."""

from datetime import datetime

from siteforge.models.base import CamelModel


class HostedSiteMeta(CamelModel):
    """Metadata stored next to a published document."""

    site_id: str
    business_name: str = ""
    created_at: datetime
    last_accessed: datetime
    view_count: int = 0


class HostedSite(CamelModel):
    """Reference to a published site."""

    site_id: str
    url: str
    metadata: HostedSiteMeta
