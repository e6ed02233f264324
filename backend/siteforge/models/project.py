"""Saved project model."""

from datetime import datetime

from pydantic import ConfigDict

from siteforge.models.base import CamelModel
from siteforge.models.business import BusinessFacts


class Project(CamelModel):
    """A named, user-curated bundle of scrape, facts and generated site.

    Anything beyond the named fields (scraped data, generated versions,
    outreach text) is kept verbatim as extra attributes.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    business_info: BusinessFacts
    saved_at: datetime
