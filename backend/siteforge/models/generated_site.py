"""Generated website and outreach models."""

from datetime import datetime, timezone

from pydantic import Field

from siteforge.models.base import CamelModel


class GeneratedSite(CamelModel):
    """One candidate website."""

    html: str
    title: str = ""
    description: str = ""
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    version_number: int | None = None
    version_id: str | None = None
    # Set when the fallback template replaced the LLM result
    error: str | None = None


class OutreachResult(CamelModel):
    """Cold email and proposal text for one prospect."""

    email: str
    proposal: str
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    error: str | None = None
