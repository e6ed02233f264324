"""Business facts models."""

import json
from typing import Any

from pydantic import ConfigDict, field_validator

from siteforge.models.base import CamelModel


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return ", ".join(_coerce_text(item) for item in value if item is not None)
    if isinstance(value, dict):
        return json.dumps(value)
    return str(value)


class BusinessFacts(CamelModel):
    """User-and-AI-merged description of the target business."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    industry: str = ""
    owner: str = ""
    email: str = ""
    phone: str = ""
    services: str = ""
    issues: str = ""
    location: str = ""
    description: str = ""

    @field_validator(
        "name", "industry", "owner", "email", "phone",
        "services", "issues", "location", "description",
        mode="before",
    )
    @classmethod
    def _as_text(cls, value: Any) -> str:
        return _coerce_text(value)


class BusinessAnalysis(CamelModel):
    """Fields extracted from scraped content by the LLM.

    Models sometimes answer with alternative keys (``companyName``,
    ``sector``...); those are kept as extras so the merge can find them.
    """

    model_config = ConfigDict(extra="allow")

    business_name: str = ""
    industry: str = ""
    owner: str = ""
    email: str = ""
    phone: str = ""
    services: str = ""
    issues: str = ""
    location: str = ""
    description: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> str:
        return _coerce_text(value)
