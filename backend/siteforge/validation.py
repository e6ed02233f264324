"""Input sanitation and validation helpers."""

import re
from typing import Any
from urllib.parse import urlparse

from siteforge.errors import InvalidInputError
from siteforge.models import BusinessFacts

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
IDENTIFIER_PATTERN = re.compile(r"^[a-zA-Z0-9]+$")

PROJECT_NAME_MIN, PROJECT_NAME_MAX = 3, 50
BUSINESS_NAME_MIN, BUSINESS_NAME_MAX = 2, 100


def sanitize_string(value: Any) -> str:
    """Trim and drop angle brackets. Not an HTML sanitizer."""
    if not isinstance(value, str):
        return ""
    return value.strip().replace("<", "").replace(">", "")


def is_valid_url(value: str) -> bool:
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value or ""))


def is_valid_identifier(value: str) -> bool:
    return bool(IDENTIFIER_PATTERN.match(value or ""))


def require_url(value: Any, field: str = "url") -> str:
    """Trimmed http(s) URL or InvalidInputError."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError("URL is required", field)
    url = value.strip()
    if not is_valid_url(url):
        raise InvalidInputError("Invalid URL format. Please use http:// or https://", field)
    return url


def require_email(value: Any, field: str = "email") -> str:
    email = sanitize_string(value)
    if not is_valid_email(email):
        raise InvalidInputError("Valid email address is required", field)
    return email


def require_length(value: Any, field: str, minimum: int, maximum: int, label: str) -> str:
    """Sanitized string whose length is within ``[minimum, maximum]``."""
    text = sanitize_string(value)
    if len(text) < minimum or len(text) > maximum:
        raise InvalidInputError(
            f"{label} must be between {minimum} and {maximum} characters", field
        )
    return text


def require_business_name(value: Any, field: str = "businessInfo.name") -> str:
    return require_length(value, field, BUSINESS_NAME_MIN, BUSINESS_NAME_MAX, "Business name")


def require_project_name(value: Any, field: str = "projectName") -> str:
    return require_length(value, field, PROJECT_NAME_MIN, PROJECT_NAME_MAX, "Project name")


def require_identifier(value: str, field: str = "id") -> str:
    if not is_valid_identifier(value):
        raise InvalidInputError("Invalid ID format", field)
    return value


def clean_business_facts(
    facts: BusinessFacts | None,
    field: str = "businessInfo",
    name_field: str | None = None,
) -> BusinessFacts:
    """Sanitized copy of ``facts`` with a 2-100 character business name."""
    if facts is None:
        raise InvalidInputError("Business information is required", field)

    cleaned = facts.model_copy(
        update={name: sanitize_string(getattr(facts, name)) for name in BusinessFacts.model_fields}
    )
    name_field = name_field or f"{field}.name"
    if not cleaned.name:
        raise InvalidInputError("Business name is required", name_field)
    require_business_name(cleaned.name, name_field)
    return cleaned
