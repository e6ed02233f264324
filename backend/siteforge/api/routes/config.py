"""Runtime provider configuration routes."""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from siteforge.api.deps import AppConfigStore, Gateway
from siteforge.config import LLM_PROVIDERS
from siteforge.errors import InvalidInputError, ProviderConfigurationError
from siteforge.models import CamelModel

logger = logging.getLogger(__name__)

router = APIRouter()


class SaveConfigRequest(CamelModel):
    """Provider settings; omitted fields are left unchanged.

    An empty string for a key clears it.
    """

    llm_provider: str | None = None
    gemini_api_key: str | None = None
    openai_api_key: str | None = None
    claude_api_key: str | None = None
    firecrawl_api_key: str | None = None
    gemini_model: str | None = None
    openai_model: str | None = None
    claude_model: str | None = None
    max_website_tokens: int | None = None
    max_outreach_tokens: int | None = None


_KEY_FIELDS = ("gemini_api_key", "openai_api_key", "claude_api_key", "firecrawl_api_key")
_VALUE_FIELDS = (
    "llm_provider",
    "gemini_model",
    "openai_model",
    "claude_model",
    "max_website_tokens",
    "max_outreach_tokens",
)


@router.get("/get")
async def get_config(config_store: AppConfigStore) -> dict:
    """Current provider configuration, without secrets."""
    return {"success": True, "config": config_store.current().public_view()}


@router.post("/save")
async def save_config(request: SaveConfigRequest, config_store: AppConfigStore) -> dict:
    """Update provider selection, credentials, models and token budgets."""
    if request.llm_provider and request.llm_provider not in LLM_PROVIDERS:
        raise InvalidInputError("Invalid LLM provider", "llmProvider")
    for budget_field, wire_name in (
        ("max_website_tokens", "maxWebsiteTokens"),
        ("max_outreach_tokens", "maxOutreachTokens"),
    ):
        value = getattr(request, budget_field)
        if value is not None and value <= 0:
            raise InvalidInputError("Token budgets must be positive", wire_name)

    sent = request.model_fields_set
    changes = {}
    for field in _KEY_FIELDS:
        if field in sent:
            changes[field] = getattr(request, field) or None
    for field in _VALUE_FIELDS:
        value = getattr(request, field)
        if value:
            changes[field] = value

    updated = config_store.update(**changes)
    return {
        "success": True,
        "message": "API configuration saved successfully",
        "config": updated.public_view(),
    }


@router.post("/test")
async def test_config(gateway: Gateway, config_store: AppConfigStore):
    """Send a one-word probe to the selected provider."""
    provider = config_store.current().llm_provider
    try:
        reply = await gateway.probe()
    except ProviderConfigurationError as e:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(e)})
    except Exception as e:
        logger.error(f"API test failed for {provider}: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": f"API test failed: {e}"},
        )

    return {"success": True, "provider": provider, "message": f"API working! Response: {reply}"}
