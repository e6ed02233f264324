"""LLM gateway: one text-completion contract over several providers."""

import asyncio
import logging

from siteforge.config import ConfigStore, LLMConfig
from siteforge.errors import ProviderConfigurationError

logger = logging.getLogger(__name__)

PROBE_PROMPT = 'Say "Hello" in one word'
PROBE_MAX_TOKENS = 10


class LLMProvider:
    """A provider binding: prompt in, completion text out.

    SDK clients are created lazily on first call. ``complete`` is blocking.
    """

    name = "base"
    display_name = "LLM"

    def __init__(self, api_key: str | None, model: str):
        if not api_key:
            raise ProviderConfigurationError(f"{self.display_name} API key not configured")
        self.api_key = api_key
        self.model = model
        self._client = None

    def complete(self, prompt: str, max_tokens: int, model: str | None = None) -> str:
        raise NotImplementedError


class GeminiProvider(LLMProvider):
    name = "gemini"
    display_name = "Gemini"

    def _get_client(self):
        """Lazy load Gemini client."""
        if self._client is None:
            from google import genai
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def complete(self, prompt: str, max_tokens: int, model: str | None = None) -> str:
        from google.genai import types

        client = self._get_client()
        response = client.models.generate_content(
            model=model or self.model,
            contents=prompt,
            config=types.GenerateContentConfig(max_output_tokens=max_tokens),
        )
        return response.text or ""


class DefaultProvider(GeminiProvider):
    """Gemini backed by the operator's own credential."""

    name = "default"
    display_name = "Google"


class OpenAIProvider(LLMProvider):
    name = "openai"
    display_name = "OpenAI"

    def _get_client(self):
        """Lazy load OpenAI client."""
        if self._client is None:
            from openai import OpenAI
            self._client = OpenAI(api_key=self.api_key)
        return self._client

    def complete(self, prompt: str, max_tokens: int, model: str | None = None) -> str:
        client = self._get_client()
        response = client.chat.completions.create(
            model=model or self.model,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=max_tokens,
        )
        return response.choices[0].message.content or ""


class AnthropicProvider(LLMProvider):
    name = "claude"
    display_name = "Claude"

    def _get_client(self):
        """Lazy load Anthropic client."""
        if self._client is None:
            from anthropic import Anthropic
            self._client = Anthropic(api_key=self.api_key)
        return self._client

    def complete(self, prompt: str, max_tokens: int, model: str | None = None) -> str:
        client = self._get_client()
        response = client.messages.create(
            model=model or self.model,
            max_tokens=max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )
        if not response.content:
            return ""
        return response.content[0].text


def build_provider(config: LLMConfig) -> LLMProvider:
    """Provider binding for the configured selection.

    Raises:
        ProviderConfigurationError: if the selected provider has no credential
    """
    provider = config.llm_provider
    if provider == "default":
        return DefaultProvider(config.google_api_key, config.gemini_model)
    elif provider == "gemini":
        return GeminiProvider(config.gemini_api_key or config.google_api_key, config.gemini_model)
    elif provider == "openai":
        return OpenAIProvider(config.openai_api_key, config.openai_model)
    elif provider == "claude":
        return AnthropicProvider(config.claude_api_key, config.claude_model)
    else:
        raise ProviderConfigurationError(f"Unknown LLM provider: {provider}")


class LLMGateway:
    """Resolves the current provider from the config store and calls it.

    The provider binding is rebuilt whenever the config snapshot changes.
    No retries and no error normalization: provider exceptions propagate.
    """

    def __init__(self, config_store: ConfigStore):
        self.config_store = config_store
        self._provider: LLMProvider | None = None
        self._provider_config: LLMConfig | None = None

    def _get_provider(self) -> LLMProvider:
        config = self.config_store.current()
        if self._provider is None or self._provider_config is not config:
            self._provider = build_provider(config)
            self._provider_config = config
        return self._provider

    async def generate(self, prompt: str, max_tokens: int, model: str | None = None) -> str:
        """Completion text for ``prompt``; ``max_tokens`` is a hint to the provider."""
        provider = self._get_provider()
        logger.info(f"Calling {provider.name} {model or provider.model} (max_tokens={max_tokens})")
        return await asyncio.to_thread(provider.complete, prompt, max_tokens, model)

    async def probe(self) -> str:
        """Minimal round trip against the selected provider."""
        return await self.generate(PROBE_PROMPT, PROBE_MAX_TOKENS)
