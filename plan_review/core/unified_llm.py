"""Unified reasoning service client factory.

Provides one interface over the supported providers (Anthropic, OpenRouter)
with the provider selected from configuration.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from plan_review.core.anthropic_client import AnthropicClient
from plan_review.core.exceptions import ConfigurationError
from plan_review.core.openrouter_client import OpenRouterClient
from plan_review.utils.logging import get_logger

LOGGER = get_logger(__name__)


class LLMProvider(str, Enum):
    """Supported reasoning service providers."""
    ANTHROPIC = "anthropic"
    OPENROUTER = "openrouter"


class UnifiedLLMClient:
    """Reasoning service client that wraps the configured provider."""

    def __init__(
        self,
        provider: Union[str, LLMProvider],
        api_key: str,
        model: str,
        base_url: Optional[str] = None,
        max_tokens: int = 20000,
        timeout: int = 300,
        max_retries: int = 2,
    ):
        """Initialize unified client.

        Args:
            provider: Provider to use ("anthropic" or "openrouter")
            api_key: API key for the provider
            model: Model name to use
            base_url: Optional endpoint override
            max_tokens: Maximum output tokens per call
            timeout: Request timeout in seconds
            max_retries: Maximum HTTP attempts per call
        """
        self.provider = LLMProvider(provider)
        self.model = model

        if self.provider == LLMProvider.ANTHROPIC:
            self.client = AnthropicClient(
                api_key=api_key,
                model=model,
                base_url=base_url or "https://api.anthropic.com/v1/messages",
                max_tokens=max_tokens,
                timeout=timeout,
                max_retries=max_retries,
            )
        else:
            self.client = OpenRouterClient(
                api_key=api_key,
                model=model,
                base_url=base_url or "https://openrouter.ai/api/v1/chat/completions",
                timeout=timeout,
                max_retries=max_retries,
            )

        LOGGER.info(f"Initialized unified LLM with {self.provider.value} provider (model: {model})")

    @property
    def supports_documents(self) -> bool:
        """Whether base64 document parts reach the model."""
        return self.provider == LLMProvider.ANTHROPIC

    async def generate_content(
        self,
        contents: Union[str, List[Union[str, Dict[str, Any]]]],
        system_instruction: Optional[str] = None,
        generation_config: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Generate content using the configured provider.

        Raises:
            APIClientError: If generation fails
        """
        return await self.client.generate_content(
            contents=contents,
            system_instruction=system_instruction,
            generation_config=generation_config,
        )


def create_llm_client_from_settings(
    provider: str,
    anthropic_api_key: str = "",
    anthropic_api_url: str = "https://api.anthropic.com/v1/messages",
    anthropic_model: str = "claude-sonnet-4-20250514",
    anthropic_max_tokens: int = 20000,
    openrouter_api_key: str = "",
    openrouter_api_url: str = "https://openrouter.ai/api/v1/chat/completions",
    openrouter_model: str = "anthropic/claude-sonnet-4",
    timeout: int = 300,
    max_retries: int = 2,
) -> UnifiedLLMClient:
    """Create a unified client from configuration settings.

    Selects the API key, model and URL that belong to the chosen provider.

    Raises:
        ConfigurationError: If the provider is unknown or its API key is missing
    """
    try:
        provider_enum = LLMProvider(provider.strip().lower())
    except ValueError as e:
        raise ConfigurationError(f"Unsupported llm_provider: {provider}", e) from e

    if provider_enum == LLMProvider.ANTHROPIC:
        if not anthropic_api_key.strip():
            raise ConfigurationError(
                "anthropic_api_key required when llm_provider='anthropic'. "
                "Please set ANTHROPIC_API_KEY environment variable."
            )
        return UnifiedLLMClient(
            provider=provider_enum,
            api_key=anthropic_api_key.strip(),
            model=anthropic_model,
            base_url=anthropic_api_url,
            max_tokens=anthropic_max_tokens,
            timeout=timeout,
            max_retries=max_retries,
        )

    if not openrouter_api_key.strip():
        raise ConfigurationError(
            "openrouter_api_key required when llm_provider='openrouter'. "
            "Please set OPENROUTER_API_KEY environment variable."
        )
    return UnifiedLLMClient(
        provider=provider_enum,
        api_key=openrouter_api_key.strip(),
        model=openrouter_model,
        base_url=openrouter_api_url,
        max_tokens=anthropic_max_tokens,
        timeout=timeout,
        max_retries=max_retries,
    )
