"""OpenRouter LLM client implementation."""

from typing import Any, Dict, List, Optional, Union

from plan_review.core.base_llm_client import BaseLLMClient
from plan_review.core.exceptions import APIClientError
from plan_review.utils.logging import get_logger

LOGGER = get_logger(__name__)


class OpenRouterClient:
    """Wrapper for OpenRouter's OpenAI-compatible chat completions API.

    Only text parts are forwarded; document parts are dropped, so callers
    must include extracted page text in the prompt.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "anthropic/claude-sonnet-4",
        base_url: str = "https://openrouter.ai/api/v1/chat/completions",
        timeout: int = 300,
        max_retries: int = 2,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url

        self.client = BaseLLMClient(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
        )

        LOGGER.info(f"Initialized OpenRouter client with model {self.model}")

    async def generate_content(
        self,
        contents: Union[str, List[Union[str, Dict[str, Any]]]],
        system_instruction: Optional[str] = None,
        generation_config: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Generate content using the OpenRouter model.

        Args:
            contents: Input content (string or list of parts)
            system_instruction: Optional system instruction
            generation_config: Optional generation config (temperature, etc.)

        Returns:
            Generated text response

        Raises:
            APIClientError: If generation fails
        """
        messages = []
        if system_instruction:
            messages.append({"role": "system", "content": system_instruction})

        if isinstance(contents, str):
            user_content = contents
        else:
            skipped = 0
            pieces = []
            for part in contents:
                if isinstance(part, str):
                    pieces.append(part)
                elif isinstance(part, dict) and "text" in part:
                    pieces.append(part["text"])
                else:
                    skipped += 1
            if skipped:
                LOGGER.debug(f"Dropped {skipped} non-text content parts for OpenRouter")
            user_content = "\n\n".join(pieces)
        messages.append({"role": "user", "content": user_content})

        payload: Dict[str, Any] = {"model": self.model, "messages": messages}

        if generation_config:
            if "temperature" in generation_config:
                payload["temperature"] = generation_config["temperature"]
            if "max_output_tokens" in generation_config:
                payload["max_tokens"] = generation_config["max_output_tokens"]
            if generation_config.get("response_mime_type") == "application/json":
                payload["response_format"] = {"type": "json_object"}
        else:
            payload["temperature"] = 0.0

        response = await self.client.call_api(method="POST", payload=payload)

        choices = response.get("choices") if isinstance(response, dict) else None
        first = choices[0] if isinstance(choices, list) and choices else None
        message = first.get("message") if isinstance(first, dict) else None
        if not isinstance(message, dict):
            LOGGER.error(f"Unexpected OpenRouter response format: {str(response)[:500]}")
            raise APIClientError("Invalid response format from OpenRouter")

        content = message.get("content") or ""
        if not isinstance(content, str):
            raise APIClientError("Invalid response format from OpenRouter")
        if not content:
            LOGGER.warning("Empty response from OpenRouter")
        return content
