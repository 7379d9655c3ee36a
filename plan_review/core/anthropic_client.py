"""Anthropic Messages API client implementation."""

from typing import Any, Dict, List, Optional, Union

from plan_review.core.base_llm_client import BaseLLMClient
from plan_review.core.exceptions import APIClientError
from plan_review.utils.logging import get_logger

LOGGER = get_logger(__name__)

ANTHROPIC_VERSION = "2023-06-01"


def to_message_content(
    contents: Union[str, List[Union[str, Dict[str, Any]]]],
) -> List[Dict[str, Any]]:
    """Convert provider-neutral content parts into Messages API blocks.

    Accepted parts: plain strings, ``{"text": ...}`` and
    ``{"document_base64": ..., "media_type": ...}``.
    """
    if isinstance(contents, str):
        return [{"type": "text", "text": contents}]

    blocks: List[Dict[str, Any]] = []
    for part in contents:
        if isinstance(part, str):
            blocks.append({"type": "text", "text": part})
        elif isinstance(part, dict) and "document_base64" in part:
            blocks.append({
                "type": "document",
                "source": {
                    "type": "base64",
                    "media_type": part.get("media_type", "application/pdf"),
                    "data": part["document_base64"],
                },
            })
        elif isinstance(part, dict) and "text" in part:
            blocks.append({"type": "text", "text": part["text"]})
    return blocks


class AnthropicClient:
    """Wrapper for the Anthropic Messages API.

    Supports base64 PDF document parts, so chunk sub-documents can be sent
    alongside their extracted text.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-20250514",
        base_url: str = "https://api.anthropic.com/v1/messages",
        max_tokens: int = 20000,
        timeout: int = 300,
        max_retries: int = 2,
    ):
        """Initialize Anthropic client.

        Args:
            api_key: Anthropic API key
            model: Model name to use
            base_url: Messages API URL
            max_tokens: Maximum output tokens per call
            timeout: Request timeout in seconds
            max_retries: Maximum HTTP attempts
        """
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.max_tokens = max_tokens

        self.client = BaseLLMClient(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
            auth_header="x-api-key",
            auth_scheme=None,
        )

        LOGGER.info(f"Initialized Anthropic client with model {self.model}")

    async def generate_content(
        self,
        contents: Union[str, List[Union[str, Dict[str, Any]]]],
        system_instruction: Optional[str] = None,
        generation_config: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Generate content using the Anthropic model.

        Args:
            contents: Input content (string or list of parts)
            system_instruction: Optional system instruction
            generation_config: Optional generation config (temperature, max_output_tokens)

        Returns:
            Concatenated text blocks of the response

        Raises:
            APIClientError: If the call fails or the response has no text
        """
        generation_config = generation_config or {}

        payload: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": generation_config.get("max_output_tokens", self.max_tokens),
            "messages": [{"role": "user", "content": to_message_content(contents)}],
        }
        if system_instruction:
            payload["system"] = system_instruction
        if "temperature" in generation_config:
            payload["temperature"] = generation_config["temperature"]

        response = await self.client.call_api(
            method="POST",
            payload=payload,
            headers={"anthropic-version": ANTHROPIC_VERSION},
        )

        if not isinstance(response, dict) or not isinstance(response.get("content") or [], list):
            LOGGER.error(f"Unexpected Anthropic response format: {str(response)[:500]}")
            raise APIClientError("Invalid response format from Anthropic")

        blocks = response.get("content") or []
        text = "".join(
            block.get("text", "") for block in blocks
            if isinstance(block, dict) and block.get("type") == "text"
        )
        if not text:
            LOGGER.error(
                "Anthropic response contained no text",
                extra={"stop_reason": response.get("stop_reason")}
            )
            raise APIClientError("Invalid response format from Anthropic")

        if response.get("stop_reason") == "max_tokens":
            LOGGER.warning("Anthropic response truncated at max_tokens")

        return text
