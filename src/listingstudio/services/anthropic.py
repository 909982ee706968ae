"""Anthropic Claude API client wrapper."""

import asyncio
import base64
import json
import logging
from typing import Optional

from anthropic import AsyncAnthropic, APIError, APIConnectionError, RateLimitError

from ..config import config

logger = logging.getLogger(__name__)

JSON_INSTRUCTION = (
    "Respond with JSON only, no markdown and no commentary. "
    "The JSON must match this schema:\n{schema}"
)


class AnthropicClient:
    """Async client wrapper for Anthropic Claude, used as a substitute text provider."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_retries: Optional[int] = None,
        retry_delay: float = 1.0,
    ) -> None:
        """Initialize the Anthropic client.

        Args:
            api_key: Anthropic API key. Defaults to ANTHROPIC_API_KEY env var.
            model: Model to use. Defaults to config.anthropic_model.
            max_retries: Attempts per call. Defaults to config.max_retries.
            retry_delay: Base delay between retries in seconds (exponential backoff).
        """
        self._api_key = api_key or config.anthropic_api_key
        if not self._api_key:
            raise ValueError(
                "Anthropic API key not provided. Set ANTHROPIC_API_KEY env var."
            )

        self._client = AsyncAnthropic(api_key=self._api_key)
        self._model = model or config.anthropic_model
        self._max_retries = max_retries or config.max_retries
        self._retry_delay = retry_delay

    @property
    def model(self) -> str:
        """Return the model being used."""
        return self._model

    async def create_message(
        self,
        prompt: str,
        system: Optional[str] = None,
        response_schema: Optional[dict] = None,
        image_bytes: Optional[bytes] = None,
        image_mime: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 4096,
    ) -> str:
        """Create a message using Claude.

        Claude has no schema-constrained decoding here, so the schema is
        appended to the system prompt and the caller extracts the JSON.

        Raises:
            APIError: If the API request fails after all retries.
        """
        content: list[dict] = []
        if image_bytes is not None:
            content.append({
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": image_mime or "image/png",
                    "data": base64.b64encode(image_bytes).decode("ascii"),
                },
            })
        content.append({"type": "text", "text": prompt})

        system_parts = [system] if system else []
        if response_schema is not None:
            system_parts.append(JSON_INSTRUCTION.format(schema=json.dumps(response_schema, indent=2)))

        kwargs = {
            "model": self._model,
            "max_tokens": max_tokens,
            "messages": [{"role": "user", "content": content}],
            "temperature": temperature,
        }
        if system_parts:
            kwargs["system"] = "\n\n".join(system_parts)

        for attempt in range(self._max_retries):
            try:
                logger.debug(
                    f"Sending request to Claude (attempt {attempt + 1}/{self._max_retries})"
                )

                response = await self._client.messages.create(**kwargs)

                return "".join(
                    block.text for block in response.content if getattr(block, "type", "") == "text"
                )

            except (RateLimitError, APIConnectionError) as e:
                if attempt == self._max_retries - 1:
                    raise
                delay = self._retry_delay * (2**attempt)
                logger.warning(f"{type(e).__name__}: {e}. Retrying in {delay:.1f}s...")
                await asyncio.sleep(delay)

            except APIError as e:
                logger.error(f"API error: {e}")
                raise

        raise RuntimeError("max_retries must be at least 1")
