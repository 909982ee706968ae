"""Google Gemini API client wrapper."""

import asyncio
import logging
from datetime import datetime
from typing import Any, Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from ..config import config
from ..models import ImagePayload
from .base import ImageResult

logger = logging.getLogger(__name__)


def _is_transient(error: genai_errors.APIError) -> bool:
    return isinstance(error, genai_errors.ServerError) or error.code == 429


class GeminiClient:
    """Async client wrapper for Gemini text, vision and image generation."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        image_model: Optional[str] = None,
        max_retries: Optional[int] = None,
        retry_delay: float = 1.0,
    ) -> None:
        """Initialize the Gemini client.

        Args:
            api_key: Gemini API key. Defaults to GEMINI_API_KEY env var.
            model: Model for text and vision calls.
            image_model: Model for image generation.
            max_retries: Attempts per call. Defaults to config.max_retries.
            retry_delay: Base delay between retries in seconds (exponential backoff).
        """
        self._api_key = api_key or config.gemini_api_key
        if not self._api_key:
            raise ValueError("Gemini API key not provided. Set GEMINI_API_KEY env var.")

        self._client = genai.Client(api_key=self._api_key)
        self._model = model or config.text_model
        self._image_model = image_model or config.image_model
        self._max_retries = max_retries or config.max_retries
        self._retry_delay = retry_delay

    @property
    def model(self) -> str:
        """Return the text model being used."""
        return self._model

    @property
    def image_model(self) -> str:
        return self._image_model

    async def create_message(
        self,
        prompt: str,
        system: Optional[str] = None,
        response_schema: Optional[dict] = None,
        image_bytes: Optional[bytes] = None,
        image_mime: Optional[str] = None,
        temperature: float = 0.7,
    ) -> str:
        """Send one prompt, optionally with an image, and return the response text.

        Args:
            prompt: The user prompt to send.
            system: Optional system instruction.
            response_schema: Optional JSON schema; forces a JSON response.
            image_bytes: Optional image to send ahead of the prompt.
            image_mime: MIME type of image_bytes.
            temperature: Sampling temperature.

        Returns:
            The text of the response, or an empty string if the model sent none.

        Raises:
            genai_errors.APIError: If the request fails after all attempts.
        """
        parts = []
        if image_bytes is not None:
            parts.append(types.Part.from_bytes(data=image_bytes, mime_type=image_mime or "image/png"))
        parts.append(types.Part.from_text(text=prompt))

        kwargs: dict[str, Any] = {"temperature": temperature}
        if system:
            kwargs["system_instruction"] = system
        if response_schema is not None:
            kwargs["response_mime_type"] = "application/json"
            kwargs["response_schema"] = response_schema

        response = await self._generate(
            model=self._model,
            contents=[types.Content(role="user", parts=parts)],
            config=types.GenerateContentConfig(**kwargs),
        )
        return response.text or ""

    async def generate_image(self, prompt: str) -> ImageResult:
        """Generate one image from a text prompt.

        Aspect ratio and style are expected in the prompt itself.

        Returns:
            ImageResult with the first inline image found, or an error message.
        """
        result = ImageResult(
            prompt=prompt,
            created_at=datetime.now(),
            metadata={"model": self._image_model},
        )

        try:
            logger.info(f"Generating image with Gemini: {prompt[:50]}...")
            response = await self._generate(
                model=self._image_model,
                contents=prompt,
                config=types.GenerateContentConfig(response_modalities=["IMAGE", "TEXT"]),
            )
        except genai_errors.APIError as e:
            logger.error(f"Gemini image API error: {e}")
            result.error_message = str(e)
            return result

        result.payload = extract_inline_image(response)
        if result.payload is None:
            result.error_message = "No image data in response"
        return result

    async def _generate(self, **kwargs: Any) -> types.GenerateContentResponse:
        for attempt in range(self._max_retries):
            try:
                logger.debug(
                    f"Sending request to {kwargs['model']} "
                    f"(attempt {attempt + 1}/{self._max_retries})"
                )
                return await self._client.aio.models.generate_content(**kwargs)

            except genai_errors.APIError as e:
                if not _is_transient(e) or attempt == self._max_retries - 1:
                    logger.error(f"API error: {e}")
                    raise
                delay = self._retry_delay * (2**attempt)
                logger.warning(f"Transient error ({e.code}). Retrying in {delay:.1f}s...")
                await asyncio.sleep(delay)

        raise RuntimeError("max_retries must be at least 1")


def extract_inline_image(response: Any) -> Optional[ImagePayload]:
    """Return the first inline image in a generate_content response."""
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            inline = getattr(part, "inline_data", None)
            if inline is None or not inline.data:
                continue
            mime_type = inline.mime_type or "image/png"
            if isinstance(inline.data, str):
                return ImagePayload(mime_type=mime_type, data=inline.data)
            return ImagePayload.from_bytes(inline.data, mime_type)
    return None
