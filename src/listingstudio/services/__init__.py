"""External model service integrations."""

from typing import Optional, Union

from ..config import config
from .anthropic import AnthropicClient
from .base import ImageResult
from .gemini import GeminiClient
from .imagen import ImagenClient

TextClient = Union[GeminiClient, AnthropicClient]
ImageClient = Union[GeminiClient, ImagenClient]


def create_text_client(provider: Optional[str] = None) -> TextClient:
    """Build the text/vision client for the configured provider."""
    provider = provider or config.text_provider
    if provider == "gemini":
        return GeminiClient()
    if provider == "anthropic":
        return AnthropicClient()
    raise ValueError(f"Unknown text provider: {provider}")


def create_image_client(provider: Optional[str] = None) -> ImageClient:
    """Build the scene-image client for the configured provider."""
    provider = provider or config.image_provider
    if provider == "gemini":
        return GeminiClient()
    if provider == "imagen":
        return ImagenClient()
    raise ValueError(f"Unknown image provider: {provider}")


__all__ = [
    "AnthropicClient",
    "GeminiClient",
    "ImagenClient",
    "ImageResult",
    "TextClient",
    "ImageClient",
    "create_text_client",
    "create_image_client",
]
