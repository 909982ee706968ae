"""Shared result types for model service clients."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..models import ImagePayload


@dataclass
class ImageResult:
    """Result of an image generation call."""

    prompt: str
    payload: Optional[ImagePayload] = None
    error_message: Optional[str] = None
    created_at: Optional[datetime] = None
    metadata: dict = field(default_factory=dict)
