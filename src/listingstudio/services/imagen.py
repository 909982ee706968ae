"""Google Imagen API client wrapper via Vertex AI."""

import asyncio
import logging
from datetime import datetime
from typing import Optional

import google.auth
import google.auth.exceptions
import google.auth.transport.requests
import requests

from ..config import config
from ..models import ImagePayload
from .base import ImageResult

logger = logging.getLogger(__name__)


class ImagenClient:
    """Client wrapper for Google Imagen, used as a substitute scene-image provider."""

    DEFAULT_LOCATION = "us-central1"
    DEFAULT_ASPECT_RATIO = "16:9"

    def __init__(
        self,
        project_id: Optional[str] = None,
        location: str = DEFAULT_LOCATION,
        model: Optional[str] = None,
        aspect_ratio: str = DEFAULT_ASPECT_RATIO,
        timeout: float = 120.0,
    ) -> None:
        """Initialize the Imagen client.

        Args:
            project_id: Google Cloud project ID.
            location: GCP region for Vertex AI.
            model: Imagen model name.
            aspect_ratio: Aspect ratio requested for every image.
            timeout: HTTP timeout in seconds.
        """
        self._project_id = project_id or config.google_cloud_project
        self._location = location
        self._model = model or config.imagen_model
        self._aspect_ratio = aspect_ratio
        self._timeout = timeout

        if not self._project_id:
            raise ValueError("GOOGLE_CLOUD_PROJECT not set")

    @property
    def project_id(self) -> str:
        return self._project_id

    @property
    def model(self) -> str:
        return self._model

    @property
    def endpoint(self) -> str:
        return (
            f"https://{self._location}-aiplatform.googleapis.com/v1/"
            f"projects/{self._project_id}/locations/{self._location}/"
            f"publishers/google/models/{self._model}:predict"
        )

    async def generate_image(self, prompt: str) -> ImageResult:
        """Generate an image from a text prompt without blocking the event loop."""
        return await asyncio.to_thread(self._generate_image_sync, prompt)

    def _generate_image_sync(self, prompt: str) -> ImageResult:
        result = ImageResult(
            prompt=prompt,
            created_at=datetime.now(),
            metadata={
                "aspect_ratio": self._aspect_ratio,
                "model": self._model,
            },
        )

        try:
            # Get credentials
            scopes = ["https://www.googleapis.com/auth/cloud-platform"]
            credentials, _ = google.auth.default(scopes=scopes)
            credentials.refresh(google.auth.transport.requests.Request())

            request_body = {
                "instances": [
                    {"prompt": prompt}
                ],
                "parameters": {
                    "sampleCount": 1,
                    "aspectRatio": self._aspect_ratio,
                },
            }
            headers = {
                "Authorization": f"Bearer {credentials.token}",
                "Content-Type": "application/json",
            }

            logger.info(f"Generating image with Imagen: {prompt[:50]}...")
            response = requests.post(
                self.endpoint, json=request_body, headers=headers, timeout=self._timeout
            )
        except (google.auth.exceptions.GoogleAuthError, requests.RequestException) as e:
            logger.error(f"Imagen request failed: {e}")
            result.error_message = str(e)
            return result

        if response.status_code != 200:
            error_msg = f"{response.status_code}: {response.text[:500]}"
            logger.error(f"Imagen API error: {error_msg}")
            result.error_message = error_msg
            return result

        result.payload = parse_predictions(response.json())
        if result.payload is None:
            result.error_message = "No image data in response"
        return result


def parse_predictions(data: dict) -> Optional[ImagePayload]:
    """Return the first image in an Imagen predict response body."""
    for prediction in data.get("predictions", []):
        image_data = prediction.get("bytesBase64Encoded")
        if image_data:
            return ImagePayload(
                mime_type=prediction.get("mimeType", "image/png"),
                data=image_data,
            )
    return None
