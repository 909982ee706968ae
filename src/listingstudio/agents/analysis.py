"""Image analysis agent."""

from dataclasses import dataclass

from ..errors import AnalysisError
from .base import BaseAgent

ANALYSIS_PROMPT = (
    "Analyze this product image. Identify the product type, key materials, "
    "visible features, colors, and potential target audience. Keep it concise."
)


@dataclass
class AnalysisInput:
    """Input data for the image analysis agent."""

    image_bytes: bytes
    mime_type: str


class ImageAnalysisAgent(BaseAgent[AnalysisInput, str]):
    """Describes a product photo in free text for use as listing context."""

    error_class = AnalysisError

    @property
    def name(self) -> str:
        return "ImageAnalysisAgent"

    async def run(self, input_data: AnalysisInput) -> str:
        if not input_data.image_bytes:
            raise AnalysisError("No image data to analyze")

        self._logger.info(f"Analyzing {input_data.mime_type} image ({len(input_data.image_bytes)} bytes)")
        response = await self._create_message(
            prompt=ANALYSIS_PROMPT,
            image_bytes=input_data.image_bytes,
            image_mime=input_data.mime_type,
        )
        return response.strip()
