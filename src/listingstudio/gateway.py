"""AI gateway: the typed boundary between listing-studio and the model providers."""

import logging
from typing import Optional

from .agents import (
    AnalysisInput,
    ConceptAgent,
    ImageAnalysisAgent,
    ListingAgent,
    ListingInput,
    StoryboardAgent,
    StoryboardInput,
)
from .config import config
from .errors import ImageError
from .models import ImagePayload, Listing, Scene
from .services import (
    GeminiClient,
    ImageClient,
    TextClient,
    create_image_client,
    create_text_client,
)

logger = logging.getLogger(__name__)


class Gateway:
    """Five model capabilities, each one request/response with no retry.

    Every operation returns a fully validated domain value or raises a
    GatewayError subclass. generate_marketing_concepts is the exception: it
    falls back to a fixed concept triple instead of raising.
    """

    def __init__(
        self,
        text_client: Optional[TextClient] = None,
        image_client: Optional[ImageClient] = None,
        storyboard_scenes: Optional[int] = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            text_client: Client for text and vision calls. Created from config if not provided.
            image_client: Client for scene images. Created from config if not provided.
            storyboard_scenes: Scenes per storyboard. Defaults to config.storyboard_scenes.
        """
        if text_client is None:
            text_client = create_text_client()
        if image_client is None:
            # Share one Gemini client when both capabilities use it
            if config.image_provider == "gemini" and isinstance(text_client, GeminiClient):
                image_client = text_client
            else:
                image_client = create_image_client()

        self._image_client = image_client
        self._storyboard_scenes = storyboard_scenes or config.storyboard_scenes
        self._analysis_agent = ImageAnalysisAgent(text_client)
        self._listing_agent = ListingAgent(text_client)
        self._concept_agent = ConceptAgent(text_client)
        self._storyboard_agent = StoryboardAgent(text_client)

    async def analyze_image(self, image_bytes: bytes, mime_type: str) -> str:
        """Describe a product photo.

        Raises:
            AnalysisError: If the call fails or returns no text.
        """
        return await self._analysis_agent.run(AnalysisInput(image_bytes=image_bytes, mime_type=mime_type))

    async def generate_listing(
        self,
        product_name: str,
        tone: str,
        context: str,
        image_bytes: Optional[bytes] = None,
        image_mime: Optional[str] = None,
    ) -> Listing:
        """Write a listing, grounded in the photo when one is given.

        Raises:
            GenerationError: If the call fails or the reply is not a listing.
        """
        return await self._listing_agent.run(ListingInput(
            product_name=product_name,
            tone=tone,
            context=context,
            image_bytes=image_bytes,
            image_mime=image_mime,
        ))

    async def generate_marketing_concepts(self, product_name: str) -> list[str]:
        """Return exactly three ad concepts; never raises."""
        return await self._concept_agent.run(product_name)

    async def generate_storyboard(self, product_name: str, concept: str) -> list[Scene]:
        """Script the storyboard scenes (prompts only, no images).

        Raises:
            StoryboardError: If the call fails or the reply is not a storyboard.
        """
        return await self._storyboard_agent.run(StoryboardInput(
            product_name=product_name,
            concept=concept,
            num_scenes=self._storyboard_scenes,
        ))

    async def generate_scene_image(self, prompt: str) -> ImagePayload:
        """Render one frame. The prompt should already carry style directives.

        Raises:
            ImageError: If the call fails or the response holds no image.
        """
        try:
            result = await self._image_client.generate_image(prompt)
        except Exception as e:
            logger.error(f"Image request failed: {e}")
            raise ImageError(f"Image request failed: {e}") from e

        if result.payload is None:
            raise ImageError(result.error_message or "No image generated")
        return result.payload
