"""Listing copywriter agent."""

from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError

from ..errors import GenerationError
from ..models import Listing
from .base import BaseAgent
from .schemas import LISTING_SCHEMA

SYSTEM_PROMPT = (
    "You are an expert e-commerce copywriter. You write SEO-optimized, "
    "persuasive content for Amazon and Shopify listings."
)

EXPECTED_BULLETS = 5
EXPECTED_KEYWORDS = 10


@dataclass
class ListingInput:
    """Input data for the listing agent."""

    product_name: str
    tone: str
    context: str = ""
    image_bytes: Optional[bytes] = None
    image_mime: Optional[str] = None


class ListingAgent(BaseAgent[ListingInput, Listing]):
    """Agent that writes a complete marketplace listing for one product.

    When a product photo is supplied the prompt asks the model to ground the
    copy in what the photo shows.
    """

    error_class = GenerationError

    @property
    def name(self) -> str:
        return "ListingAgent"

    @property
    def system_prompt(self) -> str:
        return SYSTEM_PROMPT

    async def run(self, input_data: ListingInput) -> Listing:
        """Generate a listing.

        Raises:
            GenerationError: If the call fails or the reply is not a valid listing.
        """
        self._logger.info(f"Generating listing for: '{input_data.product_name}' (tone: {input_data.tone})")

        has_image = bool(input_data.image_bytes and input_data.image_mime)
        response = await self._create_message(
            prompt=self._build_prompt(input_data, has_image),
            response_schema=LISTING_SCHEMA,
            image_bytes=input_data.image_bytes if has_image else None,
            image_mime=input_data.image_mime if has_image else None,
        )

        data = self._parse_json(response)
        try:
            listing = Listing.model_validate(data)
        except ValidationError as e:
            self._logger.error(f"Listing failed validation: {e}")
            raise GenerationError(f"Response does not match listing shape: {e}") from e

        if len(listing.bullets) != EXPECTED_BULLETS:
            self._logger.warning(f"Expected {EXPECTED_BULLETS} bullets, got {len(listing.bullets)}")
        if len(listing.keywords) != EXPECTED_KEYWORDS:
            self._logger.warning(f"Expected {EXPECTED_KEYWORDS} keywords, got {len(listing.keywords)}")

        return listing

    def _build_prompt(self, input_data: ListingInput, has_image: bool) -> str:
        if has_image:
            return (
                f"Create a product listing for this item. "
                f"Product Name: \"{input_data.product_name}\". "
                f"Tone: {input_data.tone}. "
                f"Additional Context: {input_data.context}. "
                f"Rely heavily on the visual details in the image."
            )
        return (
            f"Create a high-converting product listing. "
            f"Product Name: \"{input_data.product_name}\". "
            f"Tone: {input_data.tone}. "
            f"Additional Context: {input_data.context}."
        )
