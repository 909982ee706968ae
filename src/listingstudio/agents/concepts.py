"""Marketing concept brainstorming agent."""

from ..errors import GatewayError
from .base import BaseAgent
from .schemas import CONCEPTS_SCHEMA

FALLBACK_CONCEPTS = (
    "Guerrilla Marketing: Product appears in unexpected global locations.",
    "Lifestyle: Daily life improved by the product.",
    "Showcase: High-energy feature highlight.",
)

CONCEPT_COUNT = 3


class ConceptAgent(BaseAgent[str, list[str]]):
    """Brainstorms three video-ad concepts for a product.

    This agent never raises: any failure yields FALLBACK_CONCEPTS.
    """

    @property
    def name(self) -> str:
        return "ConceptAgent"

    async def run(self, input_data: str) -> list[str]:
        self._logger.info(f"Brainstorming concepts for: '{input_data}'")

        try:
            response = await self._create_message(
                prompt=self._build_prompt(input_data),
                response_schema=CONCEPTS_SCHEMA,
            )
            data = self._parse_json(response)
        except GatewayError as e:
            self._logger.warning(f"Concept generation failed, using fallback concepts: {e}")
            return list(FALLBACK_CONCEPTS)

        if (
            not isinstance(data, list)
            or len(data) != CONCEPT_COUNT
            or not all(isinstance(c, str) and c.strip() for c in data)
        ):
            self._logger.warning(f"Unexpected concepts shape, using fallback concepts: {data!r}")
            return list(FALLBACK_CONCEPTS)

        return [c.strip() for c in data]

    def _build_prompt(self, product_name: str) -> str:
        return "\n".join([
            f"Generate 3 distinct, creative video ad concepts for a product called \"{product_name}\".",
            "One should be \"Guerrilla Marketing\" style (product dropped in unexpected places).",
            "One should be \"Lifestyle/Aspirational\".",
            "One should be \"Technical/Feature-focused\".",
            "Return ONLY the 3 concept titles and a 1-sentence description for each, "
            "formatted as a simple JSON list of strings.",
        ])
