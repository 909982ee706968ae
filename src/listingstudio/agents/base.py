"""Base agent abstraction."""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, TypeVar

from ..errors import GatewayError
from ..services import TextClient, create_text_client

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class BaseAgent(ABC, Generic[InputT, OutputT]):
    """Abstract base class for prompt-and-parse agents.

    An agent owns one prompt, sends it through a text client and coerces the
    reply into a domain value. Every failure leaves the agent as
    `error_class`, with the original exception chained.
    """

    error_class: type[GatewayError] = GatewayError

    def __init__(self, client: Optional[TextClient] = None) -> None:
        """Initialize the agent.

        Args:
            client: Text client instance. Created from config if not provided.
        """
        self._client = client or create_text_client()
        self._logger = logging.getLogger(f"{__name__}.{self.name}")

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the agent's name."""
        ...

    @property
    def system_prompt(self) -> Optional[str]:
        """Return the system prompt for this agent, if any."""
        return None

    @abstractmethod
    async def run(self, input_data: InputT) -> OutputT:
        """Execute the agent's main task.

        Args:
            input_data: Input data for the agent.

        Returns:
            Structured output from the agent.
        """
        ...

    async def _create_message(
        self,
        prompt: str,
        response_schema: Optional[dict] = None,
        image_bytes: Optional[bytes] = None,
        image_mime: Optional[str] = None,
        temperature: float = 0.7,
    ) -> str:
        """Send a prompt with the agent's system prompt and return non-empty text.

        Raises:
            GatewayError: `error_class` if the call fails or the reply is empty.
        """
        self._logger.debug(f"Creating message with prompt length: {len(prompt)}")

        try:
            response = await self._client.create_message(
                prompt=prompt,
                system=self.system_prompt,
                response_schema=response_schema,
                image_bytes=image_bytes,
                image_mime=image_mime,
                temperature=temperature,
            )
        except Exception as e:
            self._logger.error(f"Error creating message: {e}")
            raise self.error_class(f"{self.name} request failed: {e}") from e

        if not response or not response.strip():
            raise self.error_class(f"{self.name} received an empty response")

        self._logger.debug(f"Received response of length: {len(response)}")
        return response

    def _parse_json(self, response: str) -> Any:
        """Decode the JSON payload of a response.

        Raises:
            GatewayError: `error_class` if no valid JSON is found.
        """
        json_str = extract_json(response)
        try:
            return json.loads(json_str)
        except json.JSONDecodeError as e:
            self._logger.error(f"Failed to parse JSON: {e}")
            self._logger.debug(f"Raw response: {response}")
            raise self.error_class(f"Invalid JSON in response: {e}") from e


def extract_json(response: str) -> str:
    """Extract JSON from a response that may contain markdown or other text."""
    # Try to find JSON in code blocks
    if "```json" in response:
        start = response.find("```json") + 7
        end = response.find("```", start)
        if end > start:
            return response[start:end].strip()

    if "```" in response:
        start = response.find("```") + 3
        end = response.find("```", start)
        if end > start:
            return response[start:end].strip()

    # Raw JSON object or array, whichever opens first
    starts = [(response.find(c), c) for c in "{[" if response.find(c) != -1]
    if starts:
        start, start_char = min(starts)
        end_char = "}" if start_char == "{" else "]"
        depth = 0
        in_string = False
        escaped = False
        for i, char in enumerate(response[start:], start):
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
            elif char == '"':
                in_string = True
            elif char == start_char:
                depth += 1
            elif char == end_char:
                depth -= 1
                if depth == 0:
                    return response[start:i + 1]

    # Return as-is if no JSON structure found
    return response.strip()
