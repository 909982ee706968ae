"""Storyboard agent for ad scene scripting."""

from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from ..config import config
from ..errors import StoryboardError
from ..models import Scene
from .base import BaseAgent
from .schemas import STORYBOARD_SCHEMA

MIN_PROMPT_WORDS = 80


@dataclass
class StoryboardInput:
    """Input data for the storyboard agent."""

    product_name: str
    concept: str
    num_scenes: int = config.storyboard_scenes


class StoryboardAgent(BaseAgent[StoryboardInput, list[Scene]]):
    """Agent that scripts a storyboard for a video ad.

    Each scene gets a start frame without the product, an end frame with
    it, and a motion prompt for the transition between them. The result
    has exactly `num_scenes` scenes numbered 1..n.
    """

    error_class = StoryboardError

    @property
    def name(self) -> str:
        return "StoryboardAgent"

    async def run(self, input_data: StoryboardInput) -> list[Scene]:
        """Generate the storyboard.

        Raises:
            StoryboardError: If the call fails, the reply does not parse, or
                the scene count is wrong.
        """
        self._logger.info(
            f"Scripting {input_data.num_scenes} scenes for '{input_data.product_name}' "
            f"with concept: {input_data.concept[:60]}"
        )

        response = await self._create_message(
            prompt=self._build_prompt(input_data),
            response_schema=STORYBOARD_SCHEMA,
            temperature=0.8,  # Higher temperature for creative output
        )

        scenes = self._parse_scenes(self._parse_json(response))

        if len(scenes) != input_data.num_scenes:
            raise StoryboardError(
                f"Expected {input_data.num_scenes} scenes, got {len(scenes)}"
            )

        self._logger.info(f"Generated {len(scenes)} scenes")
        return scenes

    def _build_prompt(self, input_data: StoryboardInput) -> str:
        n = input_data.num_scenes
        return "\n".join([
            f"I want to make an ad for {input_data.product_name} a {n} scene ad "
            f"in the concept of: {input_data.concept}.",
            "The main idea is about being dropped in various places on earth, "
            "from Deserts, Icebergs, Even the ocean, and many more.",
            f"In total I want to get {n} scenes.",
            "Each scene's starting image should just have the environment and not the product.",
            "The last scene should have the product in the scene.",
            f"I want you to give me highly detailed prompts (at least {MIN_PROMPT_WORDS} words) "
            "describing each scene, and then a video prompt for what's going to happen "
            "between the start and the end frame.",
            "",
            "You will get:",
            "a. Start Frame Image prompt",
            "b. End Frame Image prompt",
            "c. Middle motion video prompt",
        ])

    def _parse_scenes(self, data: Any) -> list[Scene]:
        # Handle different response formats
        scenes_data = data.get("scenes", data) if isinstance(data, dict) else data

        if not isinstance(scenes_data, list):
            raise StoryboardError("Response does not contain a scenes array")

        try:
            scenes = [Scene.model_validate(item) for item in scenes_data]
        except ValidationError as e:
            self._logger.error(f"Scene failed validation: {e}")
            raise StoryboardError(f"Response does not match scene shape: {e}") from e

        for position, scene in enumerate(scenes, 1):
            if scene.scene_number != position:
                self._logger.warning(
                    f"Renumbering scene {scene.scene_number} at position {position}"
                )
                scene.scene_number = position

            for label, prompt in (("start", scene.start_frame_prompt), ("end", scene.end_frame_prompt)):
                words = len(prompt.split())
                if words < MIN_PROMPT_WORDS:
                    self._logger.warning(
                        f"Scene {position} {label} prompt has {words} words "
                        f"(expected at least {MIN_PROMPT_WORDS})"
                    )

        return scenes
