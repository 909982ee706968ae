"""Automation orchestrator: runs the full listing-to-storyboard pipeline."""

import asyncio
import logging
from typing import Callable, Optional, Protocol

from ..config import config
from ..errors import AutomationInterrupted, GatewayError
from ..models import AutomationStatus, ImagePayload, Listing, Project, Scene
from . import transitions

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[Project], None]


class GatewayProtocol(Protocol):
    """The gateway operations the orchestrator depends on."""

    async def generate_listing(
        self,
        product_name: str,
        tone: str,
        context: str,
        image_bytes: Optional[bytes] = None,
        image_mime: Optional[str] = None,
    ) -> Listing: ...

    async def generate_marketing_concepts(self, product_name: str) -> list[str]: ...

    async def generate_storyboard(self, product_name: str, concept: str) -> list[Scene]: ...

    async def generate_scene_image(self, prompt: str) -> ImagePayload: ...


class AutomationOrchestrator:
    """Owns one Project and drives it through the automation pipeline.

    Stages run in order: listing and concepts together, concept selection,
    storyboard, then scene rendering one scene at a time with both frames
    of a scene requested together. Listing, concept and storyboard failures
    abandon the run; a failed scene render is logged and skipped.

    The orchestrator is the only writer of its Project. Every change goes
    through a pure transition and is reported to `on_update` as a snapshot.
    There is no built-in timeout; wrap `run()` in `asyncio.wait_for` to
    bound it. A cancelled run is reset like a failed one.
    """

    def __init__(
        self,
        gateway: GatewayProtocol,
        product_name: str = "",
        on_update: Optional[UpdateCallback] = None,
        image_style: Optional[str] = None,
        tone: Optional[str] = None,
        context: Optional[str] = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            gateway: Gateway used for every model call.
            product_name: Optional product pre-selected upstream.
            on_update: Called with a Project snapshot after every change.
            image_style: Suffix appended to frame prompts. Defaults to config.scene_image_style.
            tone: Listing tone. Defaults to config.default_tone.
            context: Listing context. Defaults to config.default_context.
        """
        self._gateway = gateway
        self._project = Project(product_name=product_name)
        self._on_update = on_update
        self._image_style = config.scene_image_style if image_style is None else image_style
        self._tone = tone or config.default_tone
        self._context = context or config.default_context
        self._pending_renders = 0

    @property
    def project(self) -> Project:
        """A snapshot of the current project."""
        return self._project.model_copy(deep=True)

    @property
    def is_busy(self) -> bool:
        return self._project.is_busy or self._pending_renders > 0

    def _apply(self, project: Project) -> None:
        self._project = project
        logger.debug(f"Project {project.status.value} at {project.progress}%")
        if self._on_update is not None:
            self._on_update(project.model_copy(deep=True))

    async def run(self, product_name: Optional[str] = None, concept: Optional[str] = None) -> Project:
        """Run the whole pipeline for a product.

        Only an IDLE project can run; call `reset()` to run a COMPLETE one again.

        Args:
            product_name: Product to promote. Defaults to the project's product name.
            concept: Pre-selected concept; skips brainstorming when given.

        Returns:
            The final project snapshot.

        Raises:
            AutomationInterrupted: If a listing, concept or storyboard call
                failed. The project is back to IDLE at 0%.
        """
        if self._project.status != AutomationStatus.IDLE or self._pending_renders:
            logger.warning(f"Project is {self._project.status.value}, not IDLE; ignoring run()")
            return self.project

        name = (product_name if product_name is not None else self._project.product_name).strip()
        if not name:
            logger.warning("No product name; ignoring run()")
            return self.project

        logger.info(f"Starting automation for '{name}'")
        self._apply(transitions.start_run(self._project, name))

        try:
            listing, concepts = await self._draft(name, concept)
            self._apply(transitions.drafts_ready(self._project, listing, concepts))

            chosen = concept or transitions.select_concept(concepts)
            logger.info(f"Selected concept: {chosen}")
            self._apply(transitions.concept_chosen(self._project, chosen))

            scenes = await self._gateway.generate_storyboard(name, chosen)
            self._apply(transitions.storyboard_ready(self._project, scenes))

            for index in range(len(scenes)):
                await self._render_scene(index, track_progress=True)

            self._apply(transitions.run_complete(self._project))

        except GatewayError as e:
            stage = self._project.status
            logger.error(f"Automation failed during {stage.value}: {e}")
            self._apply(transitions.run_failed(self._project, stage))
            raise AutomationInterrupted(stage.value) from e

        except asyncio.CancelledError:
            stage = self._project.status
            logger.warning(f"Automation cancelled during {stage.value}")
            self._apply(transitions.run_failed(self._project, stage))
            raise

        except Exception:
            stage = self._project.status
            logger.exception(f"Unexpected error during {stage.value}")
            self._apply(transitions.run_failed(self._project, stage))
            raise

        rendered = sum(1 for scene in self._project.storyboard if scene.is_rendered)
        logger.info(f"Automation complete: {rendered}/{len(scenes)} scenes rendered")
        return self.project

    async def regenerate_scene_images(self, index: int) -> Project:
        """Render both frames of one scene again.

        Status and progress are left alone. If rendering fails or is
        cancelled the scene keeps its previous frames. Ignored while a run is
        in flight or while the same scene is already rendering.

        Raises:
            IndexError: If there is no scene at `index`.
        """
        if self._project.is_busy:
            logger.warning(f"Automation in progress ({self._project.status.value}); ignoring regenerate")
            return self.project
        if not 0 <= index < len(self._project.storyboard):
            raise IndexError(f"No scene at index {index}")
        if self._project.storyboard[index].is_generating:
            logger.warning(f"Scene {index + 1} is already rendering; ignoring regenerate")
            return self.project

        self._pending_renders += 1
        try:
            await self._render_scene(index, track_progress=False)
        except asyncio.CancelledError:
            logger.warning(f"Regeneration of scene {index + 1} cancelled")
            self._apply(transitions.scene_failed(self._project, index, keep_images=True))
            raise
        finally:
            self._pending_renders -= 1
        return self.project

    def reset(self, product_name: Optional[str] = None) -> Project:
        """Discard all generated content and return to IDLE."""
        if self.is_busy:
            logger.warning("Automation in progress; ignoring reset")
            return self.project
        self._apply(transitions.reset(self._project, product_name))
        return self.project

    async def _draft(self, name: str, concept: Optional[str]) -> tuple[Listing, list[str]]:
        if concept:
            listing = await self._gateway.generate_listing(name, self._tone, self._context)
            return listing, [concept]

        listing, concepts = await asyncio.gather(
            self._gateway.generate_listing(name, self._tone, self._context),
            self._gateway.generate_marketing_concepts(name),
        )
        return listing, concepts

    async def _render_scene(self, index: int, track_progress: bool) -> bool:
        scene = self._project.storyboard[index]
        self._apply(transitions.scene_started(self._project, index))

        try:
            start, end = await asyncio.gather(
                self._gateway.generate_scene_image(scene.start_frame_prompt + self._image_style),
                self._gateway.generate_scene_image(scene.end_frame_prompt + self._image_style),
            )
        except GatewayError as e:
            logger.error(f"Scene {scene.scene_number} failed to render: {e}")
            project = transitions.scene_failed(self._project, index, keep_images=not track_progress)
            success = False
        else:
            project = transitions.scene_rendered(self._project, index, start, end)
            success = True

        if track_progress:
            project = transitions.scene_progress(project, index)
        self._apply(project)
        return success
