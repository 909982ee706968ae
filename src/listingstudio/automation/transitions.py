"""Pure state transitions for the automation pipeline.

Every function takes the current Project and returns a new one; the input
is never mutated. Progress only moves forward within a run: only
`run_failed` and `reset` lower it.
"""

from copy import deepcopy
from typing import Any, Optional, Sequence

from ..models import AutomationStatus, ImagePayload, Listing, Project, Scene

PROGRESS_ANALYZING = 10
PROGRESS_DRAFTED = 40
PROGRESS_CONCEPT_CHOSEN = 50
PROGRESS_STORYBOARDED = 70
PROGRESS_RENDER_BASE = 80
PROGRESS_RENDER_STEP = 4
PROGRESS_COMPLETE = 100

GUERRILLA = "guerrilla"

# Order in which stages populate the project. A failure clears the fields
# of the failing stage and every stage after it.
_STAGE_ORDER = (
    AutomationStatus.ANALYZING,
    AutomationStatus.BRAINSTORMING,
    AutomationStatus.STORYBOARDING,
    AutomationStatus.RENDERING,
)


def _evolve(project: Project, **updates: Any) -> Project:
    new = project.model_copy(deep=True)
    for key, value in updates.items():
        setattr(new, key, deepcopy(value))
    return new


def _advance(project: Project, status: AutomationStatus, progress: int, **updates: Any) -> Project:
    return _evolve(project, status=status, progress=max(project.progress, progress), **updates)


def select_concept(concepts: Sequence[str]) -> str:
    """Pick the first concept mentioning guerrilla marketing, else the first concept.

    Raises:
        ValueError: If concepts is empty.
    """
    if not concepts:
        raise ValueError("No concepts to choose from")
    for concept in concepts:
        if GUERRILLA in concept.lower():
            return concept
    return concepts[0]


def render_progress(index: int) -> int:
    """Progress once the scene at `index` (0-based) has been rendered.

    Capped below PROGRESS_COMPLETE so only a finished run reports 100.
    """
    return min(PROGRESS_RENDER_BASE + PROGRESS_RENDER_STEP * index, PROGRESS_COMPLETE - 1)


def start_run(project: Project, product_name: Optional[str] = None) -> Project:
    return _evolve(
        project,
        product_name=product_name if product_name is not None else project.product_name,
        listing=None,
        marketing_concepts=[],
        selected_concept=None,
        storyboard=[],
        status=AutomationStatus.ANALYZING,
        progress=PROGRESS_ANALYZING,
    )


def drafts_ready(project: Project, listing: Listing, concepts: Sequence[str]) -> Project:
    return _advance(
        project,
        AutomationStatus.BRAINSTORMING,
        PROGRESS_DRAFTED,
        listing=listing,
        marketing_concepts=list(concepts),
    )


def concept_chosen(project: Project, concept: str) -> Project:
    return _advance(
        project,
        AutomationStatus.STORYBOARDING,
        PROGRESS_CONCEPT_CHOSEN,
        selected_concept=concept,
    )


def storyboard_ready(project: Project, scenes: Sequence[Scene]) -> Project:
    return _advance(
        project,
        AutomationStatus.RENDERING,
        PROGRESS_STORYBOARDED,
        storyboard=list(scenes),
    )


def _update_scene(project: Project, index: int, **updates: Any) -> Project:
    storyboard = [scene.model_copy(deep=True) for scene in project.storyboard]
    scene = storyboard[index]
    for key, value in updates.items():
        setattr(scene, key, value)
    return _evolve(project, storyboard=storyboard)


def scene_started(project: Project, index: int) -> Project:
    return _update_scene(project, index, is_generating=True)


def scene_rendered(project: Project, index: int, start: ImagePayload, end: ImagePayload) -> Project:
    return _update_scene(project, index, start_image=start, end_image=end, is_generating=False)


def scene_failed(project: Project, index: int, keep_images: bool = False) -> Project:
    """Mark a scene as no longer rendering after an image failure.

    With keep_images the previously rendered frames stay in place.
    """
    if keep_images:
        return _update_scene(project, index, is_generating=False)
    return _update_scene(project, index, start_image=None, end_image=None, is_generating=False)


def scene_progress(project: Project, index: int) -> Project:
    return _evolve(project, progress=max(project.progress, render_progress(index)))


def run_complete(project: Project) -> Project:
    return _advance(project, AutomationStatus.COMPLETE, PROGRESS_COMPLETE)


def run_failed(project: Project, stage: AutomationStatus) -> Project:
    """Abandon a run: back to IDLE at 0%, keeping what earlier stages produced."""
    position = _STAGE_ORDER.index(stage) if stage in _STAGE_ORDER else 0
    cleared = set(_STAGE_ORDER[position:])

    updates: dict[str, Any] = {"status": AutomationStatus.IDLE, "progress": 0}
    if AutomationStatus.ANALYZING in cleared:
        updates["listing"] = None
        updates["marketing_concepts"] = []
    if AutomationStatus.BRAINSTORMING in cleared:
        updates["selected_concept"] = None
    if AutomationStatus.STORYBOARDING in cleared:
        updates["storyboard"] = []
    else:
        updates["storyboard"] = [
            scene.model_copy(update={"start_image": None, "end_image": None, "is_generating": False}, deep=True)
            for scene in project.storyboard
        ]
    return _evolve(project, **updates)


def reset(project: Project, product_name: Optional[str] = None) -> Project:
    return Project(product_name=product_name if product_name is not None else project.product_name)
