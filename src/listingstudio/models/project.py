"""Project state model."""

from typing import List, Optional
from enum import Enum
from pathlib import Path
from pydantic import BaseModel, Field
import yaml

from .listing import Listing
from .scene import Scene


class AutomationStatus(str, Enum):
    """Automation pipeline status."""
    IDLE = "IDLE"
    ANALYZING = "ANALYZING"
    DRAFTING = "DRAFTING"  # reserved, no transition enters it
    BRAINSTORMING = "BRAINSTORMING"
    STORYBOARDING = "STORYBOARDING"
    RENDERING = "RENDERING"
    COMPLETE = "COMPLETE"


class Project(BaseModel):
    """Everything the automation pipeline knows about one product."""

    product_name: str = Field(default="", description="Product being promoted")
    listing: Optional[Listing] = Field(None, description="Generated listing")
    marketing_concepts: List[str] = Field(default_factory=list, description="Brainstormed ad concepts")
    selected_concept: Optional[str] = Field(None, description="Concept used for the storyboard")
    storyboard: List[Scene] = Field(default_factory=list, description="Storyboard scenes")
    status: AutomationStatus = Field(default=AutomationStatus.IDLE, description="Current status")
    progress: int = Field(default=0, description="Progress percentage", ge=0, le=100)

    class Config:
        """Pydantic config."""
        frozen = False

    @property
    def is_busy(self) -> bool:
        return self.status not in (AutomationStatus.IDLE, AutomationStatus.COMPLETE)

    def to_yaml(self, path: Path) -> None:
        """Export the project to YAML. Rendered images are left out."""
        data = self.model_dump(
            mode="json",
            exclude={"storyboard": {"__all__": {"start_image", "end_image", "is_generating"}}},
        )
        with open(path, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
