"""Exception hierarchy for listing-studio."""

from typing import Optional


class StudioError(Exception):
    """Base class for all listing-studio errors."""


class GatewayError(StudioError):
    """A model call failed or returned output that does not fit the domain shape."""


class AnalysisError(GatewayError):
    """Image analysis failed or came back empty."""


class GenerationError(GatewayError):
    """Listing generation failed or produced an unparseable listing."""


class StoryboardError(GatewayError):
    """Storyboard generation failed or produced an unparseable storyboard."""


class ImageError(GatewayError):
    """Scene image generation returned no image."""


class AutomationInterrupted(StudioError):
    """An automation run was abandoned after a fatal gateway error."""

    def __init__(self, stage: str, message: Optional[str] = None) -> None:
        self.stage = stage
        super().__init__(message or f"Automation interrupted during {stage}")
