"""Prompt-and-parse agents, one per text capability."""

from .base import BaseAgent
from .analysis import AnalysisInput, ImageAnalysisAgent
from .concepts import FALLBACK_CONCEPTS, ConceptAgent
from .listing import ListingAgent, ListingInput
from .storyboard import StoryboardAgent, StoryboardInput

__all__ = [
    "BaseAgent",
    "AnalysisInput",
    "ImageAnalysisAgent",
    "FALLBACK_CONCEPTS",
    "ConceptAgent",
    "ListingAgent",
    "ListingInput",
    "StoryboardAgent",
    "StoryboardInput",
]
