"""Data models for listing-studio."""

from .listing import Listing
from .scene import ImagePayload, Scene
from .project import AutomationStatus, Project

__all__ = ["Listing", "ImagePayload", "Scene", "AutomationStatus", "Project"]
