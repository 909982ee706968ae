"""Automation pipeline: listing, concepts, storyboard and scene rendering."""

from .orchestrator import AutomationOrchestrator
from .transitions import select_concept

__all__ = ["AutomationOrchestrator", "select_concept"]
