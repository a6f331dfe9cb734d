"""Repository protocols."""

from .progress import ProgressTracker

__all__ = ["ProgressTracker"]
