"""Repository implementations."""

from .progress import InMemoryProgressTracker, SQLModelProgressRepository

__all__ = ["InMemoryProgressTracker", "SQLModelProgressRepository"]
