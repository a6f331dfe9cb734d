"""Progress tracking protocol."""

from __future__ import annotations

from typing import Protocol


class ProgressTracker(Protocol):
    """Records learner activity; calculators receive one by injection."""

    def record_calculator_usage(self, calculator_id: str) -> None:
        """Note that a calculator was opened."""
        ...

    def calculator_usage(self, calculator_id: str) -> int:
        """Return how many times a calculator has been opened."""
        ...

    def usage_summary(self) -> dict[str, int]:
        """Return usage counts keyed by calculator id."""
        ...
