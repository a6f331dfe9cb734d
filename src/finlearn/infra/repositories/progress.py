"""Progress tracker implementations."""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timezone
from typing import Callable

from sqlmodel import Session, select

from ...models.progress import CalculatorUsage


class InMemoryProgressTracker:
    """Process-local tracker for tests and embedding without a database."""

    def __init__(self) -> None:
        self._counts: Counter[str] = Counter()

    def record_calculator_usage(self, calculator_id: str) -> None:
        self._counts[calculator_id] += 1

    def calculator_usage(self, calculator_id: str) -> int:
        return self._counts[calculator_id]

    def usage_summary(self) -> dict[str, int]:
        return dict(self._counts)


class SQLModelProgressRepository:
    """SQLModel-based calculator usage tracker."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def record_calculator_usage(self, calculator_id: str) -> None:
        """Increment the usage counter, creating the row on first use."""
        with self.session_factory() as session:
            usage = session.exec(
                select(CalculatorUsage).where(CalculatorUsage.calculator_id == calculator_id)
            ).first()
            if usage is None:
                usage = CalculatorUsage(calculator_id=calculator_id, use_count=0)
            usage.use_count += 1
            usage.last_used_at = datetime.now(timezone.utc)
            session.add(usage)
            session.commit()

    def get(self, calculator_id: str) -> CalculatorUsage | None:
        with self.session_factory() as session:
            return session.exec(
                select(CalculatorUsage).where(CalculatorUsage.calculator_id == calculator_id)
            ).first()

    def calculator_usage(self, calculator_id: str) -> int:
        usage = self.get(calculator_id)
        return usage.use_count if usage else 0

    def usage_summary(self) -> dict[str, int]:
        with self.session_factory() as session:
            rows = session.exec(
                select(CalculatorUsage).order_by(CalculatorUsage.calculator_id)  # type: ignore
            ).all()
            return {row.calculator_id: row.use_count for row in rows}

    def reset(self) -> None:
        """Delete all recorded usage."""
        with self.session_factory() as session:
            for row in session.exec(select(CalculatorUsage)).all():
                session.delete(row)
            session.commit()


__all__ = ["InMemoryProgressTracker", "SQLModelProgressRepository"]
