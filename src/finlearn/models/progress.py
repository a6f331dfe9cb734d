"""Learner progress entities."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class CalculatorUsage(SQLModel, table=True):
    """How often a learner has opened a given calculator."""

    __tablename__: ClassVar[str] = "calculator_usage"

    calculator_id: str = Field(primary_key=True, max_length=64)
    use_count: int = Field(default=0, nullable=False)
    last_used_at: Optional[datetime] = Field(default=None)
