"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from sqlmodel import Session

from .calculators.debt import DebtCalculator
from .config import BaseConfig
from .infra.database import create_db_engine, create_session_factory, init_database
from .infra.repositories import SQLModelProgressRepository


@dataclass
class AppContext:
    """Configuration plus the services calculators are built from."""

    config: BaseConfig
    session_factory: Callable[[], Session]
    progress_repo: SQLModelProgressRepository

    def debt_calculator(self, *, start: Optional[date] = None) -> DebtCalculator:
        """Return a fresh debt calculator that reports usage to this context."""
        return DebtCalculator(progress=self.progress_repo, start=start)


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()

    engine = create_db_engine(config)
    init_database(engine)
    session_factory = create_session_factory(engine)

    return AppContext(
        config=config,
        session_factory=session_factory,
        progress_repo=SQLModelProgressRepository(session_factory),
    )
