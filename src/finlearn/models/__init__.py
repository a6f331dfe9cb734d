"""Domain entities and SQLModel table exports."""

from .debt import Debt, DebtType, PaymentStrategy
from .progress import CalculatorUsage

__all__ = [
    "CalculatorUsage",
    "Debt",
    "DebtType",
    "PaymentStrategy",
]
