"""Interactive calculators built on a shared state base."""

from .base import CalculatorBase, CalculatorState, FieldError, ValidationRule, common_validations
from .debt import DebtCalculator

__all__ = [
    "CalculatorBase",
    "CalculatorState",
    "DebtCalculator",
    "FieldError",
    "ValidationRule",
    "common_validations",
]
