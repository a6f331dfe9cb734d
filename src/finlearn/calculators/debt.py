"""Debt payoff calculator wired onto the calculator base."""

from __future__ import annotations

from datetime import date
from typing import Any, Optional

from ..domain.repositories.progress import ProgressTracker
from ..models.debt import Debt, DebtType, PaymentStrategy
from ..services.debts import DebtPlan, calculate_debt_plan
from ..services.financial import format_currency, format_percentage
from .base import CalculatorBase, ValidationRule, common_validations

CALCULATOR_ID = "debt-calculator"


def default_values() -> dict[str, Any]:
    """Starting inputs shown to a learner who opens the calculator."""

    return {
        "debts": [
            Debt(
                name="Credit Card 1",
                balance=5000.0,
                interest_rate=18.99,
                minimum_payment=150.0,
                type=DebtType.CREDIT_CARD,
                is_deductible=False,
            )
        ],
        "monthly_income": 5000.0,
        "extra_payment": 200.0,
        "payment_strategy": PaymentStrategy.AVALANCHE.value,
        "consolidation_rate": None,
        "monthly_expenses": 3000.0,
        "credit_score": 700,
    }


def _strategy_rule() -> ValidationRule:
    allowed = {strategy.value for strategy in PaymentStrategy}
    return ValidationRule(
        lambda value, _: str(getattr(value, "value", value)) in allowed,
        "Payment strategy must be avalanche or snowball",
    )


VALIDATION: dict[str, list[ValidationRule]] = {
    "monthly_income": [common_validations.required(), common_validations.min(0)],
    "extra_payment": [common_validations.required(), common_validations.min(0)],
    "monthly_expenses": [common_validations.required(), common_validations.min(0)],
    "credit_score": [
        common_validations.required(),
        common_validations.min(300),
        common_validations.max(850),
    ],
    "consolidation_rate": [common_validations.min(0), common_validations.max(100)],
    "payment_strategy": [_strategy_rule()],
}

FORMATTERS = {
    "monthly_income": format_currency,
    "extra_payment": format_currency,
    "monthly_expenses": format_currency,
    "consolidation_rate": lambda value: "" if value is None else format_percentage(value, 2),
}


class DebtCalculator(CalculatorBase[DebtPlan]):
    """Stateful debt calculator; ``result`` is a ``DebtPlan``."""

    def __init__(
        self,
        *,
        progress: ProgressTracker | None = None,
        initial_values: Optional[dict[str, Any]] = None,
        start: Optional[date] = None,
    ) -> None:
        self._start = start
        super().__init__(
            calculator_id=CALCULATOR_ID,
            initial_values=initial_values or default_values(),
            compute=self._compute_plan,
            validation=VALIDATION,
            formatters=FORMATTERS,
            progress=progress,
        )

    def _compute_plan(self, values: dict[str, Any]) -> DebtPlan:
        return calculate_debt_plan(
            values.get("debts"),
            monthly_income=values.get("monthly_income", 0),
            extra_payment=values.get("extra_payment", 0),
            payment_strategy=values.get("payment_strategy", PaymentStrategy.AVALANCHE),
            consolidation_rate=values.get("consolidation_rate"),
            start=self._start,
        )


__all__ = ["CALCULATOR_ID", "DebtCalculator", "default_values"]
