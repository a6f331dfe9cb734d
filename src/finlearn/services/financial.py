"""Shared financial math and display helpers."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

CENT = Decimal("0.01")


class FinancialRatios:
    """Rule-of-thumb thresholds used across calculators (percentages)."""

    # Mortgage/Housing
    MAX_DTI = 43.0
    MAX_PTI = 28.0
    MIN_DOWN_PAYMENT = 3.5
    PMI_THRESHOLD = 80.0

    # Retirement
    SAFE_WITHDRAWAL_RATE = 4.0
    MIN_SAVINGS_RATE = 15.0
    REPLACEMENT_RATIO = 80.0

    # Credit
    MAX_CREDIT_UTILIZATION = 30.0
    HIGH_INTEREST_APR = 20.0

    # Emergency fund, in months of expenses
    MIN_EMERGENCY_FUND = 3
    IDEAL_EMERGENCY_FUND = 6


def to_decimal(value: Any) -> Decimal:
    """Convert user-supplied numbers to Decimal; unusable input becomes zero."""

    if isinstance(value, Decimal):
        return value if value.is_finite() else Decimal(0)
    if isinstance(value, bool):
        return Decimal(int(value))
    try:
        number = float(value)
    except (TypeError, ValueError):
        return Decimal(0)
    if not math.isfinite(number):
        return Decimal(0)
    # str() keeps the short repr so 18.99 stays 18.99
    return Decimal(str(number))


def quantize_cents(amount: Decimal) -> Decimal:
    """Round to cents using half-up rounding."""

    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_monthly_payment(principal: Any, annual_rate: Any, years: Any) -> float:
    """Return the level monthly payment that amortizes *principal*.

    ``annual_rate`` is a percentage (6.5 means 6.5%).
    """

    p = to_decimal(principal)
    r = to_decimal(annual_rate) / Decimal(100) / Decimal(12)
    n = to_decimal(years) * Decimal(12)
    if n <= 0:
        return 0.0
    if r == 0:
        return float(p / n)
    growth = (r + 1) ** int(n)
    if growth == 1:
        return 0.0
    return float(p * (r * growth) / (growth - 1))


def format_currency(value: Any, *, symbol: str = "$") -> str:
    """Format a number as a currency string such as ``$1,234.50``."""

    amount = float(quantize_cents(to_decimal(value)))
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def format_percentage(value: Any, decimals: int = 1) -> str:
    """Format an already-scaled percentage (15 -> ``15.0%``)."""

    return f"{float(to_decimal(value)):.{decimals}f}%"


__all__ = [
    "FinancialRatios",
    "calculate_monthly_payment",
    "format_currency",
    "format_percentage",
    "quantize_cents",
    "to_decimal",
]
