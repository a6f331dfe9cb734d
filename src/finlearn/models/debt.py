"""Debt entries consumed by the payoff calculator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class DebtType(str, Enum):
    """Closed set of liability categories."""

    CREDIT_CARD = "credit_card"
    PERSONAL_LOAN = "personal_loan"
    STUDENT_LOAN = "student_loan"
    MORTGAGE = "mortgage"
    AUTO_LOAN = "auto_loan"
    OTHER = "other"

    @classmethod
    def parse(cls, value: "DebtType | str") -> "DebtType":
        """Return the enum member for *value* or raise ``ValueError``."""

        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            allowed = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown debt type {value!r}; expected one of: {allowed}") from None


class PaymentStrategy(str, Enum):
    """Ordering used to direct extra payments."""

    AVALANCHE = "avalanche"
    SNOWBALL = "snowball"

    @classmethod
    def parse(cls, value: "PaymentStrategy | str") -> "PaymentStrategy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError("Invalid debt payoff strategy.") from None


@dataclass(frozen=True, slots=True)
class Debt:
    """One liability entry. Amounts are in currency units, rates in percent."""

    name: str
    balance: float
    interest_rate: float
    minimum_payment: float
    type: DebtType = DebtType.OTHER
    is_deductible: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", DebtType.parse(self.type))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Debt":
        """Build a debt from a form/JSON payload using snake or camel case keys."""

        if not isinstance(data, Mapping):
            raise ValueError(f"Debt entry must be an object, got {type(data).__name__}")

        def pick(*keys: str, default: Any = None) -> Any:
            for key in keys:
                if key in data:
                    return data[key]
            return default

        return cls(
            name=str(pick("name", default="")),
            balance=pick("balance", default=0.0),
            interest_rate=pick("interest_rate", "interestRate", "apr", default=0.0),
            minimum_payment=pick("minimum_payment", "minimumPayment", default=0.0),
            type=pick("type", default=DebtType.OTHER),
            is_deductible=parse_flag(pick("is_deductible", "isDeductible", default=False)),
        )


def parse_flag(value: Any) -> bool:
    """Interpret form and JSON flag values; strings like "false" are False."""

    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)
