"""Generic calculator state: values, validation and derived results.

A calculator owns one set of input values. Every mutation re-validates the
inputs and, when they are valid, recomputes the result synchronously on the
same call stack.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Mapping, Optional, TypeVar

from ..domain.repositories.progress import ProgressTracker
from ..logging_config import get_logger

logger = get_logger(__name__)

R = TypeVar("R")

Validator = Callable[[Any, Mapping[str, Any]], bool]


@dataclass(frozen=True, slots=True)
class ValidationRule:
    """A predicate over a field value (and all values) plus its error message."""

    check: Validator
    message: str

    def validate(self, value: Any, values: Mapping[str, Any] | None = None) -> bool:
        return bool(self.check(value, values or {}))


@dataclass(frozen=True, slots=True)
class FieldError:
    field: str
    message: str


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class common_validations:  # noqa: N801 - used like a namespace
    """Factories for the rules shared by every calculator."""

    @staticmethod
    def required(message: str = "This field is required") -> ValidationRule:
        return ValidationRule(lambda value, _: value is not None and value != "", message)

    @staticmethod
    def min(minimum: float, message: str | None = None) -> ValidationRule:
        return ValidationRule(
            lambda value, _: value is None or (_is_number(value) and value >= minimum),
            message or f"Value must be at least {minimum}",
        )

    @staticmethod
    def max(maximum: float, message: str | None = None) -> ValidationRule:
        return ValidationRule(
            lambda value, _: value is None or (_is_number(value) and value <= maximum),
            message or f"Value must be no more than {maximum}",
        )

    @staticmethod
    def positive(message: str = "Value must be positive") -> ValidationRule:
        return ValidationRule(lambda value, _: _is_number(value) and value > 0, message)

    @staticmethod
    def percentage(message: str = "Value must be between 0 and 100") -> ValidationRule:
        return ValidationRule(lambda value, _: _is_number(value) and 0 <= value <= 100, message)


@dataclass
class CalculatorState(Generic[R]):
    values: dict[str, Any]
    errors: list[FieldError] = field(default_factory=list)
    is_valid: bool = True
    is_dirty: bool = False
    result: Optional[R] = None


class CalculatorBase(Generic[R]):
    """Holds calculator inputs and keeps the derived result current."""

    def __init__(
        self,
        *,
        calculator_id: str,
        initial_values: Mapping[str, Any],
        compute: Callable[[dict[str, Any]], R],
        validation: Mapping[str, list[ValidationRule]] | None = None,
        parsers: Mapping[str, Callable[[Any], Any]] | None = None,
        formatters: Mapping[str, Callable[[Any], str]] | None = None,
        dependencies: Mapping[str, list[str]] | None = None,
        progress: ProgressTracker | None = None,
    ) -> None:
        self.calculator_id = calculator_id
        self._initial_values = dict(initial_values)
        self._compute = compute
        self._validation = dict(validation or {})
        self._parsers = dict(parsers or {})
        self._formatters = dict(formatters or {})
        self._dependencies = dict(dependencies or {})
        self._progress = progress
        self._state: CalculatorState[R] = CalculatorState(values=dict(self._initial_values))

        if progress is not None:
            progress.record_calculator_usage(calculator_id)

    @property
    def state(self) -> CalculatorState[R]:
        return self._state

    @property
    def values(self) -> dict[str, Any]:
        return self._state.values

    @property
    def result(self) -> Optional[R]:
        return self._state.result

    def update_field(self, name: str, value: Any) -> None:
        """Set one field, then re-validate and recompute."""

        self._apply({name: value})

    def set_values(self, updates: Mapping[str, Any]) -> None:
        """Set several fields at once, then re-validate and recompute."""

        self._apply(updates)

    def _apply(self, updates: Mapping[str, Any]) -> None:
        values = dict(self._state.values)
        for name, value in updates.items():
            parser = self._parsers.get(name)
            values[name] = parser(value) if parser else value
        self._state.values = values
        self._state.is_dirty = True
        self._state.errors = self._validate_fields(self._validation.keys(), values)
        self._state.is_valid = not self._state.errors
        self._state.result = self._recompute() if self._state.is_valid else None

    def _validate_fields(self, names, values: Mapping[str, Any]) -> list[FieldError]:
        errors: list[FieldError] = []
        for name in names:
            for rule in self._validation.get(name, ()):
                if not rule.validate(values.get(name), values):
                    errors.append(FieldError(field=name, message=rule.message))
        return errors

    def validate_field(self, name: str) -> bool:
        """Validate *name* and any fields that depend on it."""

        targets = [name, *self._dependencies.get(name, [])]
        kept = [error for error in self._state.errors if error.field not in targets]
        fresh = self._validate_fields(targets, self._state.values)
        self._state.errors = kept + fresh
        self._state.is_valid = not self._state.errors
        return not fresh

    def validate(self) -> bool:
        """Validate every field."""

        self._state.errors = self._validate_fields(self._validation.keys(), self._state.values)
        self._state.is_valid = not self._state.errors
        return self._state.is_valid

    def _recompute(self) -> Optional[R]:
        try:
            return self._compute(dict(self._state.values))
        except Exception:
            logger.exception("Calculation failed", extra={"calculator_id": self.calculator_id})
            return None

    async def calculate(self) -> Optional[R]:
        """Validate and compute; async only so UI callers can await it."""

        if not self.validate():
            self._state.result = None
            return None
        self._state.result = self._recompute()
        return self._state.result

    def reset(self) -> None:
        """Restore initial values and clear errors and result."""

        self._state = CalculatorState(values=dict(self._initial_values))

    def format_field(self, name: str) -> str:
        value = self._state.values.get(name)
        formatter = self._formatters.get(name)
        if formatter is None:
            return "" if value is None else str(value)
        return formatter(value)


__all__ = [
    "CalculatorBase",
    "CalculatorState",
    "FieldError",
    "ValidationRule",
    "common_validations",
]
