"""
SmartTodo Backend - Validators and Failure Aggregation
=======================================================

What:  The Validator contract used by the validation stage, plus the
       grouping of individual failures into a ValidationErrorMap.
How:   A validator inspects one request and returns every failure it finds
       (never raises for bad input). The validation stage runs all validators
       registered for a request type and groups the combined failures by field.

Ordering:
    Fields appear in the order they were first seen. Within a field, messages
    keep the order the validators produced them; across validators that order
    is simply the registration order and callers should not depend on it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional

from smarttodo.exceptions import ValidationErrorMap


@dataclass(frozen=True)
class ValidationFailure:
    """One failed rule: which field, and the message for the client."""

    field_name: str
    message: str


def group_failures(failures: Iterable[ValidationFailure]) -> ValidationErrorMap:
    """Group failures by field, keeping first-seen field order."""
    errors: ValidationErrorMap = {}
    for failure in failures:
        errors.setdefault(failure.field_name, []).append(failure.message)
    return errors


class Validator(ABC):
    """
    Abstract validator for one request type.

    Subclasses implement validate(); the small rule helpers below cover the
    checks the todo validators need and keep rule definitions one line each.
    """

    @abstractmethod
    def validate(self, request: Any) -> List[ValidationFailure]:
        """Return every failure found on `request` (empty list when valid)."""
        ...

    # ── Rule helpers ──────────────────────────────────────────────────────

    @staticmethod
    def rule(
        failures: List[ValidationFailure],
        field_name: str,
        passed: bool,
        message: str,
    ) -> bool:
        """Record a failure when `passed` is False. Returns `passed`."""
        if not passed:
            failures.append(ValidationFailure(field_name, message))
        return passed

    @staticmethod
    def first_failure(
        failures: List[ValidationFailure],
        field_name: str,
        checks: Iterable[tuple],
    ) -> None:
        """
        Run (predicate, message) checks in order and stop at the first failure.

        Used where a later rule is meaningless once an earlier one failed,
        e.g. a length check on a missing title.
        """
        for predicate, message in checks:
            if not predicate():
                failures.append(ValidationFailure(field_name, message))
                return


class FunctionValidator(Validator):
    """Adapts a plain `request -> failures` function to the Validator contract."""

    def __init__(self, func: Callable[[Any], List[ValidationFailure]], name: Optional[str] = None):
        self._func = func
        self.name = name or getattr(func, "__name__", "validator")

    def validate(self, request: Any) -> List[ValidationFailure]:
        return list(self._func(request))

    def __repr__(self) -> str:
        return f"<FunctionValidator {self.name}>"
