# -*- coding: utf-8 -*-
"""
Step Schema - Abstract interface for step-scoped validation.

A step schema is a pure validator bound to one step: given the form values
and the set of fields the step owns, it reports validity and field-level
messages. Concrete rule libraries plug in behind this interface.
"""

import inspect
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, FrozenSet, List, Mapping, Optional, Union


@dataclass
class ValidationResult:
    """Result of step validation."""
    is_valid: bool = True
    errors: Dict[str, str] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, field_name: str, message: str):
        """Add an error message for a field. The first message per field wins."""
        self.errors.setdefault(field_name, message)
        self.is_valid = False

    def add_warning(self, message: str):
        """Add a warning message."""
        self.warnings.append(message)

    def has_errors(self) -> bool:
        """Check if there are any errors."""
        return len(self.errors) > 0

    def has_warnings(self) -> bool:
        """Check if there are any warnings."""
        return len(self.warnings) > 0

    @classmethod
    def from_errors(cls, errors: Mapping[str, str]) -> 'ValidationResult':
        return cls(is_valid=not errors, errors=dict(errors))


SchemaOutcome = Union[ValidationResult, Awaitable[ValidationResult]]


class StepSchema(ABC):
    """
    Abstract base class for step schemas.

    ``validate`` must be pure: no I/O and no side effects, except that an
    implementation needing a round trip (e.g. a uniqueness check) may return
    an awaitable instead of a result.
    """

    @abstractmethod
    def validate(self, values: Mapping[str, Any], owned_fields: FrozenSet[str]) -> SchemaOutcome:
        """
        Validate the values of one step.

        Args:
            values: Form values visible to the step
            owned_fields: Fields the step owns; only these may carry errors

        Returns:
            ValidationResult (or an awaitable of one)
        """
        pass


def is_blank(value: Any) -> bool:
    """Empty for the purposes of a required check."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset)):
        return len(value) == 0
    return False


class RequiredFieldsSchema(StepSchema):
    """
    Validator for checking required fields.

    Validates that specified fields exist and are not empty.
    """

    def __init__(self, required_fields: List[str], field_labels: Optional[Dict[str, str]] = None,
                 message: str = "{label} is required"):
        """
        Initialize validator with required fields.

        Args:
            required_fields: Field names that must be present and non-empty
            field_labels: Optional mapping of field names to human-readable labels
            message: Message template; ``{label}`` is substituted
        """
        self.required_fields = list(required_fields)
        self.field_labels = field_labels or {}
        self.message = message

    def validate(self, values: Mapping[str, Any], owned_fields: FrozenSet[str]) -> ValidationResult:
        result = ValidationResult()
        for name in self.required_fields:
            if is_blank(values.get(name)):
                label = self.field_labels.get(name, name)
                result.add_error(name, self.message.format(label=label))
        return result


class PatternSchema(StepSchema):
    """Validates that a text field fully matches a regular expression."""

    def __init__(self, field_name: str, pattern: str, message: str, required: bool = True):
        self.field_name = field_name
        self.pattern = re.compile(pattern)
        self.message = message
        self.required = required

    def validate(self, values: Mapping[str, Any], owned_fields: FrozenSet[str]) -> ValidationResult:
        result = ValidationResult()
        value = values.get(self.field_name)
        if is_blank(value):
            if self.required:
                result.add_error(self.field_name, self.message)
            return result
        if not self.pattern.fullmatch(str(value)):
            result.add_error(self.field_name, self.message)
        return result


class CallableSchema(StepSchema):
    """
    Wraps a plain function ``fn(values) -> Dict[field, message]``.

    The function may be a coroutine function for checks that need a round trip.
    """

    def __init__(self, fn: Callable[[Mapping[str, Any]], Any]):
        self.fn = fn

    def validate(self, values: Mapping[str, Any], owned_fields: FrozenSet[str]) -> SchemaOutcome:
        if inspect.iscoroutinefunction(self.fn):
            # Called lazily so an outcome closed before it runs leaves nothing pending
            return self._finish(self.fn, values)
        outcome = self.fn(values)
        if hasattr(outcome, "__await__"):
            return self._finish(lambda _: outcome, values)
        return ValidationResult.from_errors(outcome or {})

    @staticmethod
    async def _finish(fn, values) -> ValidationResult:
        return ValidationResult.from_errors((await fn(values)) or {})


class AlwaysValidSchema(StepSchema):
    """Schema for steps without constraints (e.g. a review page)."""

    def validate(self, values: Mapping[str, Any], owned_fields: FrozenSet[str]) -> ValidationResult:
        return ValidationResult()
