# -*- coding: utf-8 -*-
"""
Schema Composer - Builds step schemas from explicit (field set, validator) rules.

Each rule declares the fields it may report on. Rule outputs are merged by a
pure function that refuses leaked errors, so a composed schema can never
report on a field outside its declaration.
"""

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple

from services.exceptions import SchemaOwnershipError
from .validation_strategy import StepSchema, ValidationResult, SchemaOutcome, is_blank

RuleCheck = Callable[[Mapping[str, Any]], Optional[Mapping[str, str]]]


@dataclass(frozen=True)
class FieldRule:
    """A validator function together with the fields it is allowed to report on."""
    fields: FrozenSet[str]
    check: RuleCheck
    name: str = "rule"


def field_rule(field_name: str, predicate: Callable[[Any], bool], message: str,
               skip_blank: bool = True) -> FieldRule:
    """
    Rule on a single value.

    Args:
        field_name: Field to check
        predicate: Returns True when the value is acceptable
        message: Error message when it is not
        skip_blank: Leave empty values to a required check
    """
    def check(values: Mapping[str, Any]) -> Dict[str, str]:
        value = values.get(field_name)
        if skip_blank and is_blank(value):
            return {}
        return {} if predicate(value) else {field_name: message}

    return FieldRule(fields=frozenset({field_name}), check=check, name=f"field:{field_name}")


def cross_field_rule(field_name: str, predicate: Callable[[Mapping[str, Any]], bool],
                     message: str) -> FieldRule:
    """
    Rule that reads any values but reports on one owned field.

    Used for constraints where a later answer can invalidate an earlier one.
    """
    def check(values: Mapping[str, Any]) -> Dict[str, str]:
        return {} if predicate(values) else {field_name: message}

    return FieldRule(fields=frozenset({field_name}), check=check, name=f"cross:{field_name}")


def merge_errors(results: Iterable[Tuple[FrozenSet[str], Mapping[str, str]]],
                 owner: str = "composite") -> Dict[str, str]:
    """
    Merge rule outputs. The first message reported for a field wins.

    Raises:
        SchemaOwnershipError: a rule reported on a field outside its declaration
    """
    merged: Dict[str, str] = {}
    for declared, errors in results:
        leaked = set(errors) - set(declared)
        if leaked:
            raise SchemaOwnershipError(owner, leaked)
        for name, message in errors.items():
            merged.setdefault(name, message)
    return merged


def check_ownership(step_id: str, owned_fields: FrozenSet[str], result: ValidationResult):
    """Fail loudly if a schema result names fields the step does not own."""
    leaked = set(result.errors) - set(owned_fields)
    if leaked:
        raise SchemaOwnershipError(step_id, leaked)


class CompositeStepSchema(StepSchema):
    """Step schema made of FieldRules."""

    def __init__(self, rules: List[FieldRule], name: str = "composite"):
        self.rules = list(rules)
        self.name = name

    @property
    def declared_fields(self) -> FrozenSet[str]:
        fields = set()
        for rule in self.rules:
            fields |= rule.fields
        return frozenset(fields)

    def validate(self, values: Mapping[str, Any], owned_fields: FrozenSet[str]) -> ValidationResult:
        # A rule declared on an unowned field is a wiring bug, even if it passes today
        undeclared = self.declared_fields - set(owned_fields)
        if undeclared:
            raise SchemaOwnershipError(self.name, undeclared)

        results = [(rule.fields, rule.check(values) or {}) for rule in self.rules]
        return ValidationResult.from_errors(merge_errors(results, owner=self.name))


class AllOfSchema(StepSchema):
    """Runs several schemas against the same step and merges their results."""

    def __init__(self, *schemas: StepSchema):
        self.schemas = list(schemas)

    def validate(self, values: Mapping[str, Any], owned_fields: FrozenSet[str]) -> SchemaOutcome:
        outcomes = []
        try:
            for schema in self.schemas:
                outcomes.append(schema.validate(values, owned_fields))
        except Exception:
            _close_pending(outcomes)
            raise
        if any(inspect.isawaitable(outcome) for outcome in outcomes):
            return self._gather(outcomes)
        return self._combine(outcomes)

    async def _gather(self, outcomes) -> ValidationResult:
        resolved = []
        try:
            for position, outcome in enumerate(outcomes):
                resolved.append(await outcome if inspect.isawaitable(outcome) else outcome)
        except BaseException:
            _close_pending(outcomes[position + 1:])
            raise
        return self._combine(resolved)

    @staticmethod
    def _combine(results: List[ValidationResult]) -> ValidationResult:
        combined = ValidationResult()
        for result in results:
            for name, message in result.errors.items():
                combined.add_error(name, message)
            combined.warnings.extend(result.warnings)
            if not result.is_valid:
                combined.is_valid = False
        return combined


def _close_pending(outcomes):
    """Close coroutines that will never be awaited."""
    for outcome in outcomes:
        if inspect.iscoroutine(outcome):
            outcome.close()
