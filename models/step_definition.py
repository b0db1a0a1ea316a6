# -*- coding: utf-8 -*-
"""
Step definition model.
"""

from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Sequence, TYPE_CHECKING

from services.exceptions import WizardConfigurationError

if TYPE_CHECKING:
    from services.validation.validation_strategy import StepSchema


@dataclass(frozen=True)
class StepDefinition:
    """
    One step of a multi-step form.

    Owns a subset of the form's fields and the schema that validates them.
    Immutable once the step sequence is built.
    """

    step_id: str
    index: int
    fields: FrozenSet[str]
    schema: 'StepSchema'

    # Display
    title: str = ""
    description: str = ""

    def __post_init__(self):
        # Accept any iterable of names
        if not isinstance(self.fields, frozenset):
            object.__setattr__(self, "fields", frozenset(self.fields))

    def owns(self, field_name: str) -> bool:
        """Check if the step owns a field."""
        return field_name in self.fields


@dataclass(frozen=True)
class StepSpec:
    """Positionless step description, turned into StepDefinitions by build_steps()."""

    step_id: str
    fields: Iterable[str]
    schema: 'StepSchema'
    title: str = ""
    description: str = ""


def build_steps(specs: Sequence[StepSpec]) -> List[StepDefinition]:
    """Assign ordinal positions to step specs."""
    return [
        StepDefinition(
            step_id=spec.step_id,
            index=position,
            fields=frozenset(spec.fields),
            schema=spec.schema,
            title=spec.title,
            description=spec.description,
        )
        for position, spec in enumerate(specs)
    ]


def check_step_sequence(steps: Sequence[StepDefinition]):
    """
    Verify a step sequence is well formed.

    Raises:
        WizardConfigurationError: empty sequence, index/position mismatch,
            duplicate step ids, or a field owned by more than one step
    """
    if not steps:
        raise WizardConfigurationError("A form needs at least one step")

    seen_ids = set()
    owners = {}
    for position, step in enumerate(steps):
        if step.index != position:
            raise WizardConfigurationError(
                f"Step '{step.step_id}' has index {step.index} but sits at position {position}"
            )
        if step.step_id in seen_ids:
            raise WizardConfigurationError(f"Duplicate step id: '{step.step_id}'")
        seen_ids.add(step.step_id)

        for name in step.fields:
            if name in owners:
                raise WizardConfigurationError(
                    f"Field '{name}' is owned by both '{owners[name]}' and '{step.step_id}'"
                )
            owners[name] = step.step_id
