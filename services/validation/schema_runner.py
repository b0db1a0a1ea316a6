# -*- coding: utf-8 -*-
"""Runs a step's schema, awaiting it when needed, and checks field ownership."""

import inspect
from typing import Any, Mapping, Optional, TYPE_CHECKING

from services.exceptions import WizardConfigurationError
from services.retry_executor import CancellationToken, run_cancellable
from .schema_composer import check_ownership
from .validation_strategy import ValidationResult

if TYPE_CHECKING:
    from models.step_definition import StepDefinition


async def run_step_schema(step: 'StepDefinition', values: Mapping[str, Any],
                          token: Optional[CancellationToken] = None) -> ValidationResult:
    """
    Validate ``values`` with the step's schema.

    Raises:
        SchemaOwnershipError: the schema reported on fields the step does not own
        WizardConfigurationError: the schema returned something other than a ValidationResult
        OperationCancelled: the token fired while an async schema was pending
    """
    outcome = step.schema.validate(values, step.fields)
    if inspect.isawaitable(outcome):
        outcome = await run_cancellable(outcome, token)

    if not isinstance(outcome, ValidationResult):
        raise WizardConfigurationError(
            f"Schema for step '{step.step_id}' returned {type(outcome).__name__}, "
            f"expected ValidationResult"
        )
    check_ownership(step.step_id, step.fields, outcome)
    return outcome
