# -*- coding: utf-8 -*-
"""Step schema package."""

from .validation_strategy import (
    StepSchema, ValidationResult, RequiredFieldsSchema, PatternSchema,
    CallableSchema, AlwaysValidSchema,
)
from .schema_composer import (
    FieldRule, field_rule, cross_field_rule, merge_errors, check_ownership,
    CompositeStepSchema, AllOfSchema,
)
from .pydantic_schema import PydanticStepSchema

__all__ = [
    'StepSchema', 'ValidationResult', 'RequiredFieldsSchema', 'PatternSchema',
    'CallableSchema', 'AlwaysValidSchema',
    'FieldRule', 'field_rule', 'cross_field_rule', 'merge_errors', 'check_ownership',
    'CompositeStepSchema', 'AllOfSchema', 'PydanticStepSchema',
]
