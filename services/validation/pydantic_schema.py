# -*- coding: utf-8 -*-
"""
Pydantic adapter - uses a pydantic model as a step's rule library.
"""

from typing import Any, Dict, FrozenSet, Mapping, Optional, Type

from pydantic import BaseModel, ValidationError

from .validation_strategy import StepSchema, ValidationResult

_VALUE_ERROR_PREFIX = "Value error, "


class PydanticStepSchema(StepSchema):
    """
    Validates a step by instantiating a pydantic model from the form values.

    Field errors are reported under the first element of pydantic's ``loc``.
    Model-level errors (``loc == ()``, e.g. from a ``model_validator``) are
    reported under ``model_error_field``; without one they only mark the
    result invalid.
    """

    def __init__(self, model: Type[BaseModel], model_error_field: Optional[str] = None,
                 messages: Optional[Dict[str, str]] = None):
        """
        Args:
            model: Pydantic model class
            model_error_field: Owned field that carries model-level errors
            messages: Optional override messages keyed by field name
        """
        self.model = model
        self.model_error_field = model_error_field
        self.messages = messages or {}

    def validate(self, values: Mapping[str, Any], owned_fields: FrozenSet[str]) -> ValidationResult:
        result = ValidationResult()
        try:
            self.model.model_validate(dict(values))
        except ValidationError as e:
            for error in e.errors():
                loc = error.get("loc") or ()
                name = str(loc[0]) if loc else self.model_error_field
                message = self._message_for(name, error.get("msg", ""))
                if name is None:
                    result.is_valid = False
                    result.add_warning(message)
                    continue
                result.add_error(name, message)
        return result

    def _message_for(self, name: Optional[str], raw: str) -> str:
        if name in self.messages:
            return self.messages[name]
        if raw.startswith(_VALUE_ERROR_PREFIX):
            return raw[len(_VALUE_ERROR_PREFIX):]
        return raw
