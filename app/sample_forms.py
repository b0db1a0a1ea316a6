# -*- coding: utf-8 -*-
"""
Sample forms used by the console runner and the test-suite.

The sign-up form has three steps:
    account  - username and plan
    contact  - email and optional phone
    confirm  - seat count and terms acceptance

The plan on the first step depends on the seat count chosen on the last one,
so a valid first step can become invalid later in the form.
"""

import re
from typing import Any, List, Mapping

from pydantic import BaseModel, Field, field_validator

from models.step_definition import StepDefinition, StepSpec, build_steps
from services.validation import (
    AllOfSchema, CompositeStepSchema, PatternSchema, PydanticStepSchema, RequiredFieldsSchema,
    cross_field_rule, field_rule,
)

PLANS = ("free", "team")

USERNAME_PATTERN = r"[A-Za-z][A-Za-z0-9_.-]{2,31}"
EMAIL_PATTERN = r"[^@\s]+@[^@\s]+\.[^@\s]+"
PHONE_PATTERN = r"\+?[0-9 ()-]{7,20}"

MAX_SEATS = 50


def _seats(values: Mapping[str, Any]) -> int:
    try:
        return int(values.get("seats") or 1)
    except (TypeError, ValueError):
        return 1


class ConfirmationModel(BaseModel):
    """Rules for the confirmation step."""

    seats: int = Field(ge=1, le=MAX_SEATS)
    accept_terms: bool

    @field_validator("accept_terms")
    @classmethod
    def terms_must_be_accepted(cls, value: bool) -> bool:
        if not value:
            raise ValueError("You must accept the terms")
        return value


def build_signup_steps() -> List[StepDefinition]:
    """Build the three-step sign-up form."""
    account = AllOfSchema(
        RequiredFieldsSchema(
            ["username", "plan"],
            field_labels={"username": "Username", "plan": "Plan"},
        ),
        CompositeStepSchema([
            field_rule(
                "username",
                lambda value: _matches(USERNAME_PATTERN, value),
                "Username must be 3-32 characters and start with a letter",
            ),
            field_rule("plan", lambda value: value in PLANS, "Plan must be one of: " + ", ".join(PLANS)),
            cross_field_rule(
                "plan",
                lambda values: not (values.get("plan") == "free" and _seats(values) > 1),
                "The free plan includes a single seat",
            ),
        ], name="account"),
    )

    contact = AllOfSchema(
        PatternSchema("email", EMAIL_PATTERN, "Enter a valid email address"),
        PatternSchema("phone", PHONE_PATTERN, "Enter a valid phone number", required=False),
    )

    confirm = PydanticStepSchema(
        ConfirmationModel,
        messages={
            "seats": f"Seats must be a whole number between 1 and {MAX_SEATS}",
            "accept_terms": "You must accept the terms",
        },
    )

    return build_steps([
        StepSpec("account", ["username", "plan"], account, title="Account"),
        StepSpec("contact", ["email", "phone"], contact, title="Contact details"),
        StepSpec("confirm", ["seats", "accept_terms"], confirm, title="Confirm"),
    ])


def _matches(pattern: str, value: Any) -> bool:
    return re.fullmatch(pattern, str(value)) is not None
