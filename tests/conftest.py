# -*- coding: utf-8 -*-
"""
Shared fixtures for the form engine tests.
"""

import asyncio
import sys
from pathlib import Path
from typing import List, Optional

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from models.retry import RetryConfig  # noqa: E402
from models.step_definition import StepSpec, build_steps  # noqa: E402
from services.exceptions import OperationCancelled  # noqa: E402
from services.retry_executor import RetryExecutor  # noqa: E402
from services.validation import (  # noqa: E402
    AlwaysValidSchema, PatternSchema, RequiredFieldsSchema,
)


class FakeSleep:
    """Records backoff delays instead of waiting for them."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float, token=None):
        if token is not None:
            token.raise_if_cancelled()
        self.delays.append(delay)
        # Let other tasks run, as a real sleep would
        await asyncio.sleep(0)
        if token is not None and token.cancelled:
            raise OperationCancelled(token.reason or "cancelled")


class RecordingSubmitter:
    """Submit collaborator that replays scripted outcomes."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    async def __call__(self, values):
        self.calls.append(dict(values))
        outcome = self.outcomes.pop(0) if self.outcomes else {"id": len(self.calls)}
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture
def fake_sleep():
    return FakeSleep()


@pytest.fixture
def executor(fake_sleep):
    return RetryExecutor(sleep=fake_sleep)


@pytest.fixture
def retry_config():
    return RetryConfig(max_retries=3, initial_delay=1.0, max_delay=30.0, backoff_multiplier=2.0)


def make_three_steps(email_schema: Optional[PatternSchema] = None):
    """Name / email / review form used across the session tests."""
    return build_steps([
        StepSpec("profile", ["name"], RequiredFieldsSchema(["name"], {"name": "Name"})),
        StepSpec("contact", ["email"], email_schema or PatternSchema(
            "email", r"[^@\s]+@[^@\s]+\.[^@\s]+", "Enter a valid email address",
        )),
        StepSpec("review", ["notes"], AlwaysValidSchema()),
    ])


@pytest.fixture
def three_steps():
    return make_three_steps()


@pytest.fixture
def make_submitter():
    """Factory for scripted submit collaborators."""
    return RecordingSubmitter
