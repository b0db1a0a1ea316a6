# -*- coding: utf-8 -*-
"""
Tests for the Submission Coordinator.

Tests cover:
- Full-form validation across steps
- Retry classification of submit failures
- Attempt counting
- Values handed to the collaborator
"""

import asyncio

import pytest

from models.retry import RetryConfig
from services.exceptions import (
    OperationCancelled, SubmissionError, TerminalSubmissionError, TransientSubmissionError,
)
from services.retry_executor import CancellationToken
from services.submission_coordinator import SubmissionCoordinator, is_retryable_submission


@pytest.fixture
def coordinator_factory(executor, retry_config):
    def factory(submitter):
        return SubmissionCoordinator(submitter, executor=executor, retry_config=retry_config)
    return factory


class TestRetryClassification:
    """Test which failures are retried."""

    @pytest.mark.parametrize("error, expected", [
        (TransientSubmissionError("503"), True),
        (TerminalSubmissionError("409"), False),
        (SubmissionError("plain"), False),
        (TimeoutError(), True),
        (asyncio.TimeoutError(), True),
        (ValueError("bug"), False),
    ])
    def test_is_retryable_submission(self, error, expected):
        assert is_retryable_submission(error) is expected


class TestValidateAll:
    """Test the final validation pass."""

    @pytest.mark.asyncio
    async def test_valid_form(self, coordinator_factory, make_submitter, three_steps):
        coordinator = coordinator_factory(make_submitter())

        report = await coordinator.validate_all(
            three_steps, {"name": "Ada", "email": "ada@example.org"},
        )

        assert report.is_valid
        assert report.errors == {}

    @pytest.mark.asyncio
    async def test_collects_errors_from_every_step(self, coordinator_factory, make_submitter, three_steps):
        coordinator = coordinator_factory(make_submitter())

        report = await coordinator.validate_all(three_steps, {"email": "bad"})

        assert not report.is_valid
        assert set(report.errors) == {"name", "email"}
        assert report.invalid_steps == ["profile", "contact"]


class TestSubmit:
    """Test submission through the retry executor."""

    @pytest.mark.asyncio
    async def test_success(self, coordinator_factory, make_submitter):
        submitter = make_submitter({"id": "abc"})
        coordinator = coordinator_factory(submitter)

        outcome = await coordinator.submit({"name": "Ada"})

        assert outcome.succeeded
        assert outcome.payload == {"id": "abc"}
        assert outcome.attempts == 1
        assert submitter.calls == [{"name": "Ada"}]

    @pytest.mark.asyncio
    async def test_transient_failures_exhaust_retries(self, coordinator_factory, make_submitter, fake_sleep):
        submitter = make_submitter(*[TransientSubmissionError("down") for _ in range(10)])
        coordinator = coordinator_factory(submitter)

        outcome = await coordinator.submit({"name": "Ada"})

        assert not outcome.succeeded
        assert isinstance(outcome.error, TransientSubmissionError)
        assert outcome.attempts == 4
        assert len(submitter.calls) == 4
        assert fake_sleep.delays == [1.0, 2.0, 4.0]

    @pytest.mark.asyncio
    async def test_terminal_failure_is_not_retried(self, coordinator_factory, make_submitter, fake_sleep):
        submitter = make_submitter(TerminalSubmissionError("conflict", status_code=409))
        coordinator = coordinator_factory(submitter)

        outcome = await coordinator.submit({"name": "Ada"})

        assert not outcome.succeeded
        assert outcome.error.status_code == 409
        assert outcome.attempts == 1
        assert len(submitter.calls) == 1
        assert fake_sleep.delays == []

    @pytest.mark.asyncio
    async def test_unclassified_error_is_not_retried(self, coordinator_factory, make_submitter):
        submitter = make_submitter(KeyError("payload"))
        coordinator = coordinator_factory(submitter)

        outcome = await coordinator.submit({})

        assert not outcome.succeeded
        assert isinstance(outcome.error, KeyError)
        assert len(submitter.calls) == 1

    @pytest.mark.asyncio
    async def test_success_after_retry_counts_attempts(self, coordinator_factory, make_submitter):
        submitter = make_submitter(TimeoutError(), {"id": 1})
        coordinator = coordinator_factory(submitter)

        outcome = await coordinator.submit({})

        assert outcome.succeeded
        assert outcome.attempts == 2

    @pytest.mark.asyncio
    async def test_collaborator_gets_read_only_snapshot(self, coordinator_factory):
        received = []

        async def submitter(values):
            received.append(values)
            with pytest.raises(TypeError):
                values["name"] = "changed"
            return {}

        coordinator = coordinator_factory(submitter)
        values = {"name": "Ada"}
        await coordinator.submit(values)
        values["name"] = "Grace"

        assert received[0]["name"] == "Ada"

    @pytest.mark.asyncio
    async def test_cancelled_submission_raises(self, executor, make_submitter):
        token = CancellationToken()
        token.cancel("closed")
        coordinator = SubmissionCoordinator(make_submitter(), executor=executor,
                                            retry_config=RetryConfig())

        with pytest.raises(OperationCancelled):
            await coordinator.submit({}, token)
