# -*- coding: utf-8 -*-
"""
Submission Coordinator - full-form validation and the retried submit call.

Maps "every step valid" to "submit collaborator invoked", and the
collaborator's settlement to a SubmissionOutcome the navigator turns into
its terminal phase.
"""

import asyncio
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence

from models.retry import RetryConfig, RetryState
from models.step_definition import StepDefinition
from services.exceptions import OperationCancelled, SubmissionError
from services.retry_executor import CancellationToken, RetryExecutor
from services.validation.schema_runner import run_step_schema
from utils.logger import get_logger

logger = get_logger(__name__)

Submitter = Callable[[Mapping[str, Any]], Awaitable[Any]]


@dataclass(frozen=True)
class FullValidationReport:
    """Errors from validating every step against the whole form."""
    errors: Dict[str, str] = field(default_factory=dict)
    invalid_steps: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.invalid_steps


@dataclass(frozen=True)
class SubmissionOutcome:
    """How a submission settled."""
    succeeded: bool
    payload: Any = None
    error: Optional[BaseException] = None
    attempts: int = 0


def is_retryable_submission(error: BaseException) -> bool:
    """
    Retry only what the collaborator marked retryable, plus timeouts.

    Unclassified exceptions are not retried.
    """
    if isinstance(error, SubmissionError):
        return error.retryable
    return isinstance(error, (TimeoutError, asyncio.TimeoutError))


class SubmissionCoordinator:
    """
    Orchestrates the final validation pass and the submit call.

    Validation failures never reach the collaborator and are never retried;
    only transport-class failures go through the retry executor.
    """

    def __init__(self, submitter: Submitter, executor: Optional[RetryExecutor] = None,
                 retry_config: Optional[RetryConfig] = None):
        """
        Args:
            submitter: ``async submitter(values) -> payload``
            executor: Retry executor (a fresh one by default)
            retry_config: Retry policy (defaults to the configured policy)
        """
        self.submitter = submitter
        self.executor = executor or RetryExecutor()
        self.retry_config = retry_config or RetryConfig.from_config()

    async def validate_all(self, steps: Sequence[StepDefinition], values: Mapping[str, Any],
                           token: Optional[CancellationToken] = None) -> FullValidationReport:
        """
        Validate every step against the entire form.

        Later answers can invalidate earlier steps, so each schema sees all values.
        """
        errors: Dict[str, str] = {}
        invalid_steps: List[str] = []
        for step in steps:
            result = await run_step_schema(step, values, token)
            if not result.is_valid:
                invalid_steps.append(step.step_id)
                errors.update(result.errors)

        if invalid_steps:
            logger.warning(f"Full-form validation failed in steps {invalid_steps}: {errors}")
        return FullValidationReport(errors=errors, invalid_steps=invalid_steps)

    async def submit(self, values: Mapping[str, Any], token: Optional[CancellationToken] = None,
                     on_retry: Optional[Callable[[RetryState], Any]] = None) -> SubmissionOutcome:
        """
        Invoke the submit collaborator under the retry executor.

        Raises:
            OperationCancelled: the session was abandoned mid-submission
        """
        snapshot = MappingProxyType(dict(values))
        state = RetryState()

        try:
            payload = await self.executor.execute(
                lambda: self.submitter(snapshot),
                self.retry_config,
                token=token,
                is_retryable=is_retryable_submission,
                on_retry=on_retry,
                state=state,
            )
        except OperationCancelled:
            logger.info("Submission cancelled")
            raise
        except SubmissionError as e:
            logger.warning(f"Submission failed after {state.attempt} attempt(s): {e}")
            return SubmissionOutcome(succeeded=False, error=e, attempts=state.attempt)
        except Exception as e:
            if is_retryable_submission(e):
                logger.warning(f"Submission timed out after {state.attempt} attempt(s): {e}")
            else:
                logger.error(f"Submit collaborator raised an unclassified error: {e}", exc_info=True)
            return SubmissionOutcome(succeeded=False, error=e, attempts=state.attempt)

        attempts = state.attempt + 1
        logger.info(f"Submission succeeded on attempt {attempts}")
        return SubmissionOutcome(succeeded=True, payload=payload, attempts=attempts)
