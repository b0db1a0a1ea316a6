# -*- coding: utf-8 -*-
"""Centralized error message mapper."""

import asyncio
from typing import Optional

import requests

from models.retry import RetryConfig, RetryState
from services.exceptions import SubmissionError, TerminalSubmissionError, TransientSubmissionError
from services.translation_manager import tr
from utils.logger import get_logger

logger = get_logger(__name__)


def map_terminal_error(error: TerminalSubmissionError) -> str:
    """Map a rejected submission to a translated message."""
    status = error.status_code

    if status == 409:
        return tr("error.submit.conflict")
    if status in (401, 403):
        return tr("error.submit.unauthorized")

    details = _extract_validation_details(error.response_data)
    if details:
        logger.warning(f"Submission rejected ({status}): {details}")
        return tr("error.submit.rejected", details=details)
    return tr("error.submit.rejected_generic")


def map_transient_error(error: TransientSubmissionError) -> str:
    """Map a transport failure to a translated message."""
    if _is_timeout(error):
        return tr("error.submit.timeout")
    return tr("error.submit.unavailable")


def map_exception(error: BaseException, attempts: Optional[int] = None) -> str:
    """Map any submission failure to a user-friendly message.

    Technical details are logged only - never shown to the user.

    Args:
        error: The failure retained by the session
        attempts: Number of calls made; more than one means retries were exhausted
    """
    if isinstance(error, TerminalSubmissionError):
        return map_terminal_error(error)

    if isinstance(error, TransientSubmissionError):
        message = map_transient_error(error)
    elif isinstance(error, (TimeoutError, asyncio.TimeoutError)):
        message = tr("error.submit.timeout")
    elif isinstance(error, SubmissionError):
        message = tr("error.submit.unavailable") if error.retryable else tr("error.submit.rejected_generic")
    else:
        logger.warning(f"Unexpected error: {error}")
        return tr("error.submit.unknown")

    if attempts and attempts > 1:
        return tr("error.submit.retries_exhausted", reason=message, attempts=attempts)
    return message


def describe_retry(state: RetryState, config: RetryConfig) -> str:
    """Text for the retrying/backoff indicator."""
    return tr(
        "wizard.retrying",
        seconds=f"{state.next_delay:g}",
        attempt=state.attempt + 1,
        max_attempts=config.max_retries + 1,
    )


def _is_timeout(error: SubmissionError) -> bool:
    if error.status_code in (408, 504):
        return True
    original = error.original_error
    if isinstance(original, (requests.exceptions.Timeout, TimeoutError, asyncio.TimeoutError)):
        return True
    msg = str(original) if original else error.message
    return "timeout" in msg.lower() or "timed out" in msg.lower()


def _extract_validation_details(response_data: dict) -> str:
    """Extract validation error details from a rejection body."""
    if not response_data:
        return ""

    errors = response_data.get("errors", {})
    if isinstance(errors, dict):
        lines = []
        for field, messages in errors.items():
            if isinstance(messages, list):
                for msg in messages:
                    lines.append(f"• {field}: {msg}")
            else:
                lines.append(f"• {field}: {messages}")
        if lines:
            return "\n".join(lines)

    if isinstance(errors, list) and errors:
        return "\n".join(f"• {e}" for e in errors)

    title = response_data.get("title", "")
    if title:
        return title

    return ""
