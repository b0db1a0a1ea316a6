# -*- coding: utf-8 -*-
"""Custom exceptions for the form engine."""


class SubmissionError(Exception):
    """Exception raised by a submit collaborator.

    ``retryable`` tells the retry executor whether another attempt may
    succeed. Collaborators raise one of the two subclasses below.
    """

    retryable = False

    def __init__(self, message: str, status_code: int = None,
                 response_data: dict = None, context: str = None,
                 original_error: Exception = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_data = response_data or {}
        self.context = context
        self.original_error = original_error

    def __str__(self):
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message


class TransientSubmissionError(SubmissionError):
    """Network, timeout or 5xx-class failure; safe to retry with backoff."""

    retryable = True


class TerminalSubmissionError(SubmissionError):
    """Submission rejected on its merits (conflict, business rule); never retried."""

    retryable = False


class OperationCancelled(Exception):
    """Raised when a cancellation token fires during a pending operation or wait."""

    def __init__(self, reason: str = "cancelled"):
        super().__init__(reason)
        self.reason = reason


class WizardConfigurationError(Exception):
    """Wiring bug in a form definition. Never caught by the engine."""


class SchemaOwnershipError(WizardConfigurationError):
    """A step schema reported errors for fields its step does not own."""

    def __init__(self, step_id: str, fields):
        self.step_id = step_id
        self.fields = sorted(fields)
        super().__init__(
            f"Schema for step '{step_id}' reported errors for unowned fields: {self.fields}"
        )


class StepIndexError(WizardConfigurationError, IndexError):
    """A step index outside the defined sequence."""

    def __init__(self, index: int, step_count: int):
        self.index = index
        self.step_count = step_count
        super().__init__(f"Invalid step index: {index} (valid range: 0-{step_count - 1})")


class SessionClosedError(RuntimeError):
    """A form session was used after it completed or was abandoned."""
