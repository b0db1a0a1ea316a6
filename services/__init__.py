# -*- coding: utf-8 -*-
"""
FormFlow Service Layer
"""

# Lazy imports to avoid circular dependencies
__all__ = [
    "RetryExecutor",
    "CancellationToken",
    "SubmissionCoordinator",
    "HttpSubmitter",
]


def __getattr__(name):
    """Lazy import to avoid circular dependencies."""
    if name == "RetryExecutor":
        from .retry_executor import RetryExecutor
        return RetryExecutor
    elif name == "CancellationToken":
        from .retry_executor import CancellationToken
        return CancellationToken
    elif name == "SubmissionCoordinator":
        from .submission_coordinator import SubmissionCoordinator
        return SubmissionCoordinator
    elif name == "HttpSubmitter":
        from .http_submitter import HttpSubmitter
        return HttpSubmitter
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
