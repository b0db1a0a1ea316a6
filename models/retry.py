# -*- coding: utf-8 -*-
"""
Retry policy and per-chain retry state.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RetryConfig:
    """
    Bounded exponential backoff policy. Delays are in seconds.

    The delay before retry number ``n`` (1-based) is
    ``min(initial_delay * backoff_multiplier ** (n - 1), max_delay)``.
    """

    max_retries: int = 3
    initial_delay: float = 1.0
    max_delay: float = 30.0
    backoff_multiplier: float = 2.0

    def __post_init__(self):
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0 (got {self.max_retries})")
        if self.initial_delay < 0:
            raise ValueError(f"initial_delay must be >= 0 (got {self.initial_delay})")
        if self.max_delay < self.initial_delay:
            raise ValueError(
                f"max_delay ({self.max_delay}) must be >= initial_delay ({self.initial_delay})"
            )
        if self.backoff_multiplier < 1:
            raise ValueError(
                f"backoff_multiplier must be >= 1 (got {self.backoff_multiplier})"
            )

    def delay_for(self, attempt: int) -> float:
        """Delay to wait after the ``attempt``-th failure."""
        if attempt <= 0:
            return 0.0
        return min(self.initial_delay * (self.backoff_multiplier ** (attempt - 1)), self.max_delay)

    @classmethod
    def from_config(cls) -> 'RetryConfig':
        """Build the default policy from application configuration."""
        from app.config import Config

        return cls(
            max_retries=Config.MAX_RETRIES,
            initial_delay=Config.INITIAL_DELAY,
            max_delay=Config.MAX_DELAY,
            backoff_multiplier=Config.BACKOFF_MULTIPLIER,
        )


@dataclass
class RetryState:
    """Progress of one retry chain. Lives only for one executor invocation."""

    attempt: int = 0
    last_error: Optional[BaseException] = None
    next_delay: float = 0.0

    def reset(self, config: RetryConfig):
        """Start a new chain."""
        self.attempt = 0
        self.last_error = None
        self.next_delay = config.initial_delay
