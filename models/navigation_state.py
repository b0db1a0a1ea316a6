# -*- coding: utf-8 -*-
"""
Navigation state and transition results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional


class NavigationPhase(str, Enum):
    IDLE = "idle"
    VALIDATING_STEP = "validating_step"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_busy(self) -> bool:
        """A validation or submission is in flight."""
        return self in (NavigationPhase.VALIDATING_STEP, NavigationPhase.SUBMITTING)


@dataclass(frozen=True)
class NavigationState:
    """
    Immutable snapshot of where the user is.

    Readers (rendering code) get a fresh snapshot from the navigator;
    only the navigator produces new ones.
    """

    current_index: int = 0
    visited: FrozenSet[int] = frozenset({0})
    phase: NavigationPhase = NavigationPhase.IDLE
    last_error: Optional[BaseException] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current_index": self.current_index,
            "visited": sorted(self.visited),
            "phase": self.phase.value,
            "last_error": str(self.last_error) if self.last_error else None,
        }


class NavigationOutcome(str, Enum):
    MOVED = "moved"
    INVALID = "invalid"
    REJECTED = "rejected"
    STALE = "stale"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class NavigationResult:
    """What a transition request did. Validation failures are reported here, never raised."""

    outcome: NavigationOutcome
    errors: Dict[str, str] = field(default_factory=dict)
    error: Optional[BaseException] = None
    reason: str = ""
    payload: Any = None
    attempts: int = 0

    @property
    def accepted(self) -> bool:
        return self.outcome in (NavigationOutcome.MOVED, NavigationOutcome.SUCCEEDED)

    @classmethod
    def rejected(cls, reason: str) -> 'NavigationResult':
        return cls(outcome=NavigationOutcome.REJECTED, reason=reason)
