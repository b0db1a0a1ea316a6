# -*- coding: utf-8 -*-
"""
Wizard Listener - hooks through which rendering adapters follow a session.

Every method is optional; override the ones you need.
"""

from typing import Any, Mapping

from models.navigation_state import NavigationPhase
from models.retry import RetryState


class WizardListener:
    """Base class for session observers. All hooks are no-ops."""

    def on_step_changed(self, old_index: int, new_index: int):
        """The current step pointer moved."""
        pass

    def on_phase_changed(self, old_phase: NavigationPhase, new_phase: NavigationPhase):
        """The navigation phase changed."""
        pass

    def on_field_changed(self, name: str, value: Any):
        """A field value was set."""
        pass

    def on_validation_failed(self, step_index: int, errors: Mapping[str, str]):
        """Forward navigation or submission was blocked by validation errors."""
        pass

    def on_retry_scheduled(self, state: RetryState):
        """A submission attempt failed and another one is scheduled after ``state.next_delay``."""
        pass

    def on_submission_finished(self, succeeded: bool, payload: Any, error: Any):
        """A submission reached SUCCEEDED or FAILED."""
        pass
