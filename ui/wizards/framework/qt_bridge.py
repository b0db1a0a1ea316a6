# -*- coding: utf-8 -*-
"""
Qt Bridge - re-emits session events as Qt signals.

Only QtCore is used, so the bridge works without a display. A widget layer
connects to these signals the same way it connects to any QObject.
"""

from typing import Any, Mapping

from PyQt5.QtCore import QObject, pyqtSignal

from models.navigation_state import NavigationPhase
from models.retry import RetryState

from .wizard_listener import WizardListener


class WizardSignals(QObject, WizardListener):
    """
    Listener that turns session hooks into signals.

    Usage:
        signals = WizardSignals()
        session.add_listener(signals)
        signals.step_changed.connect(self._on_step_changed)
    """

    # Signals
    step_changed = pyqtSignal(int, int)  # old index, new index
    phase_changed = pyqtSignal(str, str)  # old phase value, new phase value
    field_changed = pyqtSignal(str, object)
    validation_failed = pyqtSignal(int, object)  # step index, field errors
    retry_scheduled = pyqtSignal(int, float)  # failed attempts so far, delay in seconds
    submission_finished = pyqtSignal(bool, object, object)  # succeeded, payload, error

    def __init__(self, parent=None):
        super().__init__(parent)

    def on_step_changed(self, old_index: int, new_index: int):
        self.step_changed.emit(old_index, new_index)

    def on_phase_changed(self, old_phase: NavigationPhase, new_phase: NavigationPhase):
        self.phase_changed.emit(old_phase.value, new_phase.value)

    def on_field_changed(self, name: str, value: Any):
        self.field_changed.emit(name, value)

    def on_validation_failed(self, step_index: int, errors: Mapping[str, str]):
        self.validation_failed.emit(step_index, dict(errors))

    def on_retry_scheduled(self, state: RetryState):
        self.retry_scheduled.emit(state.attempt, float(state.next_delay))

    def on_submission_finished(self, succeeded: bool, payload: Any, error: Any):
        self.submission_finished.emit(succeeded, payload, error)
