# -*- coding: utf-8 -*-
"""
Wizard Framework - multi-step form engine for FormFlow.

Provides the session, navigator and state store behind a multi-step form,
with consistent navigation, validation and submission handling.

The Qt signal bridge lives in ``ui.wizards.framework.qt_bridge`` and is
imported on demand so the engine itself does not need PyQt5.
"""

from .form_state_store import FormStateStore
from .step_navigator import StepNavigator
from .wizard_context import WizardSession
from .wizard_listener import WizardListener

__all__ = [
    'FormStateStore',
    'StepNavigator',
    'WizardSession',
    'WizardListener',
]
