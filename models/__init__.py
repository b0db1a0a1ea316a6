# -*- coding: utf-8 -*-
"""
FormFlow Data Models
"""

from .step_definition import StepDefinition, StepSpec, build_steps, check_step_sequence
from .navigation_state import NavigationPhase, NavigationState, NavigationOutcome, NavigationResult
from .retry import RetryConfig, RetryState
from .field_descriptor import FieldDescriptor
