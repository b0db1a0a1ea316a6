# -*- coding: utf-8 -*-
"""
Wizard Session - one user's pass through a multi-step form.

Owns the form state store, the navigator and the submission coordinator,
and provides:
- Field access for rendering adapters
- Serialization/deserialization of drafts
- Lifecycle status tracking
- Reference number generation
"""

from datetime import datetime
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence
import uuid

from app.config import Config, SessionStatus
from models.field_descriptor import FieldDescriptor
from models.navigation_state import NavigationPhase, NavigationResult, NavigationState
from models.retry import RetryConfig
from models.step_definition import StepDefinition, check_step_sequence
from services.exceptions import SessionClosedError
from services.retry_executor import CancellationToken, RetryExecutor
from services.submission_coordinator import SubmissionCoordinator, Submitter
from utils.logger import get_logger

from .form_state_store import FormStateStore
from .step_navigator import StepNavigator
from .wizard_listener import WizardListener

logger = get_logger(__name__)


class WizardSession:
    """
    A form session.

    FormValues, FieldErrors and NavigationState live here and nowhere else;
    they are mutated only through the methods below.

    Usage:
        session = WizardSession(steps, submitter=HttpSubmitter(url))
        session.set_field("email", "a@b.com")
        result = await session.next()
    """

    def __init__(self, steps: Sequence[StepDefinition], submitter: Submitter,
                 defaults: Optional[Mapping[str, Any]] = None,
                 retry_config: Optional[RetryConfig] = None,
                 executor: Optional[RetryExecutor] = None,
                 listeners: Optional[Iterable[WizardListener]] = None,
                 reference_prefix: Optional[str] = None):
        """
        Args:
            steps: Ordered step definitions (fixed for the session's lifetime)
            submitter: ``async submitter(values) -> payload``
            defaults: Initial field values
            retry_config: Submission retry policy (defaults to the configured policy)
            executor: Retry executor, e.g. one with a fake clock
            listeners: Observers notified of session events
            reference_prefix: Prefix of the reference number
        """
        check_step_sequence(steps)

        self.wizard_id: str = str(uuid.uuid4())
        self.status: str = SessionStatus.DRAFT
        self.created_at: datetime = datetime.now()
        self.updated_at: datetime = datetime.now()
        self._reference_prefix = reference_prefix or Config.REFERENCE_PREFIX
        self.reference_number: str = self._generate_reference_number()

        self.steps = list(steps)
        self.token = CancellationToken()
        self._listeners = list(listeners or [])

        field_owners = {name: step.index for step in self.steps for name in step.fields}
        self.store = FormStateStore(defaults=defaults, field_owners=field_owners)
        self.coordinator = SubmissionCoordinator(
            submitter,
            executor=executor,
            retry_config=retry_config,
        )
        self.navigator = StepNavigator(
            self.steps, self.store, self.coordinator,
            token=self.token, listeners=self._listeners,
        )
        logger.info(f"Form session {self.reference_number} started with {len(self.steps)} steps")

    def _generate_reference_number(self) -> str:
        """
        Generate a unique reference number for the session.

        Format: {PREFIX}-{YYYYMMDDHHMMSS}-{SHORT_UUID}
        Example: FRM-20260118153045-A3F2
        """
        timestamp = datetime.now().strftime("%Y%m%d%H%M%S")
        short_id = self.wizard_id[:4].upper()
        return f"{self._reference_prefix}-{timestamp}-{short_id}"

    # =========================================================================
    # State
    # =========================================================================

    @property
    def state(self) -> NavigationState:
        return self.navigator.state

    @property
    def current_step(self) -> StepDefinition:
        return self.navigator.get_current_step()

    @property
    def is_active(self) -> bool:
        return self.status in (SessionStatus.DRAFT, SessionStatus.IN_PROGRESS)

    def add_listener(self, listener: WizardListener):
        self._listeners.append(listener)
        self.navigator.add_listener(listener)

    def progress_percentage(self) -> float:
        return self.navigator.get_progress_percentage()

    # =========================================================================
    # Fields
    # =========================================================================

    def set_field(self, name: str, value: Any):
        """
        Set a field value. Allowed while a validation or submission is pending.

        Raises:
            SessionClosedError: the session already completed or was abandoned
        """
        self._ensure_active()
        self.store.set_field(name, value)
        self._touch()
        for listener in self._listeners:
            try:
                listener.on_field_changed(name, value)
            except Exception as e:
                logger.error(f"Listener {type(listener).__name__}.on_field_changed failed: {e}", exc_info=True)

    def get_values(self) -> Mapping[str, Any]:
        return self.store.get_values()

    def get_errors(self) -> Mapping[str, str]:
        return self.store.get_errors()

    def field(self, name: str) -> FieldDescriptor:
        """Descriptor for rendering one field."""
        return FieldDescriptor(
            name=name,
            value=self.store.get_value(name),
            error=self.store.get_error(name),
            touched=self.store.is_touched(name),
            on_change=lambda value: self.set_field(name, value),
        )

    def fields_for_current_step(self):
        """Descriptors for the current step's fields, in name order."""
        return [self.field(name) for name in sorted(self.current_step.fields)]

    # =========================================================================
    # Navigation
    # =========================================================================

    async def next(self) -> NavigationResult:
        return await self.navigator.next()

    def back(self) -> NavigationResult:
        return self.navigator.back()

    def go_to_step(self, index: int) -> NavigationResult:
        return self.navigator.go_to_step(index)

    async def submit(self) -> NavigationResult:
        result = await self.navigator.submit()
        if self.navigator.phase is NavigationPhase.SUCCEEDED:
            self.status = SessionStatus.COMPLETED
            self.updated_at = datetime.now()
            self.navigator.close()
            logger.info(f"Form session {self.reference_number} completed")
        return result

    def abandon(self, reason: str = "abandoned"):
        """
        End the session early (navigating away, closing).

        Cancels pending validations, submissions and backoff waits.
        """
        if not self.is_active:
            return
        self.token.cancel(reason)
        self.navigator.close()
        self.status = SessionStatus.CANCELLED
        self.updated_at = datetime.now()
        logger.info(f"Form session {self.reference_number} abandoned: {reason}")

    # =========================================================================
    # Draft snapshot / restore hook
    # =========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the session to a dictionary.

        Values are included as-is; turning them into JSON is the caller's job.
        """
        state = self.navigator.state
        return {
            "wizard_id": self.wizard_id,
            "reference_number": self.reference_number,
            "status": self.status,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "current_step_index": state.current_index,
            "visited_steps": sorted(state.visited),
            "values": dict(self.store.get_values()),
            "touched": sorted(self.store.touched_fields),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], steps: Sequence[StepDefinition],
                  submitter: Submitter, **kwargs) -> 'WizardSession':
        """
        Restore a session from a dictionary produced by to_dict().

        Raises:
            WizardConfigurationError: the snapshot does not fit the step sequence
        """
        session = cls(steps, submitter, **kwargs)
        session.restore(
            values=data.get("values", {}),
            touched=data.get("touched"),
            current_index=data.get("current_step_index", 0),
            visited=data.get("visited_steps", [0]),
        )
        session.wizard_id = data.get("wizard_id", session.wizard_id)
        session.reference_number = data.get("reference_number", session.reference_number)
        if "created_at" in data:
            session.created_at = datetime.fromisoformat(data["created_at"])
        return session

    def restore(self, values: Mapping[str, Any], touched: Optional[Iterable[str]] = None,
                current_index: int = 0, visited: Optional[Iterable[int]] = None):
        """
        Restore values and position from a draft.

        Raises:
            WizardConfigurationError: the position does not fit the step sequence
        """
        self._ensure_active()
        visited = list(visited) if visited is not None else [0]
        self.navigator.restore_position(current_index, visited)
        self.store.restore(values, touched)
        self._touch()
        logger.info(f"Restored draft at step {current_index} (visited {sorted(visited)})")

    # =========================================================================
    # Internals
    # =========================================================================

    def _ensure_active(self):
        if not self.is_active:
            raise SessionClosedError(f"Form session {self.reference_number} is {self.status}")

    def _touch(self):
        if self.status == SessionStatus.DRAFT:
            self.status = SessionStatus.IN_PROGRESS
        self.updated_at = datetime.now()
