# -*- coding: utf-8 -*-
"""
Step Navigator - Manages navigation between wizard steps.

Handles:
- Step progression (next/back/go-to)
- Step validation before forward navigation
- Visited-step tracking
- Final submission phase
"""

from typing import Iterable, List, Optional, Sequence

from models.navigation_state import (
    NavigationOutcome, NavigationPhase, NavigationResult, NavigationState,
)
from models.retry import RetryState
from models.step_definition import StepDefinition, check_step_sequence
from services.exceptions import OperationCancelled, StepIndexError, WizardConfigurationError
from services.retry_executor import CancellationToken
from services.submission_coordinator import SubmissionCoordinator
from services.validation.schema_runner import run_step_schema
from utils.logger import get_logger

from .form_state_store import FormStateStore
from .wizard_listener import WizardListener

logger = get_logger(__name__)


class StepNavigator:
    """
    State machine over step indices.

    Responsibilities:
    - Track current step and the set of visited steps
    - Validate before moving forward
    - Reject transitions while a validation or submission is in flight
    - Notify listeners for UI updates
    """

    def __init__(self, steps: Sequence[StepDefinition], store: FormStateStore,
                 coordinator: SubmissionCoordinator, token: Optional[CancellationToken] = None,
                 listeners: Optional[Iterable[WizardListener]] = None):
        """
        Initialize the navigator.

        Args:
            steps: Ordered step definitions
            store: Form state store shared with the session
            coordinator: Submission coordinator
            token: Cancellation token of the owning session
            listeners: Observers notified of navigation events
        """
        check_step_sequence(steps)
        self.steps: List[StepDefinition] = list(steps)
        self.store = store
        self.coordinator = coordinator
        self.token = token or CancellationToken()
        self._listeners: List[WizardListener] = list(listeners or [])

        self._current_index = 0
        self._visited = {0}
        self._phase = NavigationPhase.IDLE
        self._last_error: Optional[BaseException] = None
        self._closed = False

    # =========================================================================
    # State access
    # =========================================================================

    @property
    def state(self) -> NavigationState:
        """Immutable snapshot for readers."""
        return NavigationState(
            current_index=self._current_index,
            visited=frozenset(self._visited),
            phase=self._phase,
            last_error=self._last_error,
        )

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def visited(self) -> frozenset:
        return frozenset(self._visited)

    @property
    def phase(self) -> NavigationPhase:
        return self._phase

    @property
    def last_error(self) -> Optional[BaseException]:
        return self._last_error

    @property
    def closed(self) -> bool:
        return self._closed

    def add_listener(self, listener: WizardListener):
        self._listeners.append(listener)

    def get_current_step(self) -> StepDefinition:
        """Get the current step."""
        return self.steps[self._current_index]

    def get_step_count(self) -> int:
        """Get total number of steps."""
        return len(self.steps)

    def is_last_step(self) -> bool:
        return self._current_index == len(self.steps) - 1

    def can_go_next(self) -> bool:
        """Check if a next() request would be considered."""
        return self._is_resting() and not self.is_last_step()

    def can_go_previous(self) -> bool:
        """Check if a back() request would move."""
        return self._is_resting() and self._current_index > 0

    def can_submit(self) -> bool:
        return self._is_resting() and self.is_last_step()

    def get_progress_percentage(self) -> float:
        """
        Get current progress as percentage.

        Returns:
            Progress percentage (0.0 to 100.0)
        """
        if self._phase is NavigationPhase.SUCCEEDED:
            return 100.0
        if len(self.steps) <= 1:
            return 0.0
        return (self._current_index / (len(self.steps) - 1)) * 100.0

    # =========================================================================
    # Transitions
    # =========================================================================

    async def next(self) -> NavigationResult:
        """
        Validate the current step and move forward.

        Returns:
            MOVED, INVALID (errors written to the store), STALE (fields changed
            while validating), CANCELLED or REJECTED
        """
        rejection = self._check_can_transition("next")
        if rejection:
            return rejection
        if self.is_last_step():
            logger.debug(f"Cannot go next: already at last step ({self._current_index})")
            return NavigationResult.rejected("last step: use submit()")

        step = self.get_current_step()
        generation = self.store.generation(step.index)
        logger.debug(f"Validating step {step.index} ({step.step_id})...")
        self._set_phase(NavigationPhase.VALIDATING_STEP)

        try:
            result = await run_step_schema(step, self.store.values_for(step.fields), self.token)
        except OperationCancelled as e:
            logger.info(f"Validation of step {step.index} cancelled: {e.reason}")
            self._set_phase(NavigationPhase.IDLE)
            return NavigationResult(outcome=NavigationOutcome.CANCELLED, reason=e.reason)
        except BaseException:
            self._set_phase(NavigationPhase.IDLE)
            raise

        if self.store.generation(step.index) != generation:
            logger.info(f"Discarding validation of step {step.index}: fields changed while it ran")
            self._set_phase(NavigationPhase.IDLE)
            return NavigationResult(outcome=NavigationOutcome.STALE, reason="fields changed during validation")

        if not result.is_valid:
            logger.warning(f"Step {step.index} validation failed: {result.errors}")
            self.store.apply_errors(result.errors)
            self._set_phase(NavigationPhase.IDLE)
            self._emit("on_validation_failed", step.index, dict(result.errors))
            return NavigationResult(outcome=NavigationOutcome.INVALID, errors=dict(result.errors))

        logger.debug(f"Step {step.index} validated successfully")
        self.store.clear_errors(step.fields)
        self._navigate_to(step.index + 1)
        self._set_phase(NavigationPhase.IDLE)
        return NavigationResult(outcome=NavigationOutcome.MOVED)

    def back(self) -> NavigationResult:
        """Move to the previous step. Never validates."""
        rejection = self._check_can_transition("back")
        if rejection:
            return rejection
        if self._current_index == 0:
            logger.debug("Cannot go back: already at first step")
            return NavigationResult.rejected("already at first step")

        self._leave_failed()
        self._navigate_to(self._current_index - 1)
        return NavigationResult(outcome=NavigationOutcome.MOVED)

    def go_to_step(self, index: int) -> NavigationResult:
        """
        Jump to a step the user has already validated through.

        Raises:
            StepIndexError: index outside the step sequence
        """
        if index < 0 or index >= len(self.steps):
            raise StepIndexError(index, len(self.steps))

        rejection = self._check_can_transition("go_to_step")
        if rejection:
            return rejection
        # Every index at or below the pointer is in visited, since next() is the only way forward
        if index not in self._visited:
            logger.debug(f"Cannot jump to step {index}: not visited ({sorted(self._visited)})")
            return NavigationResult.rejected("step not visited")

        self._leave_failed()
        if index != self._current_index:
            self._navigate_to(index)
        return NavigationResult(outcome=NavigationOutcome.MOVED)

    async def submit(self) -> NavigationResult:
        """
        Validate every step against the whole form, then submit.

        Returns:
            SUCCEEDED (payload attached), FAILED (error attached), INVALID,
            STALE (fields changed while validating), CANCELLED or REJECTED
        """
        rejection = self._check_can_transition("submit")
        if rejection:
            return rejection
        if not self.is_last_step():
            return NavigationResult.rejected("submit is only available on the last step")

        self._last_error = None
        self._set_phase(NavigationPhase.SUBMITTING)
        values = self.store.get_values()
        generations = [self.store.generation(step.index) for step in self.steps]

        try:
            report = await self.coordinator.validate_all(self.steps, values, self.token)
            changed = [step.index for step in self.steps
                       if self.store.generation(step.index) != generations[step.index]]
            if changed:
                logger.info(f"Discarding full-form validation: steps {changed} changed while it ran")
                self._set_phase(NavigationPhase.IDLE)
                return NavigationResult(outcome=NavigationOutcome.STALE, reason="fields changed during validation")
            if not report.is_valid:
                self.store.apply_errors(report.errors)
                self._set_phase(NavigationPhase.IDLE)
                first_invalid = next(s.index for s in self.steps if s.step_id in report.invalid_steps)
                self._emit("on_validation_failed", first_invalid, dict(report.errors))
                return NavigationResult(outcome=NavigationOutcome.INVALID, errors=dict(report.errors))

            logger.info(f"All {len(self.steps)} steps valid; submitting")
            outcome = await self.coordinator.submit(values, self.token, on_retry=self._on_retry)
        except OperationCancelled as e:
            self._set_phase(NavigationPhase.IDLE)
            return NavigationResult(outcome=NavigationOutcome.CANCELLED, reason=e.reason)
        except BaseException:
            self._set_phase(NavigationPhase.IDLE)
            raise

        if outcome.succeeded:
            self._set_phase(NavigationPhase.SUCCEEDED)
            self._emit("on_submission_finished", True, outcome.payload, None)
            return NavigationResult(outcome=NavigationOutcome.SUCCEEDED, payload=outcome.payload,
                                    attempts=outcome.attempts)

        self._last_error = outcome.error
        self._set_phase(NavigationPhase.FAILED)
        self._emit("on_submission_finished", False, None, outcome.error)
        return NavigationResult(outcome=NavigationOutcome.FAILED, error=outcome.error, attempts=outcome.attempts)

    def close(self):
        """Refuse every further transition."""
        self._closed = True

    def restore_position(self, current_index: int, visited: Iterable[int]):
        """
        Put the pointer back where a saved draft left it.

        ``visited`` must be the contiguous run 0..k containing ``current_index``,
        the only shape forward navigation can produce.

        Raises:
            WizardConfigurationError: busy, or a position that does not fit the form
        """
        if self._phase.is_busy:
            raise WizardConfigurationError("Cannot restore while a validation or submission is in flight")

        visited_set = set(visited) or {0}
        if visited_set != set(range(max(visited_set) + 1)) \
                or current_index not in visited_set \
                or max(visited_set) >= len(self.steps):
            raise WizardConfigurationError(
                f"Saved position does not fit the form: current={current_index}, visited={sorted(visited_set)}"
            )

        old_index = self._current_index
        self._current_index = current_index
        self._visited = visited_set
        if old_index != current_index:
            self._emit("on_step_changed", old_index, current_index)

    # =========================================================================
    # Internals
    # =========================================================================

    def _is_resting(self) -> bool:
        return not self._closed and self._phase in (NavigationPhase.IDLE, NavigationPhase.FAILED)

    def _check_can_transition(self, action: str) -> Optional[NavigationResult]:
        if self._closed:
            logger.debug(f"Rejected {action}: session closed")
            return NavigationResult.rejected("session closed")
        if self._phase.is_busy:
            logger.debug(f"Rejected {action}: {self._phase.value} in progress")
            return NavigationResult.rejected(f"{self._phase.value} in progress")
        if self._phase is NavigationPhase.SUCCEEDED:
            return NavigationResult.rejected("form already submitted")
        return None

    def _leave_failed(self):
        if self._phase is NavigationPhase.FAILED:
            self._set_phase(NavigationPhase.IDLE)

    def _navigate_to(self, new_index: int):
        old_index = self._current_index
        self._current_index = new_index
        self._visited.add(new_index)
        self._emit("on_step_changed", old_index, new_index)
        logger.info(f"Navigation complete: Step {old_index} → {new_index}")

    def _set_phase(self, phase: NavigationPhase):
        old_phase = self._phase
        if old_phase is phase:
            return
        self._phase = phase
        logger.debug(f"Phase: {old_phase.value} → {phase.value}")
        self._emit("on_phase_changed", old_phase, phase)

    def _on_retry(self, state: RetryState):
        self._emit("on_retry_scheduled", state)

    def _emit(self, hook: str, *args):
        for listener in self._listeners:
            try:
                getattr(listener, hook)(*args)
            except Exception as e:
                logger.error(f"Listener {type(listener).__name__}.{hook} failed: {e}", exc_info=True)
