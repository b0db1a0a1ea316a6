# -*- coding: utf-8 -*-
"""
Form State Store - the accumulated values, errors and touched flags of a form.

In-memory only. Values span all steps and survive navigation; errors for a
field are dropped the moment its value changes.
"""

from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional, Set

from utils.logger import get_logger

logger = get_logger(__name__)


class FormStateStore:
    """
    Owns FormValues, FieldErrors and touched flags for one session.

    Also keeps a generation counter per step, bumped whenever a field the
    step owns changes, so a validation that finishes late can tell it ran
    against values that are no longer on screen.
    """

    def __init__(self, defaults: Optional[Mapping[str, Any]] = None,
                 field_owners: Optional[Mapping[str, int]] = None):
        """
        Args:
            defaults: Initial values
            field_owners: Field name -> index of the step that owns it
        """
        self._values: Dict[str, Any] = dict(defaults or {})
        self._errors: Dict[str, str] = {}
        self._touched: Set[str] = set()
        self._field_owners: Dict[str, int] = dict(field_owners or {})
        self._generations: Dict[int, int] = {}

    # =========================================================================
    # Values
    # =========================================================================

    def set_field(self, name: str, value: Any):
        """Overwrite a value, mark it touched and drop its stale error."""
        self._values[name] = value
        self._touched.add(name)
        self._errors.pop(name, None)

        owner = self._field_owners.get(name)
        if owner is not None:
            self._generations[owner] = self._generations.get(owner, 0) + 1

    def get_values(self) -> Mapping[str, Any]:
        """Read-only snapshot of all values."""
        return MappingProxyType(dict(self._values))

    def get_value(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def values_for(self, fields: Iterable[str]) -> Mapping[str, Any]:
        """Read-only snapshot restricted to ``fields``."""
        return MappingProxyType({name: self._values[name] for name in fields if name in self._values})

    # =========================================================================
    # Errors
    # =========================================================================

    def apply_errors(self, errors: Mapping[str, str]):
        """Merge errors, replacing prior messages for the named fields only."""
        self._errors.update(errors)

    def clear_errors(self, fields: Iterable[str]):
        """Remove errors for exactly the given fields."""
        for name in fields:
            self._errors.pop(name, None)

    def get_errors(self) -> Mapping[str, str]:
        """Read-only snapshot of all errors."""
        return MappingProxyType(dict(self._errors))

    def get_error(self, name: str) -> Optional[str]:
        return self._errors.get(name)

    def has_errors(self) -> bool:
        return bool(self._errors)

    # =========================================================================
    # Touched flags & generations
    # =========================================================================

    def is_touched(self, name: str) -> bool:
        return name in self._touched

    @property
    def touched_fields(self) -> frozenset:
        return frozenset(self._touched)

    def generation(self, step_index: int) -> int:
        """Number of edits made so far to fields owned by a step."""
        return self._generations.get(step_index, 0)

    # =========================================================================
    # Draft restore hook
    # =========================================================================

    def restore(self, values: Mapping[str, Any], touched: Optional[Iterable[str]] = None):
        """
        Replace all values, e.g. from a saved draft.

        Errors are cleared since they described the old values, and every
        step's generation moves on.
        """
        self._values = dict(values)
        self._errors.clear()
        self._touched = set(touched) if touched is not None else set(values)
        for index in set(self._field_owners.values()):
            self._generations[index] = self._generations.get(index, 0) + 1
        logger.debug(f"Restored {len(self._values)} values")
