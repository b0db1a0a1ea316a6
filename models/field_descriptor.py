# -*- coding: utf-8 -*-
"""
Field descriptor handed to rendering adapters.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass(frozen=True)
class FieldDescriptor:
    """
    Everything a renderer needs for one field.

    Renderers never write values directly; they call ``on_change``,
    which routes through the session's set_field().
    """

    name: str
    value: Any
    error: Optional[str]
    touched: bool
    on_change: Callable[[Any], None]

    @property
    def has_error(self) -> bool:
        return self.error is not None
