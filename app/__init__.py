# -*- coding: utf-8 -*-
"""
FormFlow Application Core Module
"""

from .config import Config, SessionStatus

__all__ = ["Config", "SessionStatus"]
