"""Custom exceptions for assurvie.

Every precondition violation in the engines surfaces as a ValidationError.
"""

from __future__ import annotations

from typing import Any


class AssurVieError(Exception):
    """Base exception for all assurvie errors."""
    pass


class ValidationError(AssurVieError, ValueError):
    """Invalid input provided to a calculation engine."""

    def __init__(self, param_name: str, value: Any, reason: str = ""):
        self.param_name = param_name
        self.value = value
        self.reason = reason
        msg = f"Invalid parameter '{param_name}': {value}"
        if reason:
            msg += f" - {reason}"
        super().__init__(msg)
