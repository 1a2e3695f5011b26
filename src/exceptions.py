"""
Exception hierarchy for resampling and model evaluation.

Numerical failures raised by statsmodels / scipy while fitting are not
wrapped; they reach the caller unchanged.
"""

from __future__ import annotations

from typing import Iterable


class ResampleLabError(Exception):
    """Base exception for all package errors."""
    pass


class InvalidParameter(ResampleLabError, ValueError):
    """A split or model configuration value is out of range."""
    pass


class MissingColumn(ResampleLabError, KeyError):
    """A requested model variable is absent from the table."""

    def __init__(self, columns: Iterable[str], available: Iterable[str] = ()):
        self.columns = list(columns)
        self.available = list(available)
        message = f"Missing column(s): {self.columns}"
        if self.available:
            message += f". Available: {self.available}"
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return self.args[0]
