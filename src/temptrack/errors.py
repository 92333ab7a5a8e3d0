"""Exception hierarchy for temptrack.

Removal errors from cleanup are not wrapped; they reach the caller as the
original ``OSError`` with the partial counts attached (see
:mod:`temptrack.cleaner`).
"""

from __future__ import annotations


class TempTrackError(Exception):
    """Base class for errors raised by temptrack."""


class NotTrackingError(TempTrackError):
    """Raised by asynchronous cleanup while tracking is disabled."""

    def __init__(self, message: str = "not tracking") -> None:
        super().__init__(message)
