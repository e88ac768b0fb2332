"""Exception types raised by the draft engine."""

from typing import Any, Optional


class DraftflowError(Exception):
    """Base class for engine errors."""


class ValidationError(DraftflowError, ValueError):
    """Malformed input rejected before any work is done.

    Dead ends found while searching are never raised; they are reported on
    tree nodes instead.
    """

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}
