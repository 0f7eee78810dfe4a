"""Error types raised by the behavior engine."""

from __future__ import annotations


class InvalidInputError(ValueError):
    """Raised when a supplied record or context violates its documented range."""
