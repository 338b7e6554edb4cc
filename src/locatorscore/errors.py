from __future__ import annotations


class LocatorScoreError(Exception):
    """Base class for recoverable errors raised by locatorscore."""


class InvalidInputError(LocatorScoreError, ValueError):
    """Locator text or target node is unusable; raised before any scoring."""


class LocatorSyntaxError(LocatorScoreError):
    """A locator could not be executed against the document tree."""

    def __init__(self, locator: str, locator_type: str, reason: str) -> None:
        super().__init__(f"{locator_type} locator {locator!r} failed: {reason}")
        self.locator = locator
        self.locator_type = locator_type
        self.reason = reason


class DegenerateRangeError(ZeroDivisionError):
    """normalize() was called with an empty [min, max] range."""
