from __future__ import annotations

from .errors import DegenerateRangeError


def normalize(value: float, minimum: float, maximum: float) -> float:
    """Map ``value`` onto the unit interval of ``[minimum, maximum]``.

    The result is deliberately not clamped: values outside the declared range
    produce scores below 0 or above 1, and callers are expected to cope.
    """
    span = maximum - minimum
    if span == 0:
        raise DegenerateRangeError(f"normalize() called with an empty range [{minimum}, {maximum}]")
    return (value - minimum) / span
