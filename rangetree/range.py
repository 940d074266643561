"""
Range value type for the range tree.

A Range is a closed interval [start, end] over any totally ordered type.
Ranges compare by (start, end), so sorting them orders by start first
and breaks ties on end.
"""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

# T represents the Totally Ordered type used for range endpoints
T = TypeVar('T')


class InvalidRangeError(ValueError):
    """Raised when a range is missing, has a missing endpoint, or is inverted."""


@dataclass(frozen=True, order=True)
class Range(Generic[T]):
    """Immutable closed interval. Not validated on construction, see validate_range()."""
    start: T
    end: T

    def overlaps(self, other: 'Range[T]') -> bool:
        """True if the two ranges share at least one point."""
        return self.start <= other.end and self.end >= other.start

    def contains(self, other: 'Range[T]') -> bool:
        """True if other lies entirely inside this range."""
        return self.start <= other.start and self.end >= other.end

    def union(self, other: 'Range[T]') -> 'Range[T]':
        """Smallest range spanning both. Only a true union when the ranges overlap."""
        start = self.start if self.start <= other.start else other.start
        end = self.end if self.end >= other.end else other.end
        return Range(start, end)

    def __str__(self) -> str:
        return f"({self.start}, {self.end})"


def validate_range(range_: Any) -> None:
    """
    Check that range_ is usable as a tree key.

    Raises:
        InvalidRangeError: if range_ is None or not a Range, if either
            endpoint is None, if the endpoints cannot be compared, or if
            start > end.
    """
    if range_ is None:
        raise InvalidRangeError("Range cannot be None.")
    if not isinstance(range_, Range):
        raise InvalidRangeError(f"Expected a Range, got {type(range_).__name__}")
    if range_.start is None or range_.end is None:
        raise InvalidRangeError("Range start and end cannot be None.")
    try:
        inverted = range_.start > range_.end
    except TypeError as e:
        raise InvalidRangeError(f"Range endpoints are not comparable: {range_!r}") from e
    if inverted:
        raise InvalidRangeError(f"Invalid range: {range_}")
