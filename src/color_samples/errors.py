"""Error taxonomy for color sample loading and lookup."""
from __future__ import annotations

from typing import Any, Sequence


class ColorSampleError(Exception):
    """Base class for all color sample database errors."""


class ParseError(ColorSampleError, ValueError):
    """The raw document does not match the expected structure.

    Fatal for a build: no partial database is ever returned.
    """

    def __init__(self, message: str, *, path: Sequence[Any] = (), expected: str | None = None):
        self.path = tuple(path)
        self.expected = expected
        detail = message
        if self.path:
            detail += f" (at {'/'.join(repr(p) for p in self.path)})"
        if expected:
            detail += f"; expected {expected}"
        super().__init__(detail)


class NotFound(ColorSampleError, LookupError):
    """A lookup asked for a key that is not stored."""

    def __init__(self, key: float, available: Sequence[float] = (), *, what: str = "deltaE"):
        self.key = key
        self.available = tuple(available)
        self.what = what
        super().__init__(f"No {what} key {key!r}; available: {list(self.available)}")


class EmptyGroup(ColorSampleError, LookupError):
    """A stored group or bucket has nothing to sample from."""

    def __init__(self, delta_e: float, hue: float | None = None):
        self.delta_e = delta_e
        self.hue = hue
        where = f"deltaE {delta_e!r}" if hue is None else f"deltaE {delta_e!r}, hue {hue!r}"
        super().__init__(f"Nothing to sample for {where}")
