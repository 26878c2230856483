"""
Fixed-width integer domains.

A Bounds is an inclusive interval [lo, hi].  The number type keeps both
of its fields inside INT64 and wraps an exponent that leaves it; the
guards use the other presets to decide which operands a reference
computation can be trusted with.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Bounds:
    """An inclusive integer domain [lo, hi]."""

    lo: int
    hi: int

    def __post_init__(self):
        if self.lo > self.hi:
            raise ValueError(f"lo ({self.lo}) must be <= hi ({self.hi})")

    @property
    def width(self) -> int:
        """Total number of representable values."""
        return self.hi - self.lo + 1

    def contains(self, value: int) -> bool:
        return self.lo <= value <= self.hi

    def wrap(self, value: int) -> int:
        """Modular wrap-around into the domain (two's complement)."""
        return self.lo + (value - self.lo) % self.width


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------

INT64 = Bounds(lo=-(2**63), hi=2**63 - 1)
INT32 = Bounds(lo=-(2**31), hi=2**31 - 1)

# Magnitudes a binary64 float represents without losing integer precision
FLOAT_EXACT = Bounds(lo=-(2**53), hi=2**53)
