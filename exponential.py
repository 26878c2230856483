"""
Normalized decimal numbers.

An Exponential holds a real value as ``significand * 10**exponent`` with
both fields confined to the signed 64-bit domain (``bounds.INT64``).
Every instance is canonical:

  - zero is stored as (0, 0)
  - any other significand carries no trailing decimal zeros

so two instances are equal exactly when their pairs are equal.

Arithmetic is carried out on Python integers and the canonical result is
narrowed back into the 64-bit domain afterwards.  Addition, subtraction
and multiplication are exact whenever the canonical result fits;
division produces PRECISION significant digits unless the quotient
terminates and fits.  Nothing here checks whether a result lost
precision - that decision belongs to the guards in ``traits``.
"""

from __future__ import annotations

import math
import sys

from bounds import INT64

PRECISION = 18

# Extra quotient digits computed before truncating to PRECISION
_GUARD_DIGITS = 2

# Operands further apart than this are aligned through a sticky stand-in
_ALIGN_LIMIT = PRECISION + _GUARD_DIGITS


# ---------------------------------------------------------------------------
# Canonical form helpers
# ---------------------------------------------------------------------------

def _digits(n: int) -> int:
    """Number of decimal digits in abs(n)."""
    return len(str(abs(n)))


def _truncate(n: int, digits: int) -> int:
    """Drop the lowest ``digits`` decimal digits, rounding toward zero."""
    magnitude = abs(n) // 10**digits
    return -magnitude if n < 0 else magnitude


def normalize(significand: int, exponent: int) -> tuple[int, int]:
    """Return the canonical (significand, exponent) pair for a value.

    >>> normalize(420, 0)
    (42, 1)
    >>> normalize(0, 7)
    (0, 0)
    """
    if significand == 0:
        return 0, 0
    while significand % 10 == 0:
        significand //= 10
        exponent += 1
    return significand, exponent


def _narrow(significand: int, exponent: int) -> tuple[int, int]:
    """Normalize, then fit the pair into the 64-bit domain.

    A significand that is still too wide keeps its leading PRECISION
    digits (truncated toward zero).  An exponent that leaves the domain
    wraps.
    """
    significand, exponent = normalize(significand, exponent)
    if not INT64.contains(significand):
        drop = _digits(significand) - PRECISION
        significand, exponent = normalize(
            _truncate(significand, drop), exponent + drop
        )
    return significand, INT64.wrap(exponent)


def _sticky(significand: int, anchor: int) -> tuple[int, int]:
    """Stand-in for an operand lying wholly below the kept precision.

    Only the sign of such an operand can change the truncated result, so
    a unit of the same sign just under the anchor exponent's reach
    narrows identically without scaling by a huge power of ten.
    """
    return (1 if significand > 0 else -1), anchor - _ALIGN_LIMIT - 2


def _check_int(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(
            f"{name} must be an int, got {type(value).__name__}"
        )
    return value


def _check_range(significand: int, exponent: int) -> None:
    for name, value in (("significand", significand), ("exponent", exponent)):
        if not INT64.contains(value):
            raise ValueError(
                f"{name} {value} is outside [{INT64.lo}, {INT64.hi}]"
            )


def _coerce(value):
    if isinstance(value, Exponential):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return Exponential(value)
    return NotImplemented


def _comparable(value):
    """Like _coerce, but any int is accepted.

    An integer too wide for INT64 even after folding its trailing zeros
    keeps its exact fields.  Such a pair never equals a constructed
    instance, and ordering against it stays exact.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return Exponential._canonical(*normalize(value, 0))
    return _coerce(value)


# ---------------------------------------------------------------------------
# The number type
# ---------------------------------------------------------------------------

class Exponential:
    """
    An immutable decimal number ``significand * 10**exponent``.

    Construct from a single integer, from a (significand, exponent)
    pair, or with no arguments for zero.  Trailing zeros in the supplied
    significand are folded into the exponent:

    >>> Exponential(1_000_000_000_000)
    Exponential(1, 12)
    >>> str(Exponential(42, -1))
    '42e-1'

    Plain integers mix freely with instances in every operator and
    comparison; they are promoted through the constructor first.
    """

    __slots__ = ("_significand", "_exponent")

    def __init__(self, significand: int = 0, exponent: int = 0):
        if isinstance(significand, Exponential) and exponent == 0:
            self._significand = significand._significand
            self._exponent = significand._exponent
            return
        significand, exponent = normalize(
            _check_int("significand", significand),
            _check_int("exponent", exponent),
        )
        _check_range(significand, exponent)
        self._significand = significand
        self._exponent = exponent

    @classmethod
    def _canonical(cls, significand: int, exponent: int) -> Exponential:
        # Caller guarantees the pair is already canonical and in range
        number = object.__new__(cls)
        number._significand = significand
        number._exponent = exponent
        return number

    # -- fields -----------------------------------------------------------

    @property
    def significand(self) -> int:
        return self._significand

    @property
    def exponent(self) -> int:
        return self._exponent

    # -- unary ------------------------------------------------------------

    def __neg__(self) -> Exponential:
        return Exponential._canonical(
            *_narrow(-self._significand, self._exponent)
        )

    def __pos__(self) -> Exponential:
        return self

    def __abs__(self) -> Exponential:
        return -self if self._significand < 0 else self

    def __bool__(self) -> bool:
        return self._significand != 0

    # -- additive ---------------------------------------------------------

    def _aligned_sum(self, other: Exponential, sign: int) -> Exponential:
        if not other._significand:
            return self
        if not self._significand:
            return -other if sign < 0 else other

        left, left_exponent = self._significand, self._exponent
        right, right_exponent = other._significand, other._exponent
        gap = left_exponent - right_exponent
        if gap > _digits(right) + _ALIGN_LIMIT:
            right, right_exponent = _sticky(right, left_exponent)
        elif -gap > _digits(left) + _ALIGN_LIMIT:
            left, left_exponent = _sticky(left, right_exponent)

        exponent = min(left_exponent, right_exponent)
        left *= 10 ** (left_exponent - exponent)
        right *= 10 ** (right_exponent - exponent)
        return Exponential._canonical(
            *_narrow(left + sign * right, exponent)
        )

    def __add__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self._aligned_sum(other, 1)

    __radd__ = __add__

    def __sub__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self._aligned_sum(other, -1)

    def __rsub__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return other._aligned_sum(self, -1)

    # -- multiplicative ---------------------------------------------------

    def __mul__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return Exponential._canonical(*_narrow(
            self._significand * other._significand,
            self._exponent + other._exponent,
        ))

    __rmul__ = __mul__

    def _divide(self, other: Exponential) -> Exponential:
        """Long division to PRECISION significant digits.

        The numerator is scaled so the integer quotient carries a couple
        of digits beyond PRECISION.  A quotient that terminates within
        those digits is kept exactly (subject to narrowing); anything
        else is truncated toward zero to PRECISION digits.
        """
        if not other._significand:
            raise ZeroDivisionError("division by zero")
        if not self._significand:
            return self

        numerator = abs(self._significand)
        denominator = abs(other._significand)
        scale = max(
            0,
            PRECISION + _GUARD_DIGITS
            + _digits(denominator) - _digits(numerator),
        )

        quotient, remainder = divmod(numerator * 10**scale, denominator)
        exponent = self._exponent - other._exponent - scale
        if remainder:
            drop = _digits(quotient) - PRECISION
            quotient = _truncate(quotient, drop)
            exponent += drop

        if (self._significand < 0) != (other._significand < 0):
            quotient = -quotient
        return Exponential._canonical(*_narrow(quotient, exponent))

    def __truediv__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return self._divide(other)

    def __rtruediv__(self, other):
        other = _coerce(other)
        if other is NotImplemented:
            return NotImplemented
        return other._divide(self)

    # -- comparison -------------------------------------------------------

    def __eq__(self, other):
        other = _comparable(other)
        if other is NotImplemented:
            return NotImplemented
        return (
            self._significand == other._significand
            and self._exponent == other._exponent
        )

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return NotImplemented
        return not result

    def _compare(self, other: Exponential) -> int:
        """Three-way comparison of the represented values."""
        left, right = self._significand, other._significand
        left_sign = (left > 0) - (left < 0)
        right_sign = (right > 0) - (right < 0)
        if left_sign != right_sign:
            return 1 if left_sign > right_sign else -1
        if not left_sign:
            return 0

        # Position of the leading digit decides unless both share it
        left_top = _digits(left) + self._exponent
        right_top = _digits(right) + other._exponent
        if left_top != right_top:
            order = 1 if left_top > right_top else -1
        else:
            exponent = min(self._exponent, other._exponent)
            left = abs(left) * 10 ** (self._exponent - exponent)
            right = abs(right) * 10 ** (other._exponent - exponent)
            order = (left > right) - (left < right)
        return order * left_sign

    def __lt__(self, other):
        other = _comparable(other)
        if other is NotImplemented:
            return NotImplemented
        return self._compare(other) < 0

    def __le__(self, other):
        other = _comparable(other)
        if other is NotImplemented:
            return NotImplemented
        return self._compare(other) <= 0

    def __gt__(self, other):
        other = _comparable(other)
        if other is NotImplemented:
            return NotImplemented
        return self._compare(other) > 0

    def __ge__(self, other):
        other = _comparable(other)
        if other is NotImplemented:
            return NotImplemented
        return self._compare(other) >= 0

    def __hash__(self) -> int:
        # Integral values hash like the int they equal
        if self._exponent >= 0:
            scale = pow(10, self._exponent, sys.hash_info.modulus)
            return hash(self._significand * scale)
        return hash((self._significand, self._exponent))

    # -- conversion -------------------------------------------------------

    def __float__(self) -> float:
        """Lossy conversion for interop and display."""
        try:
            return float(self._significand) * 10.0 ** self._exponent
        except OverflowError:
            return math.copysign(math.inf, self._significand)

    def __str__(self) -> str:
        if self._exponent == 0:
            return str(self._significand)
        return f"{self._significand}e{self._exponent}"

    def __repr__(self) -> str:
        return f"Exponential({self._significand}, {self._exponent})"


ZERO = Exponential()
ONE = Exponential(1)
