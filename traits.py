"""
Capability registry.

A Traits entry is everything the harness needs to exercise a numeric
type without knowing anything else about it:

  - a generator drawing a random instance from a caller-owned Random
  - a converter building the small constants the laws need (0, 1)
  - unary operations, each pairing the native operator with a
    reference function computed another way
  - binary operations, which additionally carry a guard deciding
    whether the result for a given operand pair can be trusted

The registry is built once at import and exposed read-only.  Supporting
another type means writing one more Traits value, not more test code.

Layers
------
Guards           boundedness predicates for Exponential and int
Operations       UnaryOperation / BinaryOperation / Traits
Registered types EXPONENTIAL_TRAITS, INT_TRAITS
Registry         REGISTRY, traits_for(), register()
"""
from __future__ import annotations

import decimal
import operator
import random
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Generic, Mapping, TypeVar

from bounds import FLOAT_EXACT, INT32, INT64
from exponential import ONE, PRECISION, ZERO, Exponential, normalize

T = TypeVar("T")

# Rescaled operands and results must stay strictly below this magnitude
# for an Exponential result to be exact.
SAFE_MAGNITUDE = 1e18

# Inclusive range for both fields of a random Exponential
RANDOM_FIELD_RANGE = (-100, 100)


class UnregisteredTypeError(LookupError):
    """Raised when no traits are registered for a type."""


# ---------------------------------------------------------------------------
# Guards
# ---------------------------------------------------------------------------

def _within(*values: float) -> bool:
    return all(abs(v) < SAFE_MAGNITUDE for v in values)


def _rescaled(a: Exponential, b: Exponential) -> tuple[float, float]:
    """Both operands as floats sharing the smaller exponent.

    Zero aligns with anything, so it never pulls the common exponent
    down.  Raises OverflowError when the scale factor leaves float range.
    """
    exponents = [x.exponent for x in (a, b) if x.significand]
    exponent = min(exponents) if exponents else 0
    return (
        float(a.significand) * 10.0 ** (a.exponent - exponent),
        float(b.significand) * 10.0 ** (b.exponent - exponent),
    )


def additive_bounded(a: Exponential, b: Exponential) -> bool:
    """True when a + b and a - b align and combine without narrowing."""
    try:
        left, right = _rescaled(a, b)
    except OverflowError:
        return False
    return _within(left, right, left + right, left - right)


def multiplicative_bounded(a: Exponential, b: Exponential) -> bool:
    """True when the significand product and exponent sum stay in range."""
    return _within(
        float(a.significand) * float(b.significand),
        float(a.exponent) + float(b.exponent),
    )


def division_bounded(a: Exponential, b: Exponential) -> bool:
    """Like multiplicative_bounded with the divisor's exponent negated.

    The divisor must be nonzero before anything else is looked at.
    """
    if not b:
        return False
    return _within(
        float(a.significand) * float(b.significand),
        float(a.exponent) - float(b.exponent),
    )


def truncdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero (not floor division).

    Python's ``//`` rounds toward negative infinity.  Most calculators
    and languages (C, Java, Rust) truncate toward zero instead.
    """
    q, r = divmod(a, b)
    # divmod rounds toward -inf; adjust when the result is negative
    # and there is a remainder.
    if r != 0 and (a < 0) != (b < 0):
        q += 1
    return q


def _int_result_bounded(op: Callable[[int, int], int]) -> Callable[[int, int], bool]:
    def guard(a: int, b: int) -> bool:
        return INT64.contains(op(a, b))
    return guard


def int_division_bounded(a: int, b: int) -> bool:
    # Float division truncates correctly only while operands are exact floats
    return b != 0 and FLOAT_EXACT.contains(a) and FLOAT_EXACT.contains(b)


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

def _always(*_: Any) -> bool:
    return True


@dataclass(frozen=True)
class UnaryOperation(Generic[T]):
    """A native unary operator and a reference computing the same thing."""

    name: str
    function: Callable[[T], T]
    operator: Callable[[T], T]
    is_bounded: Callable[[T], bool] = _always


@dataclass(frozen=True)
class BinaryOperation(Generic[T]):
    """A native binary operator, its reference, and its guard."""

    name: str
    symbol: str
    function: Callable[[T, T], T]
    operator: Callable[[T, T], T]
    is_bounded: Callable[[T, T], bool]
    commutative: bool = False
    associative: bool = False


@dataclass(frozen=True)
class Traits(Generic[T]):
    """Capability table making one numeric type pluggable into the harness."""

    name: str
    type: type
    convert: Callable[[int], T]
    random: Callable[[random.Random], T]
    unary: tuple[UnaryOperation[T], ...]
    binary: tuple[BinaryOperation[T], ...]
    edge_values: tuple[T, ...] = ()

    def unary_operation(self, name: str) -> UnaryOperation[T]:
        for op in self.unary:
            if op.name == name:
                return op
        raise KeyError(f"{self.name} has no unary operation {name!r}")

    def binary_operation(self, name: str) -> BinaryOperation[T]:
        for op in self.binary:
            if op.name == name:
                return op
        raise KeyError(f"{self.name} has no binary operation {name!r}")


# ---------------------------------------------------------------------------
# Registered types
# ---------------------------------------------------------------------------

def random_exponential(rng: random.Random) -> Exponential:
    """Both fields uniform over RANDOM_FIELD_RANGE."""
    return Exponential(
        rng.randint(*RANDOM_FIELD_RANGE),
        rng.randint(*RANDOM_FIELD_RANGE),
    )


def _decimal_context(precision: int) -> decimal.Context:
    return decimal.Context(
        prec=precision,
        rounding=decimal.ROUND_DOWN,
        Emax=decimal.MAX_EMAX,
        Emin=decimal.MIN_EMIN,
        traps=[],
    )


def _decimal_fields(number: decimal.Decimal) -> tuple[int, int]:
    sign, digits, exponent = number.as_tuple()
    significand = int("".join(map(str, digits)))
    return (-significand if sign else significand), exponent


def decimal_quotient(a: Exponential, b: Exponential) -> Exponential:
    """a / b computed by the decimal module instead of integer long division.

    The quotient keeps PRECISION + 2 digits when it is exact there and
    fits INT64, otherwise PRECISION digits, always rounded toward zero.
    """
    context = _decimal_context(PRECISION + 2)
    quotient = context.divide(
        decimal.Decimal(f"{a.significand}e{a.exponent}"),
        decimal.Decimal(f"{b.significand}e{b.exponent}"),
    )
    significand, exponent = normalize(*_decimal_fields(quotient))
    if context.flags[decimal.Inexact] or not INT64.contains(significand):
        quotient = _decimal_context(PRECISION).plus(quotient)
        significand, exponent = _decimal_fields(quotient)
    return Exponential(significand, exponent)


EXPONENTIAL_TRAITS: Traits[Exponential] = Traits(
    name="Exponential",
    type=Exponential,
    convert=Exponential,
    random=random_exponential,
    unary=(
        UnaryOperation("neg", lambda x: ZERO - x, operator.neg),
    ),
    binary=(
        BinaryOperation(
            "add", "+",
            lambda a, b: a - (-b), operator.add, additive_bounded,
            commutative=True, associative=True,
        ),
        BinaryOperation(
            "sub", "-",
            lambda a, b: a + (-b), operator.sub, additive_bounded,
        ),
        BinaryOperation(
            "mul", "*",
            lambda a, b: Exponential(
                a.significand * b.significand, a.exponent + b.exponent
            ),
            operator.mul, multiplicative_bounded,
            commutative=True, associative=True,
        ),
        BinaryOperation(
            "div", "/",
            decimal_quotient, operator.truediv, division_bounded,
        ),
    ),
    edge_values=(
        ZERO,
        ONE,
        -ONE,
        Exponential(1, 100),
        Exponential(-1, 100),
        Exponential(1, -9),
        Exponential(1, 12),
        Exponential(42, -43),
        Exponential(INT64.hi, INT64.hi),
        Exponential(INT64.lo, INT64.lo),
    ),
)


INT_TRAITS: Traits[int] = Traits(
    name="int",
    type=int,
    convert=int,
    random=lambda rng: rng.randint(INT32.lo, INT32.hi),
    unary=(
        UnaryOperation(
            "neg", lambda a: 0 - a, operator.neg,
            lambda a: INT64.contains(-a),
        ),
    ),
    binary=(
        BinaryOperation(
            "add", "+",
            lambda a, b: a - (-b), operator.add,
            _int_result_bounded(operator.add),
            commutative=True, associative=True,
        ),
        BinaryOperation(
            "sub", "-",
            lambda a, b: a + (-b), operator.sub,
            _int_result_bounded(operator.sub),
        ),
        BinaryOperation(
            "mul", "*",
            lambda a, b: -(-a * b), operator.mul,
            _int_result_bounded(operator.mul),
            commutative=True, associative=True,
        ),
        BinaryOperation(
            "div", "/",
            truncdiv, lambda a, b: int(a / b), int_division_bounded,
        ),
    ),
    edge_values=(
        INT32.lo, INT32.lo + 1, -1, 0, 1, INT32.hi - 1, INT32.hi,
    ),
)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

REGISTRY: Mapping[type, Traits] = MappingProxyType({
    Exponential: EXPONENTIAL_TRAITS,
    int: INT_TRAITS,
})


def traits_for(cls: type, registry: Mapping[type, Traits] = REGISTRY) -> Traits:
    """Look up the traits registered for ``cls``."""
    try:
        return registry[cls]
    except KeyError:
        raise UnregisteredTypeError(
            f"no traits registered for {cls.__name__}"
        ) from None


def register(
    traits: Traits, registry: Mapping[type, Traits] = REGISTRY
) -> Mapping[type, Traits]:
    """Return a new read-only registry that also holds ``traits``."""
    return MappingProxyType({**registry, traits.type: traits})
