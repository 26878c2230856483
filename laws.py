"""
Algebraic laws checked by the harness.

A Law is purely declarative - it says WHAT must hold for a registered
type, not how operands are drawn.  Each law is a named predicate over
``arity`` operands that returns:

  - True     the law holds for these operands
  - False    the law is violated
  - SKIPPED  a guard declined one of the steps, so nothing is asserted

Laws are built from a type's Traits, so the same builders cover every
registered type.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from traits import BinaryOperation, Traits, UnaryOperation

SKIPPED = None


@dataclass(frozen=True)
class Law:
    """A single verifiable law of a numeric type."""

    name: str
    description: str
    arity: int
    predicate: Callable[..., Optional[bool]]

    def check(self, *values: Any) -> Optional[bool]:
        """Evaluate the law for the given operands."""
        return self.predicate(*values)


# ---------------------------------------------------------------------------
# Operator/function agreement
# ---------------------------------------------------------------------------

def unary_agreement(op: UnaryOperation) -> Law:
    def predicate(x):
        if not op.is_bounded(x):
            return SKIPPED
        return op.operator(x) == op.function(x)

    return Law(
        name=f"agreement:{op.name}",
        description=f"{op.name}(x) matches its reference function",
        arity=1,
        predicate=predicate,
    )


def binary_agreement(op: BinaryOperation) -> Law:
    def predicate(a, b):
        if not op.is_bounded(a, b):
            return SKIPPED
        return op.operator(a, b) == op.function(a, b)

    return Law(
        name=f"agreement:{op.name}",
        description=f"a {op.symbol} b matches its reference function",
        arity=2,
        predicate=predicate,
    )


# ---------------------------------------------------------------------------
# Structural laws
# ---------------------------------------------------------------------------

def commutativity(op: BinaryOperation) -> Law:
    def predicate(a, b):
        if not (op.is_bounded(a, b) and op.is_bounded(b, a)):
            return SKIPPED
        return op.operator(a, b) == op.operator(b, a)

    return Law(
        name=f"commutativity:{op.name}",
        description=f"a {op.symbol} b == b {op.symbol} a",
        arity=2,
        predicate=predicate,
    )


def associativity(op: BinaryOperation) -> Law:
    f, bounded = op.operator, op.is_bounded

    def predicate(a, b, c):
        if not (bounded(a, b) and bounded(b, c)):
            return SKIPPED
        ab, bc = f(a, b), f(b, c)
        if not (bounded(ab, c) and bounded(a, bc)):
            return SKIPPED
        return f(ab, c) == f(a, bc)

    s = op.symbol
    return Law(
        name=f"associativity:{op.name}",
        description=f"(a {s} b) {s} c == a {s} (b {s} c)",
        arity=3,
        predicate=predicate,
    )


def distributivity(add: BinaryOperation, mul: BinaryOperation) -> Law:
    plus, times = add.operator, mul.operator

    def expand(left, right, c, c_first):
        """Compare c*(l+r) with c*l + c*r (or the right-hand variants)."""
        order = (lambda x: (c, x)) if c_first else (lambda x: (x, c))
        if not add.is_bounded(left, right):
            return SKIPPED
        total = plus(left, right)
        if not all(mul.is_bounded(*order(x)) for x in (total, left, right)):
            return SKIPPED
        first, second = times(*order(left)), times(*order(right))
        if not add.is_bounded(first, second):
            return SKIPPED
        return times(*order(total)) == plus(first, second)

    def predicate(a, b, c):
        outcomes = [expand(a, b, c, False), expand(a, b, c, True)]
        if any(outcome is False for outcome in outcomes):
            return False
        if all(outcome is SKIPPED for outcome in outcomes):
            return SKIPPED
        return True

    return Law(
        name="distributivity",
        description="(a + b) * c == a * c + b * c and c * (a + b) == c * a + c * b",
        arity=3,
        predicate=predicate,
    )


# ---------------------------------------------------------------------------
# Identities
# ---------------------------------------------------------------------------

def additive_identity(
    traits: Traits, add: BinaryOperation, sub: BinaryOperation,
    neg: UnaryOperation | None,
) -> Law:
    zero = traits.convert(0)

    def predicate(x):
        if add.operator(x, zero) != x or add.operator(zero, x) != x:
            return False
        if neg is None or not neg.is_bounded(x):
            return True
        return sub.operator(zero, x) == neg.operator(x)

    return Law(
        name="additive_identity",
        description="x + 0 == 0 + x == x and 0 - x == -x",
        arity=1,
        predicate=predicate,
    )


def multiplicative_identity(traits: Traits, mul: BinaryOperation) -> Law:
    one = traits.convert(1)

    def predicate(x):
        return mul.operator(x, one) == x and mul.operator(one, x) == x

    return Law(
        name="multiplicative_identity",
        description="x * 1 == 1 * x == x",
        arity=1,
        predicate=predicate,
    )


def self_inverse(traits: Traits, sub: BinaryOperation) -> Law:
    zero = traits.convert(0)

    return Law(
        name="self_inverse",
        description="x - x == 0",
        arity=1,
        predicate=lambda x: sub.operator(x, x) == zero,
    )


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

def _find(ops, name):
    return next((op for op in ops if op.name == name), None)


def build_laws(traits: Traits) -> list[Law]:
    """Every law that applies to the operations ``traits`` declares."""
    laws: list[Law] = []

    for op in traits.unary:
        laws.append(unary_agreement(op))
    for op in traits.binary:
        laws.append(binary_agreement(op))
        if op.commutative:
            laws.append(commutativity(op))
        if op.associative:
            laws.append(associativity(op))

    add = _find(traits.binary, "add")
    sub = _find(traits.binary, "sub")
    mul = _find(traits.binary, "mul")
    neg = _find(traits.unary, "neg")

    if add is not None and mul is not None:
        laws.append(distributivity(add, mul))
    if add is not None and sub is not None:
        laws.append(additive_identity(traits, add, sub, neg))
    if mul is not None:
        laws.append(multiplicative_identity(traits, mul))
    if sub is not None:
        laws.append(self_inverse(traits, sub))

    return laws
