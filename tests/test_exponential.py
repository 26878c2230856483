"""
Scenario tests for the Exponential number type.

Each class covers one surface of the type: construction, conversion,
comparison, each arithmetic operator, and text rendering.  The shared
constants below are the values the scenarios are phrased in.
"""

import copy
import pickle

import pytest

from bounds import INT64
from exponential import PRECISION, Exponential, normalize

zero = Exponential()

one = Exponential(1)
googol = Exponential(1, 100)
trillion = Exponential(1_000_000_000_000)
nano = Exponential(1, -9)

negative_one = Exponential(-1)
negative_googol = Exponential(-1, 100)
negative_trillion = Exponential(-1_000_000_000_000)
negative_nano = Exponential(-1, -9)

# 5**26 and 2**26: their product is exactly 10**26
five_pow = Exponential(1490116119384765625)
two_pow = Exponential(67108864)
ten_pow = Exponential(1, 26)


# ---------------------------------------------------------------------------
# Value semantics
# ---------------------------------------------------------------------------

class TestValueSemantics:
    def test_fields_are_read_only(self):
        with pytest.raises(AttributeError):
            one.significand = 2
        with pytest.raises(AttributeError):
            one.exponent = 2

    def test_no_instance_dict(self):
        assert not hasattr(one, "__dict__")

    def test_copies_compare_equal(self):
        assert copy.copy(googol) == googol
        assert copy.deepcopy(googol) == googol
        assert Exponential(googol) == googol
        assert pickle.loads(pickle.dumps(nano)) == nano

    def test_hash_matches_equal_ints(self):
        assert hash(trillion) == hash(1_000_000_000_000)
        assert hash(Exponential(420)) == hash(420)
        assert hash(negative_one) == hash(-1)
        assert hash(zero) == hash(0)

    def test_usable_as_dict_key(self):
        table = {Exponential(420): "a", Exponential(42, -1): "b"}
        assert table[Exponential(42, 1)] == "a"
        assert table[Exponential(420, -2)] == "b"


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestConstruct:
    def test_zero(self):
        assert zero.significand == 0
        assert zero.exponent == 0

    def test_from_integer(self):
        assert one.significand == 1
        assert one.exponent == 0
        assert trillion.significand == 1
        assert trillion.exponent == 12

    def test_from_pair(self):
        assert googol.significand == 1
        assert googol.exponent == 100
        assert nano.significand == 1
        assert nano.exponent == -9

        x = Exponential(42, -43)
        assert x.significand == 42
        assert x.exponent == -43

    def test_pair_is_renormalized(self):
        x = Exponential(4200, -3)
        assert (x.significand, x.exponent) == (42, -1)

    def test_zero_pair_collapses(self):
        x = Exponential(0, 55)
        assert (x.significand, x.exponent) == (0, 0)

    def test_extremes_survive(self):
        y = Exponential(INT64.hi, INT64.hi)
        assert y.significand == INT64.hi
        assert y.exponent == INT64.hi

        z = Exponential(INT64.lo, INT64.lo)
        assert z.significand == INT64.lo
        assert z.exponent == INT64.lo

    def test_negative(self):
        assert (negative_one.significand, negative_one.exponent) == (-1, 0)
        assert (negative_googol.significand, negative_googol.exponent) == (-1, 100)
        assert (negative_trillion.significand, negative_trillion.exponent) == (-1, 12)
        assert (negative_nano.significand, negative_nano.exponent) == (-1, -9)

    def test_wide_integer_folds_into_range(self):
        x = Exponential(10**20)
        assert (x.significand, x.exponent) == (1, 20)

    def test_out_of_range_raises(self):
        with pytest.raises(ValueError, match="significand"):
            Exponential(2**63 + 1)
        with pytest.raises(ValueError, match="exponent"):
            Exponential(1, 2**63)
        with pytest.raises(ValueError, match="exponent"):
            Exponential(10, INT64.hi)

    @pytest.mark.parametrize("bad", [1.5, "1", None, True])
    def test_non_integer_raises(self, bad):
        with pytest.raises(TypeError):
            Exponential(bad)
        with pytest.raises(TypeError):
            Exponential(1, bad)


class TestNormalize:
    def test_zero(self):
        assert normalize(0, 0) == (0, 0)
        assert normalize(0, -17) == (0, 0)

    def test_strips_trailing_zeros(self):
        assert normalize(420, 0) == (42, 1)
        assert normalize(-1000, -3) == (-1, 0)

    def test_leaves_canonical_pairs(self):
        assert normalize(42, -43) == (42, -43)
        assert normalize(INT64.lo, 0) == (INT64.lo, 0)
        assert normalize(INT64.hi, 0) == (INT64.hi, 0)


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------

class TestFloatConversion:
    @pytest.mark.parametrize("value, expected", [
        (zero, 0.0),
        (one, 1.0),
        (negative_one, -1.0),
        (nano, 1e-9),
        (negative_nano, -1e-9),
        (trillion, 1e12),
        (negative_trillion, -1e12),
        (googol, 1e100),
        (negative_googol, -1e100),
    ])
    def test_double_cast(self, value, expected):
        assert float(value) == pytest.approx(expected, rel=1e-15)

    def test_beyond_float_range(self):
        assert float(Exponential(1, 400)) == float("inf")
        assert float(Exponential(-1, 400)) == float("-inf")
        assert float(Exponential(1, -400)) == 0.0

    def test_bool(self):
        assert not zero
        assert one
        assert negative_nano


# ---------------------------------------------------------------------------
# Comparison
# ---------------------------------------------------------------------------

class TestEquality:
    @pytest.mark.parametrize("e, value", [
        (zero, 0),
        (one, 1),
        (negative_one, -1),
        (trillion, 1_000_000_000_000),
        (negative_trillion, -1_000_000_000_000),
    ])
    def test_equals(self, e, value):
        assert e == e
        assert e == value
        assert value == e

    @pytest.mark.parametrize("e, value", [
        (zero, 1),
        (one, 0),
        (negative_one, 0),
        (trillion, 10101010101),
        (negative_trillion, -1),
        (one, negative_one),
    ])
    def test_not_equals(self, e, value):
        assert e != value
        assert value != e

    def test_unrepresentable_int_is_unequal(self):
        assert one != 2**64 + 1
        assert not (one == 2**64 + 1)

    def test_foreign_types_are_unequal(self):
        assert one != 1.0
        assert one != "1"


class TestOrdering:
    def test_sign_decides(self):
        assert negative_googol < nano
        assert negative_nano < zero < nano

    def test_magnitude_decides(self):
        assert nano < one < trillion < googol
        assert negative_googol < negative_trillion < negative_one < negative_nano

    def test_same_leading_position(self):
        assert Exponential(15, -1) < Exponential(2)
        assert Exponential(123, -2) > Exponential(1229, -3)
        assert Exponential(-123, -2) < Exponential(-1229, -3)

    def test_mixed_with_int(self):
        assert 1 < Exponential(15, -1) < 2
        assert trillion >= 1_000_000_000_000
        assert trillion <= 1_000_000_000_000
        assert -1 > negative_trillion

    def test_extremes(self):
        assert Exponential(INT64.lo, INT64.lo) < zero < Exponential(INT64.hi, INT64.hi)
        assert Exponential(1, INT64.lo) > zero

    def test_unrepresentable_int(self):
        wide = 2**64 + 1
        assert one < wide
        assert trillion <= wide
        assert not (one >= wide)
        assert googol > wide
        assert -wide < negative_one
        assert negative_googol <= -wide


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------

class TestNegate:
    def test_negate(self):
        x = googol
        assert -x == 0 - x
        assert -(-x) == x

    def test_positive_and_abs(self):
        assert +negative_nano == negative_nano
        assert abs(negative_nano) == nano
        assert abs(nano) == nano

    def test_most_negative_significand_narrows(self):
        x = -Exponential(INT64.lo)
        assert INT64.contains(x.significand)
        assert x.significand == 92233720368547758
        assert x.exponent == 2


class TestAdd:
    def test_identity(self):
        assert 1 + zero == zero + 1
        assert 1 + zero == 1
        assert googol + 0 == googol

    def test_integers_are_exact(self):
        assert trillion + 1 == 1 + trillion
        assert trillion + 1 == 1_000_000_000_001

    def test_signs(self):
        assert 1 + negative_one == 0
        assert -1 + negative_one == -2

    def test_laws(self):
        x, y, z = Exponential(2), Exponential(3), Exponential(5)
        assert x + y == y + x
        assert (x + y) + z == x + (y + z)

    def test_carry_renormalizes(self):
        w = Exponential(5, 100)
        h = w + w
        assert h.significand == 1
        assert h.exponent == 101

    def test_mixed_exponents(self):
        assert Exponential(15, -1) + Exponential(25, -2) == Exponential(175, -2)

    def test_far_apart_operands_keep_leading_digits(self):
        assert googol + nano == googol
        assert googol - nano == Exponential(10**18 - 1, 82)

    def test_extreme_exponent_gap_is_cheap(self):
        tiny = Exponential(1, INT64.lo)
        huge = Exponential(1, INT64.hi)
        assert huge + tiny == huge
        assert huge - tiny < huge


class TestSubtract:
    def test_basics(self):
        assert 1 - zero == 1
        assert 0 - one == -1
        assert trillion - 1 == 999_999_999_999
        assert 1 - trillion == -999_999_999_999

    def test_signs(self):
        assert 1 - negative_one == 2
        assert -1 - negative_one == 0
        assert one - 1 == 0

    def test_regrouping(self):
        x, y, z = Exponential(2), Exponential(3), Exponential(5)
        assert (x - y) + z == x - (y - z)

    def test_borrow_renormalizes(self):
        w = Exponential(5, 100)
        h = 0 - w - w
        assert h.significand == -1
        assert h.exponent == 101


class TestMultiply:
    def test_zero(self):
        assert 0 * zero == 0
        assert zero * 0 == 0
        assert googol * 0 == 0

    def test_unit(self):
        assert one * 1 == 1
        assert 1 * negative_one == -1

    def test_exponents_add(self):
        assert trillion * nano == 1_000
        assert googol * Exponential(1, -100) == 1
        assert googol * googol == Exponential(1, 200)

    def test_laws(self):
        x, y, z = Exponential(2), Exponential(3), Exponential(5)
        assert x * y == y * x
        assert (x * y) * z == x * (y * z)

    def test_wide_product_normalizes_before_narrowing(self):
        assert five_pow * two_pow == ten_pow

    def test_wide_product_keeps_leading_digits(self):
        product = Exponential(INT64.hi) * Exponential(3)
        assert product == Exponential(276701161105643274, 2)


class TestDistributivity:
    def test_distributivity(self):
        x, y, z = Exponential(2), Exponential(3), Exponential(5)
        assert (x + y) * z == x * z + y * z
        assert z * (x + y) == x * z + y * z
        assert z * (x + y) == z * x + z * y
        assert (x + y) * z == z * x + z * y


class TestDivide:
    def test_unit_divisor(self):
        assert zero / 1 == 0
        assert one / 1 == 1
        assert googol / 1 == googol

    def test_exponents_subtract(self):
        assert googol / nano == Exponential(1, 109)
        assert nano / googol == Exponential(1, -109)
        assert nano / (2 * googol) == Exponential(5, -110)
        assert Exponential(1, 200) / googol == googol

    def test_fixed_precision(self):
        third = one / 3
        assert third == Exponential(333333333333333333, -18)
        assert len(str(third.significand)) == PRECISION

    def test_truncates_toward_zero(self):
        assert Exponential(2) / 3 == Exponential(666666666666666666, -18)
        assert Exponential(-2) / 3 == Exponential(-666666666666666666, -18)

    def test_sign(self):
        assert googol / -1 == negative_googol
        assert negative_googol / -1 == googol

    def test_terminating_quotient_is_exact(self):
        assert ten_pow / five_pow == two_pow
        assert ten_pow / two_pow == five_pow

    def test_int_numerator(self):
        assert 1 / Exponential(4) == Exponential(25, -2)

    def test_by_zero_raises(self):
        with pytest.raises(ZeroDivisionError):
            one / zero
        with pytest.raises(ZeroDivisionError):
            one / 0


class TestForeignOperands:
    def test_float_operand_not_supported(self):
        with pytest.raises(TypeError):
            one + 1.5
        with pytest.raises(TypeError):
            1.5 * one

    def test_ordering_against_str_not_supported(self):
        with pytest.raises(TypeError):
            one < "2"


# ---------------------------------------------------------------------------
# Text rendering
# ---------------------------------------------------------------------------

RENDERINGS = [
    (zero, "0"),
    (one, "1"),
    (googol, "1e100"),
    (trillion, "1e12"),
    (nano, "1e-9"),
    (negative_one, "-1"),
    (negative_googol, "-1e100"),
    (negative_trillion, "-1e12"),
    (negative_nano, "-1e-9"),
    (Exponential(42), "42"),
    (Exponential(420), "42e1"),
    (Exponential(42, -1), "42e-1"),
]


class TestString:
    @pytest.mark.parametrize("value, text", RENDERINGS)
    def test_str(self, value, text):
        assert str(value) == text

    @pytest.mark.parametrize("value, text", RENDERINGS)
    def test_print(self, value, text, capsys):
        print(value, end="")
        assert capsys.readouterr().out == text

    @pytest.mark.parametrize("value, text", RENDERINGS)
    def test_format(self, value, text):
        assert f"{value}" == text

    def test_repr(self):
        assert repr(Exponential(42, -1)) == "Exponential(42, -1)"
        assert repr(zero) == "Exponential(0, 0)"
