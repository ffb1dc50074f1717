import math
from decimal import Decimal
from fractions import Fraction

import pytest
from hypothesis import assume, given, strategies as st

from microlisp.errors import MicroLispArithmeticError, MicroLispDivisionByZero, MicroLispTypeError
from microlisp.numeric import arith
from microlisp.numeric.literals import parse_number
from microlisp.numeric.tower import (
    INT_MAX,
    BigFloat,
    BigInt,
    Complex,
    Float,
    Int,
    Kind,
    Quaternion,
    Rational,
    format_number,
    from_python,
    integer,
    join,
    rational,
    to_fraction,
)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("42", Int(42)),
        ("-7", Int(-7)),
        ("+3", Int(3)),
        ("99999999999999999999", BigInt(99999999999999999999)),
        ("3/4", Rational(Fraction(3, 4))),
        ("-6/8", Rational(Fraction(-3, 4))),
        ("4/2", Int(2)),
        ("2.5", Float(2.5)),
        ("1+2i", Complex(Int(1), Int(2))),
        ("3i", Complex(Int(0), Int(3))),
        ("1-i", Complex(Int(1), Int(-1))),
        ("1+2i+3j+4k", Quaternion(Int(1), Int(2), Int(3), Int(4))),
        ("1+0i+2j-k", Quaternion(Int(1), Int(0), Int(2), Int(-1))),
    ],
)
def test_parse_number(text, expected):
    assert parse_number(text) == expected


@pytest.mark.parametrize("text", ["", "1/x", "1..2", "1+2x", "12a"])
def test_parse_number_rejects_malformed_text(text):
    with pytest.raises(ValueError):
        parse_number(text)


def test_decimal_outside_double_range_is_bigfloat():
    n = parse_number("1" + "0" * 400 + ".5")
    assert isinstance(n, BigFloat)


def test_integer_overflow_promotes_to_bigint():
    result = arith.add(Int(INT_MAX), Int(1))
    assert result == BigInt(INT_MAX + 1)
    assert arith.sub(result, Int(1)) == Int(INT_MAX)


@pytest.mark.parametrize(
    "a,b,kind",
    [
        (Int(1), Rational(Fraction(1, 2)), Kind.RATIONAL),
        (Rational(Fraction(1, 3)), Float(0.5), Kind.FLOAT),
        (Int(1), Float(2.0), Kind.FLOAT),
        (Float(1.5), BigFloat(Decimal("2")), Kind.BIGFLOAT),
        (Int(2), Complex(Int(1), Int(1)), Kind.COMPLEX),
        (Complex(Int(1), Int(1)), Quaternion(Int(0), Int(0), Int(1), Int(0)), Kind.QUATERNION),
    ],
)
def test_join(a, b, kind):
    assert join(a, b) is kind
    assert arith.add(a, b).kind is kind


def test_exact_join_too_large_for_float_goes_big():
    assert join(BigInt(10**400), Float(1.0)) is Kind.BIGFLOAT


def test_float_overflow_falls_back_to_bigfloat():
    result = arith.multiply(Float(1e308), Float(10.0))
    assert isinstance(result, BigFloat)


@pytest.mark.parametrize(
    "a,b,expected",
    [
        (Int(-7), Int(3), Int(2)),
        (Int(7), Int(-3), Int(-2)),
        (Float(-7.5), Int(2), Float(0.5)),
        (Rational(Fraction(7, 2)), Int(2), Rational(Fraction(3, 2))),
    ],
)
def test_floored_mod(a, b, expected):
    assert arith.mod(a, b) == expected


def test_division():
    assert arith.divide(Int(1), Int(2)) == Rational(Fraction(1, 2))
    assert arith.divide(Int(6), Int(3)) == Int(2)
    assert arith.divide(Float(1.0), Int(4)) == Float(0.25)


@pytest.mark.parametrize(
    "a,b",
    [
        (Int(1), Int(0)),
        (Rational(Fraction(1, 2)), Int(0)),
        (Float(1.0), Float(0.0)),
        (Complex(Int(1), Int(1)), Complex(Int(0), Int(0))),
        (Quaternion(Int(1), Int(0), Int(0), Int(0)), Int(0)),
    ],
)
def test_division_by_zero(a, b):
    with pytest.raises(MicroLispDivisionByZero):
        arith.divide(a, b)


def test_division_by_zero_is_a_zero_division_error():
    with pytest.raises(ZeroDivisionError):
        arith.mod(Int(1), Int(0))


def test_rational_constructor_rejects_zero_denominator():
    with pytest.raises(MicroLispDivisionByZero):
        rational(1, 0)


def test_complex_arithmetic():
    a = Complex(Int(1), Int(2))
    b = Complex(Int(3), Int(4))
    assert arith.multiply(a, b) == Complex(Int(-5), Int(10))
    assert arith.divide(a, a) == Complex(Int(1), Int(0))
    assert arith.add(a, Int(1)) == Complex(Int(2), Int(2))


def test_quaternion_units_follow_hamilton_rules():
    zero = Int(0)
    one = Int(1)
    i = Quaternion(zero, one, zero, zero)
    j = Quaternion(zero, zero, one, zero)
    k = Quaternion(zero, zero, zero, one)
    minus_one = Quaternion(Int(-1), zero, zero, zero)
    assert arith.multiply(i, j) == k
    assert arith.multiply(j, i) == arith.negate(k)
    assert arith.multiply(j, k) == i
    for unit in (i, j, k):
        assert arith.multiply(unit, unit) == minus_one


def test_quaternion_division_inverts_multiplication():
    q = Quaternion(Int(1), Int(2), Int(3), Int(4))
    p = Quaternion(Int(2), Int(0), Int(-1), Int(1))
    assert arith.numeric_equals(arith.divide(arith.multiply(q, p), p), q)


@pytest.mark.parametrize(
    "base,exponent,expected",
    [
        (Int(2), Int(10), Int(1024)),
        (Int(2), Int(-2), Rational(Fraction(1, 4))),
        (Rational(Fraction(2, 3)), Int(2), Rational(Fraction(4, 9))),
        (Complex(Int(0), Int(1)), Int(2), Complex(Int(-1), Int(0))),
        (Int(4), Float(0.5), Float(2.0)),
        (Int(2), Int(0), Int(1)),
    ],
)
def test_power(base, exponent, expected):
    assert arith.power(base, exponent) == expected


def test_power_errors():
    with pytest.raises(MicroLispArithmeticError):
        arith.power(Int(-8), Float(0.5))
    with pytest.raises(MicroLispTypeError):
        arith.power(Complex(Int(1), Int(1)), Float(0.5))


def test_comparison_and_equality():
    assert arith.less_than(Int(1), Rational(Fraction(3, 2)))
    assert arith.greater_than(Float(2.5), Int(2))
    assert arith.numeric_equals(Int(2), Rational(Fraction(4, 2)))
    assert arith.numeric_equals(Int(1), Float(1.0))
    assert arith.numeric_equals(Complex(Int(1), Int(0)), Int(1))
    assert not arith.numeric_equals(Complex(Int(1), Int(1)), Int(1))
    # non-scalars order by magnitude
    assert arith.less_than(Complex(Int(1), Int(1)), Complex(Int(3), Int(0)))


def test_conversions():
    assert arith.to_inexact(Rational(Fraction(1, 4))) == Float(0.25)
    big = arith.to_inexact_big(Rational(Fraction(1, 3)))
    assert isinstance(big, BigFloat)
    assert format_number(big) == "0." + "3" * 34
    assert arith.floor(Rational(Fraction(7, 2))) == Int(3)
    assert arith.floor(Float(-2.5)) == Int(-3)
    assert arith.magnitude(Complex(Int(3), Int(4))) == Float(5.0)
    assert arith.real_part(Complex(Int(3), Int(4))) == Int(3)
    assert arith.imaginary_part(Complex(Int(3), Int(4))) == Int(4)
    assert arith.imaginary_part(Int(3)) == Int(0)
    with pytest.raises(MicroLispTypeError):
        arith.floor(Complex(Int(1), Int(1)))


def test_from_python():
    assert from_python(3) == Int(3)
    assert from_python(Fraction(1, 2)) == Rational(Fraction(1, 2))
    assert from_python(1.5) == Float(1.5)
    with pytest.raises(MicroLispTypeError):
        from_python(True)


def test_non_numbers_are_type_errors():
    with pytest.raises(MicroLispTypeError):
        arith.add(Int(1), "a")


@pytest.mark.parametrize(
    "n,text",
    [
        (Int(-3), "-3"),
        (Rational(Fraction(-3, 4)), "-3/4"),
        (Float(2.5), "2.5"),
        (Complex(Int(1), Int(2)), "1+2i"),
        (Complex(Int(1), Int(-1)), "1-i"),
        (Complex(Int(3), Int(0)), "3"),
        (Quaternion(Int(1), Int(0), Int(2), Int(-1)), "1+0i+2j-k"),
    ],
)
def test_format_number(n, text):
    assert format_number(n) == text


# properties


@given(st.integers(), st.integers().filter(lambda q: q != 0))
def test_rational_normal_form(p, q):
    n = rational(p, q)
    if isinstance(n, Rational):
        assert math.gcd(n.numerator, n.denominator) == 1
        assert n.denominator > 1
    else:
        assert n.value * q == p
    assert arith.numeric_equals(n, Rational(Fraction(p, q)) if p % q else integer(p // q))


exact_integers = st.integers(min_value=-(10**6), max_value=10**6).map(integer)
proper_rationals = st.tuples(
    st.integers(min_value=-(10**6), max_value=10**6),
    st.integers(min_value=2, max_value=10**6),
).filter(lambda t: t[0] % t[1] != 0).map(lambda t: rational(*t))
floats = st.floats(min_value=-1e6, max_value=1e6, allow_nan=False).map(Float)


@given(exact_integers, proper_rationals)
def test_int_plus_rational_is_rational(a, b):
    assert isinstance(arith.add(a, b), Rational)
    assert isinstance(arith.sub(a, b), Rational)


@given(st.one_of(exact_integers, proper_rationals), floats)
def test_exact_with_float_is_float(a, b):
    assert isinstance(arith.add(a, b), Float)
    assert isinstance(arith.multiply(a, b), Float)
    assume(abs(b.value) >= 1e-6)
    assert isinstance(arith.divide(a, b), Float)


@given(st.one_of(exact_integers, proper_rationals, floats), st.one_of(exact_integers, floats))
def test_scalar_with_complex_is_complex(a, b):
    z = Complex(b, Int(1))
    assert isinstance(arith.add(a, z), Complex)
    assert isinstance(arith.multiply(a, z), Complex)


@given(st.one_of(exact_integers, proper_rationals), st.one_of(exact_integers, proper_rationals))
def test_exact_addition_matches_fractions(a, b):
    assert arith.add(a, b) == from_python(to_fraction(a) + to_fraction(b))
