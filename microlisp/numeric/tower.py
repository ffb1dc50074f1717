"""Numeric tower value types.

Every number is one of a closed set of variants, ordered by the promotion
lattice::

    Int < BigInt < Rational < Float < BigFloat < Complex < Quaternion

Complex and Quaternion wrap scalar components. Constructors normalise their
results: integers choose Int or BigInt by size, and rationals are reduced with
a positive denominator, collapsing to an integer when the denominator is 1.
"""

from __future__ import annotations

import decimal
import math
from dataclasses import dataclass
from decimal import Decimal
from enum import IntEnum
from fractions import Fraction

from microlisp.errors import MicroLispDivisionByZero, MicroLispTypeError

INT_MIN = -(2**63)
INT_MAX = 2**63 - 1

# 34 significant digits, the same as IEEE 754 decimal128
BIG_CONTEXT = decimal.Context(prec=34, rounding=decimal.ROUND_HALF_EVEN)


class Kind(IntEnum):
    INT = 0
    BIGINT = 1
    RATIONAL = 2
    FLOAT = 3
    BIGFLOAT = 4
    COMPLEX = 5
    QUATERNION = 6


SCALAR_KINDS = frozenset(
    {Kind.INT, Kind.BIGINT, Kind.RATIONAL, Kind.FLOAT, Kind.BIGFLOAT}
)
EXACT_KINDS = frozenset({Kind.INT, Kind.BIGINT, Kind.RATIONAL})


class Number:
    __slots__ = ()
    kind: Kind

    @property
    def is_scalar(self) -> bool:
        return self.kind in SCALAR_KINDS

    @property
    def is_exact(self) -> bool:
        if self.kind in EXACT_KINDS:
            return True
        if self.kind in SCALAR_KINDS:
            return False
        return all(c.is_exact for c in components(self))

    def __str__(self) -> str:
        return format_number(self)


@dataclass(frozen=True, slots=True)
class Int(Number):
    value: int
    kind = Kind.INT


@dataclass(frozen=True, slots=True)
class BigInt(Number):
    value: int
    kind = Kind.BIGINT


@dataclass(frozen=True, slots=True)
class Rational(Number):
    value: Fraction
    kind = Kind.RATIONAL

    @property
    def numerator(self) -> int:
        return self.value.numerator

    @property
    def denominator(self) -> int:
        return self.value.denominator


@dataclass(frozen=True, slots=True)
class Float(Number):
    value: float
    kind = Kind.FLOAT


@dataclass(frozen=True, slots=True)
class BigFloat(Number):
    value: Decimal
    kind = Kind.BIGFLOAT


@dataclass(frozen=True, slots=True)
class Complex(Number):
    real: Number
    imag: Number
    kind = Kind.COMPLEX


@dataclass(frozen=True, slots=True)
class Quaternion(Number):
    real: Number
    i: Number
    j: Number
    k: Number
    kind = Kind.QUATERNION


ZERO = Int(0)
ONE = Int(1)


# constructors


def integer(n: int) -> Number:
    if INT_MIN <= n <= INT_MAX:
        return Int(n)
    return BigInt(n)


def from_fraction(f: Fraction) -> Number:
    if f.denominator == 1:
        return integer(f.numerator)
    return Rational(f)


def rational(p: int, q: int) -> Number:
    if q == 0:
        raise MicroLispDivisionByZero(f"Rational with zero denominator: {p}/{q}")
    return from_fraction(Fraction(p, q))


def real(x: float | Decimal) -> Number:
    if isinstance(x, Decimal):
        return BigFloat(BIG_CONTEXT.plus(x))
    return Float(float(x))


def make_complex(re: Number, im: Number) -> Complex:
    return Complex(re, im)


def make_quaternion(r: Number, i: Number, j: Number, k: Number) -> Quaternion:
    return Quaternion(r, i, j, k)


def from_python(value) -> Number:
    """Wrap a host number (bool excluded) into the tower."""
    match value:
        case Number():
            return value
        case bool():
            raise MicroLispTypeError(f"Not a number: {value!r}")
        case int():
            return integer(value)
        case Fraction():
            return from_fraction(value)
        case float():
            return Float(value)
        case Decimal():
            return real(value)
        case complex():
            return Complex(Float(value.real), Float(value.imag))
    raise MicroLispTypeError(f"Not a number: {value!r}")


# component access


def components(n: Number) -> tuple[Number, ...]:
    match n:
        case Complex(re, im):
            return (re, im)
        case Quaternion(r, i, j, k):
            return (r, i, j, k)
    return (n,)


def zero_like(n: Number) -> Number:
    match n.kind:
        case Kind.FLOAT:
            return Float(0.0)
        case Kind.BIGFLOAT:
            return BigFloat(Decimal(0))
        case Kind.COMPLEX:
            return Complex(ZERO, ZERO)
        case Kind.QUATERNION:
            return Quaternion(ZERO, ZERO, ZERO, ZERO)
    return ZERO


def one_like(n: Number) -> Number:
    match n.kind:
        case Kind.FLOAT:
            return Float(1.0)
        case Kind.BIGFLOAT:
            return BigFloat(Decimal(1))
        case Kind.COMPLEX:
            return Complex(ONE, ZERO)
        case Kind.QUATERNION:
            return Quaternion(ONE, ZERO, ZERO, ZERO)
    return ONE


def is_zero(n: Number) -> bool:
    if n.is_scalar:
        return n.value == 0
    return all(is_zero(c) for c in components(n))


# scalar conversions


def to_fraction(n: Number) -> Fraction:
    match n:
        case Int(v) | BigInt(v):
            return Fraction(v)
        case Rational(v):
            return v
        case Float(v):
            return Fraction(v)
        case BigFloat(v):
            return Fraction(v)
    raise MicroLispTypeError(f"Expected a real number, got {n}")


def to_float(n: Number) -> float:
    """Convert a scalar to a double; raises OverflowError when it does not fit."""
    match n:
        case Int(v) | BigInt(v):
            return float(v)
        case Rational(v):
            return v.numerator / v.denominator
        case Float(v):
            return v
        case BigFloat(v):
            return float(v)
    raise MicroLispTypeError(f"Expected a real number, got {n}")


def to_decimal(n: Number) -> Decimal:
    match n:
        case Int(v) | BigInt(v):
            return Decimal(v)
        case Rational(v):
            return BIG_CONTEXT.divide(Decimal(v.numerator), Decimal(v.denominator))
        case Float(v):
            # shortest repr, as a decimal literal would have been written
            return Decimal(repr(v))
        case BigFloat(v):
            return v
    raise MicroLispTypeError(f"Expected a real number, got {n}")


def _fits_float(n: Number) -> bool:
    if n.kind in (Kind.INT, Kind.BIGINT, Kind.RATIONAL):
        try:
            return math.isfinite(to_float(n))
        except OverflowError:
            return False
    return True


# promotion


def join(a: Number, b: Number) -> Kind:
    """The lattice join of two operands' kinds.

    Exact operands too large for a double push a Float join up to BigFloat.
    """
    kind = max(a.kind, b.kind)
    if kind is Kind.FLOAT and not (_fits_float(a) and _fits_float(b)):
        return Kind.BIGFLOAT
    return kind


def promote(n: Number, kind: Kind) -> Number:
    """Re-represent ``n`` at ``kind``. ``kind`` must not be below ``n.kind``."""
    if n.kind == kind:
        return n
    if kind < n.kind:
        raise ValueError(f"cannot demote {n.kind.name} to {kind.name}")
    match kind:
        case Kind.BIGINT:
            return BigInt(n.value)
        case Kind.RATIONAL:
            return Rational(to_fraction(n))
        case Kind.FLOAT:
            return Float(to_float(n))
        case Kind.BIGFLOAT:
            return BigFloat(to_decimal(n))
        case Kind.COMPLEX:
            return Complex(n, ZERO)
        case Kind.QUATERNION:
            if isinstance(n, Complex):
                return Quaternion(n.real, n.imag, ZERO, ZERO)
            return Quaternion(n, ZERO, ZERO, ZERO)
    raise ValueError(f"cannot promote to {kind.name}")


# printing


def _format_term(value: Number, suffix: str, show_zero: bool) -> str:
    from microlisp.numeric.arith import greater_than, negate, numeric_equals

    if is_zero(value):
        return "+0" + suffix if show_zero else ""
    positive = greater_than(value, zero_like(value))
    magnitude = value if positive else negate(value)
    sign = "+" if positive else "-"
    if numeric_equals(magnitude, ONE):
        return sign + suffix
    return sign + format_number(magnitude) + suffix


def format_number(n: Number) -> str:
    match n:
        case Int(v) | BigInt(v):
            return str(v)
        case Rational(v):
            return f"{v.numerator}/{v.denominator}"
        case Float(v):
            return repr(v)
        case BigFloat(v):
            return format(v, "f")
        case Complex(re, im):
            if is_zero(im):
                return format_number(re)
            return format_number(re) + _format_term(im, "i", False)
        case Quaternion(r, i, j, k):
            return (
                format_number(r)
                + _format_term(i, "i", True)
                + _format_term(j, "j", True)
                + _format_term(k, "k", True)
            )
    raise TypeError(f"not a number: {n!r}")
