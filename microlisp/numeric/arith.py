"""Arithmetic over the numeric tower.

Each binary operation joins its operands' kinds, promotes both to the join and
dispatches through a table keyed by that kind. Adding a variant means adding a
row to each table and a case to :func:`microlisp.numeric.tower.promote`.
"""

from __future__ import annotations

import math
import operator
from decimal import ROUND_FLOOR
from typing import Callable

from microlisp.errors import (
    MicroLispArithmeticError,
    MicroLispDivisionByZero,
    MicroLispTypeError,
)
from microlisp.numeric.tower import (
    BIG_CONTEXT,
    ZERO,
    BigFloat,
    Complex,
    Float,
    Int,
    BigInt,
    Kind,
    Number,
    Quaternion,
    components,
    from_fraction,
    integer,
    is_zero,
    join,
    one_like,
    promote,
    to_decimal,
    to_float,
    to_fraction,
)

BinaryOp = Callable[[Number, Number], Number]


def _check(*values) -> None:
    for v in values:
        if not isinstance(v, Number):
            raise MicroLispTypeError(f"Expected a number, got {v}")


def _binary(table: dict[Kind, BinaryOp], a: Number, b: Number) -> Number:
    _check(a, b)
    kind = join(a, b)
    return table[kind](promote(a, kind), promote(b, kind))


# scalar rows


def _exact(op) -> BinaryOp:
    def run(x, y):
        return from_fraction(op(to_fraction(x), to_fraction(y)))

    return run


def _int(op) -> BinaryOp:
    def run(x, y):
        return integer(op(x.value, y.value))

    return run


def _float(op, big_op) -> BinaryOp:
    def run(x, y):
        try:
            r = op(x.value, y.value)
        except OverflowError:
            r = math.inf
        if math.isfinite(r) or not (math.isfinite(x.value) and math.isfinite(y.value)):
            return Float(r)
        # finite operands overflowed the double range
        return BigFloat(big_op(to_decimal(x), to_decimal(y)))

    return run


def _big(big_op) -> BinaryOp:
    def run(x, y):
        return BigFloat(big_op(x.value, y.value))

    return run


# complex and quaternion rows


def _componentwise(op: BinaryOp, cls) -> BinaryOp:
    def run(x, y):
        return cls(*(op(p, q) for p, q in zip(components(x), components(y))))

    return run


def _complex_mul(x: Complex, y: Complex) -> Number:
    a, b = x.real, x.imag
    c, d = y.real, y.imag
    return Complex(sub(multiply(a, c), multiply(b, d)), add(multiply(a, d), multiply(b, c)))


def _quaternion_mul(x: Quaternion, y: Quaternion) -> Number:
    a1, b1, c1, d1 = components(x)
    a2, b2, c2, d2 = components(y)

    def total(*terms):
        acc = ZERO
        for sign, p, q in terms:
            t = multiply(p, q)
            acc = add(acc, t) if sign > 0 else sub(acc, t)
        return acc

    return Quaternion(
        total((1, a1, a2), (-1, b1, b2), (-1, c1, c2), (-1, d1, d2)),
        total((1, a1, b2), (1, b1, a2), (1, c1, d2), (-1, d1, c2)),
        total((1, a1, c2), (-1, b1, d2), (1, c1, a2), (1, d1, b2)),
        total((1, a1, d2), (1, b1, c2), (-1, c1, b2), (1, d1, a2)),
    )


def _norm_squared(n: Number) -> Number:
    acc = ZERO
    for c in components(n):
        acc = add(acc, multiply(c, c))
    return acc


def _complex_div(x: Complex, y: Complex) -> Number:
    denom = _norm_squared(y)
    if is_zero(denom):
        raise MicroLispDivisionByZero("Division by zero complex number")
    a, b = x.real, x.imag
    c, d = y.real, y.imag
    re = add(multiply(a, c), multiply(b, d))
    im = sub(multiply(b, c), multiply(a, d))
    return Complex(divide(re, denom), divide(im, denom))


def _quaternion_div(x: Quaternion, y: Quaternion) -> Number:
    denom = _norm_squared(y)
    if is_zero(denom):
        raise MicroLispDivisionByZero("Division by zero quaternion")
    product = _quaternion_mul(x, conjugate(y))
    return Quaternion(*(divide(c, denom) for c in components(product)))


# division rows


def _exact_div(x, y):
    fy = to_fraction(y)
    if fy == 0:
        raise MicroLispDivisionByZero("Division by zero")
    return from_fraction(to_fraction(x) / fy)


_float_quotient = _float(operator.truediv, BIG_CONTEXT.divide)


def _float_div(x, y):
    if y.value == 0:
        raise MicroLispDivisionByZero("Division by zero")
    return _float_quotient(x, y)


def _big_div(x, y):
    if y.value == 0:
        raise MicroLispDivisionByZero("Division by zero")
    return BigFloat(BIG_CONTEXT.divide(x.value, y.value))


ADD: dict[Kind, BinaryOp] = {
    Kind.INT: _int(operator.add),
    Kind.BIGINT: _int(operator.add),
    Kind.RATIONAL: _exact(operator.add),
    Kind.FLOAT: _float(operator.add, BIG_CONTEXT.add),
    Kind.BIGFLOAT: _big(BIG_CONTEXT.add),
}

SUB: dict[Kind, BinaryOp] = {
    Kind.INT: _int(operator.sub),
    Kind.BIGINT: _int(operator.sub),
    Kind.RATIONAL: _exact(operator.sub),
    Kind.FLOAT: _float(operator.sub, BIG_CONTEXT.subtract),
    Kind.BIGFLOAT: _big(BIG_CONTEXT.subtract),
}

MUL: dict[Kind, BinaryOp] = {
    Kind.INT: _int(operator.mul),
    Kind.BIGINT: _int(operator.mul),
    Kind.RATIONAL: _exact(operator.mul),
    Kind.FLOAT: _float(operator.mul, BIG_CONTEXT.multiply),
    Kind.BIGFLOAT: _big(BIG_CONTEXT.multiply),
    Kind.COMPLEX: _complex_mul,
    Kind.QUATERNION: _quaternion_mul,
}

DIV: dict[Kind, BinaryOp] = {
    Kind.INT: _exact_div,
    Kind.BIGINT: _exact_div,
    Kind.RATIONAL: _exact_div,
    Kind.FLOAT: _float_div,
    Kind.BIGFLOAT: _big_div,
    Kind.COMPLEX: _complex_div,
    Kind.QUATERNION: _quaternion_div,
}


def add(a: Number, b: Number) -> Number:
    return _binary(ADD, a, b)


def sub(a: Number, b: Number) -> Number:
    return _binary(SUB, a, b)


def multiply(a: Number, b: Number) -> Number:
    return _binary(MUL, a, b)


def divide(a: Number, b: Number) -> Number:
    return _binary(DIV, a, b)


ADD[Kind.COMPLEX] = _componentwise(add, Complex)
ADD[Kind.QUATERNION] = _componentwise(add, Quaternion)
SUB[Kind.COMPLEX] = _componentwise(sub, Complex)
SUB[Kind.QUATERNION] = _componentwise(sub, Quaternion)


def negate(n: Number) -> Number:
    _check(n)
    match n:
        case Int(v) | BigInt(v):
            return integer(-v)
        case Complex(re, im):
            return Complex(negate(re), negate(im))
        case Quaternion(r, i, j, k):
            return Quaternion(negate(r), negate(i), negate(j), negate(k))
    return type(n)(-n.value)


def conjugate(n: Number) -> Number:
    match n:
        case Complex(re, im):
            return Complex(re, negate(im))
        case Quaternion(r, i, j, k):
            return Quaternion(r, negate(i), negate(j), negate(k))
    return n


# modulo


def _floored_mod(x: Number, y: Number) -> Number:
    kind = join(x, y)
    x, y = promote(x, kind), promote(y, kind)
    match kind:
        case Kind.FLOAT:
            return Float(x.value % y.value)
        case Kind.BIGFLOAT:
            q = BIG_CONTEXT.divide(x.value, y.value).to_integral_value(rounding=ROUND_FLOOR)
            return BigFloat(BIG_CONTEXT.subtract(x.value, BIG_CONTEXT.multiply(y.value, q)))
    return from_fraction(to_fraction(x) % to_fraction(y))


def mod(a: Number, b: Number) -> Number:
    """Floored modulo: the result takes the sign of the divisor."""
    _check(a, b)
    if not b.is_scalar:
        raise MicroLispTypeError(f"Modulo divisor must be scalar; got {b}")
    if is_zero(b):
        raise MicroLispDivisionByZero("Modulo by zero")
    match a:
        case Complex(re, im):
            return Complex(_floored_mod(re, b), _floored_mod(im, b))
        case Quaternion(r, i, j, k):
            return Quaternion(*(_floored_mod(c, b) for c in (r, i, j, k)))
    return _floored_mod(a, b)


# exponentiation


def _pow_integer(base: Number, exponent: int) -> Number:
    if exponent == 0:
        return one_like(base)
    power = abs(exponent)
    result = one_like(base)
    factor = base
    while power:
        if power & 1:
            result = multiply(result, factor)
        power >>= 1
        if power:
            factor = multiply(factor, factor)
    if exponent < 0:
        return divide(one_like(base), result)
    return result


def power(base: Number, exponent: Number) -> Number:
    _check(base, exponent)
    if not exponent.is_scalar:
        raise MicroLispTypeError(f"Exponent must be scalar; got {exponent}")
    if isinstance(exponent, (Int, BigInt)):
        return _pow_integer(base, exponent.value)
    if not base.is_scalar:
        raise MicroLispTypeError(
            f"Non-integer exponents are unsupported for {base.kind.name.lower()} numbers"
        )
    try:
        result = math.pow(to_float(base), to_float(exponent))
    except (OverflowError, ValueError) as e:
        raise MicroLispArithmeticError(
            "Exponentiation result undefined for given operands"
        ) from e
    if not math.isfinite(result):
        raise MicroLispArithmeticError("Exponentiation out of range")
    return Float(result)


# comparison


def _compare_scalar(a: Number, b: Number) -> int:
    kind = join(a, b)
    x, y = promote(a, kind).value, promote(b, kind).value
    return (x > y) - (x < y)


def _compare(a: Number, b: Number) -> int:
    _check(a, b)
    if a.is_scalar and b.is_scalar:
        return _compare_scalar(a, b)
    # non-scalars order by magnitude
    return _compare_scalar(_norm_squared(a), _norm_squared(b))


def less_than(a: Number, b: Number) -> bool:
    return _compare(a, b) < 0


def greater_than(a: Number, b: Number) -> bool:
    return _compare(a, b) > 0


def numeric_equals(a: Number, b: Number) -> bool:
    """Value equality across representations, e.g. ``2`` equals ``4/2``."""
    _check(a, b)
    if a.is_scalar and b.is_scalar:
        return _compare_scalar(a, b) == 0
    kind = join(a, b)
    return all(
        numeric_equals(p, q)
        for p, q in zip(components(promote(a, kind)), components(promote(b, kind)))
    )


# conversions


def to_inexact(n: Number) -> Number:
    _check(n)
    match n:
        case Float():
            return n
        case Complex(re, im):
            return Complex(to_inexact(re), to_inexact(im))
        case Quaternion(r, i, j, k):
            return Quaternion(*(to_inexact(c) for c in (r, i, j, k)))
    try:
        return Float(to_float(n))
    except OverflowError as e:
        raise MicroLispArithmeticError(f"{n} is out of double range") from e


def to_inexact_big(n: Number) -> Number:
    _check(n)
    match n:
        case BigFloat():
            return n
        case Complex(re, im):
            return Complex(to_inexact_big(re), to_inexact_big(im))
        case Quaternion(r, i, j, k):
            return Quaternion(*(to_inexact_big(c) for c in (r, i, j, k)))
    return BigFloat(BIG_CONTEXT.plus(to_decimal(n)))


def magnitude(n: Number) -> Number:
    _check(n)
    return Float(math.sqrt(abs(to_float(_norm_squared(n)))))


def floor(n: Number) -> Number:
    _check(n)
    match n:
        case Int() | BigInt():
            return n
        case Float(v):
            if not math.isfinite(v):
                raise MicroLispArithmeticError(f"Cannot floor {n}")
            return integer(math.floor(v))
        case BigFloat(v):
            return integer(int(v.to_integral_value(rounding=ROUND_FLOOR)))
        case Complex() | Quaternion():
            raise MicroLispTypeError(f"floor expects a real number, got {n}")
    return integer(math.floor(to_fraction(n)))


def real_part(n: Number) -> Number:
    _check(n)
    if n.is_scalar:
        return n
    return components(n)[0]


def imaginary_part(n: Number) -> Number:
    _check(n)
    if isinstance(n, Complex):
        return n.imag
    if isinstance(n, Quaternion):
        return n.i
    return ZERO


def is_integral(n: Number) -> bool:
    match n:
        case Int() | BigInt():
            return True
        case Float(v):
            return math.isfinite(v) and v.is_integer()
        case BigFloat(v):
            return v.is_finite() and v == v.to_integral_value()
    return False

