from microlisp.numeric.tower import (
    BigFloat,
    BigInt,
    Complex,
    Float,
    Int,
    Kind,
    Number,
    Quaternion,
    Rational,
    format_number,
    from_python,
    integer,
    rational,
    real,
)
from microlisp.numeric.arith import (
    add,
    divide,
    greater_than,
    less_than,
    mod,
    multiply,
    numeric_equals,
    power,
    sub,
    to_inexact,
    to_inexact_big,
)
from microlisp.numeric.literals import parse_number
