"""Built-in procedures for the MicroLisp global environment.

This module defines arithmetic over the numeric tower (with vector support),
comparison, logic, list and string processing, predicates, output and
``eval``/``apply``, and the ``register`` function that installs them.
"""
from __future__ import annotations

import re
from typing import Callable

from microlisp import LispValue
from microlisp.errors import MicroLispArityError, MicroLispTypeError
from microlisp.evaluation.apply import apply as apply_engine
from microlisp.evaluation.evaluator import evaluate, evaluate0
from microlisp.numeric import arith
from microlisp.numeric.tower import ONE, ZERO, Int, Number, integer, is_zero
from microlisp.printer import display_string
from microlisp.reader.parser import parse_all
from microlisp.types.closure import Closure
from microlisp.types.cons import (
    LispString,
    char_list_to_string,
    head,
    is_list,
    list_to_raw_string,
    make_list,
    tail,
    values_equal,
)
from microlisp.types.cons import cons as make_pair
from microlisp.types.cons import length as list_length
from microlisp.types.environment import Environment
from microlisp.types.nil import Nil
from microlisp.types.primitive import Primitive
from microlisp.types.symbol import FALSE, TRUE, Symbol, boolean, is_truthy
from microlisp.types.tail_call import resolve
from microlisp.types.vector import Vector


def _number(name: str, x: LispValue) -> Number:
    if not isinstance(x, Number):
        raise MicroLispTypeError(f"{name}: expected number, got {x}")
    return x


def _vector(name: str, x: LispValue) -> Vector:
    if not isinstance(x, Vector):
        raise MicroLispTypeError(f"{name}: mixed vector/non-vector arguments")
    return x


# -------------------------------
# Arithmetic
# -------------------------------
def add(env: Environment, args: list[LispValue]) -> LispValue:
    """Sum of all arguments; vectors add elementwise. ``(+)`` is 0."""
    if not args:
        return ZERO
    if isinstance(args[0], Vector):
        acc = args[0]
        for other in args[1:]:
            acc = acc.add(_vector("+", other))
        return acc
    total: Number = ZERO
    for x in args:
        total = arith.add(total, _number("+", x))
    return total


def sub(env: Environment, args: list[LispValue]) -> LispValue:
    """Subtract the rest from the first; unary negation for one argument."""
    if not args:
        return ZERO
    first, rest = args[0], args[1:]
    if isinstance(first, Vector):
        if not rest:
            return first.scale(Int(-1))
        acc = first
        for other in rest:
            acc = acc.sub(_vector("-", other))
        return acc
    result = _number("-", first)
    if not rest:
        return arith.negate(result)
    for x in rest:
        result = arith.sub(result, _number("-", x))
    return result


def mul(env: Environment, args: list[LispValue]) -> LispValue:
    """Product of all arguments; a vector may be scaled by one number."""
    if not args:
        return ONE
    if isinstance(args[0], Vector):
        if len(args) != 2:
            raise MicroLispArityError("*: vector multiplication requires one scalar argument")
        return args[0].scale(_number("*", args[1]))
    product: Number = ONE
    for x in args:
        product = arith.multiply(product, _number("*", x))
    return product


def div(env: Environment, args: list[LispValue]) -> LispValue:
    """Divide left to right. A single argument is returned unchanged."""
    if not args:
        raise MicroLispArityError("/ expects at least one argument")
    first, rest = args[0], args[1:]
    if isinstance(first, Vector):
        for x in rest:
            first = first.divide(_number("/", x))
        return first
    result = _number("/", first)
    for x in rest:
        result = arith.divide(result, _number("/", x))
    return result


def mod(env: Environment, args: list[LispValue]) -> LispValue:
    """(% n d) floored modulus: the result takes the sign of the divisor."""
    return arith.mod(args[0], args[1])


def power(env: Environment, args: list[LispValue]) -> LispValue:
    return arith.power(args[0], args[1])


def lt(env: Environment, args: list[LispValue]) -> Symbol:
    return boolean(arith.less_than(args[0], args[1]))


def gt(env: Environment, args: list[LispValue]) -> Symbol:
    return boolean(arith.greater_than(args[0], args[1]))


def lte(env: Environment, args: list[LispValue]) -> Symbol:
    return boolean(not arith.greater_than(args[0], args[1]))


def gte(env: Environment, args: list[LispValue]) -> Symbol:
    return boolean(not arith.less_than(args[0], args[1]))


def equals(env: Environment, args: list[LispValue]) -> Symbol:
    """Numbers compare by value across representations, anything else structurally."""
    return boolean(values_equal(args[0], args[1]))


# -------------------------------
# Numeric conversions and predicates
# -------------------------------
def to_inexact(env: Environment, args: list[LispValue]) -> LispValue:
    return arith.to_inexact(args[0])


def to_inexact_big(env: Environment, args: list[LispValue]) -> LispValue:
    return arith.to_inexact_big(args[0])


def real(env: Environment, args: list[LispValue]) -> LispValue:
    return arith.real_part(args[0])


def imaginary(env: Environment, args: list[LispValue]) -> LispValue:
    return arith.imaginary_part(args[0])


def complex_magnitude(env: Environment, args: list[LispValue]) -> LispValue:
    """Euclidean magnitude of a complex or quaternion; scalars are returned as is."""
    z = _number("complex-magnitude", args[0])
    return z if z.is_scalar else arith.magnitude(z)


def floor(env: Environment, args: list[LispValue]) -> LispValue:
    return arith.floor(args[0])


def _is_even(name: str, x: LispValue) -> bool:
    return is_zero(arith.mod(_number(name, x), Int(2)))


def even(env: Environment, args: list[LispValue]) -> Symbol:
    return boolean(_is_even("even?", args[0]))


def odd(env: Environment, args: list[LispValue]) -> Symbol:
    return boolean(not _is_even("odd?", args[0]))


def is_number(env: Environment, args: list[LispValue]) -> Symbol:
    return boolean(isinstance(args[0], Number))


# -------------------------------
# Logic
# -------------------------------
def logical_not(env: Environment, args: list[LispValue]) -> Symbol:
    """Logical NOT; only ``()`` and ``#f`` are considered false."""
    return boolean(not is_truthy(args[0]))


def logical_and(env: Environment, args: list[LispValue]) -> Symbol:
    return boolean(is_truthy(args[0]) and is_truthy(args[1]))


def logical_or(env: Environment, args: list[LispValue]) -> Symbol:
    return boolean(is_truthy(args[0]) or is_truthy(args[1]))


def logical_xor(env: Environment, args: list[LispValue]) -> Symbol:
    return boolean(is_truthy(args[0]) != is_truthy(args[1]))


# -------------------------------
# Lists and strings
# -------------------------------
def cons(env: Environment, args: list[LispValue]) -> LispValue:
    """Construct a pair from head and tail.

    Behavior:
    - A tail of ``()`` or a list gives a longer list.
    - Any other tail gives a dotted pair.
    - A non-empty string consed onto a string concatenates the two.
    """
    return make_pair(args[0], args[1])


def list_builtin(env: Environment, args: list[LispValue]) -> LispValue:
    return make_list(args)


def car(env: Environment, args: list[LispValue]) -> LispValue:
    """First element of a list, or first character of a string."""
    return head(args[0])


def cdr(env: Environment, args: list[LispValue]) -> LispValue:
    """Everything after the first element, or the rest of a string."""
    return tail(args[0])


def length(env: Environment, args: list[LispValue]) -> LispValue:
    return integer(list_length(args[0]))


def null(env: Environment, args: list[LispValue]) -> Symbol:
    """Predicate: #t for ``()`` and the empty string."""
    x = args[0]
    return boolean(x is Nil or (isinstance(x, LispString) and not x.text))


def is_list_builtin(env: Environment, args: list[LispValue]) -> Symbol:
    return boolean(is_list(args[0]))


def is_string(env: Environment, args: list[LispValue]) -> Symbol:
    return boolean(isinstance(args[0], LispString))


def is_symbol(env: Environment, args: list[LispValue]) -> Symbol:
    """Predicate: #t for symbols other than the booleans."""
    x = args[0]
    return boolean(isinstance(x, Symbol) and x not in (TRUE, FALSE))


def is_procedure(env: Environment, args: list[LispValue]) -> Symbol:
    x = args[0]
    return boolean(
        isinstance(x, (Closure, Primitive)) or (callable(x) and not isinstance(x, type))
    )


def string_to_list(env: Environment, args: list[LispValue]) -> LispValue:
    x = args[0]
    if not isinstance(x, LispString):
        raise MicroLispTypeError(f"string->list expects a string, got {x}")
    return x.to_char_list()


def list_to_string(env: Environment, args: list[LispValue]) -> LispValue:
    x = args[0]
    if x is Nil:
        return LispString("")
    s = char_list_to_string(x)
    if s is None:
        raise MicroLispTypeError(f"list->string expects a list of characters, got {x}")
    return s


def symbol_to_string(env: Environment, args: list[LispValue]) -> LispValue:
    """(symbol->string x) -> name of symbol x, or #f"""
    x = args[0]
    if not isinstance(x, Symbol):
        return FALSE
    return LispString(x.id)


def string_to_symbol(env: Environment, args: list[LispValue]) -> LispValue:
    """(string->symbol x) -> Symbol named by string x, or #f"""
    x = args[0]
    if not isinstance(x, LispString) or not x.text:
        return FALSE
    return Symbol(x.text)


def apply(env: Environment, args: list[LispValue]) -> LispValue:
    """Builtin apply: (apply f args) delegates to the central engine.

    If the callee produces a TailCall, the trampoline is stepped with
    evaluate0 until a concrete value is produced.
    """
    func, arg_list = args
    if not is_list(arg_list):
        raise MicroLispTypeError("Second argument to apply must be a list")
    result = apply_engine(func, list(arg_list or ()), env, evaluate0, False)
    return resolve(result, evaluate0)


# -------------------------------
# Vectors
# -------------------------------
def make_vector(env: Environment, args: list[LispValue]) -> Vector:
    """($ n ...) builds a vector from its numeric arguments."""
    return Vector(args)


def size(env: Environment, args: list[LispValue]) -> LispValue:
    return integer(_vector("size", args[0]).size)


# -------------------------------
# Output and eval
# -------------------------------
_PRINTF_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "033": "\x1b"}
_PRINTF_ESCAPE_RE = re.compile(r"\\(u[0-9a-fA-F]{4}|033|.)", re.DOTALL)


def unescape(text: str) -> str:
    """Decode backslash escapes; an unknown escape yields the escaped character."""

    def replace(m: re.Match) -> str:
        code = m.group(1)
        if len(code) == 5 and code[0] == "u":
            return chr(int(code[1:], 16))
        return _PRINTF_ESCAPES.get(code, code)

    return _PRINTF_ESCAPE_RE.sub(replace, text)


def print_builtin(env: Environment, args: list[LispValue]) -> LispValue:
    """Print the argument followed by a newline; strings are printed raw."""
    print(display_string(args[0]))
    return LispString("")


def printf_builtin(env: Environment, args: list[LispValue]) -> LispValue:
    """Print the argument raw with escapes decoded and no trailing newline."""
    print(unescape(display_string(args[0])), end="", flush=True)
    return LispString("")


def eval_builtin(env: Environment, args: list[LispValue]) -> LispValue:
    """(eval src) parses ``src`` and evaluates every form; returns the last value."""
    source = list_to_raw_string(args[0])
    result: LispValue = Nil
    for node in parse_all(source):
        result = evaluate(node, env)
    return result


_BUILTINS: list[tuple[str, Callable[[Environment, list[LispValue]], LispValue], int | None]] = [
    ("+", add, None),
    ("-", sub, None),
    ("*", mul, None),
    ("/", div, None),
    ("%", mod, 2),
    ("^", power, 2),
    ("<", lt, 2),
    (">", gt, 2),
    ("<=", lte, 2),
    (">=", gte, 2),
    ("=", equals, 2),
    ("eq?", equals, 2),
    ("to-inexact", to_inexact, 1),
    ("to-inexact-big", to_inexact_big, 1),
    ("real", real, 1),
    ("imaginary", imaginary, 1),
    ("complex-magnitude", complex_magnitude, 1),
    ("floor", floor, 1),
    ("even?", even, 1),
    ("odd?", odd, 1),
    ("number?", is_number, 1),
    ("not", logical_not, 1),
    ("!", logical_not, 1),
    ("and", logical_and, 2),
    ("or", logical_or, 2),
    ("xor", logical_xor, 2),
    ("cons", cons, 2),
    ("list", list_builtin, None),
    ("head", car, 1),
    ("car", car, 1),  # alias for head
    ("tail", cdr, 1),
    ("cdr", cdr, 1),  # alias for tail
    ("length", length, 1),
    ("null?", null, 1),
    ("list?", is_list_builtin, 1),
    ("string?", is_string, 1),
    ("symbol?", is_symbol, 1),
    ("procedure?", is_procedure, 1),
    ("string->list", string_to_list, 1),
    ("list->string", list_to_string, 1),
    ("symbol->string", symbol_to_string, 1),
    ("string->symbol", string_to_symbol, 1),
    ("apply", apply, 2),
    ("$", make_vector, None),
    ("size", size, 1),
    ("print", print_builtin, 1),
    ("printf", printf_builtin, 1),
    ("eval", eval_builtin, 1),
]


def register(env: Environment) -> None:
    """Register all builtin procedures and constants into the given environment."""
    env.update({Symbol(name): Primitive(name, fn, arity) for name, fn, arity in _BUILTINS})
    env.define(Symbol("else"), TRUE)
    env.define(TRUE, TRUE)
    env.define(FALSE, FALSE)
