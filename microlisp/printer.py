"""Printed representation of runtime values.

``to_printed`` produces the read-back syntax shown by the REPL: strings are
quoted, lists are parenthesised and vectors use angle brackets.
``display_string`` is what ``print`` writes: strings and character lists
appear raw, everything else as printed.
"""

from __future__ import annotations

from io import StringIO

from microlisp import LispValue
from microlisp.numeric.tower import Number, format_number
from microlisp.types.cons import Cons, LispString, char_list_to_string
from microlisp.types.nil import NilType
from microlisp.types.symbol import Symbol
from microlisp.types.vector import Vector

_ESCAPES = {'"': '\\"', "\\": "\\\\", "\n": "\\n", "\t": "\\t", "\r": "\\r"}


def _quote_string(text: str) -> str:
    return '"' + "".join(_ESCAPES.get(c, c) for c in text) + '"'


def _write(value: LispValue, out: StringIO) -> None:
    match value:
        case NilType():
            out.write("()")
        case Symbol():
            out.write(value.id)
        case LispString():
            out.write(_quote_string(value.text))
        case Number():
            out.write(format_number(value))
        case Cons():
            out.write("(")
            cell: LispValue = value
            first = True
            while isinstance(cell, Cons):
                if not first:
                    out.write(" ")
                _write(cell.head, out)
                first = False
                cell = cell.tail
            if not isinstance(cell, NilType):
                out.write(" . ")
                _write(cell, out)
            out.write(")")
        case Vector():
            out.write("<")
            out.write(" ".join(to_printed(x) for x in value))
            out.write(">")
        case bool():
            out.write("#t" if value else "#f")
        case None:
            out.write("()")
        case _:
            out.write(str(value))


def to_printed(value: LispValue) -> str:
    with StringIO() as out:
        _write(value, out)
        return out.getvalue()


def display_string(value: LispValue) -> str:
    if isinstance(value, LispString):
        return value.text
    s = char_list_to_string(value)
    if s is not None and s.text:
        return s.text
    return to_printed(value)
