"""Pairs, lists and strings.

Lists are chains of :class:`Cons` cells ending in ``Nil``; any other final tail
makes an improper (dotted) list. Strings are a separate immutable
:class:`LispString` value that can be viewed as a list of one-character
strings on demand, so code that walks lists with ``head``/``tail`` also walks
strings.
"""

from __future__ import annotations

from typing import Iterable, Iterator

from microlisp import LispValue
from microlisp.errors import MicroLispTypeError
from microlisp.types.nil import Nil, NilType


class Cons:
    __slots__ = ("head", "tail")

    def __init__(self, head: LispValue, tail: LispValue = Nil):
        self.head = head
        self.tail = tail

    def __iter__(self) -> Iterator[LispValue]:
        """Iterate the elements of the proper prefix of this list."""
        cell: LispValue = self
        while isinstance(cell, Cons):
            yield cell.head
            cell = cell.tail

    def last_tail(self) -> LispValue:
        cell: LispValue = self
        while isinstance(cell, Cons):
            cell = cell.tail
        return cell

    @property
    def is_proper(self) -> bool:
        return self.last_tail() is Nil

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __eq__(self, other: object) -> bool:
        a: LispValue = self
        b: LispValue = other
        while isinstance(a, Cons) and isinstance(b, Cons):
            if not values_equal(a.head, b.head):
                return False
            a, b = a.tail, b.tail
        if isinstance(a, Cons) or isinstance(b, Cons):
            return False
        return values_equal(a, b)

    __hash__ = None

    def __repr__(self) -> str:
        from microlisp.printer import to_printed

        return to_printed(self)


class LispString:
    """An immutable string value."""

    __slots__ = ("text",)

    def __init__(self, text: str):
        self.text = text

    def __eq__(self, other: object) -> bool:
        return isinstance(other, LispString) and self.text == other.text

    def __hash__(self) -> int:
        return hash((LispString, self.text))

    def __len__(self) -> int:
        return len(self.text)

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return f"LispString({self.text!r})"

    @property
    def head(self) -> LispString:
        if not self.text:
            raise MicroLispTypeError("head of empty string")
        return LispString(self.text[0])

    @property
    def tail(self) -> LispString:
        if not self.text:
            raise MicroLispTypeError("tail of empty string")
        return LispString(self.text[1:])

    def to_char_list(self) -> Cons | NilType:
        return make_list(LispString(c) for c in self.text)


def values_equal(a: LispValue, b: LispValue) -> bool:
    """Structural equality. Numbers compare with their tower equality."""
    from microlisp.numeric.tower import Number
    from microlisp.numeric.arith import numeric_equals

    if a is b:
        return True
    if isinstance(a, Number) and isinstance(b, Number):
        return numeric_equals(a, b)
    if isinstance(a, Cons) or isinstance(b, Cons):
        return isinstance(a, Cons) and isinstance(b, Cons) and a == b
    if type(a) is not type(b):
        return False
    return a == b


def make_list(items: Iterable[LispValue], tail: LispValue = Nil) -> LispValue:
    result = tail
    for item in reversed(list(items)):
        result = Cons(item, result)
    return result


def is_list(value: LispValue) -> bool:
    """True for ``()`` and for proper lists."""
    return value is Nil or (isinstance(value, Cons) and value.is_proper)


def is_char(value: LispValue) -> bool:
    return isinstance(value, LispString) and len(value.text) == 1


def char_list_to_string(value: LispValue) -> LispString | None:
    """Collapse a list of one-character strings into a string, else None."""
    if isinstance(value, LispString):
        return value
    if value is Nil or not isinstance(value, Cons) or not value.is_proper:
        return None
    chars = []
    for item in value:
        if not is_char(item):
            return None
        chars.append(item.text)
    return LispString("".join(chars))


def from_string(s: str) -> LispString:
    return LispString(s)


def list_to_raw_string(value: LispValue) -> str:
    """The unquoted text of a string or character list.

    Other values fall back to their printed form.
    """
    s = char_list_to_string(value)
    if s is not None:
        return s.text
    from microlisp.printer import to_printed

    return to_printed(value)


def cons(head: LispValue, tail: LispValue) -> LispValue:
    """Build a pair, concatenating when both sides are strings."""
    if isinstance(tail, LispString):
        if isinstance(head, LispString) and head.text:
            return LispString(head.text + tail.text)
        return Cons(head, tail.to_char_list())
    return Cons(head, tail)


def head(value: LispValue) -> LispValue:
    if isinstance(value, (Cons, LispString)):
        return value.head
    raise MicroLispTypeError(f"head expects a non-empty list, got {value}")


def tail(value: LispValue) -> LispValue:
    if isinstance(value, (Cons, LispString)):
        return value.tail
    raise MicroLispTypeError(f"tail expects a non-empty list, got {value}")


def length(value: LispValue) -> int:
    if value is Nil:
        return 0
    if isinstance(value, LispString):
        return len(value.text)
    if isinstance(value, Cons):
        if not value.is_proper:
            raise MicroLispTypeError(f"length of improper list {value}")
        return len(value)
    raise MicroLispTypeError(f"length expects a list, got {value}")
