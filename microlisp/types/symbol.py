from __future__ import annotations
import sys


class Symbol:
    __slots__ = ("id",)

    def __init__(self, name: str):
        # Interned so equality is by name and hashing is cheap
        self.id = sys.intern(name)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Symbol) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self):
        return f"Symbol({self.id!r})"

    def __str__(self):
        return self.id


TRUE = Symbol("#t")
FALSE = Symbol("#f")


def boolean(flag: bool) -> Symbol:
    return TRUE if flag else FALSE


def is_truthy(value) -> bool:
    """Everything except ``#f`` and the empty list counts as true."""
    from microlisp.types.nil import NilType

    return not (value == FALSE or isinstance(value, NilType))
