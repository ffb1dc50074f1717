"""Fixed-size numeric vectors backed by numpy object arrays."""

from __future__ import annotations

from typing import Iterable, Iterator

import numpy as np

from microlisp.errors import MicroLispTypeError
from microlisp.numeric import arith
from microlisp.numeric.tower import Number

# elementwise kernels over tower numbers
_add = np.frompyfunc(arith.add, 2, 1)
_sub = np.frompyfunc(arith.sub, 2, 1)
_mul = np.frompyfunc(arith.multiply, 2, 1)
_div = np.frompyfunc(arith.divide, 2, 1)
_eq = np.frompyfunc(arith.numeric_equals, 2, 1)


class Vector:
    __slots__ = ("items",)

    def __init__(self, items: Iterable[Number]):
        values = list(items)
        for v in values:
            if not isinstance(v, Number):
                raise MicroLispTypeError(f"Vector elements must be numbers, got {v}")
        arr = np.empty(len(values), dtype=object)
        arr[:] = values
        arr.flags.writeable = False
        self.items = arr

    @classmethod
    def _wrap(cls, arr: np.ndarray) -> Vector:
        v = cls.__new__(cls)
        arr = np.asarray(arr, dtype=object)
        arr.flags.writeable = False
        v.items = arr
        return v

    @property
    def size(self) -> int:
        return len(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Number]:
        return iter(self.items.tolist())

    def __getitem__(self, i: int) -> Number:
        return self.items[i]

    def _same_size(self, other: Vector, op: str) -> None:
        if self.size != other.size:
            raise MicroLispTypeError(
                f"Cannot {op} vectors of size {self.size} and {other.size}"
            )

    def add(self, other: Vector) -> Vector:
        self._same_size(other, "add")
        return Vector._wrap(_add(self.items, other.items))

    def sub(self, other: Vector) -> Vector:
        self._same_size(other, "subtract")
        return Vector._wrap(_sub(self.items, other.items))

    def scale(self, factor: Number) -> Vector:
        return Vector._wrap(_mul(self.items, factor))

    def divide(self, divisor: Number) -> Vector:
        return Vector._wrap(_div(self.items, divisor))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector) or self.size != other.size:
            return False
        return bool(np.all(_eq(self.items, other.items)))

    __hash__ = None

    def __repr__(self) -> str:
        return "<" + " ".join(str(x) for x in self) + ">"
