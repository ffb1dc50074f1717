"""Host procedures registered into an environment."""

from __future__ import annotations

from typing import Callable, Optional

from microlisp import LispValue
from microlisp.errors import MicroLispArityError
from microlisp.types.environment import Environment

PrimitiveFn = Callable[[Environment, list[LispValue]], LispValue]


class Primitive:
    """A named host callable taking ``(env, args)``.

    ``arity`` is the exact argument count, or None for variadic primitives.
    """

    __slots__ = ("name", "fn", "arity")

    def __init__(self, name: str, fn: PrimitiveFn, arity: Optional[int] = None):
        self.name = name
        self.fn = fn
        self.arity = arity

    def __call__(self, env: Environment, args: list[LispValue]) -> LispValue:
        if self.arity is not None and len(args) != self.arity:
            raise MicroLispArityError(
                f"{self.name} expects {self.arity} argument(s), got {len(args)}"
            )
        return self.fn(env, args)

    def __str__(self) -> str:
        return f"#<primitive {self.name}>"

    __repr__ = __str__
