"""User procedures created by ``lambda``."""

from __future__ import annotations

from io import StringIO

from microlisp import LispValue
from microlisp.errors import MicroLispArityError
from microlisp.reader.ast import Node
from microlisp.types.environment import Environment
from microlisp.types.symbol import Symbol


class Closure:
    """Formal parameters, a body sequence and the environment it was created in."""

    __slots__ = ("formals", "body", "env", "name")

    def __init__(
        self,
        formals: tuple[Symbol, ...],
        body: tuple[Node, ...],
        env: Environment,
        name: str | None = None,
    ):
        self.formals = formals
        self.body = body
        self.env = env
        self.name = name

    def bind(self, args: list[LispValue]) -> Environment:
        """Environment for the body: one frame of formals over the captured env."""
        if len(args) != len(self.formals):
            label = self.name or "procedure"
            raise MicroLispArityError(
                f"{label} expects {len(self.formals)} argument(s), got {len(args)}"
            )
        return self.env.with_frame(dict(zip(self.formals, args)))

    def __str__(self) -> str:
        with StringIO() as buffer:
            buffer.write("#<closure")
            if self.name:
                buffer.write(" " + self.name)
            buffer.write(" (")
            buffer.write(" ".join(str(f) for f in self.formals))
            buffer.write(")>")
            return buffer.getvalue()

    __repr__ = __str__
