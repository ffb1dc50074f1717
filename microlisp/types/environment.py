"""Runtime environments.

An environment is a chain of frames, innermost first. There are two kinds of
frame:

- :class:`Frame` is append-only. Its bindings are fixed when it is created
  (viewed through a read-only mapping), so frames captured by closures can be
  shared freely.
- :class:`RootFrame` is the single mutable top-level frame. ``define`` at top
  level inserts or overwrites here in place, which makes top-level recursive
  and forward-referencing definitions visible to closures created earlier.

An :class:`Environment` is a handle pointing at the head frame of a chain.
Several handles can share one chain; adding a frame through one handle never
affects the others.
"""

from __future__ import annotations

from io import StringIO
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

from microlisp import LispValue
from microlisp.errors import MicroLispInvalidSymbol, MicroLispUnboundSymbol
from microlisp.types.symbol import Symbol


def _as_symbol(name) -> Symbol:
    if isinstance(name, Symbol):
        return name
    if isinstance(name, str):
        return Symbol(name)
    raise MicroLispInvalidSymbol(f"{name!r} is not a symbol")


class Frame:
    __slots__ = ("vars", "outer")

    def __init__(self, bindings: Mapping[Symbol, LispValue], outer: Optional[Frame]):
        self.vars: Mapping[Symbol, LispValue] = MappingProxyType(bindings)
        self.outer = outer


class RootFrame(Frame):
    __slots__ = ()

    def __init__(self):
        self.vars: dict[Symbol, LispValue] = {}
        self.outer = None


class Environment:
    """Handle over a chain of frames."""

    __slots__ = ("frame",)

    def __init__(self, frame: Optional[Frame] = None):
        self.frame: Frame = frame if frame is not None else RootFrame()

    def frames(self) -> Iterator[Frame]:
        frame: Optional[Frame] = self.frame
        while frame is not None:
            yield frame
            frame = frame.outer

    @property
    def root(self) -> RootFrame:
        for frame in self.frames():
            if isinstance(frame, RootFrame):
                return frame
        raise MicroLispInvalidSymbol("environment has no root frame")

    @property
    def is_root(self) -> bool:
        return isinstance(self.frame, RootFrame)

    def lookup(self, name: Symbol | str) -> LispValue:
        """Return the innermost binding of ``name``.

        Raises MicroLispUnboundSymbol if no frame binds it.
        """
        sym = _as_symbol(name)
        for frame in self.frames():
            if sym in frame.vars:
                return frame.vars[sym]
        raise MicroLispUnboundSymbol(sym.id)

    def __contains__(self, name: Symbol | str) -> bool:
        sym = _as_symbol(name)
        return any(sym in frame.vars for frame in self.frames())

    def with_frame(self, bindings: Mapping[Symbol, LispValue]) -> Environment:
        """A new handle with one more frame in front; the receiver is unchanged."""
        frame = Frame({_as_symbol(k): v for k, v in bindings.items()}, self.frame)
        return Environment(frame)

    def with_recursive_frame(self) -> tuple[Environment, dict[Symbol, LispValue]]:
        """A new handle whose head frame is filled in by the caller afterwards.

        Used by ``letr``: the returned dict backs the frame, so bindings added
        to it before the body runs are visible to every closure created in it.
        """
        slots: dict[Symbol, LispValue] = {}
        return Environment(Frame(slots, self.frame)), slots

    def fork(self) -> Environment:
        """A new handle over the same chain."""
        return Environment(self.frame)

    def define(self, name: Symbol | str, value: LispValue) -> None:
        """Bind ``name`` in this handle's innermost scope.

        On a root handle the root frame is updated in place. Otherwise a new
        single-binding frame is pushed onto this handle only.
        """
        sym = _as_symbol(name)
        if isinstance(self.frame, RootFrame):
            self.frame.vars[sym] = value
        else:
            self.frame = Frame({sym: value}, self.frame)

    def update(self, bindings: Mapping[Symbol | str, LispValue]) -> None:
        for name, value in bindings.items():
            self.define(name, value)

    def __str__(self) -> str:
        with StringIO() as buffer:
            buffer.write("<Environment")
            for depth, frame in enumerate(self.frames()):
                names = " ".join(str(k) for k in list(frame.vars)[:8])
                buffer.write(f" [{depth}: {names}]")
            buffer.write(">")
            return buffer.getvalue()
