from __future__ import annotations

import logging
import sys
from pathlib import Path

from microlisp import LispValue
from microlisp.builtin.env_builtin import register
from microlisp.builtin.io_builtin import register as register_io
from microlisp.config import get_recursion_limit
from microlisp.evaluation.evaluator import evaluate
from microlisp.modules.prelude_loader import load_prelude, load_source
from microlisp.reader.parser import Parser
from microlisp.types.environment import Environment
from microlisp.types.nil import Nil

logger = logging.getLogger(__name__)


class Interpreter:
    """
    A MicroLisp session: one global environment with the builtins registered,
    the core prelude loaded, and source text fed to it form by form.

    ``prelude`` is ``"auto"`` for the bundled prelude, ``None`` for none, or
    any other string to evaluate as prelude source.
    """

    def __init__(self, prelude: str | None = "auto"):
        limit = get_recursion_limit()
        if limit > sys.getrecursionlimit():
            sys.setrecursionlimit(limit)

        self.env = Environment()
        register(self.env)
        register_io(self.env)

        if prelude == "auto":
            load_prelude(self)
        elif prelude:
            self.eval_prelude(prelude)

    def eval_prelude(self, code: str) -> None:
        """Evaluate a string of Lisp code as prelude."""
        for node in Parser(code).parse_all():
            evaluate(node, self.env)

    def eval(self, code: str) -> LispValue:
        """Evaluate every form in ``code``; returns the last result, or () if none."""
        result: LispValue = Nil
        for node in Parser(code).parse_all():
            result = evaluate(node, self.env)
        return result

    def load_file(self, name: str) -> Path:
        """Evaluate a source file into this session; returns the resolved path."""
        return load_source(self, name)
