import pytest

from microlisp.builtin.env_builtin import register
from microlisp.evaluation.evaluator import evaluate
from microlisp.interpreter import Interpreter
from microlisp.printer import to_printed
from microlisp.reader.parser import parse_all
from microlisp.types.environment import Environment
from microlisp.types.nil import Nil


@pytest.fixture
def env():
    """Fresh environment with builtins loaded."""
    e = Environment()
    register(e)
    return e


@pytest.fixture
def run(env):
    """Evaluate every form in a source string against ``env``; returns the printed last value."""

    def _run(source):
        result = Nil
        for node in parse_all(source):
            result = evaluate(node, env)
        return to_printed(result)

    return _run


@pytest.fixture
def interp():
    """Interpreter with builtins and the core prelude."""
    return Interpreter()
