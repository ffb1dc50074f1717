from __future__ import annotations

from microlisp import EvaluatorFn, LispValue
from microlisp.reader.ast import Node
from microlisp.types.environment import Environment


class TailCall:
    """Instruction to the trampoline: continue by evaluating ``node`` in ``env``."""

    __slots__ = ("node", "env")

    def __init__(self, node: Node, env: Environment):
        self.node = node
        self.env = env


def resolve(result: LispValue, evaluate_fn: EvaluatorFn) -> LispValue:
    """Drive ``result`` to a value, stepping any TailCall in constant stack."""
    while isinstance(result, TailCall):
        result = evaluate_fn(result.node, result.env, True)
    return result
