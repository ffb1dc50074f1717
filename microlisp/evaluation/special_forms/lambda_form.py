from microlisp import EvaluatorFn, LispValue
from microlisp.errors import MicroLispSyntaxError
from microlisp.reader.ast import Node
from microlisp.reader.tokens import TokenKind
from microlisp.types.closure import Closure
from microlisp.types.environment import Environment
from microlisp.types.symbol import Symbol


def formals_of(params: Node) -> tuple[Symbol, ...]:
    if params.kind is not TokenKind.PARAMS:
        raise MicroLispSyntaxError("lambda requires a parameter list", params.value)
    return tuple(Symbol(p.value.value) for p in params.children)


def lambda_form(
    tail: tuple[Node, ...],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    _: bool,
) -> LispValue:
    if len(tail) < 2:
        raise MicroLispSyntaxError("lambda requires a parameter list and a body")
    return Closure(formals_of(tail[0]), tuple(tail[1:]), env)
