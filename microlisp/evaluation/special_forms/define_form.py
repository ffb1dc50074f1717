from microlisp import EvaluatorFn, LispValue
from microlisp.errors import MicroLispSyntaxError
from microlisp.reader.ast import Node
from microlisp.reader.tokens import TokenKind
from microlisp.types.closure import Closure
from microlisp.types.environment import Environment
from microlisp.types.symbol import Symbol


def define_form(
    tail: tuple[Node, ...],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    _: bool,
) -> LispValue:
    """
    (define name value)
    Binds in place on the top-level environment; elsewhere the binding goes
    into a new frame on the current handle. Returns the defined symbol.
    """
    if len(tail) != 2 or tail[0].kind is not TokenKind.SYMBOL:
        raise MicroLispSyntaxError("define requires a symbol and one expression")

    name = Symbol(tail[0].value.value)
    value = evaluate_fn(tail[1], env, False)
    if isinstance(value, Closure) and value.name is None:
        value.name = name.id
    env.define(name, value)
    return name
