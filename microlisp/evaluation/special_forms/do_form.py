from microlisp import EvaluatorFn, LispValue
from microlisp.reader.ast import Node
from microlisp.types.environment import Environment
from microlisp.types.nil import Nil


def eval_body(
    body: tuple[Node, ...],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool = False,
) -> LispValue:
    """Evaluate a sequence, passing tail position on to the last expression."""
    if not body:
        return Nil
    for e in body[:-1]:
        evaluate_fn(e, env, False)
    return evaluate_fn(body[-1], env, is_tail_call)


def do_form(
    tail: tuple[Node, ...],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool = False,
) -> LispValue:
    """(do form ...) evaluates each form in order and yields the last value."""
    return eval_body(tail, env, evaluate_fn, is_tail_call)
