from microlisp import EvaluatorFn, LispValue
from microlisp.errors import MicroLispCondExhausted
from microlisp.reader.ast import Node
from microlisp.types.environment import Environment
from microlisp.types.symbol import is_truthy
from microlisp.evaluation.special_forms.do_form import eval_body


def cond_form(
    tail: tuple[Node, ...],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool = False,
) -> LispValue:
    """Return the body value of the first clause whose predicate holds.

    A clause with no body yields the predicate's own value.
    """
    if not tail:
        raise MicroLispCondExhausted("cond has no clauses")
    for clause in tail:
        predicate, *body = clause.children
        value = evaluate_fn(predicate, env, False)
        if is_truthy(value):
            if not body:
                return value
            return eval_body(tuple(body), env, evaluate_fn, is_tail_call)
    raise MicroLispCondExhausted("No cond clause matched and no else clause")
