"""Special forms: let, lets and letr.

- let: every binding expression is evaluated in the outer environment, then
  all names are bound together in one new frame.
- lets: bindings are evaluated in order, each seeing the ones before it, so a
  name may be rebound within the same form.
- letr: every binding expression sees every name of the form, which allows
  mutually recursive local procedures.
- named let, ``(let loop ((i 0)) body ...)``: binds ``loop`` to a procedure
  over the binding names and calls it with the initial values.
"""

from microlisp import EvaluatorFn, LispValue
from microlisp.errors import MicroLispSyntaxError
from microlisp.evaluation.apply import apply_closure
from microlisp.evaluation.special_forms.do_form import eval_body
from microlisp.reader.ast import Node
from microlisp.reader.tokens import TokenKind
from microlisp.types.closure import Closure
from microlisp.types.environment import Environment
from microlisp.types.symbol import Symbol


def _bindings(node: Node) -> list[tuple[Symbol, Node]]:
    if node.kind is not TokenKind.BINDINGS:
        raise MicroLispSyntaxError("let requires a binding list", node.value)
    pairs = []
    for binding in node.children:
        name, expr = binding.children
        pairs.append((Symbol(name.value.value), expr))
    return pairs


def _named_let(
    tail: tuple[Node, ...],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool,
) -> LispValue:
    name = Symbol(tail[0].value.value)
    pairs = _bindings(tail[1])
    args = [evaluate_fn(expr, env, False) for _, expr in pairs]
    loop_env, slots = env.with_recursive_frame()
    proc = Closure(tuple(n for n, _ in pairs), tuple(tail[2:]), loop_env, name.id)
    slots[name] = proc
    return apply_closure(proc, args, evaluate_fn, is_tail_call)


def let_form(
    tail: tuple[Node, ...],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool = False,
) -> LispValue:
    if tail and tail[0].kind is TokenKind.SYMBOL:
        return _named_let(tail, env, evaluate_fn, is_tail_call)
    pairs = _bindings(tail[0])
    values = {name: evaluate_fn(expr, env, False) for name, expr in pairs}
    return eval_body(tail[1:], env.with_frame(values), evaluate_fn, is_tail_call)


def lets_form(
    tail: tuple[Node, ...],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool = False,
) -> LispValue:
    scope = env
    for name, expr in _bindings(tail[0]):
        scope = scope.with_frame({name: evaluate_fn(expr, scope, False)})
    return eval_body(tail[1:], scope, evaluate_fn, is_tail_call)


def letr_form(
    tail: tuple[Node, ...],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool = False,
) -> LispValue:
    scope, slots = env.with_recursive_frame()
    for name, expr in _bindings(tail[0]):
        value = evaluate_fn(expr, scope, False)
        if isinstance(value, Closure) and value.name is None:
            value.name = name.id
        slots[name] = value
    return eval_body(tail[1:], scope, evaluate_fn, is_tail_call)
