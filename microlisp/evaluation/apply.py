"""Procedure application.

Closures get one new frame binding their formals, chained onto the
environment they captured (never the caller's). In tail position the last body
expression is handed back to the trampoline as a :class:`TailCall` instead of
being evaluated here. Primitives run immediately on a forked handle of the
caller's environment.
"""

from __future__ import annotations

from microlisp import EvaluatorFn, LispValue
from microlisp.errors import MicroLispNotAProcedure
from microlisp.printer import to_printed
from microlisp.types.closure import Closure
from microlisp.types.environment import Environment
from microlisp.types.primitive import Primitive
from microlisp.types.tail_call import TailCall, resolve


def apply_closure(
    fn: Closure,
    args: list[LispValue],
    evaluate_fn: EvaluatorFn,
    is_tail_call: bool,
) -> LispValue | TailCall:
    new_env = fn.bind(args)
    *prefix, last = fn.body
    for expr in prefix:
        evaluate_fn(expr, new_env, False)
    if is_tail_call:
        return TailCall(last, new_env)
    return resolve(evaluate_fn(last, new_env, True), evaluate_fn)


def apply(
    proc: LispValue,
    args: list[LispValue],
    env: Environment,
    evaluate_fn: EvaluatorFn,
    tail: bool = False,
) -> LispValue | TailCall:
    """Apply a closure, a primitive, or a host callable taking ``(env, args)``."""
    if isinstance(proc, Closure):
        return apply_closure(proc, args, evaluate_fn, tail)
    if isinstance(proc, Primitive) or (callable(proc) and not isinstance(proc, type)):
        return proc(env.fork(), args)
    raise MicroLispNotAProcedure(f"Not a procedure: {to_printed(proc)}")
