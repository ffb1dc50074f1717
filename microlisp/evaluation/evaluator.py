"""Core evaluator and trampoline for the MicroLisp interpreter.

``evaluate0`` performs one step over a parsed :class:`Node`: literals evaluate
to themselves, labels are looked up, special forms are dispatched through
:data:`SPECIAL_FORMS` and every other form is an application. In tail position
closure calls come back as :class:`TailCall` objects, which ``evaluate`` keeps
stepping so that tail recursion runs in constant Python stack.
"""

from __future__ import annotations

from microlisp import LispValue
from microlisp.errors import MicroLispSyntaxError
from microlisp.evaluation.apply import apply
from microlisp.evaluation.special_forms import SPECIAL_FORMS
from microlisp.reader.ast import Node
from microlisp.reader.tokens import TokenKind
from microlisp.types.cons import LispString, make_list
from microlisp.types.environment import Environment
from microlisp.types.nil import Nil
from microlisp.types.symbol import FALSE, TRUE, Symbol
from microlisp.types.tail_call import TailCall, resolve


def evaluate(node: Node, env: Environment) -> LispValue:
    """
    Trampoline evaluator: tail-call aware evaluation.
    """
    return resolve(evaluate0(node, env, True), evaluate0)


def _evaluate_leaf(node: Node, env: Environment) -> LispValue:
    tok = node.value
    match tok.kind:
        case TokenKind.NUMBER:
            return tok.value
        case TokenKind.STRING | TokenKind.CHARACTER:
            return LispString(tok.value)
        case TokenKind.BOOLEAN:
            return TRUE if tok.value == "#t" else FALSE
        case TokenKind.SYMBOL | TokenKind.OPERATOR:
            return env.lookup(Symbol(str(tok.value)))
        case TokenKind.EOF | TokenKind.EMPTY:
            return Nil
    raise MicroLispSyntaxError(f"Cannot evaluate {tok}", tok)


def _evaluate_args(children, env: Environment) -> list[LispValue]:
    return [evaluate0(arg, env, False) for arg in children]


def evaluate0(
    node: Node,
    env: Environment,
    is_tail_call: bool = False,
) -> LispValue | TailCall:
    """
    Core evaluator: single-step evaluation with tail-call awareness.
    Returns either a value or a TailCall.
    """
    if not node.compound:
        return _evaluate_leaf(node, env)

    kind = node.kind
    # --- Special forms handling ---
    if kind in SPECIAL_FORMS:
        return SPECIAL_FORMS[kind](node.children, env, evaluate0, is_tail_call)

    match kind:
        case TokenKind.SYMBOL | TokenKind.OPERATOR:
            proc = env.lookup(Symbol(str(node.value.value)))
            args = _evaluate_args(node.children, env)
            return apply(proc, args, env, evaluate0, is_tail_call)
        case TokenKind.APPLY:
            head, *operands = node.children
            proc = evaluate0(head, env, False)
            args = _evaluate_args(operands, env)
            return apply(proc, args, env, evaluate0, is_tail_call)
        case TokenKind.LIST:
            items = list(node.children)
            tail: LispValue = Nil
            if items and items[-1].kind is TokenKind.DOT:
                tail = evaluate0(items.pop().children[0], env, False)
            return make_list(_evaluate_args(items, env), tail)
        case TokenKind.EMPTY:
            return Nil
    raise MicroLispSyntaxError(f"Cannot evaluate form {node}", node.value)
