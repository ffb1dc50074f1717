from microlisp import EvaluatorFn, LispValue
from microlisp.errors import MicroLispSyntaxError, MicroLispTypeError
from microlisp.reader.ast import Node
from microlisp.reader.tokens import KEYWORD_NAMES, TokenKind
from microlisp.types.cons import Cons, LispString, make_list
from microlisp.types.environment import Environment
from microlisp.types.nil import Nil
from microlisp.types.symbol import FALSE, TRUE, Symbol

QUOTING_KINDS = (
    TokenKind.QUOTE,
    TokenKind.QUASIQUOTE,
    TokenKind.UNQUOTE,
    TokenKind.UNQUOTE_SPLICING,
)


def _tagged(kind: TokenKind, datum: LispValue) -> LispValue:
    return make_list([Symbol(KEYWORD_NAMES[kind]), datum])


def _leaf_datum(node: Node) -> LispValue:
    tok = node.value
    match tok.kind:
        case TokenKind.NUMBER:
            return tok.value
        case TokenKind.STRING | TokenKind.CHARACTER:
            return LispString(tok.value)
        case TokenKind.BOOLEAN:
            return TRUE if tok.value == "#t" else FALSE
        case TokenKind.SYMBOL | TokenKind.OPERATOR:
            return Symbol(str(tok.value))
        case TokenKind.EMPTY | TokenKind.EOF:
            return Nil
    return Symbol(KEYWORD_NAMES.get(tok.kind, str(tok.value)))


def _datum_list(children, convert) -> LispValue:
    items = list(children)
    tail: LispValue = Nil
    if items and items[-1].kind is TokenKind.DOT:
        tail = convert(items.pop().children[0])
    return make_list([convert(c) for c in items], tail)


def to_datum(node: Node) -> LispValue:
    """The value a quoted expression denotes."""
    kind = node.kind
    if kind in QUOTING_KINDS and node.compound:
        return _tagged(kind, to_datum(node.children[0]))
    if not node.compound:
        return _leaf_datum(node)
    if kind is TokenKind.EMPTY:
        return Nil
    if kind in (TokenKind.SYMBOL, TokenKind.OPERATOR) or kind in KEYWORD_NAMES:
        return Cons(_leaf_datum(node), _datum_list(node.children, to_datum))
    # LIST, APPLY and the other structural kinds are just their children
    return _datum_list(node.children, to_datum)


def eval_quasiquote(
    node: Node,
    env: Environment,
    evaluate_fn: EvaluatorFn,
    depth: int = 1,
) -> LispValue:
    """Build the datum for ``node``, evaluating unquotes at depth one.

    A nested quasiquote raises the depth and an unquote lowers it; forms at
    deeper levels are kept as literal ``(quasi-quote ...)``/``(unquote ...)``.
    """

    def walk(n: Node, d: int) -> LispValue:
        return eval_quasiquote(n, env, evaluate_fn, d)

    kind = node.kind
    if not node.compound:
        return _leaf_datum(node)
    match kind:
        case TokenKind.QUASIQUOTE:
            return _tagged(kind, walk(node.children[0], depth + 1))
        case TokenKind.UNQUOTE:
            if depth == 1:
                return evaluate_fn(node.children[0], env, False)
            return _tagged(kind, walk(node.children[0], depth - 1))
        case TokenKind.UNQUOTE_SPLICING:
            if depth == 1:
                raise MicroLispSyntaxError(
                    "unquote-splicing is only valid inside a list", node.value
                )
            return _tagged(kind, walk(node.children[0], depth - 1))
        case TokenKind.QUOTE:
            return _tagged(kind, walk(node.children[0], depth))
        case TokenKind.LIST:
            return _quasi_list(node.children, env, evaluate_fn, depth)
    return to_datum(node)


def _quasi_list(children, env, evaluate_fn, depth) -> LispValue:
    items: list[LispValue] = []
    tail: LispValue = Nil
    for child in children:
        if child.kind is TokenKind.DOT:
            tail = eval_quasiquote(child.children[0], env, evaluate_fn, depth)
        elif child.kind is TokenKind.UNQUOTE_SPLICING and depth == 1:
            items.extend(_splice(evaluate_fn(child.children[0], env, False)))
        else:
            items.append(eval_quasiquote(child, env, evaluate_fn, depth))
    return make_list(items, tail)


def _splice(value: LispValue) -> list[LispValue]:
    if value is Nil:
        return []
    if isinstance(value, Cons) and value.is_proper:
        return list(value)
    if isinstance(value, LispString):
        return [LispString(c) for c in value.text]
    raise MicroLispTypeError(f"unquote-splicing requires a list, got {value}")


def quote_form(
    tail: tuple[Node, ...], env: Environment, evaluate_fn: EvaluatorFn, _: bool
) -> LispValue:
    if len(tail) != 1:
        raise MicroLispSyntaxError("quote expects exactly 1 argument")
    return to_datum(tail[0])


def quasiquote_form(
    tail: tuple[Node, ...], env: Environment, evaluate_fn: EvaluatorFn, _: bool
) -> LispValue:
    if len(tail) != 1:
        raise MicroLispSyntaxError("quasi-quote expects exactly 1 argument")
    return eval_quasiquote(tail[0], env, evaluate_fn)


def unquote_form(
    tail: tuple[Node, ...], env: Environment, evaluate_fn: EvaluatorFn, _: bool
) -> LispValue:
    raise MicroLispSyntaxError("unquote not valid outside of quasi-quote")


def unquote_splice_form(
    tail: tuple[Node, ...], env: Environment, evaluate_fn: EvaluatorFn, _: bool
) -> LispValue:
    raise MicroLispSyntaxError("unquote-splicing not valid outside of quasi-quote")
