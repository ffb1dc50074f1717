from __future__ import annotations

from dataclasses import dataclass
from io import StringIO

from microlisp.reader.tokens import KEYWORD_NAMES, Token, TokenKind


@dataclass(frozen=True)
class Node:
    """A parsed expression.

    A leaf carries a literal or symbol token. An interior node's ``value`` is the
    operator position (a procedure label, a keyword, or a synthesised kind such
    as APPLY or LIST) and its ``children`` are the operand expressions.
    ``compound`` is true for every parenthesised form, so ``(f)`` and ``f`` stay
    distinct even though both have no children.
    """

    value: Token
    children: tuple[Node, ...] = ()
    compound: bool = False

    @property
    def kind(self) -> TokenKind:
        return self.value.kind

    @property
    def is_leaf(self) -> bool:
        return not self.compound and not self.children

    def __str__(self) -> str:
        kind = self.kind
        match kind:
            case TokenKind.EMPTY:
                return "()"
            case TokenKind.EOF:
                return "EOF"
            case TokenKind.STRING:
                return '"' + self.value.value + '"'
            case TokenKind.CHARACTER:
                return "#\\" + self.value.value
            case TokenKind.DOT:
                return ". " + str(self.children[0])
        if not self.compound:
            return str(self.value.value)
        out = StringIO()
        out.write("(")
        if kind in KEYWORD_NAMES:
            parts = [KEYWORD_NAMES[kind]]
        elif kind in (TokenKind.SYMBOL, TokenKind.OPERATOR):
            parts = [str(self.value.value)]
        else:
            parts = []
        parts.extend(str(c) for c in self.children)
        out.write(" ".join(parts))
        out.write(")")
        return out.getvalue()


def leaf(token: Token) -> Node:
    return Node(token)


def form(kind: TokenKind, children, token: Token | None = None) -> Node:
    """Build an interior node, reusing ``token`` for its location if given."""
    if token is None:
        tag = Token(kind, kind.name)
    else:
        tag = Token(kind, token.value if token.kind is kind else kind.name, token.line, token.column)
    return Node(tag, tuple(children), True)
