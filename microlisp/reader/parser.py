"""Recursive-descent parser.

The parser pulls tokens from a :class:`Lexer` one at a time. When a nested
form starts, the ``(`` that was just read is pushed back with
``Lexer.back_up`` and a recursive :meth:`Parser.parse` call consumes the
whole form.

Code and quoted data are read differently. Inside ``'``/``quote`` and
``` ` ``/``quasiquote`` every form is plain data (a LIST node of leaves), except
for ``,``/``,@`` sub-expressions at quasiquote depth one, which are read as
code because they will be evaluated.
"""

from __future__ import annotations

from typing import Iterator

from microlisp.errors import MicroLispSyntaxError
from microlisp.numeric.literals import parse_number
from microlisp.reader.ast import Node, form
from microlisp.reader.lexer import Lexer
from microlisp.reader.tokens import (
    ATOM_KINDS,
    KEYWORD_NAMES,
    QUOTE_PREFIXES,
    Token,
    TokenKind,
)

PREFIX_CHARS = frozenset({"'", "`", ",", ",@"})

LITERAL_HEADS = frozenset(
    {TokenKind.NUMBER, TokenKind.STRING, TokenKind.BOOLEAN, TokenKind.CHARACTER}
)


def _is_prefix(tok: Token) -> bool:
    return tok.kind in QUOTE_PREFIXES and tok.value in PREFIX_CHARS


class Parser:
    def __init__(self, src: str | Lexer):
        self.lexer = src if isinstance(src, Lexer) else Lexer(src)

    def parse(self) -> Node:
        """Parse one expression. Returns an EOF node once input is exhausted."""
        tok = self.lexer.next_token()
        if tok.kind is TokenKind.EOF:
            return Node(tok)
        return self._expression(tok)

    def parse_all(self) -> Iterator[Node]:
        while True:
            node = self.parse()
            if node.kind is TokenKind.EOF:
                return
            yield node

    # helpers

    def _next(self, opener: Token) -> Token:
        tok = self.lexer.next_token()
        if tok.kind is TokenKind.EOF:
            raise MicroLispSyntaxError(
                "Unexpected EOF encountered: '(' not matched with ')'", opener
            )
        return tok

    def _expect_close(self, opener: Token, what: str) -> None:
        tok = self._next(opener)
        if tok.kind is not TokenKind.RPAREN:
            raise MicroLispSyntaxError(f"{what} must end with ')', found: {tok}", tok)

    def _atom(self, tok: Token) -> Node:
        if tok.kind is TokenKind.NUMBER and isinstance(tok.value, str):
            try:
                value = parse_number(tok.value)
            except ValueError as e:
                raise MicroLispSyntaxError(str(e), tok) from e
            return Node(Token(TokenKind.NUMBER, value, tok.line, tok.column))
        return Node(tok)

    def _expression(self, tok: Token) -> Node:
        if tok.kind is TokenKind.LPAREN:
            return self._form(tok)
        if _is_prefix(tok):
            return self._prefixed(tok)
        if tok.kind in ATOM_KINDS:
            return self._atom(tok)
        raise MicroLispSyntaxError(f"Unexpected token {tok}", tok)

    def _child(self, tok: Token) -> Node:
        if tok.kind is TokenKind.LPAREN:
            self.lexer.back_up()
            return self.parse()
        return self._expression(tok)

    def _operands(
        self, opener: Token, allow_dot: bool = False, has_head: bool = False
    ) -> list[Node]:
        children: list[Node] = []
        while True:
            tok = self._next(opener)
            match tok.kind:
                case TokenKind.RPAREN:
                    return children
                case TokenKind.DOT:
                    if not allow_dot or not (children or has_head):
                        raise MicroLispSyntaxError("Unexpected dot", tok)
                    children.append(self._dotted_tail(tok, opener, None))
                    return children
            children.append(self._child(tok))

    def _dotted_tail(self, dot: Token, opener: Token, depth: int | None) -> Node:
        tok = self._next(opener)
        if tok.kind is TokenKind.RPAREN:
            raise MicroLispSyntaxError("Dot must be followed by an element", tok)
        tail = self._child(tok) if depth is None else self._datum(tok, depth)
        closer = self._next(opener)
        if closer.kind is not TokenKind.RPAREN:
            raise MicroLispSyntaxError("Dotted pair must end the list", closer)
        return form(TokenKind.DOT, [tail], dot)

    # code

    def _form(self, lparen: Token) -> Node:
        head = self._next(lparen)
        kind = head.kind
        if kind is TokenKind.RPAREN:
            return form(TokenKind.EMPTY, (), lparen)
        if kind is TokenKind.LPAREN:
            self.lexer.back_up()
            op = self.parse()
            return form(TokenKind.APPLY, [op, *self._operands(lparen)], lparen)
        if _is_prefix(head):
            op = self._prefixed(head)
            return form(TokenKind.APPLY, [op, *self._operands(lparen)], lparen)
        if kind in (TokenKind.SYMBOL, TokenKind.OPERATOR):
            return Node(head, tuple(self._operands(lparen)), True)
        if kind in LITERAL_HEADS:
            first = self._atom(head)
            return form(
                TokenKind.LIST,
                [first, *self._operands(lparen, allow_dot=True, has_head=True)],
                head,
            )
        match kind:
            case TokenKind.LAMBDA:
                return self._lambda(head, lparen)
            case TokenKind.DEFINE:
                return self._define(head, lparen)
            case TokenKind.COND:
                return self._cond(head, lparen)
            case TokenKind.LET | TokenKind.LETS | TokenKind.LETR:
                return self._let(head, lparen)
            case TokenKind.DO:
                return Node(head, tuple(self._operands(lparen)), True)
            case (
                TokenKind.QUOTE
                | TokenKind.QUASIQUOTE
                | TokenKind.UNQUOTE
                | TokenKind.UNQUOTE_SPLICING
            ):
                node = self._prefixed(head)
                self._expect_close(lparen, KEYWORD_NAMES[kind])
                return node
        raise MicroLispSyntaxError(f"unknown token {head}", head)

    def _lambda(self, head: Token, lparen: Token) -> Node:
        tok = self._next(lparen)
        if tok.kind is not TokenKind.LPAREN:
            raise MicroLispSyntaxError(
                "Lambda must be followed by a parameter list in parentheses", tok
            )
        params: list[Node] = []
        seen: set[str] = set()
        while True:
            p = self._next(lparen)
            if p.kind is TokenKind.RPAREN:
                break
            if p.kind is not TokenKind.SYMBOL:
                raise MicroLispSyntaxError(
                    f"Parameter list must contain only symbols, found: {p}", p
                )
            if p.value in seen:
                raise MicroLispSyntaxError(f"Duplicate parameter {p.value}", p)
            seen.add(p.value)
            params.append(Node(p))
        body = self._operands(lparen)
        if not body:
            raise MicroLispSyntaxError("lambda requires a body", head)
        return Node(head, (form(TokenKind.PARAMS, params, tok), *body), True)

    def _define(self, head: Token, lparen: Token) -> Node:
        name = self._next(lparen)
        if name.kind is not TokenKind.SYMBOL:
            raise MicroLispSyntaxError(f"define expects a symbol, found: {name}", name)
        rest = self._operands(lparen)
        if len(rest) != 1:
            raise MicroLispSyntaxError(
                "define expects a name and exactly one expression", head
            )
        return Node(head, (Node(name), rest[0]), True)

    def _cond(self, head: Token, lparen: Token) -> Node:
        clauses: list[Node] = []
        while True:
            tok = self._next(lparen)
            if tok.kind is TokenKind.RPAREN:
                break
            if tok.kind is not TokenKind.LPAREN:
                raise MicroLispSyntaxError(
                    f"cond clauses must be lists, found: {tok}", tok
                )
            items = self._operands(tok)
            if not items:
                raise MicroLispSyntaxError("Empty cond clause", tok)
            clauses.append(form(TokenKind.CLAUSE, items, tok))
        return Node(head, tuple(clauses), True)

    def _let(self, head: Token, lparen: Token) -> Node:
        label = KEYWORD_NAMES[head.kind]
        tok = self._next(lparen)
        prefix: list[Node] = []
        if tok.kind is TokenKind.SYMBOL and head.kind is TokenKind.LET:
            prefix.append(Node(tok))
            tok = self._next(lparen)
        if tok.kind is not TokenKind.LPAREN:
            raise MicroLispSyntaxError(
                f"{label} must be followed by a binding list in parentheses", tok
            )
        bindings: list[Node] = []
        while True:
            b = self._next(lparen)
            if b.kind is TokenKind.RPAREN:
                break
            if b.kind is not TokenKind.LPAREN:
                raise MicroLispSyntaxError(
                    f"each {label} binding must be enclosed in parentheses", b
                )
            name = self._next(lparen)
            if name.kind is not TokenKind.SYMBOL:
                raise MicroLispSyntaxError(
                    f"binding must start with a symbol, found: {name}", name
                )
            value_tok = self._next(lparen)
            if value_tok.kind is TokenKind.RPAREN:
                raise MicroLispSyntaxError(f"binding {name.value} has no value", name)
            value = self._child(value_tok)
            self._expect_close(lparen, "binding")
            bindings.append(form(TokenKind.BINDING, [Node(name), value], b))
        body = self._operands(lparen)
        if not body:
            raise MicroLispSyntaxError(f"{label} requires a body", head)
        return Node(head, (*prefix, form(TokenKind.BINDINGS, bindings, tok), *body), True)

    # quoting

    @staticmethod
    def _code_depth(kind: TokenKind) -> int:
        # quasiquote depth of the datum that follows a quoting keyword in code
        if kind is TokenKind.QUASIQUOTE:
            return 1
        if kind is TokenKind.QUOTE:
            return 0
        raise KeyError(kind)

    def _prefixed(self, prefix: Token) -> Node:
        try:
            depth = self._code_depth(prefix.kind)
        except KeyError:
            raise MicroLispSyntaxError(
                f"{KEYWORD_NAMES[prefix.kind]} outside of quasiquote", prefix
            ) from None
        return self._quoting(prefix, prefix, depth)

    def _quoting(self, tag: Token, opener: Token, depth: int) -> Node:
        tok = self.lexer.next_token()
        if tok.kind is TokenKind.EOF:
            raise MicroLispSyntaxError("Unexpected EOF while parsing quote", opener)
        return form(tag.kind, [self._datum(tok, depth)], tag)

    def _datum(self, tok: Token, depth: int) -> Node:
        kind = tok.kind
        if kind is TokenKind.LPAREN:
            return self._datum_list(tok, depth)
        if _is_prefix(tok):
            return self._datum_quoting(tok, tok, depth)
        if kind in ATOM_KINDS:
            return self._atom(tok)
        if kind in KEYWORD_NAMES:
            return Node(Token(TokenKind.SYMBOL, tok.value, tok.line, tok.column))
        raise MicroLispSyntaxError(f"Unexpected token {tok} in quoted data", tok)

    def _datum_quoting(self, tag: Token, opener: Token, depth: int) -> Node:
        tok = self.lexer.next_token()
        if tok.kind is TokenKind.EOF:
            raise MicroLispSyntaxError("Unexpected EOF while parsing quote", opener)
        match tag.kind:
            case TokenKind.QUASIQUOTE:
                child = self._datum(tok, depth + 1)
            case TokenKind.UNQUOTE | TokenKind.UNQUOTE_SPLICING if depth == 1:
                child = self._child(tok)
            case TokenKind.UNQUOTE | TokenKind.UNQUOTE_SPLICING:
                child = self._datum(tok, max(depth - 1, 0))
            case _:
                child = self._datum(tok, depth)
        return form(tag.kind, [child], tag)

    def _datum_list(self, lparen: Token, depth: int) -> Node:
        tok = self._next(lparen)
        if tok.kind is TokenKind.RPAREN:
            return form(TokenKind.EMPTY, (), lparen)
        if tok.kind in QUOTE_PREFIXES and not _is_prefix(tok):
            node = self._datum_quoting(tok, lparen, depth)
            self._expect_close(lparen, KEYWORD_NAMES[tok.kind])
            return node
        items: list[Node] = []
        while tok.kind is not TokenKind.RPAREN:
            if tok.kind is TokenKind.DOT:
                if not items:
                    raise MicroLispSyntaxError("Dot must follow an element", tok)
                items.append(self._dotted_tail(tok, lparen, depth))
                break
            items.append(self._datum(tok, depth))
            tok = self._next(lparen)
        return form(TokenKind.LIST, items, lparen)


def parse(src: str) -> Node:
    """Parse the first expression in ``src``."""
    return Parser(src).parse()


def parse_all(src: str) -> list[Node]:
    """Parse every top-level expression in ``src``."""
    return list(Parser(src).parse_all())
