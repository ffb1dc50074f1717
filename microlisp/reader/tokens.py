"""Token kinds and the Token record produced by the lexer.

Lexer kinds and the syntactic kinds the parser synthesises for interior nodes
share one closed enumeration, so the evaluator can match on a node's tag
exhaustively.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class TokenKind(Enum):
    # produced by the lexer
    NUMBER = auto()
    STRING = auto()
    CHARACTER = auto()
    BOOLEAN = auto()
    SYMBOL = auto()
    OPERATOR = auto()
    LPAREN = auto()
    RPAREN = auto()
    DOT = auto()
    LAMBDA = auto()
    DEFINE = auto()
    COND = auto()
    LET = auto()
    LETS = auto()
    LETR = auto()
    DO = auto()
    QUOTE = auto()
    QUASIQUOTE = auto()
    UNQUOTE = auto()
    UNQUOTE_SPLICING = auto()
    EOF = auto()
    # synthesised by the parser
    APPLY = auto()
    LIST = auto()
    EMPTY = auto()
    PARAMS = auto()
    BINDINGS = auto()
    BINDING = auto()
    CLAUSE = auto()


class Operator(Enum):
    PLUS = "+"
    MINUS = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    MODULO = "%"
    EXPONENT = "^"
    EQUALS = "="
    LT = "<"
    GT = ">"
    NOT = "!"
    COLON = ":"

    def __str__(self) -> str:
        return self.value


OPERATOR_CHARS: dict[str, Operator] = {op.value: op for op in Operator}

KEYWORDS: dict[str, TokenKind] = {
    "lambda": TokenKind.LAMBDA,
    "define": TokenKind.DEFINE,
    "cond": TokenKind.COND,
    "quote": TokenKind.QUOTE,
    "quasi-quote": TokenKind.QUASIQUOTE,
    "quasiquote": TokenKind.QUASIQUOTE,
    "unquote": TokenKind.UNQUOTE,
    "unquote-splicing": TokenKind.UNQUOTE_SPLICING,
    "unquote-splice": TokenKind.UNQUOTE_SPLICING,
    "do": TokenKind.DO,
    "let": TokenKind.LET,
    "lets": TokenKind.LETS,
    "letr": TokenKind.LETR,
}

# Printed names of keyword tags when a form is turned back into data.
KEYWORD_NAMES: dict[TokenKind, str] = {
    TokenKind.LAMBDA: "lambda",
    TokenKind.DEFINE: "define",
    TokenKind.COND: "cond",
    TokenKind.QUOTE: "quote",
    TokenKind.QUASIQUOTE: "quasi-quote",
    TokenKind.UNQUOTE: "unquote",
    TokenKind.UNQUOTE_SPLICING: "unquote-splicing",
    TokenKind.DO: "do",
    TokenKind.LET: "let",
    TokenKind.LETS: "lets",
    TokenKind.LETR: "letr",
}

# Tokens that may appear as a leaf child inside a form.
ATOM_KINDS = frozenset(
    {
        TokenKind.NUMBER,
        TokenKind.STRING,
        TokenKind.CHARACTER,
        TokenKind.BOOLEAN,
        TokenKind.SYMBOL,
        TokenKind.OPERATOR,
    }
)

QUOTE_PREFIXES = frozenset(
    {
        TokenKind.QUOTE,
        TokenKind.QUASIQUOTE,
        TokenKind.UNQUOTE,
        TokenKind.UNQUOTE_SPLICING,
    }
)


@dataclass(frozen=True)
class Token:
    """A lexical token. Equality is structural on (kind, value) only."""

    kind: TokenKind
    value: Any = None
    line: int = field(default=-1, compare=False)
    column: int = field(default=-1, compare=False)

    @property
    def has_location(self) -> bool:
        return self.line >= 1 and self.column >= 1

    def __str__(self) -> str:
        if self.value is None or self.value == "":
            return self.kind.name
        return f"{self.kind.name}({self.value})"


EOF_TOKEN = Token(TokenKind.EOF, "EOF")
