"""Character-level lexer.

The lexer scans a fixed source string with a single cursor. Past the end of
input the current character becomes a sentinel, after which ``next_token``
keeps returning EOF. ``back_up`` rewinds the cursor by one character, which is
all the parser needs to push back a just-read ``(``.
"""

from __future__ import annotations

from typing import Iterator

from microlisp.errors import MicroLispSyntaxError
from microlisp.reader.tokens import (
    KEYWORDS,
    OPERATOR_CHARS,
    Token,
    TokenKind,
)

SENTINEL = "\0"

# Characters that may continue a label after its first character.
LABEL_CHARS = frozenset("-+*%!?/|^&$\\:[]_=.<>")
# Characters that may appear inside a numeric literal after the leading digit.
NUMBER_CHARS = frozenset("ijk-+/.")
# Characters that end an operator or a dot.
DELIMITERS = frozenset("()'`,\";") | {SENTINEL}

STRING_ESCAPES: dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    '"': '"',
    "\\": "\\",
}

NAMED_CHARS: dict[str, str] = {
    "space": " ",
    "newline": "\n",
    "tab": "\t",
    "return": "\r",
}


def _is_delimiter(ch: str) -> bool:
    return ch in DELIMITERS or ch.isspace()


class Lexer:
    """Turns source text into tokens on demand."""

    def __init__(self, src: str):
        self.src = src
        self.pos = 0
        self.current = src[0] if src else SENTINEL

    def __iter__(self) -> Iterator[Token]:
        while True:
            tok = self.next_token()
            if tok.kind is TokenKind.EOF:
                return
            yield tok

    # cursor movement

    def _advance(self) -> None:
        if self.pos < len(self.src) - 1:
            self.pos += 1
            self.current = self.src[self.pos]
        else:
            self.pos = len(self.src)
            self.current = SENTINEL

    def _peek_char(self, offset: int = 1) -> str:
        i = self.pos + offset
        return self.src[i] if i < len(self.src) else SENTINEL

    def back_up(self) -> None:
        """Rewind the cursor by exactly one character."""
        if self.pos == 0:
            return
        self.pos -= 1
        self.current = self.src[self.pos]

    def peek_token(self) -> Token:
        """Return the next token without consuming it."""
        pos, current = self.pos, self.current
        try:
            return self.next_token()
        finally:
            self.pos, self.current = pos, current

    def location(self, index: int) -> tuple[int, int]:
        index = min(index, len(self.src))
        line = self.src.count("\n", 0, index) + 1
        column = index - (self.src.rfind("\n", 0, index) + 1) + 1
        return line, column

    def _make(self, kind: TokenKind, value, start: int) -> Token:
        line, column = self.location(start)
        return Token(kind, value, line, column)

    def _error(self, message: str, start: int) -> MicroLispSyntaxError:
        line, column = self.location(start)
        return MicroLispSyntaxError(f"{message} at line {line}, column {column}")

    # token scanners

    def _skip_whitespace(self) -> None:
        while self.current != SENTINEL and self.current.isspace():
            self._advance()

    def _skip_comment(self) -> None:
        while self.current not in ("\n", SENTINEL):
            self._advance()

    def _number(self) -> Token:
        start = self.pos
        chars = [self.current]
        self._advance()
        while self.current.isdigit() or self.current in NUMBER_CHARS:
            chars.append(self.current)
            self._advance()
        return self._make(TokenKind.NUMBER, "".join(chars), start)

    def _label(self) -> Token:
        start = self.pos
        chars = []
        while (
            self.current != SENTINEL
            and (self.current.isalnum() or self.current in LABEL_CHARS)
        ):
            chars.append(self.current)
            self._advance()
        text = "".join(chars)
        kind = KEYWORDS.get(text)
        if kind is not None:
            return self._make(kind, text, start)
        return self._make(TokenKind.SYMBOL, text, start)

    def _string(self) -> Token:
        start = self.pos
        self._advance()  # opening quote
        chars = []
        while self.current != '"':
            if self.current == SENTINEL:
                raise self._error("Unterminated string literal", start)
            if self.current == "\\":
                self._advance()
                chars.append(self._escape())
            else:
                chars.append(self.current)
            self._advance()
        self._advance()  # closing quote
        return self._make(TokenKind.STRING, "".join(chars), start)

    def _escape(self) -> str:
        ch = self.current
        if ch == SENTINEL:
            return "\\"
        if ch in STRING_ESCAPES:
            return STRING_ESCAPES[ch]
        if ch == "u":
            digits = self.src[self.pos + 1 : self.pos + 5]
            if len(digits) == 4 and all(c in "0123456789abcdefABCDEF" for c in digits):
                for _ in range(4):
                    self._advance()
                return chr(int(digits, 16))
        # unknown or malformed escapes are kept literally
        return ch

    def _hash(self) -> Token:
        start = self.pos
        self._advance()
        if self.current == "\\":
            self._advance()
            if self.current == SENTINEL:
                raise self._error("Incomplete character literal", start)
            chars = [self.current]
            self._advance()
            if chars[0].isalpha():
                while self.current != SENTINEL and self.current.isalpha():
                    chars.append(self.current)
                    self._advance()
            name = "".join(chars)
            if len(name) > 1:
                if name not in NAMED_CHARS:
                    raise self._error(f"Unknown character name #\\{name}", start)
                name = NAMED_CHARS[name]
            return self._make(TokenKind.CHARACTER, name, start)
        chars = ["#"]
        while self.current != SENTINEL and self.current.isalpha():
            chars.append(self.current)
            self._advance()
        text = "".join(chars)
        if text not in ("#t", "#f"):
            raise self._error(f"Unknown token {text}", start)
        return self._make(TokenKind.BOOLEAN, text, start)

    def _single(self, kind: TokenKind, value) -> Token:
        start = self.pos
        self._advance()
        return self._make(kind, value, start)

    def next_token(self) -> Token:
        while True:
            self._skip_whitespace()
            if self.current != ";":
                break
            self._skip_comment()

        ch = self.current
        if ch == SENTINEL:
            return self._make(TokenKind.EOF, "EOF", self.pos)
        if ch.isdigit() or (ch in "+-" and self._peek_char().isdigit()):
            return self._number()
        if ch in OPERATOR_CHARS and _is_delimiter(self._peek_char()):
            return self._single(TokenKind.OPERATOR, OPERATOR_CHARS[ch])
        if ch == "." and _is_delimiter(self._peek_char()):
            return self._single(TokenKind.DOT, ".")
        if ch.isalpha() or ch in LABEL_CHARS:
            return self._label()
        match ch:
            case '"':
                return self._string()
            case "#":
                return self._hash()
            case "(":
                return self._single(TokenKind.LPAREN, "(")
            case ")":
                return self._single(TokenKind.RPAREN, ")")
            case "'":
                return self._single(TokenKind.QUOTE, "'")
            case "`":
                return self._single(TokenKind.QUASIQUOTE, "`")
            case ",":
                start = self.pos
                self._advance()
                if self.current == "@":
                    self._advance()
                    return self._make(TokenKind.UNQUOTE_SPLICING, ",@", start)
                return self._make(TokenKind.UNQUOTE, ",", start)
        raise self._error(f"Unexpected character {ch!r}", self.pos)


def tokenize(src: str) -> list[Token]:
    """Lex the whole source, excluding the trailing EOF."""
    return list(Lexer(src))
