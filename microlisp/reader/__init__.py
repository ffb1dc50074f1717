from microlisp.reader.tokens import Operator, Token, TokenKind
from microlisp.reader.lexer import Lexer, tokenize
from microlisp.reader.ast import Node
from microlisp.reader.parser import Parser, parse, parse_all

__all__ = [
    "Lexer",
    "Node",
    "Operator",
    "Parser",
    "Token",
    "TokenKind",
    "parse",
    "parse_all",
    "tokenize",
]
