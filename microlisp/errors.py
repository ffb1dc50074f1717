from __future__ import annotations


class MicroLispError(Exception):
    """ Base class for all MicroLisp errors"""
    pass


class MicroLispInvalidSymbol(MicroLispError):
    """ Raised when something that is not a symbol is used as a binding name"""
    pass


class MicroLispUnboundSymbol(MicroLispError):
    """ Raised when a symbol is used before it is bound"""

    def __init__(self, name: str):
        super().__init__(f"Unbound symbol: {name}")
        self.name = name


class MicroLispSyntaxError(MicroLispError):
    """ Raised by the lexer/parser, or for a malformed special form"""

    def __init__(self, message: str, token=None):
        if token is not None and getattr(token, "has_location", False):
            message = f"{message} at line {token.line}, column {token.column}"
        super().__init__(message)
        self.token = token


class MicroLispTypeError(MicroLispError):
    """ Raised when the types of arguments passed to a procedure are incorrect"""


class MicroLispNotAProcedure(MicroLispTypeError):
    """ Raised when the head of an application is neither a primitive nor a closure"""


class MicroLispArityError(MicroLispError):
    """ Raised when the number of arguments passed to a procedure is incorrect"""


class MicroLispArithmeticError(MicroLispError):
    """ Raised when a numeric operation has no defined result"""


class MicroLispDivisionByZero(MicroLispArithmeticError, ZeroDivisionError):
    """ Raised when dividing (or taking a modulus) by an exact or complex zero"""


class MicroLispCondExhausted(MicroLispError):
    """ Raised when no cond clause matches and there is no else clause"""
