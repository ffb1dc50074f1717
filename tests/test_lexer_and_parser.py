from fractions import Fraction

import pytest
from hypothesis import given, strategies as st

from microlisp.errors import MicroLispSyntaxError
from microlisp.numeric.tower import BigInt, Int, Rational
from microlisp.reader.lexer import Lexer, tokenize
from microlisp.reader.parser import Parser, parse, parse_all
from microlisp.reader.tokens import Operator, Token, TokenKind

K = TokenKind


def kinds(source):
    return [t.kind for t in tokenize(source)]


@pytest.mark.parametrize(
    "source,expected",
    [
        ("(+ 1 2)", [K.LPAREN, K.OPERATOR, K.NUMBER, K.NUMBER, K.RPAREN]),
        ("(<= a b)", [K.LPAREN, K.SYMBOL, K.SYMBOL, K.SYMBOL, K.RPAREN]),
        ("(- 5)", [K.LPAREN, K.OPERATOR, K.NUMBER, K.RPAREN]),
        ("-5", [K.NUMBER]),
        ("#t #f", [K.BOOLEAN, K.BOOLEAN]),
        ("'x `y ,z ,@w", [K.QUOTE, K.SYMBOL, K.QUASIQUOTE, K.SYMBOL,
                          K.UNQUOTE, K.SYMBOL, K.UNQUOTE_SPLICING, K.SYMBOL]),
        (" ; comment\n a b", [K.SYMBOL, K.SYMBOL]),
        ("(a . b)", [K.LPAREN, K.SYMBOL, K.DOT, K.SYMBOL, K.RPAREN]),
        ("lambda define cond do", [K.LAMBDA, K.DEFINE, K.COND, K.DO]),
        ("let lets letr", [K.LET, K.LETS, K.LETR]),
        ("quote quasiquote quasi-quote unquote unquote-splice",
         [K.QUOTE, K.QUASIQUOTE, K.QUASIQUOTE, K.UNQUOTE, K.UNQUOTE_SPLICING]),
        ("string->list eq? make-adder", [K.SYMBOL, K.SYMBOL, K.SYMBOL]),
    ],
)
def test_lexer_kinds(source, expected):
    assert kinds(source) == expected


def test_operator_tokens_carry_their_operation():
    tokens = tokenize("(* 2 3)")
    assert tokens[1] == Token(TokenKind.OPERATOR, Operator.MULTIPLY)
    assert str(tokens[1].value) == "*"


@pytest.mark.parametrize("text", ["3/4", "2.5", "1+2i", "3i", "1+2i+3j+4k", "-7"])
def test_numeric_literals_are_one_token(text):
    assert tokenize(text) == [Token(TokenKind.NUMBER, text)]


@pytest.mark.parametrize(
    "source,expected",
    [
        ('"hello"', "hello"),
        ('"a\\nb"', "a\nb"),
        ('"tab\\there"', "tab\there"),
        ('"say \\"hi\\""', 'say "hi"'),
        ('"back\\\\slash"', "back\\slash"),
        ('"\\u0041BC"', "ABC"),
        ('"\\q"', "q"),
    ],
)
def test_string_escapes(source, expected):
    assert tokenize(source) == [Token(TokenKind.STRING, expected)]


@pytest.mark.parametrize(
    "source,expected", [("#\\a", "a"), ("#\\space", " "), ("#\\newline", "\n")]
)
def test_character_literals(source, expected):
    assert tokenize(source) == [Token(TokenKind.CHARACTER, expected)]


@pytest.mark.parametrize("source", ['"unterminated', "#x", "@", "#\\bogus"])
def test_lexer_errors(source):
    with pytest.raises(MicroLispSyntaxError):
        tokenize(source)


def test_eof_is_sticky():
    lexer = Lexer("a")
    assert lexer.next_token().kind is TokenKind.SYMBOL
    assert lexer.next_token().kind is TokenKind.EOF
    assert lexer.next_token().kind is TokenKind.EOF


def test_back_up_rewinds_one_paren():
    lexer = Lexer("(a")
    assert lexer.next_token().kind is TokenKind.LPAREN
    lexer.back_up()
    assert lexer.next_token().kind is TokenKind.LPAREN
    assert lexer.next_token() == Token(TokenKind.SYMBOL, "a")


def test_peek_token_does_not_consume():
    lexer = Lexer("foo bar")
    assert lexer.peek_token() == Token(TokenKind.SYMBOL, "foo")
    assert lexer.next_token() == Token(TokenKind.SYMBOL, "foo")
    assert lexer.next_token() == Token(TokenKind.SYMBOL, "bar")


def test_token_locations():
    tokens = tokenize("a\n  b")
    assert (tokens[0].line, tokens[0].column) == (1, 1)
    assert (tokens[1].line, tokens[1].column) == (2, 3)


def test_token_equality_ignores_location():
    assert Token(TokenKind.SYMBOL, "a", 1, 1) == Token(TokenKind.SYMBOL, "a", 9, 9)


# parser


def test_parse_application():
    node = parse("(+ 1 2)")
    assert node.kind is TokenKind.OPERATOR
    assert node.compound
    assert [c.value.value for c in node.children] == [Int(1), Int(2)]


def test_parse_eof_and_empty():
    assert parse("").kind is TokenKind.EOF
    assert parse("   ; nothing\n").kind is TokenKind.EOF
    assert parse("()").kind is TokenKind.EMPTY


def test_parse_top_level_atoms():
    assert parse("42").value.value == Int(42)
    assert parse("foo").value == Token(TokenKind.SYMBOL, "foo")
    assert parse('"s"').value == Token(TokenKind.STRING, "s")


def test_parse_number_conversion():
    assert parse("3/4").value.value == Rational(Fraction(3, 4))
    assert parse("4/2").value.value == Int(2)
    assert parse("99999999999999999999").value.value == BigInt(99999999999999999999)


def test_parse_nested_operator_form_is_apply():
    node = parse("((lambda (x) x) 1)")
    assert node.kind is TokenKind.APPLY
    assert node.children[0].kind is TokenKind.LAMBDA
    assert node.children[1].value.value == Int(1)


def test_parse_literal_headed_form_is_list():
    node = parse("(1 2 3)")
    assert node.kind is TokenKind.LIST
    assert len(node.children) == 3


@pytest.mark.parametrize("source", ["(1 . 2)", '("a" . b)', "(#t . #f)"])
def test_parse_literal_headed_dotted_pair(source):
    node = parse(source)
    assert node.kind is TokenKind.LIST
    first, dotted = node.children
    assert dotted.kind is TokenKind.DOT
    assert str(node) == source


def test_parse_lambda_params():
    node = parse("(lambda (x y) (+ x y))")
    params, body = node.children
    assert params.kind is TokenKind.PARAMS
    assert [p.value.value for p in params.children] == ["x", "y"]
    assert body.kind is TokenKind.OPERATOR


def test_parse_let_bindings():
    node = parse("(let ((x 1) (y 2)) x)")
    bindings = node.children[0]
    assert bindings.kind is TokenKind.BINDINGS
    assert [b.kind for b in bindings.children] == [TokenKind.BINDING, TokenKind.BINDING]


def test_parse_named_let():
    node = parse("(let loop ((i 0)) i)")
    assert node.children[0].value == Token(TokenKind.SYMBOL, "loop")
    assert node.children[1].kind is TokenKind.BINDINGS


def test_parse_quasiquote_reads_unquoted_part_as_code():
    node = parse("`(1 ,(+ 1 2))")
    assert node.kind is TokenKind.QUASIQUOTE
    data = node.children[0]
    assert data.kind is TokenKind.LIST
    unquote = data.children[1]
    assert unquote.kind is TokenKind.UNQUOTE
    assert unquote.children[0].kind is TokenKind.OPERATOR


@pytest.mark.parametrize(
    "source",
    [
        "(define x (+ 1 2))",
        "(lambda (x) (* x x))",
        "(quote (a b))",
        "(cond ((= x 1) 2) (else 3))",
        '(f "s" 1/2)',
    ],
)
def test_node_str_reproduces_source(source):
    assert str(parse(source)) == source


def test_parse_all_reads_every_form():
    assert len(parse_all("1 (f) 'x ()")) == 4
    assert list(Parser("").parse_all()) == []


@pytest.mark.parametrize(
    "source,message",
    [
        ("(+ 1 2", "not matched"),
        ("(lambda (1) x)", "only symbols"),
        ("(lambda (x x) x)", "Duplicate"),
        ("(lambda (x))", "requires a body"),
        ("(define 1 2)", "define expects a symbol"),
        ("(define x 1 2)", "exactly one expression"),
        ("(cond x)", "cond clauses"),
        ("(cond ())", "Empty cond clause"),
        ("(let ((x)) x)", "has no value"),
        ("(lets loop ((x 1)) x)", "binding list"),
        (")", "Unexpected token"),
        (",x", "outside of quasiquote"),
        ("(unquote x)", "outside of quasiquote"),
        ("(+ 1 . 2)", "Unexpected dot"),
        ("1/0", "Division by zero"),
        ("1..2", "Invalid decimal"),
        ("(#t)", None),
    ],
)
def test_parse_errors(source, message):
    if message is None:
        parse(source)  # a literal-headed list is valid
        return
    with pytest.raises(MicroLispSyntaxError, match=message):
        parse(source)


def test_syntax_error_reports_location():
    with pytest.raises(MicroLispSyntaxError, match="line 2, column 3"):
        parse("(foo\n  . 1)")


@given(st.lists(st.integers(min_value=-1000, max_value=1000), max_size=8))
def test_parse_integer_list_property(xs):
    source = "(" + " ".join(str(x) for x in xs) + ")"
    node = parse(source)
    if not xs:
        assert node.kind is TokenKind.EMPTY
    else:
        assert [c.value.value for c in node.children] == [Int(x) for x in xs]
