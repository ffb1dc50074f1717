import pytest
from hypothesis import given, strategies as st

from microlisp.errors import MicroLispTypeError
from microlisp.numeric.tower import Int
from microlisp.printer import to_printed
from microlisp.types.cons import (
    Cons,
    LispString,
    char_list_to_string,
    cons,
    from_string,
    head,
    is_list,
    length,
    list_to_raw_string,
    make_list,
    tail,
    values_equal,
)
from microlisp.types.nil import Nil


def test_make_list_and_iteration():
    lst = make_list([Int(1), Int(2), Int(3)])
    assert isinstance(lst, Cons)
    assert list(lst) == [Int(1), Int(2), Int(3)]
    assert len(lst) == 3
    assert lst.is_proper
    assert to_printed(lst) == "(1 2 3)"


def test_improper_list():
    pair = make_list([Int(1), Int(2)], Int(3))
    assert not pair.is_proper
    assert pair.last_tail() == Int(3)
    assert to_printed(pair) == "(1 2 . 3)"
    assert not is_list(pair)
    with pytest.raises(MicroLispTypeError):
        length(pair)


def test_empty_list():
    assert make_list([]) is Nil
    assert is_list(Nil)
    assert length(Nil) == 0
    assert to_printed(Nil) == "()"


def test_cons_onto_list_and_atom():
    assert to_printed(cons(Int(1), make_list([Int(2)]))) == "(1 2)"
    assert to_printed(cons(Int(1), Nil)) == "(1)"
    assert to_printed(cons(Int(1), Int(2))) == "(1 . 2)"


def test_cons_concatenates_strings():
    assert cons(LispString("a"), LispString("bc")) == LispString("abc")
    assert cons(LispString("ab"), LispString("")) == LispString("ab")


def test_cons_of_non_string_onto_string_gives_char_list():
    result = cons(Int(1), LispString("ab"))
    assert to_printed(result) == '(1 "a" "b")'
    # an empty head string does not concatenate
    result = cons(LispString(""), LispString("ab"))
    assert isinstance(result, Cons)


def test_head_and_tail():
    lst = make_list([Int(1), Int(2)])
    assert head(lst) == Int(1)
    assert tail(lst) == make_list([Int(2)])
    assert head(LispString("abc")) == LispString("a")
    assert tail(LispString("abc")) == LispString("bc")
    assert tail(LispString("a")) == LispString("")


@pytest.mark.parametrize("value", [Nil, Int(1), LispString("")])
def test_head_errors(value):
    with pytest.raises(MicroLispTypeError):
        head(value)


def test_string_length_counts_characters():
    assert length(LispString("héllo")) == 5


def test_char_list_to_string():
    chars = LispString("abc").to_char_list()
    assert char_list_to_string(chars) == LispString("abc")
    assert char_list_to_string(make_list([LispString("ab")])) is None
    assert char_list_to_string(make_list([Int(1)])) is None
    assert char_list_to_string(Nil) is None


def test_list_to_raw_string_falls_back_to_printed_form():
    assert list_to_raw_string(LispString("x y")) == "x y"
    assert list_to_raw_string(make_list([Int(1), Int(2)])) == "(1 2)"


def test_structural_equality():
    a = make_list([Int(1), make_list([LispString("x")])])
    b = make_list([Int(1), make_list([LispString("x")])])
    assert a == b
    assert values_equal(a, b)
    assert not values_equal(a, make_list([Int(1)]))
    assert values_equal(make_list([Int(2)]), make_list([Int(2)]))
    assert not values_equal(LispString("1"), Int(1))


def test_printed_strings_are_escaped():
    assert to_printed(LispString('say "hi"\n')) == '"say \\"hi\\"\\n"'


@pytest.mark.parametrize(
    "src,expected",
    [
        ('(cons "a" "bc")', '"abc"'),
        ("(cons 1 (list 2 3))", "(1 2 3)"),
        ("(cons 1 2)", "(1 . 2)"),
        ("(head (list 1 2 3))", "1"),
        ("(tail (list 1 2 3))", "(2 3)"),
        ("(car '(a b))", "a"),
        ("(cdr '(a b))", "(b)"),
        ('(head "hello")', '"h"'),
        ('(tail "hello")', '"ello"'),
        ('(length "hello")', "5"),
        ("(length (list 1 2 3))", "3"),
        ("(length '())", "0"),
        ("(null? '())", "#t"),
        ('(null? "")', "#t"),
        ("(null? (list 1))", "#f"),
        ("(list? (list 1))", "#t"),
        ("(list? (cons 1 2))", "#f"),
        ('(string? "s")', "#t"),
        ("(string? 's)", "#f"),
        ('(string->list "ab")', '("a" "b")'),
        ("(list->string (list #\\a #\\b))", '"ab"'),
        ("(list->string '())", '""'),
        ("(symbol->string 'abc)", '"abc"'),
        ("(symbol->string 1)", "#f"),
        ('(string->symbol "abc")', "abc"),
        ("(string->symbol 1)", "#f"),
    ],
)
def test_list_and_string_builtins(run, src, expected):
    assert run(src) == expected


@pytest.mark.parametrize(
    "src",
    ["(head '())", "(tail 5)", "(length 5)", "(string->list 5)", "(list->string (list 1 2))"],
)
def test_list_builtin_type_errors(run, src):
    with pytest.raises(MicroLispTypeError):
        run(src)


@given(st.text())
def test_raw_string_round_trip(s):
    assert list_to_raw_string(from_string(s)) == s


@given(st.text(min_size=1))
def test_char_list_round_trip(s):
    assert char_list_to_string(from_string(s).to_char_list()) == LispString(s)


@given(st.characters(), st.text())
def test_cons_of_a_character_onto_a_string_concatenates(c, s):
    assert cons(LispString(c), LispString(s)) == LispString(c + s)
