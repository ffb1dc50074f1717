"""Registry of special forms for the MicroLisp evaluator.

Maps node kinds to handler functions that implement non-standard evaluation
rules. Every handler takes ``(tail, env, evaluate_fn, is_tail_call)`` where
``tail`` is the form's child nodes.
"""

from microlisp.reader.tokens import TokenKind
from microlisp.evaluation.special_forms.quote_forms import (
    quasiquote_form,
    quote_form,
    unquote_form,
    unquote_splice_form,
)
from microlisp.evaluation.special_forms.lambda_form import lambda_form
from microlisp.evaluation.special_forms.define_form import define_form
from microlisp.evaluation.special_forms.cond_form import cond_form
from microlisp.evaluation.special_forms.let_forms import let_form, lets_form, letr_form
from microlisp.evaluation.special_forms.do_form import do_form

SPECIAL_FORMS = {
    TokenKind.QUOTE: quote_form,
    TokenKind.QUASIQUOTE: quasiquote_form,
    TokenKind.UNQUOTE: unquote_form,
    TokenKind.UNQUOTE_SPLICING: unquote_splice_form,
    TokenKind.LAMBDA: lambda_form,
    TokenKind.DEFINE: define_form,
    TokenKind.COND: cond_form,
    TokenKind.LET: let_form,
    TokenKind.LETS: lets_form,
    TokenKind.LETR: letr_form,
    TokenKind.DO: do_form,
}
