# Core type aliases for the MicroLisp data model.
#
# Source text is read into `Node` trees (see microlisp.reader.ast) and evaluated
# into runtime values: tower numbers, cons lists, strings, symbols, vectors,
# closures, primitives and opaque host handles.
#
# Naming guidance:
# - LispValue:   use in evaluator/runtime code to denote evaluated values.
# - EvaluatorFn: the evaluator signature handed to special forms.

from typing import Any, Callable

# Runtime value alias
LispValue = Any

# Evaluator function type: evaluate0(node, env, is_tail_call) used inside special forms
EvaluatorFn = Callable[..., LispValue]
