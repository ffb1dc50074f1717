from microlisp.types.symbol import FALSE, TRUE, Symbol, boolean
from microlisp.types.nil import Nil, NilType
from microlisp.types.cons import (
    Cons,
    LispString,
    char_list_to_string,
    cons,
    from_string,
    is_list,
    list_to_raw_string,
    make_list,
)
from microlisp.types.environment import Environment
from microlisp.types.closure import Closure
from microlisp.types.primitive import Primitive
from microlisp.types.vector import Vector
