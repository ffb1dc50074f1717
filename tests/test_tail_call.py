import pytest

from microlisp.numeric.tower import BigInt, Int
from microlisp.types.symbol import Symbol

# Deep enough to overflow the default Python stack without the trampoline
N = 20000


def test_self_tail_call_through_cond(run):
    src = f"""
    (define count-down (lambda (n) (cond ((= n 0) 'done) (else (count-down (- n 1))))))
    (count-down {N})
    """
    assert run(src) == "done"


def test_accumulator_loop(run):
    src = f"""
    (define sum-to (lambda (n acc) (cond ((= n 0) acc) (else (sum-to (- n 1) (+ acc n))))))
    (sum-to {N} 0)
    """
    assert run(src) == str(N * (N + 1) // 2)


def test_mutual_tail_calls(run):
    src = f"""
    (define ev? (lambda (n) (cond ((= n 0) #t) (else (od? (- n 1))))))
    (define od? (lambda (n) (cond ((= n 0) #f) (else (ev? (- n 1))))))
    (ev? {N + 1})
    """
    assert run(src) == "#f"


def test_named_let_loop(run):
    src = f"(let loop ((i 0)) (cond ((= i {N}) i) (else (loop (+ i 1)))))"
    assert run(src) == str(N)


@pytest.mark.parametrize(
    "body",
    [
        "(do (+ 1 1) (f (- n 1)))",
        "(let ((m (- n 1))) (f m))",
        "(lets ((m n) (m (- m 1))) (f m))",
        "(letr ((m (- n 1))) (f m))",
    ],
)
def test_tail_position_inside_sequencing_forms(run, body):
    src = f"""
    (define f (lambda (n) (cond ((= n 0) 'ok) (else {body}))))
    (f {N})
    """
    assert run(src) == "ok"


def test_tail_call_in_lambda_body_after_other_expressions(run):
    src = f"""
    (define f (lambda (n) (+ 1 1) (cond ((= n 0) 'end) (else (f (- n 1))))))
    (f {N})
    """
    assert run(src) == "end"


def test_non_tail_recursion_uses_raised_limit(interp):
    interp.eval("(define fact (lambda (n) (cond ((= n 0) 1) (else (* n (fact (- n 1)))))))")
    result = interp.eval("(fact 500)")
    assert isinstance(result, BigInt)


def test_tail_calls_from_apply_builtin(run):
    src = f"""
    (define f (lambda (n) (cond ((= n 0) 'applied) (else (f (- n 1))))))
    (apply f (list {N}))
    """
    assert run(src) == "applied"


def test_interpreter_result_is_a_value(interp):
    assert interp.eval("(define g (lambda (x) x)) (g 'z)") == Symbol("z")


BUILD = "(define build (lambda (n) (cond ((= n 0) '()) (else (cons n (build (- n 1)))))))"


def test_non_tail_list_builder_within_default_limit(interp):
    interp.eval(BUILD)
    assert interp.eval("(length (build 800))") == Int(800)


def test_non_tail_recursion_past_the_limit_raises(interp):
    interp.eval(BUILD)
    with pytest.raises(RecursionError):
        interp.eval("(build 5000)")
