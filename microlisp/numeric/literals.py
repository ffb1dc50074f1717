"""Conversion of NUMBER token text into tower values.

Recognised forms, tried in this order:

- quaternion: ``1+2i+3j+4k``, ``1+0i+2j-k``
- complex: ``1+2i``, ``3i``, ``1-i``
- rational: ``3/4``, ``-6/8``
- decimal: ``2.5``
- integer: ``42``, ``-7``

A coefficient that is only a sign (``+`` or ``-``) or empty stands for one.
Malformed text raises :class:`ValueError`.
"""

from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation

from microlisp.numeric.tower import (
    ZERO,
    Complex,
    Float,
    Number,
    Quaternion,
    integer,
    rational,
    real,
)


def _is_quaternion(text: str) -> bool:
    return "i" in text and "j" in text and "k" in text


def _is_complex(text: str) -> bool:
    pos = text.rfind("i")
    if pos == -1 or "j" in text or "k" in text:
        return False
    return any(c.isdigit() for c in text[:pos])


def _is_rational(text: str) -> bool:
    return "/" in text and not any(c in text for c in "ijk")


def _split_real_imag(text: str) -> tuple[str | None, str]:
    """Split ``a+b`` at the last sign that is not the leading one."""
    if not text:
        return None, "+1"
    for idx in range(len(text) - 1, 0, -1):
        if text[idx] in "+-":
            break
    else:
        return None, text
    re_text, im_text = text[:idx], text[idx:]
    if re_text in ("", "+", "-"):
        re_text = None
    return re_text, im_text or "+1"


def _coefficient(text: str) -> Number:
    if text in ("", "+"):
        return integer(1)
    if text == "-":
        return integer(-1)
    if text[:2] in ("+-", "-+"):
        text = "-" + text[2:]
    elif text[:2] in ("++", "--"):
        text = ("+" if text[0] == "+" else "-") + text[2:]
    if text in ("-", "+"):
        return integer(-1 if text == "-" else 1)
    return parse_number(text)


def _complex(text: str) -> Number:
    pos = text.rfind("i")
    if pos != len(text) - 1:
        raise ValueError(f"Complex numbers must end with 'i': {text}")
    re_text, im_text = _split_real_imag(text[:pos])
    re = parse_number(re_text) if re_text is not None else ZERO
    return Complex(re, _coefficient(im_text))


def _quaternion(text: str) -> Number:
    i_pos = text.find("i")
    j_pos = text.find("j", i_pos + 1)
    k_pos = text.find("k", j_pos + 1)
    if i_pos == -1 or j_pos == -1 or k_pos == -1:
        raise ValueError(f"Invalid quaternion literal: {text}")
    if text[k_pos + 1 :]:
        raise ValueError(f"Quaternions must end with 'k': {text}")
    re_text, i_text = _split_real_imag(text[:i_pos])
    re = parse_number(re_text) if re_text is not None else ZERO
    return Quaternion(
        re,
        _coefficient(i_text),
        _coefficient(text[i_pos + 1 : j_pos]),
        _coefficient(text[j_pos + 1 : k_pos]),
    )


def _rational(text: str) -> Number:
    num, _, den = text.partition("/")
    try:
        p, q = int(num), int(den)
    except ValueError:
        raise ValueError(f"Invalid rational literal: {text}") from None
    if q == 0:
        raise ValueError(f"Division by zero in rational literal: {text}")
    return rational(p, q)


def _decimal(text: str) -> Number:
    try:
        value = float(text)
    except ValueError:
        raise ValueError(f"Invalid decimal literal: {text}") from None
    if math.isfinite(value):
        return Float(value)
    try:
        return real(Decimal(text))
    except InvalidOperation:
        raise ValueError(f"Invalid decimal literal: {text}") from None


def _integer(text: str) -> Number:
    try:
        return integer(int(text))
    except ValueError:
        raise ValueError(f"Invalid integer literal: {text}") from None


def parse_number(text: str) -> Number:
    text = text.strip()
    if not text:
        raise ValueError("Empty numeric literal")
    if _is_quaternion(text):
        return _quaternion(text)
    if _is_complex(text):
        return _complex(text)
    if _is_rational(text):
        return _rational(text)
    if "." in text:
        return _decimal(text)
    return _integer(text)
