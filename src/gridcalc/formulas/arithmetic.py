"""Infix arithmetic reduction over formula text.

Two stages run once per rewrite pass, in order:

1. ``*`` and ``/``: the leftmost ``<number> op <number>`` is replaced by its
   value and the text is rescanned until none is left, so chains evaluate
   left to right (``8/4*2`` -> ``2*2`` -> ``4``).
2. ``+`` and ``-``: exactly one substitution, the leftmost.  Longer sums are
   finished by later passes of the rewrite loop.

A ``-`` directly in front of a number is a sign when it starts the text or
follows an operator, comma or ``(``; ``-4+1`` reduces to ``-3``.
"""

from __future__ import annotations

import logging
import operator
from typing import Callable

from lark import Token

from gridcalc.formulas.lexer import (
    is_sign,
    next_significant,
    previous_significant,
    render,
    tokenize,
)
from gridcalc.formulas.values import divide, format_number, to_number

logger = logging.getLogger(__name__)

INFIX_OPERATORS: dict[str, Callable[[float, float], float]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": divide,
}

HIGH_PRECEDENCE = frozenset("*/")
LOW_PRECEDENCE = frozenset("+-")


def _operand_left(tokens: list[Token], index: int) -> tuple[int, str] | None:
    """Start index and text of the number ending just before operator *index*."""
    left = previous_significant(tokens, index)
    if left is None or tokens[left].type != "NUMBER":
        return None
    if left > 0 and is_sign(tokens, left - 1):
        return left - 1, "-" + tokens[left]
    return left, str(tokens[left])


def _operand_right(tokens: list[Token], index: int) -> tuple[int, str] | None:
    """End index (inclusive) and text of the number after operator *index*."""
    right = next_significant(tokens, index)
    if right is None:
        return None
    if tokens[right].type == "NUMBER":
        return right, str(tokens[right])
    if is_sign(tokens, right):
        return right + 1, "-" + tokens[right + 1]
    return None


def infix_eval(text: str, ops: frozenset[str]) -> str:
    """Replace the leftmost ``<number> op <number>`` with ``op`` in *ops*.

    Returns the text unchanged when there is no such expression.
    """
    tokens = tokenize(text)
    for i, tok in enumerate(tokens):
        if tok.type != "OP" or str(tok) not in ops or is_sign(tokens, i):
            continue
        left = _operand_left(tokens, i)
        right = _operand_right(tokens, i)
        if left is None or right is None:
            continue
        start, lhs = left
        end, rhs = right
        value = INFIX_OPERATORS[str(tok)](to_number(lhs), to_number(rhs))
        return render(tokens[:start] + [format_number(value)] + tokens[end + 1:])
    return text


def reduce_high_precedence(text: str) -> str:
    """Collapse every ``*`` and ``/`` expression, leftmost first."""
    while True:
        reduced = infix_eval(text, HIGH_PRECEDENCE)
        if reduced == text:
            return text
        logger.debug("high precedence: %r -> %r", text, reduced)
        text = reduced


def reduce_low_precedence(text: str) -> str:
    """Collapse the leftmost ``+`` or ``-`` expression, once."""
    return infix_eval(text, LOW_PRECEDENCE)


def reduce_arithmetic(text: str) -> str:
    """Run the high- then the low-precedence stage."""
    return reduce_low_precedence(reduce_high_precedence(text))
