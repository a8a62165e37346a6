"""Function-call rewriting: applies at most one call per invocation.

The call targeted is the one opened by the *last* ``(`` in the text, so a
nested call such as ``sum(range(1,3))`` resolves inside-out over successive
rewrite passes.  It only counts as a call when its arguments are a plain
comma-separated list of (optionally signed) numbers; anything else is left
for arithmetic or reference expansion to simplify first.
"""

from __future__ import annotations

import logging
import re
from typing import NamedTuple

from lark import Token

from gridcalc.formulas.lexer import render, tokenize
from gridcalc.formulas.values import format_value, to_number
from gridcalc.functions import FormulaFunction, get_function

logger = logging.getLogger(__name__)

_ARG_TOKENS = frozenset({"NUMBER", "COMMA", "WS", "OP"})
_NAME_TOKENS = frozenset({"NAME", "NUMBER", "CELL"})
_ARG_RE = re.compile(r"^\s*-?[0-9.\s]*$")


class FunctionCall(NamedTuple):
    """A located call: token span ``[start, end]``, name and argument text."""

    start: int
    end: int
    name: str
    args: str


def parse_number_list(args: str) -> list[float]:
    """Split argument text on commas; malformed pieces become NaN."""
    return [to_number(piece) for piece in args.split(",")]


def find_call(tokens: list[Token]) -> FunctionCall | None:
    """Locate the call opened by the last ``(`` in *tokens*, if it is one."""
    lpar = next(
        (i for i in range(len(tokens) - 1, -1, -1) if tokens[i].type == "LPAR"),
        None,
    )
    if lpar is None:
        return None
    rpar = lpar + 1
    while rpar < len(tokens) and tokens[rpar].type in _ARG_TOKENS:
        rpar += 1
    if rpar >= len(tokens) or tokens[rpar].type != "RPAR":
        return None
    args = render(tokens[lpar + 1:rpar])
    if not all(_ARG_RE.match(piece) for piece in args.split(",")):
        return None
    # the name is the whole word run before "(", so "3sum" is not "sum"
    start = lpar
    while start > 0 and tokens[start - 1].type in _NAME_TOKENS:
        start -= 1
    return FunctionCall(start, rpar, render(tokens[start:lpar]), args)


def apply_function(text: str) -> str:
    """Rewrite the innermost pending function call in *text*.

    Unknown function names leave the text unchanged.

    Raises:
        FormulaFunctionError: If a fixed-arity function gets the wrong count.
    """
    tokens = tokenize(text)
    call = find_call(tokens)
    if call is None:
        return text
    func: FormulaFunction | None = get_function(call.name)
    if func is None:
        logger.debug("unknown function %r left in place", call.name)
        return text
    result = format_value(func(parse_number_list(call.args)))
    logger.debug("%s(%s) -> %r", func.name, call.args, result)
    return render(tokens[:call.start] + [result] + tokens[call.end + 1:])
