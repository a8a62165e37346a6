"""Lark-based tokenizer for spreadsheet formula text.

The rewrite stages work on text, so the tokenizer is lossless: joining the
token values of ``tokenize(text)`` gives back ``text`` exactly.  Anything the
grammar does not know becomes an ``OTHER`` token instead of an error.

Token types:
- ``RANGE``: ``A1:B3`` (columns A-J in any case, rows 1-99)
- ``CELL``: ``A1``, ``j99``; only when not part of a longer word
- ``NUMBER``: a run of digits and dots holding at least one digit
- ``NAME``: identifiers such as function names
- ``LPAR`` / ``RPAR`` / ``COMMA`` / ``OP`` / ``WS`` / ``OTHER``
"""

from __future__ import annotations

from typing import Iterable

from lark import Lark, Token

from gridcalc.formulas.errors import FormulaParseError

# Higher priority wins where patterns overlap; OTHER keeps the default 0 so
# it only catches characters nothing else claims.
GRAMMAR = r"""
start: _item*

_item: RANGE | CELL | NUMBER | NAME | LPAR | RPAR | COMMA | OP | WS | OTHER

RANGE.5: /[A-Ja-j][1-9][0-9]?:[A-Ja-j][1-9][0-9]?(?![A-Za-z0-9_])/
CELL.4: /[A-Ja-j][1-9][0-9]?(?![A-Za-z0-9_])/
NUMBER.3: /[0-9.]*[0-9][0-9.]*/
NAME.2: /[A-Za-z_][A-Za-z0-9_]*/
LPAR.1: "("
RPAR.1: ")"
COMMA.1: ","
OP.1: /[-+*\/]/
WS.1: /\s+/
OTHER: /./
"""

_lexer = Lark(GRAMMAR, parser="lalr", lexer="basic", start="start")

OPERATOR_TOKENS = frozenset({"OP", "COMMA", "LPAR"})


def tokenize(text: str) -> list[Token]:
    """Split formula text into a lossless list of lark Tokens.

    Args:
        text: Formula text without the leading ``=`` marker.

    Returns:
        Tokens in source order; their values concatenate to *text*.

    Raises:
        FormulaParseError: If the lexer cannot consume the text.
    """
    try:
        return list(_lexer.lex(text))
    except Exception as exc:
        pos = getattr(exc, "pos_in_stream", None)
        raise FormulaParseError(str(exc), position=pos) from exc


def render(tokens: Iterable[Token | str]) -> str:
    """Join tokens (or plain replacement strings) back into text."""
    return "".join(str(t) for t in tokens)


def is_sign(tokens: list[Token], index: int) -> bool:
    """True if the ``-`` at *index* is a sign rather than a subtraction.

    A minus is a sign when it starts the text or follows an operator, a
    comma or an opening parenthesis (whitespace in between is skipped), and
    is directly followed by a number.
    """
    tok = tokens[index]
    if tok.type != "OP" or tok != "-":
        return False
    if index + 1 >= len(tokens) or tokens[index + 1].type != "NUMBER":
        return False
    prev = previous_significant(tokens, index)
    return prev is None or tokens[prev].type in OPERATOR_TOKENS


def previous_significant(tokens: list[Token], index: int) -> int | None:
    """Index of the nearest non-whitespace token before *index*."""
    i = index - 1
    while i >= 0 and tokens[i].type == "WS":
        i -= 1
    return i if i >= 0 else None


def next_significant(tokens: list[Token], index: int) -> int | None:
    """Index of the nearest non-whitespace token after *index*."""
    i = index + 1
    while i < len(tokens) and tokens[i].type == "WS":
        i += 1
    return i if i < len(tokens) else None
