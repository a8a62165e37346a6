"""Inclusive integer and letter sequences used for ranges and grids."""

from __future__ import annotations


def int_range(start: int, end: int) -> list[int]:
    """Ascending inclusive integers from *start* to *end*.

    ``end < start`` gives an empty list.
    """
    return list(range(start, end + 1))


def char_range(start: str, end: str) -> list[str]:
    """Ascending inclusive letters from *start* to *end* (e.g. ``A``..``F``).

    Raises:
        ValueError: If either bound is not a single ASCII letter.
    """
    for letter in (start, end):
        if len(letter) != 1 or not (letter.isascii() and letter.isalpha()):
            raise ValueError(f"Expected a single ASCII letter, got {letter!r}")
    return [chr(code) for code in int_range(ord(start), ord(end))]
