"""Cell and range reference expansion over formula text.

Ranges are expanded first, then single cells, each in one pass over a fresh
tokenization of the current text.  Stored cell text is substituted verbatim:
a cell holding another formula is *not* evaluated here, the surrounding
rewrite loop picks up whatever references the substitution brings in on its
next pass.
"""

from __future__ import annotations

import re
from typing import Iterator, Protocol

from gridcalc.formulas.lexer import render, tokenize
from gridcalc.ranges import char_range, int_range

_CELL_RE = re.compile(r"^([A-J])([1-9][0-9]?)$", re.IGNORECASE)


class CellStore(Protocol):
    """Read-only view of cell contents consumed by the evaluator."""

    def lookup(self, address: str) -> str:
        """Return the raw text of *address* (upper-case ``A1`` form).

        Raises:
            UndefinedReferenceError: If the address is not in the store.
        """
        ...


def parse_address(address: str) -> tuple[str, int]:
    """Split ``"b12"`` into ``("B", 12)``.

    Raises:
        ValueError: If *address* is not a column A-J plus a row 1-99.
    """
    m = _CELL_RE.match(address.strip())
    if not m:
        raise ValueError(f"Invalid cell address: {address!r}")
    return m.group(1).upper(), int(m.group(2))


def range_addresses(token: str) -> list[str]:
    """Expand ``"A1:B2"`` to ``["A1", "B1", "A2", "B2"]`` (row-major).

    A reversed row or column span yields an empty list.
    """
    start, end = token.split(":")
    col1, row1 = parse_address(start)
    col2, row2 = parse_address(end)
    return [
        f"{col}{row}"
        for row in int_range(row1, row2)
        for col in char_range(col1, col2)
    ]


def expand_ranges(text: str, store: CellStore) -> str:
    """Replace every range token with the comma-joined values of its block."""
    out: list[str] = []
    for tok in tokenize(text):
        if tok.type == "RANGE":
            out.append(",".join(store.lookup(addr) for addr in range_addresses(tok)))
        else:
            out.append(tok)
    return render(out)


def expand_cells(text: str, store: CellStore) -> str:
    """Replace every single-cell token with that cell's current text."""
    out: list[str] = []
    for tok in tokenize(text):
        if tok.type == "CELL":
            out.append(store.lookup(str(tok).upper()))
        else:
            out.append(tok)
    return render(out)


def resolve_references(text: str, store: CellStore) -> str:
    """Expand ranges, then the single cells left in the expanded text."""
    return expand_cells(expand_ranges(text, store), store)


def referenced_addresses(text: str) -> list[str]:
    """Addresses mentioned by *text*, ranges expanded, first occurrence order."""
    seen: dict[str, None] = {}
    for tok in tokenize(text):
        if tok.type == "RANGE":
            for addr in range_addresses(tok):
                seen.setdefault(addr, None)
        elif tok.type == "CELL":
            seen.setdefault(str(tok).upper(), None)
    return list(seen)


def find_cycle(text: str, store: CellStore) -> list[str] | None:
    """Walk the references reachable from *text* looking for a loop.

    Uses an explicit stack and an in-flight path so long reference chains
    do not hit the interpreter's recursion limit.

    Returns:
        The cycle as a list of addresses whose first and last entries are
        the same, or ``None`` if the reference graph is acyclic.

    Raises:
        UndefinedReferenceError: If a reachable address is not in the store.
    """
    done: set[str] = set()

    def children(addr: str) -> Iterator[str]:
        return iter(referenced_addresses(store.lookup(addr)))

    for root in referenced_addresses(text):
        if root in done:
            continue
        path = [root]
        stack = [children(root)]
        while stack:
            child = next(stack[-1], None)
            if child is None:
                stack.pop()
                done.add(path.pop())
                continue
            if child in path:
                return path[path.index(child):] + [child]
            if child in done:
                continue
            path.append(child)
            stack.append(children(child))
    return None
