"""Error types for formula tokenizing and evaluation."""

from __future__ import annotations


class FormulaError(Exception):
    """Base class for all formula-related errors."""


class FormulaParseError(FormulaError):
    """Text the tokenizer could not split into tokens.

    Attributes:
        position: Character position where the error was detected.
    """

    def __init__(self, message: str, position: int | None = None) -> None:
        self.position = position
        full = f"Formula parse error: {message}"
        if position is not None:
            full += f" (at position {position})"
        super().__init__(full)


class UndefinedReferenceError(FormulaError):
    """A cell address that does not exist in the cell store.

    Attributes:
        address: The unresolved cell address (upper-cased).
        available: Number of addresses the store does hold, when known.
    """

    def __init__(self, address: str, available: int | None = None) -> None:
        self.address = address
        self.available = available
        msg = f"Undefined cell reference: {address!r}"
        if available is not None:
            msg += f" (store holds {available} cells)"
        super().__init__(msg)


class FormulaFunctionError(FormulaError):
    """A known function called with the wrong number of arguments.

    Attributes:
        func_name: The function that caused the error.
    """

    def __init__(self, func_name: str, message: str | None = None) -> None:
        self.func_name = func_name
        msg = message or f"Bad call to function: {func_name!r}"
        super().__init__(msg)


class NonConvergenceError(FormulaError):
    """The rewrite loop hit its iteration cap without reaching a fixpoint.

    Attributes:
        formula: The text evaluation started from.
        last_text: The most recently computed text.
        iterations: Number of passes that ran.
    """

    def __init__(self, formula: str, last_text: str, iterations: int) -> None:
        self.formula = formula
        self.last_text = last_text
        self.iterations = iterations
        super().__init__(
            f"Formula {formula!r} did not converge after {iterations} passes "
            f"(last: {last_text!r})"
        )


class CircularReferenceError(FormulaError):
    """A cell reference chain that leads back to itself.

    Attributes:
        cycle_path: Addresses along the cycle, first and last equal.
    """

    def __init__(self, cycle_path: list[str]) -> None:
        self.cycle_path = cycle_path
        super().__init__(f"Circular cell reference: {' -> '.join(cycle_path)}")
