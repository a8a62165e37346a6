"""Number parsing and text rendering shared by the rewrite stages."""

from __future__ import annotations

import math
from decimal import Decimal
from typing import Any


def to_number(text: str) -> float:
    """Parse *text* as a float; malformed text gives NaN instead of raising."""
    try:
        return float(text)
    except ValueError:
        return math.nan


def divide(x: float, y: float) -> float:
    """IEEE-754 division: ``x/0`` is a signed infinity, ``0/0`` is NaN."""
    if y == 0:
        if x == 0 or math.isnan(x):
            return math.nan
        return math.copysign(math.inf, x) * math.copysign(1.0, y)
    return x / y


def format_number(x: float) -> str:
    """Render a number the way it is written back into formula text.

    Integral values have no decimal point and non-finite values render as
    ``NaN``, ``Infinity`` and ``-Infinity``.  Other values use the shortest
    round-trip digits, written positionally (``0.00001``) for magnitudes in
    ``[1e-6, 1e21)`` and in exponent form without zero padding (``1e-7``,
    ``1e+21``) outside it.
    """
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "Infinity" if x > 0 else "-Infinity"
    if x == int(x) and abs(x) < 1e21:
        return str(int(x))
    sign = "-" if x < 0 else ""
    dec = Decimal(repr(abs(x))).normalize()
    _, digit_tuple, exponent = dec.as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    # point position relative to the first digit
    point = exponent + len(digits)
    if len(digits) <= point <= 21:
        return sign + digits + "0" * (point - len(digits))
    if 0 < point <= 21:
        return f"{sign}{digits[:point]}.{digits[point:]}"
    if -6 < point <= 0:
        return f"{sign}0.{'0' * -point}{digits}"
    power = point - 1
    mantissa = digits[0] + (f".{digits[1:]}" if len(digits) > 1 else "")
    return f"{sign}{mantissa}e{'+' if power > 0 else '-'}{abs(power)}"


def format_value(value: Any) -> str:
    """Render a function result: lists comma-joined, booleans lower-case."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(format_value(v) for v in value)
    if isinstance(value, (int, float)):
        return format_number(float(value))
    return str(value)
