"""Built-in list functions: sum, average, median, even, range, ..."""

from __future__ import annotations

import math
import random as _random

from gridcalc.functions.registry import NumberList, register_function
from gridcalc.ranges import int_range


def is_even(num: float) -> bool:
    # math.fmod keeps the sign of num, so -4 and 4 both give 0; it rejects
    # infinities, which are never even
    return math.isfinite(num) and math.fmod(num, 2) == 0


@register_function("")
def _fn_identity(nums: NumberList) -> NumberList:
    """Bare parenthesised list: ``(1,2)`` -> ``1,2``."""
    return nums


@register_function("sum")
def _fn_sum(nums: NumberList) -> float:
    return sum(nums)


@register_function("average")
def _fn_average(nums: NumberList) -> float:
    return _fn_sum(nums) / len(nums)


@register_function("median")
def _fn_median(nums: NumberList) -> float:
    """Middle value; the mean of the two central values for an even count."""
    ordered = sorted(nums)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return _fn_average([ordered[mid - 1], ordered[mid]])
    return ordered[mid]


@register_function("even")
def _fn_even(nums: NumberList) -> NumberList:
    return [n for n in nums if is_even(n)]


@register_function("someeven")
def _fn_someeven(nums: NumberList) -> bool:
    return any(is_even(n) for n in nums)


@register_function("everyeven")
def _fn_everyeven(nums: NumberList) -> bool:
    return all(is_even(n) for n in nums)


@register_function("firsttwo")
def _fn_firsttwo(nums: NumberList) -> NumberList:
    return nums[:2]


@register_function("lasttwo")
def _fn_lasttwo(nums: NumberList) -> NumberList:
    return nums[-2:]


@register_function("has2")
def _fn_has2(nums: NumberList) -> bool:
    return 2 in nums


@register_function("increment")
def _fn_increment(nums: NumberList) -> NumberList:
    return [n + 1 for n in nums]


@register_function("random", arity=2, deterministic=False)
def _fn_random(nums: NumberList) -> float:
    """random(x, y): an integer drawn from ``[x, x + y)``."""
    x, y = nums
    value = _random.random() * y + x
    return float(math.floor(value)) if math.isfinite(value) else value


@register_function("range", arity=2)
def _fn_range(nums: NumberList) -> NumberList:
    """range(start, end): inclusive integers; empty for non-finite bounds."""
    start, end = nums
    if not (math.isfinite(start) and math.isfinite(end)):
        return []
    return [float(n) for n in int_range(math.floor(start), math.floor(end))]


@register_function("nodupes")
def _fn_nodupes(nums: NumberList) -> NumberList:
    """Drop repeated values, keeping first occurrences in order."""
    return list(dict.fromkeys(nums))
