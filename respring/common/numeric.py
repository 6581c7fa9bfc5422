"""
IEEE-754 style scalar math.

Python's ``math`` module raises on division by zero, domain errors and
overflow. Spring formulas are total over the extended reals instead: a
degenerate input yields ``inf`` or ``nan`` and the caller decides what to do
with it. These wrappers give ``math`` that behaviour.
"""

from __future__ import annotations

import math

TAU = 2.0 * math.pi


def divide(numerator: float, denominator: float) -> float:
    """Divide, returning a signed infinity or NaN for a zero denominator."""
    if denominator == 0.0:
        if numerator == 0.0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def sqrt(x: float) -> float:
    if x < 0.0:
        return math.nan
    return math.sqrt(x)


def exp(x: float) -> float:
    try:
        return math.exp(x)
    except OverflowError:
        return math.inf


def log(x: float) -> float:
    if math.isnan(x) or x < 0.0:
        return math.nan
    if x == 0.0:
        return -math.inf
    return math.log(x)


def sin(x: float) -> float:
    if math.isinf(x):
        return math.nan
    return math.sin(x)


def cos(x: float) -> float:
    if math.isinf(x):
        return math.nan
    return math.cos(x)


def clamp(x: float, lower: float, upper: float) -> float:
    """Clamp ``x`` into ``[lower, upper]``; NaN passes through unchanged."""
    return min(max(x, lower), upper)
