"""
Small numeric helpers shared by the calculators.
"""

import math
from typing import Any, Optional


def round_half_up(value: float, decimals: int = 0) -> float:
    """
    Round half up (0.125 -> 0.13, 2.5 -> 3.0), unlike the built-in round().
    """
    factor = 10 ** decimals
    return math.floor(value * factor + 0.5) / factor


def is_missing(value: Any) -> bool:
    """True for None, NaN and zero: the values the input layer treats as 'not supplied'."""
    if value is None:
        return True
    try:
        number = float(value)
    except (TypeError, ValueError):
        return True
    return math.isnan(number) or number == 0


def value_or_default(value: Optional[float], default: float) -> float:
    """Return value as float, or default when the value is missing."""
    if is_missing(value):
        return float(default)
    return float(value)


def safe_divide(numerator: float, denominator: float) -> float:
    """Division that resolves a zero or undefined denominator to 0."""
    if not denominator or math.isnan(denominator):
        return 0.0
    result = numerator / denominator
    return 0.0 if math.isnan(result) else result
