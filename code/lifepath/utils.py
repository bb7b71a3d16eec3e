import math
from typing import Any


def clamp(value: float, lo: float, hi: float) -> float:
    # NaN compares false both ways, so it lands on the lower bound.
    return max(lo, min(value, hi))


def as_number(value: Any, default: float = 0.0) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if not math.isfinite(value):
        return default
    return float(value)


def safe_div(a: float, b: float, default: float = 0.0) -> float:
    try:
        return a / b
    except (ZeroDivisionError, TypeError):
        return default


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def round_money(value: float) -> float:
    """Round a reported figure to whole currency units; non-finite values pass through."""
    if not math.isfinite(value):
        return value
    return round_half_up(value)
