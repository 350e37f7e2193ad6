"""
Area unit conversion and rounding.

Storage is always square meters; square feet exist only at the boundary.
Both directions use the same factor (constants.SQM_TO_SQFT).
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from constants import SIZE_TOLERANCE, SQFT_DECIMALS, SQM_TO_SQFT


def round_to(value: Optional[float], places: int = 2) -> Optional[float]:
    """
    Round half away from zero (2.345 -> 2.35, -8.35 -> -8.4).

    Built-in round() uses banker's rounding on the binary value, which gives
    surprising results for displayed percentages.
    """
    if value is None:
        return None
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def sqm_to_sqft(sqm: Optional[float]) -> Optional[float]:
    """Convert m² to ft², rounded to 2 dp. None passes through."""
    if sqm is None:
        return None
    return round_to(sqm * SQM_TO_SQFT, SQFT_DECIMALS)


def sqft_to_sqm(sqft: Optional[float]) -> Optional[float]:
    """Convert a caller-supplied ft² threshold to m² (unrounded)."""
    if sqft is None:
        return None
    return sqft / SQM_TO_SQFT


def price_per_sqm_to_sqft(price_per_sqm: Optional[float]) -> Optional[float]:
    if price_per_sqm is None:
        return None
    return round_to(price_per_sqm / SQM_TO_SQFT, SQFT_DECIMALS)


def size_window_sqm(size_sqft: float, tolerance: float = SIZE_TOLERANCE) -> tuple:
    """
    m² bounds for matching the same physical unit across sale records.

    A stored area matches when either value is within `tolerance` of the
    other: [q * (1 - t), q / (1 - t)] where q is the converted query size.
    """
    sqm = sqft_to_sqm(size_sqft)
    factor = 1 - tolerance
    return sqm * factor, sqm / factor
