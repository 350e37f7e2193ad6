"""Display formatting for AED amounts and counts."""

from typing import Optional, Union

from utils.units import round_to

Number = Union[int, float]

CURRENCY = "AED"


def format_number(value: Optional[Number], decimals: int = 0) -> str:
    """Thousands-separated number: 1234567 -> '1,234,567'."""
    if value is None:
        return "-"
    if decimals <= 0:
        return f"{int(round_to(value, 0)):,}"
    return f"{round_to(value, decimals):,.{decimals}f}"


def format_price(price: Optional[Number]) -> str:
    """
    Compact AED price.

    >= 1M   -> 'AED 1.25M'
    >= 1K   -> 'AED 850K'
    else    -> 'AED 950'
    """
    if price is None:
        return "-"
    if price >= 1_000_000:
        return f"{CURRENCY} {round_to(price / 1_000_000, 2):.2f}M"
    if price >= 1_000:
        return f"{CURRENCY} {int(round_to(price / 1_000, 0))}K"
    return f"{CURRENCY} {format_number(price)}"


def format_area_sqft(sqft: Optional[Number]) -> str:
    if sqft is None:
        return "-"
    return f"{format_number(sqft)} sqft"


def format_pct(pct: Optional[Number]) -> str:
    """Signed one-decimal percentage: 20.0 -> '+20.0%', None -> '-'."""
    if pct is None:
        return "-"
    return f"{round_to(pct, 1):+.1f}%"
