"""Per-position valuation"""

from pydantic import BaseModel


class Valuation(BaseModel):
    """Derived figures for one position"""
    market_value: float
    unrealized_gain: float
    unrealized_gain_percent: float


def valuate(quantity: float, avg_price: float, current_price: float) -> Valuation:
    """
    Compute market value and unrealized gain for one position.

    Inputs are not validated; negative numbers are computed as given.
    A zero cost basis yields a gain percent of 0.
    """
    market_value = quantity * current_price
    total_cost = quantity * avg_price
    unrealized_gain = market_value - total_cost
    unrealized_gain_percent = (unrealized_gain / total_cost * 100) if total_cost > 0 else 0.0

    return Valuation(
        market_value=market_value,
        unrealized_gain=unrealized_gain,
        unrealized_gain_percent=unrealized_gain_percent,
    )
