"""Portfolio totals, weights and snapshots"""

from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from .identity import identify, index_by_identifier
from .models import PortfolioSnapshot, PortfolioTotals, Position, TargetAllocation


def aggregate_totals(positions: Sequence[Position]) -> PortfolioTotals:
    """Sum market value and unrealized gain across positions."""
    total_value = sum(p.market_value for p in positions)
    total_gain = sum(p.unrealized_gain for p in positions)
    total_cost = total_value - total_gain
    total_gain_percent = (total_gain / total_cost * 100) if total_cost > 0 else 0.0

    return PortfolioTotals(
        total_value=total_value,
        total_gain=total_gain,
        total_gain_percent=total_gain_percent,
    )


def compute_weights(positions: Sequence[Position]) -> Dict[str, float]:
    """
    Map each identifier to its percentage of total market value.

    Positions sharing an identifier are summed. Returns an empty dict when
    the portfolio has no value.
    """
    total_value = sum(p.market_value for p in positions)
    if total_value == 0:
        return {}

    weights: Dict[str, float] = {}
    for position in positions:
        identifier = identify(position)
        weights[identifier] = weights.get(identifier, 0.0) + position.market_value / total_value * 100
    return weights


def merge_targets(targets: Sequence[TargetAllocation]) -> List[TargetAllocation]:
    """
    Collapse targets that share an identifier into one.

    Weights are summed; symbol, name and tag come from the first target of
    the group. Order follows the first occurrence of each identifier.
    """
    merged = []
    for group in index_by_identifier(targets).values():
        first = group[0]
        if len(group) > 1:
            first = first.model_copy(update={'target_weight': sum(t.target_weight for t in group)})
        merged.append(first)
    return merged


def capture_snapshot(positions: Sequence[Position], taken_at: Optional[datetime] = None) -> PortfolioSnapshot:
    """Freeze the current positions and their totals into a snapshot."""
    totals = aggregate_totals(positions)
    return PortfolioSnapshot(
        date=taken_at or datetime.now(timezone.utc),
        positions=tuple(p.model_copy() for p in positions),
        total_value=totals.total_value,
        total_gain=totals.total_gain,
        total_gain_percent=totals.total_gain_percent,
    )
