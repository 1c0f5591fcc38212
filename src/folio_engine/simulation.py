"""What-if application of rebalancing suggestions"""

from typing import List, Sequence

from .aggregator import compute_weights
from .identity import identify
from .models import Position, RebalancingSuggestion, SimulationResult


def simulate_rebalance(positions: Sequence[Position],
                       suggestions: Sequence[RebalancingSuggestion]) -> List[SimulationResult]:
    """
    Apply suggested quantities to copies of the held positions.

    Buys add units and sells remove them, never below zero. Suggestions for
    identifiers that are not held have no price and are left out. Results are
    ordered by absolute value change, largest first.
    """
    suggestion_map = {}
    for s in suggestions:
        suggestion_map.setdefault(s.identifier, s)
    # Each suggestion applies to the first matching position only
    pending = dict(suggestion_map)

    simulated = []
    for position in positions:
        suggestion = pending.pop(identify(position), None)
        if suggestion is None:
            simulated.append(position)
            continue
        change = suggestion.quantity if suggestion.action == 'buy' else -suggestion.quantity
        simulated.append(position.model_copy(update={'quantity': max(0.0, position.quantity + change)}))

    current_weights = compute_weights(positions)
    new_weights = compute_weights(simulated)

    results = []
    for before, after in zip(positions, simulated):
        identifier = identify(before)
        suggestion = suggestion_map.get(identifier)
        quantity_change = after.quantity - before.quantity

        if quantity_change == 0 and before.quantity <= 0:
            continue

        results.append(SimulationResult(
            identifier=identifier,
            current_quantity=before.quantity,
            new_quantity=after.quantity,
            quantity_change=quantity_change,
            current_value=before.market_value,
            new_value=after.market_value,
            value_change=after.market_value - before.market_value,
            current_weight=current_weights.get(identifier, 0.0),
            new_weight=new_weights.get(identifier, 0.0),
            target_weight=suggestion.target_weight if suggestion else 0.0,
        ))

    results.sort(key=lambda r: abs(r.value_change), reverse=True)
    return results
