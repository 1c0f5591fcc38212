"""Holdings-versus-targets views: synthetic rows, comparison rows and summary"""

from typing import List, Sequence

from .aggregator import compute_weights, merge_targets
from .identity import identify, index_by_identifier
from .models import AllocationRow, AllocationSummary, Position, TargetAllocation


def merge_target_rows(positions: Sequence[Position], targets: Sequence[TargetAllocation]) -> List[Position]:
    """
    Positions plus a zero-quantity row for every target that is not held.

    Synthetic rows carry the id ``target-<identifier>`` and are display-only;
    they must never be written back into the stored positions.
    """
    held = {identify(p) for p in positions}
    rows = list(positions)

    for target in targets:
        identifier = identify(target)
        if identifier in held:
            continue
        held.add(identifier)
        rows.append(Position(
            id=f"target-{identifier}",
            symbol=target.symbol,
            name=target.name,
        ))
    return rows


def allocation_rows(positions: Sequence[Position], targets: Sequence[TargetAllocation],
                    balanced_tolerance: float = 0.01) -> List[AllocationRow]:
    """One comparison row per identifier in holdings or targets, sorted by identifier.

    Targets sharing an identifier are merged and their weights summed.
    """
    targets = merge_targets(targets)
    weights = compute_weights(positions)
    position_index = index_by_identifier(positions)
    target_index = index_by_identifier(targets)

    rows = []
    for identifier in sorted(set(position_index) | set(target_index)):
        target = target_index[identifier][0] if identifier in target_index else None
        position = position_index[identifier][0] if identifier in position_index else None
        current_weight = weights.get(identifier, 0.0)
        target_weight = target.target_weight if target else 0.0
        difference = current_weight - target_weight

        if target and position:
            if abs(difference) < balanced_tolerance:
                status = 'balanced'
            elif difference > 0:
                status = 'over-weighted'
            else:
                status = 'under-weighted'
        elif target:
            status = 'target-only'
        else:
            status = 'no-target'

        source = target or position
        rows.append(AllocationRow(
            identifier=identifier,
            symbol=source.symbol,
            name=source.name,
            target_weight=target.target_weight if target else None,
            current_weight=current_weight,
            difference=difference,
            status=status,
        ))
    return rows


def summarize_allocation(positions: Sequence[Position], targets: Sequence[TargetAllocation],
                         threshold_percent: float = 5.0,
                         max_total_target_weight: float = 100.0) -> AllocationSummary:
    """Headline figures comparing the whole portfolio with its targets."""
    targets = merge_targets(targets)
    weights = compute_weights(positions)
    target_ids = {identify(t) for t in targets}

    total_current_weight = sum(weights.values())
    total_target_weight = sum(t.target_weight for t in targets)

    needs_rebalancing = [
        identify(t) for t in targets
        if abs(weights.get(identify(t), 0.0) - t.target_weight) > threshold_percent
    ]
    unallocated = [identifier for identifier in weights if identifier not in target_ids]

    if total_target_weight > 0:
        efficiency = min(total_current_weight / total_target_weight * 100, 100.0)
    else:
        efficiency = 0.0

    return AllocationSummary(
        total_current_weight=total_current_weight,
        total_target_weight=total_target_weight,
        needs_rebalancing=needs_rebalancing,
        unallocated=unallocated,
        allocation_efficiency=efficiency,
        over_allocated=total_target_weight > max_total_target_weight,
    )
