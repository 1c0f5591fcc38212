"""Rebalancing suggestions with a flat drift threshold"""

from typing import List, Optional, Sequence
import logging
import math
from folio_config import RebalancingConfig, get_config
from .aggregator import aggregate_totals, compute_weights, merge_targets
from .identity import identify, index_by_identifier
from .models import Position, RebalancingSuggestion, TargetAllocation


class RebalanceCalculator:
    """Calculate buy/sell suggestions that move drifted targets back to weight"""

    def __init__(self, config: Optional[RebalancingConfig] = None, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.config = config or get_config().rebalancing

    def suggest(self, positions: Sequence[Position],
                targets: Sequence[TargetAllocation]) -> List[RebalancingSuggestion]:
        """
        Build suggestions for every target whose weight drifted past the threshold.

        Returns suggestions ordered by absolute deviation, largest first; ties
        keep target order. An empty or valueless portfolio yields no suggestions.
        Targets sharing an identifier are merged first, so each identifier gets
        at most one suggestion.
        """
        current_weights = compute_weights(positions)
        total_value = aggregate_totals(positions).total_value

        if total_value == 0:
            self.logger.debug("Portfolio has no value, no suggestions can be costed")
            return []

        self._warn_if_over_allocated(targets)

        targets = merge_targets(targets)
        position_index = index_by_identifier(positions)
        suggestions = []

        for target in targets:
            identifier = identify(target)
            current_weight = current_weights.get(identifier, 0.0)
            deviation = current_weight - target.target_weight

            if not self._meets_drift_threshold(identifier, current_weight, target.target_weight):
                continue

            matches = position_index.get(identifier, [])
            current_value = sum(p.market_value for p in matches)
            target_value = target.target_weight / 100 * total_value
            value_difference = target_value - current_value

            action = 'buy' if value_difference > 0 else 'sell'
            amount = abs(value_difference)

            if not self._meets_amount_floor(identifier, action, amount):
                continue

            quantity = self._quantity_for(amount, matches[0] if matches else None)

            suggestions.append(RebalancingSuggestion(
                identifier=identifier,
                action=action,
                quantity=quantity,
                amount=amount,
                current_weight=current_weight,
                target_weight=target.target_weight,
                deviation=deviation,
                reason=(
                    f"Current weight {current_weight:.1f}% differs from target "
                    f"{target.target_weight:.1f}% by {deviation:+.1f}pp"
                ),
            ))

        # sort() is stable, so equal deviations stay in target order
        suggestions.sort(key=lambda s: abs(s.deviation), reverse=True)
        return suggestions

    def _meets_drift_threshold(self, identifier: str, current_weight: float, target_weight: float) -> bool:
        """Check if the weight deviation reaches the configured threshold"""
        deviation = abs(current_weight - target_weight)
        if deviation < self.config.threshold_percent:
            self.logger.debug(
                f"Skipping {identifier}: {deviation:.2f}% deviation < "
                f"{self.config.threshold_percent}% threshold "
                f"(target={target_weight:.2f}%, current={current_weight:.2f}%)"
            )
            return False
        return True

    def _meets_amount_floor(self, identifier: str, action: str, amount: float) -> bool:
        """Check the optional minimum trade amount"""
        floor = self.config.minimum_trade_amount
        if floor is not None and amount < floor:
            self.logger.debug(f"Skipping {action} for {identifier}: amount {amount:,.2f} < floor {floor:,.2f}")
            return False
        return True

    def _quantity_for(self, amount: float, position: Optional[Position]) -> int:
        """Whole units purchasable for ``amount``; 0 without a usable price"""
        if position is None:
            return 0
        price = position.current_price
        if price <= 0 or math.isnan(price):
            self.logger.debug(f"No usable price for {identify(position)}, quantity set to 0")
            return 0
        return math.floor(amount / price)

    def _warn_if_over_allocated(self, targets: Sequence[TargetAllocation]) -> None:
        total_target = sum(t.target_weight for t in targets)
        if total_target > self.config.max_total_target_weight:
            self.logger.warning(
                f"Target weights sum to {total_target:.2f}%, above "
                f"{self.config.max_total_target_weight}%"
            )


def suggest(positions: Sequence[Position], targets: Sequence[TargetAllocation],
            threshold_percent: float = 5.0,
            minimum_trade_amount: Optional[float] = None) -> List[RebalancingSuggestion]:
    """Suggest trades using an explicit threshold instead of the loaded config."""
    config = RebalancingConfig(
        threshold_percent=threshold_percent,
        minimum_trade_amount=minimum_trade_amount,
    )
    return RebalanceCalculator(config=config).suggest(positions, targets)
