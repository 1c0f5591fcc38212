"""Caller-owned portfolio state built on the pure engine.

The book keeps positions, targets, settings and snapshot history, and hands
tuple copies of them to the engine on every read. Identity conflicts and
unknown ids come back as a failed ``MutationResult``; they never raise.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from pydantic import ValidationError

from folio_config import AppConfig, Period, get_config
from folio_engine import (
    AllocationRow,
    AllocationSummary,
    DuplicateIdentifierError,
    PerformanceAnalyzer,
    PerformanceMetrics,
    PortfolioSnapshot,
    PortfolioTotals,
    Position,
    PositionInput,
    PositionNotFoundError,
    RebalanceCalculator,
    RebalancingSuggestion,
    SimulationResult,
    TargetAllocation,
    TargetNotFoundError,
    aggregate_totals,
    allocation_rows,
    capture_snapshot,
    compute_weights,
    ensure_unique,
    identify,
    merge_target_rows,
    simulate_rebalance,
    summarize_allocation,
)
from folio_engine.identity import index_by_identifier
from .models import BookData, MutationResult, Settings

logger = logging.getLogger(__name__)


class PortfolioBook:
    """Holdings, targets and history for one portfolio"""

    def __init__(self, data: Optional[BookData] = None, config: Optional[AppConfig] = None):
        self.config = config or get_config()
        self.calculator = RebalanceCalculator(config=self.config.rebalancing)
        self.analyzer = PerformanceAnalyzer(config=self.config.performance)

        self._positions: List[Position] = []
        self._targets: List[TargetAllocation] = []
        self._history: List[PortfolioSnapshot] = []
        self._settings = Settings()

        if data is not None:
            self.load_data(data)

    # State views
    @property
    def positions(self) -> Tuple[Position, ...]:
        return tuple(self._positions)

    @property
    def targets(self) -> Tuple[TargetAllocation, ...]:
        return tuple(self._targets)

    @property
    def history(self) -> Tuple[PortfolioSnapshot, ...]:
        return tuple(self._history)

    @property
    def settings(self) -> Settings:
        return self._settings.model_copy()

    # Position mutations
    def add_position(self, form: PositionInput) -> MutationResult:
        position = form.to_position()
        try:
            ensure_unique(self._positions, position)
        except DuplicateIdentifierError as e:
            return self._reject("add position", e)

        self._positions.append(position)
        self._touch()
        logger.info(f"Position added: {position.name}", extra={'identifier': identify(position)})
        return MutationResult(success=True)

    def update_position(self, position_id: str, form: PositionInput) -> MutationResult:
        try:
            index, current = self._find_position(position_id)
            updated = form.to_position(position_id)
            ensure_unique(self._positions, updated, exclude=current)
        except (PositionNotFoundError, DuplicateIdentifierError) as e:
            return self._reject("update position", e)

        self._positions[index] = updated
        self._touch()
        logger.info(f"Position updated: {updated.name}", extra={'identifier': identify(updated)})
        return MutationResult(success=True)

    def delete_position(self, position_id: str) -> MutationResult:
        try:
            index, current = self._find_position(position_id)
        except PositionNotFoundError as e:
            return self._reject("delete position", e)

        del self._positions[index]
        self._touch()
        logger.info(f"Position deleted: {current.name}", extra={'identifier': identify(current)})
        return MutationResult(success=True)

    def update_position_price(self, position_id: str, price: float) -> MutationResult:
        if price < 0:
            return MutationResult(success=False, error=f"Price must not be negative, got {price}")
        try:
            index, current = self._find_position(position_id)
        except PositionNotFoundError as e:
            return self._reject("update price", e)

        self._positions[index] = current.model_copy(update={'current_price': price})
        self._touch()
        logger.debug(f"Price updated: {current.current_price} -> {price}", extra={'identifier': identify(current)})
        return MutationResult(success=True)

    # Target mutations
    def add_target(self, target: TargetAllocation) -> MutationResult:
        try:
            ensure_unique(self._targets, target)
        except DuplicateIdentifierError as e:
            return self._reject("add target", e)

        self._targets.append(target)
        self._touch()
        logger.info(f"Target added: {target.name} at {target.target_weight}%", extra={'identifier': identify(target)})
        return MutationResult(success=True, warnings=self._allocation_warnings())

    def update_target(self, name: str, **changes) -> MutationResult:
        try:
            index, current = self._find_target(name)
            updated = TargetAllocation.model_validate({**current.model_dump(), **changes})
            ensure_unique(self._targets, updated, exclude=current)
        except ValidationError as e:
            return MutationResult(success=False, error=f"Invalid target: {e}")
        except (TargetNotFoundError, DuplicateIdentifierError) as e:
            return self._reject("update target", e)

        self._targets[index] = updated
        self._touch()
        logger.info(f"Target updated: {updated.name}", extra={'identifier': identify(updated)})
        return MutationResult(success=True, warnings=self._allocation_warnings())

    def delete_target(self, name: str) -> MutationResult:
        try:
            index, current = self._find_target(name)
        except TargetNotFoundError as e:
            return self._reject("delete target", e)

        del self._targets[index]
        self._touch()
        logger.info(f"Target deleted: {current.name}", extra={'identifier': identify(current)})
        return MutationResult(success=True)

    # Settings
    def update_settings(self, **changes) -> Settings:
        fields = {**self._settings.model_dump(), **changes, 'last_updated': _utcnow()}
        self._settings = Settings.model_validate(fields)
        return self.settings

    def toggle_dark_mode(self) -> Settings:
        return self.update_settings(dark_mode=not self._settings.dark_mode)

    # Snapshots
    def record_snapshot(self, taken_at: Optional[datetime] = None, replace_latest: bool = False) -> PortfolioSnapshot:
        """Capture the current positions; optionally overwrite the latest snapshot."""
        snapshot = capture_snapshot(self.positions, taken_at)
        if replace_latest and self._history:
            self._history[-1] = snapshot
        else:
            self._history.append(snapshot)
        logger.info(f"Snapshot recorded: total value {snapshot.total_value:,.2f} ({len(self._history)} in history)")
        return snapshot

    # Engine reads
    def totals(self) -> PortfolioTotals:
        return aggregate_totals(self.positions)

    def weights(self) -> Dict[str, float]:
        return compute_weights(self.positions)

    def all_positions(self) -> List[Position]:
        """Positions plus zero-quantity rows for targets that are not held"""
        return merge_target_rows(self.positions, self.targets)

    def suggestions(self) -> List[RebalancingSuggestion]:
        return self.calculator.suggest(self.positions, self.targets)

    def allocation_rows(self) -> List[AllocationRow]:
        return allocation_rows(self.positions, self.targets,
                               balanced_tolerance=self.config.rebalancing.balanced_tolerance_percent)

    def allocation_summary(self) -> AllocationSummary:
        return summarize_allocation(
            self.positions,
            self.targets,
            threshold_percent=self.config.rebalancing.threshold_percent,
            max_total_target_weight=self.config.rebalancing.max_total_target_weight,
        )

    def performance(self, period: Optional[Period] = None, now: Optional[datetime] = None) -> PerformanceMetrics:
        return self.analyzer.analyze(self.history, period, now)

    def simulate(self) -> List[SimulationResult]:
        return simulate_rebalance(self.positions, self.suggestions())

    # Data management
    def to_data(self) -> BookData:
        return BookData(
            positions=list(self._positions),
            targets=list(self._targets),
            settings=self._settings.model_copy(update={'last_updated': _utcnow()}),
            history=list(self._history),
        )

    def load_data(self, data: BookData) -> MutationResult:
        """Replace the whole book. Duplicate identifiers are kept and reported."""
        self._positions = list(data.positions)
        self._targets = list(data.targets)
        self._history = list(data.history)
        self._settings = data.settings.model_copy(update={'last_updated': _utcnow()})

        warnings = self._duplicate_warnings(self._positions, "position") + \
            self._duplicate_warnings(self._targets, "target") + \
            self._allocation_warnings()
        for warning in warnings:
            logger.warning(warning)

        logger.info(
            f"Loaded {len(self._positions)} positions, {len(self._targets)} targets, "
            f"{len(self._history)} snapshots"
        )
        return MutationResult(success=True, warnings=warnings)

    def reset(self) -> None:
        self._positions = []
        self._targets = []
        self._history = []
        self._settings = Settings()
        logger.info("Portfolio book reset")

    # Helpers
    def _find_position(self, position_id: str) -> Tuple[int, Position]:
        for index, position in enumerate(self._positions):
            if position.id == position_id:
                return index, position
        raise PositionNotFoundError(f"Position {position_id} not found")

    def _find_target(self, name: str) -> Tuple[int, TargetAllocation]:
        for index, target in enumerate(self._targets):
            if target.name == name:
                return index, target
        raise TargetNotFoundError(f"Target {name} not found")

    def _touch(self) -> None:
        self._settings = self._settings.model_copy(update={'last_updated': _utcnow()})

    def _reject(self, action: str, error: Exception) -> MutationResult:
        logger.warning(f"Rejected {action}: {error}")
        return MutationResult(success=False, error=str(error))

    def _allocation_warnings(self) -> List[str]:
        total = sum(t.target_weight for t in self._targets)
        ceiling = self.config.rebalancing.max_total_target_weight
        if total > ceiling:
            return [f"Target weights sum to {total:.2f}%, above {ceiling}%"]
        return []

    @staticmethod
    def _duplicate_warnings(entities, kind: str) -> List[str]:
        return [
            f"{len(group)} {kind}s share identifier {identifier}; they are aggregated"
            for identifier, group in index_by_identifier(entities).items()
            if len(group) > 1
        ]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)
