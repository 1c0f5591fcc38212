from .aggregator import aggregate_totals, compute_weights, capture_snapshot, merge_targets
from .allocation import merge_target_rows, allocation_rows, summarize_allocation
from .calculator import RebalanceCalculator, suggest
from .exceptions import (
    FolioError,
    DuplicateIdentifierError,
    PositionNotFoundError,
    TargetNotFoundError,
    ImportFormatError,
)
from .identity import identify, canonical_identifier, ensure_unique
from .models import (
    # Holdings and targets
    Position,
    PositionInput,
    TargetAllocation,
    PortfolioSnapshot,
    # Results
    PortfolioTotals,
    RebalancingSuggestion,
    PerformanceMetrics,
    AllocationRow,
    AllocationSummary,
    SimulationResult,
)
from .performance import PerformanceAnalyzer, analyze, max_drawdown
from .simulation import simulate_rebalance
from .valuation import Valuation, valuate

__version__ = "1.0.0"

__all__ = [
    "identify",
    "canonical_identifier",
    "ensure_unique",
    "valuate",
    "Valuation",
    "aggregate_totals",
    "compute_weights",
    "capture_snapshot",
    "merge_targets",
    "RebalanceCalculator",
    "suggest",
    "PerformanceAnalyzer",
    "analyze",
    "max_drawdown",
    "merge_target_rows",
    "allocation_rows",
    "summarize_allocation",
    "simulate_rebalance",
    "Position",
    "PositionInput",
    "TargetAllocation",
    "PortfolioSnapshot",
    "PortfolioTotals",
    "RebalancingSuggestion",
    "PerformanceMetrics",
    "AllocationRow",
    "AllocationSummary",
    "SimulationResult",
    "FolioError",
    "DuplicateIdentifierError",
    "PositionNotFoundError",
    "TargetNotFoundError",
    "ImportFormatError",
    "__version__",
]
