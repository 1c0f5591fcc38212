"""Historical performance metrics over a snapshot series"""

import calendar
import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

import numpy as np

from folio_config import PerformanceConfig, Period, get_config
from .models import PerformanceMetrics, PortfolioSnapshot

logger = logging.getLogger(__name__)

_SECONDS_PER_DAY = 60 * 60 * 24


class PerformanceAnalyzer:
    """Return, risk and drawdown figures for a window of snapshots.

    Metrics are advisory, so every degenerate series (empty window, zero
    starting value, no elapsed time) resolves to zeros instead of raising.
    """

    def __init__(self, config: Optional[PerformanceConfig] = None, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.config = config or get_config().performance

    def analyze(self, snapshots: Sequence[PortfolioSnapshot], period: Optional[Period] = None,
                now: Optional[datetime] = None) -> PerformanceMetrics:
        period = period or self.config.default_period
        window = self.filter_window(snapshots, period, now)

        if not window:
            return PerformanceMetrics()

        first, last = window[0], window[-1]

        total_return = last.total_value - first.total_value
        total_return_percent = (total_return / first.total_value * 100) if first.total_value > 0 else 0.0

        annualized_return = self._annualized_return(first, last)
        volatility = self._volatility(window)

        excess_return = annualized_return - self.config.risk_free_rate_percent
        sharpe_ratio = excess_return / volatility if volatility > 0 else 0.0

        return PerformanceMetrics(
            total_return=total_return,
            total_return_percent=total_return_percent,
            annualized_return=annualized_return,
            volatility=volatility,
            sharpe_ratio=sharpe_ratio,
            max_drawdown=max_drawdown(window),
        )

    def filter_window(self, snapshots: Sequence[PortfolioSnapshot], period: Period,
                      now: Optional[datetime] = None) -> List[PortfolioSnapshot]:
        """Snapshots at or after the period start, oldest first"""
        ordered = sorted(snapshots, key=lambda s: _as_utc(s.date))
        start = window_start(period, now or datetime.now(timezone.utc))
        if start is None:
            return ordered
        return [s for s in ordered if _as_utc(s.date) >= start]

    def _annualized_return(self, first: PortfolioSnapshot, last: PortfolioSnapshot) -> float:
        """Compound annual growth in percent"""
        elapsed_days = (_as_utc(last.date) - _as_utc(first.date)).total_seconds() / _SECONDS_PER_DAY
        years = elapsed_days / self.config.days_per_year

        if years <= 0 or first.total_value <= 0:
            return 0.0

        ratio = last.total_value / first.total_value
        if ratio < 0:
            self.logger.debug(f"Negative value ratio {ratio:.4f}, annualized return set to 0")
            return 0.0

        try:
            return (ratio ** (1 / years) - 1) * 100
        except OverflowError:
            self.logger.debug(f"Annualized return overflowed over {elapsed_days:.4f} days, set to 0")
            return 0.0

    def _volatility(self, window: Sequence[PortfolioSnapshot]) -> float:
        """Annualized standard deviation of snapshot-to-snapshot returns, in percent"""
        values = np.array([s.total_value for s in window], dtype=float)
        previous = values[:-1]
        valid = previous > 0
        if not valid.any():
            return 0.0

        returns = np.diff(values)[valid] / previous[valid]
        # Population std (ddof=0)
        return float(np.std(returns) * np.sqrt(self.config.trading_days_per_year) * 100)


def max_drawdown(snapshots: Sequence[PortfolioSnapshot]) -> float:
    """Largest percentage decline from a running peak; never negative."""
    if not snapshots:
        return 0.0

    worst = 0.0
    peak = snapshots[0].total_value
    for snapshot in snapshots:
        if snapshot.total_value > peak:
            peak = snapshot.total_value
        elif peak > 0:
            worst = max(worst, (peak - snapshot.total_value) / peak * 100)
    return worst


def window_start(period: Period, now: datetime) -> Optional[datetime]:
    """Lower bound for a period, or None for ALL and unrecognised periods."""
    now = _as_utc(now)
    if period == "1M":
        return _subtract_months(now, 1)
    elif period == "3M":
        return _subtract_months(now, 3)
    elif period == "1Y":
        return _subtract_months(now, 12)
    elif period != "ALL":
        logger.debug(f"Unknown period {period!r}, using full history")
    return None


def analyze(snapshots: Sequence[PortfolioSnapshot], period: Period = "ALL",
            now: Optional[datetime] = None, risk_free_rate_percent: float = 3.0) -> PerformanceMetrics:
    """Analyze with an explicit risk-free rate instead of the loaded config."""
    config = PerformanceConfig(risk_free_rate_percent=risk_free_rate_percent)
    return PerformanceAnalyzer(config=config).analyze(snapshots, period, now)


def _subtract_months(d: datetime, months: int) -> datetime:
    """Subtract months from a datetime, clamping to valid day."""
    year = d.year
    month = d.month - months
    while month <= 0:
        month += 12
        year -= 1
    max_day = calendar.monthrange(year, month)[1]
    return d.replace(year=year, month=month, day=min(d.day, max_day))


def _as_utc(d: datetime) -> datetime:
    """Treat naive datetimes as UTC so mixed inputs compare cleanly."""
    if d.tzinfo is None:
        return d.replace(tzinfo=timezone.utc)
    return d
