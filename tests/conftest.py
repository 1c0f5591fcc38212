"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from folio_config import reset_config
from folio_engine import PortfolioSnapshot, Position, TargetAllocation


@pytest.fixture(autouse=True)
def _fresh_config():
    """Every test starts from the default configuration."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def sample_positions():
    """Two positions: A worth 1200 (cost 1000), B worth 900 (cost 1000)."""
    return [
        Position(name="A", quantity=10, avg_price=100, current_price=120),
        Position(name="B", quantity=5, avg_price=200, current_price=180),
    ]


@pytest.fixture
def sample_targets():
    return [
        TargetAllocation(name="A", target_weight=70, tag="equity"),
        TargetAllocation(name="B", target_weight=30, tag="bonds"),
    ]


@pytest.fixture
def make_snapshot():
    """Build a snapshot with only a total value at a given day offset."""
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _make(total_value: float, day: float = 0) -> PortfolioSnapshot:
        return PortfolioSnapshot(date=base + timedelta(days=day), total_value=total_value)

    return _make
