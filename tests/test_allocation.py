"""Tests for target-row merging and allocation comparison."""

import pytest

from folio_engine import (
    Position,
    TargetAllocation,
    allocation_rows,
    merge_target_rows,
    summarize_allocation,
)


class TestMergeTargetRows:
    """Tests for merge_target_rows()."""

    def test_adds_zero_rows_for_unheld_targets(self, sample_positions):
        targets = [
            TargetAllocation(name="A", target_weight=70),
            TargetAllocation(symbol="gld", name="Gold", target_weight=10),
        ]
        rows = merge_target_rows(sample_positions, targets)

        assert [r.name for r in rows] == ["A", "B", "Gold"]
        synthetic = rows[-1]
        assert synthetic.id == "target-GLD"
        assert synthetic.quantity == 0
        assert synthetic.market_value == 0
        assert synthetic.unrealized_gain == 0
        assert synthetic.unrealized_gain_percent == 0

    def test_does_not_touch_input(self, sample_positions):
        merge_target_rows(sample_positions, [TargetAllocation(name="Z", target_weight=5)])
        assert len(sample_positions) == 2

    def test_one_row_per_identifier(self):
        targets = [
            TargetAllocation(symbol="GLD", name="Gold", target_weight=5),
            TargetAllocation(symbol="gld", name="Gold ETF", target_weight=5),
        ]
        assert len(merge_target_rows([], targets)) == 1


class TestAllocationRows:
    """Tests for allocation_rows()."""

    def test_statuses(self, sample_positions):
        targets = [
            TargetAllocation(name="A", target_weight=70, tag="equity"),
            TargetAllocation(name="C", target_weight=10),
        ]
        rows = {r.identifier: r for r in allocation_rows(sample_positions, targets)}

        assert list(rows) == ["A", "B", "C"]
        assert rows["A"].status == "under-weighted"
        assert rows["A"].difference == pytest.approx(1200 / 2100 * 100 - 70)
        assert rows["B"].status == "no-target"
        assert rows["B"].target_weight is None
        assert rows["C"].status == "target-only"
        assert rows["C"].current_weight == 0
        assert rows["C"].difference == -10

    def test_over_weighted(self, sample_positions):
        rows = allocation_rows(sample_positions, [TargetAllocation(name="A", target_weight=40)])
        assert rows[0].status == "over-weighted"

    def test_balanced_within_tolerance(self):
        positions = [Position(name="X", quantity=1, current_price=100)]
        rows = allocation_rows(positions, [TargetAllocation(name="X", target_weight=100)])

        assert rows[0].status == "balanced"

    def test_target_name_preferred_for_display(self):
        positions = [Position(symbol="VTI", name="Vanguard", quantity=1, current_price=100)]
        targets = [TargetAllocation(symbol="vti", name="US Stocks", target_weight=60)]

        assert allocation_rows(positions, targets)[0].name == "US Stocks"


    def test_duplicate_targets_share_one_row(self, sample_positions):
        targets = [
            TargetAllocation(name="A", target_weight=20),
            TargetAllocation(name=" A ", target_weight=50),
        ]
        rows = allocation_rows(sample_positions, targets)

        assert [r.identifier for r in rows] == ["A", "B"]
        assert rows[0].target_weight == pytest.approx(70.0)
        assert rows[0].status == "under-weighted"

class TestSummarizeAllocation:
    """Tests for summarize_allocation()."""

    def test_summary(self, sample_positions, sample_targets):
        summary = summarize_allocation(sample_positions, sample_targets)

        assert summary.total_current_weight == pytest.approx(100.0)
        assert summary.total_target_weight == 100
        assert summary.needs_rebalancing == ["A", "B"]
        assert summary.unallocated == []
        assert summary.allocation_efficiency == pytest.approx(100.0)
        assert summary.over_allocated is False

    def test_no_targets(self, sample_positions):
        summary = summarize_allocation(sample_positions, [])

        assert summary.unallocated == ["A", "B"]
        assert summary.allocation_efficiency == 0

    def test_over_allocated(self, sample_positions):
        targets = [
            TargetAllocation(name="A", target_weight=80),
            TargetAllocation(name="B", target_weight=80),
        ]
        summary = summarize_allocation(sample_positions, targets)

        assert summary.over_allocated is True
        assert summary.allocation_efficiency == pytest.approx(62.5)

    def test_threshold_controls_rebalancing_list(self, sample_positions, sample_targets):
        summary = summarize_allocation(sample_positions, sample_targets, threshold_percent=20)
        assert summary.needs_rebalancing == []

    def test_duplicate_targets_listed_once(self, sample_positions):
        targets = [
            TargetAllocation(name="A", target_weight=20),
            TargetAllocation(name=" A ", target_weight=50),
        ]
        summary = summarize_allocation(sample_positions, targets)

        assert summary.needs_rebalancing == ["A"]
        assert summary.total_target_weight == pytest.approx(70.0)
        assert summary.unallocated == ["B"]
