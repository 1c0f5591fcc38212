"""Tests for per-position valuation."""

import pytest

from folio_engine import Position, valuate


class TestValuate:
    """Tests for valuate()."""

    def test_gain_and_percent(self):
        result = valuate(10, 100, 120)

        assert result.market_value == 1200
        assert result.unrealized_gain == 200
        assert result.unrealized_gain_percent == pytest.approx(20.0)

    def test_loss(self):
        result = valuate(5, 200, 180)

        assert result.market_value == 900
        assert result.unrealized_gain == -100
        assert result.unrealized_gain_percent == pytest.approx(-10.0)

    def test_market_value_is_exact_product(self):
        assert valuate(0.1, 1, 3).market_value == 0.1 * 3

    def test_zero_quantity_is_all_zero(self):
        result = valuate(0, 50, 60)

        assert result.market_value == 0
        assert result.unrealized_gain == 0
        assert result.unrealized_gain_percent == 0

    def test_zero_cost_basis_gives_zero_percent(self):
        result = valuate(10, 0, 5)

        assert result.unrealized_gain == 50
        assert result.unrealized_gain_percent == 0

    def test_negative_inputs_are_computed_not_rejected(self):
        result = valuate(-2, 10, 12)

        assert result.market_value == -24
        assert result.unrealized_gain == -4
        assert result.unrealized_gain_percent == 0


class TestPositionDerivedFields:
    """Derived fields on Position always follow quantity and prices."""

    def test_derived_fields(self):
        position = Position(name="A", quantity=10, avg_price=100, current_price=120)

        assert position.market_value == 1200
        assert position.unrealized_gain == 200
        assert position.unrealized_gain_percent == pytest.approx(20.0)

    def test_price_change_recomputes(self):
        position = Position(name="A", quantity=10, avg_price=100, current_price=120)
        repriced = position.model_copy(update={"current_price": 90})

        assert repriced.market_value == 900
        assert repriced.unrealized_gain == -100

    def test_stored_derived_values_are_ignored(self):
        position = Position.model_validate({
            "name": "A", "quantity": 2, "avgPrice": 10, "currentPrice": 15, "marketValue": 999,
        })
        assert position.market_value == 30

    def test_derived_fields_serialized_with_aliases(self):
        dumped = Position(name="A", quantity=2, avg_price=10, current_price=15).model_dump(by_alias=True)

        assert dumped["marketValue"] == 30
        assert dumped["unrealizedGain"] == 10
        assert dumped["avgPrice"] == 10
