"""Tests for configuration loading."""

import pytest

from folio_config import AppConfig, get_config, load_config, reset_config


class TestGetConfig:
    """Tests for get_config()."""

    def test_defaults_when_nothing_loaded(self):
        config = get_config()

        assert config.rebalancing.threshold_percent == 5.0
        assert config.rebalancing.minimum_trade_amount is None
        assert config.performance.risk_free_rate_percent == 3.0
        assert config.performance.trading_days_per_year == 252
        assert config.logging.level == "INFO"

    def test_returns_same_instance(self):
        assert get_config() is get_config()

    def test_reset_forgets_loaded_config(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("rebalancing:\n  threshold_percent: 8\n")
        load_config(path)
        reset_config()

        assert get_config().rebalancing.threshold_percent == 5.0


class TestLoadConfig:
    """Tests for load_config()."""

    def test_loads_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "rebalancing:\n"
            "  threshold_percent: 2.5\n"
            "  minimum_trade_amount: 50\n"
            "performance:\n"
            "  risk_free_rate_percent: 4\n"
            "  default_period: 1Y\n"
            "logging:\n"
            "  level: debug\n"
            "  format: json\n"
        )
        config = load_config(path)

        assert config.rebalancing.threshold_percent == 2.5
        assert config.rebalancing.minimum_trade_amount == 50
        assert config.performance.risk_free_rate_percent == 4
        assert config.performance.default_period == "1Y"
        assert config.logging.level == "DEBUG"
        assert config.logging.format == "json"
        assert get_config() is config

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert load_config(path) == AppConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_out_of_range_value(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("rebalancing:\n  threshold_percent: 150\n")

        with pytest.raises(ValueError, match="Invalid configuration"):
            load_config(path)

    def test_unknown_period(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("performance:\n  default_period: 5Y\n")

        with pytest.raises(ValueError, match="Invalid configuration"):
            load_config(path)
