"""Configuration loader with validation and singleton access."""

import logging
import yaml
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .models import AppConfig

logger = logging.getLogger(__name__)

# Global config singleton
_config: Optional[AppConfig] = None


def load_config(config_path: str | Path) -> AppConfig:
    """
    Load and validate configuration from YAML file.

    Args:
        config_path: Path to config.yaml file

    Returns:
        Validated AppConfig instance

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config validation fails
        yaml.YAMLError: If YAML parsing fails
    """
    global _config

    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.info(f"Loading configuration from: {config_path}")

    with open(config_path, 'r') as f:
        raw_config = yaml.safe_load(f)

    if raw_config is None:
        raw_config = {}

    try:
        _config = AppConfig(**raw_config)
    except ValidationError as e:
        logger.error(f"Configuration validation failed: {e}")
        raise ValueError(f"Invalid configuration: {e}") from e

    # Log loaded configuration for audit trail
    minimum_amount = _config.rebalancing.minimum_trade_amount
    logger.info("Configuration loaded successfully:")
    logger.info(f"  Drift threshold: {_config.rebalancing.threshold_percent}%")
    logger.info(f"  Minimum trade amount: {'disabled' if minimum_amount is None else minimum_amount}")
    logger.info(f"  Max total target weight: {_config.rebalancing.max_total_target_weight}%")
    logger.info(f"  Risk-free rate: {_config.performance.risk_free_rate_percent}%")
    logger.info(f"  Trading days per year: {_config.performance.trading_days_per_year}")
    logger.info(f"  Default period: {_config.performance.default_period}")
    logger.info(f"  Log level: {_config.logging.level} ({_config.logging.format})")

    return _config


def get_config() -> AppConfig:
    """
    Get the current configuration.

    Installs the defaults when no file has been loaded, so the engine can
    run without a config.yaml.
    """
    global _config

    if _config is None:
        logger.debug("No configuration loaded, using defaults")
        _config = AppConfig()
    return _config


def reset_config() -> None:
    """Forget the loaded configuration."""
    global _config
    _config = None
