"""Application configuration management for the portfolio rebalancer."""

from .models import (
    AppConfig,
    RebalancingConfig,
    PerformanceConfig,
    LoggingConfig,
    Period,
)
from .loader import load_config, get_config, reset_config
from .logger import configure_root_logger, StructuredFormatter

__all__ = [
    "AppConfig",
    "RebalancingConfig",
    "PerformanceConfig",
    "LoggingConfig",
    "Period",
    "load_config",
    "get_config",
    "reset_config",
    "configure_root_logger",
    "StructuredFormatter",
]
