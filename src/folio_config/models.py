"""Pydantic models for application configuration with validation."""

from typing import Literal, Optional
from pydantic import BaseModel, Field, field_validator


Period = Literal["1M", "3M", "1Y", "ALL"]


class RebalancingConfig(BaseModel):
    """Drift detection and suggestion settings."""

    threshold_percent: float = Field(
        default=5.0,
        ge=0.0,
        le=100.0,
        description="Skip targets whose weight is within this many percentage points of target"
    )
    minimum_trade_amount: Optional[float] = Field(
        default=None,
        ge=0.0,
        description="Optional amount floor; suggestions below it are not emitted. None disables it."
    )
    balanced_tolerance_percent: float = Field(
        default=0.01,
        ge=0.0,
        le=5.0,
        description="Allocation rows within this deviation are reported as balanced"
    )
    max_total_target_weight: float = Field(
        default=100.0,
        ge=0.0,
        le=1000.0,
        description="Soft ceiling for the sum of target weights (warning only)"
    )


class PerformanceConfig(BaseModel):
    """Historical performance settings."""

    risk_free_rate_percent: float = Field(
        default=3.0,
        ge=-10.0,
        le=50.0,
        description="Annual risk-free rate used for the Sharpe ratio"
    )
    trading_days_per_year: int = Field(
        default=252,
        ge=1,
        le=366,
        description="Periods per year used to annualize volatility"
    )
    days_per_year: float = Field(
        default=365.25,
        gt=0.0,
        le=366.0,
        description="Calendar days per year used to annualize returns"
    )
    default_period: Period = Field(
        default="ALL",
        description="Window used when no period is requested"
    )


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root logger level"
    )
    format: Literal["text", "json"] = Field(
        default="text",
        description="Console/file record format"
    )
    file_path: Optional[str] = Field(
        default=None,
        description="Optional log file, rotated daily and gzip-compressed"
    )
    backup_count: int = Field(
        default=30,
        ge=0,
        le=3650,
        description="Number of rotated log files to keep"
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        """Accept log levels in any case."""
        if isinstance(v, str):
            return v.upper()
        return v


class AppConfig(BaseModel):
    """Root application configuration."""

    rebalancing: RebalancingConfig = Field(
        default_factory=RebalancingConfig,
        description="Rebalancing suggestion settings"
    )
    performance: PerformanceConfig = Field(
        default_factory=PerformanceConfig,
        description="Performance analysis settings"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging settings"
    )
