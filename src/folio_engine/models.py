import uuid
from datetime import datetime
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

from .valuation import Valuation, valuate

# camelCase on the wire, snake_case in Python
_WIRE_CONFIG = dict(alias_generator=to_camel, populate_by_name=True)


def _strip_symbol(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    return v or None


def _require_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("name must not be blank")
    return v


# Holdings and targets
class Position(BaseModel):
    """A manually entered holding; derived figures are always recomputed"""
    model_config = ConfigDict(frozen=True, **_WIRE_CONFIG)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    symbol: Optional[str] = None
    name: str
    quantity: float = 0.0
    avg_price: float = 0.0
    current_price: float = 0.0

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: Optional[str]) -> Optional[str]:
        return _strip_symbol(v)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        return _require_name(v)

    @property
    def valuation(self) -> Valuation:
        return valuate(self.quantity, self.avg_price, self.current_price)

    @computed_field(alias="marketValue")
    @property
    def market_value(self) -> float:
        return self.valuation.market_value

    @computed_field(alias="unrealizedGain")
    @property
    def unrealized_gain(self) -> float:
        return self.valuation.unrealized_gain

    @computed_field(alias="unrealizedGainPercent")
    @property
    def unrealized_gain_percent(self) -> float:
        return self.valuation.unrealized_gain_percent


class PositionInput(BaseModel):
    """Form payload for creating or editing a position"""
    model_config = ConfigDict(**_WIRE_CONFIG)

    symbol: Optional[str] = None
    name: str
    quantity: float = Field(ge=0)
    avg_price: float = Field(ge=0)
    current_price: float = Field(ge=0)

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: Optional[str]) -> Optional[str]:
        """Tickers are stored upper-cased; blank means no ticker."""
        v = _strip_symbol(v)
        return v.upper() if v else None

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        return _require_name(v)

    def to_position(self, position_id: Optional[str] = None) -> Position:
        fields = self.model_dump()
        if position_id is not None:
            fields["id"] = position_id
        return Position(**fields)


class TargetAllocation(BaseModel):
    """Desired weight for an asset, independent of whether it is held"""
    model_config = ConfigDict(frozen=True, **_WIRE_CONFIG)

    symbol: Optional[str] = None
    name: str
    target_weight: float = Field(gt=0, le=100)
    tag: str = ""

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: Optional[str]) -> Optional[str]:
        return _strip_symbol(v)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        return _require_name(v)


# Snapshots
class PortfolioSnapshot(BaseModel):
    """Immutable point-in-time capture of the portfolio"""
    model_config = ConfigDict(frozen=True, **_WIRE_CONFIG)

    date: datetime
    positions: Tuple[Position, ...] = Field(default=(), alias="holdings")
    total_value: float = 0.0
    total_gain: float = 0.0
    total_gain_percent: float = 0.0


# Engine results
class PortfolioTotals(BaseModel):
    total_value: float
    total_gain: float
    total_gain_percent: float


class RebalancingSuggestion(BaseModel):
    """Proposed trade for one drifted target"""
    model_config = ConfigDict(**_WIRE_CONFIG)

    identifier: str
    action: Literal['buy', 'sell']
    quantity: int
    amount: float
    current_weight: float
    target_weight: float
    deviation: float  # current - target, in percentage points
    reason: str


class PerformanceMetrics(BaseModel):
    model_config = ConfigDict(**_WIRE_CONFIG)

    total_return: float = 0.0
    total_return_percent: float = 0.0
    annualized_return: float = 0.0
    volatility: float = 0.0
    sharpe_ratio: float = 0.0
    max_drawdown: float = 0.0


AllocationStatus = Literal['balanced', 'over-weighted', 'under-weighted', 'target-only', 'no-target']


class AllocationRow(BaseModel):
    """Side-by-side current and target weight for one identifier"""
    model_config = ConfigDict(**_WIRE_CONFIG)

    identifier: str
    symbol: Optional[str] = None
    name: str
    target_weight: Optional[float] = None
    current_weight: float
    difference: float
    status: AllocationStatus


class AllocationSummary(BaseModel):
    model_config = ConfigDict(**_WIRE_CONFIG)

    total_current_weight: float
    total_target_weight: float
    needs_rebalancing: List[str] = Field(default_factory=list)
    unallocated: List[str] = Field(default_factory=list)
    allocation_efficiency: float
    over_allocated: bool = False


class SimulationResult(BaseModel):
    """Effect of applying the suggestions to one held identifier"""
    model_config = ConfigDict(**_WIRE_CONFIG)

    identifier: str
    current_quantity: float
    new_quantity: float
    quantity_change: float
    current_value: float
    new_value: float
    value_change: float
    current_weight: float
    new_weight: float
    target_weight: float
