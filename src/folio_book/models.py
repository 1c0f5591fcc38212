from datetime import datetime, timezone
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from folio_engine import PortfolioSnapshot, Position, TargetAllocation


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Settings(BaseModel):
    """User preferences stored alongside the portfolio"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    dark_mode: bool = False
    last_updated: datetime = Field(default_factory=_utcnow)


class BookData(BaseModel):
    """Everything the persistence and import/export layers exchange"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    positions: List[Position] = Field(default_factory=list, alias="holdings")
    targets: List[TargetAllocation] = Field(default_factory=list)
    settings: Settings = Field(default_factory=Settings)
    history: List[PortfolioSnapshot] = Field(default_factory=list, alias="portfolioHistory")


class MutationResult(BaseModel):
    """Outcome of a book mutation; failures leave the book unchanged"""
    success: bool
    error: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)


class CsvImport(BaseModel):
    """Snapshots and targets rebuilt from a flattened CSV export"""
    history: List[PortfolioSnapshot] = Field(default_factory=list)
    targets: List[TargetAllocation] = Field(default_factory=list)
