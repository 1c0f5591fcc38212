"""JSON and CSV import/export for portfolio data"""

import csv
import logging
from datetime import datetime, timezone
from io import StringIO
from typing import Dict, List, Sequence

from pydantic import ValidationError

from folio_engine import (
    ImportFormatError,
    PortfolioSnapshot,
    Position,
    TargetAllocation,
    capture_snapshot,
    identify,
)
from .models import BookData, CsvImport

logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    'date',
    'symbol',
    'name',
    'quantity',
    'avgPrice',
    'currentPrice',
    'marketValue',
    'unrealizedGain',
    'unrealizedGainPercent',
    'targetWeight',
    'tag',
]

# Columns that must be present to rebuild positions; the rest are derived or optional
_REQUIRED_COLUMNS = {'date', 'name', 'quantity', 'avgPrice', 'currentPrice'}


def export_json(data: BookData) -> str:
    """Serialize the book with camelCase keys."""
    text = data.model_dump_json(by_alias=True, indent=2)
    logger.info(f"Exported {len(data.positions)} positions and {len(data.targets)} targets to JSON")
    return text


def load_json(text: str) -> BookData:
    """
    Parse exported JSON back into book data.

    Raises:
        ImportFormatError: If the text is not valid JSON or has the wrong shape
    """
    try:
        data = BookData.model_validate_json(text)
    except ValidationError as e:
        logger.error(f"Invalid portfolio JSON: {e}")
        raise ImportFormatError(f"Invalid portfolio JSON: {e}") from e

    logger.info(f"Imported {len(data.positions)} positions and {len(data.targets)} targets from JSON")
    return data


def export_csv(history: Sequence[PortfolioSnapshot], targets: Sequence[TargetAllocation]) -> str:
    """One row per snapshot date and position, with target weight and tag joined in."""
    target_map = {identify(t): t for t in targets}

    output = StringIO()
    writer = csv.DictWriter(output, fieldnames=CSV_COLUMNS, lineterminator='\n')
    writer.writeheader()

    rows = 0
    for snapshot in history:
        for position in snapshot.positions:
            target = target_map.get(identify(position))
            writer.writerow({
                'date': snapshot.date.isoformat(),
                'symbol': position.symbol or '',
                'name': position.name,
                'quantity': position.quantity,
                'avgPrice': position.avg_price,
                'currentPrice': position.current_price,
                'marketValue': position.market_value,
                'unrealizedGain': position.unrealized_gain,
                'unrealizedGainPercent': position.unrealized_gain_percent,
                'targetWeight': target.target_weight if target else 0,
                'tag': target.tag if target else '',
            })
            rows += 1

    logger.info(f"Exported {rows} CSV rows from {len(history)} snapshots")
    return output.getvalue()


def load_csv(content: str) -> CsvImport:
    """
    Rebuild snapshots and targets from a flattened CSV export.

    Derived columns are ignored and recomputed. The first row with a positive
    target weight defines each identifier's target.

    Raises:
        ImportFormatError: On empty input, missing columns or bad values
    """
    if not content.strip():
        raise ImportFormatError("Empty CSV file")

    try:
        reader = csv.DictReader(StringIO(content))
        missing = _REQUIRED_COLUMNS - set(reader.fieldnames or [])
        if missing:
            raise ImportFormatError(f"Missing required columns: {sorted(missing)}")
        rows = list(reader)
    except csv.Error as e:
        raise ImportFormatError(f"Failed to parse CSV: {e}") from e

    positions_by_date: Dict[str, List[Position]] = {}
    targets: Dict[str, TargetAllocation] = {}

    for line_number, row in enumerate(rows, start=2):
        try:
            position = Position(
                symbol=row.get('symbol') or None,
                name=row['name'],
                quantity=float(row['quantity']),
                avg_price=float(row['avgPrice']),
                current_price=float(row['currentPrice']),
            )
            target_weight = float(row.get('targetWeight') or 0)
            if target_weight > 0 and identify(position) not in targets:
                targets[identify(position)] = TargetAllocation(
                    symbol=position.symbol,
                    name=position.name,
                    target_weight=target_weight,
                    tag=row.get('tag') or '',
                )
        except (ValueError, TypeError) as e:
            raise ImportFormatError(f"Invalid CSV row {line_number}: {e}") from e

        positions_by_date.setdefault(row['date'], []).append(position)

    history = []
    for raw_date, positions in positions_by_date.items():
        try:
            taken_at = datetime.fromisoformat(raw_date)
        except ValueError as e:
            raise ImportFormatError(f"Invalid snapshot date: {raw_date!r}") from e
        if taken_at.tzinfo is None:
            taken_at = taken_at.replace(tzinfo=timezone.utc)
        history.append(capture_snapshot(positions, taken_at))

    history.sort(key=lambda s: s.date)
    logger.info(f"Imported {len(history)} snapshots and {len(targets)} targets from {len(rows)} CSV rows")
    return CsvImport(history=history, targets=list(targets.values()))
