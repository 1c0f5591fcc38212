"""Portfolio state and import/export built on the calculation engine."""

from .book import PortfolioBook
from .exchange import export_json, load_json, export_csv, load_csv, CSV_COLUMNS
from .models import BookData, CsvImport, MutationResult, Settings

__all__ = [
    "PortfolioBook",
    "BookData",
    "CsvImport",
    "MutationResult",
    "Settings",
    "export_json",
    "load_json",
    "export_csv",
    "load_csv",
    "CSV_COLUMNS",
]
