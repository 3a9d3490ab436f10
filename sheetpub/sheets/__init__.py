"""Google Sheets reading and row conversion."""

from sheetpub.sheets.client import SheetsClient
from sheetpub.sheets.transform import Record, rows_to_records

__all__ = ["SheetsClient", "Record", "rows_to_records"]
