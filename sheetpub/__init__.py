"""sheetpub - publish Google Sheets tables as JSON files to GitHub."""

__version__ = "0.1.0"
