"""Configuration module for sheetpub."""

from sheetpub.config.loader import load_settings
from sheetpub.config.schema import ServiceAccountCredential, Settings, TableDescriptor

__all__ = ["Settings", "ServiceAccountCredential", "TableDescriptor", "load_settings"]
