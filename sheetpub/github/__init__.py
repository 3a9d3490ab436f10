"""GitHub contents API publishing."""

from sheetpub.github.client import GitHubClient

__all__ = ["GitHubClient"]
