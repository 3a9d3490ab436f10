"""Configuration loading utilities."""

from typing import Any

from loguru import logger

from sheetpub.config.schema import Settings


def load_settings(**overrides: Any) -> Settings:
    """
    Build settings from the environment.

    Keyword overrides take precedence over environment variables, which lets
    tests and embedding code pass explicit values.
    """
    settings = Settings(**overrides)

    if not settings.admin_token:
        logger.warning("ADMIN_TOKEN is not set; publish endpoints will reject every caller")
    if not settings.viewer_token:
        logger.debug("VIEWER_TOKEN is not set; only the admin token can read the config")
    if not settings.google_service_account_json:
        logger.warning("GOOGLE_SERVICE_ACCOUNT_JSON is not set; publishing will fail")
    if not settings.github_token:
        logger.warning("GITHUB_TOKEN is not set; publishing will fail")

    return settings
