"""Run the sheetpub HTTP service: ``python -m sheetpub``."""

import sys

import uvicorn
from loguru import logger

from sheetpub.config.loader import load_settings
from sheetpub.web.app import create_app


def main() -> None:
    settings = load_settings()

    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)

    app = create_app(settings)
    logger.info(f"Starting sheetpub on {settings.host}:{settings.port} ({len(settings.tables)} tables)")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
