"""Run the API with uvicorn: ``python -m docs_wallet``."""

import logging

import uvicorn

from docs_wallet.config import settings
from docs_wallet.main import setup_logging


def main() -> None:
    setup_logging()
    logger = logging.getLogger(__name__)
    logger.info("Starting Docs Wallet on %s:%d", settings.host, settings.port)

    uvicorn.run(
        "docs_wallet.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
