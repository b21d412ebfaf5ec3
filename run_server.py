#!/usr/bin/env python
"""Entry point for running the HTTP server."""

import logging

import uvicorn

from petu.core.config import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


def main():
    """Run the HTTP server."""
    logger.info(f"Starting petu on {settings.HOST}:{settings.PORT} ({settings.STORAGE_BACKEND} storage)")
    uvicorn.run(
        "petu.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
