"""
Main entry point for the Glow List API.
"""
import sys

import uvicorn
import structlog

from config import settings
from config.logging import setup_logging

setup_logging()
logger = structlog.get_logger()


def main():
    """Serve the API with uvicorn."""
    logger.info(
        "Starting API server",
        host=settings.api_host,
        port=settings.api_port,
        environment=settings.environment
    )
    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug and not settings.is_production,
        log_config=None
    )


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("API stopped by user")
    except Exception as e:
        logger.error("Fatal error", error=str(e))
        sys.exit(1)
