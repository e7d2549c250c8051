#!/usr/bin/env python3
"""
Main entry point for the objective progress service.

Loads environment variables, configures logging and starts the FastAPI
server on the configured port (default: 8080).

Usage:
    python run_server.py

Or with uvicorn directly:
    uvicorn objective_progress.main:app --host 0.0.0.0 --port 8080
"""

import logging
import sys

from dotenv import load_dotenv
import uvicorn

from objective_progress import __version__
from objective_progress.config import Settings, settings


def configure_logging(log_level: str) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )

    # Set uvicorn loggers to the same level
    logging.getLogger("uvicorn").setLevel(numeric_level)
    logging.getLogger("uvicorn.access").setLevel(numeric_level)
    logging.getLogger("uvicorn.error").setLevel(numeric_level)


def print_startup_banner(config: Settings) -> None:
    """Print startup banner with configuration information."""
    banner = f"""
==================================================================
  Objective Progress Service v{__version__}
------------------------------------------------------------------
  Host:        {config.host}
  Port:        {config.port}
  Environment: {config.environment}
  Log Level:   {config.log_level}
  Snapshots:   {config.snapshot_db_path} (last {config.snapshot_limit})
------------------------------------------------------------------
  Health:      http://{config.host}:{config.port}/health
  Progress:    http://{config.host}:{config.port}/api/v1/objectives/progress
==================================================================
"""
    print(banner)


def main() -> None:
    """
    Main entry point for the progress service.

    Loads configuration, configures logging, and starts the server.
    """
    load_dotenv()
    config = settings()

    configure_logging(config.log_level)
    logger = logging.getLogger(__name__)

    print_startup_banner(config)

    logger.info("Starting objective progress service...")
    logger.info(f"Server will listen on {config.host}:{config.port}")

    try:
        uvicorn.run(
            "objective_progress.main:app",
            host=config.host,
            port=config.port,
            reload=config.debug,
            log_level=config.log_level.lower(),
            access_log=True,
        )
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
    except Exception as e:
        logger.error(f"Server failed to start: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
