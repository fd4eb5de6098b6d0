#!/usr/bin/env python3
"""
Retail Ledger Entry Point

Configures logging and starts the API server.
"""

import sys

from retail_ledger.api import run_server
from retail_ledger.config import get_config
from retail_ledger.logging_config import setup_logging


def main() -> None:
    config = get_config()
    logger = setup_logging(
        level=config.log_level,
        log_format=config.log_format,
        log_file=config.log_file
    )
    logger.info(f"Starting retail ledger API on {config.api_host}:{config.api_port} "
                f"with {config.storage_backend} storage")

    try:
        run_server(host=config.api_host, port=config.api_port)
    except KeyboardInterrupt:
        logger.info("Shutting down retail ledger API")
    except Exception as e:
        logger.error(f"Error starting server: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
