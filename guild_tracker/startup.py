"""
Startup Script

Loads configuration, configures logging and serves the API with uvicorn.
"""

import logging
import sys

import uvicorn

from .core.config import ConfigLoader
from .core.container import Container
from .core.exceptions import ConfigurationError
from .presentation.api import create_app
from .utils.logging_utils import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    """Main entry point."""
    setup_logging()

    try:
        settings = ConfigLoader.load_config()
    except ConfigurationError as e:
        logger.error(f"Startup failed: {e.message} {e.details}")
        sys.exit(1)

    setup_logging(debug=settings.debug)

    if not ConfigLoader.validate_config():
        logger.error("Configuration validation failed")
        sys.exit(1)

    app = create_app(Container())

    logger.info(f"Server running on port {settings.server.port}")
    uvicorn.run(app, host=settings.server.host, port=settings.server.port)


if __name__ == "__main__":
    main()
