"""
Logging setup shared by the server entry point
"""

import logging
from typing import Optional

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Libraries that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")


def setup_logging(debug: bool = False, format_string: Optional[str] = None) -> None:
    """
    Configure the root logger

    Safe to call again once settings are loaded; the later call wins.

    Args:
        debug: Log at DEBUG instead of INFO
        format_string: Replaces DEFAULT_FORMAT
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=format_string or DEFAULT_FORMAT,
        force=True
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
