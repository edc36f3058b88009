"""
Logging setup for scripts

Library modules only create loggers with logging.getLogger(__name__);
handlers are installed by whoever runs the engine.
"""
import logging
from typing import Optional

from order_stream.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Install a root handler at the configured level"""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=LOG_FORMAT,
    )
