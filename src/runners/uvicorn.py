"""Uvicorn runner."""

import logging
import uvicorn

from log import get_logger
from models.config import ServiceConfiguration

logger = get_logger(__name__)


def start_uvicorn(configuration: ServiceConfiguration, verbose: bool = False) -> None:
    """Start the relay service, uvicorn logs at DEBUG level when verbose."""
    log_level = logging.DEBUG if verbose else logging.INFO
    logger.info(
        "Starting Uvicorn on %s:%d with %d worker(s)",
        configuration.host,
        configuration.port,
        configuration.workers,
    )

    uvicorn.run(
        "app.main:app",
        host=configuration.host,
        port=configuration.port,
        workers=configuration.workers,
        log_level=log_level,
        use_colors=configuration.color_log,
        access_log=configuration.access_log,
    )
