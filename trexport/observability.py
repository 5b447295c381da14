"""Logfire cloud observability initialization and instrumentation."""

import logging

import logfire

from trexport import __version__
from trexport.config import Settings

logger = logging.getLogger(__name__)


def initialize_logfire(settings: Settings) -> bool:
    """
    Initialize Logfire for the timeline export.

    Must be called ONCE at startup, before any client is created.

    Instruments HTTPX (timeline pages and detail fetches) and bridges
    Python logging to Logfire.

    Args:
        settings: Application settings containing the Logfire token

    Returns:
        True if Logfire was configured.
    """
    if not settings.logfire_token:
        logger.debug("Logfire token not set - observability disabled")
        return False

    try:
        logfire.configure(
            token=settings.logfire_token,
            service_name="trexport",
            service_version=__version__,
        )

        logfire.instrument_httpx()

        root_logger = logging.getLogger()
        root_logger.addHandler(logfire.LogfireLoggingHandler())

        logger.info("Logfire cloud tracking initialized")
        return True

    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")
        return False
