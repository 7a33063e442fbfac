"""
HTTP client configuration for the service status check.

The status check shares one aiohttp ClientSession for all its requests.
"""

import logging

import aiohttp

from network_diagnostics.config import DiagnosticsContext

# Module logger
logger = logging.getLogger(__name__)


def get_http_session(context: DiagnosticsContext) -> aiohttp.ClientSession:
    """
    Create the HTTP client session used by the service status check.

    Args:
        context: Configuration context containing HTTP client settings.

    Returns:
        aiohttp.ClientSession: A session whose total request timeout is bounded
            by the configured max timeout.
    """
    timeout = aiohttp.ClientTimeout(total=context.max_timeout)
    logger.debug(f"Creating HTTP session with a {context.max_timeout}s total timeout.")
    return aiohttp.ClientSession(timeout=timeout)
