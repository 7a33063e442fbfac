"""
Connection helpers shared by the reachability probe and the diagnostic checks.

Every check opens at most one TCP (or TLS) stream at a time through
open_stream(), an async context manager that bounds the connect by a timeout
and closes the stream on every exit path. When the timeout expires,
asyncio.wait_for cancels the pending connect, and asyncio closes the
half-open socket itself.
"""

import asyncio
import logging
import ssl
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

# Module logger
logger = logging.getLogger(__name__)

# Upper bound in seconds for a graceful close before the transport is aborted
CLOSE_TIMEOUT = 1.0


@asynccontextmanager
async def open_stream(
    host: str,
    port: int,
    timeout_ms: int,
    ssl_context: Optional[ssl.SSLContext] = None,
    server_hostname: Optional[str] = None,
) -> AsyncIterator[asyncio.StreamWriter]:
    """
    Opens a TCP stream, optionally wrapped in TLS, and closes it on exit.

    The timeout covers name resolution, the TCP handshake and, when an SSL
    context is given, the TLS handshake.

    Args:
        host: Host name or IP address to connect to.
        port: TCP port to connect to.
        timeout_ms: Upper bound in milliseconds for establishing the stream.
        ssl_context: When given, a TLS session is negotiated over the stream.
        server_hostname: SNI value presented during the TLS handshake.

    Yields:
        asyncio.StreamWriter: The writer side of the open stream. Its
            'ssl_object' extra info holds the TLS session, if any.

    Raises:
        asyncio.TimeoutError: If the stream is not established in time.
        OSError: If the connection is refused, the host cannot be resolved or
            the TLS handshake fails.
    """
    kwargs = {}
    if ssl_context is not None:
        kwargs["ssl"] = ssl_context
        kwargs["server_hostname"] = server_hostname or host

    _, writer = await asyncio.wait_for(
        asyncio.open_connection(host, port, **kwargs), timeout=timeout_ms / 1000
    )
    try:
        yield writer
    finally:
        await close_stream(writer)


async def close_stream(writer: asyncio.StreamWriter) -> None:
    """
    Closes a stream, aborting the transport if the peer does not let it close in time.

    Errors raised while closing are logged: the stream is released either way.
    """
    writer.close()
    try:
        await asyncio.wait_for(writer.wait_closed(), timeout=CLOSE_TIMEOUT)
    except asyncio.TimeoutError:
        logger.debug("Graceful close timed out, aborting transport.")
        writer.transport.abort()
    except OSError as e:
        logger.debug(f"Error while closing stream: {e}")


async def measure_connect(host: str, port: int, timeout_ms: int) -> int:
    """
    Measures how long a TCP connect to host:port takes.

    The connection is closed as soon as it is established; no data is exchanged.

    Returns:
        int: Elapsed milliseconds from the start of the attempt to the
            established connection.

    Raises:
        asyncio.TimeoutError: If the connect does not complete within timeout_ms.
        Exception: Any connect error (refused, unresolvable host, malformed host).
    """
    loop = asyncio.get_running_loop()
    start = loop.time()
    async with open_stream(host, port, timeout_ms):
        return elapsed_ms(start, loop.time())


def elapsed_ms(start: float, end: float) -> int:
    """Converts two loop timestamps in seconds into whole elapsed milliseconds."""
    return int(round((end - start) * 1000))


def is_timeout(exc: BaseException) -> bool:
    """True for both asyncio and socket level timeouts."""
    return isinstance(exc, (asyncio.TimeoutError, TimeoutError))


def describe_error(exc: BaseException) -> str:
    """
    Renders a connect error as a short description.

    Timeouts become "Timeout"; everything else is rendered with its class
    name so that a refusal (ConnectionRefusedError) stays distinguishable
    from a resolution failure (gaierror) or any other error.
    """
    if is_timeout(exc):
        return "Timeout"
    message = str(exc)
    name = type(exc).__name__
    return f"{name}: {message}" if message else name
