"""
Explicit port probe.
"""

import logging
from typing import Optional

from network_diagnostics.checks.connection import describe_error, open_stream
from network_diagnostics.config.constants import PORT_CHECK_DEFAULT_PORT, PORT_CHECK_TIMEOUT_MS
from network_diagnostics.contracts import DiagnosticCheck
from network_diagnostics.domain import DiagnosticResult

# Module logger
logger = logging.getLogger(__name__)


class PortCheck(DiagnosticCheck):
    """
    Reports whether a TCP port accepts connections.

    A failure message embeds the error description, so an operator can tell a
    refusal (closed but reachable) from a timeout (filtered or unreachable).
    """

    def __init__(self, timeout_ms: int = PORT_CHECK_TIMEOUT_MS) -> None:
        self._timeout_ms: int = timeout_ms

    async def run(self, target: str, port: Optional[int] = None) -> DiagnosticResult:
        target_port = port or PORT_CHECK_DEFAULT_PORT
        try:
            async with open_stream(target, int(target_port), self._timeout_ms):
                pass
        except Exception as e:
            description = describe_error(e)
            logger.info(f"Port check of {target}:{target_port} failed: {description}")
            return DiagnosticResult(
                f"Port {target_port} on {target} is CLOSED/FILTERED ({description})."
            )

        logger.debug(f"Port check of {target}:{target_port} succeeded")
        return DiagnosticResult(f"Port {target_port} on {target} is OPEN.")
