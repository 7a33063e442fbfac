"""
TCP latency check ("ping" without ICMP).

Tries port 80 first and falls back to port 443. The fallback is strictly
sequential: 443 is only attempted after 80 has failed, and the reported port
is the first one of that fixed order that answered, not the fastest.
"""

import logging
from typing import Optional, Sequence, Tuple

from network_diagnostics.checks.connection import describe_error, measure_connect
from network_diagnostics.config.constants import PING_PORTS, PING_TIMEOUT_MS
from network_diagnostics.contracts import DiagnosticCheck
from network_diagnostics.domain import DiagnosticResult

# Module logger
logger = logging.getLogger(__name__)


class PingCheck(DiagnosticCheck):
    """Reports the TCP connect latency of a host on the first answering port."""

    def __init__(
        self, ports: Sequence[int] = PING_PORTS, timeout_ms: int = PING_TIMEOUT_MS
    ) -> None:
        self._ports: Tuple[int, ...] = tuple(ports)
        self._timeout_ms: int = timeout_ms

    async def run(self, target: str, port: Optional[int] = None) -> DiagnosticResult:
        for candidate in self._ports:
            try:
                latency_ms = await measure_connect(target, candidate, self._timeout_ms)
            except Exception as e:
                logger.debug(f"Ping of {target}:{candidate} failed: {describe_error(e)}")
                continue
            return DiagnosticResult(
                f"Target {target} is ALIVE (Port {candidate}). Latency: {latency_ms}ms"
            )

        ports = "/".join(str(p) for p in self._ports)
        logger.info(f"Ping of {target} failed on ports {ports}")
        return DiagnosticResult(f"Target {target} unreachable (Ports {ports} closed or timeout).")
