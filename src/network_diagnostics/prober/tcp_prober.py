"""
TCP based implementation of the ReachabilityProber interface.

A target is considered online when it accepts a TCP connection on port 80
within the probe timeout. This is a cheap, universal liveness signal, not an
application health check: the connection is closed as soon as it is
established and no data is exchanged.
"""

import logging

from network_diagnostics.checks.connection import is_timeout, measure_connect
from network_diagnostics.config.constants import REACHABILITY_PORT, REACHABILITY_TIMEOUT_MS
from network_diagnostics.contracts import ReachabilityProber
from network_diagnostics.domain import FailureReason, ProbeResult, ProbeStatus, Target

# Module logger
logger = logging.getLogger(__name__)


class TcpReachabilityProber(ReachabilityProber):
    """
    Probes a target with a single TCP connect attempt to port 80.

    The outcome is one of three terminal events: the connect succeeds
    (online, with latency), the timeout expires (offline, 'timeout'), or the
    connect fails for any other reason such as a refusal or a resolution
    failure (offline, 'unreachable'). The target's own port is ignored.
    """

    def __init__(self, timeout_ms: int = REACHABILITY_TIMEOUT_MS) -> None:
        """
        Initializes the prober.

        Args:
            timeout_ms: Upper bound in milliseconds for the connect attempt.
        """
        self._timeout_ms: int = timeout_ms

    async def probe(self, target: Target) -> ProbeResult:
        """
        Connects to target.host:80 and reports whether it answered.

        Malformed or empty hosts produce an offline result, never an exception.

        Args:
            target: The Target to probe.

        Returns:
            ProbeResult: online with latency_ms, or offline with an error reason.
        """
        target_id = target.target_id
        host = (target.host or "").strip()
        if not host:
            logger.debug(f"Target {target_id!r} has no host, reporting it offline.")
            return _offline(target_id, FailureReason.UNREACHABLE)

        try:
            latency_ms = await measure_connect(host, REACHABILITY_PORT, self._timeout_ms)
        except Exception as e:
            reason = FailureReason.TIMEOUT if is_timeout(e) else FailureReason.UNREACHABLE
            logger.debug(f"Probe of {host}:{REACHABILITY_PORT} failed ({reason.value}): {e!r}")
            return _offline(target_id, reason)

        logger.debug(f"Probe of {host}:{REACHABILITY_PORT} succeeded in {latency_ms}ms")
        return ProbeResult(target_id=target_id, status=ProbeStatus.ONLINE, latency_ms=latency_ms)


def _offline(target_id: str, reason: FailureReason) -> ProbeResult:
    return ProbeResult(target_id=target_id, status=ProbeStatus.OFFLINE, error=reason.value)
