"""
Diagnostics dispatcher.

This module routes an ad-hoc diagnostic request to one of the check strategies
(DNS lookup, TCP ping, port probe, TLS certificate inspection). The dispatcher
always answers with a DiagnosticResult: failures inside a check are described,
never raised, because the consumer is a free-text terminal panel.
"""

import logging
from typing import Dict, Mapping, Optional, Union

from network_diagnostics.checks.connection import describe_error
from network_diagnostics.checks.dns_check import DnsLookupCheck
from network_diagnostics.checks.ping_check import PingCheck
from network_diagnostics.checks.port_check import PortCheck
from network_diagnostics.checks.ssl_check import SslCheck
from network_diagnostics.contracts import DiagnosticCheck
from network_diagnostics.domain import DiagnosticKind, DiagnosticResult

# Module logger
logger = logging.getLogger(__name__)


def default_checks() -> Dict[DiagnosticKind, DiagnosticCheck]:
    """Builds one check of every kind with its default ports and timeouts."""
    return {
        DiagnosticKind.NSLOOKUP: DnsLookupCheck(),
        DiagnosticKind.PING: PingCheck(),
        DiagnosticKind.PORT: PortCheck(),
        DiagnosticKind.SSL: SslCheck(),
    }


class DiagnosticsDispatcher:
    """
    Maps each DiagnosticKind to the check that implements it.

    Each invocation makes exactly the attempts of its check (one, or the fixed
    80 then 443 sequence for 'ping'); the dispatcher adds no retries of its own.
    """

    def __init__(self, checks: Optional[Mapping[DiagnosticKind, DiagnosticCheck]] = None) -> None:
        """
        Initializes the dispatcher.

        Args:
            checks: Check implementation per kind. Defaults to default_checks().
        """
        self._checks: Dict[DiagnosticKind, DiagnosticCheck] = dict(
            checks if checks is not None else default_checks()
        )

    def supports(self, kind: Union[DiagnosticKind, str, None]) -> bool:
        """True if a check is registered for the given kind."""
        return _parse_kind(kind) in self._checks

    async def run(
        self,
        kind: Union[DiagnosticKind, str],
        target: str,
        port: Optional[int] = None,
    ) -> DiagnosticResult:
        """
        Runs one diagnostic and describes its outcome.

        Args:
            kind: Which check to run.
            target: Host name or IP address to check.
            port: Port for the 'port' check, ignored by the other kinds.

        Returns:
            DiagnosticResult: The description of the outcome. Never raises.
        """
        diagnostic_kind = _parse_kind(kind)
        check = self._checks.get(diagnostic_kind) if diagnostic_kind else None
        if check is None:
            logger.warning(f"Rejected diagnostic request with unsupported kind {kind!r}")
            return DiagnosticResult(f"Unsupported diagnostic kind: {kind}")

        logger.info(f"Running {diagnostic_kind.value} diagnostic against {target!r}")
        try:
            return await check.run(target, port)
        except Exception as e:
            logger.exception(
                f"Check '{type(check).__name__}' failed for target {target!r} with error: {e}"
            )
            return DiagnosticResult(f"{diagnostic_kind.value} check failed: {describe_error(e)}")


def _parse_kind(kind: Union[DiagnosticKind, str, None]) -> Optional[DiagnosticKind]:
    if isinstance(kind, DiagnosticKind):
        return kind
    try:
        return DiagnosticKind(str(kind).strip().lower())
    except ValueError:
        return None
