"""
DNS resolution check.

Resolves the IPv4 (A) records of a target with dnspython's asyncio resolver
and reports them on one line.
"""

import logging
from typing import List, Optional

import dns.asyncresolver
import dns.exception

from network_diagnostics.config.constants import DNS_TIMEOUT_MS
from network_diagnostics.contracts import DiagnosticCheck
from network_diagnostics.domain import DiagnosticResult

# Module logger
logger = logging.getLogger(__name__)


class DnsLookupCheck(DiagnosticCheck):
    """Reports the A records of a host, or a description of the DNS error."""

    def __init__(
        self,
        resolver: Optional[dns.asyncresolver.Resolver] = None,
        timeout_ms: int = DNS_TIMEOUT_MS,
    ) -> None:
        """
        Initializes the check.

        Args:
            resolver: Resolver to use. When omitted, one is created from the
                system configuration on first use.
            timeout_ms: Upper bound in milliseconds for the whole resolution.
        """
        self._resolver: Optional[dns.asyncresolver.Resolver] = resolver
        self._timeout_ms: int = timeout_ms

    async def resolve(self, target: str) -> List[str]:
        """
        Resolves the IPv4 addresses of a host.

        Raises:
            dns.exception.DNSException: NXDOMAIN, no answer, timeout, malformed name, ...
        """
        if self._resolver is None:
            self._resolver = dns.asyncresolver.Resolver()
        answer = await self._resolver.resolve(target, "A", lifetime=self._timeout_ms / 1000)
        return [rdata.address for rdata in answer]

    async def run(self, target: str, port: Optional[int] = None) -> DiagnosticResult:
        try:
            addresses = await self.resolve(target)
        except (dns.exception.DNSException, ValueError) as e:
            # ValueError covers names dnspython cannot encode, e.g. invalid IDNA.
            logger.info(f"DNS lookup of {target!r} failed: {e!r}")
            return DiagnosticResult(f"DNS Error: {str(e) or type(e).__name__}")

        logger.debug(f"DNS lookup of {target!r} returned {len(addresses)} address(es)")
        return DiagnosticResult(f"DNS Records for {target}: {', '.join(addresses)}")
