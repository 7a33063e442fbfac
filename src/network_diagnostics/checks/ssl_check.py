"""
TLS certificate inspection.

Opens a TLS session to port 443 presenting the target as SNI, reads the peer
certificate and reports its issuer, expiry date and the days remaining until
expiry.

The handshake does not verify the certificate chain: the point of the check is
to report on the certificate the host presents, including expired or
self-signed ones. Because the standard library only decodes verified
certificates, the DER form is parsed with 'cryptography'.
"""

import logging
import math
import ssl
from datetime import datetime, timezone
from typing import Callable, Optional

from cryptography import x509
from cryptography.x509.oid import NameOID

from network_diagnostics.checks.connection import describe_error, is_timeout, open_stream
from network_diagnostics.config.constants import SSL_PORT, SSL_TIMEOUT_MS
from network_diagnostics.contracts import DiagnosticCheck
from network_diagnostics.domain import CertificateSummary, DiagnosticResult
from network_diagnostics.errors import CertificateError

# Module logger
logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400
UNKNOWN_ISSUER = "Unknown"


def summarize_certificate(der: bytes, now: datetime) -> CertificateSummary:
    """
    Extracts the reported fields from a DER encoded certificate.

    days_remaining is ceil((notAfter - now) / 1 day) and is negative once the
    certificate has expired.

    Args:
        der: The certificate in DER form.
        now: Timezone aware reference time.

    Returns:
        CertificateSummary: Issuer organization, expiry and days remaining.

    Raises:
        CertificateError: If the certificate cannot be parsed.
    """
    try:
        certificate = x509.load_der_x509_certificate(der)
    except ValueError as err:
        raise CertificateError(f"Unparsable certificate: {err}") from err

    expires_at = certificate.not_valid_after_utc
    organizations = certificate.issuer.get_attributes_for_oid(NameOID.ORGANIZATION_NAME)
    issuer = str(organizations[0].value) if organizations else UNKNOWN_ISSUER
    days_remaining = math.ceil((expires_at - now).total_seconds() / SECONDS_PER_DAY)

    return CertificateSummary(issuer=issuer, expires_at=expires_at, days_remaining=days_remaining)


def _inspection_context() -> ssl.SSLContext:
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SslCheck(DiagnosticCheck):
    """Reports the certificate a host presents on its TLS port."""

    def __init__(
        self,
        port: int = SSL_PORT,
        timeout_ms: int = SSL_TIMEOUT_MS,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        """
        Initializes the check.

        Args:
            port: TLS port to connect to.
            timeout_ms: Upper bound in milliseconds for connect plus handshake.
            clock: Source of the current UTC time, used for days remaining.
        """
        self._port: int = port
        self._timeout_ms: int = timeout_ms
        self._clock: Callable[[], datetime] = clock
        self._ssl_context: ssl.SSLContext = _inspection_context()

    async def fetch_certificate(self, target: str) -> bytes:
        """
        Completes a TLS handshake with the target and returns the peer certificate.

        The session is closed before returning.

        Raises:
            asyncio.TimeoutError: If connect plus handshake exceed the timeout.
            OSError: If the connection or the handshake fails.
            CertificateError: If the peer presented no certificate.
        """
        async with open_stream(
            target,
            self._port,
            self._timeout_ms,
            ssl_context=self._ssl_context,
            server_hostname=target,
        ) as writer:
            ssl_object = writer.get_extra_info("ssl_object")
            der: Optional[bytes] = (
                ssl_object.getpeercert(binary_form=True) if ssl_object is not None else None
            )

        if not der:
            raise CertificateError("No certificate found")
        return der

    async def run(self, target: str, port: Optional[int] = None) -> DiagnosticResult:
        try:
            der = await self.fetch_certificate(target)
            summary = summarize_certificate(der, self._clock())
        except CertificateError as e:
            logger.info(f"SSL check of {target} failed: {e}")
            return DiagnosticResult(f"SSL Check Failed: {e}")
        except Exception as e:
            description = "Timeout connecting to SSL" if is_timeout(e) else describe_error(e)
            logger.info(f"SSL check of {target} failed: {description}")
            return DiagnosticResult(f"SSL Check Failed: {description}")

        logger.debug(f"SSL check of {target}: {summary.days_remaining} day(s) remaining")
        return DiagnosticResult(
            f"SSL Certificate for {target}:\n"
            f"- Issuer: {summary.issuer}\n"
            f"- Valid To: {summary.expires_at.strftime('%a %b %d %Y')}\n"
            f"- Days Remaining: {summary.days_remaining}"
        )
