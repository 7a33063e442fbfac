"""
Shared fixtures for the network diagnostics test suite.

Provides real local TCP endpoints (an accepting server and a closed port) and
a helper that issues self-signed certificates, so that the checks can be
exercised against the loopback interface without any external network.
"""

import asyncio
import socket
from datetime import datetime, timedelta
from typing import AsyncIterator, Optional, Tuple

import pytest
import pytest_asyncio
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

LOOPBACK = "127.0.0.1"


async def _drain_and_close(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
    try:
        await reader.read()
    except (ConnectionError, OSError):
        pass
    finally:
        writer.close()


@pytest_asyncio.fixture
async def open_port() -> AsyncIterator[int]:
    """
    Starts a TCP server on the loopback interface.

    Yields:
        int: The port the server accepts connections on.
    """
    server = await asyncio.start_server(_drain_and_close, LOOPBACK, 0)
    port = server.sockets[0].getsockname()[1]
    try:
        yield port
    finally:
        server.close()
        await server.wait_closed()


@pytest.fixture
def closed_port() -> int:
    """
    Returns a loopback port nothing listens on.

    The port is bound and released immediately, so connecting to it is refused.
    """
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind((LOOPBACK, 0))
        return sock.getsockname()[1]


def make_certificate(
    not_after: datetime,
    organization: Optional[str] = "Test Issuer Org",
    common_name: str = "localhost",
) -> Tuple[bytes, bytes, bytes]:
    """
    Issues a self-signed certificate.

    Args:
        not_after: Expiry of the certificate (timezone aware).
        organization: Organization name of the issuer, omitted when None.
        common_name: Common name of subject and issuer.

    Returns:
        Tuple[bytes, bytes, bytes]: The certificate as DER, the certificate as
            PEM and the private key as PEM.
    """
    key = ec.generate_private_key(ec.SECP256R1())
    attributes = [x509.NameAttribute(NameOID.COMMON_NAME, common_name)]
    if organization is not None:
        attributes.append(x509.NameAttribute(NameOID.ORGANIZATION_NAME, organization))
    name = x509.Name(attributes)

    certificate = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(not_after - timedelta(days=365))
        .not_valid_after(not_after)
        .sign(key, hashes.SHA256())
    )

    der = certificate.public_bytes(serialization.Encoding.DER)
    cert_pem = certificate.public_bytes(serialization.Encoding.PEM)
    key_pem = key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )
    return der, cert_pem, key_pem


@pytest.fixture
def certificate_factory():
    """Exposes make_certificate() to test modules."""
    return make_certificate
