"""
Domain models for the network diagnostics engine.

This module defines the core data structures used throughout the application,
including probe targets, reachability results, diagnostic requests and their
results. Every model is an immutable snapshot of one moment: it is created
fresh by a check and handed whole to the caller.
"""

from datetime import datetime
from enum import Enum
from typing import NamedTuple, Optional


class ProbeStatus(str, Enum):
    """
    Binary reachability status of a target.

    Inheriting from 'str' allows enum members to be serialized as plain
    strings in JSON responses.
    """

    ONLINE = "online"
    OFFLINE = "offline"


class FailureReason(str, Enum):
    """Reason attached to an offline probe result."""

    TIMEOUT = "timeout"
    UNREACHABLE = "unreachable"


class DiagnosticKind(str, Enum):
    """The four ad-hoc diagnostic checks the dispatcher can run."""

    NSLOOKUP = "nslookup"
    PING = "ping"
    PORT = "port"
    SSL = "ssl"


class Target(NamedTuple):
    """
    Represents a single host subject to a network check.

    Attributes:
        host: A DNS name or a literal IP address.
        port: Optional port, only meaningful for checks that accept one.
        id: Optional identifier of the target in the node registry.
    """

    host: str
    port: Optional[int] = None
    id: Optional[str] = None

    @property
    def target_id(self) -> str:
        """The identifier reported in results: the registry id, else the host."""
        return self.id if self.id else self.host


class ProbeResult(NamedTuple):
    """
    Outcome of a single reachability probe.

    Attributes:
        target_id: Identifier of the probed target.
        status: Whether the target accepted a TCP connection.
        latency_ms: Connect latency in milliseconds, only when online.
        error: Failure reason, only when offline.
    """

    target_id: str
    status: ProbeStatus
    latency_ms: Optional[int] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "target_id": self.target_id,
            "status": self.status.value,
            "latency_ms": self.latency_ms,
            "error": self.error,
        }


class DiagnosticResult(NamedTuple):
    """A single human-readable line (or short block) describing a check outcome."""

    result: str


class CertificateSummary(NamedTuple):
    """
    The parts of a peer certificate the ssl check reports.

    Attributes:
        issuer: Organization name of the certificate issuer.
        expires_at: The certificate's notAfter timestamp (UTC).
        days_remaining: Whole days until expiry, rounded up. Negative when
            the certificate has already expired.
    """

    issuer: str
    expires_at: datetime
    days_remaining: int


class ServiceEndpoint(NamedTuple):
    """An application endpoint whose HTTP health is reported by the status check."""

    id: str
    name: str
    url: str
    region: str


class ServiceStatus(NamedTuple):
    """
    Result of one HTTP status check.

    Attributes:
        id: Identifier of the endpoint.
        name: Display name of the endpoint.
        region: Region label the endpoint is mapped to.
        status: "online" for a successful response, "error" otherwise.
        latency_ms: Round trip time in milliseconds, 0 when unreachable.
        checked_at: When the response was received, None when unreachable.
        error: Failure description, None on success.
    """

    id: str
    name: str
    region: str
    status: str
    latency_ms: int
    checked_at: Optional[datetime]
    error: Optional[str]

    def to_dict(self) -> dict:
        payload = {
            "id": self.id,
            "name": self.name,
            "region": self.region,
            "status": self.status,
            "latency": self.latency_ms,
        }
        if self.checked_at is not None:
            payload["lastChecked"] = self.checked_at.isoformat()
        if self.error is not None:
            payload["error"] = self.error
        return payload
