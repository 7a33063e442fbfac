"""
Exceptions raised inside the network diagnostics engine.

None of these cross the engine boundary: checks catch them and turn them into
result values.
"""


class DiagnosticsError(Exception):
    """Base class for errors raised by the diagnostics engine itself."""


class CertificateError(DiagnosticsError):
    """The TLS handshake succeeded but the peer certificate is absent or unusable."""
