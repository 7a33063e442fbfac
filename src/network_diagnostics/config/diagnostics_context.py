"""
Configuration context for the network diagnostics engine.

This module defines a data structure that holds all configuration parameters
of the application. It serves as a central point for passing configuration
throughout the application.
"""

from typing import NamedTuple


class DiagnosticsContext(NamedTuple):
    """
    A data structure containing all configuration parameters of the application.

    This class is immutable and provides a type-safe way to pass configuration
    throughout the application. It is created by parsing command-line arguments
    and environment variables.

    Attributes:
        instance_id: Unique identifier for this instance, injected into log records.
        mode: 'serve' to run the HTTP API, 'sweep' to probe the registry once.
        host: Interface the HTTP API binds to.
        port: TCP port the HTTP API listens on.
        registry_file: Path to the JSON node registry.
        services_file: Path to a JSON list of service endpoints, empty for the built-in list.
        max_timeout: Maximum timeout in seconds for HTTP status checks.
        logging_type: Type of logging configuration to use (dev, prod, or custom).
        logging_config_file: Path to custom logging configuration file (if logging_type is 'custom').
    """

    instance_id: str
    mode: str
    host: str
    port: int
    registry_file: str
    services_file: str
    max_timeout: int
    logging_type: str
    logging_config_file: str
