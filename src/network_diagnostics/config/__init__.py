"""
Configuration module for the network diagnostics engine.

This module provides functionality to parse command-line arguments and environment
variables to create a configuration context for the application. It defines
default values and help text for all configurable parameters.
"""

import argparse
import os
from typing import Any
from uuid import uuid4

from network_diagnostics.config.constants import (
    DEFAULT_HOST,
    DEFAULT_INSTANCE_ID_PREFIX,
    DEFAULT_LOGGING_CONFIG_FILE,
    DEFAULT_LOGGING_TYPE,
    DEFAULT_MAX_TIMEOUT,
    DEFAULT_MODE,
    DEFAULT_PORT,
    DEFAULT_REGISTRY_FILE,
    DEFAULT_SERVICES_FILE,
)
from network_diagnostics.config.diagnostics_context import DiagnosticsContext

MODES = ("serve", "sweep")


def get_context() -> DiagnosticsContext:
    """
    Parse command-line arguments and environment variables to create a configuration context.

    For each option, it first checks for a command-line argument, then falls back
    to an environment variable, and finally uses a default value.

    Returns:
        DiagnosticsContext: A configuration context object containing all parsed settings.
    """
    parser = argparse.ArgumentParser(
        description="Network diagnostics and reachability engine for the ops globe dashboard."
    )

    parser.add_argument(
        "-iid",
        "--instance-id",
        type=str,
        default=os.getenv(
            "NETWORK_DIAGNOSTICS_INSTANCE_ID", f"{DEFAULT_INSTANCE_ID_PREFIX}{uuid4()}"
        ),
        help="Specifies the identifier of this instance, added to every log record.\n"
        "If not provided, the value is read from the NETWORK_DIAGNOSTICS_INSTANCE_ID environment variable.\n"
        f"If that is also absent, the default value will be {DEFAULT_INSTANCE_ID_PREFIX}uuid4().",
    )

    parser.add_argument(
        "-m",
        "--mode",
        type=str,
        choices=MODES,
        default=os.getenv("NETWORK_DIAGNOSTICS_MODE", DEFAULT_MODE),
        help="'serve' runs the HTTP API, 'sweep' probes every registry node once and exits.\n"
        "If not provided, the value is read from the NETWORK_DIAGNOSTICS_MODE environment variable.\n"
        f"If that is also absent, a default value of {DEFAULT_MODE} is used.",
    )

    parser.add_argument(
        "-H",
        "--host",
        type=str,
        default=os.getenv("NETWORK_DIAGNOSTICS_HOST", DEFAULT_HOST),
        help="Specifies the interface the HTTP API binds to.\n"
        "If not provided, the value is read from the NETWORK_DIAGNOSTICS_HOST environment variable.\n"
        f"If that is also absent, a default value of {DEFAULT_HOST} is used.",
    )

    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=int(os.getenv("NETWORK_DIAGNOSTICS_PORT", DEFAULT_PORT)),
        help="Specifies the port the HTTP API listens on.\n"
        "If not provided, the value is read from the NETWORK_DIAGNOSTICS_PORT environment variable.\n"
        f"If that is also absent, a default value of {DEFAULT_PORT} is used.",
    )

    parser.add_argument(
        "-rf",
        "--registry-file",
        type=str,
        default=os.getenv("NETWORK_DIAGNOSTICS_REGISTRY_FILE", DEFAULT_REGISTRY_FILE),
        help="Path to the JSON node registry the reachability sweep reads from and writes to.\n"
        "If not provided, the value is read from the NETWORK_DIAGNOSTICS_REGISTRY_FILE environment variable.\n"
        f"If that is also absent, a default value of {DEFAULT_REGISTRY_FILE} is used.",
    )

    parser.add_argument(
        "-sf",
        "--services-file",
        type=str,
        default=os.getenv("NETWORK_DIAGNOSTICS_SERVICES_FILE", DEFAULT_SERVICES_FILE),
        help="Path to a JSON list of service endpoints for the HTTP status check.\n"
        "If not provided, the value is read from the NETWORK_DIAGNOSTICS_SERVICES_FILE environment variable.\n"
        "If that is also absent, the built-in service list is used.",
    )

    parser.add_argument(
        "-mt",
        "--max-timeout",
        type=int,
        default=int(os.getenv("NETWORK_DIAGNOSTICS_MAX_TIMEOUT", DEFAULT_MAX_TIMEOUT)),
        help="Specifies the maximum timeout duration in seconds for HTTP status checks.\n"
        "If not provided, the value is read from the NETWORK_DIAGNOSTICS_MAX_TIMEOUT environment variable.\n"
        f"If that is also absent, a default value of {DEFAULT_MAX_TIMEOUT} seconds is used.",
    )

    parser.add_argument(
        "-lt",
        "--logging-type",
        type=str,
        default=os.getenv("NETWORK_DIAGNOSTICS_LOGGING_TYPE", DEFAULT_LOGGING_TYPE),
        help="Specifies the logging configuration type to use.\n"
        "Allowed values: dev, prod, custom (case insensitive).\n"
        "For 'dev' and 'prod', system will use built-in configurations.\n"
        "For 'custom', the --logging-config-file argument is required.",
    )

    parser.add_argument(
        "-lcf",
        "--logging-config-file",
        type=str,
        default=os.getenv("NETWORK_DIAGNOSTICS_LOGGING_CONFIG_FILE", DEFAULT_LOGGING_CONFIG_FILE),
        help="Path to custom logging configuration file.\n"
        "Required when --logging-type is set to 'custom'.",
    )

    # Parse the command-line arguments
    args: Any = parser.parse_args()

    return DiagnosticsContext(
        instance_id=args.instance_id,
        mode=args.mode,
        host=args.host,
        port=args.port,
        registry_file=args.registry_file,
        services_file=args.services_file,
        max_timeout=args.max_timeout,
        logging_type=args.logging_type,
        logging_config_file=args.logging_config_file,
    )
