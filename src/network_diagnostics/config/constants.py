"""
Constants for the network diagnostics engine.

This module defines default values for all configurable parameters of the
application, together with the fixed ports and timeouts of the individual
checks. Configurable defaults are used when neither command-line arguments
nor environment variables are provided.
"""

# Instance configuration defaults
DEFAULT_INSTANCE_ID_PREFIX = "network-diagnostics-"
DEFAULT_MODE = "serve"

# HTTP server defaults
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080

# Node registry and service list defaults
DEFAULT_REGISTRY_FILE = "utils/nodes.json"
DEFAULT_SERVICES_FILE = ""

# Upper bound in seconds for HTTP status checks
DEFAULT_MAX_TIMEOUT = 5

# Logging configuration defaults
DEFAULT_LOGGING_TYPE = "prod"
DEFAULT_LOGGING_CONFIG_FILE = ""

# Reachability probe
REACHABILITY_PORT = 80
REACHABILITY_TIMEOUT_MS = 1500

# Diagnostics
PING_PORTS = (80, 443)
PING_TIMEOUT_MS = 2000
PORT_CHECK_DEFAULT_PORT = 80
PORT_CHECK_TIMEOUT_MS = 2000
SSL_PORT = 443
SSL_TIMEOUT_MS = 3000
DNS_TIMEOUT_MS = 5000

# Built-in service endpoints for the HTTP status check
DEFAULT_SERVICES = (
    {"id": "mad", "name": "Madrid Core", "url": "https://google.es", "region": "EU-South"},
    {"id": "nyc", "name": "US East Gateway", "url": "https://github.com", "region": "US-East"},
    {"id": "tok", "name": "Asia Edge", "url": "https://www.sony.co.jp", "region": "AP-North"},
    {"id": "lon", "name": "London Auth", "url": "https://bbc.co.uk", "region": "EU-West"},
)
