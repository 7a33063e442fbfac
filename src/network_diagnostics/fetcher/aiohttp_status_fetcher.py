"""
HTTP status fetcher implementation using the aiohttp library.

This module provides an implementation of the StatusFetcher interface that
checks the application-level health of a list of service endpoints with HEAD
requests, as opposed to the TCP-level reachability probe.
"""

import json
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List

import aiohttp

from network_diagnostics.config.constants import DEFAULT_SERVICES
from network_diagnostics.contracts import StatusFetcher
from network_diagnostics.domain import ServiceEndpoint, ServiceStatus

# Module logger
logger = logging.getLogger(__name__)

STATUS_ONLINE = "online"
STATUS_ERROR = "error"


def load_service_endpoints(services_file: str = "") -> List[ServiceEndpoint]:
    """
    Loads the endpoints checked by the status fetcher.

    Args:
        services_file: Path to a JSON list of {id, name, url, region} objects.
            When empty, the built-in list is returned.

    Returns:
        List[ServiceEndpoint]: The configured endpoints.

    Raises:
        RuntimeError: If the file cannot be read or does not describe endpoints.
    """
    if not services_file:
        return _to_endpoints(DEFAULT_SERVICES)

    try:
        with open(services_file, encoding="utf-8") as f:
            raw: Any = json.load(f)
        return _to_endpoints(raw)
    except FileNotFoundError as err:
        raise RuntimeError(f"Services file not found: {services_file}") from err
    except json.JSONDecodeError as err:
        raise RuntimeError(f"Invalid JSON format in services file: {services_file}") from err
    except (KeyError, TypeError) as err:
        raise RuntimeError(f"Invalid service definition in {services_file}: {err}") from err


def _to_endpoints(raw: Iterable[Dict[str, Any]]) -> List[ServiceEndpoint]:
    return [
        ServiceEndpoint(
            id=str(item["id"]),
            name=str(item["name"]),
            url=str(item["url"]),
            region=str(item.get("region", "")),
        )
        for item in raw
    ]


class AiohttpStatusFetcher(StatusFetcher):
    """
    A concrete implementation of StatusFetcher using the aiohttp library.

    It uses a shared aiohttp ClientSession. A response with a status below
    400 counts as online; any other response is reported as an error with its
    latency, and a request that fails altogether as an unreachable error.
    """

    def __init__(self, session: aiohttp.ClientSession, max_timeout: float) -> None:
        """
        Initializes the fetcher with a shared aiohttp ClientSession.

        Args:
            session: An active aiohttp.ClientSession to be used for requests.
            max_timeout: Upper bound in seconds for each request.
        """
        self._session: aiohttp.ClientSession = session
        self._max_timeout: float = max_timeout

    async def fetch(self, endpoint: ServiceEndpoint) -> ServiceStatus:
        """
        Sends a HEAD request to the endpoint and measures the round trip.

        Args:
            endpoint: The endpoint to check.

        Returns:
            ServiceStatus: The outcome of the check. Errors are reported, not raised.
        """
        logger.debug(f"Starting status check for endpoint: {endpoint.url}")
        start_time: float = time.perf_counter()

        try:
            async with self._session.head(
                endpoint.url,
                timeout=aiohttp.ClientTimeout(total=self._max_timeout),
                headers={"Cache-Control": "no-store"},
            ) as response:
                latency_ms = int(round((time.perf_counter() - start_time) * 1000))
                status = STATUS_ONLINE if response.ok else STATUS_ERROR
                http_status = response.status
        except Exception as e:
            logger.info(f"Status check of {endpoint.url} failed: {e!r}")
            return ServiceStatus(
                id=endpoint.id,
                name=endpoint.name,
                region=endpoint.region,
                status=STATUS_ERROR,
                latency_ms=0,
                checked_at=None,
                error="Unreachable",
            )

        logger.debug(f"Status check of {endpoint.url}: HTTP {http_status} in {latency_ms}ms")
        return ServiceStatus(
            id=endpoint.id,
            name=endpoint.name,
            region=endpoint.region,
            status=status,
            latency_ms=latency_ms,
            checked_at=datetime.now(timezone.utc),
            error=None,
        )
