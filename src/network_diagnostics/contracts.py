"""
Core interfaces for the network diagnostics engine.

This module defines the abstract base classes that form the foundation of the
engine's architecture. Concrete probes and checks implement them, which keeps
the coordinator, the dispatcher and the HTTP layer independent of how a
particular check talks to the network.
"""

import abc
import asyncio
from typing import List, Optional

from .domain import DiagnosticResult, ProbeResult, ServiceEndpoint, ServiceStatus, Target


class ReachabilityProber(abc.ABC):
    """
    Abstract interface for a component that decides whether one target is up.

    Its responsibility is to encapsulate the network I/O for a given Target
    and return a structured result.
    """

    @abc.abstractmethod
    async def probe(self, target: Target) -> ProbeResult:
        """
        Determines the online/offline status of a single target.

        Args:
            target: The Target to probe.

        Returns:
            ProbeResult: The status of the target, with latency when online
                and a failure reason when offline.

        Raises:
            Exception: Implementations should handle network errors internally
                and report them in the ProbeResult rather than raising them.
        """
        pass


class DiagnosticCheck(abc.ABC):
    """
    Abstract interface for one kind of ad-hoc diagnostic.

    Every implementation makes its own network attempt(s) under its own
    timeout and reports the outcome as a descriptive string.
    """

    @abc.abstractmethod
    async def run(self, target: str, port: Optional[int] = None) -> DiagnosticResult:
        """
        Runs the check against the given target.

        Args:
            target: Host name or IP address to check.
            port: Optional port, ignored by checks that use fixed ports.

        Returns:
            DiagnosticResult: A description of the outcome. Failures are
                described, never raised.
        """
        pass


class StatusFetcher(abc.ABC):
    """
    Abstract interface for a component that checks application-level health of
    service endpoints.
    """

    @abc.abstractmethod
    async def fetch(self, endpoint: ServiceEndpoint) -> ServiceStatus:
        """
        Checks a single endpoint.

        Args:
            endpoint: The endpoint to check.

        Returns:
            ServiceStatus: The outcome of the check.
        """
        pass

    async def fetch_all(self, endpoints: List[ServiceEndpoint]) -> List[ServiceStatus]:
        """
        Checks every endpoint concurrently and returns results in input order.

        Args:
            endpoints: The endpoints to check.

        Returns:
            List[ServiceStatus]: One status per endpoint.
        """
        return list(await asyncio.gather(*(self.fetch(endpoint) for endpoint in endpoints)))
