"""
Fan-out coordinator for reachability probes.

This module runs one reachability probe per target concurrently and collects
every result before returning. Batches are small (tens of targets), so all
probes are launched at once: there is no worker pool and no backpressure.
"""

import asyncio
import logging
from typing import Iterable, List, Union

from .contracts import ReachabilityProber
from .domain import FailureReason, ProbeResult, ProbeStatus, Target

TargetLike = Union[Target, str]


class ReachabilityCoordinator:
    """
    Probes a batch of targets concurrently with bulkhead isolation.

    The result list has one entry per target, in input order, whatever the
    order in which the probes complete. A probe that raises is turned into an
    offline result for its own target and never affects its siblings. Each
    probe is bounded by its own timeout, so the batch completes within that
    bound too.
    """

    def __init__(self, prober: ReachabilityProber) -> None:
        """
        Initializes the coordinator.

        Args:
            prober: Component that probes a single target.
        """
        self._prober: ReachabilityProber = prober
        self._logger: logging.Logger = logging.getLogger(__name__)

    async def _probe_one(self, target: Target) -> ProbeResult:
        """
        Runs one probe, converting any exception into an offline result.

        Cancellation is not caught: abandoning the batch cancels every pending
        probe, and each of them closes its own socket.
        """
        try:
            return await self._prober.probe(target)
        except Exception as e:
            self._logger.exception(f"Probe failed for target {target.target_id} with error: {e}")
            return ProbeResult(
                target_id=target.target_id,
                status=ProbeStatus.OFFLINE,
                error=FailureReason.UNREACHABLE.value,
            )

    async def probe_all(self, targets: Iterable[TargetLike]) -> List[ProbeResult]:
        """
        Probes every target concurrently.

        Args:
            targets: Targets, or bare host strings, in the order results are wanted.

        Returns:
            List[ProbeResult]: result[i] is the outcome for targets[i].
        """
        batch = [_as_target(target) for target in targets]
        if not batch:
            return []

        self._logger.debug(f"Probing {len(batch)} targets.")
        results = await asyncio.gather(*(self._probe_one(target) for target in batch))

        online = sum(1 for result in results if result.status is ProbeStatus.ONLINE)
        self._logger.info(f"Reachability batch complete: {online}/{len(results)} online.")
        return list(results)


def _as_target(target: TargetLike) -> Target:
    if isinstance(target, Target):
        return target
    return Target(host=str(target))
