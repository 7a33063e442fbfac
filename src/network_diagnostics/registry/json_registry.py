"""
JSON file based node registry.

The dashboard keeps its user-added nodes in a flat JSON list such as:

    [{"id": "1718000000000", "name": "edge-1", "ip": "203.0.113.7",
      "lat": 40.4, "lng": -3.7, "region": "EU-South", "status": "PENDING"}]

This module reads probe targets from that list and writes reachability
results back into it. Unreadable files degrade to an empty target list: the
reachability sweep must never fail because of the registry.
"""

import asyncio
import json
import logging
import os
import tempfile
from typing import Any, Dict, List, Optional, Sequence

from network_diagnostics.domain import ProbeResult, Target

# Module logger
logger = logging.getLogger(__name__)


def _node_key(node: Dict[str, Any]) -> str:
    """The key a node's probe result is reported under: its id, else its ip."""
    node_id = node.get("id")
    if node_id is not None and str(node_id):
        return str(node_id)
    return str(node.get("ip") or "").strip()


class JsonTargetRegistry:
    """Reads targets from, and stores probe results into, a JSON node list."""

    def __init__(self, path: str) -> None:
        """
        Initializes the registry.

        Args:
            path: Location of the JSON node list. Created empty if missing.
        """
        self._path: str = path
        # Serializes every read-modify-write of the file within this process.
        self._lock: asyncio.Lock = asyncio.Lock()

    @property
    def path(self) -> str:
        return self._path

    async def load(self) -> List[Target]:
        """
        Returns one Target per node, in registry order.

        A node without an 'ip' still yields a Target, with an empty host, so
        that the sweep reports it offline instead of leaving its last status.

        Returns:
            List[Target]: The targets; empty if the file is missing,
                unreadable or not a JSON list.
        """
        async with self._lock:
            nodes = await asyncio.to_thread(self._read_nodes) or []
        targets = []
        for node in nodes:
            host = str(node.get("ip") or "").strip()
            node_id = node.get("id")
            targets.append(Target(host=host, id=str(node_id) if node_id is not None else None))
        logger.debug(f"Loaded {len(targets)} targets from {self._path}")
        return targets

    async def store(self, results: Sequence[ProbeResult]) -> None:
        """
        Writes status and latency of each result onto the matching node.

        Nodes are matched by id, falling back to ip for nodes without one.
        All other node fields are preserved. Failures are logged, not raised.

        Args:
            results: Probe results, typically produced from load()'s targets.
        """
        async with self._lock:
            await asyncio.to_thread(self._write_results, list(results))

    def _read_nodes(self) -> Optional[List[Dict[str, Any]]]:
        """Returns the registry nodes, or None if the file cannot be used."""
        try:
            if not os.path.exists(self._path):
                self._write_nodes([])
                return []
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Error reading node registry {self._path}: {e}")
            return None

        if not isinstance(data, list):
            logger.error(f"Node registry {self._path} does not contain a JSON list.")
            return None
        return [node for node in data if isinstance(node, dict)]

    def _write_results(self, results: List[ProbeResult]) -> None:
        by_key = {result.target_id: result for result in results}
        nodes = self._read_nodes()
        if nodes is None:
            logger.warning(f"Not storing probe results: {self._path} is unreadable.")
            return
        for node in nodes:
            result = by_key.get(_node_key(node))
            if result is None:
                continue
            node["status"] = result.status.value.upper()
            node["latency_ms"] = result.latency_ms

        try:
            self._write_nodes(nodes)
            logger.info(f"Stored {len(results)} probe results in {self._path}")
        except OSError as e:
            logger.error(f"Error writing node registry {self._path}: {e}")

    def _write_nodes(self, nodes: List[Dict[str, Any]]) -> None:
        directory = os.path.dirname(os.path.abspath(self._path))
        os.makedirs(directory, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            dir=directory,
            prefix=f"{os.path.basename(self._path)}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_path = f.name
            json.dump(nodes, f, indent=2)
        try:
            os.replace(tmp_path, self._path)
        except OSError:
            os.unlink(tmp_path)
            raise
