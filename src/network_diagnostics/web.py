"""
HTTP interface of the network diagnostics engine.

Exposes the engine to the dashboard with aiohttp.web:

- POST /diagnostics   {kind, target, port?} -> {result}
- GET  /reachability  ?targets=[...]        -> [ProbeResult, ...]
- GET  /status                              -> {timestamp, nodes: [ServiceStatus, ...]}

Network failures are always reported inside a 200 response. Only a request
without a target or with an unknown kind is rejected with 400, and a body
that is not a JSON object with 500.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

from aiohttp import web

from network_diagnostics.contracts import StatusFetcher
from network_diagnostics.coordinator import ReachabilityCoordinator
from network_diagnostics.dispatcher import DiagnosticsDispatcher
from network_diagnostics.domain import ServiceEndpoint, Target
from network_diagnostics.registry.json_registry import JsonTargetRegistry

# Module logger
logger = logging.getLogger(__name__)

DISPATCHER_KEY = web.AppKey("dispatcher", DiagnosticsDispatcher)
COORDINATOR_KEY = web.AppKey("coordinator", ReachabilityCoordinator)
REGISTRY_KEY = web.AppKey("registry", JsonTargetRegistry)
STATUS_FETCHER_KEY = web.AppKey("status_fetcher", StatusFetcher)
ENDPOINTS_KEY = web.AppKey("endpoints", list)


def parse_targets(raw: str) -> List[Target]:
    """
    Parses the 'targets' query parameter.

    Accepts a JSON array whose items are host strings or {host|ip, port?, id?}
    objects, or a plain comma-separated host list. Unusable items are skipped
    and an unreadable JSON array yields an empty list.
    """
    try:
        parsed: Any = json.loads(raw)
    except ValueError:
        if raw.lstrip().startswith(("[", "{")):
            logger.info(f"Unreadable targets parameter: {raw!r}")
            return []
        parsed = raw.split(",")

    if isinstance(parsed, (str, dict)):
        parsed = [parsed]
    elif not isinstance(parsed, list):
        return []

    targets = []
    for item in parsed:
        target = _to_target(item)
        if target is not None:
            targets.append(target)
    return targets


def _to_target(item: Any) -> Optional[Target]:
    if isinstance(item, str):
        host = item.strip()
        return Target(host=host) if host else None
    if isinstance(item, dict):
        host = str(item.get("host") or item.get("ip") or "").strip()
        if not host:
            return None
        port = item.get("port")
        node_id = item.get("id")
        return Target(
            host=host,
            port=port if isinstance(port, int) else None,
            id=str(node_id) if node_id is not None else None,
        )
    return None


async def handle_diagnostics(request: web.Request) -> web.Response:
    """Runs one ad-hoc diagnostic and returns its description."""
    try:
        body: Any = await request.json()
    except ValueError as e:
        logger.warning(f"Malformed diagnostics request body: {e}")
        return web.json_response({"error": "Internal Server Error"}, status=500)
    if not isinstance(body, dict):
        logger.warning("Diagnostics request body is not a JSON object.")
        return web.json_response({"error": "Internal Server Error"}, status=500)

    target = body.get("target")
    if target is None or not str(target).strip():
        return web.json_response({"error": "Target is required"}, status=400)

    dispatcher = request.app[DISPATCHER_KEY]
    kind = body.get("kind", body.get("type"))
    if not dispatcher.supports(kind):
        return web.json_response({"error": "Invalid tool type"}, status=400)

    result = await dispatcher.run(kind, str(target).strip(), body.get("port"))
    return web.json_response(result._asdict())


async def handle_reachability(request: web.Request) -> web.Response:
    """
    Probes the requested targets, or every registry node when none are given.

    Registry sweeps write the resulting statuses back into the registry.
    """
    coordinator = request.app[COORDINATOR_KEY]
    raw_targets = request.query.get("targets")

    try:
        if raw_targets is None:
            registry = request.app[REGISTRY_KEY]
            results = await coordinator.probe_all(await registry.load())
            await registry.store(results)
        else:
            results = await coordinator.probe_all(parse_targets(raw_targets))
    except Exception:
        logger.exception("Reachability sweep failed.")
        results = []

    return web.json_response([result.to_dict() for result in results])


async def handle_status(request: web.Request) -> web.Response:
    """Checks the HTTP health of the configured service endpoints."""
    fetcher = request.app[STATUS_FETCHER_KEY]
    endpoints: List[ServiceEndpoint] = request.app[ENDPOINTS_KEY]
    statuses = await fetcher.fetch_all(endpoints)
    return web.json_response(
        {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "nodes": [status.to_dict() for status in statuses],
        }
    )


def create_app(
    dispatcher: DiagnosticsDispatcher,
    coordinator: ReachabilityCoordinator,
    registry: JsonTargetRegistry,
    status_fetcher: StatusFetcher,
    endpoints: List[ServiceEndpoint],
) -> web.Application:
    """
    Builds the aiohttp application.

    Returns:
        web.Application: The application with all routes registered.
    """
    app = web.Application()
    app[DISPATCHER_KEY] = dispatcher
    app[COORDINATOR_KEY] = coordinator
    app[REGISTRY_KEY] = registry
    app[STATUS_FETCHER_KEY] = status_fetcher
    app[ENDPOINTS_KEY] = list(endpoints)
    app.add_routes(
        [
            web.post("/diagnostics", handle_diagnostics),
            web.get("/reachability", handle_reachability),
            web.get("/status", handle_status),
        ]
    )
    return app
