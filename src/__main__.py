"""
Main entry point for the network diagnostics engine.

In 'serve' mode this module exposes the engine over HTTP until the process is
stopped. In 'sweep' mode it probes every node of the registry once, writes the
statuses back into the registry and exits.
"""

import asyncio
import logging
from typing import List

import aiohttp
from aiohttp import web

from network_diagnostics.config import DiagnosticsContext, get_context
from network_diagnostics.config.http_config import get_http_session
from network_diagnostics.config.logging_config import configure_logging
from network_diagnostics.coordinator import ReachabilityCoordinator
from network_diagnostics.dispatcher import DiagnosticsDispatcher
from network_diagnostics.domain import ProbeResult, ProbeStatus, ServiceEndpoint
from network_diagnostics.fetcher.aiohttp_status_fetcher import (
    AiohttpStatusFetcher,
    load_service_endpoints,
)
from network_diagnostics.prober.tcp_prober import TcpReachabilityProber
from network_diagnostics.registry.json_registry import JsonTargetRegistry
from network_diagnostics.web import create_app


async def sweep(context: DiagnosticsContext) -> List[ProbeResult]:
    """
    Probes every registry node once and stores the results in the registry.

    Args:
        context: Configuration context containing all application settings.

    Returns:
        List[ProbeResult]: The results, in registry order.
    """
    logger: logging.Logger = logging.getLogger(__name__)
    registry = JsonTargetRegistry(context.registry_file)
    coordinator = ReachabilityCoordinator(TcpReachabilityProber())

    targets = await registry.load()
    logger.info(f"Sweeping {len(targets)} registry targets from {registry.path}")
    results = await coordinator.probe_all(targets)
    await registry.store(results)

    for result in results:
        if result.status is ProbeStatus.ONLINE:
            logger.info(f"{result.target_id}: online ({result.latency_ms}ms)")
        else:
            logger.info(f"{result.target_id}: offline ({result.error})")
    return results


async def serve(context: DiagnosticsContext) -> None:
    """
    Runs the HTTP API until the task is cancelled.

    Args:
        context: Configuration context containing all application settings.
    """
    logger: logging.Logger = logging.getLogger(__name__)
    logger.info("Starting application...")

    # Fails fast on an invalid services file, before anything is opened
    endpoints: List[ServiceEndpoint] = load_service_endpoints(context.services_file)
    logger.info(f"configured: {len(endpoints)} service endpoints")

    http_session: aiohttp.ClientSession = get_http_session(context)
    logger.info("configured: http_session")

    app = create_app(
        dispatcher=DiagnosticsDispatcher(),
        coordinator=ReachabilityCoordinator(TcpReachabilityProber()),
        registry=JsonTargetRegistry(context.registry_file),
        status_fetcher=AiohttpStatusFetcher(session=http_session, max_timeout=context.max_timeout),
        endpoints=endpoints,
    )
    runner = web.AppRunner(app)

    try:
        await runner.setup()
        site = web.TCPSite(runner, host=context.host, port=context.port)
        await site.start()
        logger.info(f"Listening on http://{context.host}:{context.port}")
        await asyncio.Event().wait()

    except asyncio.CancelledError:
        logger.info("Application shutdown requested.")
    finally:
        # Ensure all resources are properly closed during shutdown
        logger.info("Shutting down resources...")
        await runner.cleanup()
        await http_session.close()
        logger.info("Shutdown complete.")


async def main(context: DiagnosticsContext) -> None:
    if context.mode == "sweep":
        await sweep(context)
    else:
        await serve(context)


if __name__ == "__main__":
    try:
        # Parse command-line arguments and environment variables
        diagnostics_context: DiagnosticsContext = get_context()

        # Configure logging based on the context
        configure_logging(diagnostics_context)

        # Run the main application
        asyncio.run(main(diagnostics_context))
    except KeyboardInterrupt:
        logging.info("Shutdown initiated by user (Ctrl+C).")
