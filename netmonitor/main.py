"""Composition root for the netmonitor system.

This module is the ONLY location that imports both core domain logic
and concrete adapter implementations. All wiring of dependencies
happens here, creating a clear entry point for the application.

Module Structure:
- Configuration loading via config module
- Startup target resolution (external address, gateway)
- Adapter instantiation
- Core service initialization
- Entry point selection (daemon or single shot)
"""

import asyncio
import logging
import sys

from netmonitor.adapters.notification.logfile import LogFileIncidentSink
from netmonitor.adapters.notification.stdout import StdoutIncidentSink
from netmonitor.adapters.resolver.dns import DnsResolver
from netmonitor.adapters.routing.gateway import SystemRouteGatewayLookup
from netmonitor.adapters.scheduler.daemon import DaemonScheduler
from netmonitor.adapters.transport.ping3_transport import Ping3Transport
from netmonitor.adapters.transport.system_ping import SystemPingTransport
from netmonitor.config import Settings, load_settings
from netmonitor.core.classifier import IncidentClassifier
from netmonitor.core.errors import StartupError
from netmonitor.core.evaluator import DiagnosticsService
from netmonitor.core.models import MonitorTargets
from netmonitor.core.ports import EchoTransportPort, GatewayPort, ResolverPort
from netmonitor.core.probe import ProbeExecutor
from netmonitor.core.sample_queue import SampleQueue
from netmonitor.core.sampler import SamplingService


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.INFO)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )


async def locate_targets(
    resolver: ResolverPort,
    gateway_lookup: GatewayPort,
    external_host: str,
) -> MonitorTargets:
    """Resolve the external host and find the gateway used to reach it.

    Raises:
        StartupError: If the host does not resolve, resolves to nothing,
            or has no gateway. The monitor cannot start in any of these
            cases.
    """
    unresolved = f"Could not resolve {external_host}. Check your Internet connection."

    try:
        addresses = await resolver.resolve(external_host)
    except StartupError as e:
        raise StartupError(unresolved) from e

    if not addresses:
        raise StartupError(unresolved)

    external_address = addresses[0]
    gateway = await gateway_lookup.gateway_for(external_address)
    if gateway is None:
        raise StartupError(
            f"Could not find gateway for {external_host}. "
            "Double-check your Internet connection."
        )

    return MonitorTargets(
        external_host=external_host,
        external_address=external_address,
        gateway_address=gateway,
    )


def build_echo_transport(settings: Settings) -> EchoTransportPort:
    """Instantiate the echo transport selected by configuration."""
    if settings.echo_backend == "ping3":
        return Ping3Transport(dont_fragment=settings.dont_fragment)
    return SystemPingTransport(ping_binary=settings.ping_binary)


async def bootstrap(settings: Settings | None = None) -> None:
    """Load configuration, wire adapters, and start the application.

    This is the composition root: the single place where all components
    are instantiated and wired together.

    Steps:
    1. Load configuration from environment
    2. Configure logging
    3. Resolve probe targets (fatal on failure)
    4. Instantiate adapters and core services
    5. Select and start run mode

    Raises:
        SystemExit: On startup faults (no target, no gateway)
        MonitorError: If the sampling loop fails
    """
    # Step 1: Load configuration
    settings = settings or load_settings()
    config = settings.to_monitor_config()

    # Step 2: Configure logging
    configure_logging(settings.log_level, settings.log_format)
    logger = logging.getLogger(__name__)
    logger.info("Loading netmonitor...")

    # Step 3: Resolve targets before anything else is created
    try:
        targets = await locate_targets(
            DnsResolver(), SystemRouteGatewayLookup(), config.external_host
        )
    except StartupError as e:
        # Always reaches the operator, whatever the configured log level
        print(str(e), flush=True)
        logger.critical(f"Startup failed: {e}")
        sys.exit(1)

    logger.info(
        f"Monitoring {targets.external_host} ({targets.external_address}) "
        f"via gateway {targets.gateway_address}"
    )

    # Step 4: Instantiate adapters and core services
    transport = build_echo_transport(settings)
    logger.info(f"Echo transport: {settings.echo_backend}")

    queue = SampleQueue()
    executor = ProbeExecutor(
        transport=transport,
        timeout_ms=config.probe_timeout_ms,
        payload=config.payload,
        dont_fragment=config.dont_fragment,
    )
    sampling_service = SamplingService(
        executor=executor,
        targets=targets,
        queue=queue,
    )
    diagnostics_service = DiagnosticsService(
        queue=queue,
        classifier=IncidentClassifier(
            external_host=config.external_host,
            latency_threshold_ms=config.latency_threshold_ms,
        ),
        sinks=[LogFileIncidentSink(settings.output_path), StdoutIncidentSink()],
    )

    scheduler = DaemonScheduler(
        sampling_port=sampling_service,
        evaluation_port=diagnostics_service,
        sampling_interval_seconds=config.sampling_interval_seconds,
        evaluation_interval_seconds=config.evaluation_interval_seconds,
    )

    # Step 5: Select run mode and start
    logger.info(f"Starting in {settings.run_mode} mode...")
    if settings.run_mode == "once":
        await scheduler.run_once()
    else:
        await scheduler.start()


def main() -> None:
    """Application entry point.

    Exit codes:
        0: Successful shutdown
        1: Startup fault or fatal runtime error
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    logger = logging.getLogger(__name__)
    try:
        asyncio.run(bootstrap())
    except KeyboardInterrupt:
        logger.warning("Shutdown requested by user (SIGINT)")
        sys.exit(130)
    except asyncio.CancelledError:
        logger.info("Graceful shutdown completed")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
