"""
Probe Queue - Entry Point.

Builds one shared ProbeContext, creates an independent ProbeQueue per
logical concern, registers detectors with their delays and starts every
queue. Queues share nothing but the context.

Usage:
    python main.py

Queue layout can be overridden with QUEUE_PLAN, e.g.:
    QUEUE_PLAN="events:copy_paste@2;data:fonts@1;data:http_reachability@0.5"
"""

import asyncio
import logging
import signal
from typing import Any, Dict, List, Mapping, NamedTuple, Optional

import httpx

from probe_core.app_context import ConfigLoader, ProbeContext
from probe_core.http_client import create_http_client_context
from probe_core.interface import ReadinessCallback
from probe_core.logging_config import setup_logging
from probe_core.queue import ProbeQueue
from probe_core.registry import DetectorRegistry
from detectors import register_builtin_detectors
from detectors.config import DetectorSettings, get_detector_settings

logger = logging.getLogger(__name__)


class PlanEntry(NamedTuple):
    queue: str
    detector: str
    delay: float


# -----------------------------------------------------------------------------
# Queue Plan
# -----------------------------------------------------------------------------


def parse_queue_plan(text: str) -> List[PlanEntry]:
    """
    Parse a plan string of the form ``queue:detector@delay;...``.

    The ``@delay`` part is optional and defaults to 0 seconds.

    Raises:
        ValueError: If an item is malformed or has a non-numeric delay
    """
    plan: List[PlanEntry] = []
    for item in text.split(";"):
        item = item.strip()
        if not item:
            continue
        queue_name, sep, rest = item.partition(":")
        detector, _, delay_text = rest.partition("@")
        if not sep or not queue_name.strip() or not detector.strip():
            raise ValueError(f"Malformed queue plan item '{item}', expected queue:detector@delay")
        try:
            delay = float(delay_text) if delay_text.strip() else 0.0
        except ValueError:
            raise ValueError(f"Invalid delay '{delay_text}' in queue plan item '{item}'") from None
        plan.append(PlanEntry(queue_name.strip(), detector.strip(), delay))
    return plan


def default_queue_plan(config: ConfigLoader, settings: DetectorSettings) -> List[PlanEntry]:
    """Event-driven detections in one queue, data-fetch detections in another."""
    configured = config.get("queue.plan", "")
    if configured:
        return parse_queue_plan(configured)

    plan = [
        PlanEntry("events", "copy_paste", config.get("queue.events_delay", 2.0)),
        PlanEntry("data", "fonts", config.get("queue.data_delay", 1.0)),
    ]
    if settings.http_url:
        plan.append(PlanEntry("data", "http_reachability", 0.0))
    return plan


# -----------------------------------------------------------------------------
# Factories
# -----------------------------------------------------------------------------


def default_readiness_callback(params: Optional[Mapping[str, Any]] = None) -> None:
    """Log every result delivered by any queue."""
    logger.info(f"Params were fetched from module: {dict(params or {})}")


def create_detector_registry() -> DetectorRegistry:
    """Create a registry holding the bundled detectors."""
    return register_builtin_detectors(DetectorRegistry())


def create_probe_context(
    config: Optional[ConfigLoader] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> ProbeContext:
    """Create the shared ProbeContext."""
    return ProbeContext(config=config, http_client=http_client)


def build_queues(
    context: ProbeContext,
    callback: ReadinessCallback,
    plan: List[PlanEntry],
    registry: DetectorRegistry,
) -> Dict[str, ProbeQueue]:
    """
    Create one ProbeQueue per queue name in ``plan`` and populate it.

    Queues are returned in order of first appearance in the plan.
    """
    queues: Dict[str, ProbeQueue] = {}
    for entry in plan:
        queue = queues.get(entry.queue)
        if queue is None:
            queue = ProbeQueue(entry.queue, context, callback)
            queues[entry.queue] = queue
        queue.add(registry.create(entry.detector), entry.delay)
        context.log_event(f"Queue '{entry.queue}': {entry.detector} after {entry.delay}s")
    return queues


# -----------------------------------------------------------------------------
# Runtime
# -----------------------------------------------------------------------------


async def wait_for_shutdown(duration: Optional[float] = None) -> None:
    """
    Wait until SIGINT/SIGTERM or, if given, ``duration`` seconds elapse.
    """
    loop = asyncio.get_running_loop()
    stop_event = asyncio.Event()
    installed = []

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
            installed.append(sig)
        except (NotImplementedError, RuntimeError):
            # Not supported on this platform/thread; rely on the timeout.
            logger.debug(f"Signal handler for {sig.name} not installed")

    try:
        await asyncio.wait_for(stop_event.wait(), timeout=duration or None)
    except asyncio.TimeoutError:
        logger.info(f"Run duration of {duration}s elapsed")
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)


async def run(
    duration: Optional[float] = None,
    callback: ReadinessCallback = default_readiness_callback,
    config: Optional[ConfigLoader] = None,
    registry: Optional[DetectorRegistry] = None,
    plan: Optional[List[PlanEntry]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, ProbeQueue]:
    """
    Start every queue, wait, then stop them and let in-flight probes finish.

    Returns:
        The queues that were run, already stopped
    """
    if config is None:
        config = ConfigLoader()
        config.load()
    registry = registry or create_detector_registry()
    plan = plan if plan is not None else default_queue_plan(config, get_detector_settings())

    async with create_http_client_context(
        timeout=config.get("http.timeout", 10.0),
        max_connections=config.get("http.max_connections", 10),
        transport=transport,
    ) as http_manager:
        context = create_probe_context(config, http_manager.client)
        queues = build_queues(context, callback, plan, registry)

        for queue in queues.values():
            queue.start()
        context.log_event(f"Started {len(queues)} queue(s): {', '.join(queues)}")

        try:
            await wait_for_shutdown(duration)
        finally:
            for queue in queues.values():
                queue.stop()
            await asyncio.gather(*(queue.wait_idle() for queue in queues.values()))
            context.log_event("All queues stopped")

    return queues


# -----------------------------------------------------------------------------
# Direct Execution
# -----------------------------------------------------------------------------


def main() -> None:
    """Run the probe queues until interrupted or APP_RUN_SECONDS elapse."""
    config = ConfigLoader()
    config.load()

    log_level = getattr(logging, str(config.get("app.log_level", "INFO")).upper(), logging.INFO)
    setup_logging(log_level, config.get("app.log_dir") or None)

    asyncio.run(run(config.get("app.run_seconds", 0.0), config=config))


if __name__ == "__main__":
    main()
