"""Probe core - Scheduling kernel for detection modules."""
from probe_core.app_context import ConfigLoader, PlatformInfo, ProbeContext
from probe_core.exceptions import (
    InvalidDelayError,
    ModuleContractError,
    ProbeQueueError,
    QueueStateError,
    UnknownDetectorError,
)
from probe_core.http_client import HttpClientManager, create_http_client_context
from probe_core.interface import (
    ContinuousModule,
    IDetectionModule,
    ModuleKind,
    OneShotModule,
    ReadinessCallback,
    Result,
    is_detection_module,
)
from probe_core.logging_config import setup_logging
from probe_core.queue import ProbeQueue, QueueState, ScheduledEntry
from probe_core.registry import DetectorRegistry
from probe_core.signals import SignalHub

__all__ = [
    # Context & configuration
    "ConfigLoader", "PlatformInfo", "ProbeContext", "SignalHub",
    "HttpClientManager", "create_http_client_context",
    # Module contract
    "ContinuousModule", "IDetectionModule", "ModuleKind", "OneShotModule",
    "ReadinessCallback", "Result", "is_detection_module",
    # Scheduling
    "ProbeQueue", "QueueState", "ScheduledEntry", "DetectorRegistry",
    # Errors
    "ProbeQueueError", "ModuleContractError", "InvalidDelayError",
    "QueueStateError", "UnknownDetectorError",
    "setup_logging",
]
