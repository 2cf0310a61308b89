"""Bundled detection modules."""
from probe_core.registry import DetectorRegistry
from detectors.config import DetectorSettings, get_detector_settings
from detectors.copy_paste_module import CopyPasteEventModule
from detectors.fonts_module import FontsDetectionModule
from detectors.http_module import HttpReachabilityModule

BUILTIN_DETECTORS = {
    "copy_paste": CopyPasteEventModule,
    "fonts": FontsDetectionModule,
    "http_reachability": HttpReachabilityModule,
}


def register_builtin_detectors(registry: DetectorRegistry) -> DetectorRegistry:
    """Register every bundled detector under its module name."""
    for name, cls in BUILTIN_DETECTORS.items():
        registry.register(name, cls)
    return registry


__all__ = [
    "BUILTIN_DETECTORS", "register_builtin_detectors",
    "CopyPasteEventModule", "FontsDetectionModule", "HttpReachabilityModule",
    "DetectorSettings", "get_detector_settings",
]
