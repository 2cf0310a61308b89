"""
HTTP Reachability Module - One-shot data-fetch detector.

Issues a single GET against a configured URL through the context's shared
httpx client and reports whether it answered.
"""
import logging
import time
from typing import Any, Dict, Optional

import httpx

from probe_core.app_context import ProbeContext
from probe_core.interface import OneShotModule
from detectors.config import DetectorSettings, get_detector_settings

logger = logging.getLogger(__name__)


class HttpReachabilityModule(OneShotModule):
    """
    Reports reachability of one URL.

    Transport errors are part of the result (reachable=False), not exceptions.
    """

    def __init__(self, url: Optional[str] = None, settings: Optional[DetectorSettings] = None) -> None:
        self._settings = settings or get_detector_settings()
        self._url = url or self._settings.http_url

    def get_module_name(self) -> str:
        return "http_reachability"

    @property
    def url(self) -> Optional[str]:
        return self._url

    async def exec(self, context: ProbeContext) -> Dict[str, Any]:
        if not self._url:
            raise ValueError("HttpReachabilityModule requires a URL (set PROBE_HTTP_URL).")

        result: Dict[str, Any] = {"module": self.get_module_name(), "url": self._url}
        started = time.perf_counter()
        try:
            response = await context.http_client.get(
                self._url, timeout=self._settings.http_timeout_seconds
            )
        except httpx.HTTPError as e:
            logger.warning(f"Reachability check failed for {self._url}: {e}")
            result.update(reachable=False, error=type(e).__name__)
            return result

        result.update(
            reachable=response.status_code < 500,
            status_code=response.status_code,
            elapsed_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return result
