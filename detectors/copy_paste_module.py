"""
Copy/Paste Module - Continuous detector for clipboard activity.

Listens to 'copy' and 'paste' signals on the context's SignalHub and reports
each occurrence through the readiness callback.
"""
from typing import Any, Callable, Dict, List, Optional

from probe_core.app_context import ProbeContext
from probe_core.interface import ContinuousModule, ReadinessCallback
from detectors.config import DetectorSettings, get_detector_settings


class CopyPasteEventModule(ContinuousModule):
    """
    Reports clipboard copy/paste events.

    Each report looks like:
        {"module": "copy_paste", "event": "paste", "payload": <signal payload>}
    """

    def __init__(self, settings: Optional[DetectorSettings] = None) -> None:
        self._settings = settings or get_detector_settings()
        # signal name -> listener registered on the hub
        self._listeners: Dict[str, Callable[[Any], None]] = {}

    def get_module_name(self) -> str:
        return "copy_paste"

    @property
    def is_listening(self) -> bool:
        return bool(self._listeners)

    @property
    def signals(self) -> List[str]:
        return self._settings.clipboard_signal_list

    def start(self, context: ProbeContext, on_ready: ReadinessCallback) -> None:
        if self._listeners:
            return

        for signal in self.signals:
            listener = self._make_listener(signal, on_ready)
            context.signals.add_listener(signal, listener)
            self._listeners[signal] = listener

        context.log_event(f"Listening for {', '.join(self.signals)}", "DEBUG")

    def stop(self, context: ProbeContext) -> None:
        for signal, listener in self._listeners.items():
            context.signals.remove_listener(signal, listener)
        self._listeners.clear()

    def _make_listener(self, signal: str, on_ready: ReadinessCallback) -> Callable[[Any], None]:
        def listener(payload: Any = None) -> None:
            on_ready({"module": self.get_module_name(), "event": signal, "payload": payload})
        return listener
