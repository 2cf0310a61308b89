"""
SignalHub - Host-side subscribe/unsubscribe/emit primitive.

Plays the role of an event target (addEventListener / removeEventListener)
for continuous modules. Signals are plain string names; listeners receive a
single payload argument.
"""
import logging
from typing import Any, Callable, Dict, List

Listener = Callable[[Any], Any]


class SignalHub:
    """
    Registry of named signal listeners.

    Adding the same listener twice for one signal is a no-op, and removing a
    listener that is not registered is a no-op.
    """

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = {}
        self._logger = logging.getLogger(__name__)

    def add_listener(self, signal: str, listener: Listener) -> None:
        """
        Subscribe ``listener`` to ``signal``.

        Args:
            signal: Signal name (e.g., 'copy', 'paste')
            listener: Callable receiving the signal payload
        """
        listeners = self._listeners.setdefault(signal, [])
        if listener not in listeners:
            listeners.append(listener)
            self._logger.debug(f"Listener added for signal '{signal}'")

    def remove_listener(self, signal: str, listener: Listener) -> None:
        """Unsubscribe ``listener`` from ``signal`` if it is subscribed."""
        listeners = self._listeners.get(signal)
        if not listeners or listener not in listeners:
            return
        listeners.remove(listener)
        if not listeners:
            del self._listeners[signal]
        self._logger.debug(f"Listener removed for signal '{signal}'")

    def emit(self, signal: str, payload: Any = None) -> int:
        """
        Deliver ``payload`` to every listener of ``signal``.

        Listeners are called from a snapshot, so a listener may unsubscribe
        itself while being notified. A failing listener is logged and does not
        prevent delivery to the others.

        Returns:
            int: Number of listeners notified
        """
        notified = 0
        for listener in list(self._listeners.get(signal, ())):
            try:
                listener(payload)
            except Exception as e:
                self._logger.error(f"Listener for signal '{signal}' failed: {e}")
            notified += 1
        return notified

    def listener_count(self, signal: str | None = None) -> int:
        """Count listeners for one signal, or for all signals when None."""
        if signal is not None:
            return len(self._listeners.get(signal, ()))
        return sum(len(v) for v in self._listeners.values())

    def get_signal_names(self) -> List[str]:
        """Get names of signals that currently have listeners."""
        return list(self._listeners.keys())
