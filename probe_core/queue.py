"""
ProbeQueue - Timer-driven staggered dispatch of detection modules.

Entries fire on a cumulative cascade: entry i fires ``sum(delay[0..i])``
seconds after start(). Every result, from every module in the queue, is
delivered through the queue's single readiness callback.
"""
import asyncio
import inspect
import logging
import math
from enum import Enum
from numbers import Real
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Set, Tuple

from probe_core.exceptions import InvalidDelayError, ModuleContractError, QueueStateError
from probe_core.interface import (
    ModuleKind,
    ReadinessCallback,
    Result,
    describe_module,
    get_module_kind,
    is_detection_module,
)

if TYPE_CHECKING:
    from probe_core.app_context import ProbeContext


class QueueState(str, Enum):
    """Queue lifecycle."""

    NOT_STARTED = "not_started"
    RUNNING = "running"
    STOPPED = "stopped"


class ScheduledEntry:
    """
    One registered module and its local delay.

    ``delay`` is fixed at registration. ``timer_handle`` is set once by
    start() and cleared by stop().
    """

    def __init__(self, module: Any, delay: float, kind: ModuleKind) -> None:
        self.module = module
        self.kind = kind
        self._delay = float(delay)
        self.timer_handle: Optional[asyncio.TimerHandle] = None
        self.fired = False

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def name(self) -> str:
        return describe_module(self.module)

    def __repr__(self) -> str:
        return f"ScheduledEntry(module={self.name!r}, delay={self._delay}, kind={self.kind.value}, fired={self.fired})"


class ProbeQueue:
    """
    Ordered scheduler for a fixed set of modules sharing one context.

    Lifecycle: NOT_STARTED (add allowed) -> RUNNING (timers armed)
    -> STOPPED (timers cancelled, continuous modules torn down).
    """

    def __init__(
        self,
        name: str,
        context: "ProbeContext",
        readiness_callback: ReadinessCallback,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        if not callable(readiness_callback):
            raise TypeError("readiness_callback must be callable")

        self._name = name
        self._context = context
        self._readiness_callback = readiness_callback
        self._loop = loop
        self._entries: List[ScheduledEntry] = []
        self._state = QueueState.NOT_STARTED
        self._inflight: Set[asyncio.Task] = set()
        self._logger = logging.getLogger(__name__)

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def context(self) -> "ProbeContext":
        return self._context

    @property
    def state(self) -> QueueState:
        return self._state

    @property
    def entries(self) -> Tuple[ScheduledEntry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"<ProbeQueue:{self._name} state={self._state.value} entries={len(self._entries)}>"

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def add(self, module: Any, delay: float = 0) -> ScheduledEntry:
        """
        Register a module to run ``delay`` seconds after the previous entry.

        Args:
            module: A ContinuousModule or OneShotModule (or any object that
                    declares a module_kind and its required methods)
            delay: Non-negative gap in seconds relative to the previous
                   entry's nominal fire time

        Returns:
            ScheduledEntry: The created entry

        Raises:
            ModuleContractError: If module matches neither module shape
            InvalidDelayError: If delay is negative or not a number
            QueueStateError: If the queue has already been started
        """
        if self._state is not QueueState.NOT_STARTED:
            raise QueueStateError(
                f"Cannot add modules to queue '{self._name}' in state '{self._state.value}'.",
                state=self._state.value,
            )

        if not is_detection_module(module):
            raise ModuleContractError(
                "Module is not supported. A ContinuousModule or OneShotModule instance is expected, "
                f"got {type(module).__name__}.",
                module=module,
            )

        if isinstance(delay, bool) or not isinstance(delay, Real) or not math.isfinite(delay) or delay < 0:
            raise InvalidDelayError(
                f"Delay must be a non-negative number of seconds, got {delay!r}.",
                module=module,
            )

        entry = ScheduledEntry(module=module, delay=float(delay), kind=get_module_kind(module))
        self._entries.append(entry)
        self._logger.debug(f"Queue '{self._name}': added {entry.name} (delay={entry.delay}s)")
        return entry

    def offsets(self) -> List[float]:
        """Cumulative nominal fire offsets, in registration order."""
        total = 0.0
        result = []
        for entry in self._entries:
            total += entry.delay
            result.append(total)
        return result

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> None:
        """
        Arm one timer per entry at its cumulative offset.

        Must be called from within a running event loop unless a loop was
        supplied to the constructor.

        Raises:
            QueueStateError: If the queue was already started or stopped
        """
        if self._state is not QueueState.NOT_STARTED:
            raise QueueStateError(
                f"Queue '{self._name}' cannot be started in state '{self._state.value}'.",
                state=self._state.value,
            )

        loop = self._loop or asyncio.get_running_loop()
        self._loop = loop

        for entry, offset in zip(self._entries, self.offsets()):
            entry.timer_handle = loop.call_later(offset, self._fire, entry)

        self._state = QueueState.RUNNING
        self._logger.info(f"Queue '{self._name}' started with {len(self._entries)} module(s)")

    def stop(self) -> None:
        """
        Cancel pending timers and tear down continuous modules.

        Continuous modules are stopped whether or not their timer has fired.
        One-shot executions already in flight are not cancelled and still
        deliver their result. Calling stop() again, or before start(), is a
        no-op.
        """
        if self._state is not QueueState.RUNNING:
            self._logger.debug(f"Queue '{self._name}' stop() ignored in state '{self._state.value}'")
            return

        for entry in self._entries:
            if entry.timer_handle is None:
                continue
            if entry.kind is ModuleKind.CONTINUOUS:
                try:
                    outcome = entry.module.stop(self._context)
                except Exception as e:
                    self._logger.error(f"Error during module '{entry.name}' stop: {e}")
                else:
                    if inspect.isawaitable(outcome):
                        self._track(self._await_hook(entry, "stop", outcome))
            entry.timer_handle.cancel()
            entry.timer_handle = None

        self._state = QueueState.STOPPED
        self._logger.info(f"Queue '{self._name}' stopped")

    async def wait_idle(self) -> None:
        """Wait for in-flight one-shot executions and async start/stop hooks."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def _fire(self, entry: ScheduledEntry) -> None:
        """Timer callback: invoke the entry's module once."""
        entry.fired = True
        self._logger.debug(f"Queue '{self._name}': firing {entry.name}")

        if entry.kind is ModuleKind.ONE_SHOT:
            self._track(self._run_one_shot(entry))
        elif entry.kind is ModuleKind.CONTINUOUS:
            try:
                outcome = entry.module.start(self._context, self._deliver)
            except Exception:
                self._logger.exception(f"Queue '{self._name}': module '{entry.name}' failed to start")
                return
            if inspect.isawaitable(outcome):
                self._track(self._await_hook(entry, "start", outcome))

    def _track(self, coro) -> asyncio.Task:
        task = self._loop.create_task(coro)
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    async def _await_hook(self, entry: ScheduledEntry, action: str, awaitable) -> None:
        """Finish an async start() or stop() of a continuous module."""
        try:
            await awaitable
        except Exception:
            self._logger.exception(f"Queue '{self._name}': module '{entry.name}' failed to {action}")

    async def _run_one_shot(self, entry: ScheduledEntry) -> None:
        try:
            result = entry.module.exec(self._context)
            if inspect.isawaitable(result):
                result = await result
        except Exception:
            self._logger.exception(f"Queue '{self._name}': module '{entry.name}' exec failed")
            return

        try:
            self._deliver({} if result is None else result)
        except Exception:
            self._logger.exception(f"Queue '{self._name}': readiness callback failed for '{entry.name}'")

    def _deliver(self, result: Optional[Result] = None) -> None:
        """Forward a result to the queue's readiness callback."""
        self._readiness_callback({} if result is None else result)

    # -------------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------------

    def get_status(self) -> Dict[str, Any]:
        """
        Returns the current status of the queue for monitoring.

        Returns:
            dict: Status info with structure:
                  {
                      "name": "events",
                      "state": "not_started" | "running" | "stopped",
                      "entries": [{"module": ..., "kind": ..., "delay": ..., "offset": ..., "fired": ...}],
                      "armed": 1,
                      "in_flight": 0
                  }
        """
        return {
            "name": self._name,
            "state": self._state.value,
            "entries": [
                {
                    "module": entry.name,
                    "kind": entry.kind.value,
                    "delay": entry.delay,
                    "offset": offset,
                    "fired": entry.fired,
                }
                for entry, offset in zip(self._entries, self.offsets())
            ],
            "armed": sum(1 for e in self._entries if e.timer_handle is not None),
            "in_flight": len(self._inflight),
        }
