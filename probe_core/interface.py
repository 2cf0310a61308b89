"""
Detection module contract.

Defines the two module shapes a ProbeQueue can drive without knowing any
concrete detection logic:

    ContinuousModule - subscribes to external signals, reports zero or more
                       times through on_ready until stop() is called.
    OneShotModule    - runs once, returns a single result mapping.

The queue dispatches on the ``module_kind`` discriminant rather than on the
class hierarchy, so any object that declares a kind and provides the matching
methods is accepted.
"""
from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional

if TYPE_CHECKING:
    from probe_core.app_context import ProbeContext


Result = Mapping[str, Any]
ReadinessCallback = Callable[[Result], Any]


class ModuleKind(str, Enum):
    """Discriminant for the two module shapes."""

    CONTINUOUS = "continuous"
    ONE_SHOT = "one_shot"


# Methods each kind must expose to be schedulable.
REQUIRED_METHODS: dict[ModuleKind, tuple[str, ...]] = {
    ModuleKind.CONTINUOUS: ("start", "stop"),
    ModuleKind.ONE_SHOT: ("exec",),
}


class IDetectionModule(ABC):
    """
    Common base for detection modules.

    Subclasses should derive from ContinuousModule or OneShotModule, which
    set ``module_kind`` for them.
    """

    module_kind: ModuleKind

    def get_module_name(self) -> str:
        """
        Returns the identifier used in logs and status output.

        Returns:
            str: The class name unless overridden.
        """
        return type(self).__name__

    def __repr__(self) -> str:
        return f"<{self.module_kind.value}:{self.get_module_name()}>"


class ContinuousModule(IDetectionModule):
    """
    Module that listens for external signals.

    start() must return without waiting for a signal. stop() must be
    idempotent, safe to call when start() never ran, and must not raise.
    Either may be a coroutine function; the queue then awaits it in a task.
    """

    module_kind = ModuleKind.CONTINUOUS

    @abstractmethod
    def start(self, context: "ProbeContext", on_ready: ReadinessCallback) -> None:
        """
        Register signal subscriptions.

        Args:
            context: Shared capability bundle
            on_ready: Callback to invoke with a result mapping each time
                      the signal fires
        """
        pass

    @abstractmethod
    def stop(self, context: "ProbeContext") -> None:
        """
        Release every subscription created by start().

        Args:
            context: Shared capability bundle
        """
        pass


class OneShotModule(IDetectionModule):
    """
    Module that performs one bounded unit of work.

    exec() is normally a coroutine function. A plain function returning the
    result directly is accepted too.
    """

    module_kind = ModuleKind.ONE_SHOT

    @abstractmethod
    async def exec(self, context: "ProbeContext") -> Optional[Result]:
        """
        Run the detection once.

        Args:
            context: Shared capability bundle

        Returns:
            Result mapping, or None for an empty result
        """
        pass


def get_module_kind(module: object) -> Optional[ModuleKind]:
    """Return the declared kind of ``module`` or None if it has none."""
    kind = getattr(module, "module_kind", None)
    return kind if isinstance(kind, ModuleKind) else None


def is_detection_module(module: object) -> bool:
    """
    Check whether ``module`` satisfies one of the two module shapes.

    Classes are rejected; only instances can be scheduled.
    """
    if isinstance(module, type):
        return False
    kind = get_module_kind(module)
    if kind is None:
        return False
    return all(callable(getattr(module, name, None)) for name in REQUIRED_METHODS[kind])


def describe_module(module: object) -> str:
    """Name for logging, for conforming and foreign objects alike."""
    get_name = getattr(module, "get_module_name", None)
    if callable(get_name):
        return str(get_name())
    return type(module).__name__
