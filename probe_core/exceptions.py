"""
Probe queue exceptions.

Custom exception classes for module contract and queue lifecycle errors.
"""


class ProbeQueueError(Exception):
    """Base exception for probe queue errors."""
    pass


class ModuleContractError(ProbeQueueError):
    """
    Raised when an object does not satisfy the detection module contract.

    Examples:
        - Registering a plain object with no module_kind
        - A continuous module missing start()/stop()
        - A one-shot module missing exec()
    """

    def __init__(self, message: str, module: object = None) -> None:
        self.module = module
        super().__init__(message)


class InvalidDelayError(ModuleContractError, ValueError):
    """Raised when a scheduling delay is negative or not a number."""
    pass


class QueueStateError(ProbeQueueError):
    """
    Raised when a queue operation is not allowed in its current state.

    Examples:
        - start() called on a queue that is already running or stopped
        - add() called after start()
    """

    def __init__(self, message: str, state: str | None = None) -> None:
        self.state = state
        super().__init__(message)


class UnknownDetectorError(ProbeQueueError, KeyError):
    """Raised when a detector name is not present in the registry."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0]) if self.args else ""
