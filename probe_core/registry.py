"""
Detector Registry - Name-based lookup of detection module classes.

Lets the orchestrator build queues from a textual plan
(``events:copy_paste@2.0;data:fonts@1.0``) instead of hard-coded imports.
"""
from typing import Callable, Dict, List, Optional
import logging

from probe_core.exceptions import ModuleContractError, UnknownDetectorError
from probe_core.interface import ModuleKind, REQUIRED_METHODS

DetectorFactory = Callable[[], object]


class DetectorRegistry:
    """
    Registry mapping detector names to module factories.

    Factories are usually the module classes themselves.
    """

    def __init__(self) -> None:
        self._factories: Dict[str, DetectorFactory] = {}
        self._logger = logging.getLogger(__name__)

    def register(self, name: str, factory: DetectorFactory) -> bool:
        """
        Register a detector factory under ``name``.

        Args:
            name: Unique detector name used in queue plans
            factory: Zero-argument callable producing a module instance

        Returns:
            bool: True if registration successful, False if the name is taken

        Raises:
            ModuleContractError: If factory is a class that does not declare
                                 a module kind and its required methods
        """
        if not callable(factory):
            raise ModuleContractError(f"Detector '{name}' factory is not callable.", module=factory)

        if isinstance(factory, type):
            kind = getattr(factory, "module_kind", None)
            if not isinstance(kind, ModuleKind) or not all(
                callable(getattr(factory, method, None)) for method in REQUIRED_METHODS[kind]
            ):
                raise ModuleContractError(
                    f"Detector '{name}' ({factory.__name__}) does not implement a module contract.",
                    module=factory,
                )

        if name in self._factories:
            self._logger.warning(f"Detector '{name}' already registered. Skipping.")
            return False

        self._factories[name] = factory
        self._logger.debug(f"Detector '{name}' registered.")
        return True

    def unregister(self, name: str) -> bool:
        """
        Remove a detector from the registry.

        Returns:
            bool: True if it was registered, False otherwise
        """
        if name not in self._factories:
            self._logger.warning(f"Detector '{name}' not found in registry.")
            return False
        del self._factories[name]
        return True

    def create(self, name: str) -> object:
        """
        Instantiate the detector registered under ``name``.

        Raises:
            UnknownDetectorError: If no detector has that name
        """
        factory = self._factories.get(name)
        if factory is None:
            raise UnknownDetectorError(
                f"Unknown detector '{name}'. Registered: {', '.join(self.get_names()) or 'none'}"
            )
        return factory()

    def get_factory(self, name: str) -> Optional[DetectorFactory]:
        return self._factories.get(name)

    def get_names(self) -> List[str]:
        """Get names of all registered detectors."""
        return list(self._factories.keys())

    def __contains__(self, name: str) -> bool:
        return name in self._factories

    def clear(self) -> None:
        """Clear all registered detectors (for testing)."""
        self._factories.clear()
