"""
ProbeContext - Shared capability bundle handed to every module invocation.

Also hosts ConfigLoader, which reads framework settings from the environment
(optionally via a .env file).
"""
from typing import Any, Dict, Optional, TYPE_CHECKING
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
import locale
import logging
import os
import platform as _platform

from dotenv import load_dotenv

from probe_core.signals import SignalHub

if TYPE_CHECKING:
    import httpx


@dataclass
class ConfigLoader:
    """Configuration loader from environment variables."""

    _config: Dict[str, Any] = field(default_factory=dict)

    def load(self, env_path: Optional[str] = None) -> None:
        """Load configuration from .env file."""
        if env_path:
            load_dotenv(env_path)
        else:
            # Try to find .env in project root
            project_root = Path(__file__).parent.parent
            env_file = project_root / ".env"
            if env_file.exists():
                load_dotenv(env_file)

        self._config = {
            "app": {
                "debug": os.getenv("APP_DEBUG", "false").lower() == "true",
                "log_level": os.getenv("APP_LOG_LEVEL", "INFO"),
                "log_dir": os.getenv("APP_LOG_DIR", ""),
                "run_seconds": float(os.getenv("APP_RUN_SECONDS", "0") or 0),
            },
            "queue": {
                "plan": os.getenv("QUEUE_PLAN", ""),
                "events_delay": float(os.getenv("QUEUE_EVENTS_DELAY", "2.0")),
                "data_delay": float(os.getenv("QUEUE_DATA_DELAY", "1.0")),
            },
            "http": {
                "timeout": float(os.getenv("HTTP_TIMEOUT", "10.0")),
                "max_connections": int(os.getenv("HTTP_MAX_CONNECTIONS", "10")),
            },
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dot notation key."""
        keys = key.split('.')
        value = self._config
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value


@dataclass(frozen=True)
class PlatformInfo:
    """Navigator-like description of the host the probes run on."""

    system: str
    release: str
    machine: str
    python_version: str
    locale: Optional[str] = None

    @classmethod
    def detect(cls) -> "PlatformInfo":
        """Build a PlatformInfo from the running interpreter."""
        lang, _ = locale.getlocale()
        return cls(
            system=_platform.system(),
            release=_platform.release(),
            machine=_platform.machine(),
            python_version=_platform.python_version(),
            locale=lang,
        )

    def as_dict(self) -> Dict[str, Optional[str]]:
        return {
            "system": self.system,
            "release": self.release,
            "machine": self.machine,
            "python_version": self.python_version,
            "locale": self.locale,
        }


class ProbeContext:
    """
    Probe Context - Capability bundle shared by every queue and module.

    Queues only forward it. Modules read from it and subscribe through its
    SignalHub; they are expected not to replace its members.
    """

    def __init__(
        self,
        config: Optional[ConfigLoader] = None,
        signals: Optional[SignalHub] = None,
        platform: Optional[PlatformInfo] = None,
        http_client: Optional["httpx.AsyncClient"] = None,
    ) -> None:
        self._logger = logging.getLogger(__name__)

        if config is None:
            config = ConfigLoader()
            config.load()
        self._config = config
        self._signals = signals if signals is not None else SignalHub()
        self._platform = platform if platform is not None else PlatformInfo.detect()
        self._http_client = http_client

        # Event log for status display
        self._event_log: list[str] = []
        self._max_log_entries: int = 500

    @property
    def config(self) -> ConfigLoader:
        """Access the configuration loader."""
        return self._config

    @property
    def signals(self) -> SignalHub:
        """Window-like event target for continuous modules."""
        return self._signals

    @property
    def platform(self) -> PlatformInfo:
        """Navigator-like host description."""
        return self._platform

    @property
    def http_client(self) -> "httpx.AsyncClient":
        """
        Shared HTTP client.

        Raises:
            RuntimeError: If the context was built without a client.
        """
        if self._http_client is None:
            raise RuntimeError("HTTP client not configured for this context.")
        return self._http_client

    def has_http_client(self) -> bool:
        """Check if an HTTP client is available."""
        return self._http_client is not None

    def log_event(self, message: str, level: str = "INFO") -> None:
        """Log an event to both logger and event log."""
        timestamp = datetime.now().strftime("%H:%M:%S")
        formatted = f"[{timestamp}] [{level}] {message}"

        self._event_log.append(formatted)
        if len(self._event_log) > self._max_log_entries:
            self._event_log = self._event_log[-self._max_log_entries:]

        log_level = getattr(logging, level.upper(), logging.INFO)
        self._logger.log(log_level, message)

    def get_event_log(self) -> list[str]:
        """Get the current event log."""
        return self._event_log.copy()
