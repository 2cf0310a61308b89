"""
Pytest Configuration and Shared Fixtures.

Provides common test fixtures for probe queue unit tests.
"""

import asyncio
from typing import Any, Callable, Optional

import pytest

from probe_core.interface import ContinuousModule, OneShotModule


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture
def mock_env_vars(monkeypatch, tmp_path):
    """Set up mock environment variables for testing."""
    env_vars = {
        "APP_DEBUG": "true",
        "APP_LOG_LEVEL": "DEBUG",
        "APP_LOG_DIR": str(tmp_path / "logs"),
        "APP_RUN_SECONDS": "0.5",
        "QUEUE_PLAN": "",
        "QUEUE_EVENTS_DELAY": "0.02",
        "QUEUE_DATA_DELAY": "0.01",
        "HTTP_TIMEOUT": "3.5",
        "HTTP_MAX_CONNECTIONS": "4",
        "PROBE_CLIPBOARD_SIGNALS": "copy,paste",
        "PROBE_FONT_DIRS": str(tmp_path / "fonts"),
    }

    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    monkeypatch.delenv("PROBE_HTTP_URL", raising=False)

    from detectors.config import get_detector_settings
    get_detector_settings.cache_clear()
    yield env_vars
    get_detector_settings.cache_clear()


@pytest.fixture
def config_loader(mock_env_vars):
    """Create a ConfigLoader instance with mock environment."""
    from probe_core.app_context import ConfigLoader

    loader = ConfigLoader()
    loader.load()
    return loader


@pytest.fixture
def platform_info():
    """Fixed platform description so tests do not depend on the host."""
    from probe_core.app_context import PlatformInfo

    return PlatformInfo(
        system="Linux",
        release="6.0.0",
        machine="x86_64",
        python_version="3.12.0",
        locale="en_US",
    )


@pytest.fixture
def probe_context(config_loader, platform_info):
    """Create a ProbeContext with mock environment and no HTTP client."""
    from probe_core.app_context import ProbeContext

    return ProbeContext(config=config_loader, platform=platform_info)


@pytest.fixture
def detector_settings(mock_env_vars):
    """Detector settings read from the mock environment."""
    from detectors.config import DetectorSettings

    return DetectorSettings()


# =============================================================================
# Module Doubles
# =============================================================================


class RecordingCallback:
    """Readiness callback that records every result it receives."""

    def __init__(self) -> None:
        self.calls: list[Any] = []
        self.times: list[float] = []

    def __call__(self, params: Any = None) -> None:
        self.calls.append(params)
        try:
            self.times.append(asyncio.get_running_loop().time())
        except RuntimeError:
            self.times.append(float("nan"))


class StubOneShotModule(OneShotModule):
    """One-shot module returning a fixed result, optionally after a pause."""

    def __init__(
        self,
        result: Optional[dict] = None,
        name: str = "stub_one_shot",
        pause: float = 0.0,
        error: Optional[Exception] = None,
    ) -> None:
        self._result = result
        self._name = name
        self._pause = pause
        self._error = error
        self.exec_count = 0
        self.exec_times: list[float] = []
        self.contexts: list[Any] = []

    def get_module_name(self) -> str:
        return self._name

    async def exec(self, context) -> Optional[dict]:
        self.exec_count += 1
        self.exec_times.append(asyncio.get_running_loop().time())
        self.contexts.append(context)
        if self._pause:
            await asyncio.sleep(self._pause)
        if self._error is not None:
            raise self._error
        return self._result


class StubContinuousModule(ContinuousModule):
    """Continuous module that hands out its on_ready callback for tests to fire."""

    def __init__(self, name: str = "stub_continuous") -> None:
        self._name = name
        self.on_ready: Optional[Callable[[Any], Any]] = None
        self.start_count = 0
        self.stop_count = 0
        self.start_times: list[float] = []

    def get_module_name(self) -> str:
        return self._name

    def start(self, context, on_ready) -> None:
        self.start_count += 1
        self.start_times.append(asyncio.get_running_loop().time())
        self.on_ready = on_ready

    def stop(self, context) -> None:
        self.stop_count += 1
        self.on_ready = None

    def fire(self, payload: Any) -> None:
        assert self.on_ready is not None, "module was not started"
        self.on_ready(payload)


@pytest.fixture
def recording_callback():
    """Create a readiness callback that records its calls."""
    return RecordingCallback()


@pytest.fixture
def one_shot_factory():
    """Factory for stub one-shot modules."""
    def _create(**kwargs) -> StubOneShotModule:
        return StubOneShotModule(**kwargs)
    return _create


@pytest.fixture
def continuous_factory():
    """Factory for stub continuous modules."""
    def _create(name: str = "stub_continuous") -> StubContinuousModule:
        return StubContinuousModule(name)
    return _create
