"""
Detector Configuration.

Manages environment variables specific to the bundled detectors.
Uses prefix PROBE_ to avoid conflicts with framework settings.
"""

from functools import lru_cache
from typing import Annotated, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


class DetectorSettings(BaseSettings):
    """
    Detector settings loaded from environment variables.

    All variables use the PROBE_ prefix for isolation.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Clipboard detector
    clipboard_signals: Annotated[
        str,
        Field(
            default="copy,paste",
            description="Comma-separated signal names the clipboard detector listens to",
            validation_alias="PROBE_CLIPBOARD_SIGNALS",
        ),
    ] = "copy,paste"

    # Fonts detector
    font_dirs: Annotated[
        str,
        Field(
            default="",
            description="Comma-separated font directories; empty uses platform defaults",
            validation_alias="PROBE_FONT_DIRS",
        ),
    ] = ""

    font_extensions: Annotated[
        str,
        Field(
            default=".ttf,.otf,.ttc,.woff,.woff2",
            description="Comma-separated font file extensions",
            validation_alias="PROBE_FONT_EXTENSIONS",
        ),
    ] = ".ttf,.otf,.ttc,.woff,.woff2"

    # HTTP reachability detector
    http_url: Annotated[
        Optional[str],
        Field(
            default=None,
            description="URL probed by the HTTP reachability detector",
            validation_alias="PROBE_HTTP_URL",
        ),
    ] = None

    http_timeout_seconds: Annotated[
        float,
        Field(
            default=5.0,
            gt=0,
            description="Per-request timeout for the HTTP reachability detector",
            validation_alias="PROBE_HTTP_TIMEOUT_SECONDS",
        ),
    ] = 5.0

    @property
    def clipboard_signal_list(self) -> list[str]:
        return _split_csv(self.clipboard_signals)

    @property
    def font_dir_list(self) -> list[str]:
        return _split_csv(self.font_dirs)

    @property
    def font_extension_list(self) -> list[str]:
        return [ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in _split_csv(self.font_extensions)]


@lru_cache
def get_detector_settings() -> DetectorSettings:
    """
    Get cached detector settings.

    Uses LRU cache to ensure settings are loaded only once.

    Returns:
        DetectorSettings: Detector settings instance.
    """
    return DetectorSettings()
