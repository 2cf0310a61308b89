"""
Fonts Detection Module - One-shot detector for installed fonts.

Scans font directories for font files and reports the font names found.
The directory walk runs in a worker thread so the event loop stays free.
"""
import asyncio
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from probe_core.app_context import ProbeContext
from probe_core.interface import OneShotModule
from detectors.config import DetectorSettings, get_detector_settings

logger = logging.getLogger(__name__)


def default_font_dirs(system: str) -> List[Path]:
    """
    Conventional font directories for a platform.

    Args:
        system: platform.system() value ('Linux', 'Darwin', 'Windows')
    """
    home = Path.home()
    if system == "Darwin":
        return [Path("/System/Library/Fonts"), Path("/Library/Fonts"), home / "Library" / "Fonts"]
    if system == "Windows":
        windir = Path(os.environ.get("WINDIR", r"C:\Windows"))
        local = os.environ.get("LOCALAPPDATA")
        dirs = [windir / "Fonts"]
        if local:
            dirs.append(Path(local) / "Microsoft" / "Windows" / "Fonts")
        return dirs
    return [
        Path("/usr/share/fonts"),
        Path("/usr/local/share/fonts"),
        home / ".fonts",
        home / ".local" / "share" / "fonts",
    ]


def scan_font_dirs(dirs: List[Path], extensions: List[str]) -> List[str]:
    """
    Collect font names (file stems) found under ``dirs``.

    Missing or unreadable directories are skipped.

    Returns:
        Sorted, de-duplicated list of font names
    """
    found = set()
    for directory in dirs:
        if not directory.is_dir():
            continue
        for root, _, files in os.walk(directory, onerror=lambda e: logger.debug(f"Skipping {e.filename}: {e}")):
            for filename in files:
                path = Path(root) / filename
                if path.suffix.lower() in extensions:
                    found.add(path.stem)
    return sorted(found)


class FontsDetectionModule(OneShotModule):
    """Reports the fonts installed on the host."""

    def __init__(self, settings: Optional[DetectorSettings] = None) -> None:
        self._settings = settings or get_detector_settings()

    def get_module_name(self) -> str:
        return "fonts"

    def resolve_dirs(self, context: ProbeContext) -> List[Path]:
        configured = self._settings.font_dir_list
        if configured:
            return [Path(d).expanduser() for d in configured]
        return default_font_dirs(context.platform.system)

    async def exec(self, context: ProbeContext) -> Dict[str, Any]:
        dirs = self.resolve_dirs(context)
        fonts = await asyncio.to_thread(scan_font_dirs, dirs, self._settings.font_extension_list)
        context.log_event(f"Fonts detected: {len(fonts)}", "DEBUG")
        return {
            "module": self.get_module_name(),
            "fonts": fonts,
            "font_count": len(fonts),
        }
