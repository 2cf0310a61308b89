"""
Logging setup for probe runs.

Every handler installed by setup_logging() masks secrets before writing.
Clipboard payloads and probed URLs end up in readiness-callback log lines,
so credentials, card numbers and email addresses are redacted at format time.
"""

import logging
import re
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, NamedTuple, Optional, Pattern


LOG_FILENAME = "probe_queue.log"
MAX_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 5
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are chatty at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "asyncio")

_SECRET_KEYS = (
    "password|passwd|secret|token|access_token|refresh_token|api_key|apikey|"
    "authorization|cookie|credential|private_key|id_token"
)


class MaskRule(NamedTuple):
    name: str
    pattern: Pattern[str]
    replacement: str


# Applied in order by mask_sensitive()
SENSITIVE_PATTERNS: List[MaskRule] = [
    MaskRule(
        "key_value",
        re.compile(rf"({_SECRET_KEYS})\s*[:=]\s*['\"]?([^'\"\s&,}}]+)['\"]?", re.IGNORECASE),
        r"\1=***",
    ),
    MaskRule("bearer", re.compile(r"(Bearer\s+)([A-Za-z0-9\-_\.]+)", re.IGNORECASE), r"\1***"),
    MaskRule(
        "jwt",
        re.compile(r"\b(eyJ[A-Za-z0-9\-_]+\.eyJ[A-Za-z0-9\-_]+\.[A-Za-z0-9\-_]+)\b"),
        "[JWT:***]",
    ),
    MaskRule(
        "query_param",
        re.compile(r"([?&])(token|key|secret|password|api_key|apikey|access_token)=([^&\s]+)", re.IGNORECASE),
        r"\1\2=***",
    ),
    # 13-19 digits, optionally grouped by spaces or dashes; last four kept
    MaskRule("card_number", re.compile(r"\b(?:\d[ -]?){9,15}(\d{4})\b"), r"[CARD:***\1]"),
    MaskRule(
        "email",
        re.compile(r"\b([a-zA-Z0-9._%+-]{2})([a-zA-Z0-9._%+-]*)(@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,})\b"),
        r"\1***\3",
    ),
]


def mask_sensitive(text: str) -> str:
    """Apply every rule in SENSITIVE_PATTERNS to ``text``."""
    for rule in SENSITIVE_PATTERNS:
        text = rule.pattern.sub(rule.replacement, text)
    return text


class SensitiveDataFormatter(logging.Formatter):
    """Formatter that runs the fully formatted record through mask_sensitive()."""

    def format(self, record: logging.LogRecord) -> str:
        return mask_sensitive(super().format(record))


def get_log_path(log_dir: Optional[str] = None) -> Path:
    """
    Resolve the rotating log file path, creating its directory.

    Args:
        log_dir: Directory for the log file. Defaults to ``<project>/logs``.
    """
    directory = Path(log_dir) if log_dir else Path(__file__).resolve().parent.parent / "logs"
    directory.mkdir(parents=True, exist_ok=True)
    return directory / LOG_FILENAME


def _attach(root: logging.Logger, handler: logging.Handler, level: int, formatter: logging.Formatter) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    root.addHandler(handler)


def setup_logging(log_level: int = logging.INFO, log_dir: Optional[str] = None) -> None:
    """
    Install a rotating file handler and a stdout handler on the root logger.

    Calling it again replaces the handlers instead of stacking them.

    Args:
        log_level: Level for the root logger and both handlers.
        log_dir: Directory for ``probe_queue.log``; see get_log_path().
    """
    log_path = get_log_path(log_dir)
    formatter = SensitiveDataFormatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()

    _attach(
        root,
        RotatingFileHandler(str(log_path), maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8"),
        log_level,
        formatter,
    )
    _attach(root, logging.StreamHandler(sys.stdout), log_level, formatter)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root.info(f"Probe logging ready, writing to {log_path}")
