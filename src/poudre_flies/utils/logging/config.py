# ABOUTME: Logging configuration using loguru sinks with structlog event rendering
# ABOUTME: Dual-mode operation: interactive CLI (log files) vs production (JSON on stderr)

import logging
import os
import sys
from pathlib import Path
from typing import Any

import structlog
from loguru import logger


class LoggingMode:
    """Logging mode constants."""

    INTERACTIVE = "interactive"
    PRODUCTION = "production"


LOG_DIR = Path("logs")

SUPPRESSED_LOGGERS = ["httpx", "httpcore", "asyncio", "urllib3", "charset_normalizer"]

LOG_FILES = {
    "main": "poudre-flies.log",
    "json": "poudre-flies.json",
    "errors": "errors.log",
}

TEXT_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name} - {message}"
RECORD_FORMAT = "{time} | {level} | {name} | {message}"


class LoguruBridge:
    """structlog logger that hands rendered events to loguru."""

    def __init__(self, name: str | None = None):
        self.name = name or "poudre_flies"

    def _emit(self, level: str, message: str) -> None:
        logger.patch(lambda record: record.update(name=self.name)).log(level, message)

    def debug(self, message: str) -> None:
        self._emit("DEBUG", message)

    def info(self, message: str) -> None:
        self._emit("INFO", message)

    def warning(self, message: str) -> None:
        self._emit("WARNING", message)

    def error(self, message: str) -> None:
        self._emit("ERROR", message)

    def critical(self, message: str) -> None:
        self._emit("CRITICAL", message)

    msg = info
    warn = warning
    exception = error
    fatal = critical


def _bridge_factory(*args: Any) -> LoguruBridge:
    return LoguruBridge(args[0] if args else None)


def detect_logging_mode() -> str:
    """Detect whether we're running in interactive or production mode."""
    mode = os.getenv("POUDRE_FLIES_LOG_MODE")
    if mode and mode.lower() in [LoggingMode.INTERACTIVE, LoggingMode.PRODUCTION]:
        return mode.lower()

    return LoggingMode.INTERACTIVE if sys.stdout.isatty() else LoggingMode.PRODUCTION


def setup_third_party_logging() -> None:
    """Keep HTTP client chatter out of the report logs."""
    for logger_name in SUPPRESSED_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    logging.captureWarnings(True)
    logging.getLogger("py.warnings").setLevel(logging.ERROR)


def setup_structlog(log_level: str = "INFO") -> None:
    """Route structlog events through loguru, filtered at ``log_level``."""
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=_bridge_factory,
        cache_logger_on_first_use=False,
    )


def _add_file_sinks(log_level: str, main_file: str | None) -> None:
    """Interactive sinks: readable main log, serialized mirror, and an errors-only file."""
    rotating = {"rotation": "10 MB", "retention": "7 days"}

    logger.add(main_file or LOG_DIR / LOG_FILES["main"], level=log_level, format=TEXT_FORMAT, **rotating)
    logger.add(LOG_DIR / LOG_FILES["json"], level=log_level, format=RECORD_FORMAT, serialize=True, **rotating)
    logger.add(LOG_DIR / LOG_FILES["errors"], level="ERROR", format=TEXT_FORMAT, backtrace=True, diagnose=False)


# Mode and main log file installed by the last configure_logging call
_active_mode: str | None = None
_active_main_log: str | None = None


def configure_logging(mode: str | None = None, log_level: str = "INFO", log_file: str | None = None) -> None:
    """Install loguru sinks for ``mode`` and point structlog at them.

    Interactive mode writes under ``logs/``; production mode, or an
    interactive run whose log directory cannot be created, emits one
    serialized record per line on stderr.
    """
    global _active_mode, _active_main_log
    mode = mode or detect_logging_mode()

    setup_third_party_logging()
    setup_structlog(log_level)
    logging.getLogger().setLevel(getattr(logging, log_level.upper(), logging.INFO))

    logger.remove()

    if mode == LoggingMode.INTERACTIVE:
        try:
            LOG_DIR.mkdir(exist_ok=True)
        except OSError:
            mode = LoggingMode.PRODUCTION
        else:
            _add_file_sinks(log_level, log_file)
            _active_mode = mode
            _active_main_log = log_file or str(LOG_DIR / LOG_FILES["main"])
            return

    # stdout carries the manifest
    logger.add(sys.stderr, level=log_level, format=RECORD_FORMAT, serialize=True)
    _active_mode = mode
    _active_main_log = None


def get_logging_status() -> dict[str, Any]:
    """Describe the installed logging mode, directory and file sinks.

    Before :func:`configure_logging` has run, the detected mode is reported.
    """
    mode = _active_mode or detect_logging_mode()
    files_active = mode == LoggingMode.INTERACTIVE
    log_files = {key: str(LOG_DIR / name) if files_active else None for key, name in LOG_FILES.items()}
    if files_active and _active_main_log:
        log_files["main"] = _active_main_log

    return {
        "mode": mode,
        "log_directory": str(LOG_DIR.absolute()) if LOG_DIR.exists() else None,
        "log_files": log_files,
        "third_party_suppressed": list(SUPPRESSED_LOGGERS),
    }
