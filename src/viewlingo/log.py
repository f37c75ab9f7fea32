"""Structured console logging for ViewLingo.

Each line reads ``HH:MM:SS LVL [component] event key=value ...``:

    12:30:45 INF [packs] pack statuses refreshed available=4 unavailable=20
    12:30:46 DBG [ocr] ocr complete mode=fast detected=3 time_ms=41
    12:30:47 WRN [orchestrator] no session registered pair=en->ja count=3
    12:30:48 ERR [orchestrator] session dispatch failed pair=en->ja error=timeout
"""

import logging
import sys
import time

import structlog

LEVEL_TAGS = {
    "debug": "DBG",
    "info": "INF",
    "warning": "WRN",
    "error": "ERR",
    "exception": "ERR",
    "critical": "CRT",
}

# Recognized text can run long; values are cut to keep one event per line
MAX_VALUE_CHARS = 80

_debug_enabled = False


def _stamp(logger, method_name, event_dict):
    """Add the wall-clock time and the 3-letter level tag."""
    event_dict["timestamp"] = time.strftime("%H:%M:%S")
    event_dict["level"] = LEVEL_TAGS.get(method_name, method_name[:3].upper())
    return event_dict


def _format_value(value) -> str:
    text = str(value).replace("\n", "\\n")
    if len(text) > MAX_VALUE_CHARS:
        text = text[: MAX_VALUE_CHARS - 3] + "..."
    if not text or any(char in text for char in ' ="'):
        return '"' + text.replace('"', '\\"') + '"'
    return text


def _render(logger, method_name, event_dict) -> str:
    """Render the event dict as a single console line."""
    parts = [event_dict.pop("timestamp", ""), event_dict.pop("level", "???")]
    component = event_dict.pop("component", None)
    if component:
        parts.append(f"[{component}]")
    parts.append(str(event_dict.pop("event", "")))
    parts.extend(
        f"{key}={_format_value(value)}"
        for key, value in event_dict.items()
        if not key.startswith("_")
    )
    return " ".join(parts)


def configure(level: str = "INFO", debug: bool = False, stream=None) -> None:
    """Configure structlog for console output.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        debug: If True, sets level to DEBUG.
        stream: File object to write to. Defaults to sys.stderr, leaving
            stdout to CLI results.
    """
    global _debug_enabled
    if debug:
        level = "DEBUG"
    level = level.upper()
    _debug_enabled = level == "DEBUG"

    structlog.configure(
        processors=[_stamp, _render],
        wrapper_class=structlog.make_filtering_bound_logger(getattr(logging, level, logging.INFO)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(component: str | None = None) -> structlog.BoundLogger:
    """Get a logger, optionally tagged with the emitting component."""
    logger = structlog.get_logger()
    if component:
        return logger.bind(component=component)
    return logger


def is_debug_enabled() -> bool:
    """Check if debug logging is enabled."""
    return _debug_enabled
