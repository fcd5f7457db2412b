"""Structured logging for Press Import.

structlog renders every event through the stdlib root logger. The console
gets a ``rich`` handler (human readable, WARNING by default so the import
report stays readable); the optional log file gets every event down to DEBUG,
one JSON object per line.

Event names are snake_case (``entity_created``, ``file_import_aborted``) and
context travels as key/value pairs. ``ImportPipeline`` binds the import
type and source through ``structlog.contextvars`` so every event of a run
carries them.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any

import structlog
from rich.console import Console
from rich.logging import RichHandler
from structlog.typing import EventDict, WrappedLogger

from press_import import __version__

APP_NAME = "press-import"

_ANSI_PATTERN = re.compile(r"\x1b\[[0-9;]*m")

# Keys whose values never reach a log line; matched as substrings
SENSITIVE_KEYS = frozenset(
    {"password", "application_password", "token", "secret", "authorization", "api_key"}
)


def add_app_context(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """structlog processor stamping the application name and version."""
    event_dict["app"] = APP_NAME
    event_dict["version"] = __version__
    return event_dict


class JSONFileFormatter(logging.Formatter):
    """One JSON object per line for the log file.

    The structlog event arrives already rendered; it is wrapped with the
    record metadata and stripped of terminal escape codes.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": _ANSI_PATTERN.sub("", record.getMessage()),
            "app": APP_NAME,
            "version": __version__,
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def _level(name: str | None, default: int) -> int:
    return getattr(logging, (name or "").upper(), default)


def _console_handler(level: int) -> logging.Handler:
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setLevel(level)
    return handler


def _file_handler(log_file: str | Path, level: int, log_format: str) -> logging.Handler:
    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    if log_format == "json":
        handler.setFormatter(JSONFileFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def configure_logging(
    level: str = "WARNING",
    log_format: str = "json",
    log_file: str | Path | None = None,
    file_level: str | None = None,
) -> None:
    """Configure structlog and the root logger handlers.

    Calling it again replaces the handlers of the previous call, so the CLI
    can reconfigure once the configuration file is loaded.

    Args:
        level: Console log level
        log_format: Log file format, ``json`` or ``console``
        log_file: Log file path; no file logging when omitted
        file_level: Log file level (DEBUG by default)
    """
    console_level = _level(level, logging.WARNING)
    file_log_level = _level(file_level, logging.DEBUG)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    root_logger.addHandler(_console_handler(console_level))
    if log_file:
        root_logger.addHandler(_file_handler(log_file, file_log_level, log_format))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            add_app_context,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            # Colors are left to the rich handler
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            min(console_level, file_log_level) if log_file else console_level
        ),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Logger for ``name`` (usually ``__name__``)."""
    return structlog.get_logger(name)


def log_api_request(
    logger: structlog.stdlib.BoundLogger,
    method: str,
    url: str,
    status_code: int,
    duration_ms: float,
) -> None:
    """Log one store API call; client errors are warnings, the rest debug."""
    fields = {
        "method": method,
        "url": url,
        "status_code": status_code,
        "duration_ms": round(duration_ms, 2),
    }
    if status_code < 400:
        logger.debug("api_request_success", **fields)
    elif status_code < 500:
        # 404 is the normal "not found" answer of key lookups
        log = logger.debug if status_code == 404 else logger.warning
        log("api_request_client_error", **fields)
    else:
        logger.info("api_request_server_error", **fields)


def log_file_progress(
    logger: structlog.stdlib.BoundLogger, file_name: str, completed: int, total: int
) -> None:
    logger.info(
        "import_progress",
        file=file_name,
        completed=completed,
        total=total,
        percentage=round(completed / total * 100, 2) if total else 0,
    )


def log_error(
    logger: structlog.stdlib.BoundLogger, error: Exception, context: str, **extra: Any
) -> None:
    """Log an unexpected error with its traceback."""
    logger.error(
        "error_occurred",
        error_type=type(error).__name__,
        error_message=str(error),
        context=context,
        exc_info=True,
        **extra,
    )


def sanitize_payload(payload: Any, max_depth: int = 10) -> Any:
    """Copy of ``payload`` with sensitive values redacted.

    Generated user passwords and store credentials are replaced by
    ``[REDACTED]`` at any nesting level.
    """
    if max_depth <= 0:
        return "[MAX_DEPTH_EXCEEDED]"

    if isinstance(payload, dict):
        return {
            key: "[REDACTED]"
            if any(sensitive in str(key).lower() for sensitive in SENSITIVE_KEYS)
            else sanitize_payload(value, max_depth - 1)
            for key, value in payload.items()
        }
    if isinstance(payload, list):
        return [sanitize_payload(item, max_depth - 1) for item in payload]
    return payload


def truncate_payload(payload: Any, max_size: int = 10000) -> str:
    """JSON text of ``payload``, cut at ``max_size`` characters."""
    try:
        text = json.dumps(payload, indent=2, default=str)
    except (TypeError, ValueError):
        text = str(payload)

    if len(text) > max_size:
        return f"{text[:max_size]}\n... [TRUNCATED - {len(text)} total chars]"
    return text


def should_log_payloads(logger: structlog.stdlib.BoundLogger, enabled: bool) -> bool:
    """Payloads are logged only when enabled in config and DEBUG is on."""
    if not enabled:
        return False
    try:
        return logger.is_enabled_for(logging.DEBUG)
    except AttributeError:
        return True
