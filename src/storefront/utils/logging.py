"""Logging configuration for the storefront and admin console.

Standard library logging owns the sinks: the console, plus rotating files
when a log directory is configured. structlog renders key/value events on
top of it. Customer contact details and the backend key never reach a sink.
"""

import logging
import logging.handlers
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

LEVELS_BY_ENVIRONMENT = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

REDACTED = "***"
SENSITIVE_KEYS = frozenset(
    {
        "apikey",
        "authorization",
        "backend_key",
        "customer_email",
        "customer_phone",
        "shipping_address",
    }
)

# Chatty third-party loggers: the REST adapter's HTTP stack and the domain framework.
QUIET_LOGGERS = ("protean", "requests", "urllib3", "asyncio", "uvicorn.access")

MAX_LOG_BYTES = 10 * 1024 * 1024


@dataclass(frozen=True)
class LogSettings:
    environment: str = "development"
    level: str = "DEBUG"
    directory: Path | None = Path("logs")
    file_prefix: str = "storefront"

    @property
    def structured(self) -> bool:
        """JSON lines instead of the colour console renderer."""
        return self.environment in ("production", "staging")

    @classmethod
    def from_env(cls) -> "LogSettings":
        environment = (
            os.getenv("ENV") or os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development"
        ).lower()
        level = os.getenv("STORE_LOG_LEVEL") or os.getenv("LOG_LEVEL") or LEVELS_BY_ENVIRONMENT.get(environment, "INFO")
        # An empty STORE_LOG_DIR keeps logging on the console only.
        directory = os.getenv("STORE_LOG_DIR", "logs")
        return cls(
            environment=environment,
            level=level.upper(),
            directory=Path(directory) if directory else None,
            file_prefix=os.getenv("STORE_LOG_FILE_PREFIX", "storefront"),
        )


def redact_sensitive(_logger: Any, _method: str, event_dict: dict) -> dict:
    """structlog processor masking customer contact details and credentials."""
    for key in event_dict.keys() & SENSITIVE_KEYS:
        event_dict[key] = REDACTED
    return event_dict


def _rotating_file(path: Path, level: int | str) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=MAX_LOG_BYTES,
        backupCount=5,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(settings: LogSettings) -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(settings.level)
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(settings.level)
    root_logger.addHandler(console_handler)

    if settings.directory is not None:
        settings.directory.mkdir(parents=True, exist_ok=True)
        root_logger.addHandler(_rotating_file(settings.directory / f"{settings.file_prefix}.log", settings.level))
        root_logger.addHandler(
            _rotating_file(settings.directory / f"{settings.file_prefix}_error.log", logging.ERROR)
        )

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_structlog(settings: LogSettings) -> None:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        redact_sensitive,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.structured:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2),
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(settings: LogSettings | None = None) -> LogSettings:
    """Configure stdlib sinks and structlog rendering. Returns the settings applied."""
    settings = settings or LogSettings.from_env()
    setup_stdlib_logging(settings)
    setup_structlog(settings)
    return settings


def bind_request_context(method: str, path: str, **extra: Any) -> None:
    """Attach the current HTTP request to every event logged while it is handled."""
    structlog.contextvars.bind_contextvars(method=method, path=path, **extra)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
