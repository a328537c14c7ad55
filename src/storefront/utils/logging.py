"""Logging for the storefront.

Everything goes through structlog on top of stdlib logging, so library log
lines and domain log lines share handlers. The environment decides the
level and the renderer:

    PROTEAN_ENV / ENVIRONMENT   production, staging -> INFO, JSON lines
                                development         -> DEBUG, coloured console
                                test                -> WARNING
    LOG_LEVEL                   overrides the level
    LOG_DIR                     where rotating log files go (default ``logs``)

Password-reset tokens and bearer credentials never reach a handler: the
``redact_secrets`` processor masks them wherever they appear as keys.
"""

import logging
import logging.handlers
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

_LEVEL_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}
_STRUCTURED_ENVS = ("production", "staging")
_QUIET_LIBRARIES = ("protean", "urllib3", "asyncio", "sqlalchemy.engine", "httpx")

SECRET_KEYS = frozenset({"token", "reset_url", "authorization", "password"})
_MASK = "***"

_MAX_LOG_BYTES = 10 * 1024 * 1024
_LOG_BACKUPS = 5


@dataclass(frozen=True)
class LogSettings:
    env: str
    level: str
    log_dir: Path

    @property
    def structured(self) -> bool:
        return self.env in _STRUCTURED_ENVS

    @classmethod
    def from_env(cls, log_dir: str | None = None) -> "LogSettings":
        env = (os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()
        level = os.getenv("LOG_LEVEL", _LEVEL_BY_ENV.get(env, "INFO")).upper()
        return cls(env=env, level=level, log_dir=Path(log_dir or os.getenv("LOG_DIR", "logs")))


def redact_secrets(_logger, _method_name, event_dict: dict) -> dict:
    """structlog processor that masks credential-bearing keys."""
    for key in SECRET_KEYS.intersection(event_dict):
        if event_dict[key] is not None:
            event_dict[key] = _MASK
    return event_dict


def _rotating_handler(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=_MAX_LOG_BYTES,
        backupCount=_LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def _configure_handlers(settings: LogSettings, log_file_prefix: str) -> None:
    settings.log_dir.mkdir(parents=True, exist_ok=True)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(settings.level)

    root = logging.getLogger()
    root.setLevel(settings.level)
    root.handlers = [
        console,
        _rotating_handler(settings.log_dir / f"{log_file_prefix}.log", settings.level),
        _rotating_handler(settings.log_dir / f"{log_file_prefix}_error.log", logging.ERROR),
    ]

    for name in _QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)


def _processors(settings: LogSettings) -> list:
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_secrets,
        structlog.processors.StackInfoRenderer(),
    ]

    if settings.structured:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stdout.isatty(),
                exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=4),
            )
        )
    return processors


def configure_logging(log_dir: str | None = None, log_file_prefix: str = "storefront") -> LogSettings:
    """Wire stdlib handlers and structlog for the current environment."""
    settings = LogSettings.from_env(log_dir)
    _configure_handlers(settings, log_file_prefix)
    structlog.configure(
        processors=_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return settings


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(**kwargs: Any) -> None:
    """Attach values (request id, member id) to every log line of this request."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
