"""Logging for the marketplace.

Records flow through the standard library so uvicorn, Protean and our own
modules share handlers. structlog builds each event: request context bound by
the API layer, a timestamp and the call site, then a renderer picked per
environment (JSON lines for deployed environments, rich console output
elsewhere). Bearer tokens and other credentials never reach a handler.

Environment variables:

``LOG_LEVEL``   overrides the per-environment default level.
``LOG_DIR``     directory for ``marketplace.log`` and ``marketplace_error.log``.
``LOG_FILES``   ``0`` turns the file handlers off. Tests run without them.
"""

import logging
import logging.handlers
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import structlog

DEFAULT_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}
JSON_ENVIRONMENTS = frozenset({"production", "staging"})

# Third-party loggers that drown out marketplace events below WARNING.
QUIET_LOGGERS = ("uvicorn.access", "asyncio", "sqlalchemy.engine")

SENSITIVE_KEYS = frozenset({"authorization", "token", "access_token", "password", "secret"})
REDACTED = "***"

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


def current_env() -> str:
    return (os.getenv("ENV") or os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


@dataclass(frozen=True)
class LogSettings:
    env: str
    level: str
    log_dir: Path
    to_files: bool

    @classmethod
    def from_env(cls) -> "LogSettings":
        env = current_env()
        to_files = os.getenv("LOG_FILES", "0" if env == "test" else "1") not in ("0", "false", "no")
        return cls(
            env=env,
            level=os.getenv("LOG_LEVEL", DEFAULT_LEVELS.get(env, "INFO")).upper(),
            log_dir=Path(os.getenv("LOG_DIR", "logs")),
            to_files=to_files,
        )

    @property
    def renders_json(self) -> bool:
        return self.env in JSON_ENVIRONMENTS


def redact_secrets(logger: Any, method_name: str, event_dict: dict) -> dict:
    """structlog processor: mask credential-like keys before rendering."""
    for key in event_dict.keys() & SENSITIVE_KEYS:
        event_dict[key] = REDACTED
    return event_dict


def _rotating_file(path: Path, level: int | str) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def build_handlers(settings: LogSettings) -> list[logging.Handler]:
    """Console always; the full and error-only rotating files when enabled."""
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(settings.level)
    handlers = [console]

    if settings.to_files:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(_rotating_file(settings.log_dir / "marketplace.log", settings.level))
        handlers.append(_rotating_file(settings.log_dir / "marketplace_error.log", logging.ERROR))
    return handlers


def _event_processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.MODULE,
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ]
        ),
    ]


def _renderer(settings: LogSettings):
    if settings.renders_json:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(
        colors=sys.stdout.isatty(),
        exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=5),
    )


def configure_logging(settings: LogSettings | None = None) -> LogSettings:
    """Install handlers on the root logger and configure structlog.

    Safe to call again, each call replaces the previous handlers.
    """
    settings = settings or LogSettings.from_env()

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    root.setLevel(settings.level)
    for handler in build_handlers(settings):
        root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[*_event_processors(), _renderer(settings)],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return settings


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def add_context(**kwargs: Any) -> None:
    """Bind request-scoped values (caller identity, role) to every later event."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
