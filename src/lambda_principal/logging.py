"""Structured logging for lambda-principal, built on structlog.

Library events go through structlog to stdlib ``logging`` loggers named after
the emitting module (``lambda_principal.*``). Nothing is printed unless the
host enables those loggers, so a Principal never writes to stdout on its own.

``configure_logging()`` installs the processor chain: it adds the logger
name, level and timestamp, and swaps any Principal in the event for its
``log_context()`` summary. Extra attribute values never reach the output.

Usage:
    from lambda_principal.logging import configure_logging, get_logger

    configure_logging()
    logger = get_logger(__name__)
    logger.info("access_denied", principal=principal, required_role="admin")
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from collections.abc import MutableMapping

Processor = structlog.types.Processor

LIBRARY_LOGGER = "lambda_principal"
REDACTED_VALUE: str = "***REDACTED***"

# Substrings marking an event key whose value must not be logged.
_SENSITIVE_MARKERS = ("password", "token", "secret", "credential", "api_key")

_VALID_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


class LoggingSettings(BaseSettings):
    """Library logging configuration read from the environment.

    Environment Variables:
        PRINCIPAL_LOG_LEVEL: Level applied to the ``lambda_principal`` loggers.
        PRINCIPAL_JSON_LOGS: Render events as JSON instead of console text.

    Example:
        >>> LoggingSettings(log_level="debug").log_level_int
        10
    """

    model_config = SettingsConfigDict(
        env_prefix="PRINCIPAL_",
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        description="Level applied to the lambda_principal loggers",
    )
    json_logs: bool = Field(
        default=False,
        description="Render events as JSON",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        return v.upper() if isinstance(v, str) else str(v)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        if v not in _VALID_LEVELS:
            msg = f"log_level must be one of {sorted(_VALID_LEVELS)}"
            raise ValueError(msg)
        return v

    @property
    def log_level_int(self) -> int:
        return getattr(logging, self.log_level, logging.INFO)


@runtime_checkable
class LogContextProvider(Protocol):
    """Value that knows how to summarize itself for a log event."""

    def log_context(self) -> dict[str, Any]: ...


class PrincipalProcessor:
    """Structlog processor that keeps identity data log-safe.

    - A value offering ``log_context()`` (a Principal) is replaced by that
      summary: username, roles and attribute names.
    - A key containing a sensitive marker (``password``, ``token``, ...) has its
      value replaced by ``REDACTED_VALUE``.

    Example:
        >>> PrincipalProcessor()(None, "info", {"event": "x", "principal": p})
        {'event': 'x', 'principal': {'username': 'jdoe', 'roles': ['admin'], 'attribute_names': []}}
    """

    def __call__(
        self,
        logger: Any,
        method_name: str,
        event_dict: MutableMapping[str, Any],
    ) -> MutableMapping[str, Any]:
        for key, value in list(event_dict.items()):
            if is_sensitive_key(key):
                event_dict[key] = REDACTED_VALUE
            elif isinstance(value, LogContextProvider):
                event_dict[key] = value.log_context()
        return event_dict


def is_sensitive_key(key: str) -> bool:
    """Check if an event key names a secret (case-insensitive substring match)."""
    key_lower = key.lower()
    return any(marker in key_lower for marker in _SENSITIVE_MARKERS)


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Return the process-wide LoggingSettings.

    Clear with ``get_logging_settings.cache_clear()`` in tests.
    """
    return LoggingSettings()


def configure_logging(settings: LoggingSettings | None = None) -> None:
    """Install the structlog processor chain and set the library logger level.

    Output is handed to stdlib logging as a rendered string. Handlers and
    destinations stay under the host's control. Loggers are not cached, so
    module-level loggers follow a later reconfiguration.

    Args:
        settings: Explicit settings. Loaded from the environment when omitted.
    """
    if settings is None:
        settings = get_logging_settings()

    renderer: Processor = (
        structlog.processors.JSONRenderer()
        if settings.json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            PrincipalProcessor(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(settings.log_level_int),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    logging.getLogger(LIBRARY_LOGGER).setLevel(settings.log_level_int)


def get_logger(name: str | None = None) -> structlog.typing.WrappedLogger:
    """Return a lazy structlog logger writing to the stdlib logger ``name``.

    Defaults to the ``lambda_principal`` logger when no name is given. The
    processor chain is resolved per call, so loggers created at import time
    honor a later ``configure_logging()``.
    """
    return structlog.wrap_logger(logging.getLogger(name or LIBRARY_LOGGER))
