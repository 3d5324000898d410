"""Structured logging for token operations."""

from __future__ import annotations

import logging
from typing import Any, MutableMapping, cast

import structlog

DEFAULT_LOG_LEVEL = "INFO"

_SENSITIVE_KEYS = frozenset({"secret", "key", "signature", "token"})


def redact_secrets(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Mask key material and raw tokens that slip into an event."""
    for name in list(event_dict):
        if name.lower() in _SENSITIVE_KEYS:
            event_dict[name] = "***"
    return event_dict


def setup_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Configure structlog for JSON output with contextvars support.

    The package never calls this on import; applications opt in.
    """
    log_level = coerce_log_level(level)

    structlog.reset_defaults()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            redact_secrets,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        cache_logger_on_first_use=True,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )

    logging.basicConfig(level=log_level, format="%(message)s")


def coerce_log_level(level: str) -> int:
    numeric = logging.getLevelName(level.upper())
    if isinstance(numeric, int):
        return numeric
    return logging.INFO


def get_logger(name: str | None = None) -> structlog.types.FilteringBoundLogger:
    return cast(structlog.types.FilteringBoundLogger, structlog.get_logger(name))


def bind_token_context(*, token_id: str | None = None, algorithm: str | None = None) -> None:
    """Attach token identifiers to every event logged in the current context."""
    values = {"tokenId": token_id, "algorithm": algorithm}
    structlog.contextvars.bind_contextvars(
        **{name: value for name, value in values.items() if value is not None}
    )


def clear_context(*keys: str) -> None:
    if keys:
        structlog.contextvars.unbind_contextvars(*keys)
    else:
        structlog.contextvars.clear_contextvars()
