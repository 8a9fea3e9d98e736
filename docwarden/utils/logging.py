"""
Structured logging for docwarden.

Built on structlog with:
- Human-readable console output for development, JSON for production
- Request, user and agent context tracking via contextvars
- Redaction of secrets (API keys, tokens) before rendering

Usage:
    from docwarden.utils.logging import get_logger

    logger = get_logger(__name__)
    logger.info("permission_evaluated", agent_id=agent_id, permitted=True)
"""

import logging
import os
import sys
from contextvars import ContextVar

import structlog
from structlog.types import FilteringBoundLogger

# Context variables for request tracking
request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
user_id_var: ContextVar[str | None] = ContextVar("user_id", default=None)
agent_id_var: ContextVar[str | None] = ContextVar("agent_id", default=None)


SENSITIVE_KEYS = {
    "password",
    "api_key",
    "secret",
    "authorization",
    "access_token",
    "refresh_token",
}


def filter_sensitive_data(
    logger: FilteringBoundLogger, method_name: str, event_dict: dict
) -> dict:
    """Redact values whose key looks like a credential."""
    for key in list(event_dict.keys()):
        if any(sensitive in key.lower() for sensitive in SENSITIVE_KEYS):
            event_dict[key] = "***REDACTED***"
    return event_dict


def add_context(
    logger: FilteringBoundLogger, method_name: str, event_dict: dict
) -> dict:
    """Attach the current request/user/agent ids to the entry."""
    if request_id := request_id_var.get():
        event_dict.setdefault("request_id", request_id)
    if user_id := user_id_var.get():
        event_dict.setdefault("user_id", user_id)
    if agent_id := agent_id_var.get():
        event_dict.setdefault("agent_id", agent_id)

    return event_dict


def configure_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configure structlog with appropriate processors and renderers.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: If True, output JSON logs suitable for production
    """
    log_level = os.getenv("DOCWARDEN_LOG_LEVEL", log_level).upper()
    json_logs = os.getenv("DOCWARDEN_LOG_JSON", str(json_logs)).lower() in (
        "true",
        "1",
        "yes",
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level),
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        add_context,
        filter_sensitive_data,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_logs:
        processors.extend(
            [
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ]
        )
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=sys.stdout.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = "docwarden") -> FilteringBoundLogger:
    """
    Get a configured logger instance.

    Args:
        name: Logger name (typically __name__ of the module)
    """
    return structlog.get_logger(name)


def set_request_context(
    request_id: str | None = None,
    user_id: str | None = None,
    agent_id: str | None = None,
) -> None:
    """
    Set request context for logging.

    The values are included in every log entry emitted from the same
    async task or thread until cleared.
    """
    if request_id:
        request_id_var.set(request_id)
    if user_id:
        user_id_var.set(user_id)
    if agent_id:
        agent_id_var.set(agent_id)


def clear_request_context() -> None:
    """Clear request context."""
    request_id_var.set(None)
    user_id_var.set(None)
    agent_id_var.set(None)


configure_logging()

logger = get_logger("docwarden")


__all__ = [
    "get_logger",
    "configure_logging",
    "set_request_context",
    "clear_request_context",
    "logger",
]
