"""structlog setup for the web front-end.

Every event passes through ``redact_secrets`` before rendering so that provider
tokens, passwords and authorization headers never reach the log stream.
Request-scoped fields (short session id, method, path) are bound through
structlog contextvars by the session middleware.
"""

import logging
import sys
from typing import Any

import structlog

from itqan.core.config import get_settings

_configured = False

# Event keys whose values are replaced before rendering
SECRET_KEYS = frozenset({
    "access_token",
    "refresh_token",
    "id_token",
    "password",
    "client_secret",
    "authorization",
    "code",
})

_REDACTED = "***"


def redact_secrets(_logger: Any, _method: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    for key in event_dict.keys() & SECRET_KEYS:
        if event_dict[key]:
            event_dict[key] = _REDACTED
    return event_dict


def configure_logging(force: bool = False) -> None:
    global _configured
    if _configured and not force:
        return

    settings = get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_secrets,
    ]

    if settings.app_debug:
        renderer: list[structlog.types.Processor] = [structlog.dev.ConsoleRenderer(colors=True)]
    else:
        # One JSON object per line for the container log collector
        renderer = [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=shared_processors + renderer,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    # httpx logs full request URLs at INFO, including ?code= on the callback
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))
    _configured = True


def bind_request_context(session_id: str, method: str, path: str) -> None:
    """Attach request fields to every event logged while handling this request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(sid=session_id[:8], method=method, path=path)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    configure_logging()
    return structlog.get_logger(name)
