"""
Shared logging configuration for the HollyMarket Access Gateway.

Events are rendered by structlog through the stdlib logging bridge. Request
and user correlation lives in structlog's context variables, so anything
logged while a request is in flight carries its ``request_id`` (and the
caller's ``user_id`` once authenticated).
"""

import logging
import sys
import uuid
from typing import Any, Dict, Optional

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars, merge_contextvars

MASK = "***"

# Event keys whose values are credentials
SENSITIVE_KEYS = frozenset({
    "access_token",
    "apikey",
    "authorization",
    "passphrase",
    "secret",
    "token",
})


def _level(log_level: str) -> int:
    level = logging.getLevelName(log_level.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(service_name: str, log_level: str = "info", json_output: bool = True) -> None:
    """Route structlog through stdlib logging, rendering JSON lines or console output."""
    level = _level(log_level)

    shared_processors = [
        merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        tag_service,
        mask_credentials,
    ]
    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=shared_processors + [renderer],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    logging.getLogger(service_name).setLevel(level)


def tag_service(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Derive ``service`` from the dotted logger name (``gateway.routes.auth`` -> ``gateway``)."""
    name = event_dict.get("logger") or ""
    if "." in name:
        event_dict.setdefault("service", name.split(".", 1)[0])
    return event_dict


def mask_credentials(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in event_dict.items():
        if value and key.lower() in SENSITIVE_KEYS:
            event_dict[key] = MASK
    return event_dict


def set_request_id(request_id: Optional[str] = None) -> str:
    """Bind the request ID for the current request, generating one if absent."""
    request_id = request_id or str(uuid.uuid4())
    bind_contextvars(request_id=request_id)
    return request_id


def set_user_context(user_id: Optional[str] = None):
    if user_id:
        bind_contextvars(user_id=user_id)


def clear_context():
    clear_contextvars()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
