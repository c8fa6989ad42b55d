"""
Shared logging configuration for the PIN Checker Relay.
"""

import sys
import structlog
import logging
import uuid
from typing import Any, Dict, Optional
from contextvars import ContextVar

# Context variables for request and lookup correlation
request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
lookup_var: ContextVar[Optional[Dict[str, str]]] = ContextVar('lookup', default=None)


def configure_logging(service_name: str, log_level: str = "info") -> None:
    """Configure structured logging for a service."""

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            add_service_context,
            add_correlation_context,
            add_lookup_context,
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper()),
    )


def add_service_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add service context to log events."""
    # Logger names are "<service>.<component>"
    logger_name = event_dict.get("logger", "")
    if "." in logger_name:
        event_dict["service"] = logger_name.split(".")[0]

    return event_dict


def add_correlation_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add correlation context to log events."""
    request_id = request_id_var.get()
    if request_id:
        event_dict["request_id"] = request_id

    return event_dict


def add_lookup_context(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Add the taxpayer lookup in progress to log events."""
    lookup = lookup_var.get()
    if lookup:
        for key, value in lookup.items():
            event_dict.setdefault(key, value)

    return event_dict


def mask_taxpayer_id(taxpayer_id: Optional[str]) -> str:
    """Keep only the last three characters of an identifier."""
    if not taxpayer_id:
        return ""
    visible = taxpayer_id[-3:] if len(taxpayer_id) > 3 else ""
    return "*" * (len(taxpayer_id) - len(visible)) + visible


def bind_lookup(taxpayer_id: Optional[str], taxpayer_type: Optional[str]) -> None:
    """Bind the current lookup to subsequent log events, with the ID masked."""
    lookup_var.set({
        "taxpayer_id": mask_taxpayer_id(taxpayer_id),
        "taxpayer_type": taxpayer_type or "",
    })


def set_request_id(request_id: Optional[str] = None) -> str:
    """Set request ID in context."""
    if request_id is None:
        request_id = str(uuid.uuid4())
    request_id_var.set(request_id)
    return request_id


def clear_context():
    """Clear all context variables."""
    request_id_var.set(None)
    lookup_var.set(None)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
