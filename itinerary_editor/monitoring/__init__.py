"""
Observability for the itinerary editor engine.

Usage
-----
>>> from itinerary_editor.monitoring import configure_logging
>>> configure_logging()
"""

from itinerary_editor.monitoring.logging import (
    bind_session,
    clear_context,
    configure_logging,
    get_logger,
    redact_secrets,
    sanitize_headers,
    sanitize_log_message,
)

__all__ = [
    "bind_session",
    "clear_context",
    "configure_logging",
    "get_logger",
    "redact_secrets",
    "sanitize_headers",
    "sanitize_log_message",
]
