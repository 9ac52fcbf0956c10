"""
httpservice - traced outbound HTTP client for a single downstream service
"""

from .context import CallContext
from .exceptions import (
    ConfigurationError,
    ContextCancelledError,
    ContextError,
    DeadlineExceededError,
    HTTPServiceError,
    RequestBuildError,
)
from .http_client import TracedTransport
from .service import HTTP, HTTPService, new_http_service
from .tracing import ClientTrace, create_tracer_provider

__all__ = [
    "HTTP",
    "CallContext",
    "ClientTrace",
    "ConfigurationError",
    "ContextCancelledError",
    "ContextError",
    "DeadlineExceededError",
    "HTTPService",
    "HTTPServiceError",
    "RequestBuildError",
    "TracedTransport",
    "create_tracer_provider",
    "new_http_service",
]
