"""
OpenTelemetry helpers for outbound calls

- create_tracer_provider() builds the provider injected into HTTPService
- ClientTrace records timing events of a single request on its span
"""

import time
from typing import Any

import requests
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor
from opentelemetry.trace import Span

from .exceptions import ConfigurationError

SUPPORTED_EXPORTERS = ("none", "console")


def create_tracer_provider(service_name: str = "httpservice", exporter: str = "none") -> TracerProvider:
    """
    Create an SDK tracer provider for the HTTP service

    Args:
        service_name: Value of the service.name resource attribute
        exporter: "none" to keep spans in-process, "console" to print finished spans

    Returns:
        Configured TracerProvider (not registered globally)

    Raises:
        ConfigurationError: If the exporter name is unknown
    """
    if exporter not in SUPPORTED_EXPORTERS:
        raise ConfigurationError(
            f"unknown exporter '{exporter}', expected one of {', '.join(SUPPORTED_EXPORTERS)}",
            config_key="tracing.exporter",
        )

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    if exporter == "console":
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    return provider


class ClientTrace:
    """
    Trace-event carrier attached to one outgoing request.

    Events are added to the span as the request progresses. requests does not
    expose DNS, connect or TLS callbacks, so the earliest observable point
    after dispatch is the arrival of the response headers. Only the first
    response is recorded; redirect hops that follow add no further events.
    """

    def __init__(self, span: Span):
        self.span = span
        self._started: float | None = None
        self._first_byte_seen = False

    def attach(self, request: requests.Request) -> requests.Request:
        """Register the response hook on the request and return it."""
        request.register_hook("response", self._on_response)
        return request

    def request_started(self, method: str, url: str) -> None:
        self._started = time.monotonic()
        self.span.add_event("http.request.start", {"http.request.method": method, "url.full": url})

    def request_failed(self, error: Exception) -> None:
        self.span.add_event(
            "http.request.error",
            {"exception.type": type(error).__name__, "elapsed_ms": self._elapsed_ms()},
        )

    def _elapsed_ms(self) -> float:
        if self._started is None:
            return 0.0
        return (time.monotonic() - self._started) * 1000

    def _on_response(self, response: requests.Response, *args: Any, **kwargs: Any) -> None:
        # Fires once headers are in, before the body is read
        if self._first_byte_seen:
            return
        self._first_byte_seen = True
        self.span.add_event(
            "http.response.first_byte",
            {
                "http.response.status_code": response.status_code,
                "elapsed_ms": self._elapsed_ms(),
            },
        )
