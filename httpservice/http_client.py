"""HTTP transport abstraction for dependency injection and testability."""

import requests
from opentelemetry import propagate, trace

from .logging_config import get_module_logger

logger = get_module_logger("http_client")


class TracedTransport:
    """
    requests.Session wrapper that sends prepared requests.

    This abstraction enables:
    - Dependency injection for testing
    - W3C trace context propagation on every outgoing request
    - Centralized session defaults (e.g. User-Agent)
    """

    def __init__(self, session: requests.Session | None = None, user_agent: str | None = None):
        """
        Args:
            session: Optional pre-configured session (a new one is created if None)
            user_agent: Optional default User-Agent header for the session
        """
        self.session = session if session is not None else requests.Session()
        if user_agent:
            self.session.headers["User-Agent"] = user_agent

    def prepare(self, request: requests.Request) -> requests.PreparedRequest:
        """
        Prepare a request, merging session defaults (headers, hooks, cookies).

        The URL must have a scheme the session has an adapter for.

        Raises:
            requests.exceptions.MissingSchema, InvalidSchema, InvalidURL: on malformed URLs
        """
        prepared = self.session.prepare_request(request)
        # prepare_request lets non-http schemes through unchecked
        self.session.get_adapter(prepared.url or "")
        return prepared

    def send(
        self, prepared: requests.PreparedRequest, timeout: float | None = None
    ) -> requests.Response:
        """
        Send a prepared request.

        Trace context of the current span is injected into the request headers
        and the span is annotated with the standard HTTP attributes.

        Args:
            prepared: Request built by prepare()
            timeout: Optional request timeout in seconds

        Returns:
            requests.Response object, unmodified
        """
        propagate.inject(prepared.headers)

        span = trace.get_current_span()
        span.set_attribute("http.request.method", prepared.method or "")
        span.set_attribute("url.full", prepared.url or "")

        response = self.session.send(prepared, timeout=timeout)

        span.set_attribute("http.response.status_code", response.status_code)
        logger.debug(f"{prepared.method} {prepared.url} -> HTTP {response.status_code}")
        return response

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "TracedTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
