"""
Outbound HTTP service client

Builds GET/POST requests against a base URL, merges query parameters and
headers, wraps every call in a client span and hands the request to the
transport. Responses and transport errors are returned unmodified.
"""

from collections.abc import Mapping
from typing import Any, Protocol
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

import requests
from opentelemetry import trace
from opentelemetry.trace import SpanKind, TracerProvider

from .config import Config, config
from .context import CallContext
from .exceptions import DeadlineExceededError, RequestBuildError
from .http_client import TracedTransport
from .logging_config import get_module_logger
from .tracing import ClientTrace

logger = get_module_logger("service")

Params = Mapping[str, Any]
Headers = Mapping[str, str]


class HTTP(Protocol):
    """Interface of the outbound HTTP service client"""

    def get(
        self, path: str, params: Params | None = None, *, ctx: CallContext | None = None
    ) -> requests.Response: ...

    def get_with_headers(
        self,
        path: str,
        params: Params | None = None,
        headers: Headers | None = None,
        *,
        ctx: CallContext | None = None,
    ) -> requests.Response: ...

    def post(
        self,
        path: str,
        params: Params | None = None,
        body: bytes = b"",
        *,
        ctx: CallContext | None = None,
    ) -> requests.Response: ...

    def post_with_headers(
        self,
        path: str,
        params: Params | None = None,
        body: bytes = b"",
        headers: Headers | None = None,
        *,
        ctx: CallContext | None = None,
    ) -> requests.Response: ...


def join_url(base_url: str, path: str, keep_bare_base: bool = False) -> str:
    """
    Join base URL and relative path with a single "/".

    Args:
        base_url: Service base URL, used as-is
        path: Relative path, used as-is
        keep_bare_base: Return base_url unchanged when path is empty

    Returns:
        Target URL (no slash collapsing or other normalization)
    """
    if keep_bare_base and path == "":
        return base_url
    return base_url + "/" + path


def encode_query_parameters(url: str, params: Params | None) -> str:
    """
    Merge params into the query string of url.

    Each key is set, not appended: for list/tuple values every element is set
    in turn, so only the last one survives. Other values use str(). Keys are
    emitted in sorted order.
    """
    parts = urlsplit(url)
    query = parse_qs(parts.query, keep_blank_values=True)

    for key, value in (params or {}).items():
        if isinstance(value, (list, tuple)):
            for item in value:
                query[key] = [str(item)]
        else:
            query[key] = [str(value)]

    encoded = urlencode(sorted(query.items()), doseq=True)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, encoded, parts.fragment))


def add_headers_to_request(request: requests.PreparedRequest, headers: Headers | None) -> None:
    """Set (overwrite) each header on the request."""
    for name, value in (headers or {}).items():
        request.headers[name] = value


class HTTPService:
    """
    Client for one downstream HTTP service.

    Holds only read-only state (base URL, transport, tracers), so a single
    instance can be used from many threads at once.
    """

    def __init__(
        self,
        base_url: str,
        transport: TracedTransport,
        tracer_provider: TracerProvider | None = None,
        config_obj: Config | None = None,
    ):
        """
        Args:
            base_url: Base URL every path is joined to
            transport: Transport executing the prepared requests
            tracer_provider: Provider for the client spans (global provider if None)
            config_obj: Config object (optional, uses global config if None)
        """
        if config_obj is None:
            config_obj = config
        if tracer_provider is None:
            tracer_provider = trace.get_tracer_provider()

        self._base_url = base_url
        self._transport = transport
        self._timeout = config_obj.get("service.timeouts.request", 30)
        self._tracers = {
            "GET": tracer_provider.get_tracer(
                config_obj.get("tracing.tracers.get", "http-client-get")
            ),
            "POST": tracer_provider.get_tracer(
                config_obj.get("tracing.tracers.post", "http-client-post")
            ),
        }

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def transport(self) -> TracedTransport:
        """Underlying transport, for operations beyond GET and POST"""
        return self._transport

    def get(
        self, path: str, params: Params | None = None, *, ctx: CallContext | None = None
    ) -> requests.Response:
        return self.get_with_headers(path, params, None, ctx=ctx)

    def get_with_headers(
        self,
        path: str,
        params: Params | None = None,
        headers: Headers | None = None,
        *,
        ctx: CallContext | None = None,
    ) -> requests.Response:
        """
        Send a GET request to base_url + "/" + path.

        Args:
            path: Relative path
            params: Optional query parameters
            headers: Optional headers, overriding session defaults. Trace
                context headers (traceparent, tracestate) are always replaced
                by those of the client span.
            ctx: Optional call context (cancellation, deadline, parent trace)

        Returns:
            requests.Response object, unmodified

        Raises:
            RequestBuildError: If the URL is malformed
            ContextError: If ctx is cancelled or past its deadline
            requests.exceptions.RequestException: On transport failure
        """
        url = join_url(self._base_url, path)
        return self._dispatch("GET", url, params, None, headers, ctx)

    def post(
        self,
        path: str,
        params: Params | None = None,
        body: bytes = b"",
        *,
        ctx: CallContext | None = None,
    ) -> requests.Response:
        return self.post_with_headers(path, params, body, None, ctx=ctx)

    def post_with_headers(
        self,
        path: str,
        params: Params | None = None,
        body: bytes = b"",
        headers: Headers | None = None,
        *,
        ctx: CallContext | None = None,
    ) -> requests.Response:
        """
        Send a POST request with body as payload.

        An empty path posts to base_url itself, without a trailing slash.
        Arguments, return value and errors are the same as get_with_headers().
        """
        url = join_url(self._base_url, path, keep_bare_base=True)
        return self._dispatch("POST", url, params, body, headers, ctx)

    def _dispatch(
        self,
        method: str,
        url: str,
        params: Params | None,
        body: bytes | None,
        headers: Headers | None,
        ctx: CallContext | None,
    ) -> requests.Response:
        parent = ctx.parent if ctx is not None else None
        tracer = self._tracers[method]

        with tracer.start_as_current_span(url, context=parent, kind=SpanKind.CLIENT) as span:
            client_trace = ClientTrace(span)

            # MissingSchema, InvalidSchema and InvalidURL are ValueErrors too
            try:
                request = client_trace.attach(
                    requests.Request(method, encode_query_parameters(url, params), data=body)
                )
                prepared = self._transport.prepare(request)
            except ValueError as e:
                raise RequestBuildError(str(e), url=url) from e

            add_headers_to_request(prepared, headers)

            timeout = self._timeout
            if ctx is not None:
                ctx.raise_if_done()
                remaining = ctx.remaining()
                if remaining is not None:
                    if remaining <= 0:
                        raise DeadlineExceededError(deadline=ctx.deadline)
                    timeout = remaining if timeout is None else min(timeout, remaining)

            logger.debug(f"{method} {prepared.url}")
            client_trace.request_started(method, prepared.url or url)
            try:
                return self._transport.send(prepared, timeout=timeout)
            except requests.exceptions.RequestException as e:
                client_trace.request_failed(e)
                logger.warning(f"{method} {url} failed: {e}")
                raise


def new_http_service(
    base_url: str,
    *,
    transport: TracedTransport | None = None,
    tracer_provider: TracerProvider | None = None,
    config_obj: Config | None = None,
) -> HTTPService:
    """
    Create an HTTP service client with a tracing-enabled default transport

    Args:
        base_url: Base URL of the downstream service (e.g., "http://svc")
        transport: Optional transport (a TracedTransport is created if None)
        tracer_provider: Optional tracer provider (global provider if None)
        config_obj: Config object (optional, uses global config if None)

    Returns:
        Configured HTTPService
    """
    if config_obj is None:
        config_obj = config
    if transport is None:
        transport = TracedTransport(user_agent=config_obj.get("service.headers.user_agent"))

    return HTTPService(
        base_url, transport, tracer_provider=tracer_provider, config_obj=config_obj
    )
