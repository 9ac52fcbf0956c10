#!/usr/bin/env python3
"""
httpservice - send a traced GET/POST to a downstream service

Debugging front end for HTTPService: builds the request exactly as a
service would, prints the response and optionally the client span.
"""

import argparse
import sys
from pathlib import Path

import requests

from httpservice import CallContext, HTTPServiceError, create_tracer_provider, new_http_service
from httpservice.config import config
from httpservice.logging_config import get_module_logger, setup_logging

logger = get_module_logger("main")


def _print_error_box(title: str, details: str, suggestions: str | None = None) -> None:
    """
    Print a formatted error box with title, details, and optional suggestions.

    Args:
        title: Error title/header
        details: Error details/description
        suggestions: Optional suggestions for resolving the error
    """
    logger.error("=" * 80)
    logger.error(title)
    logger.error("=" * 80)
    logger.error(details)
    if suggestions:
        logger.error("")
        logger.error(suggestions)
    logger.error("=" * 80)


def parse_key_values(pairs: list[str], separator: str, what: str) -> dict[str, list[str]]:
    """
    Parse "key<sep>value" arguments; repeated keys collect all values in order.

    Raises:
        argparse.ArgumentTypeError: If an item has no separator
    """
    result: dict[str, list[str]] = {}
    for pair in pairs:
        if separator not in pair:
            raise argparse.ArgumentTypeError(f"Invalid {what} '{pair}', expected KEY{separator}VALUE")
        key, value = pair.split(separator, 1)
        result.setdefault(key.strip(), []).append(value.strip())
    return result


def load_body(data: str | None, data_file: str | None) -> bytes:
    """Return the POST payload from --data or --data-file (empty if neither)."""
    if data_file:
        return Path(data_file).read_bytes()
    if data is not None:
        return data.encode("utf-8")
    return b""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Send a traced request to a downstream HTTP service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py get http://svc users -p id=7
  python main.py get http://svc x -H "Authorization: Bearer t"
  python main.py post http://svc "" --data payload --trace-console
        """,
    )
    parser.add_argument("method", choices=["get", "post"], help="HTTP method")
    parser.add_argument("base_url", help="Base URL of the service (e.g., http://svc)")
    parser.add_argument("path", nargs="?", default="", help="Path relative to the base URL")
    parser.add_argument(
        "-p",
        "--param",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Query parameter (repeatable; a repeated key keeps its last value)",
    )
    parser.add_argument(
        "-H",
        "--header",
        action="append",
        default=[],
        metavar="NAME: VALUE",
        help="Request header (repeatable)",
    )
    body_group = parser.add_mutually_exclusive_group()
    body_group.add_argument("--data", help="POST body as a string")
    body_group.add_argument("--data-file", help="Read POST body from a file")
    parser.add_argument(
        "--timeout",
        type=float,
        help=f"Call deadline in seconds (default: {config.get('service.timeouts.request', 30)})",
    )
    parser.add_argument(
        "--trace-console", action="store_true", help="Print finished spans to stdout"
    )
    parser.add_argument("--log-file", help="Write DEBUG log to this file")
    parser.add_argument("--verbose", action="store_true", help="Show headers and debug output")
    return parser


def main():
    parser = build_parser()
    args = parser.parse_args()

    setup_logging(Path(args.log_file) if args.log_file else None, verbose=args.verbose)

    if args.method == "get" and (args.data is not None or args.data_file):
        parser.error("--data/--data-file can only be used with post")

    try:
        params = parse_key_values(args.param, "=", "parameter")
        header_values = parse_key_values(args.header, ":", "header")
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))

    headers = {name: values[-1] for name, values in header_values.items()}

    exporter = "console" if args.trace_console else config.get("tracing.exporter", "none")
    try:
        provider = create_tracer_provider(
            config.get("tracing.service_name", "httpservice"), exporter
        )
    except HTTPServiceError as e:
        _print_error_box("CONFIGURATION ERROR", str(e))
        sys.exit(1)

    service = new_http_service(args.base_url, tracer_provider=provider)
    ctx = CallContext.with_timeout(args.timeout) if args.timeout is not None else None

    try:
        if args.method == "get":
            response = service.get_with_headers(args.path, params, headers, ctx=ctx)
        else:
            try:
                body = load_body(args.data, args.data_file)
            except OSError as e:
                _print_error_box("CANNOT READ BODY", str(e))
                sys.exit(1)
            response = service.post_with_headers(args.path, params, body, headers, ctx=ctx)
    except HTTPServiceError as e:
        _print_error_box("REQUEST ERROR", str(e), "Check the base URL and path.")
        sys.exit(1)
    except requests.exceptions.RequestException as e:
        _print_error_box(
            "TRANSPORT ERROR",
            f"{type(e).__name__}: {e}",
            "Check that the service is reachable and try again.",
        )
        sys.exit(1)
    finally:
        service.transport.close()
        provider.shutdown()

    print(f"HTTP {response.status_code} {response.reason}")
    if args.verbose:
        for name, value in response.headers.items():
            print(f"{name}: {value}")
        print()
    print(response.text)


if __name__ == "__main__":
    main()
