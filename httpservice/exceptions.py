"""
Custom exceptions for httpservice

Transport failures are not wrapped: they surface as the native
requests.exceptions.RequestException subclasses.
"""


class HTTPServiceError(Exception):
    """Base exception for all httpservice errors"""

    pass


class RequestBuildError(HTTPServiceError):
    """
    Raised when an outgoing request cannot be constructed.

    This includes:
    - Missing URL scheme (e.g., "svc/users" instead of "http://svc/users")
    - Unsupported URL scheme
    - URLs with an invalid host or port
    """

    def __init__(self, message: str, url: str | None = None):
        self.url = url
        if url:
            super().__init__(f"Cannot build request for '{url}': {message}")
        else:
            super().__init__(f"Cannot build request: {message}")


class ContextError(HTTPServiceError):
    """Raised when the call context no longer permits dispatching a request"""

    pass


class ContextCancelledError(ContextError):
    """Raised when the call context was cancelled before dispatch"""

    def __init__(self, message: str = "context cancelled"):
        super().__init__(message)


class DeadlineExceededError(ContextError):
    """Raised when the call context deadline passed before dispatch"""

    def __init__(self, message: str = "context deadline exceeded", deadline: float | None = None):
        self.deadline = deadline
        super().__init__(message)


class ConfigurationError(HTTPServiceError):
    """
    Raised when required configuration values are missing or invalid.
    """

    def __init__(self, message: str, config_key: str | None = None):
        self.config_key = config_key
        if config_key:
            super().__init__(f"Configuration error for '{config_key}': {message}")
        else:
            super().__init__(f"Configuration error: {message}")
