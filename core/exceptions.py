"""Custom exception hierarchy for the host-rewriting proxy."""


class ProxyError(Exception):
    """Base exception for all proxy errors."""

    @property
    def diagnostic(self) -> str:
        """Short caller-facing description, safe to put in a response body."""
        return f"Worker Error: {self}"


class ConfigurationError(ProxyError):
    """Raised when configuration is missing or invalid."""


class MalformedURLError(ProxyError):
    """Raised when the inbound request URL cannot be parsed."""


class OriginUnreachableError(ProxyError):
    """Raised when the request could not be forwarded to the origin.

    Attributes:
        message: Error message
        origin: Origin host the request was addressed to
    """

    def __init__(self, message: str, origin: str | None = None) -> None:
        super().__init__(message)
        self.origin = origin

    @property
    def diagnostic(self) -> str:
        return f"Worker Error: forwarding to origin failed: {self}"


class OriginTimeoutError(OriginUnreachableError):
    """Raised when the origin does not answer within the configured timeout."""

    def __init__(self, origin: str | None = None) -> None:
        super().__init__("timed out", origin=origin)
