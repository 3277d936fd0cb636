"""Custom exception hierarchy for the storefront proxy."""


class ProxyError(Exception):
    """Base exception for all proxy errors."""


class ConfigurationError(ProxyError):
    """Raised when configuration is missing or invalid."""


class UpstreamTransportError(ProxyError):
    """Raised when the upstream could not be reached at all.

    Covers DNS failures, refused connections, timeouts and read errors.
    Callers never see this directly; the forwarder converts it to a 500.

    Attributes:
        message: Error message
        method: HTTP method of the failed request
        url: Upstream URL that was being requested
    """

    def __init__(
        self,
        message: str,
        method: str | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url


class BadRequestInput(ProxyError):
    """Raised when a required request parameter is missing."""
