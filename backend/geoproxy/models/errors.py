"""Error taxonomy for the proxy.

Every error carries the HTTP status it maps to and a plain-text detail that
is sent back to the caller as-is.
"""


class GeoProxyError(Exception):
    """Base class for errors surfaced to the caller."""

    status_code: int = 500

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class RateLimited(GeoProxyError):
    """The client has used up its daily quota."""

    status_code = 429

    def __init__(self, detail: str = "Rate limit exceeded") -> None:
        super().__init__(detail)


class UpstreamError(GeoProxyError):
    """The provider answered with a non-success HTTP status."""

    status_code = 502

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message


class TransportError(GeoProxyError):
    """The provider call could not be completed (network, timeout, bad body)."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
