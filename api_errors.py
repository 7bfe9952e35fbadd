# api_errors.py - exceptions raised by APIClient / APIResponse


class APIClientError(Exception):
    """Base class for every error raised by the client."""


class RequestBuildError(APIClientError, ValueError):
    """Base URL and path could not be combined into a valid request."""


class RequestSerializationError(APIClientError, TypeError):
    """Request body could not be encoded as JSON."""


class TransportError(APIClientError):
    """The underlying session failed to complete the call.

    Connection refused, timeouts, DNS and TLS failures all land here; the
    original requests exception is kept as ``__cause__``.
    """


class BodyReadError(APIClientError, IOError):
    """Response body could not be drained."""


class ResponseConsumedError(BodyReadError):
    """Response body was already read once."""


class ResponseParseError(APIClientError, ValueError):
    """Response body is not valid JSON or does not match the requested shape."""
