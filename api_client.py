# api_client.py - minimal fluent HTTP client wrapper around requests
import json
from urllib.parse import urlsplit

import requests
from pydantic import TypeAdapter, ValidationError
from requests import Request, exceptions as req_exceptions
from requests.structures import CaseInsensitiveDict
from requests.utils import check_header_validity

from api_errors import (
    BodyReadError,
    RequestBuildError,
    RequestSerializationError,
    ResponseConsumedError,
    ResponseParseError,
    TransportError,
)
from utils.config import load_settings
from utils.logger import get_logger, redact_headers

logger = get_logger("api-client")


class APIClient:
    """Per base URL request builder.

    Headers added with :meth:`add_header` stick to the client and go out with
    every later call. The header mapping is mutated in place and is not
    locked: callers sharing one client across threads must serialize
    ``add_header`` against in-flight calls themselves. Each call copies the
    headers into its own prepared request, so later mutations never touch a
    request already sent.

    The session is borrowed, not owned. Its adapters, TLS settings and
    lifetime stay with the caller.
    """

    def __init__(self, base_url, session=None, timeout=None):
        try:
            parts = urlsplit(base_url)
        except (TypeError, ValueError) as e:
            raise RequestBuildError(f"invalid base URL {base_url!r}: {e}") from e
        if not parts.scheme or not parts.netloc:
            raise RequestBuildError(f"base URL needs a scheme and host, got {base_url!r}")

        self.base_url = base_url.rstrip('/')
        self.session = session if session is not None else requests.Session()
        self.headers = CaseInsensitiveDict()
        self.timeout = None
        self.set_timeout(timeout)

    @classmethod
    def from_env(cls, session=None):
        settings = load_settings()
        return cls(settings.base_url, session=session, timeout=settings.timeout)

    def add_header(self, key, value):
        if not key:
            raise ValueError("header name must not be empty")
        self.headers[key] = value
        return self

    def set_timeout(self, timeout):
        """Timeout handed to the session on every send (seconds, or a (connect, read) tuple)."""
        values = timeout if isinstance(timeout, tuple) else (timeout,)
        if any(v is not None and v < 0 for v in values):
            raise ValueError(f"timeout must not be negative, got {timeout!r}")
        self.timeout = timeout
        return self

    def _url(self, endpoint):
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def get(self, endpoint, params=None):
        return self._execute("GET", endpoint, params=params)

    def post(self, endpoint, body=None):
        try:
            payload = json.dumps(body, allow_nan=False).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise RequestSerializationError(f"request body is not JSON serializable: {e}") from e
        return self._execute("POST", endpoint, data=payload)

    def _execute(self, method, endpoint, params=None, data=None):
        if not isinstance(endpoint, str):
            raise RequestBuildError(f"path must be a string, got {type(endpoint).__name__}")
        req = Request(method, self._url(endpoint), params=params, data=data)
        try:
            prepared = self.session.prepare_request(req)
        except (req_exceptions.RequestException, ValueError) as e:
            raise RequestBuildError(f"cannot build {method} {req.url}: {e}") from e

        # headers go on after construction, once per call
        for key, value in self.headers.items():
            try:
                check_header_validity((key, value))
            except (req_exceptions.RequestException, ValueError) as e:
                raise RequestBuildError(f"invalid header {key!r}: {e}") from e
            prepared.headers[key] = value

        logger.debug("%s %s", prepared.method, prepared.url)
        logger.debug("REQ-HEADERS %s", redact_headers(prepared.headers))

        try:
            resp = self.session.send(prepared, timeout=self.timeout, stream=True)
        except req_exceptions.RequestException as e:
            raise TransportError(f"{method} {prepared.url} failed: {e}") from e

        logger.debug("%s %s -> status %s", prepared.method, prepared.url, resp.status_code)
        return APIResponse(resp)


class APIResponse:
    """Status code plus a response body that can be read exactly once."""

    def __init__(self, response):
        self._response = response
        self._consumed = False

    @property
    def status_code(self):
        return self._response.status_code

    @property
    def headers(self):
        return self._response.headers

    @property
    def consumed(self):
        return self._consumed

    def close(self):
        """Release the body without reading it."""
        self._consumed = True
        self._response.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def read_raw(self):
        if self._consumed:
            raise ResponseConsumedError("response body was already read")
        self._consumed = True
        try:
            return self._response.content
        except (req_exceptions.RequestException, OSError) as e:
            raise BodyReadError(f"failed to read response body: {e}") from e
        finally:
            self._response.close()

    def text(self):
        return self.read_raw().decode("utf-8", errors="replace")

    def json(self, shape=None):
        """Parse the body as JSON, optionally validating it against ``shape``.

        ``shape`` is anything pydantic can build a TypeAdapter for: builtin
        types, ``list[int]``, dataclasses, TypedDicts, BaseModel subclasses.
        Values are coerced in pydantic's lax mode and unknown object keys are
        ignored. Raises ResponseParseError when the body is not JSON or does
        not fit the shape. The body is released before parsing starts.
        """
        raw = self.read_raw()
        try:
            value = json.loads(raw)
        except ValueError as e:
            raise ResponseParseError(f"response body is not valid JSON: {e}") from e
        if shape is None:
            return value
        try:
            return TypeAdapter(shape).validate_python(value)
        except ValidationError as e:
            raise ResponseParseError(f"response does not match {getattr(shape, '__name__', shape)}: {e}") from e
