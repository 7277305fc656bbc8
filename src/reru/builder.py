"""Fluent request builder.

:class:`RequestBuilder` accumulates a URL, method, headers, query parameters
and an optional body through chained calls, then hands the result off in one
of three terminal calls:

- :meth:`~RequestBuilder.request` -- returns an immutable
  :class:`~reru.models.PreparedRequest`.
- :meth:`~RequestBuilder.send` -- prepares and sends, returning a
  :class:`~reru.client.response.Response`.
- :meth:`~RequestBuilder.asend` -- the same over :class:`httpx.AsyncClient`.

A terminal call consumes the builder. Any further call on it raises
:class:`~reru.exceptions.BuilderConsumedError`.

Body policy: a request carries at most one body, and the last ``body_*`` call
wins. Each one also sets ``Content-Type``; a later :meth:`~RequestBuilder.header`
call can still override it. :meth:`~RequestBuilder.body_form` is the one
exception to "replace": it appends to a form body already in progress.

Example::

    import reru

    with (
        reru.post("https://example.test/post")
        .param("show_env", "1")
        .body_json(["a", "b"])
        .send()
    ) as resp:
        print(resp.json())
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional, Union

import httpx

from reru.client import asend_request, send_request
from reru.client.response import AsyncResponse, Response
from reru.exceptions import BuilderConsumedError, InvalidUrl
from reru.models import BodyKind, HTTPMethod, PreparedRequest, RequestConfig
from reru.serializer import JSON_CONTENT_TYPE, serialize

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
OCTET_STREAM = "application/octet-stream"

QueryValue = Union[str, int, float, bool, None]
URLTypes = Union[str, httpx.URL]


def parse_url(url: URLTypes) -> httpx.URL:
    """Parse *url* into an absolute :class:`httpx.URL`.

    Raises:
        InvalidUrl: If *url* is not a string, fails to parse, or lacks a
            scheme or host.
    """
    if not isinstance(url, (str, httpx.URL)):
        raise InvalidUrl(f"URL must be a string, got {type(url).__name__}", url)
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise InvalidUrl(f"Invalid URL {str(url)!r}: {exc}", url) from exc
    if not parsed.scheme:
        raise InvalidUrl(f"Invalid URL {str(url)!r}: missing scheme", url)
    if not parsed.host:
        raise InvalidUrl(f"Invalid URL {str(url)!r}: missing host", url)
    return parsed


class RequestBuilder:
    """Accumulates request parts through chained calls.

    Args:
        method: An :class:`~reru.models.HTTPMethod` or a case-insensitive
            method name.
        url: Absolute URL to send the request to. Any query string it
            already has is kept, and :meth:`param` pairs are appended to it.

    Raises:
        InvalidMethod: If *method* is not a known HTTP method.
        InvalidUrl: If *url* is not an absolute URL.
    """

    def __init__(self, method: HTTPMethod | str, url: URLTypes) -> None:
        self._method = HTTPMethod.parse(method)
        self._url = parse_url(url)
        self._headers = httpx.Headers()
        self._params: list[tuple[str, QueryValue]] = []
        self._body_kind = BodyKind.NONE
        self._body: Optional[bytes] = None
        self._form: list[tuple[str, str]] = []
        self._consumed = False

    def __repr__(self) -> str:
        return f"<RequestBuilder {self._method.value} {self._url}>"

    @property
    def method(self) -> HTTPMethod:
        return self._method

    @property
    def consumed(self) -> bool:
        """Whether a terminal call has already taken this builder."""
        return self._consumed

    def _ensure_open(self) -> None:
        if self._consumed:
            raise BuilderConsumedError(
                f"{self!r} was already finalized; build a new request instead"
            )

    # ------------------------------------------------------------------ #
    # Chaining
    # ------------------------------------------------------------------ #

    def param(self, key: str, value: QueryValue) -> RequestBuilder:
        """Append a query parameter. Repeated keys are all kept, in order."""
        self._ensure_open()
        self._params.append((key, value))
        return self

    def header(self, name: str, value: object) -> RequestBuilder:
        """Set header *name* to ``str(value)``, replacing any earlier value (case-insensitive)."""
        self._ensure_open()
        self._headers[name] = str(value)
        return self

    def headers(self, headers: Mapping[str, object]) -> RequestBuilder:
        """Set every header in *headers*, as repeated :meth:`header` calls would."""
        self._ensure_open()
        for name, value in headers.items():
            self._headers[name] = str(value)
        return self

    def body_json(self, value: Any) -> RequestBuilder:
        """Serialize *value* as JSON and use it as the body.

        Sets ``Content-Type: application/json``.

        Raises:
            SerializationError: If *value* cannot be serialized. The builder
                is left exactly as it was.
        """
        self._ensure_open()
        encoded = serialize(value)
        self._set_body(BodyKind.JSON, encoded, JSON_CONTENT_TYPE)
        return self

    def body_raw(self, data: bytes | str, content_type: str = OCTET_STREAM) -> RequestBuilder:
        """Use *data* verbatim as the body (``str`` is UTF-8 encoded)."""
        self._ensure_open()
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._set_body(BodyKind.RAW, bytes(data), content_type)
        return self

    def body_form(self, name: str, value: str) -> RequestBuilder:
        """Add a form field, sending the body as ``application/x-www-form-urlencoded``.

        Fields accumulate across calls. A JSON or raw body set earlier is
        discarded.
        """
        self._ensure_open()
        if self._body_kind is not BodyKind.FORM:
            self._set_body(BodyKind.FORM, None, FORM_CONTENT_TYPE)
        self._form.append((name, value))
        return self

    def _set_body(self, kind: BodyKind, data: Optional[bytes], content_type: str) -> None:
        self._body_kind = kind
        self._body = data
        self._form = []
        self._headers["Content-Type"] = content_type

    # ------------------------------------------------------------------ #
    # Terminal calls
    # ------------------------------------------------------------------ #

    def _build_url(self) -> httpx.URL:
        if not self._params:
            return self._url
        # Existing query text is kept byte-for-byte; new pairs go after it.
        extra = str(httpx.QueryParams(self._params))
        base, hash_, fragment = str(self._url).partition("#")
        if self._url.query:
            sep = "&"
        else:
            sep = "" if base.endswith("?") else "?"
        return httpx.URL(f"{base}{sep}{extra}{hash_}{fragment}")

    def _build_body(self) -> Optional[bytes]:
        if self._body_kind is BodyKind.FORM:
            return str(httpx.QueryParams(self._form)).encode("ascii")
        return self._body

    def request(self) -> PreparedRequest:
        """Finalize into an immutable :class:`~reru.models.PreparedRequest`.

        Consumes the builder.
        """
        self._ensure_open()
        prepared = PreparedRequest(
            method=self._method,
            url=str(self._build_url()),
            headers=tuple(self._headers.items()),
            body=self._build_body(),
            body_kind=self._body_kind,
        )
        self._consumed = True
        logger.debug("Prepared %s %s", prepared.method.value, prepared.url)
        return prepared

    def send(
        self,
        client: Optional[httpx.Client] = None,
        config: Optional[RequestConfig] = None,
    ) -> Response:
        """Finalize and send, returning a streaming :class:`~reru.client.response.Response`.

        Args:
            client: Optional caller-owned :class:`httpx.Client`.
            config: Settings for the one-off client used when *client* is
                ``None``.

        Raises:
            NetworkError: If the transport fails.
        """
        return send_request(self.request(), client=client, config=config)

    async def asend(
        self,
        client: Optional[httpx.AsyncClient] = None,
        config: Optional[RequestConfig] = None,
    ) -> AsyncResponse:
        """Async :meth:`send` over :class:`httpx.AsyncClient`."""
        return await asend_request(self.request(), client=client, config=config)


# --- Method shortcuts ---


def request(method: HTTPMethod | str, url: URLTypes) -> RequestBuilder:
    """Create a request builder for an arbitrary method."""
    return RequestBuilder(method, url)


def options(url: URLTypes) -> RequestBuilder:
    """Create an OPTIONS request."""
    return RequestBuilder(HTTPMethod.OPTIONS, url)


def get(url: URLTypes) -> RequestBuilder:
    """Create a GET request."""
    return RequestBuilder(HTTPMethod.GET, url)


def post(url: URLTypes) -> RequestBuilder:
    """Create a POST request."""
    return RequestBuilder(HTTPMethod.POST, url)


def put(url: URLTypes) -> RequestBuilder:
    """Create a PUT request."""
    return RequestBuilder(HTTPMethod.PUT, url)


def delete(url: URLTypes) -> RequestBuilder:
    """Create a DELETE request."""
    return RequestBuilder(HTTPMethod.DELETE, url)


def head(url: URLTypes) -> RequestBuilder:
    """Create a HEAD request."""
    return RequestBuilder(HTTPMethod.HEAD, url)


def trace(url: URLTypes) -> RequestBuilder:
    """Create a TRACE request."""
    return RequestBuilder(HTTPMethod.TRACE, url)


def connect(url: URLTypes) -> RequestBuilder:
    """Create a CONNECT request."""
    return RequestBuilder(HTTPMethod.CONNECT, url)


def patch(url: URLTypes) -> RequestBuilder:
    """Create a PATCH request."""
    return RequestBuilder(HTTPMethod.PATCH, url)
