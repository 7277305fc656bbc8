"""Pydantic models shared across reru modules.

The models fall into two groups:

**Configuration models** -- transport settings passed through to
:mod:`httpx` unchanged: :class:`RequestConfig`.

**Request models** -- the vocabulary of the builder and the immutable value
it produces: :class:`HTTPMethod`, :class:`BodyKind`, and
:class:`PreparedRequest`.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Any, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

from reru.exceptions import InvalidMethod

if TYPE_CHECKING:
    from reru.client.response import AsyncResponse, Response


# --- Request vocabulary ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods a request can be built for."""

    OPTIONS = "OPTIONS"
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    TRACE = "TRACE"
    CONNECT = "CONNECT"
    PATCH = "PATCH"

    @classmethod
    def parse(cls, value: HTTPMethod | str) -> HTTPMethod:
        """Coerce *value* into an :class:`HTTPMethod`, ignoring case.

        Raises:
            InvalidMethod: If *value* does not name a known method.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise InvalidMethod(f"Unknown HTTP method: {value!r}")


class BodyKind(str, enum.Enum):
    """Which kind of payload a request carries."""

    NONE = "none"
    RAW = "raw"
    JSON = "json"
    FORM = "form"


# --- Configuration ---


class RequestConfig(BaseModel):
    """Transport settings applied when reru builds its own :class:`httpx.Client`.

    See :func:`~reru.config.resolve_request_config` for how these values are
    picked up from the environment and the user config file.
    """

    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    follow_redirects: bool = Field(default=True, description="Follow HTTP redirects")
    http2: bool = Field(default=False, description="Enable HTTP/2 negotiation")

    def client_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for :class:`httpx.Client` / :class:`httpx.AsyncClient`."""
        return {
            "timeout": self.timeout,
            "verify": self.verify_ssl,
            "follow_redirects": self.follow_redirects,
            "http2": self.http2,
        }


# --- Finalized request ---


class PreparedRequest(BaseModel):
    """Immutable description of a finalized request.

    Produced by :meth:`~reru.builder.RequestBuilder.request`. The URL already
    carries the query string built from every ``param`` call, and headers are
    stored as ordered ``(name, value)`` pairs so the value cannot be mutated
    after the fact.

    Example::

        prepared = reru.post("http://example.test/post").body_json([1]).request()
        prepared.content_type  # "application/json"
    """

    model_config = ConfigDict(frozen=True)

    method: HTTPMethod
    url: str
    headers: tuple[tuple[str, str], ...] = ()
    body: Optional[bytes] = None
    body_kind: BodyKind = BodyKind.NONE

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Return the value of header *name* (case-insensitive), or *default*."""
        wanted = name.lower()
        for key, value in self.headers:
            if key.lower() == wanted:
                return value
        return default

    @property
    def content_type(self) -> Optional[str]:
        return self.header("content-type")

    def to_httpx(self) -> httpx.Request:
        """Build the :class:`httpx.Request` handed to the transport."""
        return httpx.Request(
            self.method.value,
            self.url,
            headers=list(self.headers),
            content=self.body,
        )

    def send(
        self,
        client: Optional[httpx.Client] = None,
        config: Optional[RequestConfig] = None,
    ) -> Response:
        """Dispatch this request. See :func:`reru.client.send_request`."""
        from reru.client import send_request

        return send_request(self, client=client, config=config)

    async def asend(
        self,
        client: Optional[httpx.AsyncClient] = None,
        config: Optional[RequestConfig] = None,
    ) -> AsyncResponse:
        """Dispatch this request asynchronously. See :func:`reru.client.asend_request`."""
        from reru.client import asend_request

        return await asend_request(self, client=client, config=config)
