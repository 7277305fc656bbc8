"""Response handles returned by the send operations.

:class:`Response` and :class:`AsyncResponse` wrap a *streaming*
:class:`httpx.Response`: status and headers are available as soon as the call
returns, while the body is pulled from the transport on demand through a
file-like :meth:`Response.read` or by iterating chunks.

When reru created the :class:`httpx.Client` for a single call, the handle owns
it and closes it together with the stream, so a handle should always be
closed (or used as a context manager).

See Also:
    :mod:`reru.client` -- the dispatch functions producing these handles.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterator
from typing import Any, Optional

import httpx

from reru.exceptions import NetworkError
from reru.serializer import deserialize

logger = logging.getLogger(__name__)


class _ResponseMeta:
    """Status line and header accessors shared by both handles."""

    _response: httpx.Response

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def reason_phrase(self) -> str:
        return self._response.reason_phrase

    @property
    def headers(self) -> httpx.Headers:
        """Response headers (case-insensitive mapping)."""
        return self._response.headers

    @property
    def url(self) -> str:
        """Final URL, after any redirects the transport followed."""
        return str(self._response.url)

    @property
    def http_version(self) -> str:
        return self._response.http_version

    @property
    def is_success(self) -> bool:
        return self._response.is_success

    @property
    def encoding(self) -> str:
        return self._response.encoding or "utf-8"

    @property
    def httpx_response(self) -> httpx.Response:
        """The wrapped transport response, for callers needing more detail."""
        return self._response

    def __repr__(self) -> str:
        return f"<{type(self).__name__} [{self.status_code} {self.reason_phrase}]>"


class Response(_ResponseMeta):
    """Readable handle over a streaming response body.

    Args:
        response: A :class:`httpx.Response` opened with ``stream=True``.
        owned_client: A client to close together with the response, when
            the client was created for this call only.

    Example::

        with reru.get("https://example.test/").send() as resp:
            first = resp.read(1024)
    """

    def __init__(
        self,
        response: httpx.Response,
        owned_client: Optional[httpx.Client] = None,
    ) -> None:
        self._response = response
        self._owned_client = owned_client
        self._buffer = bytearray()
        self._chunks: Optional[Iterator[bytes]] = None
        self._exhausted = False
        self._closed = False

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> Response:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Close the body stream and, if owned, the client."""
        if self._closed:
            return
        self._closed = True
        self._response.close()
        if self._owned_client is not None:
            self._owned_client.close()
            self._owned_client = None

    # ------------------------------------------------------------------ #
    # Body access
    # ------------------------------------------------------------------ #

    def _next_chunk(self) -> Optional[bytes]:
        """Pull the next decoded chunk from the transport, or ``None`` at EOF."""
        if self._exhausted:
            return None
        if self._chunks is None:
            self._chunks = self._response.iter_bytes()
        try:
            return next(self._chunks)
        except StopIteration:
            self._exhausted = True
            self.close()
            return None
        except (httpx.RequestError, httpx.StreamError) as exc:
            logger.debug("Failed reading body from %s: %s", self.url, exc)
            raise NetworkError(f"Failed to read response body: {exc}") from exc

    def read(self, size: int = -1) -> bytes:
        """Read up to *size* bytes of the body; all remaining bytes when negative.

        Returns ``b""`` once the body is exhausted.

        Raises:
            NetworkError: If the transport fails mid-stream.
        """
        if size is None or size < 0:
            while (chunk := self._next_chunk()) is not None:
                self._buffer.extend(chunk)
            data = bytes(self._buffer)
            self._buffer.clear()
            return data

        while len(self._buffer) < size:
            chunk = self._next_chunk()
            if chunk is None:
                break
            self._buffer.extend(chunk)
        data = bytes(self._buffer[:size])
        del self._buffer[:size]
        return data

    def iter_bytes(self, chunk_size: Optional[int] = None) -> Iterator[bytes]:
        """Iterate the remaining body, in chunks of *chunk_size* when given."""
        if chunk_size is not None:
            while data := self.read(chunk_size):
                yield data
            return

        if self._buffer:
            data = bytes(self._buffer)
            self._buffer.clear()
            yield data
        while (chunk := self._next_chunk()) is not None:
            if chunk:
                yield chunk

    def text(self) -> str:
        """Decode the remaining body using the response charset."""
        return self.read().decode(self.encoding, errors="replace")

    def json(self, type_: Optional[Any] = None) -> Any:
        """Parse the remaining body as JSON.

        Args:
            type_: Optional target type, validated with pydantic.

        Raises:
            SerializationError: If the body is not valid JSON or does not
                match *type_*.
        """
        return deserialize(self.read(), type_)


class AsyncResponse(_ResponseMeta):
    """Asynchronous counterpart to :class:`Response`.

    Example::

        async with await reru.get("https://example.test/").asend() as resp:
            data = await resp.ajson()
    """

    def __init__(
        self,
        response: httpx.Response,
        owned_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._response = response
        self._owned_client = owned_client
        self._buffer = bytearray()
        self._chunks: Optional[AsyncIterator[bytes]] = None
        self._exhausted = False
        self._closed = False

    async def __aenter__(self) -> AsyncResponse:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    @property
    def closed(self) -> bool:
        return self._closed

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._response.aclose()
        if self._owned_client is not None:
            await self._owned_client.aclose()
            self._owned_client = None

    async def _next_chunk(self) -> Optional[bytes]:
        if self._exhausted:
            return None
        if self._chunks is None:
            self._chunks = self._response.aiter_bytes()
        try:
            return await self._chunks.__anext__()
        except StopAsyncIteration:
            self._exhausted = True
            await self.aclose()
            return None
        except (httpx.RequestError, httpx.StreamError) as exc:
            logger.debug("Failed reading body from %s: %s", self.url, exc)
            raise NetworkError(f"Failed to read response body: {exc}") from exc

    async def aread(self, size: int = -1) -> bytes:
        """Async :meth:`Response.read`."""
        if size is None or size < 0:
            while (chunk := await self._next_chunk()) is not None:
                self._buffer.extend(chunk)
            data = bytes(self._buffer)
            self._buffer.clear()
            return data

        while len(self._buffer) < size:
            chunk = await self._next_chunk()
            if chunk is None:
                break
            self._buffer.extend(chunk)
        data = bytes(self._buffer[:size])
        del self._buffer[:size]
        return data

    async def aiter_bytes(self, chunk_size: Optional[int] = None) -> AsyncIterator[bytes]:
        if chunk_size is not None:
            while data := await self.aread(chunk_size):
                yield data
            return

        if self._buffer:
            data = bytes(self._buffer)
            self._buffer.clear()
            yield data
        while (chunk := await self._next_chunk()) is not None:
            if chunk:
                yield chunk

    async def atext(self) -> str:
        return (await self.aread()).decode(self.encoding, errors="replace")

    async def ajson(self, type_: Optional[Any] = None) -> Any:
        return deserialize(await self.aread(), type_)
