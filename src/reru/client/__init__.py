"""Transport collaborator for reru.

Dispatches a :class:`~reru.models.PreparedRequest` through :mod:`httpx` and
wraps the streaming result in a :class:`~reru.client.response.Response`
handle.

Functions:
    :func:`send_request` -- blocking dispatch through :class:`httpx.Client`.
    :func:`asend_request` -- non-blocking dispatch through :class:`httpx.AsyncClient`.

Both accept an optional caller-owned client. Without one, a client is built
from :class:`~reru.models.RequestConfig` (resolved via
:func:`~reru.config.resolve_request_config` when no config is given) and is
handed to the response, which closes it.

Each call performs exactly one exchange: no retries, and redirects are
whatever the client is configured to do. HTTP error statuses are returned
like any other response; only transport failures raise.

Example::

    from reru.client import send_request

    with send_request(prepared) as resp:
        body = resp.read()
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from reru.client.response import AsyncResponse, Response
from reru.config import resolve_request_config
from reru.exceptions import NetworkError
from reru.models import PreparedRequest, RequestConfig

__all__ = ["AsyncResponse", "Response", "asend_request", "send_request"]

logger = logging.getLogger(__name__)


def _network_error(prepared: PreparedRequest, exc: httpx.RequestError) -> NetworkError:
    logger.debug("%s %s failed: %s", prepared.method.value, prepared.url, exc)
    return NetworkError(f"{prepared.method.value} {prepared.url} failed: {exc}")


def send_request(
    prepared: PreparedRequest,
    client: Optional[httpx.Client] = None,
    config: Optional[RequestConfig] = None,
) -> Response:
    """Send *prepared* and return a handle over the streaming response.

    Args:
        prepared: The finalized request.
        client: Optional caller-owned client; it is left open.
        config: Settings for the one-off client built when *client* is
            ``None``. Ignored otherwise.

    Returns:
        A :class:`Response` whose body has not been read yet.

    Raises:
        NetworkError: On connection, timeout, TLS, DNS or protocol failures.
    """
    owned: Optional[httpx.Client] = None
    if client is None:
        config = config or resolve_request_config()
        owned = client = httpx.Client(**config.client_kwargs())

    logger.debug("Sending %s %s", prepared.method.value, prepared.url)
    try:
        response = client.send(prepared.to_httpx(), stream=True)
    except httpx.RequestError as exc:
        if owned is not None:
            owned.close()
        raise _network_error(prepared, exc) from exc
    except BaseException:
        if owned is not None:
            owned.close()
        raise

    logger.debug(
        "%s %s -> %s", prepared.method.value, prepared.url, response.status_code,
    )
    return Response(response, owned_client=owned)


async def asend_request(
    prepared: PreparedRequest,
    client: Optional[httpx.AsyncClient] = None,
    config: Optional[RequestConfig] = None,
) -> AsyncResponse:
    """Async :func:`send_request` over :class:`httpx.AsyncClient`."""
    owned: Optional[httpx.AsyncClient] = None
    if client is None:
        config = config or resolve_request_config()
        owned = client = httpx.AsyncClient(**config.client_kwargs())

    logger.debug("Sending %s %s", prepared.method.value, prepared.url)
    try:
        response = await client.send(prepared.to_httpx(), stream=True)
    except httpx.RequestError as exc:
        if owned is not None:
            await owned.aclose()
        raise _network_error(prepared, exc) from exc
    except BaseException:
        if owned is not None:
            await owned.aclose()
        raise

    logger.debug(
        "%s %s -> %s", prepared.method.value, prepared.url, response.status_code,
    )
    return AsyncResponse(response, owned_client=owned)
