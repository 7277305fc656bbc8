"""reru -- a small fluent HTTP request builder on top of httpx.

Build a request with chained calls, then either finalize it into an immutable
:class:`~reru.models.PreparedRequest` or send it and read the streaming
response::

    import reru

    with (
        reru.post("https://httpbin.org/post")
        .param("show_env", "1")
        .body_json(["a", "b"])
        .send()
    ) as resp:
        print(resp.status_code, resp.json())

Modules:
    builder: :class:`RequestBuilder` and the per-method shortcuts.
    client: Dispatch through :mod:`httpx` and the response handles.
    models: Pydantic models shared across the package.
    serializer: JSON encoding and decoding of bodies.
    config: Transport settings from the environment and config file.
    exceptions: Exception hierarchy rooted at :class:`ReruError`.
"""

from reru.builder import (
    RequestBuilder,
    connect,
    delete,
    get,
    head,
    options,
    patch,
    post,
    put,
    request,
    trace,
)
from reru.client import AsyncResponse, Response
from reru.config import resolve_request_config
from reru.exceptions import (
    BuilderConsumedError,
    ConfigError,
    InvalidMethod,
    InvalidUrl,
    NetworkError,
    ReruError,
    SerializationError,
)
from reru.models import BodyKind, HTTPMethod, PreparedRequest, RequestConfig

__version__ = "0.2.0"

__all__ = [
    "AsyncResponse",
    "BodyKind",
    "BuilderConsumedError",
    "ConfigError",
    "HTTPMethod",
    "InvalidMethod",
    "InvalidUrl",
    "NetworkError",
    "PreparedRequest",
    "RequestBuilder",
    "RequestConfig",
    "ReruError",
    "Response",
    "SerializationError",
    "connect",
    "delete",
    "get",
    "head",
    "options",
    "patch",
    "post",
    "put",
    "request",
    "resolve_request_config",
    "trace",
]
