"""Exception hierarchy for reru.

All exceptions inherit from :class:`ReruError`, so callers that do not care
about the failure kind can catch a single type. Exceptions raised by the
collaborators (:mod:`httpx`, :mod:`json`, :mod:`pydantic`) are never leaked
directly: they are wrapped in one of the classes below and chained as
``__cause__``.

Subclass hierarchy::

    ReruError
    +-- InvalidUrl            (also ValueError)
    +-- InvalidMethod         (also ValueError)
    +-- SerializationError
    +-- NetworkError
    +-- BuilderConsumedError  (also RuntimeError)
    +-- ConfigError
"""

from __future__ import annotations


class ReruError(Exception):
    """Base exception for all reru errors.

    Args:
        message: Human-readable error description.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidUrl(ReruError, ValueError):
    """Raised when a URL string cannot be parsed as an absolute URL.

    Args:
        message: Human-readable error description.
        url: The offending input, kept for diagnostics.
    """

    def __init__(self, message: str, url: object = None):
        super().__init__(message)
        self.url = url


class InvalidMethod(ReruError, ValueError):
    """Raised when a request is constructed with an unknown HTTP method."""


class SerializationError(ReruError):
    """Raised when a value cannot be encoded to, or decoded from, JSON."""


class NetworkError(ReruError):
    """Raised on transport failures (connection refused, timeout, TLS, DNS).

    The originating :class:`httpx.TransportError` is available as
    ``__cause__``; this layer does not distinguish between causes.
    """


class BuilderConsumedError(ReruError, RuntimeError):
    """Raised when a builder is used again after a terminal call."""


class ConfigError(ReruError):
    """Raised for invalid settings in the environment or the config file."""
