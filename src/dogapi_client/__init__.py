"""Datadog API client.

Lightweight HTTP client for the Datadog monitoring REST API that injects
credentials, decodes JSON responses into pydantic-validated types and
classifies failures.

Exports:
    DogApiClient: HTTP client with credential injection and error handling.
    Transport, HttpxTransport: Pluggable transport interface and default.
    split_tag: Split a ``key:value`` tag.
    types: Module containing API data types.
"""

from . import types
from .client import DEFAULT_HOST, DEFAULT_TIMEOUT, DogApiClient
from .errors import (
    ApiError,
    DogApiClientError,
    HttpStatusError,
    InvalidJsonError,
    TransportError,
)
from .tags import split_tag
from .transport import HttpxTransport, Transport
from .types import ApiErrorInfo, Envelope, NoContent, RateLimit, TemplateVariable

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_TIMEOUT",
    "ApiError",
    "ApiErrorInfo",
    "DogApiClient",
    "DogApiClientError",
    "Envelope",
    "HttpStatusError",
    "HttpxTransport",
    "InvalidJsonError",
    "NoContent",
    "RateLimit",
    "TemplateVariable",
    "Transport",
    "TransportError",
    "split_tag",
    "types",
]
