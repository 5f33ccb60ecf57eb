"""Datadog REST API client.

Provides credential injection, request dispatch through a pluggable
transport, typed response decoding with pydantic, failure classification
and rate-limit bookkeeping.
"""

import functools
import json
import threading
import time
from typing import Any, TypeVar, overload

import httpx
import pydantic
import structlog

from .errors import (
    ApiError,
    DogApiClientError,
    HttpStatusError,
    InvalidJsonError,
    TransportError,
)
from .transport import HttpxTransport, Transport
from .types import ApiErrorInfo, NoContent, RateLimit

logger = structlog.get_logger(__name__)

DEFAULT_HOST = "https://app.datadoghq.com"

DEFAULT_TIMEOUT = 60.0

JSON_MEDIA_TYPES = frozenset({"application/json", "text/json"})

T = TypeVar("T")

QueryParamsInput = (
    httpx.QueryParams
    | dict[str, str | list[str]]
    | list[tuple[str, str]]
    | tuple[tuple[str, str], ...]
)


@functools.lru_cache(maxsize=256)
def _cached_type_adapter(result_type: Any) -> pydantic.TypeAdapter:
    return pydantic.TypeAdapter(result_type)


def _type_adapter(result_type: Any) -> pydantic.TypeAdapter:
    """Return a TypeAdapter for a result type, cached when the type is hashable."""
    try:
        hash(result_type)
    except TypeError:
        return pydantic.TypeAdapter(result_type)
    return _cached_type_adapter(result_type)


def _encode_body(body: Any) -> bytes:
    """Serialize a request body to UTF-8 JSON."""
    if isinstance(body, pydantic.BaseModel):
        return body.model_dump_json(by_alias=True, exclude_none=True).encode()
    return json.dumps(body).encode()


class DogApiClient:
    """HTTP client for the Datadog REST API.

    Every request carries ``api_key`` (and ``application_key`` when
    configured) as query parameters. Successful responses are validated
    into the caller's result type; failures are raised as subclasses of
    :class:`DogApiClientError`.

    The client owns the transport it creates itself and borrows one passed
    in by the caller. Can be used as a context manager for automatic cleanup.
    """

    def __init__(
        self,
        api_key: str,
        app_key: str | None = None,
        host: str = DEFAULT_HOST,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Transport | None = None,
        *,
        owns_transport: bool = False,
    ):
        """Initialize the API client.

        Args:
            api_key: Datadog API key.
            app_key: Optional Datadog application key.
            host: Base URL of the API (default: public production endpoint).
            timeout: Request timeout in seconds (default: 60.0).
            transport: Transport to borrow. A new HttpxTransport is created
                and owned when omitted.
            owns_transport: Close a caller-supplied transport on close().

        Raises:
            ValueError: If api_key or host is empty, or timeout is not positive.
        """
        if not api_key:
            msg = "api_key cannot be empty"
            raise ValueError(msg)
        if not host:
            msg = "host cannot be empty"
            raise ValueError(msg)
        if timeout <= 0:
            msg = "timeout must be positive"
            raise ValueError(msg)

        self._api_key = api_key
        self._app_key = app_key
        self._host = host.rstrip("/")
        self.timeout = timeout

        if transport is None:
            self._transport: Transport = HttpxTransport()
            self._owns_transport = True
        else:
            self._transport = transport
            self._owns_transport = owns_transport

        self._latest_rate_limit: RateLimit | None = None
        self._close_lock = threading.Lock()
        self._closed = False

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def app_key(self) -> str | None:
        return self._app_key

    @property
    def host(self) -> str:
        return self._host

    @property
    def latest_rate_limit(self) -> RateLimit | None:
        """Most recent rate-limit snapshot reported by any response.

        With concurrent requests the last response to complete wins.
        """
        return self._latest_rate_limit

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self):
        """Enter context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager and cleanup resources."""
        self.close()

    def close(self) -> None:
        """Release the client.

        Closes the transport only if the client owns it. Calling close()
        more than once has no further effect.
        """
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
        if self._owns_transport:
            self._transport.close()
            logger.debug("Closed owned transport")

    def _build_params(self, params: QueryParamsInput | None) -> httpx.QueryParams:
        """Copy the caller's params and append credentials."""
        merged = httpx.QueryParams(params or {}).add("api_key", self._api_key)
        if self._app_key is not None:
            merged = merged.add("application_key", self._app_key)
        return merged

    @overload
    def execute(
        self,
        method: str,
        path: str,
        result_type: type[NoContent],
        params: QueryParamsInput | None = None,
        body: Any = None,
        timeout: float | None = None,
    ) -> None: ...

    @overload
    def execute(
        self,
        method: str,
        path: str,
        result_type: type[T],
        params: QueryParamsInput | None = None,
        body: Any = None,
        timeout: float | None = None,
    ) -> T: ...

    def execute(
        self,
        method,
        path,
        result_type,
        params=None,
        body=None,
        timeout=None,
    ):
        """Make an HTTP request to the Datadog API.

        Args:
            method: HTTP method (e.g., "GET", "POST").
            path: API path appended to the host (e.g., "/api/v1/monitor").
            result_type: Type the response body is validated into. Pass
                :class:`NoContent` to skip decoding.
            params: Optional query parameters. Never mutated.
            body: Optional request body; pydantic models or JSON-serializable
                values.
            timeout: Per-call timeout in seconds, replacing the client's
                configured timeout for this call.

        Returns:
            The decoded response, or None for NoContent.

        Raises:
            TransportError: If the transport fails before a response arrives.
            InvalidJsonError: If a response body cannot be decoded.
            ApiError: On non-2xx responses with a JSON error body.
            HttpStatusError: On other non-2xx responses.
            RuntimeError: If the client has been closed.
        """
        if self._closed:
            msg = "client is closed"
            raise RuntimeError(msg)

        merged_params = self._build_params(params)
        url = self._host + path
        headers = None
        data = None
        if body is not None:
            headers = {"Content-Type": "application/json"}
            data = _encode_body(body)
        effective_timeout = timeout if timeout is not None else self.timeout

        start_time = time.time()
        logger.debug(
            "Making API request",
            method=method,
            path=path,
            params=[
                key
                for key in merged_params
                if key not in ("api_key", "application_key")
            ],
            timeout=effective_timeout,
        )
        try:
            envelope = self._transport.send(
                method,
                url,
                headers,
                merged_params,
                data,
                effective_timeout,
            )
        except DogApiClientError:
            raise
        except Exception as exc:
            logger.exception(
                "API request failed",
                method=method,
                path=path,
                duration_seconds=round(time.time() - start_time, 3),
            )
            raise TransportError(exc) from exc

        logger.debug(
            "API request completed",
            status_code=envelope.status_code,
            duration_seconds=round(time.time() - start_time, 3),
        )

        if envelope.rate_limit is not None:
            self._latest_rate_limit = envelope.rate_limit

        if 200 <= envelope.status_code < 300:  # noqa: PLR2004
            if result_type is NoContent:
                return None
            try:
                return _type_adapter(result_type).validate_json(envelope.data)
            except pydantic.ValidationError as exc:
                raise InvalidJsonError(envelope.data, exc) from exc

        if envelope.media_type in JSON_MEDIA_TYPES:
            try:
                error_info = ApiErrorInfo.model_validate_json(envelope.data)
            except pydantic.ValidationError as exc:
                raise InvalidJsonError(envelope.data, exc) from exc
            logger.warning(
                "API error response",
                status_code=envelope.status_code,
                errors=error_info.errors,
            )
            raise ApiError(envelope.status_code, error_info.errors)

        logger.warning(
            "HTTP error response",
            status_code=envelope.status_code,
            media_type=envelope.media_type,
        )
        raise HttpStatusError(envelope.status_code)
