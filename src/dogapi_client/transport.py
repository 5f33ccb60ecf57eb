"""HTTP transports used by the Datadog API client.

The client talks to the network only through :class:`Transport`. The default
implementation, :class:`HttpxTransport`, is backed by ``httpx`` and keeps one
``httpx.Client`` per thread.
"""

import threading
from abc import ABC, abstractmethod
from collections.abc import Mapping

import httpx
import structlog

from .types import Envelope, RateLimit

logger = structlog.get_logger(__name__)


class Transport(ABC):
    """Abstract interface for performing HTTP requests."""

    @abstractmethod
    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str] | None,
        params: httpx.QueryParams,
        body: bytes | None,
        timeout: float,
    ) -> Envelope:
        """Send an HTTP request and return the raw response.

        Args:
            method: HTTP method (GET, POST, etc.).
            url: Absolute request URL.
            headers: Extra request headers, if any.
            params: Query parameters, credentials included.
            body: Encoded request body, if any.
            timeout: Request timeout in seconds.

        Returns:
            Envelope with status code, media type, body and rate limit.
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """Release resources held by the transport."""
        ...


def parse_media_type(content_type: str | None) -> str | None:
    """Return the bare, lower-cased media type of a Content-Type header."""
    if not content_type:
        return None
    return content_type.split(";", 1)[0].strip().lower() or None


class HttpxTransport(Transport):
    """Transport backed by ``httpx.Client``.

    Thread-safe through thread-local storage of httpx.Client instances.
    Clients are created lazily; :meth:`close` closes every client created
    by any thread.
    """

    def __init__(self, transport: httpx.BaseTransport | None = None):
        """Initialize the transport.

        Args:
            transport: Optional low-level httpx transport handed to every
                ``httpx.Client`` (e.g. ``httpx.MockTransport`` in tests).
        """
        self._transport = transport
        self._headers = {"Accept": "application/json"}

        # Use thread-local storage for httpx.Client (thread safety)
        self._local = threading.local()
        self._lock = threading.Lock()
        self._clients: dict[threading.Thread, httpx.Client] = {}
        self._closed = False

    @property
    def client(self) -> httpx.Client:
        """Get or create the thread-local httpx client.

        Creating a client also closes the clients of threads that have
        exited since the last creation.

        Returns:
            Thread-local httpx.Client instance.

        Raises:
            RuntimeError: If the transport has been closed.
        """
        if self._closed:
            msg = "transport is closed"
            raise RuntimeError(msg)
        client = getattr(self._local, "client", None)
        if client is not None and not client.is_closed:
            return client

        with self._lock:
            # Registration happens under the lock so close() cannot miss it
            if self._closed:
                msg = "transport is closed"
                raise RuntimeError(msg)
            self._close_dead_thread_clients()
            client = httpx.Client(headers=self._headers, transport=self._transport)
            self._clients[threading.current_thread()] = client
        self._local.client = client
        return client

    def _close_dead_thread_clients(self) -> None:
        """Close clients owned by threads that are no longer alive.

        Must be called with the lock held.
        """
        dead = [thread for thread in self._clients if not thread.is_alive()]
        for thread in dead:
            self._clients.pop(thread).close()
        if dead:
            logger.debug("Closed clients of exited threads", clients=len(dead))

    def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str] | None,
        params: httpx.QueryParams,
        body: bytes | None,
        timeout: float,
    ) -> Envelope:
        response = self.client.request(
            method,
            url,
            params=params,
            headers=headers,
            content=body,
            timeout=timeout,
        )
        return Envelope(
            status_code=response.status_code,
            media_type=parse_media_type(response.headers.get("content-type")),
            data=response.content,
            rate_limit=RateLimit.from_headers(response.headers),
        )

    def close(self) -> None:
        """Close every httpx client created by this transport."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            clients = list(self._clients.values())
            self._clients.clear()
        for client in clients:
            client.close()
        logger.debug("Closed HTTP transport", clients=len(clients))
