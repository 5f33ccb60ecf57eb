"""Data types exchanged with the Datadog REST API.

Pydantic models describe JSON bodies as they appear on the wire (snake_case
field names). The response envelope and rate-limit snapshot are plain frozen
dataclasses produced by the transport layer.
"""

from collections.abc import Mapping
from dataclasses import dataclass

from pydantic import BaseModel, Field, field_validator


class NoContent:
    """Result type for requests whose successful response has no body to decode.

    Pass it as ``result_type`` to :meth:`DogApiClient.execute`; the call then
    returns ``None`` on success without reading the body.
    """


class ApiErrorInfo(BaseModel):
    """Error body returned by the API on failed requests."""

    errors: list[str] = Field(default_factory=list)

    @field_validator("errors", mode="before")
    @classmethod
    def null_errors_as_empty(cls, value):
        return [] if value is None else value


class TemplateVariable(BaseModel):
    """Dashboard template variable."""

    name: str | None = None
    prefix: str | None = None
    default: str | None = None


@dataclass(frozen=True)
class RateLimit:
    """Rate-limit metadata parsed from ``X-RateLimit-*`` response headers."""

    limit: int
    period: int
    remaining: int
    reset: int
    name: str | None = None

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> "RateLimit | None":
        """Parse rate-limit headers, returning *None* if absent or malformed."""
        raw = [
            headers.get(f"x-ratelimit-{field}")
            for field in ("limit", "period", "remaining", "reset")
        ]
        if any(value is None for value in raw):
            return None
        try:
            limit, period, remaining, reset = (int(value) for value in raw)
        except ValueError:
            return None
        return cls(
            limit=limit,
            period=period,
            remaining=remaining,
            reset=reset,
            name=headers.get("x-ratelimit-name"),
        )


@dataclass(frozen=True)
class Envelope:
    """Raw HTTP response as reported by a transport.

    ``media_type`` is lower-cased and stripped of parameters such as
    ``charset``; it is *None* when the response has no ``Content-Type``.
    """

    status_code: int
    media_type: str | None
    data: bytes
    rate_limit: RateLimit | None = None
