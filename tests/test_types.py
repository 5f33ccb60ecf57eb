"""Tests for API data types."""

import httpx
import pydantic
import pytest

from dogapi_client import types

_FULL_HEADERS = {
    "x-ratelimit-limit": "100",
    "x-ratelimit-period": "60",
    "x-ratelimit-remaining": "42",
    "x-ratelimit-reset": "17",
    "x-ratelimit-name": "query",
}


# ---------------------------------------------------------------------------
# RateLimit.from_headers
# ---------------------------------------------------------------------------


def test_rate_limit_from_headers():
    """All headers present produce a full snapshot."""
    assert types.RateLimit.from_headers(_FULL_HEADERS) == types.RateLimit(
        limit=100,
        period=60,
        remaining=42,
        reset=17,
        name="query",
    )


def test_rate_limit_from_httpx_headers_is_case_insensitive():
    """httpx.Headers lookups match regardless of header casing."""
    headers = httpx.Headers({key.upper(): value for key, value in _FULL_HEADERS.items()})
    rate_limit = types.RateLimit.from_headers(headers)
    assert rate_limit is not None
    assert rate_limit.remaining == 42


def test_rate_limit_name_is_optional():
    """The name header may be missing."""
    headers = {k: v for k, v in _FULL_HEADERS.items() if k != "x-ratelimit-name"}
    rate_limit = types.RateLimit.from_headers(headers)
    assert rate_limit is not None
    assert rate_limit.name is None


@pytest.mark.parametrize(
    "missing",
    ["x-ratelimit-limit", "x-ratelimit-period", "x-ratelimit-remaining", "x-ratelimit-reset"],
)
def test_rate_limit_missing_header_returns_none(missing):
    """Any missing numeric header means no snapshot."""
    headers = {k: v for k, v in _FULL_HEADERS.items() if k != missing}
    assert types.RateLimit.from_headers(headers) is None


def test_rate_limit_non_numeric_header_returns_none():
    """Garbage in a numeric header means no snapshot."""
    headers = {**_FULL_HEADERS, "x-ratelimit-remaining": "lots"}
    assert types.RateLimit.from_headers(headers) is None


def test_rate_limit_is_immutable():
    """Snapshots cannot be modified after creation."""
    rate_limit = types.RateLimit.from_headers(_FULL_HEADERS)
    with pytest.raises(AttributeError):
        rate_limit.remaining = 0


# ---------------------------------------------------------------------------
# Wire models
# ---------------------------------------------------------------------------


def test_api_error_info_parses_errors():
    """The errors list is read from the wire shape."""
    info = types.ApiErrorInfo.model_validate_json(b'{"errors": ["a", "b"]}')
    assert info.errors == ["a", "b"]


def test_api_error_info_defaults_to_empty_list():
    """A body without errors yields an empty list."""
    assert types.ApiErrorInfo.model_validate_json(b"{}").errors == []


def test_api_error_info_null_errors_is_empty_list():
    """A null errors field is read as no messages."""
    assert types.ApiErrorInfo.model_validate_json(b'{"errors": null}').errors == []


def test_api_error_info_rejects_non_string_errors():
    """Error messages must be strings."""
    with pytest.raises(pydantic.ValidationError):
        types.ApiErrorInfo.model_validate_json(b'{"errors": [{"code": 1}]}')


def test_template_variable_round_trip_names():
    """Template variables use snake_case wire names."""
    variable = types.TemplateVariable.model_validate(
        {"name": "env", "prefix": "env", "default": "prod"},
    )
    assert variable.default == "prod"
    assert variable.model_dump() == {"name": "env", "prefix": "env", "default": "prod"}
