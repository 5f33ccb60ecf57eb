"""Exception hierarchy for the Datadog API client."""


class DogApiClientError(Exception):
    """Base exception for all classified request failures."""


class TransportError(DogApiClientError):
    """Raised when the transport fails before a response is received."""

    def __init__(self, cause: Exception) -> None:
        self.cause = cause
        super().__init__(f"http request error: {cause}")


class InvalidJsonError(DogApiClientError):
    """Raised when a response body cannot be decoded into the expected type."""

    def __init__(self, data: bytes, cause: Exception) -> None:
        self.data = data
        self.cause = cause
        super().__init__(f"invalid json response: {cause}")


class ApiError(DogApiClientError):
    """Raised on non-2xx responses carrying a JSON error body."""

    def __init__(self, status_code: int, errors: list[str]) -> None:
        self.status_code = status_code
        self.errors = errors
        super().__init__(f"{status_code}: {'; '.join(errors)}")


class HttpStatusError(DogApiClientError):
    """Raised on non-2xx responses without a JSON body."""

    def __init__(self, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(f"http status {status_code}")
