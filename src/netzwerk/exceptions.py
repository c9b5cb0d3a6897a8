"""Exception hierarchy and error taxonomy for netzwerk.

All exceptions inherit from :class:`NetzwerkError`.  Two families sit below
it:

* The **internal taxonomy** -- :class:`NetworkServiceError` and its closed
  set of kinds -- produced while classifying a transport outcome.  Callers
  never see these: the normalization stage
  (:func:`~netzwerk.client.classify.transform_service_response`) turns each
  one into a :class:`NetworkErrorResponse` via :meth:`~NetworkServiceError.to_response`.
* **Build and configuration errors** -- raised synchronously when a request
  cannot be built or the configuration is unusable.

Subclass hierarchy::

    NetzwerkError
    +-- NetworkErrorResponse         (public, normalized shape)
    +-- NetworkServiceError          (internal taxonomy)
    |   +-- ReceiveErrorFromService
    |   +-- UnknownError             (APP10004)
    |   +-- URLError
    |   +-- NoInternetConnection     (APP10000)
    |   +-- ParseJSONError           (APP10002)
    |   +-- CannotGetErrorMessage    (APP10001)
    |   +-- Unauthorized
    |   +-- ConnectionTimeout        (APP10003)
    +-- BodyEncodingError
    +-- SerializationError
    +-- AuthError
    +-- ConfigError
"""

from __future__ import annotations

from typing import Optional

from netzwerk.error_codes import (
    CODE_CANNOT_GET_ERROR_MESSAGE,
    CODE_CONNECTION_TIMEOUT,
    CODE_NO_INTERNET_CONNECTION,
    CODE_PARSE_JSON_ERROR,
    CODE_UNKNOWN_ERROR,
    DISPLAY_CANNOT_GET_ERROR_MESSAGE,
    DISPLAY_CONNECTION_TIMEOUT,
    DISPLAY_NO_INTERNET_CONNECTION,
    DISPLAY_PARSE_JSON_ERROR,
    DISPLAY_UNKNOWN_ERROR,
)

UNKNOWN_ERROR_MESSAGE = "Unknown Error."
"""Message used whenever no better description of a failure is available."""


class NetzwerkError(Exception):
    """Base exception for all netzwerk errors.

    Args:
        message: Human-readable error description.
    """

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class NetworkErrorResponse(NetzwerkError):
    """The single public error shape handed to callers.

    Every failed :class:`~netzwerk.client.result.Result` returned by the
    client carries one of these.

    Args:
        message: Human-readable description.
        code: Numeric code -- the HTTP status for service errors, a
            :mod:`~netzwerk.error_codes` constant for local failures, or
            ``None``.
        display_code: Code suitable for showing to users, e.g. ``"404"``
            or ``"APP10000"``.
    """

    def __init__(
        self,
        message: str = "Error",
        code: Optional[int] = None,
        display_code: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.display_code = display_code

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NetworkErrorResponse):
            return NotImplemented
        return (self.message, self.code, self.display_code) == (
            other.message,
            other.code,
            other.display_code,
        )

    def __hash__(self) -> int:
        return hash((self.message, self.code, self.display_code))

    def __repr__(self) -> str:
        return (
            f"NetworkErrorResponse(message={self.message!r}, code={self.code!r}, "
            f"display_code={self.display_code!r})"
        )


def error_object(error: BaseException) -> NetworkErrorResponse:
    """Return *error* as a :class:`NetworkErrorResponse`.

    Normalized errors are returned unchanged; anything else collapses to the
    generic ``NetworkErrorResponse()``.
    """
    if isinstance(error, NetworkErrorResponse):
        return error
    return NetworkErrorResponse()


# --- Internal taxonomy ---


class NetworkServiceError(NetzwerkError):
    """Base class for the closed set of classification error kinds."""

    def to_response(self) -> NetworkErrorResponse:
        """Map this kind onto the public error shape."""
        return NetworkErrorResponse()


class ReceiveErrorFromService(NetworkServiceError):
    """The server answered ``>= 400`` with an extractable error payload."""

    def __init__(self, status_code: int, display_code: str, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.display_code = display_code

    def to_response(self) -> NetworkErrorResponse:
        return NetworkErrorResponse(
            message=self.message, code=self.status_code, display_code=self.display_code
        )


class UnknownError(NetworkServiceError):
    """The transport failed with an error that has no dedicated kind."""

    def to_response(self) -> NetworkErrorResponse:
        return NetworkErrorResponse(
            message=self.message, code=CODE_UNKNOWN_ERROR, display_code=DISPLAY_UNKNOWN_ERROR
        )


class URLError(NetworkServiceError):
    """The request URL is malformed (no scheme or no host)."""

    def to_response(self) -> NetworkErrorResponse:
        return NetworkErrorResponse(message="Invalid URL request.")


class NoInternetConnection(NetworkServiceError):
    """The transport could not reach the network."""

    def to_response(self) -> NetworkErrorResponse:
        return NetworkErrorResponse(
            message=self.message,
            code=CODE_NO_INTERNET_CONNECTION,
            display_code=DISPLAY_NO_INTERNET_CONNECTION,
        )


class ParseJSONError(NetworkServiceError):
    """A 2xx body could not be decoded into the expected payload type.

    Args:
        result_type: Name of the payload type the body was decoded into.
        message: The decoder's diagnostic.
    """

    def __init__(self, result_type: str, message: str) -> None:
        super().__init__(message)
        self.result_type = result_type

    def to_response(self) -> NetworkErrorResponse:
        return NetworkErrorResponse(
            message=f"ParseJSON {self.result_type} Error: {self.message}.",
            code=CODE_PARSE_JSON_ERROR,
            display_code=DISPLAY_PARSE_JSON_ERROR,
        )


class CannotGetErrorMessage(NetworkServiceError):
    """A failure with no extractable description."""

    def __init__(self, message: str = UNKNOWN_ERROR_MESSAGE) -> None:
        super().__init__(message)

    def to_response(self) -> NetworkErrorResponse:
        return NetworkErrorResponse(
            message=UNKNOWN_ERROR_MESSAGE,
            code=CODE_CANNOT_GET_ERROR_MESSAGE,
            display_code=DISPLAY_CANNOT_GET_ERROR_MESSAGE,
        )


class Unauthorized(NetworkServiceError):
    """A replayed request was still rejected with 401.

    Never produced by the first 401 of a request, which is deferred into the
    retry queue instead.
    """

    def __init__(self, message: str = "Unauthorized.") -> None:
        super().__init__(message)

    def to_response(self) -> NetworkErrorResponse:
        return NetworkErrorResponse(message=self.message)


class ConnectionTimeout(NetworkServiceError):
    """The transport timed out."""

    def to_response(self) -> NetworkErrorResponse:
        return NetworkErrorResponse(
            message=self.message,
            code=CODE_CONNECTION_TIMEOUT,
            display_code=DISPLAY_CONNECTION_TIMEOUT,
        )


# --- Build and configuration errors ---


class BodyEncodingError(NetzwerkError):
    """Raised in strict mode when request parameters cannot be encoded into a body."""


class SerializationError(NetzwerkError):
    """Raised by a serializer when a value cannot be encoded or decoded."""


class AuthError(NetzwerkError):
    """Raised when credentials cannot be resolved, or are rejected during a refresh."""


class ConfigError(NetzwerkError):
    """Raised for configuration problems (invalid JSON, bad values, bad credential sources)."""
