"""Response classification and normalization.

Classification maps a raw :class:`~netzwerk.client.transport.TransportOutcome`
onto a typed :data:`~netzwerk.client.result.Result` whose failures carry the
internal :class:`~netzwerk.exceptions.NetworkServiceError` taxonomy:

===========================  ==========================================
Outcome                      Result
===========================  ==========================================
transport error ``-1001``    :class:`~netzwerk.exceptions.ConnectionTimeout`
transport error ``-1009``    :class:`~netzwerk.exceptions.NoInternetConnection`
other transport error        :class:`~netzwerk.exceptions.UnknownError`
``2xx``                      decoded :class:`Success` or :class:`~netzwerk.exceptions.ParseJSONError`
``401``                      handled by the client (retry queue)
other ``>= 400``             :class:`~netzwerk.exceptions.ReceiveErrorFromService`
                             or :class:`~netzwerk.exceptions.CannotGetErrorMessage`
===========================  ==========================================

:func:`transform_service_response` then rewrites every failure into the
public :class:`~netzwerk.exceptions.NetworkErrorResponse` shape.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any, Callable, Optional

from netzwerk.client.result import Failure, Response, Result, Success
from netzwerk.client.transport import TransportError, TransportOutcome
from netzwerk.error_codes import TRANSPORT_NOT_CONNECTED, TRANSPORT_TIMED_OUT
from netzwerk.exceptions import (
    UNKNOWN_ERROR_MESSAGE,
    CannotGetErrorMessage,
    ConnectionTimeout,
    NetworkServiceError,
    NoInternetConnection,
    ParseJSONError,
    ReceiveErrorFromService,
    SerializationError,
    UnknownError,
    error_object,
)
from netzwerk.serializer import Serializer, type_name

ErrorPayload = tuple[Optional[str], Optional[str]]
"""``(status_code, status_message)`` extracted from an error body; either may be ``None``."""

ErrorExtractor = Callable[[Any], Optional[ErrorPayload]]

UNAUTHORIZED = 401


def is_success_status(status_code: int) -> bool:
    return 200 <= status_code < 300


def classify_transport_error(error: TransportError) -> NetworkServiceError:
    """Map a transport failure onto its error kind by platform code."""
    if error.code == TRANSPORT_TIMED_OUT:
        return ConnectionTimeout(error.message)
    if error.code == TRANSPORT_NOT_CONNECTED:
        return NoInternetConnection(error.message)
    return UnknownError(error.message)


def load_json_object(data: Optional[bytes]) -> Optional[dict[str, Any]]:
    """Return *data* parsed as a JSON object, or ``None`` if it is not one."""
    if not data:
        return None
    try:
        payload = json.loads(data)
    except (ValueError, UnicodeDecodeError):
        return None
    return payload if isinstance(payload, dict) else None


def parse_body(
    data: Optional[bytes],
    response_type: Any,
    serializer: Serializer,
    *,
    status_code: int = 200,
    headers: Optional[Mapping[str, str]] = None,
    url: Optional[str] = None,
) -> Result[Any]:
    """Decode a successful response body into *response_type*.

    Returns:
        :class:`Success` with the decoded payload,
        ``Failure(CannotGetErrorMessage)`` for an empty body, or
        ``Failure(ParseJSONError)`` naming the expected type when decoding
        fails.
    """
    if not data:
        return Failure(CannotGetErrorMessage())
    try:
        body_object = serializer.decode(data, response_type)
    except SerializationError as exc:
        return Failure(ParseJSONError(type_name(response_type), exc.message))
    return Success(
        Response(
            status_code=status_code,
            body=data,
            body_object=body_object,
            headers=dict(headers or {}),
            url=url,
        )
    )


def get_error_from_payload(payload: Any) -> Optional[ErrorPayload]:
    """Extract ``(status_code, status_message)`` from a server error body.

    Two conventions are recognised, in order:

    * ``{"status_code": ..., "status_message": ...}`` -- both keys must be
      present.  Numeric codes are turned into strings.
    * ``{"errors": ["first message", ...]}`` -- the first entry becomes the
      message and there is no code.

    Returns ``None`` for anything else.
    """
    if not isinstance(payload, Mapping):
        return None

    if "status_code" in payload and "status_message" in payload:
        code = payload["status_code"]
        message = payload["status_message"]
        if isinstance(code, (int, float)) and not isinstance(code, bool):
            code = str(code)
        return (
            code if isinstance(code, str) else None,
            message if isinstance(message, str) else None,
        )

    errors = payload.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], str):
        return None, errors[0]
    return None


def parse_error(
    data: Optional[bytes],
    status_code: int,
    extractor: ErrorExtractor = get_error_from_payload,
) -> NetworkServiceError:
    """Build the error kind for a ``>= 400`` response.

    The display code falls back to the HTTP status and the message to
    ``"Unknown Error."`` when the payload does not provide them.
    """
    extracted = extractor(load_json_object(data))
    if extracted is None:
        return CannotGetErrorMessage()
    display_code, message = extracted
    return ReceiveErrorFromService(
        status_code=status_code,
        display_code=display_code or str(status_code),
        message=message or UNKNOWN_ERROR_MESSAGE,
    )


def classify(
    outcome: TransportOutcome,
    response_type: Any,
    serializer: Serializer,
    extractor: ErrorExtractor = get_error_from_payload,
) -> Result[Any]:
    """Classify every outcome except ``401``, which the client defers.

    An outcome with neither an error nor a status is reported as
    :class:`~netzwerk.exceptions.CannotGetErrorMessage`.
    """
    if outcome.error is not None:
        return Failure(classify_transport_error(outcome.error))
    if outcome.status_code is None:
        return Failure(CannotGetErrorMessage())
    if is_success_status(outcome.status_code):
        return parse_body(
            outcome.body,
            response_type,
            serializer,
            status_code=outcome.status_code,
            headers=outcome.headers,
            url=outcome.url,
        )
    return Failure(parse_error(outcome.body, outcome.status_code, extractor))


def normalize_error(error: Exception) -> Exception:
    """Return the public :class:`~netzwerk.exceptions.NetworkErrorResponse` for *error*."""
    if isinstance(error, NetworkServiceError):
        return error.to_response()
    return error_object(error)


def transform_service_response(result: Result[Any]) -> Result[Any]:
    """Normalization stage: successes pass through, failures are rewritten."""
    if isinstance(result, Failure):
        return Failure(normalize_error(result.error))
    return result
