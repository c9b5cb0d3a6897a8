"""Tests for response classification and normalization."""

from __future__ import annotations

import json
from typing import Any

import pytest
from pydantic import BaseModel

from netzwerk.client.classify import (
    classify,
    classify_transport_error,
    get_error_from_payload,
    parse_body,
    parse_error,
    transform_service_response,
)
from netzwerk.client.result import Failure, Success
from netzwerk.client.transport import TransportError, TransportOutcome
from netzwerk.error_codes import (
    CODE_CANNOT_GET_ERROR_MESSAGE,
    CODE_CONNECTION_TIMEOUT,
    CODE_NO_INTERNET_CONNECTION,
    CODE_PARSE_JSON_ERROR,
    CODE_UNKNOWN_ERROR,
    TRANSPORT_NOT_CONNECTED,
    TRANSPORT_TIMED_OUT,
)
from netzwerk.exceptions import (
    CannotGetErrorMessage,
    ConnectionTimeout,
    NetworkErrorResponse,
    NoInternetConnection,
    ParseJSONError,
    ReceiveErrorFromService,
    Unauthorized,
    UnknownError,
    URLError,
)
from netzwerk.serializer import JSONSerializer


class User(BaseModel):
    id: int
    first_name: str


def _outcome(data: Any = None, status_code: int | None = 200, **kwargs: Any) -> TransportOutcome:
    body = json.dumps(data).encode("utf-8") if data is not None else None
    return TransportOutcome(body=body, status_code=status_code, **kwargs)


def _classify(outcome: TransportOutcome, response_type: Any = Any):
    return transform_service_response(classify(outcome, response_type, JSONSerializer()))


# ---------------------------------------------------------------------------
# Transport errors
# ---------------------------------------------------------------------------


class TestTransportErrors:
    def test_timeout(self) -> None:
        error = classify_transport_error(TransportError(TRANSPORT_TIMED_OUT, "timed out"))
        assert isinstance(error, ConnectionTimeout)

    def test_no_connectivity(self) -> None:
        error = classify_transport_error(TransportError(TRANSPORT_NOT_CONNECTED, "offline"))
        assert isinstance(error, NoInternetConnection)

    def test_anything_else_is_unknown(self) -> None:
        error = classify_transport_error(TransportError(-1005, "connection lost"))
        assert isinstance(error, UnknownError)

    def test_normalized_timeout(self) -> None:
        result = _classify(TransportOutcome(error=TransportError(TRANSPORT_TIMED_OUT, "timed out")))
        assert result.is_failure
        assert result.error == NetworkErrorResponse("timed out", CODE_CONNECTION_TIMEOUT, "APP10003")

    def test_normalized_no_internet(self) -> None:
        result = _classify(TransportOutcome(error=TransportError(TRANSPORT_NOT_CONNECTED, "offline")))
        assert result.error == NetworkErrorResponse("offline", CODE_NO_INTERNET_CONNECTION, "APP10000")

    def test_error_wins_over_status(self) -> None:
        outcome = TransportOutcome(status_code=200, body=b"{}", error=TransportError(-1, "boom"))
        result = _classify(outcome)
        assert result.error.code == CODE_UNKNOWN_ERROR


# ---------------------------------------------------------------------------
# Success bodies
# ---------------------------------------------------------------------------


class TestParseBody:
    def test_decodes_into_model(self) -> None:
        result = _classify(
            _outcome({"id": 2, "first_name": "Janet"}, headers={"x-id": "1"}, url="https://reqres.in/api/users/2"),
            User,
        )
        assert isinstance(result, Success)
        assert result.value.status_code == 200
        assert result.value.body_object == User(id=2, first_name="Janet")
        assert result.value.headers == {"x-id": "1"}
        assert result.value.url == "https://reqres.in/api/users/2"
        assert json.loads(result.value.body) == {"id": 2, "first_name": "Janet"}

    def test_any_keeps_plain_json(self) -> None:
        result = _classify(_outcome({"ok": True}, status_code=201))
        assert result.value.status_code == 201
        assert result.value.body_object == {"ok": True}

    def test_decode_failure_names_type(self) -> None:
        result = parse_body(b'{"id": "nope"}', User, JSONSerializer())
        assert isinstance(result, Failure)
        assert isinstance(result.error, ParseJSONError)
        normalized = result.error.to_response()
        assert normalized.message.startswith("ParseJSON User Error: ")
        assert normalized.code == CODE_PARSE_JSON_ERROR
        assert normalized.display_code == "APP10002"

    def test_empty_body_cannot_get_error_message(self) -> None:
        result = parse_body(b"", User, JSONSerializer())
        assert isinstance(result.error, CannotGetErrorMessage)


# ---------------------------------------------------------------------------
# Error payloads
# ---------------------------------------------------------------------------


class TestGetErrorFromPayload:
    def test_status_pair(self) -> None:
        payload = {"status_code": "E42", "status_message": "Quota exceeded"}
        assert get_error_from_payload(payload) == ("E42", "Quota exceeded")

    def test_numeric_status_code_is_stringified(self) -> None:
        payload = {"status_code": 34, "status_message": "Not here"}
        assert get_error_from_payload(payload) == ("34", "Not here")

    def test_errors_list(self) -> None:
        assert get_error_from_payload({"errors": ["Not found", "other"]}) == (None, "Not found")

    def test_status_pair_takes_precedence(self) -> None:
        payload = {"status_code": "7", "status_message": "pair", "errors": ["list"]}
        assert get_error_from_payload(payload) == ("7", "pair")

    @pytest.mark.parametrize(
        "payload",
        [None, [], "text", {}, {"errors": []}, {"errors": [1]}, {"status_code": "1"}],
    )
    def test_unrecognised_payloads(self, payload: Any) -> None:
        assert get_error_from_payload(payload) is None


class TestParseError:
    def test_errors_list_uses_http_status_as_display_code(self) -> None:
        error = parse_error(b'{"errors": ["Not found"]}', 404)
        assert isinstance(error, ReceiveErrorFromService)
        assert error.to_response() == NetworkErrorResponse("Not found", 404, "404")

    def test_server_display_code(self) -> None:
        error = parse_error(b'{"status_code": "E42", "status_message": "Quota"}', 429)
        assert error.to_response() == NetworkErrorResponse("Quota", 429, "E42")

    def test_missing_message_defaults(self) -> None:
        error = parse_error(b'{"status_code": "E1", "status_message": null}', 500)
        assert error.to_response() == NetworkErrorResponse("Unknown Error.", 500, "E1")

    def test_no_payload(self) -> None:
        assert isinstance(parse_error(b"<html>oops</html>", 502), CannotGetErrorMessage)
        assert isinstance(parse_error(None, 502), CannotGetErrorMessage)

    def test_custom_extractor(self) -> None:
        error = parse_error(b'{"detail": "nope"}', 400, lambda p: ("X", p["detail"]) if p else None)
        assert error.to_response() == NetworkErrorResponse("nope", 400, "X")

    def test_classify_404_with_errors(self) -> None:
        result = _classify(_outcome({"errors": ["Not found"]}, status_code=404))
        assert result.is_failure
        assert result.error.message == "Not found"
        assert result.error.display_code == "404"
        assert result.error.code == 404


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


class TestNormalization:
    def test_success_passes_through(self) -> None:
        success = parse_body(b"[1, 2]", list[int], JSONSerializer())
        assert transform_service_response(success) is success

    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (CannotGetErrorMessage(), NetworkErrorResponse("Unknown Error.", CODE_CANNOT_GET_ERROR_MESSAGE, "APP10001")),
            (UnknownError("socket closed"), NetworkErrorResponse("socket closed", CODE_UNKNOWN_ERROR, "APP10004")),
            (URLError("bad"), NetworkErrorResponse("Invalid URL request.")),
            (Unauthorized(), NetworkErrorResponse("Unauthorized.")),
            (ValueError("unexpected"), NetworkErrorResponse()),
        ],
    )
    def test_failure_mapping(self, error: Exception, expected: NetworkErrorResponse) -> None:
        result = transform_service_response(Failure(error))
        assert result.is_failure
        assert result.error == expected

    def test_missing_status_is_cannot_get_error_message(self) -> None:
        result = _classify(TransportOutcome())
        assert result.error.code == CODE_CANNOT_GET_ERROR_MESSAGE
