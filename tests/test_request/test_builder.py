"""Tests for the request builder pipeline."""

from __future__ import annotations

import base64
import json

import pytest
from pydantic import BaseModel

from netzwerk.exceptions import BodyEncodingError, URLError
from netzwerk.models import HTTPMethod
from netzwerk.request import (
    BasicAuthRequestGenerator,
    Endpoint,
    WireRequest,
    build_request,
    build_request_from,
)
from netzwerk.request.builder import append_query, join_url, validate_url
from netzwerk.request.generator import FORM_CONTENT_TYPE, JSON_CONTENT_TYPE


BASE_URL = "https://reqres.in/api"


class NewUser(BaseModel):
    name: str
    job: str


class Opaque:
    """A value no serializer knows how to encode."""


# ---------------------------------------------------------------------------
# URL helpers
# ---------------------------------------------------------------------------


class TestUrlHelpers:
    def test_join_url_single_slash(self) -> None:
        assert join_url("https://a.example/api/", "/users") == "https://a.example/api/users"
        assert join_url("https://a.example/api", "users") == "https://a.example/api/users"

    def test_join_url_empty_path(self) -> None:
        assert join_url("https://a.example/api", "") == "https://a.example/api"

    def test_append_query(self) -> None:
        assert append_query("https://a.example/x", "a=1") == "https://a.example/x?a=1"
        assert append_query("https://a.example/x?a=1", "b=2") == "https://a.example/x?a=1&b=2"
        assert append_query("https://a.example/x", None) == "https://a.example/x"

    def test_validate_url_rejects_relative(self) -> None:
        with pytest.raises(URLError):
            validate_url("/relative/path")

    def test_validate_url_accepts_absolute(self) -> None:
        validate_url("https://reqres.in/api/users")


# ---------------------------------------------------------------------------
# GET requests
# ---------------------------------------------------------------------------


class TestGetRequests:
    def test_query_is_percent_encoded_and_appended(self) -> None:
        endpoint = Endpoint(
            base_url=BASE_URL,
            path="/users",
            query_parameters={"page": "2", "q": "a b&c"},
        )
        request = build_request(endpoint)
        assert request.url == "https://reqres.in/api/users?page=2&q=a%20b%26c"
        assert request.method == HTTPMethod.GET
        assert request.body is None

    def test_get_ignores_body_parameters(self) -> None:
        endpoint = Endpoint(base_url=BASE_URL, path="/users", parameters={"name": "x"})
        assert build_request(endpoint).body is None

    def test_default_headers_are_json(self) -> None:
        request = build_request(Endpoint(base_url=BASE_URL, path="/users"))
        assert request.header_fields["Accept"] == JSON_CONTENT_TYPE
        assert request.header_fields["Content-Type"] == JSON_CONTENT_TYPE

    def test_query_not_appended_for_post(self) -> None:
        endpoint = Endpoint(
            base_url=BASE_URL,
            path="/users",
            method=HTTPMethod.POST,
            query_parameters={"page": "2"},
        )
        assert build_request(endpoint).url == "https://reqres.in/api/users"

    def test_wire_request_get_shortcut(self) -> None:
        request = WireRequest.get("https://reqres.in/api/users", {"page": "2"})
        assert request.url == "https://reqres.in/api/users?page=2"
        assert request.method == HTTPMethod.GET

    def test_invalid_url_raises(self) -> None:
        with pytest.raises(URLError):
            build_request(Endpoint(base_url="/no-scheme", path="/users"))


# ---------------------------------------------------------------------------
# Body encoding
# ---------------------------------------------------------------------------


class TestBodyEncoding:
    def test_mapping_body_is_json(self) -> None:
        payload = {"name": "morpheus", "job": "leader"}
        endpoint = Endpoint(base_url=BASE_URL, path="/users", method=HTTPMethod.POST, parameters=payload)
        request = build_request(endpoint)
        assert json.loads(request.body) == payload

    def test_typed_body_round_trips(self) -> None:
        user = NewUser(name="morpheus", job="leader")
        endpoint = Endpoint(base_url=BASE_URL, path="/users", method=HTTPMethod.POST, parameters=user)
        request = build_request(endpoint)
        assert json.loads(request.body) == user.model_dump()

    def test_list_body_is_json_array(self) -> None:
        request = build_request_from(BASE_URL, HTTPMethod.PUT, parameters=[1, "two", {"three": 3}])
        assert json.loads(request.body) == [1, "two", {"three": 3}]

    def test_string_body_is_utf8(self) -> None:
        request = build_request_from(BASE_URL, HTTPMethod.POST, parameters="grüße")
        assert request.body == "grüße".encode("utf-8")

    def test_bytes_body_passes_through(self) -> None:
        request = build_request_from(BASE_URL, HTTPMethod.POST, parameters=b"\x00\x01")
        assert request.body == b"\x00\x01"

    def test_no_parameters_means_no_body(self) -> None:
        request = build_request_from(BASE_URL, HTTPMethod.DELETE)
        assert request.body is None

    def test_caller_form_content_type_wins_and_encodes_form(self) -> None:
        endpoint = Endpoint(
            base_url=BASE_URL,
            path="/users",
            method=HTTPMethod.POST,
            parameters={"name": "neo one", "job": "the one"},
            header_parameters={"Content-Type": "application/x-www-form-urlencoded"},
        )
        request = build_request(endpoint)
        assert request.header_fields["Content-Type"] == "application/x-www-form-urlencoded"
        assert request.body == b"name=neo%20one&job=the%20one"

    def test_basic_auth_generator_sends_form(self) -> None:
        endpoint = Endpoint(
            base_url=BASE_URL,
            path="/login",
            method=HTTPMethod.POST,
            parameters={"grant_type": "password"},
            request_generator=BasicAuthRequestGenerator("ada", "s3cret"),
        )
        request = build_request(endpoint)
        expected = base64.b64encode(b"ada:s3cret").decode("ascii")
        assert request.header_fields["Authorization"] == f"Basic {expected}"
        assert request.header_fields["Content-Type"] == FORM_CONTENT_TYPE
        assert request.header_fields["Accept"] == JSON_CONTENT_TYPE
        assert request.body == b"grant_type=password"

    def test_unencodable_body_is_dropped_by_default(self) -> None:
        request = build_request_from(BASE_URL, HTTPMethod.POST, parameters=Opaque())
        assert request.body is None

    def test_unencodable_body_raises_in_strict_mode(self) -> None:
        with pytest.raises(BodyEncodingError):
            build_request_from(BASE_URL, HTTPMethod.POST, parameters=Opaque(), strict=True)


# ---------------------------------------------------------------------------
# Determinism
# ---------------------------------------------------------------------------


class TestIdempotence:
    def test_building_twice_gives_equal_requests(self) -> None:
        endpoint = Endpoint(
            base_url=BASE_URL,
            path="/users",
            method=HTTPMethod.PATCH,
            parameters={"job": "zion resident"},
            query_parameters={"a": "1"},
            header_parameters={"X-Trace": "abc"},
        )
        first = build_request(endpoint)
        second = build_request(endpoint)
        assert first == second
        assert hash(first) == hash(second)

    def test_header_difference_breaks_equality(self) -> None:
        first = build_request_from(BASE_URL, header_parameters={"X-Trace": "1"})
        second = build_request_from(BASE_URL, header_parameters={"X-Trace": "2"})
        assert first != second
