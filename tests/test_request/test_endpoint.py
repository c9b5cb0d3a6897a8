"""Tests for endpoint descriptors."""

from __future__ import annotations

import dataclasses
import json

import pytest

from netzwerk.models import HTTPMethod
from netzwerk.request import Endpoint, ServiceEndpoint, StandardRequestGenerator, build_request


class CreateUser(ServiceEndpoint):
    base_url = "https://reqres.in/api"
    path = "/users"
    method = HTTPMethod.POST

    def __init__(self, name: str, job: str) -> None:
        self._payload = {"name": name, "job": job}

    @property
    def parameters(self) -> dict[str, str]:
        return self._payload


class TestServiceEndpoint:
    def test_defaults(self) -> None:
        endpoint = CreateUser("morpheus", "leader")
        assert endpoint.query_parameters is None
        assert endpoint.header_parameters is None
        assert isinstance(endpoint.request_generator, StandardRequestGenerator)

    def test_subclass_builds(self) -> None:
        request = build_request(CreateUser("morpheus", "leader"))
        assert request.url == "https://reqres.in/api/users"
        assert request.method == HTTPMethod.POST
        assert json.loads(request.body) == {"name": "morpheus", "job": "leader"}

    def test_cannot_instantiate_without_required_properties(self) -> None:
        class Incomplete(ServiceEndpoint):
            base_url = "https://reqres.in/api"

        with pytest.raises(TypeError):
            Incomplete()  # type: ignore[abstract]


class TestEndpointDataclass:
    def test_is_a_service_endpoint(self) -> None:
        assert isinstance(Endpoint(base_url="https://reqres.in/api"), ServiceEndpoint)

    def test_method_string_is_coerced(self) -> None:
        endpoint = Endpoint(base_url="https://reqres.in/api", method="PUT")  # type: ignore[arg-type]
        assert endpoint.method is HTTPMethod.PUT

    def test_is_immutable(self) -> None:
        endpoint = Endpoint(base_url="https://reqres.in/api")
        with pytest.raises(dataclasses.FrozenInstanceError):
            endpoint.path = "/other"  # type: ignore[misc]

    def test_equality_ignores_generator_instance(self) -> None:
        first = Endpoint(base_url="https://reqres.in/api", path="/users")
        second = Endpoint(base_url="https://reqres.in/api", path="/users")
        assert first == second

    def test_equal_but_unhashable(self) -> None:
        endpoint = Endpoint(base_url="https://reqres.in/api", query_parameters={"page": "2"})
        assert endpoint == Endpoint(base_url="https://reqres.in/api", query_parameters={"page": "2"})
        with pytest.raises(TypeError):
            hash(endpoint)
