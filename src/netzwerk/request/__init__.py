"""Endpoint descriptors and the request-construction pipeline.

* :class:`ServiceEndpoint` / :class:`Endpoint` -- what to call.
* :class:`RequestGenerator` and the decorators in
  :mod:`netzwerk.request.generator` -- how the request is customised.
* :func:`build_request` / :func:`build_request_from` -- the builder.
* :class:`WireRequest` -- the immutable result handed to a transport.

Example::

    from netzwerk.request import Endpoint, build_request

    request = build_request(Endpoint(base_url="https://reqres.in/api", path="/users",
                                     query_parameters={"page": "2"}))
    assert request.url == "https://reqres.in/api/users?page=2"
"""

from netzwerk.request.builder import build_request, build_request_from
from netzwerk.request.endpoint import Endpoint, ServiceEndpoint
from netzwerk.request.generator import (
    BasicAuthRequestGenerator,
    MutableRequest,
    RequestGenerator,
    StandardRequestGenerator,
    pipe,
    with_auth,
    with_basic_auth,
    with_headers,
    with_json_support,
)
from netzwerk.request.wire import WireRequest

__all__ = [
    "BasicAuthRequestGenerator",
    "Endpoint",
    "MutableRequest",
    "RequestGenerator",
    "ServiceEndpoint",
    "StandardRequestGenerator",
    "WireRequest",
    "build_request",
    "build_request_from",
    "pipe",
    "with_auth",
    "with_basic_auth",
    "with_headers",
    "with_json_support",
]
