"""In-progress request state and the decorator chain that customises it.

A request is built in two phases.  First a :class:`RequestGenerator` hands
out a :class:`MutableRequest` -- the transient, mutable builder state -- and
pipes it through *decorators*: plain functions ``MutableRequest ->
MutableRequest`` that return an enriched copy (JSON support, basic auth,
caller headers, plugin credentials).  Then
:func:`~netzwerk.request.builder.build_request` fills in parameters, query
string and body and freezes the result into a
:class:`~netzwerk.request.wire.WireRequest`.

Decorators run in the order they are piped and later ones overwrite header
values set by earlier ones.  The default order is JSON support, then basic
auth, then caller overrides, so basic auth deliberately replaces the JSON
``Content-Type`` with the form-encoded one::

    request = pipe(
        generator.request(HTTPMethod.POST),
        with_json_support,
        with_basic_auth("ada", "s3cret"),
        with_headers({"X-Trace": "1"}),
    )
"""

from __future__ import annotations

import base64
import copy
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Optional
from urllib.parse import quote, urlencode

from netzwerk.auth.base import AuthResult
from netzwerk.exceptions import BodyEncodingError, SerializationError
from netzwerk.logger import get_logger
from netzwerk.models import HTTPMethod
from netzwerk.serializer import Serializer

ACCEPT = "Accept"
AUTHORIZATION = "Authorization"
CONTENT_TYPE = "Content-Type"
BASIC_AUTH = "Basic"
JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=utf-8"
FORM_MARKER = "x-www-form-urlencoded"


def url_encode(parameters: Mapping[str, Any]) -> str:
    """Percent-encode *parameters* as ``key=value`` pairs joined by ``&``.

    Insertion order is kept.  Spaces become ``%20`` and reserved characters
    are escaped in both keys and values.

    Raises:
        TypeError: If *parameters* is not a mapping.
    """
    if not isinstance(parameters, Mapping):
        raise TypeError(f"Expected a mapping, got {type(parameters).__name__}")
    return urlencode(list(parameters.items()), quote_via=quote)


@dataclass
class MutableRequest:
    """Builder state that exists only while a request is being built.

    Attributes:
        method: HTTP method of the request.
        parameters: Body parameters -- a mapping, a sequence, a raw string,
            or any value the serializer can encode.  ``None`` means no body.
        header_fields: Header mapping; merges are last-write-wins.
        body: Encoded body bytes.
        query_string: Pre-encoded query string, without the leading ``?``.
    """

    method: HTTPMethod
    parameters: Any = field(default_factory=dict)
    header_fields: dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None
    query_string: Optional[str] = None

    def copy(self) -> MutableRequest:
        return copy.deepcopy(self)

    def update_parameters(self, parameters: Any, serializer: Serializer) -> None:
        """Store typed body parameters and pre-encode them to :attr:`body`.

        Pydantic models, dataclasses and other typed payloads are reduced to
        their mapping form when they serialize to an object, so form encoding
        can later see individual fields.  Plain mappings, sequences and
        strings are kept as given.
        """
        if parameters is None:
            self.parameters = None
            return

        if isinstance(parameters, Mapping):
            self.parameters = dict(parameters)
        elif isinstance(parameters, (str, bytes, list, tuple)):
            self.parameters = parameters
        else:
            try:
                plain = serializer.to_mapping(parameters)
            except SerializationError:
                plain = None
            self.parameters = plain if isinstance(plain, dict) else parameters

        if isinstance(parameters, str):
            self.body = parameters.encode("utf-8")
            return
        try:
            self.body = serializer.encode(parameters)
        except SerializationError as exc:
            get_logger().debug(f"Could not pre-encode parameters: {exc}")

    def update_query_parameters(self, parameters: Optional[Mapping[str, Any]]) -> None:
        """Percent-encode *parameters* into :attr:`query_string`.

        Encoding problems leave the query string untouched; the request is
        then sent to the bare URL.
        """
        if parameters is None:
            return
        try:
            self.query_string = url_encode(parameters)
        except (TypeError, ValueError) as exc:
            get_logger().warning(f"Ignoring query parameters that cannot be encoded: {exc}")

    def update_header_fields(self, header_fields: Optional[Mapping[str, str]]) -> None:
        """Merge *header_fields* into :attr:`header_fields`; same-named entries are overwritten."""
        if header_fields:
            self.header_fields.update(header_fields)

    def encode_body(self, serializer: Serializer) -> Optional[bytes]:
        """Encode :attr:`parameters` into :attr:`body` and return it.

        With a form ``Content-Type`` a mapping is first turned into a
        percent-encoded form string.  Then:

        * mapping -> JSON object
        * raw string -> UTF-8 bytes
        * list/tuple -> JSON array
        * bytes -> sent as-is
        * anything else -> delegated to *serializer*

        Raises:
            BodyEncodingError: If the parameters cannot be encoded.
        """
        params = self.parameters
        if params is None:
            return None
        try:
            if FORM_MARKER in self.header_fields.get(CONTENT_TYPE, "") and isinstance(params, Mapping):
                params = url_encode(params)
                self.parameters = params

            if isinstance(params, Mapping):
                body = json.dumps(dict(params)).encode("utf-8")
            elif isinstance(params, str):
                body = params.encode("utf-8")
            elif isinstance(params, (list, tuple)):
                body = json.dumps(list(params)).encode("utf-8")
            elif isinstance(params, bytes):
                body = params
            else:
                body = serializer.encode(params)
        except (TypeError, ValueError, SerializationError) as exc:
            raise BodyEncodingError(f"Error creating body from parameters: {exc}") from exc

        self.body = body
        return body


Decorator = Callable[[MutableRequest], MutableRequest]


def pipe(request: MutableRequest, *decorators: Decorator) -> MutableRequest:
    """Apply *decorators* to *request* left to right."""
    for decorator in decorators:
        request = decorator(request)
    return request


def with_json_support(request: MutableRequest) -> MutableRequest:
    """Accept and send JSON."""
    request = request.copy()
    request.update_header_fields({ACCEPT: JSON_CONTENT_TYPE})
    request.update_header_fields({CONTENT_TYPE: JSON_CONTENT_TYPE})
    return request


def basic_authorization(username: str, password: str) -> str:
    """Return the ``Authorization`` value for HTTP Basic auth (:rfc:`7617`)."""
    encoded = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return f"{BASIC_AUTH} {encoded}"


def with_basic_auth(username: str, password: str) -> Decorator:
    """Return a decorator adding Basic credentials and a form ``Content-Type``."""

    def decorate(request: MutableRequest) -> MutableRequest:
        request = request.copy()
        request.update_header_fields({AUTHORIZATION: basic_authorization(username, password)})
        request.update_header_fields({CONTENT_TYPE: FORM_CONTENT_TYPE})
        return request

    return decorate


def with_headers(header_fields: Mapping[str, str]) -> Decorator:
    """Return a decorator merging caller-supplied headers."""

    def decorate(request: MutableRequest) -> MutableRequest:
        request = request.copy()
        request.update_header_fields(header_fields)
        return request

    return decorate


def with_auth(auth_result: AuthResult) -> Decorator:
    """Return a decorator merging the headers produced by an auth plugin.

    Cookies are folded into a ``Cookie`` header after any existing one.
    Query ``params`` are not handled here; they belong in the endpoint's
    query parameters.
    """

    def decorate(request: MutableRequest) -> MutableRequest:
        request = request.copy()
        request.update_header_fields(auth_result.headers)
        if auth_result.cookies:
            cookie = "; ".join(f"{k}={v}" for k, v in auth_result.cookies.items())
            existing = request.header_fields.get("Cookie")
            request.header_fields["Cookie"] = f"{existing}; {cookie}" if existing else cookie
        return request

    return decorate


class RequestGenerator:
    """Decides which decorators customise the requests of an endpoint.

    Subclass and override :meth:`generate_request` to change the pipeline,
    or set :attr:`auth_username`/:attr:`auth_password` to make
    :meth:`with_basic_auth` effective.
    """

    auth_username: Optional[str] = None
    auth_password: Optional[str] = None

    def request(self, method: HTTPMethod) -> MutableRequest:
        """Return fresh builder state for *method*."""
        return MutableRequest(method=HTTPMethod(method))

    def with_basic_auth(self, request: MutableRequest) -> MutableRequest:
        """Add Basic auth when both username and password are set."""
        if self.auth_username is None or self.auth_password is None:
            return request
        return with_basic_auth(self.auth_username, self.auth_password)(request)

    def with_json_support(self, request: MutableRequest) -> MutableRequest:
        return with_json_support(request)

    def generate_request(self, method: HTTPMethod) -> MutableRequest:
        """Build the initial builder state. Defaults to JSON support only."""
        return pipe(self.request(method), self.with_json_support)


class StandardRequestGenerator(RequestGenerator):
    """The default generator: JSON in, JSON out."""


class BasicAuthRequestGenerator(RequestGenerator):
    """JSON support followed by HTTP Basic auth.

    Because basic auth runs second, the final ``Content-Type`` is the
    form-encoded one and mapping parameters are sent as a form body.
    """

    def __init__(self, username: str, password: str) -> None:
        self.auth_username = username
        self.auth_password = password

    def generate_request(self, method: HTTPMethod) -> MutableRequest:
        return pipe(self.request(method), self.with_json_support, self.with_basic_auth)
