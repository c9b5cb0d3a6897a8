"""Request builder -- turns an endpoint description into a :class:`WireRequest`.

The pipeline runs in a fixed order:

1. the endpoint's generator produces the initial builder state (by default
   with JSON ``Accept``/``Content-Type`` headers);
2. typed body parameters are stored and pre-encoded;
3. query parameters are percent-encoded (bad ones are dropped, never fatal);
4. caller headers are merged over the decorator headers;
5. base URL and path are joined, and for GET the query string is appended;
6. the body is encoded for non-GET requests with parameters;
7. the result is frozen into a :class:`WireRequest`.

Body encoding is lenient by default: a failure is logged and the request is
sent without a body.  Pass ``strict=True`` (or set
``ClientConfig.strict_body_encoding``) to get a
:class:`~netzwerk.exceptions.BodyEncodingError` instead.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

import httpx

from netzwerk.exceptions import BodyEncodingError, URLError
from netzwerk.logger import get_logger
from netzwerk.models import HTTPMethod
from netzwerk.request.endpoint import ServiceEndpoint
from netzwerk.request.generator import RequestGenerator, StandardRequestGenerator
from netzwerk.request.wire import WireRequest
from netzwerk.serializer import JSONSerializer, Serializer


def join_url(base_url: str, path: str) -> str:
    """Append *path* to *base_url* with exactly one ``/`` between them."""
    if not path:
        return base_url
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def append_query(url: str, query_string: Optional[str]) -> str:
    """Append *query_string* to *url*, extending an existing query if present."""
    if not query_string:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query_string}"


def validate_url(url: str) -> None:
    """Raise :class:`URLError` unless *url* is absolute (has a scheme and a host)."""
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise URLError(f"Invalid URL {url!r}: {exc}") from exc
    if not parsed.scheme or not parsed.host:
        raise URLError(f"Invalid URL {url!r}: a scheme and host are required")


def build_request_from(
    url: str,
    method: HTTPMethod = HTTPMethod.GET,
    parameters: Any = None,
    query_parameters: Optional[Mapping[str, Any]] = None,
    header_parameters: Optional[Mapping[str, str]] = None,
    request_generator: Optional[RequestGenerator] = None,
    *,
    path: str = "",
    serializer: Optional[Serializer] = None,
    strict: bool = False,
) -> WireRequest:
    """Build a :class:`WireRequest` from raw parts.

    Args:
        url: Absolute base URL.
        method: HTTP method.
        parameters: Body payload (mapping, sequence, string, bytes, or any
            serializable value).  Ignored for GET.
        query_parameters: Query mapping.  Appended to the URL for GET only.
        header_parameters: Caller headers; they override decorator headers.
        request_generator: Generator producing the initial builder state.
        path: Path joined onto *url*.
        serializer: Serializer for typed payloads; defaults to JSON.
        strict: Raise on body encoding failures instead of dropping the body.

    Raises:
        URLError: If the resulting URL has no scheme or host.
        BodyEncodingError: If *strict* and the body cannot be encoded.
    """
    method = HTTPMethod(method)
    generator = request_generator or StandardRequestGenerator()
    serializer = serializer or JSONSerializer()

    mutable = generator.generate_request(method)
    mutable.update_parameters(parameters, serializer)
    mutable.update_query_parameters(query_parameters)
    mutable.update_header_fields(header_parameters)

    request_url = join_url(url, path)
    validate_url(request_url)
    if method == HTTPMethod.GET:
        request_url = append_query(request_url, mutable.query_string)

    body: Optional[bytes] = None
    if mutable.parameters is not None and method != HTTPMethod.GET:
        try:
            body = mutable.encode_body(serializer)
        except BodyEncodingError as exc:
            if strict:
                raise
            get_logger().error(f"{exc} (sending {method.value} {request_url} without a body)")

    return WireRequest(
        url=request_url,
        method=method,
        header_fields=dict(mutable.header_fields),
        body=body,
    )


def build_request(
    endpoint: ServiceEndpoint,
    *,
    serializer: Optional[Serializer] = None,
    strict: bool = False,
) -> WireRequest:
    """Build a :class:`WireRequest` from an endpoint descriptor.

    Building twice from the same endpoint yields equal requests.

    Raises:
        URLError: If the endpoint's URL has no scheme or host.
        BodyEncodingError: If *strict* and the body cannot be encoded.
    """
    return build_request_from(
        endpoint.base_url,
        endpoint.method,
        parameters=endpoint.parameters,
        query_parameters=endpoint.query_parameters,
        header_parameters=endpoint.header_parameters,
        request_generator=endpoint.request_generator,
        path=endpoint.path,
        serializer=serializer,
        strict=strict,
    )
