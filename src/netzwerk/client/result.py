"""Typed outcome of an executed request."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Response(Generic[T]):
    """A successful response together with its decoded payload.

    Attributes:
        status_code: HTTP status code (always 2xx).
        body: Raw response body.
        body_object: The body decoded into the requested type.
        headers: Response headers.
        url: Final URL after redirects.
    """

    status_code: int
    body: Optional[bytes]
    body_object: T
    headers: dict[str, str] = field(default_factory=dict)
    url: Optional[str] = None


@dataclass(frozen=True)
class Success(Generic[T]):
    response: Response[T]

    @property
    def is_success(self) -> bool:
        return True

    @property
    def is_failure(self) -> bool:
        return False

    @property
    def value(self) -> Response[T]:
        return self.response

    @property
    def error(self) -> None:
        return None


@dataclass(frozen=True)
class Failure:
    failure: Exception

    @property
    def is_success(self) -> bool:
        return False

    @property
    def is_failure(self) -> bool:
        return True

    @property
    def value(self) -> None:
        return None

    @property
    def error(self) -> Exception:
        return self.failure


Result = Union[Success[T], Failure]
"""Either :class:`Success` carrying a :class:`Response`, or :class:`Failure` carrying an error.

Results returned by :class:`~netzwerk.client.NetzwerkClient` always carry a
:class:`~netzwerk.exceptions.NetworkErrorResponse` on failure::

    result = client.get("https://reqres.in/api/users/2", response_type=UserEnvelope)
    if result.is_success:
        user = result.value.body_object
    else:
        print(result.error.display_code, result.error)
"""
