"""Endpoint descriptors -- declarative descriptions of one logical API call.

An endpoint knows *what* to call (base URL, path, method, parameters,
headers) but not how that is serialised onto the wire; that is the job of
:func:`~netzwerk.request.builder.build_request`.

Define one :class:`ServiceEndpoint` subclass per API, with one variant per
logical call::

    class UsersEndpoint(ServiceEndpoint):
        def __init__(self, name: str, job: str) -> None:
            self._payload = NewUser(name=name, job=job)

        base_url = "https://reqres.in/api"
        path = "/users"
        method = HTTPMethod.POST

        @property
        def parameters(self) -> NewUser:
            return self._payload

or use the :class:`Endpoint` dataclass when everything is known up front.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from netzwerk.models import HTTPMethod
from netzwerk.request.generator import RequestGenerator, StandardRequestGenerator


class ServiceEndpoint(ABC):
    """Interface every endpoint descriptor implements.

    Only :attr:`base_url`, :attr:`path` and :attr:`method` are required; the
    remaining properties default to "nothing" and the standard JSON
    generator.
    """

    @property
    @abstractmethod
    def base_url(self) -> str:
        """Scheme and host, optionally with a path prefix (``https://api.example.com/v1``)."""
        ...

    @property
    @abstractmethod
    def path(self) -> str:
        """Path appended to :attr:`base_url`."""
        ...

    @property
    @abstractmethod
    def method(self) -> HTTPMethod:
        ...

    @property
    def parameters(self) -> Any:
        """Typed body payload, or ``None`` for no body."""
        return None

    @property
    def query_parameters(self) -> Optional[Mapping[str, str]]:
        return None

    @property
    def header_parameters(self) -> Optional[Mapping[str, str]]:
        return None

    @property
    def request_generator(self) -> RequestGenerator:
        return StandardRequestGenerator()


@ServiceEndpoint.register
@dataclass(frozen=True)
class Endpoint:
    """A ready-made, immutable :class:`ServiceEndpoint`.

    Example::

        Endpoint(
            base_url="https://reqres.in/api",
            path="/users",
            method=HTTPMethod.GET,
            query_parameters={"page": "2"},
        )
    """

    base_url: str
    path: str = ""
    method: HTTPMethod = HTTPMethod.GET
    parameters: Any = None
    query_parameters: Optional[Mapping[str, str]] = None
    header_parameters: Optional[Mapping[str, str]] = None
    request_generator: RequestGenerator = field(
        default_factory=StandardRequestGenerator, compare=False
    )

    # Mapping fields are plain dicts; compare by value but do not hash.
    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", HTTPMethod(self.method))
