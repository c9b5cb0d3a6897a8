"""The immutable, wire-ready request handed to a transport."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from netzwerk.models import HTTPMethod


@dataclass(frozen=True)
class WireRequest:
    """A fully resolved request: absolute URL, method, headers and body.

    Equality is structural over exactly these four fields; the client relies
    on it to find a request in its in-flight pool.  Adapters never mutate a
    request, they derive a new one with :meth:`replace` or
    :meth:`with_header_fields`.
    """

    url: str
    method: HTTPMethod = HTTPMethod.GET
    header_fields: dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", HTTPMethod(self.method))
        object.__setattr__(self, "header_fields", dict(self.header_fields))

    def __hash__(self) -> int:
        return hash((self.url, self.method, tuple(sorted(self.header_fields.items())), self.body))

    def __str__(self) -> str:
        lines = [f"{self.method.value} {self.url}"]
        lines.extend(f"{name}: {value}" for name, value in self.header_fields.items())
        if self.body:
            lines.append("")
            lines.append(self.body.decode("utf-8", errors="replace"))
        return "\n".join(lines)

    def replace(self, **changes: Any) -> WireRequest:
        """Return a copy with *changes* applied."""
        return dataclasses.replace(self, **changes)

    def with_header_fields(self, header_fields: Mapping[str, str]) -> WireRequest:
        """Return a copy with *header_fields* merged over the existing headers."""
        return self.replace(header_fields={**self.header_fields, **header_fields})

    @classmethod
    def get(
        cls,
        url: str,
        query_parameters: Optional[Mapping[str, Any]] = None,
    ) -> WireRequest:
        """Build a default GET request with the standard generator.

        Raises:
            URLError: If *url* is malformed.
        """
        from netzwerk.request.builder import build_request_from

        return build_request_from(url, HTTPMethod.GET, query_parameters=query_parameters)
