"""Transport capability -- performs the actual network I/O.

A :class:`Transport` accepts a fully built
:class:`~netzwerk.request.WireRequest` and reports the raw outcome as a
:class:`TransportOutcome`.  Network failures are *reported*, not raised, as
a :class:`TransportError` whose code says what went wrong
(:data:`~netzwerk.error_codes.TRANSPORT_TIMED_OUT`,
:data:`~netzwerk.error_codes.TRANSPORT_NOT_CONNECTED`, or
:data:`~netzwerk.error_codes.TRANSPORT_UNKNOWN`).

:class:`HttpxTransport` is the default, backed by one :class:`httpx.Client`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

import httpx

from netzwerk.error_codes import TRANSPORT_NOT_CONNECTED, TRANSPORT_TIMED_OUT, TRANSPORT_UNKNOWN
from netzwerk.models import RequestConfig
from netzwerk.request.wire import WireRequest


@dataclass(frozen=True)
class TransportError:
    """A network-level failure: no HTTP response was received."""

    code: int
    message: str


@dataclass(frozen=True)
class TransportOutcome:
    """Everything a transport learned about one request.

    Either ``error`` is set, or ``status_code`` is (possibly both unset when
    the transport had nothing at all to report).
    """

    body: Optional[bytes] = None
    status_code: Optional[int] = None
    headers: dict[str, str] = field(default_factory=dict)
    url: Optional[str] = None
    error: Optional[TransportError] = None


class Transport(ABC):
    """Sends wire requests.  Implementations must be safe to call from several threads."""

    @abstractmethod
    def send(self, request: WireRequest) -> TransportOutcome:
        """Send *request* and block until the outcome is known. Never raises for network failures."""
        ...

    def close(self) -> None:
        """Release transport resources."""


def transport_error_from(exc: httpx.HTTPError) -> TransportError:
    """Map an httpx exception onto a :class:`TransportError` code."""
    if isinstance(exc, httpx.TimeoutException):
        return TransportError(code=TRANSPORT_TIMED_OUT, message=f"The request timed out. ({exc})")
    if isinstance(exc, httpx.ConnectError):
        return TransportError(
            code=TRANSPORT_NOT_CONNECTED,
            message=f"The Internet connection appears to be offline. ({exc})",
        )
    return TransportError(code=TRANSPORT_UNKNOWN, message=str(exc) or type(exc).__name__)


class HttpxTransport(Transport):
    """Transport backed by a single :class:`httpx.Client`.

    httpx keeps no response cache, so every request reaches the server.

    Args:
        config: Timeout, SSL and redirect settings.
        transport: Optional :class:`httpx.BaseTransport` to send through
            (tests pass an :class:`httpx.MockTransport`).
    """

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        config = config or RequestConfig()
        self._client = httpx.Client(
            timeout=config.timeout,
            verify=config.verify_ssl,
            follow_redirects=config.follow_redirects,
            transport=transport,
        )

    def send(self, request: WireRequest) -> TransportOutcome:
        try:
            response = self._client.request(
                request.method.value,
                request.url,
                headers=request.header_fields,
                content=request.body,
            )
        except httpx.HTTPError as exc:
            return TransportOutcome(error=transport_error_from(exc))
        return TransportOutcome(
            body=response.content,
            status_code=response.status_code,
            headers=dict(response.headers),
            url=str(response.url),
        )

    def close(self) -> None:
        self._client.close()
