"""Canonical Pydantic models shared across all netzwerk modules.

**Configuration models** -- loaded from JSON by :mod:`netzwerk.config`:
    :class:`AuthConfig`, :class:`RequestConfig`, and :class:`ClientConfig`.

**Protocol enums** -- :class:`HTTPMethod`.

All models use Pydantic v2.  :class:`AuthConfig` uses ``extra="allow"`` so
plugin-specific keys are preserved in ``model_extra``.
"""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class HTTPMethod(str, enum.Enum):
    """HTTP methods a transport must support."""

    HEAD = "HEAD"
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    TRACE = "TRACE"
    OPTIONS = "OPTIONS"
    CONNECT = "CONNECT"


# --- Auth Config ---


class AuthConfig(BaseModel):
    """Authentication configuration embedded in a :class:`ClientConfig`.

    The ``type`` field selects the plugin registered with
    :class:`~netzwerk.auth.manager.AuthManager`; the remaining fields supply
    plugin-specific parameters.

    Example::

        AuthConfig(type="bearer", source="env:API_TOKEN")
    """

    model_config = ConfigDict(extra="allow")

    type: str = Field(description="Auth type: api_key, bearer, basic")
    source: str = Field(
        default="prompt",
        description="Credential source: env:VAR, file:/path, prompt",
    )
    header: Optional[str] = Field(
        default=None, description="Header name for api_key auth"
    )
    param_name: Optional[str] = Field(
        default=None, description="Query parameter name for api_key auth"
    )
    location: str = Field(
        default="header", description="Where to send an api_key: header or query"
    )


class RequestConfig(BaseModel):
    """Transport and execution settings applied to every call of a client."""

    timeout: float = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    follow_redirects: bool = Field(default=True, description="Follow HTTP redirects")
    wait_timeout: Optional[float] = Field(
        default=None,
        description="Upper bound in seconds for a blocking call; None waits indefinitely",
    )
    max_workers: int = Field(
        default=4, ge=1, description="Background workers that run transport calls"
    )


class ClientConfig(BaseModel):
    """Configuration of one :class:`~netzwerk.client.NetzwerkClient` instance.

    Resolved by :func:`~netzwerk.config.resolve_config` from explicit
    arguments, environment variables, project config and user config.
    """

    enable_log: bool = Field(
        default=True, description="Log outgoing requests and JSON responses"
    )
    strict_body_encoding: bool = Field(
        default=False,
        description="Raise BodyEncodingError instead of sending a request without a body",
    )
    drain_on_refresh: bool = Field(
        default=True,
        description="Replay queued 401 requests as soon as an auth refresh succeeds",
    )
    max_auth_retries: int = Field(
        default=1,
        ge=0,
        description="How often one request may be replayed after a 401",
    )
    request: RequestConfig = Field(default_factory=RequestConfig)
    auth: Optional[AuthConfig] = None
