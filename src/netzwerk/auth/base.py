"""Abstract base class for authentication plugins.

This module defines the two foundational types of the auth subsystem:

- :class:`AuthResult` -- a plain container for the HTTP headers, query
  parameters, and cookies that an auth plugin produces.
- :class:`AuthPlugin` -- the abstract base class that every authentication
  strategy must extend.

Plugins feed two places in the client: the default
:meth:`~netzwerk.client.NetzwerkClient.adapter` merges the current
:class:`AuthResult` into every outgoing request, and the default
:meth:`~netzwerk.client.NetzwerkClient.handle_unauthorized` calls
:meth:`AuthPlugin.refresh` when the server answers ``401``.

See Also:
    :mod:`netzwerk.auth.manager` for plugin registration and dispatch.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from netzwerk.models import AuthConfig


class AuthResult:
    """Container for authentication artifacts to inject into HTTP requests.

    Args:
        headers: HTTP headers to add (e.g. ``{"Authorization": "Bearer ..."}``).
        params: Query-string parameters to add (e.g. ``{"api_key": "..."}``).
        cookies: Cookies to add (serialised into a ``Cookie`` header).

    Example::

        result = AuthResult(headers={"Authorization": "Bearer tok123"})
        assert result.headers["Authorization"] == "Bearer tok123"
    """

    def __init__(
        self,
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
        cookies: dict[str, str] | None = None,
    ):
        self.headers = headers or {}
        self.params = params or {}
        self.cookies = cookies or {}

    def __repr__(self) -> str:
        # Never print credential values.
        return (
            f"AuthResult(headers={sorted(self.headers)}, params={sorted(self.params)}, "
            f"cookies={sorted(self.cookies)})"
        )


class AuthPlugin(ABC):
    """Abstract base class for authentication plugins.

    Every concrete auth strategy must provide:

    1. An :attr:`auth_type` property returning a unique string identifier
       (e.g. ``"api_key"``, ``"bearer"``).
    2. An :meth:`authenticate` implementation that resolves credentials from
       the supplied :class:`~netzwerk.models.AuthConfig` and returns an
       :class:`AuthResult`.
    """

    @property
    @abstractmethod
    def auth_type(self) -> str:
        """Return the unique auth type identifier this plugin handles."""
        ...

    @abstractmethod
    def authenticate(self, auth_config: AuthConfig) -> AuthResult:
        """Resolve credentials and return auth artifacts for HTTP requests.

        Raises:
            AuthError: If credentials cannot be resolved or are invalid.
        """
        ...

    def refresh(self, auth_config: AuthConfig) -> AuthResult:
        """Refresh credentials after the server rejected them with ``401``.

        The default implementation simply re-authenticates from scratch,
        which picks up a rotated token from its source.  Plugins that hold a
        refresh token should override this.
        """
        return self.authenticate(auth_config)

    def validate_config(self, auth_config: AuthConfig) -> list[str]:
        """Validate the auth configuration before use.

        Returns:
            A list of error message strings.  An empty list means the
            configuration is valid.
        """
        return []
