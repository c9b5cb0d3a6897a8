"""HTTP Basic authentication plugin.

This module provides :class:`BasicAuthPlugin`, which implements the
``basic`` auth type. The credential ``source`` is resolved to a
``"username:password"`` string and sent as an
``Authorization: Basic <encoded>`` header per :rfc:`7617`.
"""

from __future__ import annotations

from netzwerk.auth.base import AuthPlugin, AuthResult
from netzwerk.config import resolve_credential
from netzwerk.exceptions import AuthError
from netzwerk.models import AuthConfig
from netzwerk.request.generator import AUTHORIZATION, basic_authorization


class BasicAuthPlugin(AuthPlugin):
    """Authenticate via HTTP Basic authentication.

    The credential source must resolve to a ``"username:password"`` string.
    """

    @property
    def auth_type(self) -> str:
        return "basic"

    def authenticate(self, auth_config: AuthConfig) -> AuthResult:
        """Resolve the credential and return a Basic auth header.

        Raises:
            AuthError: If the resolved credential does not contain a colon
                separator.
        """
        raw = resolve_credential(auth_config.source)
        if ":" not in raw:
            raise AuthError(
                "Basic auth credential must be in 'username:password' format "
                "(colon separator is required)"
            )
        username, password = raw.split(":", 1)
        return AuthResult(headers={AUTHORIZATION: basic_authorization(username, password)})

    def validate_config(self, auth_config: AuthConfig) -> list[str]:
        errors: list[str] = []
        if not auth_config.source:
            errors.append("Basic auth requires a 'source' for the credential")
        return errors
