"""Bearer token authentication plugin.

This module provides :class:`BearerAuthPlugin`, which implements the
``bearer`` auth type. The token is resolved from the configured ``source``
(e.g. ``env:MY_TOKEN``, ``file:~/.token``) and injected as an
``Authorization: Bearer <token>`` header.

Refreshing re-reads the source, so a token rotated by another process (or
rewritten in the environment) is picked up after a ``401``.
"""

from __future__ import annotations

from netzwerk.auth.base import AuthPlugin, AuthResult
from netzwerk.config import resolve_credential
from netzwerk.exceptions import AuthError
from netzwerk.models import AuthConfig
from netzwerk.request.generator import AUTHORIZATION


class BearerAuthPlugin(AuthPlugin):
    """Authenticate via Bearer token in the Authorization header."""

    @property
    def auth_type(self) -> str:
        return "bearer"

    def authenticate(self, auth_config: AuthConfig) -> AuthResult:
        token = resolve_credential(auth_config.source).strip()
        if not token:
            raise AuthError(f"Bearer token from '{auth_config.source}' is empty")
        return AuthResult(headers={AUTHORIZATION: f"Bearer {token}"})

    def validate_config(self, auth_config: AuthConfig) -> list[str]:
        errors: list[str] = []
        if not auth_config.source:
            errors.append("Bearer auth requires a 'source' for the token")
        return errors
