"""API Key auth plugin -- supports header and query parameter placement.

This module provides the :class:`APIKeyAuthPlugin`, which resolves a
credential from the configured ``source`` (e.g. ``env:MY_API_KEY``) and
places it according to ``location``:

* ``"header"`` -- sent as a request header (default name ``X-API-Key``).
* ``"query"``  -- sent as a query-string parameter (default name ``api_key``).
"""

from __future__ import annotations

from netzwerk.auth.base import AuthPlugin, AuthResult
from netzwerk.config import resolve_credential
from netzwerk.models import AuthConfig


class APIKeyAuthPlugin(AuthPlugin):
    """Authenticate via an API key placed in a header or query parameter.

    The key name is taken from ``auth_config.header`` for headers and
    ``auth_config.param_name`` for query parameters, each falling back to the
    other and then to a default.
    """

    @property
    def auth_type(self) -> str:
        return "api_key"

    def authenticate(self, auth_config: AuthConfig) -> AuthResult:
        credential = resolve_credential(auth_config.source)

        if auth_config.location == "query":
            key_name = auth_config.param_name or auth_config.header or "api_key"
            return AuthResult(params={key_name: credential})

        # Unknown locations are treated as header.
        key_name = auth_config.header or auth_config.param_name or "X-API-Key"
        return AuthResult(headers={key_name: credential})

    def validate_config(self, auth_config: AuthConfig) -> list[str]:
        errors: list[str] = []
        if not auth_config.header and not auth_config.param_name:
            errors.append(
                "API key auth requires 'header' or 'param_name' to specify the key name"
            )
        if not auth_config.source:
            errors.append("API key auth requires a 'source' for the credential")
        if auth_config.location not in ("header", "query"):
            errors.append(
                f"Invalid location '{auth_config.location}': must be 'header' or 'query'"
            )
        return errors
