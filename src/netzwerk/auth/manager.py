"""Auth manager -- registry and dispatcher for auth plugins.

The :class:`AuthManager` maps auth-type strings (``"api_key"``,
``"basic"``, ``"bearer"``) to concrete
:class:`~netzwerk.auth.base.AuthPlugin` instances and exposes
:meth:`~AuthManager.authenticate` and :meth:`~AuthManager.refresh`, which
the client calls before the first request and after a ``401``.

For most use cases, call :func:`create_default_manager` to get a manager
pre-loaded with every built-in plugin.
"""

from __future__ import annotations

from typing import Optional

from netzwerk.auth.base import AuthPlugin, AuthResult
from netzwerk.exceptions import AuthError
from netzwerk.models import AuthConfig


class AuthManager:
    """Registry and dispatcher for authentication plugins.

    Example::

        from netzwerk.auth import AuthManager
        from netzwerk.plugins.bearer import BearerAuthPlugin

        manager = AuthManager()
        manager.register(BearerAuthPlugin())
        result = manager.authenticate(AuthConfig(type="bearer", source="env:TOKEN"))
    """

    def __init__(self) -> None:
        self._plugins: dict[str, AuthPlugin] = {}

    def register(self, plugin: AuthPlugin) -> None:
        """Register *plugin*, replacing any plugin of the same type."""
        self._plugins[plugin.auth_type] = plugin

    def get_plugin(self, auth_type: str) -> AuthPlugin:
        """Retrieve a registered plugin by its auth type identifier.

        Raises:
            AuthError: If no plugin is registered for *auth_type*.
        """
        plugin = self._plugins.get(auth_type)
        if plugin is None:
            available = ", ".join(sorted(self._plugins)) or "(none)"
            raise AuthError(
                f"No auth plugin registered for type '{auth_type}'. "
                f"Available types: {available}"
            )
        return plugin

    def authenticate(self, auth_config: Optional[AuthConfig]) -> AuthResult:
        """Authenticate with the plugin matching ``auth_config.type``.

        Returns an empty :class:`AuthResult` when *auth_config* is ``None``.
        """
        if auth_config is None:
            return AuthResult()
        return self.get_plugin(auth_config.type).authenticate(auth_config)

    def refresh(self, auth_config: Optional[AuthConfig]) -> AuthResult:
        """Refresh credentials with the plugin matching ``auth_config.type``.

        Raises:
            AuthError: If there is nothing to refresh or the plugin fails.
        """
        if auth_config is None:
            raise AuthError("Cannot refresh credentials: no auth configuration")
        return self.get_plugin(auth_config.type).refresh(auth_config)

    def list_types(self) -> list[str]:
        """Return the identifiers of all registered auth types, sorted."""
        return sorted(self._plugins.keys())


def create_default_manager() -> AuthManager:
    """Create an :class:`AuthManager` pre-loaded with the built-in plugins.

    - ``api_key`` -- static API key in a header or query parameter.
    - ``basic`` -- HTTP Basic authentication.
    - ``bearer`` -- bearer token.
    """
    from netzwerk.plugins.api_key import APIKeyAuthPlugin
    from netzwerk.plugins.basic import BasicAuthPlugin
    from netzwerk.plugins.bearer import BearerAuthPlugin

    manager = AuthManager()
    manager.register(APIKeyAuthPlugin())
    manager.register(BasicAuthPlugin())
    manager.register(BearerAuthPlugin())
    return manager
