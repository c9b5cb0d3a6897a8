"""Plugin-based authentication for netzwerk clients.

The main entry points are:

- :class:`AuthPlugin` -- abstract base class for implementing new auth strategies.
- :class:`AuthManager` -- registry that maps auth type strings to plugin instances.
- :func:`create_default_manager` -- factory that returns an :class:`AuthManager`
  pre-loaded with all built-in plugins.

Typical usage::

    from netzwerk.auth import create_default_manager
    from netzwerk.client import NetzwerkClient
    from netzwerk.models import AuthConfig, ClientConfig

    config = ClientConfig(auth=AuthConfig(type="bearer", source="env:API_TOKEN"))
    client = NetzwerkClient(config, auth_manager=create_default_manager())
"""

from netzwerk.auth.base import AuthPlugin, AuthResult
from netzwerk.auth.manager import AuthManager, create_default_manager

__all__ = [
    "AuthPlugin",
    "AuthResult",
    "AuthManager",
    "create_default_manager",
]
