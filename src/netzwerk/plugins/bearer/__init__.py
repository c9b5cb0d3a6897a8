"""Bearer token authentication plugin.

Implements the ``bearer`` auth type: a token resolved from the configured
``source`` is sent as ``Authorization: Bearer <token>``.
"""

from netzwerk.plugins.bearer.plugin import BearerAuthPlugin

__all__ = ["BearerAuthPlugin"]
