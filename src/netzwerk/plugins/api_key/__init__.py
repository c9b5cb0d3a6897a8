"""API key authentication plugin.

Implements the ``api_key`` auth type, sending a static key either as a
request header or as a query parameter.
"""

from netzwerk.plugins.api_key.plugin import APIKeyAuthPlugin

__all__ = ["APIKeyAuthPlugin"]
