"""HTTP Basic authentication plugin.

Implements the ``basic`` auth type, which encodes a ``username:password``
credential pair using Base64 and sends it as an ``Authorization: Basic``
header per :rfc:`7617`.

See Also:
    :class:`~netzwerk.plugins.basic.plugin.BasicAuthPlugin`
    :func:`netzwerk.request.generator.with_basic_auth` for the
    request-decorator form of the same header.
"""

from netzwerk.plugins.basic.plugin import BasicAuthPlugin

__all__ = ["BasicAuthPlugin"]
