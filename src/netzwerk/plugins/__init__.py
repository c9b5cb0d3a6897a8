"""Built-in authentication plugins.

Each subpackage provides one :class:`~netzwerk.auth.base.AuthPlugin`:

* :mod:`netzwerk.plugins.api_key` -- ``api_key``
* :mod:`netzwerk.plugins.basic` -- ``basic``
* :mod:`netzwerk.plugins.bearer` -- ``bearer``

They are registered together by
:func:`~netzwerk.auth.manager.create_default_manager`.
"""
