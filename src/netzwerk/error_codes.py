"""Fixed application and transport error codes.

The ``CODE_*`` constants are the numeric codes carried by
:class:`~netzwerk.exceptions.NetworkErrorResponse` for failures that do not
come from the remote service; each has a matching ``DISPLAY_*`` string that
applications can show to users or quote in support requests.

The ``TRANSPORT_*`` constants are the codes a
:class:`~netzwerk.client.transport.Transport` reports in a
:class:`~netzwerk.client.transport.TransportError`.

Example::

    result = client.get("https://api.example.com/users")
    if result.is_failure and result.error.code == CODE_NO_INTERNET_CONNECTION:
        show_offline_banner()
"""

CODE_NO_INTERNET_CONNECTION = 10000
"""The transport reported that the device has no network connectivity."""

CODE_CANNOT_GET_ERROR_MESSAGE = 10001
"""The response failed but carried no error payload that could be extracted."""

CODE_PARSE_JSON_ERROR = 10002
"""The response body could not be decoded into the expected payload type."""

CODE_CONNECTION_TIMEOUT = 10003
"""The transport gave up waiting for the server."""

CODE_UNKNOWN_ERROR = 10004
"""The transport failed for a reason that has no dedicated code."""

DISPLAY_NO_INTERNET_CONNECTION = "APP10000"
DISPLAY_CANNOT_GET_ERROR_MESSAGE = "APP10001"
DISPLAY_PARSE_JSON_ERROR = "APP10002"
DISPLAY_CONNECTION_TIMEOUT = "APP10003"
DISPLAY_UNKNOWN_ERROR = "APP10004"

TRANSPORT_TIMED_OUT = -1001
"""The request timed out before a response arrived."""

TRANSPORT_NOT_CONNECTED = -1009
"""No connection to the host could be established."""

TRANSPORT_UNKNOWN = -1
"""Any other transport failure."""
