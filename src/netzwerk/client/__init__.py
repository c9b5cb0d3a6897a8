"""Transport execution, classification and the 401 retry queue.

See :class:`~netzwerk.client.client.NetzwerkClient` for the public entry point.
"""

from netzwerk.client.client import Adapter, Completion, NetzwerkClient, RefreshCompletion
from netzwerk.client.queue import RetryQueue
from netzwerk.client.result import Failure, Response, Result, Success
from netzwerk.client.transport import HttpxTransport, Transport, TransportError, TransportOutcome

__all__ = [
    "Adapter",
    "Completion",
    "Failure",
    "HttpxTransport",
    "NetzwerkClient",
    "RefreshCompletion",
    "Response",
    "Result",
    "RetryQueue",
    "Success",
    "Transport",
    "TransportError",
    "TransportOutcome",
]
