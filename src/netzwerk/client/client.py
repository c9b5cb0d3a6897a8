"""The netzwerk client: executes wire requests and owns the 401 retry flow.

:class:`NetzwerkClient` is the public entry point.  One instance owns one
transport, one retry queue and one in-flight pool, so independently
constructed clients never share state.

Every call runs the same core:

1. adapters derive the request actually sent (auth credentials, extra headers);
2. the request is recorded in the in-flight pool and logged;
3. the transport sends it;
4. the request is removed from the pool by structural equality;
5. the outcome is classified and normalized.

Two calling conventions wrap this core:

- **Blocking** -- ``client.execute_request(request)`` runs the core on a
  background worker and waits for its one-shot delivery.
- **Callback** -- ``client.execute_request(request, completion)`` returns
  immediately and calls ``completion(result)`` exactly once on the callback
  executor (a single dedicated thread by default).

A ``401`` does not produce a result straight away.  A replay of the request
is queued on :attr:`NetzwerkClient.retry_queue` and
:meth:`NetzwerkClient.handle_unauthorized` is asked to refresh credentials.
Only one refresh runs at a time; requests rejected meanwhile just queue up.
When the refresh succeeds the queue is drained (unless
``ClientConfig.drain_on_refresh`` is off, in which case the caller drains it
with :meth:`NetzwerkClient.drain_retry_queue`).  When it fails, every
waiting caller receives a normalized "Unknown Error.".

Example::

    with NetzwerkClient() as client:
        result = client.get("https://reqres.in/api/users/2", response_type=UserEnvelope)
        if result.is_success:
            print(result.value.body_object.data.first_name)
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Any, Callable, Optional

from netzwerk.auth.base import AuthResult
from netzwerk.auth.manager import AuthManager, create_default_manager
from netzwerk.client.classify import (
    UNAUTHORIZED,
    ErrorPayload,
    classify,
    get_error_from_payload,
    load_json_object,
    transform_service_response,
)
from netzwerk.client.queue import Action, RetryQueue
from netzwerk.client.result import Failure, Result
from netzwerk.client.transport import HttpxTransport, Transport, TransportError, TransportOutcome
from netzwerk.config import resolve_config
from netzwerk.error_codes import TRANSPORT_UNKNOWN
from netzwerk.exceptions import (
    AuthError,
    CannotGetErrorMessage,
    ConfigError,
    ConnectionTimeout,
    Unauthorized,
    UnknownError,
    URLError,
)
from netzwerk.logger import get_logger, pretty_json
from netzwerk.models import ClientConfig
from netzwerk.request.builder import append_query, build_request
from netzwerk.request.endpoint import ServiceEndpoint
from netzwerk.request.generator import url_encode
from netzwerk.request.wire import WireRequest
from netzwerk.serializer import JSONSerializer, Serializer

logger = logging.getLogger(__name__)

Completion = Callable[[Result[Any]], None]
RefreshCompletion = Callable[[bool], None]
Adapter = Callable[[WireRequest], WireRequest]


class _Delivery:
    """One-shot hand-off of a normalized result to the waiting caller.

    The first :meth:`settle` wins; later ones are ignored.  With a
    *completion* the result is dispatched onto *executor*, otherwise it is
    kept for :meth:`wait`.
    """

    def __init__(
        self,
        completion: Optional[Completion] = None,
        executor: Optional[Executor] = None,
    ) -> None:
        self._completion = completion
        self._executor = executor
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._result: Optional[Result[Any]] = None

    @property
    def settled(self) -> bool:
        return self._event.is_set()

    @property
    def result(self) -> Optional[Result[Any]]:
        return self._result

    def settle(self, result: Result[Any]) -> bool:
        with self._lock:
            if self._event.is_set():
                return False
            self._result = result
            self._event.set()
        if self._completion is not None:
            self._dispatch(result)
        return True

    def wait(self, timeout: Optional[float] = None) -> Optional[Result[Any]]:
        if not self._event.wait(timeout):
            return None
        return self._result

    def _dispatch(self, result: Result[Any]) -> None:
        if self._executor is None:
            self._invoke(result)
            return
        try:
            self._executor.submit(self._invoke, result)
        except RuntimeError:
            logger.warning("Callback executor is shut down; dropping result %r", result)

    def _invoke(self, result: Result[Any]) -> None:
        if self._completion is None:
            return
        try:
            self._completion(result)
        except Exception as exc:
            logger.exception("Completion handler raised")
            get_logger().error(f"Completion handler raised: {exc!r}")


class NetzwerkClient:
    """HTTP client with pluggable transport, adapters and auth refresh.

    Args:
        config: Client configuration.  Defaults to ``ClientConfig()``; use
            :meth:`default` to resolve it from files and the environment.
        transport: Transport to send requests with.  Defaults to an
            :class:`~netzwerk.client.transport.HttpxTransport` built from
            ``config.request``; a default transport is closed with the client.
        serializer: Serializer for bodies and payloads.  Defaults to JSON.
        auth_manager: Plugin registry used by the default :meth:`adapter`
            and :meth:`handle_unauthorized`.  Created with the built-in
            plugins when ``config.auth`` is set and none is given.
        adapters: Extra adapters applied after :meth:`adapter`, in order.
        callback_executor: Where completion handlers run.  Defaults to a
            single dedicated thread owned by the client.

    Subclass and override :meth:`adapter`, :meth:`handle_unauthorized` or
    :meth:`get_error_from_payload` to customise behaviour.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        transport: Optional[Transport] = None,
        serializer: Optional[Serializer] = None,
        auth_manager: Optional[AuthManager] = None,
        adapters: Optional[list[Adapter]] = None,
        callback_executor: Optional[Executor] = None,
    ) -> None:
        self.config = config or ClientConfig()
        self.enable_log = self.config.enable_log
        self.retry_queue = RetryQueue()

        self._owns_transport = transport is None
        self._transport = transport or HttpxTransport(self.config.request)
        self._serializer = serializer or JSONSerializer()
        if auth_manager is None and self.config.auth is not None:
            auth_manager = create_default_manager()
        self._auth_manager = auth_manager
        self._auth_result: Optional[AuthResult] = None
        self._adapters = list(adapters or [])

        self._lock = threading.Lock()
        self._in_flight: list[WireRequest] = []
        self._refreshing = False
        self._waiting: list[tuple[_Delivery, Action]] = []

        self._local = threading.local()
        self._workers = ThreadPoolExecutor(
            max_workers=self.config.request.max_workers,
            thread_name_prefix="netzwerk-worker",
        )
        self._owns_callback_executor = callback_executor is None
        self._callback_executor = callback_executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="netzwerk-callbacks"
        )

    @classmethod
    def default(cls, **kwargs: Any) -> NetzwerkClient:
        """Create a client from the resolved user/project/environment configuration.

        Raises:
            ConfigError: If the configuration cannot be resolved.
        """
        return cls(resolve_config(), **kwargs)

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def __enter__(self) -> NetzwerkClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Wait for running calls, deliver pending callbacks and release the transport."""
        self._workers.shutdown(wait=True)
        if self._owns_callback_executor:
            self._callback_executor.shutdown(wait=True)
        if self._owns_transport:
            self._transport.close()

    # ------------------------------------------------------------------ #
    # Public surface
    # ------------------------------------------------------------------ #

    @property
    def in_flight(self) -> tuple[WireRequest, ...]:
        """Snapshot of the requests currently awaiting a transport response."""
        with self._lock:
            return tuple(self._in_flight)

    def build(self, endpoint: ServiceEndpoint) -> WireRequest:
        """Build *endpoint* with this client's serializer and body-encoding mode.

        Raises:
            URLError: If the endpoint's URL is malformed.
            BodyEncodingError: In strict mode, if the body cannot be encoded.
        """
        return build_request(
            endpoint,
            serializer=self._serializer,
            strict=self.config.strict_body_encoding,
        )

    def execute_request(
        self,
        request: WireRequest,
        completion: Optional[Completion] = None,
        *,
        response_type: Any = Any,
    ) -> Optional[Result[Any]]:
        """Send *request* and decode a successful body into *response_type*.

        Without *completion* the call blocks and returns the normalized
        :data:`~netzwerk.client.result.Result`.  With *completion* it returns
        ``None`` at once and ``completion(result)`` is called exactly once on
        the callback executor.

        Failures never raise; they arrive as ``Failure(NetworkErrorResponse)``.
        """
        if completion is not None:
            delivery = _Delivery(completion, self._callback_executor)
            self._workers.submit(self._run_on_worker, request, response_type, delivery)
            return None
        return self._execute_blocking(request, response_type)

    def execute(
        self,
        endpoint: ServiceEndpoint,
        completion: Optional[Completion] = None,
        *,
        response_type: Any = Any,
    ) -> Optional[Result[Any]]:
        """Build *endpoint* and execute it. See :meth:`execute_request`.

        Raises:
            URLError: If the endpoint's URL is malformed.
            BodyEncodingError: In strict mode, if the body cannot be encoded.
        """
        return self.execute_request(self.build(endpoint), completion, response_type=response_type)

    def get(
        self,
        url: str,
        completion: Optional[Completion] = None,
        *,
        query_parameters: Optional[dict[str, Any]] = None,
        response_type: Any = Any,
    ) -> Optional[Result[Any]]:
        """Send a default GET request to *url*. See :meth:`execute_request`.

        A malformed *url* is reported as a normalized "Invalid URL request."
        failure rather than raised.
        """
        try:
            request = WireRequest.get(url, query_parameters)
        except URLError as exc:
            failure = transform_service_response(Failure(exc))
            if completion is None:
                return failure
            _Delivery(completion, self._callback_executor).settle(failure)
            return None
        return self.execute_request(request, completion, response_type=response_type)

    def drain_retry_queue(self) -> int:
        """Replay every request stalled on a ``401``, oldest first.

        Returns:
            The number of replays run.
        """
        drained = self.retry_queue.drain_all()
        if drained:
            get_logger().info(f"Replayed {drained} request(s) after credential refresh")
        return drained

    # ------------------------------------------------------------------ #
    # Extension points
    # ------------------------------------------------------------------ #

    def adapter(self, request: WireRequest) -> WireRequest:
        """Derive the request that is actually sent.

        The default injects the current :class:`~netzwerk.auth.base.AuthResult`
        when the configuration has an ``auth`` section: its headers (the
        request's own headers win), its cookies and its query parameters.

        Raises:
            AuthError: If credentials cannot be resolved.
            ConfigError: If the credential source is invalid.
        """
        auth = self._current_auth()
        if auth is None:
            return request

        header_fields = {**auth.headers, **request.header_fields}
        if auth.cookies:
            cookie = "; ".join(f"{k}={v}" for k, v in auth.cookies.items())
            existing = header_fields.get("Cookie")
            header_fields["Cookie"] = f"{existing}; {cookie}" if existing else cookie
        url = append_query(request.url, url_encode(auth.params)) if auth.params else request.url
        return request.replace(url=url, header_fields=header_fields)

    def handle_unauthorized(self, request: WireRequest, completion: RefreshCompletion) -> None:
        """Refresh credentials after *request* was rejected with ``401``.

        Call ``completion(True)`` once new credentials are in place, or
        ``completion(False)`` if they cannot be obtained.  *completion* may
        be called from any thread.

        The default refreshes through the auth manager's plugin and reports
        failure straight away when there is nothing to refresh.
        """
        if self._auth_manager is None or self.config.auth is None:
            completion(False)
            return
        try:
            auth = self._auth_manager.refresh(self.config.auth)
        except (AuthError, ConfigError) as exc:
            get_logger().error(f"Credential refresh failed: {exc}")
            completion(False)
            return
        with self._lock:
            self._auth_result = auth
        completion(True)

    def get_error_from_payload(self, payload: Any) -> Optional[ErrorPayload]:
        """Extract ``(status_code, status_message)`` from an error body.

        See :func:`~netzwerk.client.classify.get_error_from_payload`.
        """
        return get_error_from_payload(payload)

    # ------------------------------------------------------------------ #
    # Core
    # ------------------------------------------------------------------ #

    def _execute_blocking(self, request: WireRequest, response_type: Any) -> Result[Any]:
        delivery = _Delivery()
        if getattr(self._local, "is_worker", False):
            # Already on a worker (e.g. a refresh hook making its own call);
            # waiting on the pool from here could starve it.
            self._perform_guarded(request, response_type, delivery, attempt=0)
        else:
            self._workers.submit(self._run_on_worker, request, response_type, delivery)

        result = delivery.wait(self.config.request.wait_timeout)
        if result is not None:
            return result
        timeout = transform_service_response(
            Failure(ConnectionTimeout(f"No response within {self.config.request.wait_timeout}s"))
        )
        if delivery.settle(timeout):
            return timeout
        return delivery.result

    def _run_on_worker(self, request: WireRequest, response_type: Any, delivery: _Delivery) -> None:
        self._local.is_worker = True
        self._perform_guarded(request, response_type, delivery, attempt=0)

    def _perform_guarded(
        self,
        request: WireRequest,
        response_type: Any,
        delivery: _Delivery,
        attempt: int,
    ) -> None:
        try:
            self._perform(request, response_type, delivery, attempt)
        except Exception as exc:
            logger.exception("Request execution failed")
            delivery.settle(transform_service_response(Failure(UnknownError(str(exc)))))

    def _perform(
        self,
        request: WireRequest,
        response_type: Any,
        delivery: _Delivery,
        attempt: int,
    ) -> None:
        try:
            adapted = self._adapt(request)
        except (AuthError, ConfigError) as exc:
            get_logger().error(f"Cannot prepare request: {exc}")
            delivery.settle(transform_service_response(Failure(CannotGetErrorMessage())))
            return

        with self._lock:
            self._in_flight.append(adapted)
        if self.enable_log:
            get_logger().debug(f"Request: {adapted}")

        try:
            outcome = self._transport.send(adapted)
        except Exception as exc:
            logger.exception("Transport raised instead of reporting an error")
            outcome = TransportOutcome(error=TransportError(code=TRANSPORT_UNKNOWN, message=str(exc)))
        finally:
            self._remove_from_pool(adapted)

        if self.enable_log:
            payload = load_json_object(outcome.body)
            if payload is not None:
                get_logger().debug(f"Response: {pretty_json(payload)}")

        if outcome.error is None and outcome.status_code == UNAUTHORIZED:
            self._defer_unauthorized(request, response_type, delivery, attempt)
            return

        result = classify(outcome, response_type, self._serializer, self.get_error_from_payload)
        delivery.settle(transform_service_response(result))

    def _adapt(self, request: WireRequest) -> WireRequest:
        adapted = self.adapter(request)
        for adapter in self._adapters:
            adapted = adapter(adapted)
        return adapted

    def _remove_from_pool(self, request: WireRequest) -> None:
        with self._lock:
            try:
                self._in_flight.remove(request)
            except ValueError:
                logger.debug("Request not found in in-flight pool: %s %s", request.method.value, request.url)

    def _current_auth(self) -> Optional[AuthResult]:
        if self._auth_manager is None or self.config.auth is None:
            return None
        auth = self._auth_result
        if auth is None:
            auth = self._auth_manager.authenticate(self.config.auth)
            with self._lock:
                if self._auth_result is None:
                    self._auth_result = auth
                auth = self._auth_result
        return auth

    # ------------------------------------------------------------------ #
    # 401 handling
    # ------------------------------------------------------------------ #

    def _defer_unauthorized(
        self,
        request: WireRequest,
        response_type: Any,
        delivery: _Delivery,
        attempt: int,
    ) -> None:
        if attempt >= self.config.max_auth_retries:
            delivery.settle(transform_service_response(Failure(Unauthorized())))
            return

        def replay() -> None:
            if delivery.settled:
                return
            self._perform_guarded(request, response_type, delivery, attempt + 1)

        with self._lock:
            self.retry_queue.enqueue(replay)
            self._waiting.append((delivery, replay))
            if self._refreshing:
                return
            self._refreshing = True

        if self.enable_log:
            get_logger().warning(f"Unauthorized: {request.method.value} {request.url}; refreshing credentials")
        try:
            self.handle_unauthorized(request, self._on_refresh_complete)
        except Exception:
            logger.exception("Unauthorized handler raised")
            self._on_refresh_complete(False)

    def _on_refresh_complete(self, success: bool) -> None:
        with self._lock:
            if not self._refreshing:
                return
            self._refreshing = False
            waiting, self._waiting = self._waiting, []

        if not success:
            self.retry_queue.discard(replay for _, replay in waiting)
            failure = transform_service_response(Failure(CannotGetErrorMessage()))
            for delivery, _ in waiting:
                delivery.settle(failure)
            return
        if self.config.drain_on_refresh:
            self.drain_retry_queue()
