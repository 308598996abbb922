"""JSON-RPC provider with immediate and batch modes.

- In immediate mode every :py:meth:`BaseProvider.send` is one round trip

- In batch mode :py:meth:`BaseProvider.send` queues the call and
  :py:meth:`BaseProvider.execute` sends the queue as one JSON-RPC batch

Subclasses implement the transport in :py:meth:`BaseProvider.make_request`.
See :py:class:`eth_facade.provider.http.HTTPProvider`.
"""

import enum
import itertools
import logging
import threading
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Callable, TypeAlias

from web3.types import RPCEndpoint, RPCResponse

from eth_facade.exceptions import CallNotReadyError, FacadeError, FormatError, ProtocolError, RPCError, TransportError
from eth_facade.method import MethodDescriptor

logger = logging.getLogger(__name__)


#: Receives ``(error, value)`` once the call completes
Callback: TypeAlias = Callable[[Exception | None, Any], None]


@dataclass(slots=True)
class Request:
    """One JSON-RPC request."""

    method: RPCEndpoint
    params: list
    id: int

    def as_dict(self) -> dict:
        return {
            "jsonrpc": "2.0",
            "method": self.method,
            "params": self.params,
            "id": self.id,
        }


class CallState(enum.Enum):
    pending = "pending"
    done = "done"
    cancelled = "cancelled"


@dataclass
class PendingCall:
    """A queued batch call, or a completed immediate call.

    - Resolves at most once

    - A cancelled call never fires its callback
    """

    request: Request
    descriptor: MethodDescriptor
    callback: Callback | None = None
    state: CallState = CallState.pending
    value: Any = None
    error: Exception | None = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def id(self) -> int:
        return self.request.id

    @property
    def done(self) -> bool:
        return self.state == CallState.done

    @property
    def cancelled(self) -> bool:
        return self.state == CallState.cancelled

    def cancel(self) -> bool:
        """Abandon the call.

        :return:
            ``True`` if the call was still pending and is now cancelled
        """
        with self._lock:
            if self.state != CallState.pending:
                return False
            self.state = CallState.cancelled
            return True

    def resolve(self, error: Exception | None, value: Any = None) -> bool:
        """Store the outcome and fire the callback.

        :return:
            ``False`` if the call was already resolved or cancelled
        """
        with self._lock:
            if self.state != CallState.pending:
                return False
            self.state = CallState.done
            self.error = error
            self.value = None if error else value

        if self.callback is not None:
            self.callback(self.error, self.value)
        return True

    def result(self) -> Any:
        """Get the formatted result.

        :raise FacadeError:
            The error the call resolved with

        :raise CallNotReadyError:
            The call has not been executed yet, or it was cancelled
        """
        if self.state != CallState.done:
            raise CallNotReadyError(f"Call {self.request.method} #{self.id} is {self.state.value}")
        if self.error is not None:
            raise self.error
        return self.value


class BaseProvider(ABC):
    """JSON-RPC provider state machine.

    - Owns request id counter, batch queue and API call counters

    - Decodes responses through the descriptor's output formatters

    - Shared by all namespaces of a :py:class:`eth_facade.client.Client`
    """

    def __init__(self):
        self.is_batch = False

        #: Queued calls in batch mode, in request order
        self.batch_queue: list[PendingCall] = []

        #: RPC method -> completed call count, plus ``total``
        self.api_call_counts = Counter()

        #: How many times we have hit the transport
        self.round_trips = 0

        self._ids = itertools.count(1)
        self._lock = threading.RLock()

    @property
    def endpoint_uri(self) -> str:
        """Node URI endpoint, if the provider has one.

        .. warning::

            Endpoint URIs often contain API keys.
            They should be never publicly displayed as is.
        """
        return ""

    @abstractmethod
    def make_request(self, payload: dict | list[dict], retryable: bool = False) -> RPCResponse | list[RPCResponse]:
        """Send a JSON-RPC payload over the wire and return the decoded JSON reply.

        :param payload:
            A single request object or a batch array.

        :param retryable:
            All methods in the payload are read-only, the transport may retry.

        :raise TransportError:
            Connection and HTTP level failures
        """

    def batch(self, status: bool):
        """Toggle batch mode.

        Turning batch mode off does not flush the queue, see :py:meth:`execute`.
        """
        if type(status) is not bool:
            raise TypeError(f"Batch status must be a bool, got {status!r}")
        self.is_batch = status

    def next_request(self, method: str, params: list) -> Request:
        with self._lock:
            return Request(method=RPCEndpoint(method), params=params, id=next(self._ids))

    def send(self, descriptor: MethodDescriptor, params: list, callback: Callback | None = None) -> Any:
        """Send or queue a call.

        :param descriptor:
            Method whose output formatters decode the result

        :param params:
            Already validated and formatted params

        :param callback:
            Called with ``(error, value)`` exactly once.

        :return:
            In batch mode the queued :py:class:`PendingCall`.
            In immediate mode the formatted result.

        :raise FacadeError:
            In immediate mode without a callback
        """
        request = self.next_request(descriptor.name, params)
        call = PendingCall(request=request, descriptor=descriptor, callback=callback)

        if self.is_batch:
            with self._lock:
                self.batch_queue.append(call)
            logger.debug("Queued %s #%d, queue length %d", request.method, request.id, len(self.batch_queue))
            return call

        logger.debug("Calling %s #%d", request.method, request.id)
        try:
            response = self._transmit(request.as_dict(), descriptor.retryable, [request.method])
            error, value = self._decode(call, response)
        except FacadeError as e:
            error, value = e, None

        call.resolve(error, value)
        if callback is None and error is not None:
            raise error
        return value

    def execute(self) -> list[PendingCall]:
        """Flush the batch queue as one JSON-RPC batch request.

        - Responses are matched to requests by id, not by position

        - A transport failure resolves every call of the batch with the same error

        - A malformed or missing response entry fails only its own call

        - Every call is resolved even if a callback raises.
          The first callback exception is re-raised after all calls are resolved.

        :return:
            Sent calls in request order, each resolved
        """
        with self._lock:
            queued = self.batch_queue
            self.batch_queue = []

        calls = [c for c in queued if not c.cancelled]
        if not calls:
            return []

        payload = [c.request.as_dict() for c in calls]
        retryable = all(c.descriptor.retryable for c in calls)
        logger.debug("Executing batch of %d calls", len(calls))

        try:
            responses = self._transmit(payload, retryable, [c.request.method for c in calls])
        except FacadeError as e:
            self._resolve_all([(c, (e, None)) for c in calls])
            return calls

        if not isinstance(responses, list):
            error = ProtocolError(f"Batch response is not a list: {responses!r}")
            self._resolve_all([(c, (error, None)) for c in calls])
            return calls

        by_id = {}
        for response in responses:
            # Entries without an int or str id cannot be matched and fail as missing
            if isinstance(response, dict) and isinstance(response.get("id"), (int, str)):
                by_id.setdefault(response["id"], response)

        outcomes = []
        for c in calls:
            response = by_id.get(c.id)
            if response is None:
                outcomes.append((c, (ProtocolError(f"No response for {c.request.method} #{c.id}"), None)))
            else:
                outcomes.append((c, self._decode(c, response)))

        self._resolve_all(outcomes)
        return calls

    def _resolve_all(self, outcomes: list[tuple[PendingCall, tuple[Exception | None, Any]]]):
        first_exception = None
        for call, (error, value) in outcomes:
            try:
                call.resolve(error, value)
            except Exception as e:
                logger.exception("Callback for %s #%d failed", call.request.method, call.id)
                if first_exception is None:
                    first_exception = e

        if first_exception is not None:
            raise first_exception

    def _transmit(self, payload: dict | list, retryable: bool, methods: list[str]) -> Any:
        try:
            response = self.make_request(payload, retryable=retryable)
        except FacadeError:
            raise
        except Exception as e:
            raise TransportError(f"Transport failed for {', '.join(methods)}: {e}") from e
        finally:
            self.round_trips += 1

        with self._lock:
            for method in methods:
                self.api_call_counts[method] += 1
                self.api_call_counts["total"] += 1
        return response

    def _decode(self, call: PendingCall, response: Any) -> tuple[Exception | None, Any]:
        """Turn one JSON-RPC response object to ``(error, value)``."""
        method = call.request.method

        if not isinstance(response, dict):
            return ProtocolError(f"Response for {method} is not an object: {response!r}"), None

        if response.get("id") != call.id:
            return ProtocolError(f"Response id {response.get('id')!r} does not match {method} #{call.id}"), None

        if "error" in response:
            error = response["error"]
            if not isinstance(error, dict):
                return ProtocolError(f"Bad error object for {method}: {error!r}"), None
            return RPCError(method, error), None

        if "result" not in response:
            return ProtocolError(f"Response for {method} has neither result nor error: {response!r}"), None

        raw = response["result"]
        try:
            return None, call.descriptor.format_output(raw)
        except FormatError as e:
            # The round trip has completed, log the raw result so it does not get lost
            logger.error("Could not format %s #%d result %r: %s", method, call.id, raw, e)
            return e, None
