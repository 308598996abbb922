"""Batch mode tests."""

import threading
from unittest.mock import MagicMock

import pytest
import requests

from eth_facade.exceptions import CallNotReadyError, ProtocolError, RPCError, TransportError
from eth_facade.namespaces.eth import Eth
from eth_facade.provider.base import CallState, PendingCall

DAI = "0x6B175474E89094C44Da98b954EedeAC495271d0F"


def test_batch_queues_without_transport(client, provider):
    client.batch(True)
    call = client.eth.block_number()
    assert isinstance(call, PendingCall)
    assert call.state == CallState.pending
    assert provider.payloads == []
    assert provider.round_trips == 0


def test_batch_one_round_trip(client, provider):
    """N queued calls are one transport round trip and N callbacks."""
    client.batch(True)
    callbacks = [MagicMock() for _ in range(3)]
    client.eth.block_number(callback=callbacks[0])
    client.eth.get_balance(DAI, callback=callbacks[1])
    client.net.peer_count(callback=callbacks[2])

    calls = client.execute()

    assert provider.round_trips == 1
    assert len(provider.payloads) == 1
    assert [p["method"] for p in provider.payloads[0]] == ["eth_blockNumber", "eth_getBalance", "net_peerCount"]
    callbacks[0].assert_called_once_with(None, 19_000_000)
    callbacks[1].assert_called_once_with(None, 10**18)
    callbacks[2].assert_called_once_with(None, 25)
    assert [c.result() for c in calls] == [19_000_000, 10**18, 25]
    assert client.provider.batch_queue == []


def test_batch_reversed_responses(client, provider):
    """Responses are matched by id even when the node reorders them."""
    provider.reply_hook = lambda reply: list(reversed(reply))

    client.batch(True)
    cb1 = MagicMock()
    cb2 = MagicMock()
    client.net.version(callback=cb1)
    client.client_version(callback=cb2)
    client.execute()

    assert len(provider.payloads) == 1
    assert len(provider.payloads[0]) == 2
    cb1.assert_called_once_with(None, "1")
    cb2.assert_called_once_with(None, "Geth/v1.14.0-stable/linux-amd64/go1.22.2")


def test_batch_transport_failure_broadcast(client, provider):
    """Every call of a failed batch gets the same transport error once."""
    provider.results["eth_blockNumber"] = requests.exceptions.ConnectionError("refused")

    client.batch(True)
    callbacks = [MagicMock(), MagicMock()]
    client.eth.block_number(callback=callbacks[0])
    client.eth.chain_id(callback=callbacks[1])
    calls = client.execute()

    errors = []
    for cb in callbacks:
        cb.assert_called_once()
        error, value = cb.call_args.args
        assert isinstance(error, TransportError)
        assert value is None
        errors.append(error)
    assert errors[0] is errors[1]

    with pytest.raises(TransportError):
        calls[0].result()


def test_batch_malformed_entry_scoped(client, provider):
    """A broken response entry fails only its own call."""

    def break_second(reply):
        reply[1] = {"jsonrpc": "2.0", "id": reply[1]["id"]}
        return reply

    provider.reply_hook = break_second

    client.batch(True)
    first = client.eth.block_number()
    second = client.eth.chain_id()
    third = client.net.version()
    client.execute()

    assert first.result() == 19_000_000
    with pytest.raises(ProtocolError):
        second.result()
    assert third.result() == "1"


def test_batch_unmatchable_id_scoped(client, provider):
    """An entry with an id that cannot be matched fails as missing, siblings still resolve."""

    def list_id(reply):
        reply[1] = {"jsonrpc": "2.0", "id": [reply[1]["id"]], "result": "0x1"}
        return reply

    provider.reply_hook = list_id

    client.batch(True)
    first = client.eth.block_number()
    second = client.eth.chain_id()
    third = client.net.version()
    client.execute()

    assert first.result() == 19_000_000
    with pytest.raises(ProtocolError):
        second.result()
    assert third.result() == "1"


def test_batch_missing_response(client, provider):
    provider.reply_hook = lambda reply: reply[:1]

    client.batch(True)
    first = client.eth.block_number()
    second = client.eth.chain_id()
    client.execute()

    assert first.result() == 19_000_000
    with pytest.raises(ProtocolError):
        second.result()


def test_batch_not_a_list(client, provider):
    provider.reply_hook = lambda reply: {"jsonrpc": "2.0", "id": None, "error": {"code": -32600, "message": "Invalid request"}}

    client.batch(True)
    calls = [client.eth.block_number(), client.net.version()]
    client.execute()

    for call in calls:
        with pytest.raises(ProtocolError):
            call.result()


def test_batch_rpc_error_entry(client, provider):
    provider.results["eth_chainId"] = {"code": -32601, "message": "Method not found"}

    client.batch(True)
    first = client.eth.block_number()
    second = client.eth.chain_id()
    client.execute()

    assert first.result() == 19_000_000
    with pytest.raises(RPCError):
        second.result()


def test_batch_off_does_not_flush(client, provider):
    client.batch(True)
    queued = client.eth.block_number()
    client.batch(False)

    assert provider.payloads == []
    assert len(client.provider.batch_queue) == 1

    # Immediate calls still work while the queue waits
    assert client.eth.chain_id() == 1

    client.execute()
    assert queued.result() == 19_000_000


def test_execute_empty_queue(client, provider):
    assert client.execute() == []
    assert provider.round_trips == 0


def test_cancelled_call_not_sent(client, provider):
    """A cancelled call never fires and is left out of the batch."""
    client.batch(True)
    cb = MagicMock()
    cancelled = client.eth.block_number(callback=cb)
    kept = client.eth.chain_id()

    assert cancelled.cancel() is True
    assert cancelled.cancel() is False
    client.execute()

    cb.assert_not_called()
    assert [p["method"] for p in provider.payloads[0]] == ["eth_chainId"]
    assert kept.result() == 1


def test_resolve_only_once(provider):
    eth = Eth(provider)
    provider.batch(True)
    cb = MagicMock()
    call = eth.block_number(callback=cb)
    provider.execute()
    assert call.resolve(None, 1) is False
    cb.assert_called_once_with(None, 19_000_000)


def test_result_before_execute(client):
    client.batch(True)
    call = client.eth.block_number()
    with pytest.raises(CallNotReadyError):
        call.result()

    call.cancel()
    with pytest.raises(CallNotReadyError):
        call.result()


def test_batch_requires_bool(client):
    with pytest.raises(TypeError):
        client.batch("yes")
    assert client.provider.is_batch is False


def test_api_call_counts(client, provider):
    client.batch(True)
    client.eth.block_number()
    client.eth.block_number()
    client.net.version()
    client.execute()

    assert provider.api_call_counts["eth_blockNumber"] == 2
    assert provider.api_call_counts["net_version"] == 1
    assert provider.api_call_counts["total"] == 3


def test_raising_callback_does_not_stop_flush(client, provider):
    """Every queued call resolves when an earlier callback raises, then the error propagates."""

    def boom(error, value):
        raise RuntimeError("Callback failed")

    client.batch(True)
    first = client.eth.block_number(callback=boom)
    cb = MagicMock()
    second = client.eth.chain_id(callback=cb)

    with pytest.raises(RuntimeError):
        client.execute()

    assert first.result() == 19_000_000
    assert second.result() == 1
    cb.assert_called_once_with(None, 1)
    assert client.provider.batch_queue == []


def test_batch_queue_threads(client, provider):
    """Concurrent sends get unique ids and all land in the queue."""
    client.batch(True)
    threads_count = 8
    calls_per_thread = 50
    barrier = threading.Barrier(threads_count)

    def worker():
        barrier.wait()
        for _ in range(calls_per_thread):
            client.eth.block_number()

    threads = [threading.Thread(target=worker) for _ in range(threads_count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    queue = client.provider.batch_queue
    assert len(queue) == threads_count * calls_per_thread
    assert len({c.id for c in queue}) == threads_count * calls_per_thread

    calls = client.execute()
    assert provider.round_trips == 1
    assert all(c.result() == 19_000_000 for c in calls)
