"""Namespace dispatch tests."""

from unittest.mock import MagicMock

import pytest
from hexbytes import HexBytes

from eth_facade.exceptions import AllowListError, ArgumentError, ConfigurationError, RPCError, ValidationError
from eth_facade.namespaces.eth import Eth
from eth_facade.namespaces.net import Net
from eth_facade.namespaces.personal import Personal
from eth_facade.namespaces.shh import Shh

DAI = "0x6B175474E89094C44Da98b954EedeAC495271d0F"


def test_call_immediate(provider):
    eth = Eth(provider)
    assert eth.get_balance(DAI, "latest") == 10**18
    assert provider.payloads == [
        {"jsonrpc": "2.0", "method": "eth_getBalance", "params": [DAI.lower(), "latest"], "id": 1},
    ]


def test_generic_call(provider):
    eth = Eth(provider)
    assert eth.call("blockNumber") == 19_000_000


def test_callback_fires_once(provider):
    eth = Eth(provider)
    callback = MagicMock()
    value = eth.block_number(callback=callback)
    assert value == 19_000_000
    callback.assert_called_once_with(None, 19_000_000)


def test_callback_receives_rpc_error(provider):
    provider.results["eth_chainId"] = {"code": -32603, "message": "Internal JSON-RPC error."}
    eth = Eth(provider)
    callback = MagicMock()
    assert eth.chain_id(callback=callback) is None
    callback.assert_called_once()
    error, value = callback.call_args.args
    assert isinstance(error, RPCError)
    assert error.code == -32603
    assert value is None


def test_rpc_error_raises_without_callback(provider):
    provider.results["eth_chainId"] = {"code": -32000, "message": "nonce too low"}
    with pytest.raises(RPCError):
        Eth(provider).chain_id()


def test_not_allowed(provider):
    """Methods outside the allow-list never reach the transport."""
    eth = Eth(provider, allowed_methods={"eth_blockNumber"})
    with pytest.raises(AllowListError):
        eth.get_balance(DAI)
    assert provider.payloads == []
    assert eth.block_number() == 19_000_000


@pytest.mark.parametrize("name", ["unknownMethod", "get_balance", "getBalance; drop", ""])
def test_unknown_method_fails_closed(provider, name):
    eth = Eth(provider)
    with pytest.raises(AllowListError):
        eth.call(name)
    assert provider.payloads == []


def test_allow_list_with_unknown_method(provider):
    """Allow-listed names without a definition still fail."""
    eth = Eth(provider, allowed_methods={"eth_debugSomething"})
    with pytest.raises(AllowListError):
        eth.call("debugSomething")


def test_allow_list_filters_other_namespaces(provider):
    net = Net(provider, allowed_methods={"eth_blockNumber", "net_version"})
    assert net.allowed_methods == frozenset({"net_version"})


def test_validation_error_before_network(provider):
    """Bad address is rejected synchronously and the callback never fires."""
    eth = Eth(provider)
    callback = MagicMock()
    with pytest.raises(ValidationError):
        eth.get_balance("0xnot-an-address", "latest", callback=callback)
    callback.assert_not_called()
    assert provider.payloads == []


def test_bad_checksum_before_network(provider):
    """Mixed case address with a broken checksum never reaches the transport."""
    eth = Eth(provider)
    with pytest.raises(ValidationError):
        eth.get_balance(DAI[:-1] + "f")
    assert provider.payloads == []


def test_bad_callback(provider):
    eth = Eth(provider)
    with pytest.raises(ArgumentError):
        eth.block_number(callback="not callable")
    assert provider.payloads == []


def test_no_provider():
    eth = Eth(None)
    with pytest.raises(ConfigurationError):
        eth.block_number()


def test_descriptor_cached(provider):
    eth = Eth(provider)
    eth.get_balance(DAI)
    first = eth.get_descriptor("eth_getBalance")
    eth.get_balance(DAI)
    assert eth.get_descriptor("eth_getBalance") is first


def test_descriptor_cache_per_namespace(provider):
    """Namespace objects do not share descriptors."""
    eth_1 = Eth(provider)
    eth_2 = Eth(provider)
    assert eth_1.get_descriptor("eth_chainId") is not eth_2.get_descriptor("eth_chainId")


def test_output_format_error_reaches_callback(provider, caplog):
    provider.results["eth_blockNumber"] = "garbage"
    eth = Eth(provider)
    callback = MagicMock()
    eth.block_number(callback=callback)
    error, value = callback.call_args.args
    assert error is not None
    assert value is None
    # Raw value is logged so it does not get lost
    assert "garbage" in caplog.text


def test_method_attribute_name(provider):
    eth = Eth(provider)
    assert eth.get_balance.__name__ == "get_balance"
    assert "eth_getBalance" in eth.get_balance.__doc__


def test_personal_unlock_default_duration(provider):
    provider.results["personal_unlockAccount"] = True
    personal = Personal(provider)
    assert personal.unlock_account(DAI, "secret") is True
    assert provider.payloads[-1]["params"] == [DAI.lower(), "secret", "0x12c"]

    personal.unlock_account(DAI, "secret", 60)
    assert provider.payloads[-1]["params"] == [DAI.lower(), "secret", "0x3c"]


def test_personal_send_transaction(provider):
    tx_hash = "0x" + "ab" * 32
    provider.results["personal_sendTransaction"] = tx_hash
    personal = Personal(provider)

    result = personal.send_transaction({"from": DAI, "to": DAI, "value": 10**18, "gas": None}, "secret")

    assert result == HexBytes(tx_hash)
    assert provider.payloads[-1]["method"] == "personal_sendTransaction"
    assert provider.payloads[-1]["params"] == [
        {"from": DAI.lower(), "to": DAI.lower(), "value": "0xde0b6b3a7640000"},
        "secret",
    ]


def test_personal_list_accounts(provider):
    provider.results["personal_listAccounts"] = [DAI.lower()]
    assert Personal(provider).list_accounts() == [DAI]


def test_personal_bad_transaction(provider):
    with pytest.raises(ValidationError):
        Personal(provider).send_transaction({"to": DAI}, "secret")
    assert provider.payloads == []


def test_shh_post(provider):
    identity = "0x" + "04" * 60
    provider.results["shh_post"] = True
    shh = Shh(provider)

    post = {"from": identity, "topics": ["0xAB"], "payload": b"\x02", "priority": 100, "ttl": 60}
    assert shh.post(post) is True
    assert provider.payloads[-1]["params"] == [
        {"from": identity, "topics": ["0xab"], "payload": "0x02", "priority": "0x64", "ttl": "0x3c"},
    ]
    # Caller's object is left as is
    assert post["priority"] == 100


def test_shh_methods(provider):
    identity = "0x" + "04" * 60
    provider.results.update(
        {
            "shh_version": "2",
            "shh_hasIdentity": False,
            "shh_newFilter": "0x7",
            "shh_uninstallFilter": True,
        }
    )
    shh = Shh(provider)
    assert shh.version() == "2"
    assert shh.has_identity(identity) is False
    assert shh.new_filter({"topics": ["0x01"], "to": identity}) == 7
    assert shh.uninstall_filter(7) is True
    assert provider.payloads[-1]["params"] == ["0x7"]

    with pytest.raises(ValidationError):
        shh.post({"topics": ["0x01"], "payload": "0x02", "priority": 100})
