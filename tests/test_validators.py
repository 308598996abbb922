"""Validator tests."""

import pytest

from eth_facade.validators import (
    is_address_value,
    is_block_identifier,
    is_call,
    is_filter,
    is_hash,
    is_hex_data,
    is_identity,
    is_quantity,
    is_shh_post,
    is_transaction,
)

DAI = "0x6B175474E89094C44Da98b954EedeAC495271d0F"


def test_address():
    assert is_address_value(DAI)
    assert is_address_value(DAI.lower())
    assert not is_address_value("0x1234")
    assert not is_address_value(None)


def test_address_bad_checksum():
    """Mixed case must be a valid EIP-55 checksum, single case has no checksum."""
    assert not is_address_value(DAI[:-1] + "f")
    assert is_address_value("0x" + DAI[2:].upper())
    assert is_address_value("0x" + "1" * 40)


@pytest.mark.parametrize("value, expected", [(0, True), (10, True), (-1, False), (True, False), ("0x1f", True), ("12", True), ("0x", False), ("latest", False), ("\u00b2", False), ("\u0661\u0662", False)])
def test_quantity(value, expected):
    assert is_quantity(value) == expected


def test_block_identifier():
    assert is_block_identifier("latest")
    assert is_block_identifier("pending")
    assert is_block_identifier(1)
    assert not is_block_identifier("newest")


def test_hash_and_hex():
    assert is_hash("0x" + "ab" * 32)
    assert not is_hash("0x" + "ab" * 31)
    assert is_hex_data("0x")
    assert is_hex_data(b"\x01")
    assert not is_hex_data("hello")


def test_transaction():
    assert is_transaction({"from": DAI, "to": DAI, "value": 1})
    assert is_transaction({"from": DAI, "data": "0x6080"})
    assert not is_transaction({"to": DAI})
    assert not is_transaction({"from": DAI, "value": -1})


def test_call():
    assert is_call({"to": DAI, "data": "0x70a08231"})
    assert not is_call({"from": DAI})
    assert not is_call("0x70a08231")


def test_filter():
    assert is_filter({"fromBlock": 1, "toBlock": "latest", "address": DAI, "topics": [None, ["0x01", "0x02"]]})
    assert not is_filter({"fromBlock": "yesterday"})
    assert not is_filter({"address": ["0x12"]})


def test_shh_post():
    identity = "0x" + "04" * 60
    assert is_identity(identity)
    assert is_shh_post({"from": identity, "topics": ["0x01"], "payload": "0x02", "priority": 100, "ttl": 100})
    assert not is_shh_post({"topics": ["0x01"], "payload": "0x02", "priority": 100})


def test_validation_is_idempotent():
    """Validating the same value twice gives the same answer."""
    tx = {"from": DAI, "to": DAI, "value": 1}
    assert is_transaction(tx) == is_transaction(tx)
    assert tx == {"from": DAI, "to": DAI, "value": 1}
