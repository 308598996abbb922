"""Positional argument validators.

A validator is a predicate taking one argument and returning ``True`` if the value
has the right shape for its position. :py:class:`eth_facade.method.MethodDescriptor`
raises :py:class:`eth_facade.exceptions.ValidationError` for values that do not pass.
"""

import re
from typing import Any, Callable, TypeAlias

from eth_utils import is_hex

from eth_facade.formatters import BLOCK_TAGS, is_valid_address

#: A validator function
Validator: TypeAlias = Callable[[Any], bool]

_HEX_QUANTITY = re.compile(r"^0x[0-9a-fA-F]+$")

_HASH_32 = re.compile(r"^0x[0-9a-fA-F]{64}$")

#: Whisper identities are 60 byte public keys
_IDENTITY = re.compile(r"^0x[0-9a-fA-F]{120}$")


def is_address_value(value: Any) -> bool:
    """Ethereum address with a valid checksum, if mixed case."""
    return is_valid_address(value)


def is_quantity(value: Any) -> bool:
    """Non-negative int, decimal string or hex string."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value >= 0
    if isinstance(value, str):
        return (value.isascii() and value.isdigit()) or _HEX_QUANTITY.match(value) is not None
    return False


def is_block_identifier(value: Any) -> bool:
    """Block tag like ``latest`` or a block number."""
    if isinstance(value, str) and value in BLOCK_TAGS:
        return True
    return is_quantity(value)


def is_hex_data(value: Any) -> bool:
    if isinstance(value, (bytes, bytearray)):
        return True
    return isinstance(value, str) and value.startswith("0x") and is_hex(value)


def is_hash(value: Any) -> bool:
    """32 byte hash, e.g. a block or a transaction hash."""
    if isinstance(value, (bytes, bytearray)):
        return len(value) == 32
    return isinstance(value, str) and _HASH_32.match(value) is not None


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


def is_transaction(value: Any) -> bool:
    """Transaction object: ``from`` is required, ``to`` may be left out for contract deployments."""
    if not isinstance(value, dict):
        return False
    if not is_address_value(value.get("from")):
        return False
    if value.get("to") is not None and not is_address_value(value["to"]):
        return False
    for key in ("gas", "gasPrice", "value", "nonce"):
        if value.get(key) is not None and not is_quantity(value[key]):
            return False
    if value.get("data") is not None and not is_hex_data(value["data"]):
        return False
    return True


def is_call(value: Any) -> bool:
    """Call object for ``eth_call`` and ``eth_estimateGas``.

    ``to`` may only be left out when ``data`` carries contract deployment bytecode.
    """
    if not isinstance(value, dict):
        return False
    if value.get("from") is not None and not is_address_value(value["from"]):
        return False
    if not is_address_value(value.get("to")) and "data" not in value:
        return False
    for key in ("gas", "gasPrice", "value", "nonce"):
        if value.get(key) is not None and not is_quantity(value[key]):
            return False
    if value.get("data") is not None and not is_hex_data(value["data"]):
        return False
    return True


def is_filter(value: Any) -> bool:
    """Log filter object."""
    if not isinstance(value, dict):
        return False
    for key in ("fromBlock", "toBlock"):
        if key in value and not is_block_identifier(value[key]):
            return False
    address = value.get("address")
    if address is not None:
        addresses = address if isinstance(address, (list, tuple)) else [address]
        if not all(is_address_value(a) for a in addresses):
            return False
    topics = value.get("topics")
    if topics is not None:
        if not isinstance(topics, (list, tuple)):
            return False
        for topic in topics:
            if topic is None:
                continue
            alternatives = topic if isinstance(topic, (list, tuple)) else [topic]
            if not all(t is None or is_hex_data(t) for t in alternatives):
                return False
    if "blockHash" in value and not is_hash(value["blockHash"]):
        return False
    return True


def is_identity(value: Any) -> bool:
    """Whisper identity public key."""
    return isinstance(value, str) and _IDENTITY.match(value) is not None


def is_shh_post(value: Any) -> bool:
    """Whisper message object: ``topics``, ``payload``, ``priority`` and ``ttl`` are required."""
    if not isinstance(value, dict):
        return False
    for key in ("from", "to"):
        if value.get(key) is not None and not is_identity(value[key]):
            return False
    topics = value.get("topics")
    if not isinstance(topics, (list, tuple)) or not all(is_hex_data(t) for t in topics):
        return False
    if not is_hex_data(value.get("payload")):
        return False
    return is_quantity(value.get("priority")) and is_quantity(value.get("ttl"))


def is_shh_filter(value: Any) -> bool:
    if not isinstance(value, dict):
        return False
    if value.get("to") is not None and not is_identity(value["to"]):
        return False
    topics = value.get("topics")
    return isinstance(topics, (list, tuple)) and all(t is None or is_hex_data(t) or isinstance(t, (list, tuple)) for t in topics)
