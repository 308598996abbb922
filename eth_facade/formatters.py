"""Formatters between application values and JSON-RPC wire values.

A formatter is a pure function taking one value and returning the converted value.

- Input formatters (``format_*``) convert Python values to what a JSON-RPC node expects,
  e.g. ``1000`` to ``"0x3e8"``.

- Output formatters (``to_*``) convert JSON-RPC results to Python values,
  e.g. ``"0x3e8"`` to ``1000``.

Formatters are applied positionally with :py:func:`apply_formatters`.

Example:

.. code-block:: python

    from eth_facade.formatters import apply_formatters, format_address, format_block_identifier

    params = apply_formatters(
        ["0x6B175474E89094C44Da98b954EedeAC495271d0F", 19_000_000],
        [format_address, format_block_identifier],
    )
    assert params == ["0x6b175474e89094c44da98b954eedeac495271d0f", "0x121eac0"]

"""

from typing import Any, Callable, Iterable, Sequence, TypeAlias

from eth_typing import ChecksumAddress, HexStr
from eth_utils import is_address, is_checksum_address, is_hex
from hexbytes import HexBytes
from web3 import Web3

from eth_facade.exceptions import FormatError

#: A formatter function
Formatter: TypeAlias = Callable[[Any], Any]

#: Block tags accepted in place of a block number
BLOCK_TAGS = frozenset({"latest", "earliest", "pending", "safe", "finalized"})

#: Transaction object fields carrying a quantity
TRANSACTION_QUANTITY_KEYS = frozenset(
    {
        "gas",
        "gasPrice",
        "value",
        "nonce",
        "maxFeePerGas",
        "maxPriorityFeePerGas",
        "chainId",
        "type",
    }
)

#: Fields converted to ``int`` in block results
BLOCK_INT_KEYS = frozenset(
    {
        "number",
        "difficulty",
        "totalDifficulty",
        "size",
        "gasLimit",
        "gasUsed",
        "timestamp",
        "baseFeePerGas",
        "blobGasUsed",
        "excessBlobGas",
    }
)

#: Fields converted to ``int`` in transaction results
TRANSACTION_INT_KEYS = frozenset(
    {
        "blockNumber",
        "gas",
        "gasPrice",
        "nonce",
        "transactionIndex",
        "value",
        "v",
        "type",
        "chainId",
        "maxFeePerGas",
        "maxPriorityFeePerGas",
        "yParity",
    }
)

#: Fields converted to ``int`` in transaction receipt results
RECEIPT_INT_KEYS = frozenset(
    {
        "blockNumber",
        "cumulativeGasUsed",
        "gasUsed",
        "transactionIndex",
        "status",
        "effectiveGasPrice",
        "type",
    }
)

#: Fields converted to ``int`` in log entries
LOG_INT_KEYS = frozenset({"blockNumber", "logIndex", "transactionIndex"})

#: Fields converted to ``int`` in ``eth_syncing`` results
SYNCING_INT_KEYS = frozenset({"startingBlock", "currentBlock", "highestBlock"})


def apply_formatters(values: Sequence[Any], formatters: Sequence[Formatter | None]) -> list[Any]:
    """Apply formatters positionally.

    - ``None`` formatter passes the value through

    - Values beyond the formatter list pass through

    - The input sequence is not modified

    :raise FormatError:
        Naming the offending value and its position
    """
    result = []
    for position, value in enumerate(values):
        formatter = formatters[position] if position < len(formatters) else None
        if formatter is None:
            result.append(value)
            continue

        try:
            result.append(formatter(value))
        except FormatError as e:
            raise FormatError(str(e), value=value, position=position) from e
        except (ValueError, TypeError, AssertionError) as e:
            raise FormatError(f"{getattr(formatter, '__name__', formatter)} failed: {e}", value=value, position=position) from e
    return result


def _parse_int(value: Any) -> int:
    if isinstance(value, bool):
        raise FormatError(f"Boolean is not a quantity: {value}", value=value)

    if isinstance(value, int):
        return value

    if isinstance(value, str):
        if value.startswith(("0x", "0X")):
            if len(value) == 2 or not is_hex(value):
                raise FormatError(f"Not a hex quantity: {value}", value=value)
            return int(value, 16)
        if value.isascii() and value.isdigit():
            return int(value)

    raise FormatError(f"Cannot convert to quantity: {value!r}", value=value)


def format_quantity(value: int | str) -> HexStr:
    """Convert an integer, a decimal string or a hex string to a JSON-RPC quantity.

    Quantities are encoded as ``0x`` prefixed hex without leading zeroes.
    """
    number = _parse_int(value)
    if number < 0:
        raise FormatError(f"Quantity cannot be negative: {value}", value=value)
    return HexStr(hex(number))


def format_block_identifier(value: int | str) -> str:
    """Block tag or a block number."""
    if isinstance(value, str) and value in BLOCK_TAGS:
        return value
    return format_quantity(value)


def is_valid_address(value: Any) -> bool:
    """Ethereum address string.

    All lowercase and all uppercase addresses carry no checksum.
    Mixed case addresses must have a valid EIP-55 checksum.
    """
    if not isinstance(value, str) or not is_address(value):
        return False
    body = value[2:] if value.startswith(("0x", "0X")) else value
    if body.islower() or body.isupper() or body.isdigit():
        return True
    return is_checksum_address(value)


def format_address(value: str) -> HexStr:
    """Lowercase an Ethereum address for the wire.

    See :py:func:`is_valid_address`.
    """
    if not is_valid_address(value):
        raise FormatError(f"Not an Ethereum address: {value!r}", value=value)
    return HexStr(value.lower())


def format_hex_data(value: bytes | str) -> HexStr:
    """Convert a blob to ``0x`` prefixed hex.

    Strings that are not hex are treated as UTF-8 text.
    """
    if isinstance(value, (bytes, bytearray)):
        return HexStr("0x" + bytes(value).hex())

    if isinstance(value, str):
        if value.startswith(("0x", "0X")) and is_hex(value):
            return HexStr("0x" + value[2:].lower())
        return HexStr("0x" + value.encode("utf-8").hex())

    raise FormatError(f"Cannot convert to hex data: {value!r}", value=value)


def format_string(value: str) -> str:
    if not isinstance(value, str):
        raise FormatError(f"Expected a string, got {type(value)}", value=value)
    return value


def format_boolean(value: bool) -> bool:
    if not isinstance(value, bool):
        raise FormatError(f"Expected a boolean, got {type(value)}", value=value)
    return value


def format_transaction(tx: dict) -> dict:
    """Format a transaction object for ``eth_sendTransaction``, ``eth_call`` and friends.

    - ``from`` and ``to`` are formatted as addresses

    - Quantity fields like ``gas`` and ``value`` are hex encoded

    - ``data`` and ``input`` are hex encoded

    Unknown keys are passed as is.
    """
    if not isinstance(tx, dict):
        raise FormatError(f"Transaction must be a dict, got {type(tx)}", value=tx)

    formatted = {}
    for key, value in tx.items():
        if value is None:
            continue
        if key in ("from", "to"):
            formatted[key] = format_address(value)
        elif key in TRANSACTION_QUANTITY_KEYS:
            formatted[key] = format_quantity(value)
        elif key in ("data", "input"):
            formatted[key] = format_hex_data(value)
        else:
            formatted[key] = value
    return formatted


def format_filter(filter_params: dict) -> dict:
    """Format a log filter object for ``eth_newFilter`` and ``eth_getLogs``."""
    if not isinstance(filter_params, dict):
        raise FormatError(f"Filter must be a dict, got {type(filter_params)}", value=filter_params)

    formatted = {}
    for key, value in filter_params.items():
        if key in ("fromBlock", "toBlock"):
            formatted[key] = format_block_identifier(value)
        elif key == "address":
            if isinstance(value, (list, tuple)):
                formatted[key] = [format_address(a) for a in value]
            else:
                formatted[key] = format_address(value)
        elif key == "topics":
            formatted[key] = [_format_topic(t) for t in value]
        elif key == "blockHash":
            formatted[key] = format_hex_data(value)
        else:
            formatted[key] = value
    return formatted


def _format_topic(topic: Any) -> Any:
    if topic is None:
        return None
    if isinstance(topic, (list, tuple)):
        return [_format_topic(t) for t in topic]
    return format_hex_data(topic)


def to_int(value: str | int) -> int:
    """Hex quantity to ``int``."""
    return _parse_int(value)


def to_checksum_address(value: str) -> ChecksumAddress:
    if not isinstance(value, str) or not is_address(value.lower()):
        raise FormatError(f"Not an Ethereum address: {value!r}", value=value)
    return Web3.to_checksum_address(value)


def to_hexbytes(value: str) -> HexBytes:
    if not isinstance(value, (str, bytes)):
        raise FormatError(f"Cannot convert to bytes: {value!r}", value=value)
    return HexBytes(value)


def to_bool(value: bool) -> bool:
    return format_boolean(value)


def list_of(formatter: Formatter) -> Formatter:
    """Apply a formatter to every item of a list result."""

    def _list_formatter(values: Iterable[Any]) -> list:
        if not isinstance(values, list):
            raise FormatError(f"Expected a list, got {type(values)}", value=values)
        return [formatter(v) for v in values]

    _list_formatter.__name__ = f"list_of_{getattr(formatter, '__name__', 'formatter')}"
    return _list_formatter


def optional(formatter: Formatter) -> Formatter:
    """Let ``None`` pass through a formatter.

    E.g. ``eth_getTransactionReceipt`` returns ``null`` for pending transactions.
    """

    def _optional_formatter(value: Any) -> Any:
        if value is None:
            return None
        return formatter(value)

    _optional_formatter.__name__ = f"optional_{getattr(formatter, '__name__', 'formatter')}"
    return _optional_formatter


def _format_result_dict(
    value: dict,
    int_keys: frozenset,
    address_keys: Iterable[str] = (),
) -> dict:
    if not isinstance(value, dict):
        raise FormatError(f"Expected a dict, got {type(value)}", value=value)

    formatted = dict(value)
    for key in int_keys:
        if formatted.get(key) is not None:
            formatted[key] = to_int(formatted[key])
    for key in address_keys:
        if formatted.get(key) is not None:
            formatted[key] = to_checksum_address(formatted[key])
    return formatted


def to_log(value: dict) -> dict:
    return _format_result_dict(value, LOG_INT_KEYS, ("address",))


def to_transaction(value: dict) -> dict:
    return _format_result_dict(value, TRANSACTION_INT_KEYS, ("from", "to"))


def to_receipt(value: dict) -> dict:
    formatted = _format_result_dict(value, RECEIPT_INT_KEYS, ("from", "to", "contractAddress"))
    if "logs" in formatted:
        formatted["logs"] = [to_log(log) for log in formatted["logs"]]
    return formatted


def to_block(value: dict) -> dict:
    """Format a block result.

    Transactions are either a list of hashes or a list of full transaction objects,
    depending on the ``full_transactions`` flag of the request.
    """
    formatted = _format_result_dict(value, BLOCK_INT_KEYS, ("miner",))
    transactions = formatted.get("transactions")
    if transactions:
        formatted["transactions"] = [to_transaction(tx) if isinstance(tx, dict) else tx for tx in transactions]
    return formatted


def to_syncing(value: bool | dict) -> bool | dict:
    """``eth_syncing`` returns ``false`` or a progress object."""
    if value is False:
        return value
    return _format_result_dict(value, SYNCING_INT_KEYS)
