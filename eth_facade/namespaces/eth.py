"""``eth_`` namespace.

Example:

.. code-block:: python

    from eth_facade.client import Client

    client = Client("https://ethereum-rpc.publicnode.com")
    balance = client.eth.get_balance("0x6B175474E89094C44Da98b954EedeAC495271d0F", "latest")
    block = client.eth.get_block_by_number(19_000_000, False)

"""

from functools import partial

from eth_facade.formatters import (
    format_address,
    format_block_identifier,
    format_boolean,
    format_filter,
    format_hex_data,
    format_quantity,
    format_transaction,
    list_of,
    optional,
    to_block,
    to_bool,
    to_checksum_address,
    to_hexbytes,
    to_int,
    to_log,
    to_receipt,
    to_syncing,
    to_transaction,
)
from eth_facade.method import MethodDescriptor
from eth_facade.namespace import MethodTable, Namespace, rpc_method
from eth_facade.validators import (
    is_address_value,
    is_block_identifier,
    is_boolean,
    is_call,
    is_filter,
    is_hash,
    is_hex_data,
    is_quantity,
    is_transaction,
)


def to_filter_changes(value: list) -> list:
    # Block and pending transaction filters return hashes, log filters return log objects
    return [to_log(v) if isinstance(v, dict) else v for v in value]


ETH_METHODS: MethodTable = {
    "eth_protocolVersion": partial(MethodDescriptor, name="eth_protocolVersion", retryable=True),
    "eth_syncing": partial(MethodDescriptor, name="eth_syncing", output_formatters=(to_syncing,), retryable=True),
    "eth_coinbase": partial(MethodDescriptor, name="eth_coinbase", output_formatters=(to_checksum_address,), retryable=True),
    "eth_mining": partial(MethodDescriptor, name="eth_mining", output_formatters=(to_bool,), retryable=True),
    "eth_hashrate": partial(MethodDescriptor, name="eth_hashrate", output_formatters=(to_int,), retryable=True),
    "eth_gasPrice": partial(MethodDescriptor, name="eth_gasPrice", output_formatters=(to_int,), retryable=True),
    "eth_accounts": partial(MethodDescriptor, name="eth_accounts", output_formatters=(list_of(to_checksum_address),), retryable=True),
    "eth_blockNumber": partial(MethodDescriptor, name="eth_blockNumber", output_formatters=(to_int,), retryable=True),
    "eth_chainId": partial(MethodDescriptor, name="eth_chainId", output_formatters=(to_int,), retryable=True),
    "eth_getBalance": partial(
        MethodDescriptor,
        name="eth_getBalance",
        arg_count=2,
        validators=(is_address_value, is_block_identifier),
        input_formatters=(format_address, format_block_identifier),
        output_formatters=(to_int,),
        defaults={1: "latest"},
        retryable=True,
    ),
    "eth_getStorageAt": partial(
        MethodDescriptor,
        name="eth_getStorageAt",
        arg_count=3,
        validators=(is_address_value, is_quantity, is_block_identifier),
        input_formatters=(format_address, format_quantity, format_block_identifier),
        output_formatters=(to_hexbytes,),
        defaults={2: "latest"},
        retryable=True,
    ),
    "eth_getTransactionCount": partial(
        MethodDescriptor,
        name="eth_getTransactionCount",
        arg_count=2,
        validators=(is_address_value, is_block_identifier),
        input_formatters=(format_address, format_block_identifier),
        output_formatters=(to_int,),
        defaults={1: "latest"},
        retryable=True,
    ),
    "eth_getBlockTransactionCountByHash": partial(
        MethodDescriptor,
        name="eth_getBlockTransactionCountByHash",
        arg_count=1,
        validators=(is_hash,),
        input_formatters=(format_hex_data,),
        output_formatters=(to_int,),
        retryable=True,
    ),
    "eth_getBlockTransactionCountByNumber": partial(
        MethodDescriptor,
        name="eth_getBlockTransactionCountByNumber",
        arg_count=1,
        validators=(is_block_identifier,),
        input_formatters=(format_block_identifier,),
        output_formatters=(to_int,),
        retryable=True,
    ),
    "eth_getUncleCountByBlockHash": partial(
        MethodDescriptor,
        name="eth_getUncleCountByBlockHash",
        arg_count=1,
        validators=(is_hash,),
        input_formatters=(format_hex_data,),
        output_formatters=(to_int,),
        retryable=True,
    ),
    "eth_getUncleCountByBlockNumber": partial(
        MethodDescriptor,
        name="eth_getUncleCountByBlockNumber",
        arg_count=1,
        validators=(is_block_identifier,),
        input_formatters=(format_block_identifier,),
        output_formatters=(to_int,),
        retryable=True,
    ),
    "eth_getCode": partial(
        MethodDescriptor,
        name="eth_getCode",
        arg_count=2,
        validators=(is_address_value, is_block_identifier),
        input_formatters=(format_address, format_block_identifier),
        output_formatters=(to_hexbytes,),
        defaults={1: "latest"},
        retryable=True,
    ),
    "eth_sign": partial(
        MethodDescriptor,
        name="eth_sign",
        arg_count=2,
        validators=(is_address_value, None),
        input_formatters=(format_address, format_hex_data),
        output_formatters=(to_hexbytes,),
    ),
    "eth_sendTransaction": partial(
        MethodDescriptor,
        name="eth_sendTransaction",
        arg_count=1,
        validators=(is_transaction,),
        input_formatters=(format_transaction,),
        output_formatters=(to_hexbytes,),
    ),
    "eth_sendRawTransaction": partial(
        MethodDescriptor,
        name="eth_sendRawTransaction",
        arg_count=1,
        validators=(is_hex_data,),
        input_formatters=(format_hex_data,),
        output_formatters=(to_hexbytes,),
    ),
    "eth_call": partial(
        MethodDescriptor,
        name="eth_call",
        arg_count=2,
        validators=(is_call, is_block_identifier),
        input_formatters=(format_transaction, format_block_identifier),
        output_formatters=(to_hexbytes,),
        defaults={1: "latest"},
        retryable=True,
    ),
    "eth_estimateGas": partial(
        MethodDescriptor,
        name="eth_estimateGas",
        arg_count=1,
        validators=(is_call,),
        input_formatters=(format_transaction,),
        output_formatters=(to_int,),
        retryable=True,
    ),
    "eth_getBlockByHash": partial(
        MethodDescriptor,
        name="eth_getBlockByHash",
        arg_count=2,
        validators=(is_hash, is_boolean),
        input_formatters=(format_hex_data, format_boolean),
        output_formatters=(optional(to_block),),
        defaults={1: False},
        retryable=True,
    ),
    "eth_getBlockByNumber": partial(
        MethodDescriptor,
        name="eth_getBlockByNumber",
        arg_count=2,
        validators=(is_block_identifier, is_boolean),
        input_formatters=(format_block_identifier, format_boolean),
        output_formatters=(optional(to_block),),
        defaults={1: False},
        retryable=True,
    ),
    "eth_getTransactionByHash": partial(
        MethodDescriptor,
        name="eth_getTransactionByHash",
        arg_count=1,
        validators=(is_hash,),
        input_formatters=(format_hex_data,),
        output_formatters=(optional(to_transaction),),
        retryable=True,
    ),
    "eth_getTransactionByBlockHashAndIndex": partial(
        MethodDescriptor,
        name="eth_getTransactionByBlockHashAndIndex",
        arg_count=2,
        validators=(is_hash, is_quantity),
        input_formatters=(format_hex_data, format_quantity),
        output_formatters=(optional(to_transaction),),
        retryable=True,
    ),
    "eth_getTransactionByBlockNumberAndIndex": partial(
        MethodDescriptor,
        name="eth_getTransactionByBlockNumberAndIndex",
        arg_count=2,
        validators=(is_block_identifier, is_quantity),
        input_formatters=(format_block_identifier, format_quantity),
        output_formatters=(optional(to_transaction),),
        retryable=True,
    ),
    "eth_getTransactionReceipt": partial(
        MethodDescriptor,
        name="eth_getTransactionReceipt",
        arg_count=1,
        validators=(is_hash,),
        input_formatters=(format_hex_data,),
        output_formatters=(optional(to_receipt),),
        retryable=True,
    ),
    "eth_getUncleByBlockHashAndIndex": partial(
        MethodDescriptor,
        name="eth_getUncleByBlockHashAndIndex",
        arg_count=2,
        validators=(is_hash, is_quantity),
        input_formatters=(format_hex_data, format_quantity),
        output_formatters=(optional(to_block),),
        retryable=True,
    ),
    "eth_getUncleByBlockNumberAndIndex": partial(
        MethodDescriptor,
        name="eth_getUncleByBlockNumberAndIndex",
        arg_count=2,
        validators=(is_block_identifier, is_quantity),
        input_formatters=(format_block_identifier, format_quantity),
        output_formatters=(optional(to_block),),
        retryable=True,
    ),
    "eth_newFilter": partial(
        MethodDescriptor,
        name="eth_newFilter",
        arg_count=1,
        validators=(is_filter,),
        input_formatters=(format_filter,),
    ),
    "eth_newBlockFilter": partial(MethodDescriptor, name="eth_newBlockFilter"),
    "eth_newPendingTransactionFilter": partial(MethodDescriptor, name="eth_newPendingTransactionFilter"),
    "eth_uninstallFilter": partial(
        MethodDescriptor,
        name="eth_uninstallFilter",
        arg_count=1,
        validators=(is_quantity,),
        input_formatters=(format_quantity,),
        output_formatters=(to_bool,),
    ),
    "eth_getFilterChanges": partial(
        MethodDescriptor,
        name="eth_getFilterChanges",
        arg_count=1,
        validators=(is_quantity,),
        input_formatters=(format_quantity,),
        output_formatters=(to_filter_changes,),
    ),
    "eth_getFilterLogs": partial(
        MethodDescriptor,
        name="eth_getFilterLogs",
        arg_count=1,
        validators=(is_quantity,),
        input_formatters=(format_quantity,),
        output_formatters=(list_of(to_log),),
    ),
    "eth_getLogs": partial(
        MethodDescriptor,
        name="eth_getLogs",
        arg_count=1,
        validators=(is_filter,),
        input_formatters=(format_filter,),
        output_formatters=(list_of(to_log),),
        retryable=True,
    ),
    "eth_getWork": partial(MethodDescriptor, name="eth_getWork", retryable=True),
    "eth_submitWork": partial(
        MethodDescriptor,
        name="eth_submitWork",
        arg_count=3,
        validators=(is_hex_data, is_hash, is_hash),
        input_formatters=(format_hex_data, format_hex_data, format_hex_data),
        output_formatters=(to_bool,),
    ),
    "eth_submitHashrate": partial(
        MethodDescriptor,
        name="eth_submitHashrate",
        arg_count=2,
        validators=(is_quantity, is_hash),
        input_formatters=(format_quantity, format_hex_data),
        output_formatters=(to_bool,),
    ),
}


class Eth(Namespace):
    """Chain state, transactions and filters."""

    namespace = "eth"
    method_table = ETH_METHODS

    protocol_version = rpc_method("protocolVersion")
    syncing = rpc_method("syncing")
    coinbase = rpc_method("coinbase")
    mining = rpc_method("mining")
    hashrate = rpc_method("hashrate")
    gas_price = rpc_method("gasPrice")
    accounts = rpc_method("accounts")
    block_number = rpc_method("blockNumber")
    chain_id = rpc_method("chainId")
    get_balance = rpc_method("getBalance")
    get_storage_at = rpc_method("getStorageAt")
    get_transaction_count = rpc_method("getTransactionCount")
    get_block_transaction_count_by_hash = rpc_method("getBlockTransactionCountByHash")
    get_block_transaction_count_by_number = rpc_method("getBlockTransactionCountByNumber")
    get_uncle_count_by_block_hash = rpc_method("getUncleCountByBlockHash")
    get_uncle_count_by_block_number = rpc_method("getUncleCountByBlockNumber")
    get_code = rpc_method("getCode")
    sign = rpc_method("sign")
    send_transaction = rpc_method("sendTransaction")
    send_raw_transaction = rpc_method("sendRawTransaction")
    call_contract = rpc_method("call")
    estimate_gas = rpc_method("estimateGas")
    get_block_by_hash = rpc_method("getBlockByHash")
    get_block_by_number = rpc_method("getBlockByNumber")
    get_transaction_by_hash = rpc_method("getTransactionByHash")
    get_transaction_by_block_hash_and_index = rpc_method("getTransactionByBlockHashAndIndex")
    get_transaction_by_block_number_and_index = rpc_method("getTransactionByBlockNumberAndIndex")
    get_transaction_receipt = rpc_method("getTransactionReceipt")
    get_uncle_by_block_hash_and_index = rpc_method("getUncleByBlockHashAndIndex")
    get_uncle_by_block_number_and_index = rpc_method("getUncleByBlockNumberAndIndex")
    new_filter = rpc_method("newFilter")
    new_block_filter = rpc_method("newBlockFilter")
    new_pending_transaction_filter = rpc_method("newPendingTransactionFilter")
    uninstall_filter = rpc_method("uninstallFilter")
    get_filter_changes = rpc_method("getFilterChanges")
    get_filter_logs = rpc_method("getFilterLogs")
    get_logs = rpc_method("getLogs")
    get_work = rpc_method("getWork")
    submit_work = rpc_method("submitWork")
    submit_hashrate = rpc_method("submitHashrate")
