"""``personal_`` namespace.

Account management on the node. Public RPC services do not expose these methods.
Leave them out of ``allowed_methods`` when the client handles untrusted input.
"""

from functools import partial

from eth_facade.formatters import (
    format_address,
    format_quantity,
    format_string,
    format_transaction,
    list_of,
    to_bool,
    to_checksum_address,
    to_hexbytes,
)
from eth_facade.method import MethodDescriptor
from eth_facade.namespace import MethodTable, Namespace, rpc_method
from eth_facade.validators import is_address_value, is_quantity, is_string, is_transaction

PERSONAL_METHODS: MethodTable = {
    "personal_listAccounts": partial(
        MethodDescriptor,
        name="personal_listAccounts",
        output_formatters=(list_of(to_checksum_address),),
        retryable=True,
    ),
    "personal_newAccount": partial(
        MethodDescriptor,
        name="personal_newAccount",
        arg_count=1,
        validators=(is_string,),
        input_formatters=(format_string,),
        output_formatters=(to_checksum_address,),
    ),
    "personal_unlockAccount": partial(
        MethodDescriptor,
        name="personal_unlockAccount",
        arg_count=3,
        validators=(is_address_value, is_string, is_quantity),
        input_formatters=(format_address, format_string, format_quantity),
        output_formatters=(to_bool,),
        # Seconds, geth default
        defaults={2: 300},
    ),
    "personal_lockAccount": partial(
        MethodDescriptor,
        name="personal_lockAccount",
        arg_count=1,
        validators=(is_address_value,),
        input_formatters=(format_address,),
        output_formatters=(to_bool,),
    ),
    "personal_sendTransaction": partial(
        MethodDescriptor,
        name="personal_sendTransaction",
        arg_count=2,
        validators=(is_transaction, is_string),
        input_formatters=(format_transaction, format_string),
        output_formatters=(to_hexbytes,),
    ),
}


class Personal(Namespace):
    namespace = "personal"
    method_table = PERSONAL_METHODS

    list_accounts = rpc_method("listAccounts")
    new_account = rpc_method("newAccount")
    unlock_account = rpc_method("unlockAccount")
    lock_account = rpc_method("lockAccount")
    send_transaction = rpc_method("sendTransaction")
