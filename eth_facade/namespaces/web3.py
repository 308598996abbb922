"""``web3_`` namespace."""

from functools import partial

from eth_facade.formatters import format_hex_data, to_hexbytes
from eth_facade.method import MethodDescriptor
from eth_facade.namespace import MethodTable, Namespace, rpc_method
from eth_facade.validators import is_hex_data, is_string

WEB3_METHODS: MethodTable = {
    "web3_clientVersion": partial(MethodDescriptor, name="web3_clientVersion", retryable=True),
    "web3_sha3": partial(
        MethodDescriptor,
        name="web3_sha3",
        arg_count=1,
        validators=(lambda v: is_string(v) or is_hex_data(v),),
        input_formatters=(format_hex_data,),
        output_formatters=(to_hexbytes,),
        retryable=True,
    ),
}


class Web3(Namespace):
    """Node level calls.

    Methods are exposed directly on :py:class:`eth_facade.client.Client`.
    """

    namespace = "web3"
    method_table = WEB3_METHODS
    default_allowed_methods = frozenset({"web3_clientVersion", "web3_sha3"})

    client_version = rpc_method("clientVersion")
    sha3 = rpc_method("sha3")
