"""``net_`` namespace."""

from functools import partial

from eth_facade.formatters import to_bool, to_int
from eth_facade.method import MethodDescriptor
from eth_facade.namespace import MethodTable, Namespace, rpc_method

NET_METHODS: MethodTable = {
    "net_version": partial(MethodDescriptor, name="net_version", retryable=True),
    "net_peerCount": partial(MethodDescriptor, name="net_peerCount", output_formatters=(to_int,), retryable=True),
    "net_listening": partial(MethodDescriptor, name="net_listening", output_formatters=(to_bool,), retryable=True),
}


class Net(Namespace):
    namespace = "net"
    method_table = NET_METHODS

    version = rpc_method("version")
    peer_count = rpc_method("peerCount")
    listening = rpc_method("listening")
