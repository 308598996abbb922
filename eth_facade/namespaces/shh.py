"""``shh_`` namespace, Whisper messaging."""

from functools import partial

from eth_facade.formatters import format_hex_data, format_quantity, format_string, to_bool, to_int
from eth_facade.method import MethodDescriptor
from eth_facade.namespace import MethodTable, Namespace, rpc_method
from eth_facade.validators import is_identity, is_quantity, is_shh_filter, is_shh_post, is_string


def format_shh_post(post: dict) -> dict:
    """Hex encode ``payload`` and topics, quantities for ``priority`` and ``ttl``."""
    formatted = dict(post)
    formatted["topics"] = [format_hex_data(t) for t in post["topics"]]
    formatted["payload"] = format_hex_data(post["payload"])
    formatted["priority"] = format_quantity(post["priority"])
    formatted["ttl"] = format_quantity(post["ttl"])
    if post.get("workToProve") is not None:
        formatted["workToProve"] = format_quantity(post["workToProve"])
    return formatted


SHH_METHODS: MethodTable = {
    "shh_version": partial(MethodDescriptor, name="shh_version", retryable=True),
    "shh_post": partial(
        MethodDescriptor,
        name="shh_post",
        arg_count=1,
        validators=(is_shh_post,),
        input_formatters=(format_shh_post,),
        output_formatters=(to_bool,),
    ),
    "shh_newIdentity": partial(MethodDescriptor, name="shh_newIdentity"),
    "shh_hasIdentity": partial(
        MethodDescriptor,
        name="shh_hasIdentity",
        arg_count=1,
        validators=(is_identity,),
        output_formatters=(to_bool,),
        retryable=True,
    ),
    "shh_newGroup": partial(MethodDescriptor, name="shh_newGroup"),
    "shh_addToGroup": partial(
        MethodDescriptor,
        name="shh_addToGroup",
        arg_count=1,
        validators=(is_string,),
        input_formatters=(format_string,),
        output_formatters=(to_bool,),
    ),
    "shh_newFilter": partial(
        MethodDescriptor,
        name="shh_newFilter",
        arg_count=1,
        validators=(is_shh_filter,),
        output_formatters=(to_int,),
    ),
    "shh_uninstallFilter": partial(
        MethodDescriptor,
        name="shh_uninstallFilter",
        arg_count=1,
        validators=(is_quantity,),
        input_formatters=(format_quantity,),
        output_formatters=(to_bool,),
    ),
    "shh_getFilterChanges": partial(
        MethodDescriptor,
        name="shh_getFilterChanges",
        arg_count=1,
        validators=(is_quantity,),
        input_formatters=(format_quantity,),
        retryable=True,
    ),
    "shh_getMessages": partial(
        MethodDescriptor,
        name="shh_getMessages",
        arg_count=1,
        validators=(is_quantity,),
        input_formatters=(format_quantity,),
        retryable=True,
    ),
}


class Shh(Namespace):
    namespace = "shh"
    method_table = SHH_METHODS

    version = rpc_method("version")
    post = rpc_method("post")
    new_identity = rpc_method("newIdentity")
    has_identity = rpc_method("hasIdentity")
    new_group = rpc_method("newGroup")
    add_to_group = rpc_method("addToGroup")
    new_filter = rpc_method("newFilter")
    uninstall_filter = rpc_method("uninstallFilter")
    get_filter_changes = rpc_method("getFilterChanges")
    get_messages = rpc_method("getMessages")
