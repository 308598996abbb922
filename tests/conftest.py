"""Shared fixtures.

:py:class:`MockProvider` stands in for a JSON-RPC node: it records every payload
it is given and answers from a method -> result table.
"""

from typing import Any, Callable

import pytest

from eth_facade.client import Client
from eth_facade.provider.base import BaseProvider

#: Checksummed Dai token address
DAI = "0x6B175474E89094C44Da98b954EedeAC495271d0F"


class MockProvider(BaseProvider):
    """Provider answering from canned results."""

    def __init__(self, results: dict[str, Any] | None = None):
        super().__init__()
        self.results = results or {}
        self.payloads = []

        #: Hook to rewrite the reply, e.g. to shuffle batch responses
        self.reply_hook: Callable[[Any], Any] | None = None

    def make_request(self, payload, retryable=False):
        self.payloads.append(payload)
        if isinstance(payload, list):
            reply = [self._answer(p) for p in payload]
        else:
            reply = self._answer(payload)
        if self.reply_hook:
            reply = self.reply_hook(reply)
        return reply

    def _answer(self, request: dict) -> dict:
        result = self.results.get(request["method"])
        if isinstance(result, Exception):
            raise result
        if isinstance(result, dict) and "code" in result:
            return {"jsonrpc": "2.0", "id": request["id"], "error": result}
        return {"jsonrpc": "2.0", "id": request["id"], "result": result}


@pytest.fixture()
def provider() -> MockProvider:
    return MockProvider(
        {
            "web3_clientVersion": "Geth/v1.14.0-stable/linux-amd64/go1.22.2",
            "web3_sha3": "0x47173285a8d7341e5e972fc677286384f802f8ef42a5ec5f03bbfa254cb01fad",
            "net_version": "1",
            "net_peerCount": "0x19",
            "net_listening": True,
            "eth_blockNumber": "0x121eac0",
            "eth_chainId": "0x1",
            "eth_getBalance": "0xde0b6b3a7640000",
            "eth_accounts": ["0x6b175474e89094c44da98b954eedeac495271d0f"],
        }
    )


@pytest.fixture()
def client(provider) -> Client:
    return Client(provider)
