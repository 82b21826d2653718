"""Tests for the web3 provider adapters."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest
from web3 import AsyncWeb3
from web3.exceptions import Web3RPCError
from web3.providers.async_base import AsyncBaseProvider

from fakes import FakeTransport
from provider_accounts.transport import (
    ANVIL_IMPERSONATE,
    HARDHAT_IMPERSONATE,
    ProviderTransport,
    RPCImpersonator,
    TransportProvider,
)
from provider_accounts.types import Impersonator, Transport


class StaticProvider(AsyncBaseProvider):
    def __init__(self, response: dict[str, Any]) -> None:
        super().__init__()
        self.response = response
        self.requests: list[tuple[str, Any]] = []

    async def make_request(self, method, params):
        self.requests.append((method, params))
        return self.response

    async def is_connected(self, show_traceback: bool = False) -> bool:
        return True


class TestProviderTransport:
    def test_returns_result(self):
        provider = StaticProvider({"jsonrpc": "2.0", "id": 1, "result": "0x7a69"})
        transport = ProviderTransport(provider)

        assert asyncio.run(transport.request("eth_chainId")) == "0x7a69"
        assert provider.requests == [("eth_chainId", [])]

    def test_params_are_forwarded(self):
        provider = StaticProvider({"jsonrpc": "2.0", "id": 1, "result": None})
        transport = ProviderTransport(provider)

        asyncio.run(transport.request("eth_getBalance", ["0xabc", "latest"]))

        assert provider.requests == [("eth_getBalance", ["0xabc", "latest"])]

    def test_error_response_raises(self):
        response = {
            "jsonrpc": "2.0",
            "id": 1,
            "error": {"code": -32000, "message": "execution reverted"},
        }
        transport = ProviderTransport(StaticProvider(response))

        with pytest.raises(Web3RPCError) as excinfo:
            asyncio.run(transport.request("eth_call", [{}]))

        assert "execution reverted" in str(excinfo.value)
        assert excinfo.value.rpc_response == response

    def test_satisfies_transport_protocol(self):
        transport = ProviderTransport(StaticProvider({"result": None}))
        assert isinstance(transport, Transport)


class TestTransportProvider:
    def test_wraps_results_in_rpc_responses(self, transport):
        provider = TransportProvider(transport)

        async def scenario():
            first = await provider.make_request("eth_chainId", [])
            second = await provider.make_request("eth_blockNumber", None)
            return first, second

        first, second = asyncio.run(scenario())

        assert first == {"jsonrpc": "2.0", "id": 1, "result": "0x7a69"}
        assert second["id"] == 2
        assert transport.calls == [("eth_chainId", []), ("eth_blockNumber", [])]

    def test_drives_async_web3(self, transport):
        web3 = AsyncWeb3(TransportProvider(transport), middleware=[])

        assert asyncio.run(web3.eth.chain_id) == 31337
        assert asyncio.run(web3.is_connected())

    def test_transport_errors_propagate(self):
        error = ConnectionError("connection refused")
        provider = TransportProvider(FakeTransport({"eth_chainId": error}))

        with pytest.raises(ConnectionError):
            asyncio.run(provider.make_request("eth_chainId", []))


class TestRPCImpersonator:
    def test_anvil_by_default(self, transport):
        impersonator = RPCImpersonator(transport)

        asyncio.run(impersonator.impersonate_account("0xabc"))

        assert transport.calls == [(ANVIL_IMPERSONATE, ["0xabc"])]
        assert isinstance(impersonator, Impersonator)

    def test_custom_method(self, transport):
        impersonator = RPCImpersonator(transport, method=HARDHAT_IMPERSONATE)

        asyncio.run(impersonator.impersonate_account("0xabc"))

        assert transport.calls == [("hardhat_impersonateAccount", ["0xabc"])]
