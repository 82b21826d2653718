"""Adapters between web3 providers and the request/response transport."""

from __future__ import annotations

import itertools
import logging
from typing import Any

from web3.exceptions import Web3RPCError
from web3.providers.async_base import AsyncBaseProvider
from web3.types import RPCEndpoint, RPCResponse

from .types import Transport

logger = logging.getLogger(__name__)

ANVIL_IMPERSONATE = "anvil_impersonateAccount"
HARDHAT_IMPERSONATE = "hardhat_impersonateAccount"


class ProviderTransport:
    """Expose a web3 async provider (e.g. ``AsyncHTTPProvider``) as a transport.

    JSON-RPC error responses are raised as ``Web3RPCError``.
    """

    def __init__(self, provider: AsyncBaseProvider):
        self._provider = provider

    async def request(self, method: str, params: list[Any] | None = None) -> Any:
        response = await self._provider.make_request(RPCEndpoint(method), params or [])
        error = response.get("error")
        if error:
            message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
            raise Web3RPCError(message, rpc_response=response)
        return response.get("result")


class TransportProvider(AsyncBaseProvider):
    """web3 provider that sends every call through a ``Transport``."""

    logger = logging.getLogger("web3.providers.TransportProvider")

    def __init__(self, transport: Transport) -> None:
        super().__init__()
        self._transport = transport
        self._request_ids = itertools.count(1)

    async def make_request(self, method: RPCEndpoint, params: Any) -> RPCResponse:
        self.logger.debug("Making transport request. Method: %s", method)
        result = await self._transport.request(
            str(method), list(params) if params is not None else []
        )
        return {"jsonrpc": "2.0", "id": next(self._request_ids), "result": result}

    async def is_connected(self, show_traceback: bool = False) -> bool:
        return True


class RPCImpersonator:
    """Impersonate addresses through a dev node RPC method (anvil, hardhat)."""

    def __init__(self, transport: Transport, method: str = ANVIL_IMPERSONATE):
        self._transport = transport
        self._method = method

    async def impersonate_account(self, address: str) -> None:
        logger.info("Impersonating %s via %s", address, self._method)
        await self._transport.request(self._method, [address])
