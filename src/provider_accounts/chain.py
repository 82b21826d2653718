"""Chain-aware broadcast client, built lazily on top of the transport."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from dataclasses import dataclass
from typing import Any

from web3 import AsyncWeb3

from .accounts import SigningAccount
from .exceptions import ValidationError
from .transactions import FeeMarketTransaction, NormalizedTransaction
from .transport import TransportProvider
from .types import RPCMethod, Transport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChainDescriptor:
    """Chain metadata for a transport whose endpoint is already known."""

    chain_id: int
    name: str
    rpc_url: str | None = None

    @classmethod
    def synthetic(cls, chain_id: int) -> ChainDescriptor:
        return cls(chain_id=chain_id, name=f"chain-{chain_id}")


class ChainClient:
    """Fill, sign and submit transactions for a single chain."""

    def __init__(self, chain: ChainDescriptor, web3: AsyncWeb3, *, latest_nonce: bool = False):
        self.chain = chain
        self.web3 = web3
        self._nonce_block = "latest" if latest_nonce else "pending"

    async def prepare(
        self, sender: str, tx: NormalizedTransaction, *, fill: bool = True
    ) -> NormalizedTransaction:
        """Complete ``tx`` with the chain id and, if ``fill``, node-derived defaults."""

        updates: dict[str, Any] = {}
        if tx.chain_id is None:
            updates["chain_id"] = self.chain.chain_id

        if fill:
            if tx.nonce is None:
                updates["nonce"] = await self.web3.eth.get_transaction_count(
                    AsyncWeb3.to_checksum_address(sender), self._nonce_block
                )
            if isinstance(tx, FeeMarketTransaction):
                updates.update(await self._fee_market_fees(tx))
            elif tx.gas_price is None:
                updates["gas_price"] = await self.web3.eth.gas_price
            if tx.gas is None:
                updates["gas"] = await self.web3.eth.estimate_gas(_estimate_params(sender, tx))

        return dataclasses.replace(tx, **updates) if updates else tx

    async def send_transaction(
        self, account: SigningAccount, tx: NormalizedTransaction, *, fill: bool = True
    ) -> str:
        prepared = await self.prepare(account.address, tx, fill=fill)
        raw = account.signer.sign_transaction(prepared.as_signable())
        tx_hash = await self.web3.eth.send_raw_transaction(raw)
        tx_hex = tx_hash.to_0x_hex()
        logger.info(
            "Broadcast transaction from %s on %s hash=%s", account.address, self.chain.name, tx_hex
        )
        return tx_hex

    async def _fee_market_fees(self, tx: FeeMarketTransaction) -> dict[str, int]:
        fees: dict[str, int] = {}
        priority_fee = tx.max_priority_fee_per_gas
        if priority_fee is None:
            priority_fee = await self.web3.eth.max_priority_fee
            fees["max_priority_fee_per_gas"] = priority_fee
        if tx.max_fee_per_gas is None:
            block = await self.web3.eth.get_block("latest")
            base_fee = block.get("baseFeePerGas") or 0
            fees["max_fee_per_gas"] = base_fee * 2 + priority_fee
        return fees


class ChainClientCache:
    """Build the ``ChainClient`` once, on first use.

    Concurrent first callers share a single ``eth_chainId`` lookup and a
    single client. There is no invalidation; a chain switch on the transport
    needs a new provider instance.

    With ``latest_nonce`` nonces are read at ``latest`` instead of
    ``pending``, for nodes that miscount the pending pool.
    """

    def __init__(self, transport: Transport, *, latest_nonce: bool = False):
        self._transport = transport
        self._latest_nonce = latest_nonce
        self._client: ChainClient | None = None
        self._lock = asyncio.Lock()

    @property
    def client(self) -> ChainClient | None:
        return self._client

    async def get_client(self) -> ChainClient:
        if self._client is not None:
            return self._client

        async with self._lock:
            if self._client is None:
                self._client = await self._build_client()
        return self._client

    async def _build_client(self) -> ChainClient:
        raw_chain_id = await self._transport.request(RPCMethod.ETH_CHAIN_ID.value, [])
        chain = ChainDescriptor.synthetic(_parse_chain_id(raw_chain_id))
        web3 = AsyncWeb3(TransportProvider(self._transport), middleware=[])
        logger.info("Created chain client for chain id %s", chain.chain_id)
        return ChainClient(chain, web3, latest_nonce=self._latest_nonce)


def _parse_chain_id(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    try:
        return int(value, 16)
    except (TypeError, ValueError) as exc:
        raise ValidationError(
            "Transport returned an invalid chain id", field="chainId", value=value
        ) from exc


def _estimate_params(sender: str, tx: NormalizedTransaction) -> dict[str, Any]:
    params: dict[str, Any] = {"from": AsyncWeb3.to_checksum_address(sender)}
    if tx.to:
        params["to"] = AsyncWeb3.to_checksum_address(tx.to)
    if tx.data is not None:
        params["data"] = tx.data
    if tx.value is not None:
        params["value"] = tx.value
    return params
