"""Account-augmented EIP-1193 provider.

``AccountsProvider`` wraps a transport and answers the account and signing
methods itself, with keys held in memory or through impersonation on a dev
node. Every other method is forwarded to the transport unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from functools import partial
from typing import Any

from hexbytes import HexBytes

from .accounts import AccountRegistry
from .chain import ChainClientCache
from .config import ProviderConfig
from .dispatch import HandlerTable
from .exceptions import (
    MethodNotImplementedError,
    MissingMandatoryFieldsError,
    ValidationError,
)
from .policy import ImpersonationPolicy
from .resolver import ImpersonatedSend, SigningResolver
from .transactions import missing_mandatory_fields, normalize_transaction
from .types import BroadcastStrategy, Handler, RPCMethod, Transport

logger = logging.getLogger(__name__)


class AccountsProvider:
    """Intercept account methods in front of ``transport``."""

    def __init__(self, transport: Transport, config: ProviderConfig | None = None):
        self._transport = transport
        self._config = config or ProviderConfig()
        self._registry = AccountRegistry.from_config(self._config.accounts)
        self._policy = ImpersonationPolicy(self._config.impersonation, self._registry)
        self._resolver = SigningResolver(self._registry, self._policy)
        self._chain_clients = ChainClientCache(
            transport, latest_nonce=self._config.fixes.pending_nonce
        )
        self._handlers = HandlerTable(
            self._fix_handlers(),
            self._account_handlers(),
            self._config.handlers,
        )

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------
    async def request(self, method: str, params: Sequence[Any] | None = None) -> Any:
        handler = self._handlers.resolve(method)
        if handler is None:
            logger.debug("Forwarding %s to transport", method)
            return await self._transport.request(method, params)
        logger.debug("Handling %s locally", method)
        return await handler(list(params or []))

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def registry(self) -> AccountRegistry:
        return self._registry

    @property
    def chain_clients(self) -> ChainClientCache:
        return self._chain_clients

    @property
    def handlers(self) -> HandlerTable:
        return self._handlers

    # ------------------------------------------------------------------
    # Handler tables
    # ------------------------------------------------------------------
    def _account_handlers(self) -> dict[str, Handler]:
        return {
            RPCMethod.ETH_SEND_TRANSACTION: self._send_transaction,
            RPCMethod.ETH_ACCOUNTS: self._accounts,
            RPCMethod.ETH_REQUEST_ACCOUNTS: self._accounts,
            RPCMethod.PERSONAL_SIGN: self._personal_sign,
            RPCMethod.ETH_SIGN: self._eth_sign,
            RPCMethod.ETH_SIGN_TRANSACTION: self._sign_transaction,
            RPCMethod.ETH_SIGN_TYPED_DATA: partial(
                self._sign_typed_data, RPCMethod.ETH_SIGN_TYPED_DATA
            ),
            RPCMethod.ETH_SIGN_TYPED_DATA_V4: partial(
                self._sign_typed_data, RPCMethod.ETH_SIGN_TYPED_DATA_V4
            ),
        }

    def _fix_handlers(self) -> dict[str, Handler]:
        handlers: dict[str, Handler] = {}
        if self._config.fixes.pending_nonce:
            handlers[RPCMethod.ETH_GET_TRANSACTION_COUNT] = self._pending_transaction_count
        return handlers

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------
    async def _send_transaction(self, params: list[Any]) -> Any:
        tx = _transaction_param(params, RPCMethod.ETH_SEND_TRANSACTION)
        plan = self._resolver.resolve_send(tx.get("from"))

        if isinstance(plan, ImpersonatedSend):
            await plan.impersonator.impersonate_account(plan.address)
            return await self._transport.request(RPCMethod.ETH_SEND_TRANSACTION.value, [tx])

        normalized = normalize_transaction(tx, strict=self._config.strict_fields)

        if self._config.broadcast is BroadcastStrategy.CLIENT:
            client = await self._chain_clients.get_client()
            return await client.send_transaction(
                plan.account, normalized, fill=not self._config.strict_fields
            )

        _require_signable(tx)
        raw = plan.account.signer.sign_transaction(normalized.as_signable())
        return await self._transport.request(
            RPCMethod.ETH_SEND_RAW_TRANSACTION.value, [HexBytes(raw).to_0x_hex()]
        )

    async def _accounts(self, params: list[Any]) -> list[str]:
        return self._registry.addresses

    async def _personal_sign(self, params: list[Any]) -> str:
        message, address = _take(params, 2, RPCMethod.PERSONAL_SIGN)
        account = self._resolver.require_account(address, RPCMethod.PERSONAL_SIGN.value)
        return HexBytes(account.signer.sign_message(message)).to_0x_hex()

    async def _eth_sign(self, params: list[Any]) -> str:
        address, message = _take(params, 2, RPCMethod.ETH_SIGN)
        account = self._resolver.require_account(address, RPCMethod.ETH_SIGN.value)
        return HexBytes(account.signer.sign_message(message)).to_0x_hex()

    async def _sign_transaction(self, params: list[Any]) -> str:
        if not self._config.sign_transaction_enabled:
            raise MethodNotImplementedError(RPCMethod.ETH_SIGN_TRANSACTION.value)
        tx = _transaction_param(params, RPCMethod.ETH_SIGN_TRANSACTION)
        account = self._resolver.require_account(
            tx.get("from"), RPCMethod.ETH_SIGN_TRANSACTION.value
        )
        normalized = normalize_transaction(tx)
        _require_signable(tx)
        raw = account.signer.sign_transaction(normalized.as_signable())
        return HexBytes(raw).to_0x_hex()

    async def _sign_typed_data(self, method: RPCMethod, params: list[Any]) -> str:
        address, typed_data = _take(params, 2, method)
        account = self._resolver.require_account(address, method.value)
        return HexBytes(account.signer.sign_typed_data(typed_data)).to_0x_hex()

    async def _pending_transaction_count(self, params: list[Any]) -> Any:
        # Some providers do not track the pending pool nonce correctly
        forwarded = list(params)
        if len(forwarded) > 1 and forwarded[1] == "pending":
            forwarded[1] = "latest"
        return await self._transport.request(
            RPCMethod.ETH_GET_TRANSACTION_COUNT.value, forwarded
        )


def extend_provider_with_accounts(
    transport: Transport, config: ProviderConfig | None = None
) -> AccountsProvider:
    """Wrap ``transport`` with local accounts, impersonation and fixes from ``config``."""

    provider = AccountsProvider(transport, config)
    logger.info(
        "Extended provider with %s account(s), impersonation=%s",
        len(provider.registry),
        config.impersonation.mode.value if config and config.impersonation else "off",
    )
    return provider


def _take(params: list[Any], count: int, method: RPCMethod) -> list[Any]:
    if len(params) < count:
        raise ValidationError(
            f"{method.value} expects {count} parameter(s), got {len(params)}",
            field="params",
            value=params,
        )
    return params[:count]


def _transaction_param(params: list[Any], method: RPCMethod) -> dict[str, Any]:
    (tx,) = _take(params, 1, method)
    if not isinstance(tx, dict):
        raise ValidationError(
            f"{method.value} expects a transaction object", field="params", value=tx
        )
    return tx


def _require_signable(tx: dict[str, Any]) -> None:
    # "from" is already resolved to a local account at this point
    missing = [name for name in missing_mandatory_fields(tx) if name != "from"]
    if missing:
        raise MissingMandatoryFieldsError(missing, details={"from": tx.get("from")})
